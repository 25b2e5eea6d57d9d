"""
E1.31 framing layer.

Layout, offsets relative to the start of the layer::

    0   flags / length     2
    2   vector             4   0x00000002
    6   source name       64   UTF-8, NUL padded
    70  priority           1
    71  reserved           2
    73  sequence number    1
    74  options            1
    75  universe           2
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any

from sacnlink.core.binary import (
    Buffer,
    read_fixed_string,
    read_u16_be,
    read_u32_be,
    read_u8,
    trim_fixed_string,
    write_fixed_string,
    write_u16_be,
    write_u32_be,
    write_u8,
)
from sacnlink.parsing.e131.root import PDU_FLAGS, PDU_LENGTH_MASK, ROOT_LAYER_SIZE

VECTOR_E131_DATA_PACKET = 0x00000002
DEFAULT_PRIORITY = 100

FLAGS_LENGTH_OFFSET = 0
VECTOR_OFFSET = 2
SOURCE_NAME_OFFSET = 6
SOURCE_NAME_SIZE = 64
PRIORITY_OFFSET = 70
RESERVED_OFFSET = 71
SEQUENCE_NUMBER_OFFSET = 73
OPTIONS_OFFSET = 74
UNIVERSE_OFFSET = 75

FRAMING_LAYER_SIZE = 77


class OptionFlags(enum.IntFlag):
    NONE = 0x00
    FORCE_SYNCHRONIZATION = 0x20
    STREAM_TERMINATED = 0x40
    PREVIEW_DATA = 0x80


@dataclass
class FramingLayer:
    flags_length: int = PDU_FLAGS
    vector: int = VECTOR_E131_DATA_PACKET
    source_name: str = ""
    priority: int = DEFAULT_PRIORITY
    reserved: int = 0
    sequence_number: int = 0
    options: int = 0
    universe: int = 0
    malformed: bool = False

    @classmethod
    def build(
        cls,
        payload_length: int,
        source_name: str,
        sequence_number: int,
        universe: int,
        priority: int = DEFAULT_PRIORITY,
        options: int = 0,
    ) -> "FramingLayer":
        layer = cls(
            source_name=source_name,
            priority=priority,
            sequence_number=sequence_number,
            options=int(options),
            universe=universe,
        )
        layer.length = payload_length
        return layer

    @classmethod
    def from_buffer(cls, buffer: bytes, offset: int = 0) -> "FramingLayer":
        layer = cls()
        layer.decode(buffer, offset)
        return layer

    @property
    def length(self) -> int:
        return self.flags_length & PDU_LENGTH_MASK

    @length.setter
    def length(self, value: int) -> None:
        self.flags_length = PDU_FLAGS | (value & PDU_LENGTH_MASK)

    @property
    def stream_terminated(self) -> bool:
        return bool(self.options & OptionFlags.STREAM_TERMINATED)

    @property
    def preview_data(self) -> bool:
        return bool(self.options & OptionFlags.PREVIEW_DATA)

    def encode(self, buffer: Buffer, offset: int = 0) -> None:
        write_u16_be(self.flags_length, buffer, offset + FLAGS_LENGTH_OFFSET)
        write_u32_be(self.vector, buffer, offset + VECTOR_OFFSET)
        write_fixed_string(self.source_name, buffer, offset + SOURCE_NAME_OFFSET, SOURCE_NAME_SIZE)
        write_u8(self.priority, buffer, offset + PRIORITY_OFFSET)
        write_u16_be(self.reserved, buffer, offset + RESERVED_OFFSET)
        write_u8(self.sequence_number, buffer, offset + SEQUENCE_NUMBER_OFFSET)
        write_u8(self.options, buffer, offset + OPTIONS_OFFSET)
        write_u16_be(self.universe, buffer, offset + UNIVERSE_OFFSET)

    def decode(self, buffer: bytes, offset: int = 0) -> None:
        self.flags_length = read_u16_be(buffer, offset + FLAGS_LENGTH_OFFSET)
        self.vector = read_u32_be(buffer, offset + VECTOR_OFFSET)
        self.source_name = read_fixed_string(buffer, offset + SOURCE_NAME_OFFSET, SOURCE_NAME_SIZE)
        self.priority = read_u8(buffer, offset + PRIORITY_OFFSET)
        self.reserved = read_u16_be(buffer, offset + RESERVED_OFFSET)
        self.sequence_number = read_u8(buffer, offset + SEQUENCE_NUMBER_OFFSET)
        self.options = read_u8(buffer, offset + OPTIONS_OFFSET)
        self.universe = read_u16_be(buffer, offset + UNIVERSE_OFFSET)
        # the framing PDU runs from its own start to the end of the packet
        self.malformed = self.length != len(buffer) - ROOT_LAYER_SIZE

    def to_bytes(self) -> bytes:
        buffer = bytearray(FRAMING_LAYER_SIZE)
        self.encode(buffer, 0)
        return bytes(buffer)

    def as_dict(self) -> dict[str, Any]:
        return {
            "length": self.length,
            "vector": self.vector,
            "source_name": trim_fixed_string(self.source_name),
            "priority": self.priority,
            "reserved": self.reserved,
            "sequence_number": self.sequence_number,
            "options": self.options,
            "universe": self.universe,
        }
