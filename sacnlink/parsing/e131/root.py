"""
E1.31 root layer (ACN root layer protocol).

Layout, offsets relative to the start of the layer::

    0   preamble size      2   0x0010
    2   postamble size     2   0x0000
    4   ACN packet id     12   "ASC-E1.17", NUL padded
    16  flags / length     2   0x7 flags, 12-bit length
    18  vector             4   0x00000004
    22  sender CID        16   opaque 128-bit id
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any

from sacnlink.core.binary import (
    Buffer,
    Id128,
    read_fixed_string,
    read_id128,
    read_u16_be,
    read_u32_be,
    trim_fixed_string,
    write_fixed_string,
    write_id128,
    write_u16_be,
    write_u32_be,
)

PREAMBLE_SIZE = 0x0010
POSTAMBLE_SIZE = 0x0000
ACN_PACKET_ID = "ASC-E1.17"
VECTOR_ROOT_E131_DATA = 0x00000004

PDU_FLAGS = 0x7000
PDU_LENGTH_MASK = 0x0FFF

PREAMBLE_SIZE_OFFSET = 0
POSTAMBLE_SIZE_OFFSET = 2
ACN_PACKET_ID_OFFSET = 4
ACN_PACKET_ID_SIZE = 12
FLAGS_LENGTH_OFFSET = 16
VECTOR_OFFSET = 18
SENDER_CID_OFFSET = 22

ROOT_LAYER_SIZE = 38
# Bytes of the root PDU itself, counted from the flags/length field.
ROOT_PDU_SIZE = ROOT_LAYER_SIZE - FLAGS_LENGTH_OFFSET


@dataclass
class RootLayer:
    preamble_size: int = PREAMBLE_SIZE
    postamble_size: int = POSTAMBLE_SIZE
    protocol_id: str = ACN_PACKET_ID
    flags_length: int = PDU_FLAGS
    vector: int = VECTOR_ROOT_E131_DATA
    sender_id: uuid.UUID = field(default_factory=lambda: uuid.UUID(int=0))
    malformed: bool = False

    @classmethod
    def build(cls, payload_length: int, sender_id: Id128) -> "RootLayer":
        """
        Build a root layer for a payload of ``payload_length`` bytes.

        ``payload_length`` counts everything from the flags/length field to
        the end of the packet.
        """
        if not isinstance(sender_id, uuid.UUID):
            sender_id = uuid.UUID(bytes=bytes(sender_id))
        layer = cls(sender_id=sender_id)
        layer.length = payload_length
        return layer

    @classmethod
    def from_buffer(cls, buffer: bytes, offset: int = 0) -> "RootLayer":
        layer = cls()
        layer.decode(buffer, offset)
        return layer

    @property
    def length(self) -> int:
        return self.flags_length & PDU_LENGTH_MASK

    @length.setter
    def length(self, value: int) -> None:
        self.flags_length = PDU_FLAGS | (value & PDU_LENGTH_MASK)

    def encode(self, buffer: Buffer, offset: int = 0) -> None:
        write_u16_be(self.preamble_size, buffer, offset + PREAMBLE_SIZE_OFFSET)
        write_u16_be(self.postamble_size, buffer, offset + POSTAMBLE_SIZE_OFFSET)
        write_fixed_string(self.protocol_id, buffer, offset + ACN_PACKET_ID_OFFSET, ACN_PACKET_ID_SIZE)
        write_u16_be(self.flags_length, buffer, offset + FLAGS_LENGTH_OFFSET)
        write_u32_be(self.vector, buffer, offset + VECTOR_OFFSET)
        write_id128(self.sender_id, buffer, offset + SENDER_CID_OFFSET)

    def decode(self, buffer: bytes, offset: int = 0) -> None:
        """
        Read the root layer at ``offset``.

        The layer is marked malformed unless its length equals the number of
        buffer bytes following the preamble and ACN packet id. The packet id
        and vector are not checked here.
        """
        self.preamble_size = read_u16_be(buffer, offset + PREAMBLE_SIZE_OFFSET)
        self.postamble_size = read_u16_be(buffer, offset + POSTAMBLE_SIZE_OFFSET)
        self.protocol_id = read_fixed_string(buffer, offset + ACN_PACKET_ID_OFFSET, ACN_PACKET_ID_SIZE)
        self.flags_length = read_u16_be(buffer, offset + FLAGS_LENGTH_OFFSET)
        self.vector = read_u32_be(buffer, offset + VECTOR_OFFSET)
        self.sender_id = read_id128(buffer, offset + SENDER_CID_OFFSET)
        self.malformed = self.length != len(buffer) - FLAGS_LENGTH_OFFSET

    def to_bytes(self) -> bytes:
        buffer = bytearray(ROOT_LAYER_SIZE)
        self.encode(buffer, 0)
        return bytes(buffer)

    def as_dict(self) -> dict[str, Any]:
        return {
            "preamble_size": self.preamble_size,
            "postamble_size": self.postamble_size,
            "protocol_id": trim_fixed_string(self.protocol_id),
            "length": self.length,
            "vector": self.vector,
            "sender_id": str(self.sender_id),
        }
