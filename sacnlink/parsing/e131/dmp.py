"""
E1.31 DMP layer, the innermost PDU carrying the start code and DMX slots.

Layout, offsets relative to the start of the layer::

    0   flags / length           2
    2   vector                   1   0x02 (set property)
    3   address / data type      1   0xA1
    4   first property address   2   0x0000
    6   address increment        2   0x0001
    8   property value count     2   slots + 1
    10  property values        N+1   start code followed by the slots
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence, Union

from sacnlink.core.binary import (
    Buffer,
    read_bytes,
    read_u16_be,
    read_u8,
    write_bytes,
    write_u16_be,
    write_u8,
)
from sacnlink.parsing.e131.root import PDU_FLAGS, PDU_LENGTH_MASK

SlotValues = Union[bytes, bytearray, memoryview, Sequence[int]]

VECTOR_DMP_SET_PROPERTY = 0x02
ADDRESS_TYPE_DATA_TYPE = 0xA1
FIRST_PROPERTY_ADDRESS = 0x0000
ADDRESS_INCREMENT = 0x0001
START_CODE = 0x00
MAX_SLOTS = 512

FLAGS_LENGTH_OFFSET = 0
VECTOR_OFFSET = 2
ADDRESS_TYPE_DATA_TYPE_OFFSET = 3
FIRST_PROPERTY_ADDRESS_OFFSET = 4
ADDRESS_INCREMENT_OFFSET = 6
PROPERTY_VALUE_COUNT_OFFSET = 8
PROPERTY_VALUES_OFFSET = 10

DMP_LAYER_BASE_SIZE = 10


def slot_bytes(values: SlotValues, offset: int, slots: int) -> bytes:
    """Return ``slots`` bytes of ``values`` starting at ``offset``."""
    chunk = bytes(values[offset:offset + slots])
    if offset < 0 or len(chunk) != slots:
        raise IndexError(
            f"values hold {len(values)} bytes, cannot take {slots} slots from offset {offset}"
        )
    return chunk


@dataclass
class DataLayer:
    flags_length: int = PDU_FLAGS
    vector: int = VECTOR_DMP_SET_PROPERTY
    address_type_data_type: int = ADDRESS_TYPE_DATA_TYPE
    first_property_address: int = FIRST_PROPERTY_ADDRESS
    address_increment: int = ADDRESS_INCREMENT
    property_value_count: int = 1
    property_values: bytes = bytes([START_CODE])
    malformed: bool = False

    @classmethod
    def build(cls, values: SlotValues, offset: int = 0, slots: int | None = None) -> "DataLayer":
        """
        Build a DMP layer carrying ``slots`` values taken from ``values[offset:]``.

        The start code is prepended, so ``property_value_count`` is
        ``slots + 1``. More than ``MAX_SLOTS`` slots raise ``ValueError``.
        """
        if slots is None:
            slots = len(values) - offset
        if not 0 <= slots <= MAX_SLOTS:
            raise ValueError(f"slot count must be between 0 and {MAX_SLOTS}, got {slots}")
        layer = cls(
            property_value_count=slots + 1,
            property_values=bytes([START_CODE]) + slot_bytes(values, offset, slots),
        )
        layer.length = DMP_LAYER_BASE_SIZE + 1 + slots
        return layer

    @classmethod
    def from_buffer(cls, buffer: bytes, offset: int = 0) -> "DataLayer":
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
    def phy_length(self) -> int:
        return DMP_LAYER_BASE_SIZE + self.property_value_count

    @property
    def start_code(self) -> int:
        return self.property_values[0]

    @property
    def slots(self) -> bytes:
        return self.property_values[1:]

    def encode(self, buffer: Buffer, offset: int = 0) -> None:
        write_u16_be(self.flags_length, buffer, offset + FLAGS_LENGTH_OFFSET)
        write_u8(self.vector, buffer, offset + VECTOR_OFFSET)
        write_u8(self.address_type_data_type, buffer, offset + ADDRESS_TYPE_DATA_TYPE_OFFSET)
        write_u16_be(self.first_property_address, buffer, offset + FIRST_PROPERTY_ADDRESS_OFFSET)
        write_u16_be(self.address_increment, buffer, offset + ADDRESS_INCREMENT_OFFSET)
        write_u16_be(self.property_value_count, buffer, offset + PROPERTY_VALUE_COUNT_OFFSET)
        write_bytes(self.property_values[:self.property_value_count], buffer, offset + PROPERTY_VALUES_OFFSET)

    def decode(self, buffer: bytes, offset: int = 0) -> None:
        """
        Read the DMP layer at ``offset``.

        Unlike the root and framing layers the PDU length is not checked
        against the buffer. A buffer too short for the declared property
        value count raises ``struct.error``.
        """
        self.malformed = True
        self.flags_length = read_u16_be(buffer, offset + FLAGS_LENGTH_OFFSET)
        self.vector = read_u8(buffer, offset + VECTOR_OFFSET)
        self.address_type_data_type = read_u8(buffer, offset + ADDRESS_TYPE_DATA_TYPE_OFFSET)
        self.first_property_address = read_u16_be(buffer, offset + FIRST_PROPERTY_ADDRESS_OFFSET)
        self.address_increment = read_u16_be(buffer, offset + ADDRESS_INCREMENT_OFFSET)
        self.property_value_count = read_u16_be(buffer, offset + PROPERTY_VALUE_COUNT_OFFSET)
        self.property_values = read_bytes(buffer, offset + PROPERTY_VALUES_OFFSET, self.property_value_count)
        self.malformed = False

    def to_bytes(self) -> bytes:
        buffer = bytearray(self.phy_length)
        self.encode(buffer, 0)
        return bytes(buffer)

    def as_dict(self) -> dict[str, Any]:
        return {
            "length": self.length,
            "vector": self.vector,
            "address_type_data_type": self.address_type_data_type,
            "first_property_address": self.first_property_address,
            "address_increment": self.address_increment,
            "property_value_count": self.property_value_count,
            "start_code": self.start_code if self.property_values else None,
            "slots": list(self.slots),
        }
