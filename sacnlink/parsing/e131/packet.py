"""
Complete E1.31 data packet: root, framing and DMP layers laid out back to back.

Besides the structured encode/decode path this module keeps a low-level fast
path for a repeated-send loop. Once a packet has been encoded, transmitting the
same universe again only needs the sequence number and the slot values
rewritten, which ``patch_sequence_and_slots`` does in place without rebuilding
any layer. The caller must hold exclusive access to the buffer while it is
being patched.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from sacnlink.core.binary import Buffer, Id128, hex_dump, write_bytes, write_u8
from sacnlink.parsing.e131.dmp import (
    DMP_LAYER_BASE_SIZE,
    PROPERTY_VALUES_OFFSET,
    DataLayer,
    SlotValues,
    slot_bytes,
)
from sacnlink.parsing.e131.framing import (
    DEFAULT_PRIORITY,
    FRAMING_LAYER_SIZE,
    SEQUENCE_NUMBER_OFFSET,
    FramingLayer,
)
from sacnlink.parsing.e131.root import ROOT_LAYER_SIZE, ROOT_PDU_SIZE, RootLayer

E131_PORT = 5568

ROOT_OFFSET = 0
FRAMING_OFFSET = ROOT_LAYER_SIZE
DMP_OFFSET = ROOT_LAYER_SIZE + FRAMING_LAYER_SIZE
MIN_PACKET_SIZE = ROOT_LAYER_SIZE + FRAMING_LAYER_SIZE + DMP_LAYER_BASE_SIZE

# first data slot, right after the start code
SLOTS_OFFSET = DMP_OFFSET + PROPERTY_VALUES_OFFSET + 1
SEQUENCE_OFFSET = FRAMING_OFFSET + SEQUENCE_NUMBER_OFFSET


@dataclass
class Packet:
    root: Optional[RootLayer] = None
    framing: Optional[FramingLayer] = None
    dmp: Optional[DataLayer] = None
    malformed: bool = True

    @classmethod
    def build(
        cls,
        sender_id: Id128,
        source_name: str,
        sequence_number: int,
        universe: int,
        values: SlotValues,
        offset: int = 0,
        slots: int | None = None,
        priority: int = DEFAULT_PRIORITY,
        options: int = 0,
    ) -> "Packet":
        """
        Build a packet for one universe.

        Args:
            sender_id: 128-bit CID of the sender.
            source_name: Human-readable source name, cut at 64 UTF-8 bytes.
            sequence_number: 0-255 sequence number of this packet.
            universe: Universe number.
            values: Slot values to transmit.
            offset: Index of the first slot in ``values``.
            slots: Number of slots; defaults to the rest of ``values``.
            priority: Data priority.
            options: ``OptionFlags`` bitmask.

        Returns:
            A packet whose three length fields are consistent.
        """
        dmp = DataLayer.build(values, offset, slots)
        framing = FramingLayer.build(
            FRAMING_LAYER_SIZE + dmp.length,
            source_name,
            sequence_number,
            universe,
            priority=priority,
            options=options,
        )
        root = RootLayer.build(ROOT_PDU_SIZE + framing.length, sender_id)
        return cls(root=root, framing=framing, dmp=dmp, malformed=False)

    @classmethod
    def from_buffer(cls, buffer: bytes) -> "Packet":
        packet = cls()
        packet.decode(buffer)
        return packet

    @property
    def phy_length(self) -> int:
        self._require_layers()
        return ROOT_LAYER_SIZE + self.framing.length

    def _require_layers(self) -> None:
        if self.root is None or self.framing is None or self.dmp is None:
            raise ValueError("packet has no complete layers to encode; it was decoded as malformed")

    def decode(self, buffer: bytes) -> None:
        """
        Decode ``buffer`` layer by layer, stopping at the first malformed layer.

        Layers after the failing one are left as ``None``.
        """
        self.malformed = True
        self.root = self.framing = self.dmp = None

        if len(buffer) < MIN_PACKET_SIZE:
            return

        self.root = RootLayer.from_buffer(buffer, ROOT_OFFSET)
        if self.root.malformed:
            return

        self.framing = FramingLayer.from_buffer(buffer, FRAMING_OFFSET)
        if self.framing.malformed:
            return

        self.dmp = DataLayer.from_buffer(buffer, DMP_OFFSET)
        if self.dmp.malformed:
            return

        self.malformed = False

    def to_buffer(self) -> bytearray:
        buffer = bytearray(self.phy_length)
        self.root.encode(buffer, ROOT_OFFSET)
        self.framing.encode(buffer, FRAMING_OFFSET)
        self.dmp.encode(buffer, DMP_OFFSET)
        return buffer

    def hex_dump(self) -> str:
        return hex_dump(self.to_buffer())

    def as_dict(self) -> dict[str, Any]:
        return {
            "malformed": self.malformed,
            "root": self.root.as_dict() if self.root else None,
            "framing": self.framing.as_dict() if self.framing else None,
            "dmp": self.dmp.as_dict() if self.dmp else None,
        }

    @staticmethod
    def compare_slots(buffer: bytes, values: SlotValues, offset: int, slots: int) -> bool:
        """Return True if the slots encoded in ``buffer`` equal ``values[offset:offset + slots]``."""
        return compare_slots(buffer, values, offset, slots)

    @staticmethod
    def patch_sequence_and_slots(
        buffer: Buffer,
        values: SlotValues,
        offset: int,
        slots: int,
        sequence_number: int,
    ) -> None:
        """Rewrite the sequence number and slots of an encoded packet in place."""
        patch_sequence_and_slots(buffer, values, offset, slots, sequence_number)


def compare_slots(buffer: bytes, values: SlotValues, offset: int, slots: int) -> bool:
    for index in range(slots):
        if buffer[SLOTS_OFFSET + index] != values[offset + index]:
            return False
    return True


def patch_sequence_and_slots(
    buffer: Buffer,
    values: SlotValues,
    offset: int,
    slots: int,
    sequence_number: int,
) -> None:
    # slot count and buffer size must match the encode that produced buffer
    write_bytes(slot_bytes(values, offset, slots), buffer, SLOTS_OFFSET)
    write_u8(sequence_number, buffer, SEQUENCE_OFFSET)
