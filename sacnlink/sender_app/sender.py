import logging
import time
from dataclasses import dataclass
from typing import Dict, Optional

from sacnlink.parsing.e131 import Packet
from sacnlink.parsing.e131.dmp import SlotValues
from sacnlink.sender_app.config import SenderSettings
from sacnlink.transports.base import PacketTransport


@dataclass
class UniverseState:
    buffer: bytearray
    slots: int
    sequence_number: int


class UniverseSender:
    """
    Sends slot values to universes, reusing one encoded buffer per universe.

    The first send for a universe encodes a full packet. Later sends with the
    same slot count patch the sequence number and slots into a copy of that
    buffer, which replaces the cached one once the transport accepted it.
    Each universe owns its buffer, so patches for a universe happen one at a
    time on the calling thread.
    """

    def __init__(self, settings: SenderSettings, transport: PacketTransport, logger: Optional[logging.Logger] = None):
        self.settings = settings
        self.transport = transport
        self.logger = logger or logging.getLogger(__name__)
        self._universes: Dict[int, UniverseState] = {}

    def sequence_number(self, universe: int) -> int:
        state = self._universes.get(universe)
        return state.sequence_number if state else 0

    def buffer(self, universe: int) -> Optional[bytes]:
        state = self._universes.get(universe)
        return bytes(state.buffer) if state else None

    def send(self, universe: int, values: SlotValues, force: bool = False) -> bool:
        """
        Send ``values`` to ``universe``; return False when the send was skipped.

        The cached buffer is only replaced once the transport accepted the
        packet, so a failed send is retried on the next call.
        """
        slots = min(len(values), self.settings.slots)
        state = self._universes.get(universe)
        sequence_number = state.sequence_number if state else 0

        if state is None or state.slots != slots:
            packet = Packet.build(
                self.settings.sender_id,
                self.settings.source_name,
                sequence_number,
                universe,
                values,
                0,
                slots,
                priority=self.settings.priority,
            )
            buffer = packet.to_buffer()
        elif not force and Packet.compare_slots(state.buffer, values, 0, slots):
            self.logger.info("packet_skipped", extra={"details": {"universe": universe, "reason": "unchanged"}})
            return False
        else:
            buffer = bytearray(state.buffer)
            Packet.patch_sequence_and_slots(buffer, values, 0, slots, sequence_number)

        self.transport.send(bytes(buffer), universe)
        self.logger.info(
            "packet_sent",
            extra={"details": {"universe": universe, "length": len(buffer), "sequence": sequence_number}},
        )
        self._universes[universe] = UniverseState(
            buffer=buffer,
            slots=slots,
            sequence_number=(sequence_number + 1) & 0xFF,
        )
        return True

    def send_all(self, values: SlotValues, force: bool = False) -> int:
        sent = 0
        universes = self.settings.universes
        for index, universe in enumerate(universes):
            if self.send(universe, values, force=force):
                sent += 1
            if self.settings.universe_pause and index < len(universes) - 1:
                time.sleep(self.settings.universe_pause)
        return sent

    def forget(self, universe: int) -> None:
        self._universes.pop(universe, None)
