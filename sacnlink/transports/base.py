from __future__ import annotations

from abc import ABC, abstractmethod


class PacketTransport(ABC):
    """Sends encoded packets for a universe to wherever the transport points."""

    @abstractmethod
    def open(self) -> None:
        ...

    @abstractmethod
    def send(self, buffer: bytes, universe: int) -> None:
        ...

    @abstractmethod
    def close(self) -> None:
        ...

    def __enter__(self) -> "PacketTransport":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
