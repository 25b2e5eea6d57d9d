from __future__ import annotations

import logging
import socket
from typing import Optional

from sacnlink.parsing.e131 import E131_PORT
from sacnlink.transports.base import PacketTransport

_default_logger = logging.getLogger(__name__)

MULTICAST_TTL = 1


def multicast_group(universe: int) -> str:
    if not 1 <= universe <= 63999:
        raise ValueError(f"universe must be between 1 and 63999, got {universe}")
    return f"239.255.{(universe >> 8) & 0xFF}.{universe & 0xFF}"


class UdpTransport(PacketTransport):
    def __init__(
        self,
        host: str,
        port: int = E131_PORT,
        multicast: bool = False,
        retries: int = 0,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.host = host
        self.port = port
        self.multicast = multicast
        self.retries = retries
        self.logger = logger or _default_logger
        self._sock: Optional[socket.socket] = None

    @property
    def is_open(self) -> bool:
        return self._sock is not None

    def destination(self, universe: int) -> tuple[str, int]:
        if self.multicast:
            return multicast_group(universe), self.port
        return self.host, self.port

    def open(self) -> None:
        if self._sock is not None:
            return
        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
            if self.multicast:
                sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_TTL, MULTICAST_TTL)
        except OSError as exc:
            raise ConnectionError(f"Could not open UDP socket for {self.host}:{self.port}: {exc}") from exc
        self._sock = sock

    def send(self, buffer: bytes, universe: int) -> None:
        if self._sock is None:
            self.open()
        target = self.destination(universe)
        attempt = 0
        while True:
            try:
                self._sock.sendto(buffer, target)
                return
            except OSError as exc:
                self.logger.warning(
                    "send_failed",
                    extra={"details": {"universe": universe, "attempt": attempt, "error": str(exc)}},
                )
                if attempt >= self.retries:
                    raise ConnectionError(
                        f"Could not send universe {universe} to {target[0]}:{target[1]}: {exc}"
                    ) from exc
                attempt += 1

    def close(self) -> None:
        if self._sock is not None:
            self._sock.close()
            self._sock = None
