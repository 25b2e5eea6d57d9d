import argparse
import sys
import time
from typing import Optional

from pydantic import ValidationError

from sacnlink.sender_app import SenderSettings, UniverseSender, create_logger
from sacnlink.transports.udp.transport import UdpTransport


class Sender:
    def __init__(self, settings: SenderSettings, console: bool = False) -> None:
        self.settings = settings
        self.logger = create_logger("sacnlink.sender", settings.log_ring_size, console=console)
        self.transport = UdpTransport(
            host=settings.destination_host,
            port=settings.destination_port,
            multicast=settings.multicast,
            retries=settings.send_retries,
            logger=self.logger,
        )
        self.universe_sender = UniverseSender(settings, self.transport, logger=self.logger)

    def run(self, level: int, frames: int, keep_alive: bool = True) -> int:
        values = bytes([level]) * self.settings.slots
        sent = 0
        with self.transport:
            for frame in range(frames):
                sent += self.universe_sender.send_all(values, force=keep_alive)
                if frame < frames - 1:
                    time.sleep(self.settings.frame_interval)
        return sent


# CLI option -> SenderSettings field; unset options fall back to SACN_* env or .env
_SETTINGS_OPTIONS = {
    "host": "destination_host",
    "port": "destination_port",
    "multicast": "multicast",
    "universe": "first_universe",
    "universes": "universe_count",
    "slots": "slots",
    "source_name": "source_name",
    "interval": "frame_interval",
}


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Send E1.31 data packets holding a constant level.")
    parser.add_argument("--host", type=str, help="Destination IP address (unicast).")
    parser.add_argument("--port", type=int, help="Destination UDP port.")
    parser.add_argument("--multicast", action="store_true", default=None, help="Send to each universe's multicast group.")
    parser.add_argument("--universe", type=int, help="First universe to send.")
    parser.add_argument("--universes", type=int, help="Number of consecutive universes.")
    parser.add_argument("--slots", type=int, help="Slots per universe.")
    parser.add_argument("--level", type=int, default=0, choices=range(256), metavar="0-255", help="Level for every slot.")
    parser.add_argument("--source-name", type=str, help="Source name in the framing layer.")
    parser.add_argument("--interval", type=float, help="Seconds between frames.")
    parser.add_argument("--frames", type=int, default=1, help="Number of frames to send.")
    parser.add_argument("--verbose", action="store_true", help="Log every packet to stderr.")
    parser.add_argument("--only-changes", action="store_true", help="Skip universes whose slots did not change.")
    args = parser.parse_args(argv)

    overrides = {
        field: getattr(args, option)
        for option, field in _SETTINGS_OPTIONS.items()
        if getattr(args, option) is not None
    }
    try:
        settings = SenderSettings(**overrides)
    except ValidationError as exc:
        print(f"Invalid options: {exc}", file=sys.stderr)
        return 2
    sender = Sender(settings, console=args.verbose)
    try:
        sent = sender.run(args.level, args.frames, keep_alive=not args.only_changes)
    except ConnectionError as exc:
        print(f"Can't send: {exc}", file=sys.stderr)
        return 1
    print(f"Sent {sent} packets")
    return 0


if __name__ == "__main__":
    sys.exit(main())
