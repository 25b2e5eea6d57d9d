from sacnlink.transports.base import PacketTransport
from sacnlink.transports.udp.transport import UdpTransport, multicast_group

__all__ = ["PacketTransport", "UdpTransport", "multicast_group"]
