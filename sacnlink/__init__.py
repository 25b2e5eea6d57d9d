from sacnlink.parsing.e131 import DataLayer, FramingLayer, OptionFlags, Packet, RootLayer
from sacnlink.sender_app import SenderSettings, UniverseSender
from sacnlink.transports import PacketTransport, UdpTransport
from importlib.metadata import PackageNotFoundError, version

__all__ = [
    "DataLayer",
    "FramingLayer",
    "OptionFlags",
    "Packet",
    "RootLayer",
    "SenderSettings",
    "UniverseSender",
    "PacketTransport",
    "UdpTransport",
]

try:
    __version__ = version("sacnlink")
except PackageNotFoundError:
    __version__ = "0.0.0"
