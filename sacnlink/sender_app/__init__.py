from sacnlink.sender_app.config import SenderSettings, get_settings
from sacnlink.sender_app.logging import RingBufferHandler, create_logger, ring_buffer_of
from sacnlink.sender_app.sender import UniverseSender

__all__ = [
    "SenderSettings",
    "get_settings",
    "RingBufferHandler",
    "create_logger",
    "ring_buffer_of",
    "UniverseSender",
]
