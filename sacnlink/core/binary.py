from __future__ import annotations

import struct
import uuid
from typing import Union

Buffer = Union[bytearray, memoryview]
Id128 = Union[uuid.UUID, bytes]

ID128_SIZE = 16


def write_u8(value: int, buffer: Buffer, offset: int) -> None:
    struct.pack_into("B", buffer, offset, value)


def read_u8(buffer: bytes, offset: int) -> int:
    return struct.unpack_from("B", buffer, offset)[0]


def write_u16_be(value: int, buffer: Buffer, offset: int) -> None:
    struct.pack_into(">H", buffer, offset, value)


def read_u16_be(buffer: bytes, offset: int) -> int:
    return struct.unpack_from(">H", buffer, offset)[0]


def write_u32_be(value: int, buffer: Buffer, offset: int) -> None:
    struct.pack_into(">I", buffer, offset, value)


def read_u32_be(buffer: bytes, offset: int) -> int:
    return struct.unpack_from(">I", buffer, offset)[0]


def write_fixed_string(value: str, buffer: Buffer, offset: int, length: int) -> None:
    """
    Write ``value`` as UTF-8 into exactly ``length`` bytes.

    Longer encodings are cut at ``length`` bytes with no terminator; shorter
    ones are zero-filled.
    """
    # "Ns" truncates or NUL-pads to N bytes
    struct.pack_into(f"{length}s", buffer, offset, value.encode("utf-8"))


def read_fixed_string(buffer: bytes, offset: int, length: int) -> str:
    """
    Decode exactly ``length`` bytes as UTF-8, trailing NULs included.

    A multi-byte sequence cut by truncation decodes to U+FFFD.
    """
    raw = struct.unpack_from(f"{length}s", buffer, offset)[0]
    return raw.decode("utf-8", errors="replace")


def trim_fixed_string(value: str) -> str:
    return value.rstrip("\x00")


def write_id128(value: Id128, buffer: Buffer, offset: int) -> None:
    raw = value.bytes if isinstance(value, uuid.UUID) else bytes(value)
    if len(raw) != ID128_SIZE:
        raise ValueError(f"128-bit identifier must be {ID128_SIZE} bytes, got {len(raw)}")
    struct.pack_into(f"{ID128_SIZE}s", buffer, offset, raw)


def read_id128(buffer: bytes, offset: int) -> uuid.UUID:
    return uuid.UUID(bytes=struct.unpack_from(f"{ID128_SIZE}s", buffer, offset)[0])


def write_bytes(value: bytes, buffer: Buffer, offset: int) -> None:
    struct.pack_into(f"{len(value)}s", buffer, offset, bytes(value))


def read_bytes(buffer: bytes, offset: int, length: int) -> bytes:
    return struct.unpack_from(f"{length}s", buffer, offset)[0]


def hex_dump(data: bytes) -> str:
    return " ".join(f"{b:02X}" for b in data)
