"""Tests for full E1.31 packets and the in-place resend fast path."""
import struct
import uuid

import pytest

from sacnlink.parsing.e131 import (
    MIN_PACKET_SIZE,
    SEQUENCE_OFFSET,
    SLOTS_OFFSET,
    OptionFlags,
    Packet,
    compare_slots,
    patch_sequence_and_slots,
)

ZERO_CID = uuid.UUID(int=0)
CID = uuid.UUID("8a4d1c1e-3f7b-4a55-b1c2-6e0f9d3a2b10")


def _packet(values, sequence=0, universe=1, name="Test Source") -> Packet:
    """Helper: build a packet with the fixed test sender."""
    return Packet.build(CID, name, sequence, universe, values)


def test_concrete_scenario():
    packet = Packet.build(ZERO_CID, "Test Source", 0, 1, bytes([255, 0, 0]), 0, 3)
    buf = packet.to_buffer()
    assert len(buf) == 129
    assert packet.phy_length == 129
    assert buf[123:125] == b"\x00\x04"
    assert buf[125] == 0x00
    assert buf[126:129] == bytes([0xFF, 0x00, 0x00])
    assert buf[111] == 0x00
    assert buf[22:38] == bytes(16)


def test_layer_lengths_nest():
    packet = _packet(bytes(3))
    assert packet.dmp.length == 14
    assert packet.framing.length == 77 + 14
    assert packet.root.length == 22 + packet.framing.length
    assert packet.malformed is False


def test_wire_offsets():
    buf = _packet(bytes([1, 2]), sequence=9, universe=0x0203).to_buffer()
    assert buf[0:2] == b"\x00\x10"
    assert buf[4:13] == b"ASC-E1.17"
    assert buf[16] >> 4 == 0x7
    assert buf[18:22] == b"\x00\x00\x00\x04"
    assert buf[22:38] == CID.bytes
    assert buf[38] >> 4 == 0x7
    assert buf[40:44] == b"\x00\x00\x00\x02"
    assert buf[44:55] == b"Test Source"
    assert buf[108] == 100
    assert buf[111] == 9
    assert buf[113:115] == b"\x02\x03"
    assert buf[115] >> 4 == 0x7
    assert buf[117] == 0x02
    assert buf[118] == 0xA1
    assert buf[119:121] == b"\x00\x00"
    assert buf[121:123] == b"\x00\x01"
    assert buf[126:128] == bytes([1, 2])


@pytest.mark.parametrize("slots", [0, 1, 3, 170, 511, 512])
def test_buffer_length_for_slot_count(slots):
    packet = _packet(bytes(slots))
    buf = packet.to_buffer()
    assert len(buf) == MIN_PACKET_SIZE + slots + 1
    assert packet.dmp.property_value_count == slots + 1


def test_round_trip():
    values = bytes((i * 7) & 0xFF for i in range(512))
    original = Packet.build(CID, "Front of house", 200, 63999, values, priority=150, options=OptionFlags.PREVIEW_DATA)
    decoded = Packet.from_buffer(original.to_buffer())

    assert decoded.malformed is False
    assert decoded.root.sender_id == CID
    assert decoded.root.length == original.root.length
    assert decoded.framing.source_name.rstrip("\x00") == "Front of house"
    assert decoded.framing.sequence_number == 200
    assert decoded.framing.universe == 63999
    assert decoded.framing.priority == 150
    assert decoded.framing.options == OptionFlags.PREVIEW_DATA
    assert decoded.dmp.property_values == original.dmp.property_values
    assert decoded.to_buffer() == original.to_buffer()


def test_source_name_longer_than_field_is_cut():
    name = "é" * 40  # 80 UTF-8 bytes
    buf = _packet(bytes(1), name=name).to_buffer()
    assert buf[44:108] == name.encode("utf-8")[:64]


def test_source_name_shorter_is_zero_padded():
    buf = _packet(bytes(1), name="ab").to_buffer()
    assert buf[44:108] == b"ab" + bytes(62)


def test_too_short_buffer_is_malformed_without_parsing():
    packet = Packet.from_buffer(bytes(MIN_PACKET_SIZE - 1))
    assert packet.malformed is True
    assert packet.root is None


@pytest.mark.parametrize("cut", [1, 2, 3, 4, 50])
def test_truncated_buffer_is_malformed_at_root(cut):
    buf = bytes(_packet(bytes(range(100))).to_buffer())
    packet = Packet.from_buffer(buf[:-cut])
    assert packet.malformed is True
    assert packet.root is not None
    assert packet.root.malformed is True
    assert packet.framing is None


def test_framing_length_mismatch_stops_decode():
    buf = _packet(bytes(8)).to_buffer()
    struct.pack_into(">H", buf, 38, 0x7000 | 10)
    packet = Packet.from_buffer(bytes(buf))
    assert packet.malformed is True
    assert packet.root.malformed is False
    assert packet.framing.malformed is True
    assert packet.dmp is None


def test_value_count_past_end_of_buffer_faults():
    buf = _packet(bytes(8)).to_buffer()
    struct.pack_into(">H", buf, 123, 100)
    with pytest.raises(struct.error):
        Packet.from_buffer(bytes(buf))


def test_as_dict():
    info = Packet.from_buffer(_packet(bytes([5])).to_buffer()).as_dict()
    assert info["malformed"] is False
    assert info["framing"]["source_name"] == "Test Source"
    assert info["dmp"]["slots"] == [5]


def test_hex_dump():
    dump = _packet(bytes([0xAB])).hex_dump()
    assert dump.startswith("00 10 00 00 41 53 43")
    assert dump.endswith("00 AB")


def test_patch_matches_fresh_encode():
    s1 = bytes([10, 20, 30, 40])
    s2 = bytes([11, 0, 255, 40])
    buf = _packet(s1, sequence=1).to_buffer()
    Packet.patch_sequence_and_slots(buf, s2, 0, len(s2), 2)
    assert buf == _packet(s2, sequence=2).to_buffer()


def test_patch_from_offset():
    source = bytes([9, 9, 1, 2, 3])
    buf = _packet(bytes(3)).to_buffer()
    patch_sequence_and_slots(buf, source, 2, 3, 77)
    assert buf[SLOTS_OFFSET:SLOTS_OFFSET + 3] == bytes([1, 2, 3])
    assert buf[SEQUENCE_OFFSET] == 77
    assert len(buf) == MIN_PACKET_SIZE + 4


def test_patch_touches_only_sequence_and_slots():
    buf = _packet(bytes(16)).to_buffer()
    before = bytes(buf)
    patch_sequence_and_slots(buf, bytes([1] * 16), 0, 16, 5)
    changed = [i for i in range(len(buf)) if buf[i] != before[i]]
    assert changed == [SEQUENCE_OFFSET] + list(range(SLOTS_OFFSET, SLOTS_OFFSET + 16))


def test_patch_requires_enough_values():
    buf = _packet(bytes(4)).to_buffer()
    with pytest.raises(IndexError):
        patch_sequence_and_slots(buf, bytes(2), 0, 4, 1)


def test_compare_slots_equal():
    values = bytes([1, 2, 3, 4])
    buf = _packet(values).to_buffer()
    assert Packet.compare_slots(buf, values, 0, 4) is True
    assert compare_slots(buf, [0, 1, 2, 3, 4], 1, 4) is True


@pytest.mark.parametrize("position", [0, 1, 2, 3])
def test_compare_slots_single_difference(position):
    values = bytearray([1, 2, 3, 4])
    buf = _packet(bytes(values)).to_buffer()
    values[position] ^= 0x01
    assert compare_slots(buf, values, 0, 4) is False


def test_compare_slots_ignores_start_code_and_header():
    buf = _packet(bytes([7, 7])).to_buffer()
    buf[SEQUENCE_OFFSET] = 99
    assert compare_slots(buf, bytes([7, 7]), 0, 2) is True


def test_build_rejects_too_many_slots():
    with pytest.raises(ValueError):
        _packet(bytes(4000))


def test_build_rejects_universe_wider_than_field():
    with pytest.raises(struct.error):
        _packet(bytes(3), universe=70000).to_buffer()


def test_build_rejects_sequence_wider_than_field():
    with pytest.raises(struct.error):
        _packet(bytes(3), sequence=256).to_buffer()


def test_malformed_packet_cannot_be_encoded():
    packet = Packet.from_buffer(bytes(MIN_PACKET_SIZE - 1))
    with pytest.raises(ValueError):
        packet.phy_length
    with pytest.raises(ValueError):
        packet.to_buffer()
    with pytest.raises(ValueError):
        packet.hex_dump()
