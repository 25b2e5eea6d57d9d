"""Tests for the E1.31 root layer."""
import uuid

from sacnlink.parsing.e131.root import (
    ACN_PACKET_ID,
    ROOT_LAYER_SIZE,
    ROOT_PDU_SIZE,
    VECTOR_ROOT_E131_DATA,
    RootLayer,
)

CID = uuid.UUID("5103d5e4-5a1c-4c2f-9a53-3b6dd1a0b7e4")


def test_build_defaults():
    layer = RootLayer.build(113, CID)
    assert layer.preamble_size == 0x0010
    assert layer.postamble_size == 0x0000
    assert layer.protocol_id == ACN_PACKET_ID
    assert layer.vector == VECTOR_ROOT_E131_DATA
    assert layer.sender_id == CID
    assert layer.length == 113
    assert layer.flags_length == 0x7000 | 113
    assert layer.malformed is False


def test_length_setter_keeps_flags_and_masks():
    layer = RootLayer()
    layer.length = 0x1FFF
    assert layer.flags_length == 0x7FFF
    assert layer.length == 0x0FFF
    layer.flags_length = 0x0022
    layer.length = 22
    assert layer.flags_length == 0x7016


def test_to_bytes_layout():
    raw = RootLayer.build(ROOT_PDU_SIZE, CID).to_bytes()
    assert len(raw) == ROOT_LAYER_SIZE
    assert raw[0:2] == b"\x00\x10"
    assert raw[2:4] == b"\x00\x00"
    assert raw[4:16] == b"ASC-E1.17\x00\x00\x00"
    assert raw[16:18] == bytes([0x70, ROOT_PDU_SIZE])
    assert raw[18:22] == b"\x00\x00\x00\x04"
    assert raw[22:38] == CID.bytes


def test_decode_standalone_layer():
    raw = RootLayer.build(ROOT_PDU_SIZE, CID).to_bytes()
    layer = RootLayer.from_buffer(raw)
    assert layer.malformed is False
    assert layer.sender_id == CID
    assert layer.protocol_id == "ASC-E1.17\x00\x00\x00"
    assert layer.as_dict()["protocol_id"] == "ASC-E1.17"


def test_decode_length_mismatch_is_malformed():
    raw = RootLayer.build(ROOT_PDU_SIZE + 1, CID).to_bytes()
    layer = RootLayer.from_buffer(raw)
    assert layer.malformed is True
    # fields are still read
    assert layer.length == ROOT_PDU_SIZE + 1


def test_decode_does_not_check_identifier_or_vector():
    layer = RootLayer.build(ROOT_PDU_SIZE, CID)
    layer.protocol_id = "NOT-ACN"
    layer.vector = 0x99
    decoded = RootLayer.from_buffer(layer.to_bytes())
    assert decoded.malformed is False
    assert decoded.vector == 0x99


def test_encode_at_offset():
    buf = bytearray(ROOT_LAYER_SIZE + 5)
    RootLayer.build(ROOT_PDU_SIZE, CID).encode(buf, 5)
    assert buf[:5] == bytearray(5)
    assert buf[5:7] == b"\x00\x10"
    assert buf[27:43] == CID.bytes
