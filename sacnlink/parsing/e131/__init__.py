"""
E1.31 (streaming ACN) packet codec.

A data packet nests three PDUs: the ACN root layer, the E1.31 framing layer and
the DMP layer that carries a start code and up to 512 DMX slots. All multi-byte
fields are big-endian. Decoding never raises for a length mismatch; it sets
``malformed`` on the affected layer and on the packet instead.
"""
from sacnlink.parsing.e131.dmp import DMP_LAYER_BASE_SIZE, MAX_SLOTS, START_CODE, DataLayer
from sacnlink.parsing.e131.framing import FRAMING_LAYER_SIZE, FramingLayer, OptionFlags
from sacnlink.parsing.e131.packet import (
    DMP_OFFSET,
    E131_PORT,
    FRAMING_OFFSET,
    MIN_PACKET_SIZE,
    SEQUENCE_OFFSET,
    SLOTS_OFFSET,
    Packet,
    compare_slots,
    patch_sequence_and_slots,
)
from sacnlink.parsing.e131.root import ACN_PACKET_ID, ROOT_LAYER_SIZE, RootLayer

__all__ = [
    "ACN_PACKET_ID",
    "DataLayer",
    "DMP_LAYER_BASE_SIZE",
    "DMP_OFFSET",
    "E131_PORT",
    "FRAMING_LAYER_SIZE",
    "FRAMING_OFFSET",
    "FramingLayer",
    "MAX_SLOTS",
    "MIN_PACKET_SIZE",
    "OptionFlags",
    "Packet",
    "ROOT_LAYER_SIZE",
    "RootLayer",
    "SEQUENCE_OFFSET",
    "SLOTS_OFFSET",
    "START_CODE",
    "compare_slots",
    "patch_sequence_and_slots",
]
