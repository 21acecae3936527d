"""Byte-level constants shared by the encoder and the decoder.

Every value in here is part of the wire format: changing any of them
changes which scripts mainchain validators accept.

"""
from bitcoin.core.script import OP_NOP5, OP_RETURN, OP_TRUE
from typing import Iterable, List, Tuple


# OP_NOP5 is reused as OP_DRIVECHAIN, the sidechain activation marker.
OP_DRIVECHAIN = OP_NOP5
OP_PUSHBYTES_1 = 0x01

OP_RETURN_BYTE = bytes([OP_RETURN])
OP_DRIVECHAIN_MARKER = bytes([OP_DRIVECHAIN, OP_PUSHBYTES_1])
OP_TRUE_BYTE = bytes([OP_TRUE])

# Coinbase message tags (the four bytes following OP_RETURN).
M1_PROPOSE_SIDECHAIN_TAG = bytes([0xD5, 0xE0, 0xC4, 0xAF])
M2_ACK_SIDECHAIN_TAG = bytes([0xD6, 0xE1, 0xC5, 0xDF])
M3_PROPOSE_BUNDLE_TAG = bytes([0xD4, 0x5A, 0xA9, 0x43])
M4_ACK_BUNDLES_TAG = bytes([0xD7, 0x7D, 0x17, 0x76])
M7_BMM_ACCEPT_TAG = bytes([0xD1, 0x61, 0x73, 0x68])

# BMM requests live outside the coinbase, so this tag is never part of
# the coinbase dispatch set.
M8_BMM_REQUEST_TAG = bytes([0x00, 0xBF, 0x00])

# Order matters: the decoder tries these first to last.
COINBASE_MESSAGE_TAGS = (
    M1_PROPOSE_SIDECHAIN_TAG,
    M2_ACK_SIDECHAIN_TAG,
    M3_PROPOSE_BUNDLE_TAG,
    M4_ACK_BUNDLES_TAG,
    M7_BMM_ACCEPT_TAG,
)

# M4 sub-tags, one byte each.
REPEAT_PREVIOUS_TAG = bytes([0x00])
ONE_BYTE_TAG = bytes([0x01])
TWO_BYTES_TAG = bytes([0x02])
LEADING_BY_50_TAG = bytes([0x03])

ACK_BUNDLES_SUBTAGS = (
    REPEAT_PREVIOUS_TAG,
    ONE_BYTE_TAG,
    TWO_BYTES_TAG,
    LEADING_BY_50_TAG,
)

ABSTAIN_ONE_BYTE = 0xFF
ALARM_ONE_BYTE = 0xFE
ABSTAIN_TWO_BYTES = 0xFFFF
ALARM_TWO_BYTES = 0xFFFE

# Byte order of two-byte upvotes in M4 (protocol version 1).
VOTE_BYTEORDER = 'big'

HASH_LEN = 32


def overlapping_tags(tags: Iterable[bytes]) -> List[Tuple[bytes, bytes]]:
    """Return every pair where one tag is a prefix of the other.

An empty result means prefix matching over `tags` is unambiguous.
    """
    tags = list(tags)
    ret = []
    for i, a in enumerate(tags):
        for b in tags[i + 1:]:
            if a.startswith(b) or b.startswith(a):
                ret.append((a, b))
    return ret
