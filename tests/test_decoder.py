#! /usr/bin/python3
from bip300 import (
    AckBundles,
    AckSidechain,
    ActivationMarker,
    BmmAccept,
    BmmRequest,
    DecodeError,
    LeadingBy50,
    OddLengthVoteVectorError,
    OneByteVotes,
    ProposeBundle,
    ProposeSidechain,
    RepeatPrevious,
    TrailingBytesError,
    TruncatedError,
    TwoByteVotes,
    UnrecognizedSubtagError,
    UnrecognizedTagError,
    decode,
    decode_activation_marker,
    decode_bmm_request,
    encode,
)
from bip300 import decoder
from bip300.tags import COINBASE_MESSAGE_TAGS
from bitcoin.core.script import CScript
import pytest
import random

H1 = bytes(range(1, 33))
H2 = bytes(range(33, 65))

M1 = bytes.fromhex('6ad5e0c4af')
M2 = bytes.fromhex('6ad6e1c5df')
M3 = bytes.fromhex('6ad45aa943')
M4 = bytes.fromhex('6ad77d1776')
M7 = bytes.fromhex('6ad1617368')
M8 = bytes.fromhex('6a00bf00')


def test_propose_sidechain():
    assert decode(M1 + b'\x07' + b'hello') == ProposeSidechain(7, b'hello')
    assert decode(M1 + b'\x07') == ProposeSidechain(7, b'')

    with pytest.raises(TruncatedError) as err:
        decode(M1)
    assert (err.value.expected, err.value.got) == (1, 0)


def test_two_byte_votes():
    m = decode(M4 + b'\x02' + b'\x00\x05' + b'\xff\xff')
    assert m == AckBundles(TwoByteVotes([5, 65535]))
    assert m.vote.votes == (5, 0xFFFF)

    m = decode(M4 + b'\x02' + b'\xff\xfe\x01\x00')
    assert m.vote.votes == (0xFFFE, 256)
    assert decode(M4 + b'\x02') == AckBundles(TwoByteVotes([]))

    with pytest.raises(OddLengthVoteVectorError) as err:
        decode(M4 + b'\x02' + b'\x00\x05\xff')
    assert err.value.length == 3


def test_ack_bundles():
    assert decode(M4 + b'\x00') == AckBundles(RepeatPrevious())
    assert decode(M4 + b'\x03') == AckBundles(LeadingBy50())
    assert decode(M4 + b'\x01\x00\xfe\xff') == AckBundles(OneByteVotes(b'\x00\xfe\xff'))
    assert decode(M4 + b'\x01') == AckBundles(OneByteVotes(b''))

    with pytest.raises(TrailingBytesError):
        decode(M4 + b'\x00\x00')
    with pytest.raises(TrailingBytesError):
        decode(M4 + b'\x03\x01')
    with pytest.raises(UnrecognizedSubtagError) as err:
        decode(M4 + b'\x04\x01')
    assert err.value.data == b'\x04'
    with pytest.raises(TruncatedError):
        decode(M4)


def test_fixed_shape_messages():
    assert decode(M2 + b'\x01' + H1) == AckSidechain(1, H1)
    assert decode(M3 + b'\x02' + H1) == ProposeBundle(2, H1)
    assert decode(M7 + b'\x03' + H2) == BmmAccept(3, H2)

    for prefix in (M2, M3, M7):
        with pytest.raises(TrailingBytesError) as err:
            decode(prefix + b'\x01' + H1 + b'\x00\x00')
        assert err.value.count == 2


def test_truncation_rejected():
    messages = [AckSidechain(1, H1),
                ProposeBundle(2, H1),
                BmmAccept(3, H2),
                AckBundles(RepeatPrevious()),
                AckBundles(LeadingBy50()),
                ActivationMarker(4)]
    for m in messages:
        b = encode(m)
        taglen = len(m.tag) if isinstance(m, ActivationMarker) else len(m.tag) + 1
        for end in range(taglen, len(b)):
            with pytest.raises(TruncatedError):
                decode(b[:end])

    b = encode(BmmRequest(5, H1, H2))
    for end in range(len(M8), len(b)):
        with pytest.raises(TruncatedError):
            decode_bmm_request(b[:end])


def test_truncated_reports_lengths():
    with pytest.raises(TruncatedError) as err:
        decode(M2 + b'\x01' + H1[:10])
    assert err.value.expected == 32
    assert err.value.got == 10


def test_round_trip():
    messages = [ProposeSidechain(7, b'hello'),
                ProposeSidechain(0, b''),
                ProposeSidechain(255, bytes(range(256)) * 4),
                AckSidechain(1, H1),
                ProposeBundle(2, H2),
                AckBundles(RepeatPrevious()),
                AckBundles(LeadingBy50()),
                AckBundles(OneByteVotes([0, 0xFE, 0xFF])),
                AckBundles(TwoByteVotes([0, 1, 0xFFFE, 0xFFFF])),
                BmmAccept(3, H1),
                ActivationMarker(9)]
    for m in messages:
        assert decode(encode(m)) == m

    r = BmmRequest(5, H1, H2)
    assert decode_bmm_request(encode(r)) == r


def test_unrecognized():
    for script in [b'',
                   b'\x51',
                   b'\x6a',
                   b'\x6a\xd5\xe0',
                   b'\x6a' + b'\x00' * 40,
                   M1[1:] + b'\x07hello',
                   encode(BmmRequest(5, H1, H2))]:
        with pytest.raises(UnrecognizedTagError):
            decode(script)


def test_decode_accepts_cscript():
    script = CScript(M2 + b'\x01' + H1)
    assert decode(script) == AckSidechain(1, H1)


def test_activation_marker():
    assert decode(bytes([0xb4, 0x01, 0x07, 0x51])) == ActivationMarker(7)
    assert decode_activation_marker(bytes([0xb4, 0x01, 0x07, 0x51])) == 7

    with pytest.raises(UnrecognizedSubtagError):
        decode(bytes([0xb4, 0x01, 0x07, 0x52]))
    with pytest.raises(TrailingBytesError):
        decode(bytes([0xb4, 0x01, 0x07, 0x51, 0x51]))
    with pytest.raises(UnrecognizedTagError):
        decode_activation_marker(M1 + b'\x07')


def test_activation_marker_disabled():
    with pytest.raises(UnrecognizedTagError):
        decode(bytes([0xb4, 0x01, 0x07, 0x51]), activation_marker=False)
    assert decode(M1 + b'\x07hi', activation_marker=False) == ProposeSidechain(7, b'hi')


def test_bmm_request():
    b = M8 + b'\x05' + H1 + H2
    assert decode_bmm_request(b) == BmmRequest(5, H1, H2)

    with pytest.raises(TrailingBytesError):
        decode_bmm_request(b + b'\x00')
    with pytest.raises(UnrecognizedTagError):
        decode_bmm_request(b[1:])
    with pytest.raises(UnrecognizedTagError):
        decode_bmm_request(M7 + b'\x05' + H1)


def test_garbage_only_raises_decode_errors():
    rng = random.Random(300)
    prefixes = [b'', M1, M2, M3, M4, M4 + b'\x01', M4 + b'\x02', M7, M8,
                bytes([0xb4, 0x01])]
    for _ in range(2000):
        script = rng.choice(prefixes) + bytes(rng.getrandbits(8) for _ in range(rng.randrange(70)))
        for f in (decode, decode_bmm_request):
            try:
                f(script)
            except DecodeError:
                pass


def test_every_coinbase_tag_has_a_parser():
    assert set(decoder._PARSERS) == set(COINBASE_MESSAGE_TAGS)
    for tag in COINBASE_MESSAGE_TAGS:
        with pytest.raises(TruncatedError):
            decode(b'\x6a' + tag)


def test_malformed_is_not_unrecognized():
    # A bad sub-tag after a known tag must not look like a foreign script.
    for script in [M4 + b'\x04\x01', M4 + b'\xff', bytes([0xb4, 0x01, 0x07, 0x00])]:
        with pytest.raises(DecodeError) as err:
            decode(script)
        assert not isinstance(err.value, UnrecognizedTagError)
