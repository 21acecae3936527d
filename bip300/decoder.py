"""Recover typed messages from output scripts.

Scripts come from arbitrary transactions, so every function here must
only ever fail with a DecodeError, whatever bytes it is given.

"""
from .errors import (
    OddLengthVoteVectorError,
    TrailingBytesError,
    TruncatedError,
    UnrecognizedSubtagError,
    UnrecognizedTagError,
)
from .messages import (
    AckBundles,
    AckSidechain,
    ActivationMarker,
    BmmAccept,
    BmmRequest,
    CoinbaseMessage,
    LeadingBy50,
    OneByteVotes,
    ProposeBundle,
    ProposeSidechain,
    RepeatPrevious,
    TwoByteVotes,
)
from .tags import (
    COINBASE_MESSAGE_TAGS,
    HASH_LEN,
    LEADING_BY_50_TAG,
    M1_PROPOSE_SIDECHAIN_TAG,
    M2_ACK_SIDECHAIN_TAG,
    M3_PROPOSE_BUNDLE_TAG,
    M4_ACK_BUNDLES_TAG,
    M7_BMM_ACCEPT_TAG,
    M8_BMM_REQUEST_TAG,
    ONE_BYTE_TAG,
    OP_DRIVECHAIN_MARKER,
    OP_RETURN_BYTE,
    OP_TRUE_BYTE,
    REPEAT_PREVIOUS_TAG,
    TWO_BYTES_TAG,
    VOTE_BYTEORDER,
)
from typing import Callable, Dict, Iterable


class ScriptReader(object):
    """Cursor over a script's bytes"""
    def __init__(self, data: bytes):
        self.data = bytes(data)
        self.pos = 0

    def remaining(self) -> int:
        return len(self.data) - self.pos

    def take(self, n: int) -> bytes:
        if self.remaining() < n:
            raise TruncatedError(n, self.remaining())
        b = self.data[self.pos:self.pos + n]
        self.pos += n
        return b

    def take_byte(self) -> int:
        return self.take(1)[0]

    def take_rest(self) -> bytes:
        b = self.data[self.pos:]
        self.pos = len(self.data)
        return b

    def expect_tag(self, tags: Iterable[bytes]) -> bytes:
        """Consume and return the first of `tags` found at the cursor"""
        for t in tags:
            if self.data.startswith(t, self.pos):
                self.pos += len(t)
                return t
        raise UnrecognizedTagError(self.data[self.pos:])

    def expect_end(self) -> None:
        if self.remaining() != 0:
            raise TrailingBytesError(self.remaining())


def _read_sidechain_and_hash(r: ScriptReader):
    sidechain_number = r.take_byte()
    h = r.take(HASH_LEN)
    r.expect_end()
    return sidechain_number, h


def _parse_propose_sidechain(r: ScriptReader) -> CoinbaseMessage:
    sidechain_number = r.take_byte()
    return ProposeSidechain(sidechain_number, r.take_rest())


def _parse_ack_sidechain(r: ScriptReader) -> CoinbaseMessage:
    return AckSidechain(*_read_sidechain_and_hash(r))


def _parse_propose_bundle(r: ScriptReader) -> CoinbaseMessage:
    return ProposeBundle(*_read_sidechain_and_hash(r))


def _parse_bmm_accept(r: ScriptReader) -> CoinbaseMessage:
    return BmmAccept(*_read_sidechain_and_hash(r))


def _parse_ack_bundles(r: ScriptReader) -> CoinbaseMessage:
    subtag = r.take(1)
    if subtag == REPEAT_PREVIOUS_TAG:
        r.expect_end()
        return AckBundles(RepeatPrevious())
    elif subtag == LEADING_BY_50_TAG:
        r.expect_end()
        return AckBundles(LeadingBy50())
    elif subtag == ONE_BYTE_TAG:
        return AckBundles(OneByteVotes(r.take_rest()))
    elif subtag == TWO_BYTES_TAG:
        rest = r.take_rest()
        if len(rest) % 2 != 0:
            raise OddLengthVoteVectorError(len(rest))
        votes = [int.from_bytes(rest[i:i + 2], VOTE_BYTEORDER)
                 for i in range(0, len(rest), 2)]
        return AckBundles(TwoByteVotes(votes))

    # The M4 tag matched, so this is a malformed message, not a foreign one.
    raise UnrecognizedSubtagError(subtag)


_PARSERS: Dict[bytes, Callable[[ScriptReader], CoinbaseMessage]] = {
    M1_PROPOSE_SIDECHAIN_TAG: _parse_propose_sidechain,
    M2_ACK_SIDECHAIN_TAG: _parse_ack_sidechain,
    M3_PROPOSE_BUNDLE_TAG: _parse_propose_bundle,
    M4_ACK_BUNDLES_TAG: _parse_ack_bundles,
    M7_BMM_ACCEPT_TAG: _parse_bmm_accept,
}


def decode_activation_marker(script: bytes) -> int:
    """Parse OP_DRIVECHAIN <n> OP_TRUE, returning the sidechain number"""
    r = ScriptReader(script)
    r.expect_tag([OP_DRIVECHAIN_MARKER])
    sidechain_number = r.take_byte()
    final = r.take(1)
    if final != OP_TRUE_BYTE:
        raise UnrecognizedSubtagError(final)
    r.expect_end()
    return sidechain_number


def decode(script: bytes, activation_marker: bool = True) -> CoinbaseMessage:
    """Decode a coinbase output script into a message.

Raises a DecodeError subclass on failure: UnrecognizedTagError usually
just means the script is not a signalling message at all.  With
`activation_marker` false, the OP_DRIVECHAIN layout is not recognized.
    """
    script = bytes(script)
    # The marker must be tried before the OP_RETURN family.
    if activation_marker and script.startswith(OP_DRIVECHAIN_MARKER):
        return ActivationMarker(decode_activation_marker(script))

    r = ScriptReader(script)
    r.expect_tag([OP_RETURN_BYTE])
    tag = r.expect_tag(COINBASE_MESSAGE_TAGS)
    return _PARSERS[tag](r)


def decode_bmm_request(script: bytes) -> BmmRequest:
    """Decode an M8 BMM request, which lives outside the coinbase"""
    r = ScriptReader(script)
    r.expect_tag([OP_RETURN_BYTE])
    r.expect_tag([M8_BMM_REQUEST_TAG])
    sidechain_number = r.take_byte()
    sidechain_block_hash = r.take(HASH_LEN)
    prev_mainchain_block_hash = r.take(HASH_LEN)
    r.expect_end()
    return BmmRequest(sidechain_number, sidechain_block_hash, prev_mainchain_block_hash)
