from .tags import (
    ABSTAIN_ONE_BYTE,
    ABSTAIN_TWO_BYTES,
    ALARM_ONE_BYTE,
    ALARM_TWO_BYTES,
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
from bitcoin.core import CMutableTxOut
from bitcoin.core.script import CScript
from binascii import hexlify, unhexlify
from collections import namedtuple
from typing import Any, Iterable, Tuple, Union


def _check_sidechain_number(n: Any) -> int:
    if not isinstance(n, int) or isinstance(n, bool):
        raise TypeError("sidechain_number must be an int, {} received".format(type(n)))
    if not 0 <= n <= 0xFF:
        raise ValueError("sidechain_number must fit in one byte, {} received".format(n))
    return n


def _check_hash(name: str, h: Any) -> bytes:
    if not isinstance(h, (bytes, bytearray)):
        raise TypeError("{} must be bytes, {} received".format(name, type(h)))
    if len(h) != HASH_LEN:
        raise ValueError("{} must be {}-byte long. {} received".format(name, HASH_LEN, len(h)))
    return bytes(h)


class _Value(object):
    """Equality that also compares the variant, not just the fields.

Two variants with identical fields (e.g. M2 and M3) must not compare
equal, which plain namedtuples would do.
    """
    __slots__ = ()

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and tuple.__eq__(self, other)  # type: ignore

    def __ne__(self, other: object) -> bool:
        return not self == other

    def __hash__(self) -> int:
        return hash((type(self).__name__,) + tuple(self))  # type: ignore


class BundleVote(_Value):
    """How a block producer votes on the pending withdrawal bundles"""
    __slots__ = ()
    subtag = b''

    def payload(self) -> bytes:
        return b''


class RepeatPrevious(BundleVote, namedtuple('RepeatPrevious', [])):
    __slots__ = ()
    subtag = REPEAT_PREVIOUS_TAG


class LeadingBy50(BundleVote, namedtuple('LeadingBy50', [])):
    __slots__ = ()
    subtag = LEADING_BY_50_TAG


class OneByteVotes(BundleVote, namedtuple('OneByteVotes', ['votes'])):
    """One vote byte per pending bundle, by position.

ABSTAIN_ONE_BYTE and ALARM_ONE_BYTE are the two sentinels.
    """
    __slots__ = ()
    subtag = ONE_BYTE_TAG

    def __new__(cls, votes: Union[bytes, Iterable[int]] = b''):
        # bytes(n) would silently make n zero votes
        if isinstance(votes, int):
            raise TypeError("votes must be bytes or a sequence of ints")
        return super().__new__(cls, bytes(votes))

    def payload(self) -> bytes:
        return self.votes

    def abstains(self) -> Tuple[int, ...]:
        return tuple(i for i, v in enumerate(self.votes) if v == ABSTAIN_ONE_BYTE)

    def alarms(self) -> Tuple[int, ...]:
        return tuple(i for i, v in enumerate(self.votes) if v == ALARM_ONE_BYTE)


class TwoByteVotes(BundleVote, namedtuple('TwoByteVotes', ['votes'])):
    """One u16 vote per pending bundle, for more than 254 bundles.

ABSTAIN_TWO_BYTES and ALARM_TWO_BYTES are the two sentinels.
    """
    __slots__ = ()
    subtag = TWO_BYTES_TAG

    def __new__(cls, votes: Iterable[int] = ()):
        votes = tuple(votes)
        for v in votes:
            if not isinstance(v, int) or isinstance(v, bool) or not 0 <= v <= 0xFFFF:
                raise ValueError("two-byte vote {!r} out of range".format(v))
        return super().__new__(cls, votes)

    def payload(self) -> bytes:
        return b''.join(v.to_bytes(2, VOTE_BYTEORDER) for v in self.votes)

    def abstains(self) -> Tuple[int, ...]:
        return tuple(i for i, v in enumerate(self.votes) if v == ABSTAIN_TWO_BYTES)

    def alarms(self) -> Tuple[int, ...]:
        return tuple(i for i, v in enumerate(self.votes) if v == ALARM_TWO_BYTES)


class CoinbaseMessage(_Value):
    """A signalling message carried in a single output script.

Subclasses set `tag` and implement `payload()`; the default layout is
OP_RETURN, tag, payload.
    """
    __slots__ = ()
    tag = b''

    def payload(self) -> bytes:
        raise NotImplementedError()

    def to_bytes(self) -> bytes:
        return OP_RETURN_BYTE + self.tag + self.payload()

    def to_hex(self) -> str:
        return hexlify(self.to_bytes()).decode('ASCII')

    def to_script(self) -> CScript:
        return CScript(self.to_bytes())

    def to_txout(self) -> CMutableTxOut:
        """A zero-value output carrying this message"""
        return CMutableTxOut(0, self.to_script())

    @classmethod
    def from_bytes(cls, b: bytes) -> 'CoinbaseMessage':
        from .decoder import decode

        m = decode(b)
        if not isinstance(m, cls):
            raise ValueError("{} decoded as {}, not {}".format(
                hexlify(b).decode('ASCII'), type(m).__name__, cls.__name__))
        return m

    @classmethod
    def from_hex(cls, s: Union[str, bytes]) -> 'CoinbaseMessage':
        if isinstance(s, str):
            s = s.encode('ASCII')
        return cls.from_bytes(bytes(unhexlify(s)))


class ProposeSidechain(CoinbaseMessage, namedtuple('ProposeSidechain', ['sidechain_number', 'data'])):
    """M1: propose a new sidechain; `data` runs to the end of the script"""
    __slots__ = ()
    tag = M1_PROPOSE_SIDECHAIN_TAG

    def __new__(cls, sidechain_number: int, data: bytes = b''):
        if not isinstance(data, (bytes, bytearray)):
            raise TypeError("data must be bytes, {} received".format(type(data)))
        return super().__new__(cls, _check_sidechain_number(sidechain_number), bytes(data))

    def payload(self) -> bytes:
        return bytes([self.sidechain_number]) + self.data


class AckSidechain(CoinbaseMessage, namedtuple('AckSidechain', ['sidechain_number', 'data_hash'])):
    """M2: acknowledge a sidechain proposal by the hash of its data"""
    __slots__ = ()
    tag = M2_ACK_SIDECHAIN_TAG

    def __new__(cls, sidechain_number: int, data_hash: bytes):
        return super().__new__(cls, _check_sidechain_number(sidechain_number),
                               _check_hash('data_hash', data_hash))

    def payload(self) -> bytes:
        return bytes([self.sidechain_number]) + self.data_hash


class ProposeBundle(CoinbaseMessage, namedtuple('ProposeBundle', ['sidechain_number', 'bundle_id'])):
    """M3: propose a withdrawal bundle by its blinded id"""
    __slots__ = ()
    tag = M3_PROPOSE_BUNDLE_TAG

    def __new__(cls, sidechain_number: int, bundle_id: bytes):
        return super().__new__(cls, _check_sidechain_number(sidechain_number),
                               _check_hash('bundle_id', bundle_id))

    def payload(self) -> bytes:
        return bytes([self.sidechain_number]) + self.bundle_id


class AckBundles(CoinbaseMessage, namedtuple('AckBundles', ['vote'])):
    """M4: vote on every pending bundle at once"""
    __slots__ = ()
    tag = M4_ACK_BUNDLES_TAG

    def __new__(cls, vote: BundleVote):
        if not isinstance(vote, BundleVote):
            raise TypeError("vote must be a BundleVote, {} received".format(type(vote)))
        return super().__new__(cls, vote)

    def payload(self) -> bytes:
        return self.vote.subtag + self.vote.payload()


class BmmAccept(CoinbaseMessage, namedtuple('BmmAccept', ['sidechain_number', 'sidechain_block_hash'])):
    """M7: commit to a sidechain block (blind merged mining)"""
    __slots__ = ()
    tag = M7_BMM_ACCEPT_TAG

    def __new__(cls, sidechain_number: int, sidechain_block_hash: bytes):
        return super().__new__(cls, _check_sidechain_number(sidechain_number),
                               _check_hash('sidechain_block_hash', sidechain_block_hash))

    def payload(self) -> bytes:
        return bytes([self.sidechain_number]) + self.sidechain_block_hash


class BmmRequest(CoinbaseMessage, namedtuple('BmmRequest', ['sidechain_number',
                                                            'sidechain_block_hash',
                                                            'prev_mainchain_block_hash'])):
    """M8: a sidechain's request to be merge-mined.

This is not a coinbase message: it goes in an ordinary transaction, so
it is decoded with `decode_bmm_request` rather than `decode`.
    """
    __slots__ = ()
    tag = M8_BMM_REQUEST_TAG

    def __new__(cls, sidechain_number: int, sidechain_block_hash: bytes,
                prev_mainchain_block_hash: bytes):
        return super().__new__(cls, _check_sidechain_number(sidechain_number),
                               _check_hash('sidechain_block_hash', sidechain_block_hash),
                               _check_hash('prev_mainchain_block_hash', prev_mainchain_block_hash))

    def payload(self) -> bytes:
        return (bytes([self.sidechain_number])
                + self.sidechain_block_hash
                + self.prev_mainchain_block_hash)

    @classmethod
    def from_bytes(cls, b: bytes) -> 'BmmRequest':
        from .decoder import decode_bmm_request

        return decode_bmm_request(b)


class ActivationMarker(CoinbaseMessage, namedtuple('ActivationMarker', ['sidechain_number'])):
    """OP_DRIVECHAIN <sidechain_number> OP_TRUE: not an OP_RETURN script"""
    __slots__ = ()
    tag = OP_DRIVECHAIN_MARKER

    def __new__(cls, sidechain_number: int):
        return super().__new__(cls, _check_sidechain_number(sidechain_number))

    def payload(self) -> bytes:
        return bytes([self.sidechain_number])

    def to_bytes(self) -> bytes:
        return self.tag + self.payload() + OP_TRUE_BYTE


def tag_for(variant: Any) -> bytes:
    """Tag of a message or vote kind; accepts the class or an instance"""
    cls = variant if isinstance(variant, type) else type(variant)
    if issubclass(cls, CoinbaseMessage) and cls is not CoinbaseMessage:
        return cls.tag
    if issubclass(cls, BundleVote) and cls is not BundleVote:
        return cls.subtag
    raise TypeError("{} is not a message kind".format(cls.__name__))


def encode(message: CoinbaseMessage) -> bytes:
    return message.to_bytes()
