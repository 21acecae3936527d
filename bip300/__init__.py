from .bundle import blind_bundle, derive_bundle_id
from .coinbase import CoinbaseBuilder, decode_coinbase
from .decoder import decode, decode_activation_marker, decode_bmm_request
from .errors import (
    ArithmeticUnderflowError,
    DecodeError,
    OddLengthVoteVectorError,
    TrailingBytesError,
    TruncatedError,
    UnrecognizedSubtagError,
    UnrecognizedTagError,
)
from .hashes import sha256d
from .messages import (
    AckBundles,
    AckSidechain,
    ActivationMarker,
    BmmAccept,
    BmmRequest,
    BundleVote,
    CoinbaseMessage,
    LeadingBy50,
    OneByteVotes,
    ProposeBundle,
    ProposeSidechain,
    RepeatPrevious,
    TwoByteVotes,
    encode,
    tag_for,
)
from .tags import ABSTAIN_ONE_BYTE, ABSTAIN_TWO_BYTES, ALARM_ONE_BYTE, ALARM_TWO_BYTES

__version__ = "0.1.0"

__all__ = [
    "CoinbaseMessage",
    "ProposeSidechain",
    "AckSidechain",
    "ProposeBundle",
    "AckBundles",
    "BmmAccept",
    "BmmRequest",
    "ActivationMarker",
    "BundleVote",
    "RepeatPrevious",
    "OneByteVotes",
    "TwoByteVotes",
    "LeadingBy50",
    "ABSTAIN_ONE_BYTE",
    "ABSTAIN_TWO_BYTES",
    "ALARM_ONE_BYTE",
    "ALARM_TWO_BYTES",
    "encode",
    "decode",
    "decode_activation_marker",
    "decode_bmm_request",
    "decode_coinbase",
    "tag_for",
    "CoinbaseBuilder",
    "blind_bundle",
    "derive_bundle_id",
    "sha256d",
    "DecodeError",
    "UnrecognizedTagError",
    "UnrecognizedSubtagError",
    "TruncatedError",
    "TrailingBytesError",
    "OddLengthVoteVectorError",
    "ArithmeticUnderflowError",
    "__version__",
]
