class DecodeError(ValueError):
    """Base class for every failure to decode a script"""


class UnrecognizedTagError(DecodeError):
    """No known tag matches: the script is not one of ours, or is corrupt"""

    def __init__(self, data: bytes):
        self.data = data
        super().__init__("unrecognized tag at {}".format(data[:8].hex() or "end of script"))


class UnrecognizedSubtagError(DecodeError):
    """A known message tag followed by an unknown sub-tag or terminator.

Unlike UnrecognizedTagError, the script is one of ours, but malformed.
    """

    def __init__(self, data: bytes):
        self.data = data
        super().__init__("unrecognized sub-tag {}".format(data.hex()))


class TruncatedError(DecodeError):
    def __init__(self, expected: int, got: int):
        self.expected = expected
        self.got = got
        super().__init__("truncated: expected {} bytes, got {}".format(expected, got))


class TrailingBytesError(DecodeError):
    def __init__(self, count: int):
        self.count = count
        super().__init__("{} trailing bytes after message".format(count))


class OddLengthVoteVectorError(DecodeError):
    def __init__(self, length: int):
        self.length = length
        super().__init__("two-byte vote vector has odd length {}".format(length))


class ArithmeticUnderflowError(ValueError):
    """Raised when a bundle's payouts and treasury exceed the previous treasury"""
