"""
Exceptions raised while decoding NSO containers.
"""


class NsoError(Exception):
    """Base class for all container decoding errors."""


class FormatError(NsoError):
    """The container header is missing, truncated or has the wrong magic."""


class TruncatedReadError(NsoError, IOError):
    """Fewer bytes were available than a read required."""

    def __init__(self, offset: int, expected: int, actual: int):
        super().__init__(
            f"short read at 0x{offset:X}: expected {expected} bytes, got {actual}"
        )
        self.offset = offset
        self.expected = expected
        self.actual = actual


class DecompressionError(NsoError):
    """LZ4 block decompression failed or produced the wrong amount of data."""
