"""
Codec Errors
============

Exceptions raised by the GIF decoder and encoder.

File open/create failures are not wrapped: they surface as the
built-in OSError raised by open().
"""


class PointillistError(Exception):
    """Base class for pipeline errors reported to the user."""
    pass


class DecodeError(PointillistError):
    """Raised when the input container or its frame data cannot be parsed."""
    pass


class EncodeError(PointillistError):
    """Raised when the output writer rejects dimensions, palette or frame data."""
    pass


class UsagePreconditionError(PointillistError, ValueError):
    """Raised when the encoder is called without any frames."""
    pass
