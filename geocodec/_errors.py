import msgspec

__all__ = (
    "GeoJSONError",
    "ParseError",
    "SerializationError",
    "UnknownGeometryKindError",
    "UnsupportedGeometryKindError",
)


class GeoJSONError(msgspec.MsgspecError):
    """The base class for all errors raised by geocodec."""


class ParseError(GeoJSONError, msgspec.DecodeError):
    """Raised when GeoJSON input is malformed.

    Parameters
    ----------
    msg : str
        A description of the failure.
    raw : Any, optional
        The offending fragment of input, kept for diagnostics.
    """

    def __init__(self, msg, raw=None):
        super().__init__(msg)
        self.raw = raw


class SerializationError(GeoJSONError, msgspec.EncodeError):
    """Raised when asked to encode a value that isn't a geometry."""


class UnknownGeometryKindError(ParseError):
    """Raised when a ``type`` member doesn't name a GeoJSON geometry kind."""

    def __init__(self, kind, raw=None):
        super().__init__(f"Unknown geometry kind {kind!r}", raw=raw)
        self.kind = kind


class UnsupportedGeometryKindError(GeoJSONError, NotImplementedError):
    """Raised when a geometry kind is recognized but no parser is registered
    for it."""

    def __init__(self, kind):
        super().__init__(f"Geometry kind {kind!r} is recognized but not supported")
        self.kind = kind
