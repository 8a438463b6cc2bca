"""Decoding and encoding of GeoJSON geometries.

Decoding parses a document into a generic tree once, reads the ``type``
member, and dispatches on its lowercased value to the matching geometry type.
Coordinates are handled by `geocodec.position`.
"""

from __future__ import annotations

import functools
import logging
from types import MappingProxyType
from typing import Any, Iterable, Type, Union

import msgspec

from ._errors import (
    ParseError,
    SerializationError,
    UnknownGeometryKindError,
    UnsupportedGeometryKindError,
)
from .geometry import (
    DEFAULT_KINDS,
    KNOWN_KINDS,
    Geometry,
    GeometryCollection,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
    kind_of,
)
from .position import (
    Position,
    PositionSequence,
    decode_position,
    decode_positions,
    encode_position,
    encode_positions,
)

__all__ = (
    "Decoder",
    "Encoder",
    "can_handle",
    "decode",
    "convert",
    "encode",
    "to_builtins",
)

logger = logging.getLogger(__name__)


def __dir__():
    return __all__


def can_handle(tp: Any) -> bool:
    """Check whether ``tp`` is `Geometry` or a subclass of it."""
    return isinstance(tp, type) and issubclass(tp, Geometry)


def _dec_hook(tp, obj, strict=False):
    if tp is Position:
        return decode_position(obj)
    elif tp is PositionSequence:
        return decode_positions(obj, strict=strict)
    raise NotImplementedError(f"Objects of type {tp!r} are not supported")


def _enc_hook(obj):
    if isinstance(obj, Position):
        return encode_position(obj)
    elif isinstance(obj, PositionSequence):
        return encode_positions(obj)
    raise NotImplementedError(
        f"Encoding objects of type {type(obj).__name__} is unsupported"
    )


# How deeply positions are nested in each kind's `coordinates`. 0 is a single
# position, 1 a sequence of positions, 2 a list of sequences, and so on.
_COORDINATE_DEPTHS = (
    (Point, 0),
    (MultiPoint, 1),
    (LineString, 1),
    (MultiLineString, 2),
    (Polygon, 2),
    (MultiPolygon, 3),
)


def _coordinate_depth(cls):
    for base, depth in _COORDINATE_DEPTHS:
        if issubclass(cls, base):
            return depth
    return None


def _encode_coordinates(value, depth):
    if depth == 0:
        return encode_position(value)
    if depth == 1:
        if not isinstance(value, (PositionSequence, list, tuple)):
            return None
        return encode_positions(value)
    if not isinstance(value, (list, tuple)):
        return None
    out = []
    for item in value:
        encoded = _encode_coordinates(item, depth - 1)
        if encoded is not None:
            out.append(encoded)
    return out


class Decoder:
    """A GeoJSON geometry decoder.

    Parameters
    ----------
    kinds : iterable of Geometry types, optional
        The geometry types this decoder can produce. Defaults to
        `geocodec.geometry.DEFAULT_KINDS`. Pass
        `geocodec.geometry.ALL_KINDS` to decode every geometry kind.
    strict : bool, optional
        If ``False`` (the default), invalid positions inside a sequence of
        positions are skipped. If ``True`` they raise a `ParseError`.
    """

    def __init__(
        self, kinds: Iterable[Type[Geometry]] = DEFAULT_KINDS, *, strict: bool = False
    ) -> None:
        parsers = {}
        for cls in kinds:
            if not can_handle(cls) or cls is Geometry:
                raise TypeError(f"Expected a Geometry subclass, got {cls!r}")
            parsers[kind_of(cls).lower()] = cls
        self._parsers = MappingProxyType(parsers)
        self._dec_hook = functools.partial(_dec_hook, strict=strict)
        self.strict = strict

    def __repr__(self):
        kinds = ", ".join(cls.__name__ for cls in self._parsers.values())
        return f"Decoder(kinds=({kinds}), strict={self.strict})"

    @property
    def kinds(self) -> tuple:
        """The geometry types this decoder can produce."""
        return tuple(self._parsers.values())

    def can_handle(self, tp: Any) -> bool:
        """Check whether ``tp`` may be requested from this decoder.

        This is true for `Geometry` itself, and for any registered geometry
        type (or subclass of one).
        """
        if not can_handle(tp):
            return False
        return tp is Geometry or issubclass(tp, self.kinds)

    def decode(self, buf: Union[bytes, str]) -> Geometry:
        """Deserialize a geometry from JSON.

        Parameters
        ----------
        buf : bytes-like or str
            The message to decode.

        Returns
        -------
        obj : Geometry
            The decoded geometry.

        Raises
        ------
        ParseError
            If the message isn't valid JSON, or its coordinates are invalid.
        UnknownGeometryKindError
            If the ``type`` member is missing or names an unknown kind.
        UnsupportedGeometryKindError
            If the ``type`` member names a kind this decoder can't produce.
        """
        try:
            node = msgspec.json.decode(buf)
        except msgspec.DecodeError as exc:
            raise ParseError(f"Invalid JSON: {exc}", raw=buf) from exc
        return self.convert(node)

    def convert(self, node: Any) -> Geometry:
        """Convert a generic JSON tree (as returned by `msgspec.json.decode`)
        into a geometry.

        Member names are matched case-insensitively, and unknown members are
        ignored. See `Decoder.decode` for the errors raised.
        """
        if not isinstance(node, dict):
            raise ParseError(
                f"Expected a JSON object, got `{type(node).__name__}`",
                raw=node,
            )
        fields = {str(k).lower(): v for k, v in node.items()}

        kind = fields.get("type")
        if not isinstance(kind, str):
            raise UnknownGeometryKindError(kind, raw=node)
        key = kind.lower()
        cls = self._parsers.get(key)
        if cls is None:
            if key in KNOWN_KINDS:
                raise UnsupportedGeometryKindError(kind)
            raise UnknownGeometryKindError(kind, raw=node)
        logger.debug("Dispatching geometry kind %r to %s", kind, cls.__name__)

        if cls is GeometryCollection:
            return self._convert_collection(fields, node)

        fields["type"] = kind_of(cls)
        try:
            return msgspec.convert(fields, type=cls, dec_hook=self._dec_hook)
        except msgspec.ValidationError as exc:
            raise ParseError(f"Invalid {kind_of(cls)}: {exc}", raw=node) from exc

    def _convert_collection(self, fields, node):
        children = fields.get("geometries")
        if not isinstance(children, list):
            raise ParseError(
                "Invalid GeometryCollection: expected `geometries` to be an array",
                raw=node,
            )
        return GeometryCollection([self.convert(child) for child in children])


class Encoder:
    """A GeoJSON geometry encoder."""

    def __repr__(self):
        return "Encoder()"

    def _check(self, obj):
        if not isinstance(obj, Geometry):
            raise SerializationError(
                f"Unsupported geometry type: `{type(obj).__name__}`"
            )

    def encode(self, obj: Geometry) -> bytes:
        """Serialize a geometry as JSON.

        Raises
        ------
        SerializationError
            If ``obj`` isn't a `Geometry`.
        """
        return msgspec.json.encode(self.to_builtins(obj))

    def to_builtins(self, obj: Geometry) -> dict:
        """Convert a geometry into a generic JSON tree of builtin types.

        Coordinates always go through `geocodec.position`: a single position
        that isn't a `Position` becomes ``None``, and non-positions inside a
        sequence are dropped.
        """
        self._check(obj)
        cls = type(obj)
        depth = _coordinate_depth(cls)
        out = {"type": kind_of(cls)}
        for name in cls.__struct_fields__:
            value = getattr(obj, name)
            if name == "coordinates" and depth is not None:
                out[name] = _encode_coordinates(value, depth)
            elif name == "geometries" and isinstance(obj, GeometryCollection):
                out[name] = [self.to_builtins(g) for g in value]
            else:
                out[name] = msgspec.to_builtins(value, enc_hook=_enc_hook)
        return out


_decoder = Decoder()
_encoder = Encoder()


def decode(buf: Union[bytes, str]) -> Geometry:
    """Deserialize a geometry from JSON using the default `Decoder`."""
    return _decoder.decode(buf)


def convert(node: Any) -> Geometry:
    """Convert a generic JSON tree into a geometry using the default
    `Decoder`."""
    return _decoder.convert(node)


def encode(obj: Geometry) -> bytes:
    """Serialize a geometry as JSON."""
    return _encoder.encode(obj)


def to_builtins(obj: Geometry) -> dict:
    """Convert a geometry into a generic JSON tree of builtin types."""
    return _encoder.to_builtins(obj)
