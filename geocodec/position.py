"""Encoding and decoding of GeoJSON positions.

A position is encoded on the wire as a flat array of 2 or 3 numbers,
``[longitude, latitude]`` or ``[longitude, latitude, altitude]``. Geometries
with more than one position encode them as an array of such arrays.

An altitude of ``0`` is treated the same as a missing altitude: it is dropped
when encoding, and decoded as ``None``.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from typing import Any, Iterable, Optional, Union

import msgspec

from ._errors import ParseError

__all__ = (
    "Position",
    "PositionSequence",
    "decode_position",
    "decode_positions",
    "encode_position",
    "encode_positions",
)

logger = logging.getLogger(__name__)


def __dir__():
    return __all__


class Position:
    """A single geographic position.

    Parameters
    ----------
    longitude : float
        The longitude, always the first element on the wire.
    latitude : float
        The latitude, always the second element on the wire.
    altitude : float, optional
        The altitude, if any. An altitude of ``0`` is stored as ``None``.

    Notes
    -----
    No bounds checking is done on the longitude or latitude.

    This isn't a ``msgspec.Struct``, since structs are always encoded natively
    and would bypass the altitude handling in `encode_position`.
    """

    __slots__ = ("longitude", "latitude", "altitude")

    def __init__(
        self, longitude: float, latitude: float, altitude: Optional[float] = None
    ) -> None:
        object.__setattr__(self, "longitude", float(longitude))
        object.__setattr__(self, "latitude", float(latitude))
        if altitude is not None:
            altitude = float(altitude) or None
        object.__setattr__(self, "altitude", altitude)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__!r} objects are immutable")

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__!r} objects are immutable")

    def __iter__(self):
        yield self.longitude
        yield self.latitude
        if self.altitude is not None:
            yield self.altitude

    def __eq__(self, other):
        if type(other) is not Position:
            return NotImplemented
        return (
            self.longitude == other.longitude
            and self.latitude == other.latitude
            and self.altitude == other.altitude
        )

    def __hash__(self):
        return hash((self.longitude, self.latitude, self.altitude))

    def __repr__(self):
        if self.altitude is None:
            return f"Position(longitude={self.longitude!r}, latitude={self.latitude!r})"
        return (
            f"Position(longitude={self.longitude!r}, latitude={self.latitude!r}, "
            f"altitude={self.altitude!r})"
        )

    def __reduce__(self):
        return (Position, (self.longitude, self.latitude, self.altitude))


class PositionSequence(Sequence):
    """An immutable, ordered sequence of `Position` objects.

    Items may be given as `Position` objects, or as 2 or 3 element sequences
    of numbers which are converted with `decode_position`.

    Whether the sequence is open (a line) or closed (a polygon ring) is up to
    the geometry holding it, nothing is checked here.
    """

    __slots__ = ("_positions",)

    def __init__(self, positions: Iterable[Any] = ()) -> None:
        self._positions = tuple(
            p if isinstance(p, Position) else decode_position(p) for p in positions
        )

    def __getitem__(self, index):
        if isinstance(index, slice):
            return PositionSequence(self._positions[index])
        return self._positions[index]

    def __len__(self):
        return len(self._positions)

    def __eq__(self, other):
        if isinstance(other, PositionSequence):
            return self._positions == other._positions
        return NotImplemented

    def __hash__(self):
        return hash(self._positions)

    def __repr__(self):
        return f"PositionSequence({list(self._positions)!r})"

    @property
    def is_closed(self) -> bool:
        """Whether the first and last positions are equal."""
        return len(self) > 0 and self._positions[0] == self._positions[-1]


def _parse_component(value: Any, name: str, raw: Any) -> float:
    # bool is an int subclass, but never a valid coordinate
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ParseError(
            f"Could not parse {name} from coordinates {raw!r}: expected a number, "
            f"got `{type(value).__name__}`",
            raw=raw,
        )
    if isinstance(value, str):
        # Strings must hold a bare JSON number, no padding
        try:
            if value != value.strip():
                raise msgspec.DecodeError(value)
            out = msgspec.json.decode(value, type=float)
        except msgspec.DecodeError:
            raise ParseError(
                f"Could not parse {name} from coordinates {raw!r}: {value!r} is not a number",
                raw=raw,
            ) from None
    else:
        out = float(value)
    if not math.isfinite(out):
        raise ParseError(
            f"Could not parse {name} from coordinates {raw!r}: {value!r} is not finite",
            raw=raw,
        )
    return out


def decode_position(node: Any) -> Position:
    """Decode a single position from a flat array of numbers.

    Parameters
    ----------
    node : list
        A decoded JSON array like ``[-122.428938, 37.766713]``. A third element
        is read as the altitude, any further elements are ignored.

    Returns
    -------
    position : Position

    Raises
    ------
    ParseError
        If ``node`` isn't an array of at least 2 numbers.
    """
    if not isinstance(node, (list, tuple)) or len(node) < 2:
        raise ParseError(
            "Position coordinates could not be parsed. Expected something like "
            "'[-122.428938, 37.766713]' ([lon, lat]), got %r" % (node,),
            raw=node,
        )
    longitude = _parse_component(node[0], "longitude", node)
    latitude = _parse_component(node[1], "latitude", node)
    altitude = None
    if len(node) > 2:
        altitude = _parse_component(node[2], "altitude", node)
    return Position(longitude, latitude, altitude)


def decode_positions(node: Any, *, strict: bool = False) -> PositionSequence:
    """Decode a sequence of positions from an array of flat arrays.

    Parameters
    ----------
    node : list
        A decoded JSON array like ``[[0, 0], [1, 0], [1, 1]]``.
    strict : bool, optional
        If ``False`` (the default), elements that aren't valid positions are
        skipped. If ``True``, the first invalid element raises a
        `ParseError`.

    Returns
    -------
    positions : PositionSequence
        The decoded positions, in input order.

    Raises
    ------
    ParseError
        If ``node`` isn't a non-empty array, or if ``strict`` is set and an
        element is invalid.
    """
    if not isinstance(node, (list, tuple)) or not node:
        raise ParseError(
            "Position sequence could not be parsed. Expected something like "
            "'[[0, 0], [1, 1]]' ([[lon, lat], ...]), got %r" % (node,),
            raw=node,
        )
    positions = []
    for i, item in enumerate(node):
        try:
            positions.append(decode_position(item))
        except ParseError as exc:
            if strict:
                raise ParseError(f"{exc} - at index {i}", raw=item) from exc
            logger.debug("Skipping invalid position at index %d: %r", i, item)
    return PositionSequence(positions)


def encode_position(value: Any) -> Optional[list]:
    """Encode a single position as a flat array.

    The altitude is only included if it's set. Returns ``None`` if ``value``
    isn't a `Position`.
    """
    if not isinstance(value, Position):
        return None
    if value.altitude is None:
        return [value.longitude, value.latitude]
    return [value.longitude, value.latitude, value.altitude]


def encode_positions(values: Union[PositionSequence, Iterable[Any]]) -> list:
    """Encode a sequence of positions as an array of flat arrays.

    Elements that aren't `Position` objects are dropped from the output.
    """
    out = []
    for i, value in enumerate(values):
        encoded = encode_position(value)
        if encoded is None:
            logger.debug("Dropping non-position element at index %d: %r", i, value)
            continue
        out.append(encoded)
    return out
