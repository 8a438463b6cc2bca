from __future__ import annotations

from typing import List, Tuple, Type

import msgspec

from .position import Position, PositionSequence

__all__ = (
    "Geometry",
    "Point",
    "MultiPoint",
    "LineString",
    "MultiLineString",
    "Polygon",
    "MultiPolygon",
    "GeometryCollection",
    "KNOWN_KINDS",
    "ALL_KINDS",
    "DEFAULT_KINDS",
    "kind_of",
)


def __dir__():
    return __all__


# All geometry types share `type` as their tag field, and set `tag=True` so
# the tag is the class name (e.g. ``"Polygon"``). The tag is always written
# when encoding.
class Geometry(msgspec.Struct, tag_field="type"):
    """The base class of every geometry type.

    Subclasses hold their coordinates as `Position` objects (a single
    position), `PositionSequence` objects, or nested lists of
    `PositionSequence` objects.
    """


class Point(Geometry, tag=True):
    coordinates: Position


class MultiPoint(Geometry, tag=True):
    coordinates: PositionSequence


class LineString(Geometry, tag=True):
    coordinates: PositionSequence


class MultiLineString(Geometry, tag=True):
    coordinates: List[PositionSequence]


class Polygon(Geometry, tag=True):
    """A polygon, made of an exterior ring followed by any interior rings.

    Ring closure and minimum ring length are not checked.
    """

    coordinates: List[PositionSequence]

    @property
    def exterior(self) -> PositionSequence:
        return self.coordinates[0]

    @property
    def interiors(self) -> List[PositionSequence]:
        return self.coordinates[1:]


class MultiPolygon(Geometry, tag=True):
    coordinates: List[List[PositionSequence]]


class GeometryCollection(Geometry, tag=True):
    geometries: List[Geometry]


def kind_of(cls: Type[Geometry]) -> str:
    """The discriminator written in the ``type`` member for ``cls``."""
    return cls.__struct_config__.tag


ALL_KINDS: Tuple[Type[Geometry], ...] = (
    Point,
    MultiPoint,
    LineString,
    MultiLineString,
    Polygon,
    MultiPolygon,
    GeometryCollection,
)

# Lowercased names of every geometry kind in RFC 7946
KNOWN_KINDS = frozenset(kind_of(cls).lower() for cls in ALL_KINDS)

# Only polygons are decoded by default, pass `ALL_KINDS` to a `Decoder` to
# handle the rest.
DEFAULT_KINDS: Tuple[Type[Geometry], ...] = (Polygon,)
