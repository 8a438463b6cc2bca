from ._errors import (
    GeoJSONError,
    ParseError,
    SerializationError,
    UnknownGeometryKindError,
    UnsupportedGeometryKindError,
)
from .position import Position, PositionSequence
from .geometry import (
    Geometry,
    Point,
    MultiPoint,
    LineString,
    MultiLineString,
    Polygon,
    MultiPolygon,
    GeometryCollection,
)

from . import position
from . import geometry
from . import json

__version__ = "0.1.0"
