"""Well-known text reading and writing.

Covers the plain OGC types and the curved SQL-MM types:

    CIRCULARSTRING (0 0, 1 1, 2 0)
    COMPOUNDCURVE ((0 0, 1 0), CIRCULARSTRING (1 0, 2 1, 3 0))
    CURVEPOLYGON (CIRCULARSTRING (0 0, 2 0, 0 0), (0.5 0, 1.5 0, 1 0.5, 0.5 0))
    MULTICURVE ((0 0, 1 1), CIRCULARSTRING (1 1, 2 2, 3 1))
    MULTISURFACE (((0 0, 1 0, 1 1, 0 0)), CURVEPOLYGON (...))

A leading ``SRID=n;`` prefix (EWKT) is accepted by the reader.
"""

import logging
import math
import re
from collections.abc import Callable
from typing import Any

from shapely.errors import GEOSException
from shapely.geometry.base import BaseGeometry

from curvedgeom.core.base import CurvedGeometry
from curvedgeom.core.converter import dimensions_of
from curvedgeom.core.factory import CurvedGeometryFactory
from curvedgeom.domain import Coordinate
from curvedgeom.exceptions import GeometryConstructionError, ParseError

logger = logging.getLogger(__name__)

EMPTY = "EMPTY"

GEOMETRY_TYPES = (
    "POINT",
    "LINESTRING",
    "LINEARRING",
    "POLYGON",
    "MULTIPOINT",
    "MULTILINESTRING",
    "MULTIPOLYGON",
    "GEOMETRYCOLLECTION",
    "CIRCULARSTRING",
    "COMPOUNDCURVE",
    "CURVEPOLYGON",
    "MULTICURVE",
    "MULTISURFACE",
)

# (has_z, has_m) for each dimension tag
_DIMENSION_TAGS = {"Z": (True, False), "M": (False, True), "ZM": (True, True)}

_SRID_PREFIX = re.compile(r"\s*SRID\s*=\s*(-?\d+)\s*;", re.IGNORECASE)
_TOKEN = re.compile(
    r"\s*(?:(?P<number>[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)"
    r"|(?P<word>[A-Za-z_]+)"
    r"|(?P<symbol>[(),]))"
)

Dimensions = tuple[bool, bool] | None

_NUMBER = "number"
_WORD = "word"


class _TokenStream:
    """Splits WKT into numbers, words and the symbols ( ) ,"""

    def __init__(self, text: str) -> None:
        self._tokens: list[tuple[str, str]] = []
        pos = 0
        text = text.rstrip()
        while pos < len(text):
            match = _TOKEN.match(text, pos)
            if match is None or match.end() == pos:
                raise ParseError(f"Unexpected character {text[pos:].lstrip()[:1]!r} at offset {pos}")
            kind = match.lastgroup
            value = match.group(kind)
            if kind == _WORD:
                value = value.upper()
                # NaN and Inf are spelled as words
                if value in ("NAN", "INF", "INFINITY"):
                    kind = _NUMBER
            self._tokens.append((kind, value))
            pos = match.end()
        self._pos = 0

    @property
    def at_end(self) -> bool:
        return self._pos >= len(self._tokens)

    def peek(self) -> tuple[str, str] | None:
        if self.at_end:
            return None
        return self._tokens[self._pos]

    def next(self) -> tuple[str, str]:
        if self.at_end:
            raise ParseError("Unexpected end of text")
        token = self._tokens[self._pos]
        self._pos += 1
        return token

    def peek_is(self, kind: str, value: str | None = None) -> bool:
        token = self.peek()
        return token is not None and token[0] == kind and (value is None or token[1] == value)

    def next_word(self) -> str:
        kind, value = self.next()
        if kind != _WORD:
            raise ParseError(f"Expected a word but found {value!r}")
        return value

    def next_number(self) -> float:
        kind, value = self.next()
        if kind != _NUMBER:
            raise ParseError(f"Expected a number but found {value!r}")
        return float(value)

    def next_empty_or_opener(self) -> str:
        """Consume ``EMPTY`` or ``(`` and return it."""
        _, value = self.next()
        if value not in (EMPTY, "("):
            raise ParseError(f"Expected 'EMPTY' or '(' but found {value!r}")
        return value

    def next_closer_or_comma(self) -> str:
        """Consume ``)`` or ``,`` and return it."""
        _, value = self.next()
        if value not in (")", ","):
            raise ParseError(f"Expected ')' or ',' but found {value!r}")
        return value


def _split_type_word(word: str) -> tuple[str, Dimensions]:
    # accepts both "POINT Z" (tag read separately) and "POINTZ"
    if word in GEOMETRY_TYPES:
        return word, None
    for suffix in ("ZM", "Z", "M"):
        base = word[: -len(suffix)]
        if word.endswith(suffix) and base in GEOMETRY_TYPES:
            return base, _DIMENSION_TAGS[suffix]
    raise ParseError(f"Unknown geometry type: {word}")


class _Parser:
    """Recursive descent over one WKT string."""

    def __init__(self, tokens: _TokenStream, factory: CurvedGeometryFactory) -> None:
        self._tokens = tokens
        self._factory = factory
        self._readers: dict[str, Callable[[Dimensions], Any]] = {
            "POINT": self._read_point,
            "LINESTRING": self._read_line_string,
            "LINEARRING": self._read_linear_ring,
            "POLYGON": self._read_polygon,
            "MULTIPOINT": self._read_multi_point,
            "MULTILINESTRING": self._read_multi_line_string,
            "MULTIPOLYGON": self._read_multi_polygon,
            "GEOMETRYCOLLECTION": self._read_geometry_collection,
            "CIRCULARSTRING": self._read_circular_string,
            "COMPOUNDCURVE": self._read_compound_curve,
            "CURVEPOLYGON": self._read_curve_polygon,
            "MULTICURVE": self._read_multi_curve,
            "MULTISURFACE": self._read_multi_surface,
        }

    def read_tagged(self, dims: Dimensions) -> Any:
        type_name, word_dims = _split_type_word(self._tokens.next_word())
        dims = self._read_dimension_tag() or word_dims or dims
        return self._readers[type_name](dims)

    def _read_dimension_tag(self) -> Dimensions:
        token = self._tokens.peek()
        if token is not None and token[0] == _WORD and token[1] in _DIMENSION_TAGS:
            self._tokens.next()
            return _DIMENSION_TAGS[token[1]]
        return None

    def _read_coordinate(self, dims: Dimensions) -> Coordinate:
        values = [self._tokens.next_number()]
        while self._tokens.peek_is(_NUMBER):
            values.append(self._tokens.next_number())

        if dims is None:
            if len(values) not in (2, 3, 4):
                raise ParseError(f"A coordinate needs 2 to 4 ordinates, got {len(values)}")
            return Coordinate(*values)

        has_z, has_m = dims
        expected = 2 + int(has_z) + int(has_m)
        if len(values) != expected:
            raise ParseError(f"Expected {expected} ordinates per coordinate, got {len(values)}")
        x, y, *rest = values
        z = rest.pop(0) if has_z else math.nan
        m = rest.pop(0) if has_m else math.nan
        return Coordinate(x, y, z, m)

    def _read_coordinates(self, dims: Dimensions) -> tuple[Coordinate, ...]:
        if self._tokens.next_empty_or_opener() == EMPTY:
            return ()
        coords = [self._read_coordinate(dims)]
        while self._tokens.next_closer_or_comma() == ",":
            coords.append(self._read_coordinate(dims))
        return tuple(coords)

    def _read_list(self, read_item: Callable[[], Any]) -> list[Any] | None:
        """Read ``EMPTY`` (None) or a parenthesized, comma separated list."""
        if self._tokens.next_empty_or_opener() == EMPTY:
            return None
        items = [read_item()]
        while self._tokens.next_closer_or_comma() == ",":
            items.append(read_item())
        return items

    # Plain types

    def _read_point(self, dims: Dimensions) -> BaseGeometry:
        coords = self._read_coordinates(dims)
        if not coords:
            return self._factory.create_point()
        if len(coords) != 1:
            raise ParseError(f"A point has exactly one coordinate, got {len(coords)}")
        return self._factory.create_point(coords[0])

    def _read_line_string(self, dims: Dimensions) -> BaseGeometry:
        return self._factory.create_line_string(self._read_coordinates(dims))

    def _read_linear_ring(self, dims: Dimensions) -> BaseGeometry:
        return self._factory.create_linear_ring(self._read_coordinates(dims))

    def _read_polygon(self, dims: Dimensions) -> BaseGeometry:
        rings = self._read_list(lambda: self._read_coordinates(dims))
        if rings is None:
            return self._factory.create_polygon()
        return self._factory.create_polygon(rings[0], rings[1:])

    def _read_multi_point_member(self, dims: Dimensions) -> BaseGeometry:
        # both MULTIPOINT ((1 2), (3 4)) and MULTIPOINT (1 2, 3 4)
        if self._tokens.peek_is(_NUMBER):
            return self._factory.create_point(self._read_coordinate(dims))
        return self._read_point(dims)

    def _read_multi_point(self, dims: Dimensions) -> BaseGeometry:
        points = self._read_list(lambda: self._read_multi_point_member(dims))
        return self._factory.create_multi_point(points)

    def _read_multi_line_string(self, dims: Dimensions) -> BaseGeometry:
        lines = self._read_list(lambda: self._read_line_string(dims))
        return self._factory.create_multi_line_string(lines)

    def _read_multi_polygon(self, dims: Dimensions) -> BaseGeometry:
        polygons = self._read_list(lambda: self._read_polygon(dims))
        return self._factory.create_multi_polygon(polygons)

    def _read_geometry_collection(self, dims: Dimensions) -> Any:
        members = self._read_list(lambda: self.read_tagged(dims))
        return self._factory.create_geometry_collection(members)

    # Curved types

    def _read_circular_string(self, dims: Dimensions) -> CurvedGeometry:
        return self._factory.create_circular_string(self._read_coordinates(dims))

    def _read_curve(self, dims: Dimensions, allow_compound: bool) -> Any:
        """Read a curve member: bare coordinates (a LineString) or a tagged curve."""
        token = self._tokens.peek()
        if token is None:
            raise ParseError("Unexpected end of text")
        if token[1] in ("(", EMPTY):
            return self._read_line_string(dims)
        if token[1] == "CIRCULARSTRING":
            self._tokens.next()
            return self._read_circular_string(self._read_dimension_tag() or dims)
        if token[1] == "COMPOUNDCURVE":
            if not allow_compound:
                raise ParseError("CompoundCurve not allowed at this position")
            self._tokens.next()
            return self._read_compound_curve(self._read_dimension_tag() or dims)
        raise ParseError(f"Unexpected token: {token[1]}")

    def _read_compound_curve(self, dims: Dimensions) -> CurvedGeometry:
        segments = self._read_list(lambda: self._read_curve(dims, allow_compound=False))
        return self._factory.create_compound_curve(segments)

    def _read_curve_polygon(self, dims: Dimensions) -> CurvedGeometry:
        rings = self._read_list(lambda: self._read_curve(dims, allow_compound=True))
        if rings is None:
            return self._factory.create_curve_polygon()
        return self._factory.create_curve_polygon(rings[0], rings[1:])

    def _read_multi_curve(self, dims: Dimensions) -> CurvedGeometry:
        curves = self._read_list(lambda: self._read_curve(dims, allow_compound=True))
        return self._factory.create_multi_curve(curves)

    def _read_surface(self, dims: Dimensions) -> Any:
        token = self._tokens.peek()
        if token is None:
            raise ParseError("Unexpected end of text")
        if token[1] in ("(", EMPTY):
            return self._read_polygon(dims)
        if token[1] == "CURVEPOLYGON":
            self._tokens.next()
            return self._read_curve_polygon(self._read_dimension_tag() or dims)
        raise ParseError(f"Unexpected token: {token[1]}")

    def _read_multi_surface(self, dims: Dimensions) -> CurvedGeometry:
        surfaces = self._read_list(lambda: self._read_surface(dims))
        return self._factory.create_multi_surface(surfaces)


class WKTReader:
    """Parses WKT into plain Shapely and curved geometries.

    Example:
        reader = WKTReader(CurvedGeometryFactory())
        arc = reader.read("CIRCULARSTRING (0 0, 1 1, 2 0)")
    """

    def __init__(self, factory: CurvedGeometryFactory | None = None) -> None:
        """Initialize the reader.

        Args:
            factory: Factory used to build geometries; a default factory if None
        """
        self._factory = factory if factory is not None else CurvedGeometryFactory()

    @property
    def factory(self) -> CurvedGeometryFactory:
        return self._factory

    def read(self, text: str) -> Any:
        """Parse one geometry.

        Args:
            text: WKT, optionally prefixed with ``SRID=n;``

        Returns:
            A Shapely geometry, or a curved geometry when the text holds curves

        Raises:
            ParseError: If the text is malformed or describes an invalid geometry
        """
        factory = self._factory
        match = _SRID_PREFIX.match(text)
        if match is not None:
            factory = factory.with_srid(int(match.group(1)))
            text = text[match.end():]

        tokens = _TokenStream(text)
        try:
            geom = _Parser(tokens, factory).read_tagged(None)
        except GeometryConstructionError as err:
            logger.debug("WKT describes an invalid geometry: %s", err)
            raise ParseError("Invalid geometry", err) from err
        except (ValueError, GEOSException) as err:
            raise ParseError("Invalid geometry", err) from err

        if not tokens.at_end:
            raise ParseError(f"Unexpected text after geometry: {tokens.peek()[1]!r}")
        return geom


def format_number(value: float) -> str:
    """Shortest text that reads back as the same float.

    Examples:
        >>> format_number(10.0)
        '10'
        >>> format_number(7.0710678)
        '7.0710678'
    """
    if math.isnan(value):
        return "NaN"
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)


class WKTWriter:
    """Writes plain Shapely and curved geometries as WKT.

    Z and M are written when the geometry carries them, with a ``Z``,
    ``M`` or ``ZM`` tag after the top-level type name.

    Example:
        WKTWriter().write(arc)  # 'CIRCULARSTRING (0 0, 1 1, 2 0)'
    """

    def write(self, geom: Any) -> str:
        """Format a geometry.

        Args:
            geom: Shapely or curved geometry

        Returns:
            WKT text
        """
        has_z, has_m = dimensions_of(geom)
        tag = {(True, False): "Z", (False, True): "M", (True, True): "ZM"}.get((has_z, has_m))
        writer = _TextBuilder(has_z, has_m)
        body = writer.body(geom)
        name = geom.geom_type.upper()
        if tag:
            return f"{name} {tag} {body}"
        return f"{name} {body}"


class _TextBuilder:
    """Formats geometry bodies with a fixed set of ordinates."""

    def __init__(self, has_z: bool, has_m: bool) -> None:
        self._has_z = has_z
        self._has_m = has_m

    def coordinate(self, c: Coordinate) -> str:
        parts = [format_number(c.x), format_number(c.y)]
        if self._has_z:
            parts.append(format_number(c.z))
        if self._has_m:
            parts.append(format_number(c.m))
        return " ".join(parts)

    def sequence(self, coords: Any) -> str:
        if not coords:
            return EMPTY
        return "(" + ", ".join(self.coordinate(c) for c in coords) + ")"

    def plain_sequence(self, geom: BaseGeometry) -> str:
        if geom.is_empty:
            return EMPTY
        return self.sequence([Coordinate.from_sequence(c) for c in geom.coords])

    def _join(self, parts: list[str]) -> str:
        return "(" + ", ".join(parts) + ")"

    def tagged(self, geom: Any) -> str:
        return f"{geom.geom_type.upper()} {self.body(geom)}"

    def curve(self, geom: Any) -> str:
        # member of a compound curve, ring or multicurve
        if isinstance(geom, BaseGeometry):
            return self.plain_sequence(geom)
        return self.tagged(geom)

    def polygon(self, geom: BaseGeometry) -> str:
        if geom.is_empty:
            return EMPTY
        rings = [geom.exterior, *geom.interiors]
        return self._join([self.plain_sequence(r) for r in rings])

    def body(self, geom: Any) -> str:
        kind = geom.geom_type
        if geom.is_empty:
            return EMPTY
        if kind in ("Point", "LineString", "LinearRing"):
            return self.plain_sequence(geom)
        if kind == "Polygon":
            return self.polygon(geom)
        if kind in ("MultiPoint", "MultiLineString"):
            return self._join([self.plain_sequence(g) for g in geom.geoms])
        if kind == "MultiPolygon":
            return self._join([self.polygon(g) for g in geom.geoms])
        if kind == "GeometryCollection":
            return self._join([self.tagged(g) for g in geom.geoms])
        if kind == "CircularString":
            return self.sequence(geom.control_points)
        if kind == "CompoundCurve":
            return self._join([self.curve(s) for s in geom.segments])
        if kind == "CurvePolygon":
            return self._join([self.curve(r) for r in geom.rings])
        if kind == "MultiCurve":
            return self._join([self.curve(g) for g in geom.geoms])
        if kind == "MultiSurface":
            return self._join([
                self.polygon(g) if isinstance(g, BaseGeometry) else self.tagged(g)
                for g in geom.geoms
            ])
        raise TypeError(f"Cannot write geometry type {kind}")
