"""Exception hierarchy for curvedgeom."""


class CurvedGeometryError(Exception):
    """Base exception for all curvedgeom errors."""

    pass


class GeometryConstructionError(CurvedGeometryError, ValueError):
    """A geometry could not be built because its input breaks an invariant."""

    pass


class ControlPointCountError(GeometryConstructionError):
    """Control point sequence has the wrong length."""

    def __init__(self, count: int) -> None:
        self.count = count
        super().__init__(
            f"Invalid number of control points: {count} "
            "(must be 0, or odd and at least 3)"
        )


class InvalidSegmentError(GeometryConstructionError):
    """A compound curve segment is missing, empty or of an unsupported type."""

    def __init__(self, index: int, reason: str) -> None:
        self.index = index
        self.reason = reason
        super().__init__(f"Invalid segment at index {index}: {reason}")


class SegmentAdjacencyError(GeometryConstructionError):
    """Consecutive compound curve segments do not share an endpoint."""

    def __init__(self, index: int, gap: float) -> None:
        self.index = index
        self.gap = gap
        super().__init__(
            f"Geometries are not in a sequence: segment {index} starts {gap:g} "
            "away from the end of the previous segment"
        )


class RingError(GeometryConstructionError):
    """A curve polygon ring is not closed and simple, or is misplaced."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class MemberTypeError(GeometryConstructionError):
    """A collection member lacks the capability the collection requires."""

    def __init__(self, collection: str, member: str) -> None:
        self.collection = collection
        self.member = member
        super().__init__(f"{collection} cannot contain a {member}")


class ArcIndexError(CurvedGeometryError, IndexError):
    """Requested arc does not exist."""

    def __init__(self, index: int, num_arcs: int) -> None:
        self.index = index
        self.num_arcs = num_arcs
        super().__init__(f"Arc index {index} out of range: must be less than {num_arcs}")


class ToleranceError(CurvedGeometryError, ValueError):
    """An arc segment length or other tolerance is out of range."""

    def __init__(self, name: str, value: float) -> None:
        self.name = name
        self.value = value
        super().__init__(f"'{name}' must not be negative, got {value!r}")


class ParseError(CurvedGeometryError):
    """Malformed WKT or WKB input."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.cause = cause
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
