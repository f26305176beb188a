"""
Takeoff Error Taxonomy

Distinguishable failure conditions raised by the calculation engine.
Every condition propagates unchanged to the caller; the engine never
substitutes a default for a missing reference.

- GridLineNotFound: grid label absent from the relevant axis
- LevelNotFound: level label absent
- InvalidPolygon: polygon boundary with fewer than 3 points
- UnknownBoundaryType: boundary tag other than gridRect/polygon
- InsufficientStations: too few stations for a volume method
- InvalidDimension: non-positive dimension or out-of-range factor
- ReferenceNotFound: snapshot entity references a missing id
"""

from typing import Any, List, Optional, Sequence


class TakeoffError(Exception):
    """Base class for all engine failures."""


class GridLineNotFound(TakeoffError):
    """Referenced grid label is not present in the axis array."""

    def __init__(self, labels: Sequence[str], available: Sequence[str], axis: str):
        self.labels: List[str] = list(labels)
        self.available: List[str] = list(available)
        self.axis = axis
        missing = ", ".join(self.labels)
        super().__init__(
            f"Grid line(s) not found on grid{axis}: [{missing}]. "
            f"Available grid{axis}: [{', '.join(self.available)}]"
        )

    @property
    def label(self) -> str:
        return self.labels[0] if self.labels else ""


class LevelNotFound(TakeoffError):
    """Referenced level label is not present in the level list."""

    def __init__(self, label: str, available: Sequence[str]):
        self.label = label
        self.available: List[str] = list(available)
        super().__init__(
            f"Level not found: {label}. Available levels: [{', '.join(self.available)}]"
        )


class InvalidPolygon(TakeoffError):
    """Polygon boundary has fewer than the required points."""

    def __init__(self, received: int, required: int = 3):
        self.received = received
        self.required = required
        super().__init__(
            f"Polygon must have at least {required} points (got {received})"
        )


class UnknownBoundaryType(TakeoffError):
    """Boundary tag is not one of the supported variants."""

    def __init__(self, boundary_type: Any):
        self.boundary_type = boundary_type
        super().__init__(f"Unknown boundary type: {boundary_type}")


class InsufficientStations(TakeoffError):
    """Volume method received fewer stations than its minimum."""

    def __init__(self, method: str, received: int, required: int):
        self.method = method
        self.received = received
        self.required = required
        super().__init__(
            f"At least {required} stations are required for {method} (got {received})"
        )


class InvalidDimension(TakeoffError):
    """Dimension, factor or parameter outside its valid range."""

    def __init__(self, field: str, value: Any, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field} = {value!r}: {reason}")


class ReferenceNotFound(TakeoffError):
    """An assignment or instance points at an id missing from the snapshot."""

    def __init__(self, kind: str, ref_id: str, owner_id: Optional[str] = None):
        self.kind = kind
        self.ref_id = ref_id
        self.owner_id = owner_id
        owner = f" (referenced by {owner_id})" if owner_id else ""
        super().__init__(f"{kind} not found: {ref_id}{owner}")
