from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, NamedTuple


class Cell(NamedTuple):
    """One claimed grid unit, ordered by ``x`` then ``z``."""

    x: int
    z: int


class Vertex(NamedTuple):
    """World-space point; ``y`` is the caller supplied elevation."""

    x: float
    y: float
    z: float


Cluster = frozenset[Cell]


class AnchorStrategy(str, Enum):
    """Placement policies for a cluster's label anchor."""

    FARTHEST_INTERIOR = "farthest_interior"
    HULL_CENTROID = "hull_centroid"
    FIRST_CELL_CENTER = "first_cell_center"


@dataclass(frozen=True, slots=True)
class CellBounds:
    """Inclusive cell-coordinate bounds of a cell set."""

    min_x: int
    min_z: int
    max_x: int
    max_z: int

    def world(self, cell_size: int) -> tuple[int, int, int, int]:
        """Return ``(min_x, min_z, max_x, max_z)`` in world units covering every cell."""
        return (
            self.min_x * cell_size,
            self.min_z * cell_size,
            (self.max_x + 1) * cell_size,
            (self.max_z + 1) * cell_size,
        )

    @property
    def width(self) -> int:
        return self.max_x - self.min_x + 1

    @property
    def depth(self) -> int:
        return self.max_z - self.min_z + 1


@dataclass(frozen=True, slots=True)
class Polygon:
    """Closed ring of vertices; the first vertex is repeated as the last one."""

    vertices: tuple[Vertex, ...]

    def __len__(self) -> int:
        return len(self.vertices)

    def __iter__(self) -> Iterator[Vertex]:
        return iter(self.vertices)

    def __getitem__(self, index: int) -> Vertex:
        return self.vertices[index]

    @property
    def is_closed(self) -> bool:
        return len(self.vertices) >= 2 and self.vertices[0] == self.vertices[-1]

    def signed_area(self) -> float:
        """Shoelace area in the x/z plane.

        Positive when the ring runs clockwise on a z-down map, which is the
        orientation of traced outer boundaries.
        """
        area = 0.0
        points = self.vertices
        for current, following in zip(points, points[1:]):
            area += current.x * following.z - following.x * current.z
        return area / 2.0

    def area(self) -> float:
        return abs(self.signed_area())


@dataclass(frozen=True, slots=True)
class PolygonWithHoles:
    """Outer ring plus zero or more hole rings."""

    outer: Polygon
    holes: tuple[Polygon, ...] = ()


@dataclass(frozen=True, slots=True)
class GeometryResult:
    """Outline, label anchor and source size for one cluster of a territory."""

    polygon: Polygon
    anchor: Vertex
    cluster_size: int
    holes: tuple[Polygon, ...] = ()
    cluster: Cluster = field(default_factory=frozenset, repr=False)
