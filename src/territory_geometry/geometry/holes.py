"""Hole-aware outlines built from the exposed edges of each cell.

The boundary tracer only follows the outside of a cluster. Renderers that
can draw polygons with holes plug a :class:`HoleAwarePolygonBuilder` into
the geometry service instead; :class:`CellEdgePolygonBuilder` is the
bundled implementation.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable
from typing import Protocol

from territory_geometry.errors import EmptyClusterError, TraceError
from territory_geometry.models import Cell, Polygon, PolygonWithHoles, Vertex

LatticePoint = tuple[int, int]
Edge = tuple[LatticePoint, LatticePoint]


class HoleAwarePolygonBuilder(Protocol):
    """Builds outer rings plus hole rings for one cluster."""

    def build(self, cluster: Iterable[Cell], elevation: float) -> list[PolygonWithHoles]:
        """Return outlines for ``cluster``; an empty list defers to the boundary tracer."""


class CellEdgePolygonBuilder:
    """Chains unshared cell edges into rings and separates the outer ring from holes.

    Edges are directed so that claimed cells lie on their right on a z-down
    map; outer rings then have positive signed area and holes negative. At a
    vertex where two empty cells touch diagonally the walk turns left, which
    keeps each empty region on its own ring.
    """

    def __init__(self, *, cell_size: int = 16, logger: logging.Logger | None = None) -> None:
        self.cell_size = cell_size
        self._logger = logger or logging.getLogger("territory_geometry.geometry.holes")

    def build(self, cluster: Iterable[Cell], elevation: float = 0) -> list[PolygonWithHoles]:
        cells = frozenset(Cell(*cell) for cell in cluster)
        if not cells:
            raise EmptyClusterError("Cannot build outlines for an empty cluster")

        rings = [self._to_polygon(ring, elevation) for ring in _chain_rings(_exposed_edges(cells))]
        if not rings:
            return []

        outer = max(rings, key=lambda ring: ring.signed_area())
        holes = tuple(ring for ring in rings if ring is not outer)
        self._logger.debug(
            "hole_aware_outline_built",
            extra={"cell_count": len(cells), "hole_count": len(holes), "vertex_count": len(outer)},
        )
        return [PolygonWithHoles(outer=outer, holes=holes)]

    def _to_polygon(self, ring: list[LatticePoint], elevation: float) -> Polygon:
        size = self.cell_size
        vertices = [Vertex(x * size, elevation, z * size) for x, z in ring]
        vertices.append(vertices[0])
        return Polygon(tuple(vertices))


def _exposed_edges(cells: frozenset[Cell]) -> list[Edge]:
    edges: list[Edge] = []
    for x, z in sorted(cells):
        if (x, z - 1) not in cells:
            edges.append(((x, z), (x + 1, z)))
        if (x + 1, z) not in cells:
            edges.append(((x + 1, z), (x + 1, z + 1)))
        if (x, z + 1) not in cells:
            edges.append(((x + 1, z + 1), (x, z + 1)))
        if (x - 1, z) not in cells:
            edges.append(((x, z + 1), (x, z)))
    return edges


def _chain_rings(edges: list[Edge]) -> list[list[LatticePoint]]:
    outgoing: dict[LatticePoint, list[LatticePoint]] = defaultdict(list)
    for start, end in edges:
        outgoing[start].append(end)

    used: set[Edge] = set()
    rings: list[list[LatticePoint]] = []
    for first_edge in sorted(edges):
        if first_edge in used:
            continue
        ring: list[LatticePoint] = []
        edge = first_edge
        while edge not in used:
            used.add(edge)
            ring.append(edge[0])
            edge = (edge[1], _next_vertex(edge, outgoing[edge[1]]))
        rings.append(_merge_collinear(ring))
    return rings


def _next_vertex(edge: Edge, candidates: list[LatticePoint]) -> LatticePoint:
    """Pick the continuation of ``edge``: left turn, then straight, then right."""
    if len(candidates) == 1:
        return candidates[0]
    (ax, az), (bx, bz) = edge
    dx, dz = bx - ax, bz - az
    for tx, tz in ((dz, -dx), (dx, dz), (-dz, dx)):
        target = (bx + tx, bz + tz)
        if target in candidates:
            return target
    raise TraceError(f"no continuation for edge {edge}")


def _merge_collinear(ring: list[LatticePoint]) -> list[LatticePoint]:
    count = len(ring)
    corners = []
    for index, point in enumerate(ring):
        before = ring[index - 1]
        after = ring[(index + 1) % count]
        incoming = (point[0] - before[0], point[1] - before[1])
        outgoing = (after[0] - point[0], after[1] - point[1])
        if incoming != outgoing:
            corners.append(point)
    pivot = corners.index(min(corners))
    return corners[pivot:] + corners[:pivot]
