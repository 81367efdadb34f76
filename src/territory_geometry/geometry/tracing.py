"""Outline extraction for a single cluster of cells.

Each cell is supersampled into an ``N x N`` block of sub-cells and the
outer contour of the resulting mask is followed with Moore-neighborhood
tracing. Traced sub-cells are snapped onto the block edges that face empty
space, so the outline covers whole cells instead of stopping one sub-cell
short on the east and south sides. Anything that goes wrong ends in the
cluster's bounding rectangle.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from territory_geometry.errors import EmptyClusterError, TraceError
from territory_geometry.grid import cell_bounds
from territory_geometry.models import Cell, Polygon, Vertex

from .simplify import PolygonSimplifier

SubCell = tuple[int, int]

# N, NE, E, SE, S, SW, W, NW with north towards -z.
DIRECTIONS: tuple[SubCell, ...] = (
    (0, -1),
    (1, -1),
    (1, 0),
    (1, 1),
    (0, 1),
    (-1, 1),
    (-1, 0),
    (-1, -1),
)
NORTH = 0


class BoundaryTracer:
    """Turns a cluster into a closed world-space polygon; never fails."""

    def __init__(
        self,
        *,
        cell_size: int = 16,
        subdivisions: int = 4,
        max_points: int = 10_000,
        simplifier: PolygonSimplifier | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        if subdivisions < 2:
            raise ValueError("subdivisions must be at least 2")
        if cell_size % subdivisions:
            raise ValueError(f"cell_size {cell_size} is not divisible by subdivisions {subdivisions}")
        self.cell_size = cell_size
        self.subdivisions = subdivisions
        self.max_points = max_points
        self._sub_size = cell_size // subdivisions
        self._simplifier = simplifier or PolygonSimplifier()
        self._logger = logger or logging.getLogger("territory_geometry.geometry.tracing")

    def trace(self, cluster: Iterable[Cell], elevation: float = 0) -> Polygon:
        cells = frozenset(cluster)
        if not cells:
            raise EmptyClusterError("Cannot trace an empty cluster")

        try:
            polygon = self._trace_precise(cells, elevation)
        except TraceError as exc:
            self._logger.warning("trace_fallback", extra={"cell_count": len(cells), "reason": str(exc)})
        except Exception:  # noqa: BLE001 - tracing must always yield a polygon.
            self._logger.exception("trace_failed", extra={"cell_count": len(cells)})
        else:
            self._logger.debug(
                "boundary_traced",
                extra={"cell_count": len(cells), "vertex_count": len(polygon)},
            )
            return polygon
        return self.bounding_rectangle(cells, elevation)

    def bounding_rectangle(self, cluster: Iterable[Cell], elevation: float = 0) -> Polygon:
        """Axis-aligned rectangle around every cell: four corners plus the closing repeat."""
        min_x, min_z, max_x, max_z = cell_bounds(cluster).world(self.cell_size)
        return Polygon(
            (
                Vertex(min_x, elevation, min_z),
                Vertex(max_x, elevation, min_z),
                Vertex(max_x, elevation, max_z),
                Vertex(min_x, elevation, max_z),
                Vertex(min_x, elevation, min_z),
            )
        )

    def supersample(self, cells: Iterable[Cell]) -> set[SubCell]:
        n = self.subdivisions
        return {
            (cell[0] * n + dx, cell[1] * n + dz)
            for cell in cells
            for dx in range(n)
            for dz in range(n)
        }

    def moore_trace(self, occupied: set[SubCell], start: SubCell) -> list[SubCell]:
        """Follow the outer contour clockwise (on a z-down map) from ``start``.

        Stops on returning to ``start`` or after ``max_points`` sub-cells.
        """
        boundary: list[SubCell] = []
        current = start
        facing = NORTH
        while True:
            boundary.append(current)
            search_from = (facing + 6) % 8
            for step in range(8):
                direction = (search_from + step) % 8
                dx, dz = DIRECTIONS[direction]
                candidate = (current[0] + dx, current[1] + dz)
                if candidate in occupied:
                    current = candidate
                    facing = direction
                    break
            else:
                break

            if len(boundary) >= self.max_points:
                self._logger.warning(
                    "trace_cap_reached",
                    extra={"max_points": self.max_points, "start": start},
                )
                break
            if current == start and len(boundary) >= 2:
                break
        return boundary

    def _trace_precise(self, cells: frozenset[Cell], elevation: float) -> Polygon:
        occupied = self.supersample(cells)
        if not occupied:
            raise TraceError("no occupied sub-cell to start from")
        start = min(occupied)

        contour = self.moore_trace(occupied, start)
        ring: list[Vertex] = []
        for sub_cell in contour:
            vertex = self._snap(sub_cell, occupied, elevation)
            if not ring or ring[-1] != vertex:
                ring.append(vertex)
        while len(ring) > 1 and ring[-1] == ring[0]:
            ring.pop()
        ring.append(ring[0])

        polygon = Polygon(tuple(self._simplifier.simplify(ring)))
        if len(polygon) < 4 or not polygon.is_closed:
            raise TraceError(f"traced ring has {len(polygon)} vertices")
        if polygon.area() == 0:
            raise TraceError("traced ring encloses no area")
        return polygon

    def _snap(self, sub_cell: SubCell, occupied: set[SubCell], elevation: float) -> Vertex:
        """Place a boundary sub-cell on the corner of its block that touches empty space."""
        sx, sz = sub_cell
        west = (sx - 1, sz) in occupied
        east = (sx + 1, sz) in occupied
        north = (sx, sz - 1) in occupied
        south = (sx, sz + 1) in occupied

        if not west:
            gx = sx
        elif not east:
            gx = sx + 1
        elif (not north and (sx + 1, sz - 1) in occupied) or (not south and (sx + 1, sz + 1) in occupied):
            # concave corner on the east side of this block
            gx = sx + 1
        else:
            gx = sx

        if not north:
            gz = sz
        elif not south:
            gz = sz + 1
        elif (not west and (sx - 1, sz + 1) in occupied) or (not east and (sx + 1, sz + 1) in occupied):
            gz = sz + 1
        else:
            gz = sz

        return Vertex(gx * self._sub_size, elevation, gz * self._sub_size)
