"""Label anchor placement inside a cluster."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable

from territory_geometry.errors import EmptyClusterError
from territory_geometry.grid import cell_bounds, cell_center, is_edge_cell, neighbors
from territory_geometry.models import AnchorStrategy, Cell, Vertex


def farthest_interior_cell(cells: frozenset[Cell]) -> tuple[Cell, int]:
    """Return the cell deepest inside ``cells`` and its step distance from the perimeter.

    Every cell missing an orthogonal neighbor is a perimeter seed, so cells
    next to holes count as perimeter too. Seeds enter the queue in ascending
    order; among equally deep cells the first one dequeued wins.
    """
    if not cells:
        raise EmptyClusterError("Cannot place an anchor in an empty cluster")

    edge_cells = sorted(cell for cell in cells if is_edge_cell(cell, cells))
    if not edge_cells:
        return min(cells), 0

    distances = {cell: 0 for cell in edge_cells}
    queue = deque(edge_cells)
    best, best_distance = edge_cells[0], 0
    while queue:
        current = queue.popleft()
        distance = distances[current]
        if distance > best_distance:
            best, best_distance = current, distance
        for neighbor in neighbors(current):
            if neighbor in cells and neighbor not in distances:
                distances[neighbor] = distance + 1
                queue.append(neighbor)
    return best, best_distance


class AnchorSelector:
    """Computes a label anchor for a cluster with one of the :class:`AnchorStrategy` policies."""

    def __init__(self, *, cell_size: int = 16, logger: logging.Logger | None = None) -> None:
        self.cell_size = cell_size
        self._logger = logger or logging.getLogger("territory_geometry.geometry.anchors")

    def select_anchor(
        self,
        cluster: Iterable[Cell],
        strategy: AnchorStrategy | str = AnchorStrategy.FARTHEST_INTERIOR,
        *,
        elevation: float = 0,
    ) -> Vertex:
        cells = frozenset(cluster)
        if not cells:
            raise EmptyClusterError("Cannot place an anchor in an empty cluster")

        strategy = AnchorStrategy(strategy)
        if strategy == AnchorStrategy.FIRST_CELL_CENTER:
            anchor = self.first_cell_center(cells, elevation)
        elif strategy == AnchorStrategy.HULL_CENTROID:
            anchor = self.hull_centroid(cells, elevation)
        else:
            anchor = self.farthest_interior(cells, elevation)

        self._logger.debug(
            "anchor_selected",
            extra={"strategy": strategy.value, "cell_count": len(cells), "anchor": tuple(anchor)},
        )
        return anchor

    def first_cell_center(self, cells: frozenset[Cell], elevation: float = 0) -> Vertex:
        return cell_center(min(cells), cell_size=self.cell_size, elevation=elevation)

    def hull_centroid(self, cells: frozenset[Cell], elevation: float = 0) -> Vertex:
        """Middle of the world bounding box; can land in a hole of a ring-shaped cluster."""
        min_x, min_z, max_x, max_z = cell_bounds(cells).world(self.cell_size)
        return Vertex((min_x + max_x) / 2, elevation, (min_z + max_z) / 2)

    def farthest_interior(self, cells: frozenset[Cell], elevation: float = 0) -> Vertex:
        best, _ = farthest_interior_cell(cells)
        return cell_center(best, cell_size=self.cell_size, elevation=elevation)
