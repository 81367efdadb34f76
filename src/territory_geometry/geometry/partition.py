"""Decomposition of a cell set into maximal 4-connected clusters."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable

from territory_geometry.grid import neighbors
from territory_geometry.models import Cell, Cluster


class RegionPartitioner:
    """Splits claimed cells into clusters connected through shared edges.

    Diagonal contact does not connect cells. Clusters come back largest
    first, ties ordered by their smallest cell, so output never depends on
    set iteration order.
    """

    def __init__(self, *, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("territory_geometry.geometry.partition")

    def partition(self, cells: Iterable[Cell]) -> list[Cluster]:
        remaining = {Cell(*cell) for cell in cells}
        clusters: list[Cluster] = []
        visited: set[Cell] = set()

        for seed in sorted(remaining):
            if seed in visited:
                continue
            visited.add(seed)
            members = [seed]
            queue = deque([seed])
            while queue:
                current = queue.popleft()
                for neighbor in neighbors(current):
                    if neighbor in remaining and neighbor not in visited:
                        visited.add(neighbor)
                        members.append(neighbor)
                        queue.append(neighbor)
            clusters.append(frozenset(members))

        clusters.sort(key=lambda cluster: (-len(cluster), min(cluster)))
        self._logger.debug(
            "clusters_partitioned",
            extra={"cell_count": len(remaining), "cluster_count": len(clusters)},
        )
        return clusters
