"""Facade that turns a territory's cells into outlines and label anchors."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from territory_geometry.geometry import (
    AnchorSelector,
    BoundaryTracer,
    HoleAwarePolygonBuilder,
    PolygonSimplifier,
    RegionPartitioner,
)
from territory_geometry.models import AnchorStrategy, Cell, Cluster, GeometryResult

if TYPE_CHECKING:
    from territory_geometry.config import Settings
    from territory_geometry.territories import Territory


class TerritoryGeometryService:
    """Partitions cells, outlines each cluster and places its label anchor.

    Holds no state between calls: identical inputs produce identical
    results, largest cluster first.
    """

    def __init__(
        self,
        *,
        partitioner: RegionPartitioner | None = None,
        tracer: BoundaryTracer | None = None,
        anchor_selector: AnchorSelector | None = None,
        hole_builder: HoleAwarePolygonBuilder | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._partitioner = partitioner or RegionPartitioner()
        self._tracer = tracer or BoundaryTracer()
        self._anchor_selector = anchor_selector or AnchorSelector(cell_size=self._tracer.cell_size)
        self._hole_builder = hole_builder
        self._logger = logger or logging.getLogger("territory_geometry.service")

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        hole_builder: HoleAwarePolygonBuilder | None = None,
        logger: logging.Logger | None = None,
    ) -> TerritoryGeometryService:
        simplifier = PolygonSimplifier(
            distance_tolerance=settings.simplify_distance,
            area_tolerance=settings.simplify_area,
        )
        tracer = BoundaryTracer(
            cell_size=settings.cell_size,
            subdivisions=settings.subdivisions,
            max_points=settings.trace_max_points,
            simplifier=simplifier,
        )
        return cls(
            partitioner=RegionPartitioner(),
            tracer=tracer,
            anchor_selector=AnchorSelector(cell_size=settings.cell_size),
            hole_builder=hole_builder,
            logger=logger,
        )

    def compute_geometry(
        self,
        cells: Iterable[Cell],
        elevation: float = 0,
        anchor_strategy: AnchorStrategy | str = AnchorStrategy.FARTHEST_INTERIOR,
    ) -> list[GeometryResult]:
        strategy = AnchorStrategy(anchor_strategy)
        clusters = self._partitioner.partition(cells)
        results: list[GeometryResult] = []
        for cluster in clusters:
            results.extend(self._cluster_geometry(cluster, elevation, strategy))

        self._logger.debug(
            "territory_geometry_computed",
            extra={
                "cluster_count": len(clusters),
                "result_count": len(results),
                "vertex_counts": [len(result.polygon) for result in results],
            },
        )
        return results

    def compute_territory(
        self,
        territory: Territory,
        *,
        elevation: float = 0,
        anchor_strategy: AnchorStrategy | str = AnchorStrategy.FARTHEST_INTERIOR,
    ) -> list[GeometryResult]:
        return self.compute_geometry(territory.cells, elevation=elevation, anchor_strategy=anchor_strategy)

    def _cluster_geometry(
        self,
        cluster: Cluster,
        elevation: float,
        strategy: AnchorStrategy,
    ) -> list[GeometryResult]:
        anchor = self._anchor_selector.select_anchor(cluster, strategy, elevation=elevation)

        if self._hole_builder is not None:
            try:
                outlines = self._hole_builder.build(cluster, elevation)
            except Exception:  # noqa: BLE001
                self._logger.exception("hole_builder_failed", extra={"cell_count": len(cluster)})
                outlines = []
            if outlines:
                return [
                    GeometryResult(
                        polygon=outline.outer,
                        anchor=anchor,
                        cluster_size=len(cluster),
                        holes=outline.holes,
                        cluster=cluster,
                    )
                    for outline in outlines
                ]

        polygon = self._tracer.trace(cluster, elevation)
        return [GeometryResult(polygon=polygon, anchor=anchor, cluster_size=len(cluster), cluster=cluster)]
