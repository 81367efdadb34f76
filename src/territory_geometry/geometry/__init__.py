"""Geometry primitives: partitioning, tracing, simplification and anchors."""

from .anchors import AnchorSelector, farthest_interior_cell
from .holes import CellEdgePolygonBuilder, HoleAwarePolygonBuilder
from .partition import RegionPartitioner
from .simplify import PolygonSimplifier
from .tracing import BoundaryTracer

__all__ = [
    "AnchorSelector",
    "BoundaryTracer",
    "CellEdgePolygonBuilder",
    "HoleAwarePolygonBuilder",
    "PolygonSimplifier",
    "RegionPartitioner",
    "farthest_interior_cell",
]
