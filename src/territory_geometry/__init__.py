"""Territory geometry engine: outlines and label anchors for claimed grid cells."""

from .models import AnchorStrategy, Cell, GeometryResult, Polygon, PolygonWithHoles, Vertex
from .service import TerritoryGeometryService

__all__ = [
    "AnchorStrategy",
    "Cell",
    "GeometryResult",
    "Polygon",
    "PolygonWithHoles",
    "TerritoryGeometryService",
    "Vertex",
]
