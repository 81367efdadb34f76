"""Local removal of redundant vertices from traced outlines."""

from __future__ import annotations

import math
from collections.abc import Sequence

from territory_geometry.models import Vertex


class PolygonSimplifier:
    """Drops short, collinear interior points in a single pass.

    A point goes only when it sits within ``distance_tolerance`` of both its
    input neighbors and the triangle it forms with them is thinner than
    ``area_tolerance``. Endpoints always stay, so a closed ring remains
    closed.
    """

    def __init__(self, *, distance_tolerance: float = 8.0, area_tolerance: float = 1.0) -> None:
        if distance_tolerance < 0 or area_tolerance < 0:
            raise ValueError("Simplification tolerances must be non-negative")
        self.distance_tolerance = distance_tolerance
        self.area_tolerance = area_tolerance

    def simplify(self, points: Sequence[Vertex]) -> list[Vertex]:
        if len(points) <= 3:
            return list(points)

        kept = [points[0]]
        for index in range(1, len(points) - 1):
            previous, current, following = points[index - 1], points[index], points[index + 1]
            close = (
                planar_distance(previous, current) <= self.distance_tolerance
                and planar_distance(current, following) <= self.distance_tolerance
            )
            if close and triangle_area(previous, current, following) < self.area_tolerance:
                continue
            kept.append(current)
        kept.append(points[-1])
        return kept


def planar_distance(a: Vertex, b: Vertex) -> float:
    """Distance in the x/z plane; elevation is ignored."""
    return math.hypot(a.x - b.x, a.z - b.z)


def triangle_area(a: Vertex, b: Vertex, c: Vertex) -> float:
    return abs(a.x * (b.z - c.z) + b.x * (c.z - a.z) + c.x * (a.z - b.z)) / 2.0
