import pytest

from territory_geometry.errors import EmptyClusterError
from territory_geometry.geometry import CellEdgePolygonBuilder
from territory_geometry.models import Vertex


def _ring(*points: tuple[float, float], y: float = 0) -> tuple[Vertex, ...]:
    return tuple(Vertex(x, y, z) for x, z in points)


def test_single_cell_has_no_holes() -> None:
    outlines = CellEdgePolygonBuilder().build({(0, 0)}, elevation=70)

    assert len(outlines) == 1
    assert outlines[0].outer.vertices == _ring((0, 0), (16, 0), (16, 16), (0, 16), (0, 0), y=70)
    assert outlines[0].holes == ()


def test_ring_yields_outer_boundary_and_one_hole() -> None:
    ring = {(x, z) for x in range(3) for z in range(3)} - {(1, 1)}

    [outline] = CellEdgePolygonBuilder().build(ring, elevation=0)

    assert outline.outer.vertices == _ring((0, 0), (48, 0), (48, 48), (0, 48), (0, 0))
    assert [hole.vertices for hole in outline.holes] == [_ring((16, 16), (16, 32), (32, 32), (32, 16), (16, 16))]
    assert outline.outer.signed_area() > 0
    assert outline.holes[0].signed_area() < 0


def test_l_shape_outline_matches_cell_edges() -> None:
    [outline] = CellEdgePolygonBuilder().build({(0, 0), (1, 0), (0, 1)})

    assert outline.outer.vertices == _ring((0, 0), (32, 0), (32, 16), (16, 16), (16, 32), (0, 32), (0, 0))


def test_diagonally_touching_holes_stay_separate() -> None:
    block = {(x, z) for x in range(4) for z in range(4)}
    cells = block - {(1, 1), (2, 2)}

    [outline] = CellEdgePolygonBuilder().build(cells)

    assert len(outline.holes) == 2
    assert sorted(hole.area() for hole in outline.holes) == [256.0, 256.0]
    assert outline.outer.area() == 16 * 256


def test_empty_cluster_is_rejected() -> None:
    with pytest.raises(EmptyClusterError):
        CellEdgePolygonBuilder().build(set())
