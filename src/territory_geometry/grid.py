"""Set operations over claimed grid cells."""

from __future__ import annotations

from collections.abc import Collection, Iterable

from .errors import CellSetFormatError, EmptyClusterError
from .models import Cell, CellBounds, Vertex

# East, west, south, north.
NEIGHBOR_OFFSETS: tuple[tuple[int, int], ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))


def neighbors(cell: Cell) -> tuple[Cell, ...]:
    """Return the four orthogonal neighbors of ``cell``."""
    return tuple(Cell(cell.x + dx, cell.z + dz) for dx, dz in NEIGHBOR_OFFSETS)


def is_edge_cell(cell: Cell, cells: Collection[Cell]) -> bool:
    """True when at least one orthogonal neighbor is missing from ``cells``."""
    return any(neighbor not in cells for neighbor in neighbors(cell))


def cell_bounds(cells: Iterable[Cell]) -> CellBounds:
    xs: list[int] = []
    zs: list[int] = []
    for cell in cells:
        xs.append(cell[0])
        zs.append(cell[1])
    if not xs:
        raise EmptyClusterError("Cannot compute bounds of an empty cell set")
    return CellBounds(min(xs), min(zs), max(xs), max(zs))


def cell_center(cell: Cell, *, cell_size: int, elevation: float) -> Vertex:
    half = cell_size / 2
    return Vertex(cell[0] * cell_size + half, elevation, cell[1] * cell_size + half)


def to_cells(raw: Iterable[object]) -> frozenset[Cell]:
    """Normalize an iterable of ``(x, z)`` pairs into a frozen cell set.

    Accepts tuples, lists or :class:`Cell` values. Booleans and non-integral
    numbers are rejected rather than silently truncated.
    """
    cells: set[Cell] = set()
    for index, item in enumerate(raw):
        if not isinstance(item, (tuple, list)) or len(item) != 2:
            raise CellSetFormatError(f"Cell #{index} must be an [x, z] pair, got {item!r}")
        x, z = item
        if not _is_int(x) or not _is_int(z):
            raise CellSetFormatError(f"Cell #{index} must use integer coordinates, got {item!r}")
        cells.add(Cell(int(x), int(z)))
    return frozenset(cells)


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
