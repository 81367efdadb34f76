"""Exception types raised by the territory geometry engine."""


class TerritoryGeometryError(Exception):
    """Base class for territory geometry failures."""


class EmptyClusterError(TerritoryGeometryError, ValueError):
    """Raised when an operation that needs at least one cell receives none."""


class TraceError(TerritoryGeometryError, RuntimeError):
    """Raised inside the boundary tracer when a traced outline is unusable.

    Never escapes :meth:`BoundaryTracer.trace`; the tracer recovers with a
    bounding rectangle.
    """


class CellSetFormatError(TerritoryGeometryError, ValueError):
    """Raised when cell coordinates or territory documents cannot be parsed."""
