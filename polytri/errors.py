"""Exceptions raised by the triangulation pipeline."""

from __future__ import annotations


class TriangulationError(RuntimeError):
    """Base class for every error raised by polytri."""


class CapacityError(TriangulationError):
    """An arena ran out of slots for the polygon being triangulated."""

    def __init__(self, arena: str, limit: int):
        super().__init__(f"{arena} arena exhausted (capacity={limit})")
        self.arena = arena
        self.limit = limit


class DegenerateInputError(TriangulationError, ValueError):
    """Contours violate the input contract (too short, repeated points, wrong winding)."""

    def __init__(self, message: str, contour: int | None = None):
        if contour is not None:
            message = f"contour {contour}: {message}"
        super().__init__(message)
        self.contour = contour


class StructureError(TriangulationError):
    """The trapezoidal map or query structure is not in a usable state."""


class MonotonicityError(TriangulationError):
    """A piece handed to the monotone triangulator is not y-monotone."""
