"""Custom exception hierarchy for tile generation."""

from typing import Optional, Tuple


class WFCError(Exception):
    """Base exception for generator failures."""


class CatalogError(WFCError):
    """Raised when the tileset cannot be parsed into a catalog."""


class ContradictionError(WFCError):
    """Raised when a cell runs out of candidate tiles."""

    def __init__(self, message: str, position: Optional[Tuple[int, int]] = None) -> None:
        super().__init__(message)
        self.position = position


class IterationBudgetError(WFCError):
    """Raised when a run exceeds its step or wall-clock budget."""


class CellStateError(WFCError):
    """Raised when a resolved-only accessor is used on an unresolved cell."""


class ValidationError(WFCError):
    """Raised when the finished grid fails its integrity checks."""
