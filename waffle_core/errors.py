from __future__ import annotations


class WaffleError(Exception):
    """Base class for every error raised by the waffle engine."""


class InvalidDimensionsError(WaffleError, ValueError):
    """Raised when a board is built with a non-positive width or height."""

    def __init__(self, width: object, height: object) -> None:
        super().__init__(f"invalid board dimensions {width}x{height}: both must be positive integers")
        self.width = width
        self.height = height


class OutOfBoundsError(WaffleError, IndexError):
    """Raised when a cell outside the waffle is read or written."""

    def __init__(self, x: int, y: int, width: int, height: int) -> None:
        super().__init__(f"cell ({x}, {y}) is outside the {width}x{height} waffle")
        self.x = x
        self.y = y


class EmptyHistoryError(WaffleError, LookupError):
    """Raised on undo/redo when there is no snapshot to restore."""
