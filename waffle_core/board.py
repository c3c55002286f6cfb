from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from .errors import InvalidDimensionsError, OutOfBoundsError

Coord = Tuple[int, int]  # (x, y): column, row

DEFAULT_WIDTH = 6
DEFAULT_HEIGHT = 4
POISON: Coord = (0, 0)


class Cell(Enum):
    CLEAN = "clean"
    EATEN = "eaten"
    POISONED = "poisoned"


def _check_dimensions(width: object, height: object) -> None:
    for v in (width, height):
        if isinstance(v, bool) or not isinstance(v, int) or v <= 0:
            raise InvalidDimensionsError(width, height)


@dataclass(eq=True)
class Board:
    """The waffle: a width x height grid of cells with the poison at (0, 0)."""
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    cells: List[Cell] = field(default_factory=list)  # row-major, length == width * height

    def __post_init__(self) -> None:
        _check_dimensions(self.width, self.height)
        if not self.cells:
            self.cells = [Cell.CLEAN] * (self.width * self.height)
            self.cells[self.index(*POISON)] = Cell.POISONED
        elif len(self.cells) != self.width * self.height:
            raise ValueError(
                f"expected {self.width * self.height} cells for a {self.width}x{self.height} board, got {len(self.cells)}"
            )
        else:
            self.cells = [Cell(c) for c in self.cells]

    def index(self, x: int, y: int) -> int:
        """Calculates the 1D index for a given column and row."""
        return y * self.width + x

    def is_in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def _require(self, x: int, y: int) -> None:
        if not self.is_in_bounds(x, y):
            raise OutOfBoundsError(x, y, self.width, self.height)

    def get_cell(self, x: int, y: int) -> Cell:
        self._require(x, y)
        return self.cells[self.index(x, y)]

    def set_cell(self, x: int, y: int, value: Cell) -> None:
        """Overwrites a cell. No game rule is checked here."""
        self._require(x, y)
        self.cells[self.index(x, y)] = Cell(value)

    def eat(self, x: int, y: int) -> bool:
        """Eats (x, y) and every cell below and to the right of it.

        Returns False without touching the board when (x, y) is not clean.
        """
        if self.get_cell(x, y) is not Cell.CLEAN:
            return False
        for j in range(y, self.height):
            for i in range(x, self.width):
                self.cells[self.index(i, j)] = Cell.EATEN
        return True

    def copy(self) -> 'Board':
        return Board(self.width, self.height, list(self.cells))

    def coords(self) -> Iterable[Coord]:
        """Iterates over all coordinates on the board, row by row."""
        for y in range(self.height):
            for x in range(self.width):
                yield (x, y)

    def clean_cells(self) -> List[Coord]:
        """All coordinates that can still be played."""
        return [(x, y) for (x, y) in self.coords() if self.cells[self.index(x, y)] is Cell.CLEAN]

    def pretty(self, highlight: Optional[Coord] = None) -> str:
        """Generates a human-readable string representation of the waffle."""
        symbols = {Cell.CLEAN: "#", Cell.EATEN: ".", Cell.POISONED: "X"}
        lines: List[str] = ["   " + " ".join(str(x % 10) for x in range(self.width))]
        for y in range(self.height):
            row: List[str] = []
            for x in range(self.width):
                if highlight == (x, y):
                    row.append("@")
                else:
                    row.append(symbols[self.cells[self.index(x, y)]])
            lines.append(f"{y:>2} " + " ".join(row))
        return "\n".join(lines)
