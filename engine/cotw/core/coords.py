"""
Board geometry for cotw.

Board layout (7 rows x 7 cols = 49 squares), coordinates are 1-based (x, y):

  7 | 42 43 44 45 46 47 48
  6 | 35 36 37 38 39 40 41
  5 | 28 29 30 31 32 33 34
  4 | 21 22 23 24 25 26 27
  3 | 14 15 16 17 18 19 20
  2 |  7  8  9 10 11 12 13
  1 |  0  1  2  3  4  5  6
    +---------------------
       1  2  3  4  5  6  7
       a  b  c  d  e  f  g

Square index = (y - 1) * 7 + (x - 1)
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional

# Board dimensions
ROWS = 7
COLS = 7
NUM_SQUARES = ROWS * COLS  # 49

FILES = "abcdefg"


class OffBoardError(ValueError):
    """Raised when a coordinate falls outside the 7x7 board."""


class Direction(Enum):
    """Compass vectors a messenger can slide along or throw in.

    Values are (dx, dy). The eight unit vectors reach a neighbouring square,
    the eight doubles reach two squares away along the same bearing.
    """
    NW2 = (-2, 2)
    N2 = (0, 2)
    NE2 = (2, 2)
    NW = (-1, 1)
    N = (0, 1)
    NE = (1, 1)
    W2 = (-2, 0)
    W = (-1, 0)
    E = (1, 0)
    E2 = (2, 0)
    SW = (-1, -1)
    S = (0, -1)
    SE = (1, -1)
    SW2 = (-2, -2)
    S2 = (0, -2)
    SE2 = (2, -2)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    @property
    def is_unit(self) -> bool:
        return self.unit() is self

    def unit(self) -> Direction:
        """Reduce a double vector to its unit equivalent."""
        return Direction((_sign(self.dx), _sign(self.dy)))

    def negate(self) -> Direction:
        """The opposite bearing, keeping the length."""
        return Direction((-self.dx, -self.dy))

    def __neg__(self) -> Direction:
        return self.negate()

    @classmethod
    def from_name(cls, name: str) -> Direction:
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown direction: {name!r}") from None

    def __repr__(self) -> str:
        return f"Direction.{self.name}"


def _sign(n: int) -> int:
    return (n > 0) - (n < 0)


ONE_SQUARE: tuple[Direction, ...] = (
    Direction.NW, Direction.N, Direction.NE,
    Direction.W, Direction.E,
    Direction.SW, Direction.S, Direction.SE,
)

TWO_SQUARES: tuple[Direction, ...] = (
    Direction.NW2, Direction.N2, Direction.NE2,
    Direction.W2, Direction.E2,
    Direction.SW2, Direction.S2, Direction.SE2,
)

# Slide order used by move generation
ALL_DIRECTIONS: tuple[Direction, ...] = ONE_SQUARE + TWO_SQUARES


def is_valid_xy(x: int, y: int) -> bool:
    """Check if (x, y) is on the board."""
    return 1 <= x <= COLS and 1 <= y <= ROWS


@dataclass(frozen=True, order=True)
class Coordinate:
    """A square on the board. Always in range once constructed."""
    x: int
    y: int

    def __post_init__(self) -> None:
        for value in (self.x, self.y):
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"coordinates must be integers, got {value!r}")
        if not is_valid_xy(self.x, self.y):
            raise OffBoardError(f"{self.x},{self.y} is an invalid coordinate")

    @classmethod
    def new(cls, x: int, y: int) -> Optional[Coordinate]:
        """Like the constructor, but returns None off the board."""
        if not is_valid_xy(x, y):
            return None
        return cls(x, y)

    @classmethod
    def all(cls) -> Iterator[Coordinate]:
        """Every square, row 1 first, left to right."""
        for index in range(NUM_SQUARES):
            yield cls.from_index(index)

    @classmethod
    def from_index(cls, index: int) -> Coordinate:
        """Convert square index to a coordinate."""
        if not 0 <= index < NUM_SQUARES:
            raise OffBoardError(f"square index {index} out of range")
        return cls(index % COLS + 1, index // COLS + 1)

    def to_index(self) -> int:
        """Convert to square index."""
        return (self.y - 1) * COLS + (self.x - 1)

    @classmethod
    def from_algebraic(cls, s: str) -> Coordinate:
        """Parse algebraic notation (e.g., 'd5')."""
        s = s.strip().lower()
        if len(s) != 2 or s[0] not in FILES or not s[1].isdigit():
            raise ValueError(f"Invalid square: {s!r}")
        return cls(FILES.index(s[0]) + 1, int(s[1]))

    def to_algebraic(self) -> str:
        """Convert to algebraic notation (e.g., 'd5')."""
        return f"{FILES[self.x - 1]}{self.y}"

    def __add__(self, direction: Direction) -> Optional[Coordinate]:
        if not isinstance(direction, Direction):
            return NotImplemented
        return Coordinate.new(self.x + direction.dx, self.y + direction.dy)

    def __sub__(self, direction: Direction) -> Optional[Coordinate]:
        if not isinstance(direction, Direction):
            return NotImplemented
        return self + direction.negate()

    def neighbours(self) -> Iterator[Coordinate]:
        """The up to eight squares one unit step away."""
        for direction in ONE_SQUARE:
            coord = self + direction
            if coord is not None:
                yield coord

    def one_away(self, other: Coordinate) -> bool:
        return any(self + d == other for d in ONE_SQUARE)

    def __str__(self) -> str:
        return f"{self.x},{self.y}"
