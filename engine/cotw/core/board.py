"""
Board representation for cotw.

A board is an immutable 49-tuple of squares indexed like coords.py. Every
operation that changes a square hands back a new Board, so a rejected
candidate move simply drops the board it produced.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Iterator, Optional
import numpy as np

from .coords import ROWS, COLS, NUM_SQUARES, Coordinate


class Player(IntEnum):
    BEIGE = 0
    BLACK = 1

    def opponent(self) -> Player:
        return Player(1 - self)


class Piece(Enum):
    CYLINDER = "cylinder"
    MESSENGER = "messenger"
    STUNNED_MESSENGER = "stunned_messenger"


_SYMBOLS = {
    Piece.CYLINDER: "C",
    Piece.MESSENGER: "M",
    Piece.STUNNED_MESSENGER: "S",
}
_PIECES_BY_SYMBOL = {symbol: piece for piece, symbol in _SYMBOLS.items()}


@dataclass(frozen=True)
class Square:
    """Either empty (both fields None) or one piece with its owner."""
    owner: Optional[Player] = None
    piece: Optional[Piece] = None

    def __post_init__(self) -> None:
        if (self.owner is None) != (self.piece is None):
            raise ValueError("a square holds both an owner and a piece, or neither")

    @classmethod
    def of(cls, owner: Player, piece: Piece) -> Square:
        return cls(owner, piece)

    @property
    def player(self) -> Optional[Player]:
        return self.owner

    def is_players(self, player: Player) -> bool:
        return self.owner is not None and self.owner == player

    def is_empty(self) -> bool:
        return self.piece is None

    def is_cylinder(self) -> bool:
        return self.piece is Piece.CYLINDER

    def is_messenger(self) -> bool:
        return self.is_unstunned_messenger() or self.is_stunned_messenger()

    def is_unstunned_messenger(self) -> bool:
        return self.piece is Piece.MESSENGER

    def is_stunned_messenger(self) -> bool:
        return self.piece is Piece.STUNNED_MESSENGER

    @property
    def symbol(self) -> str:
        """Uppercase for Beige, lowercase for Black, space when empty."""
        if self.piece is None:
            return " "
        symbol = _SYMBOLS[self.piece]
        return symbol if self.owner == Player.BEIGE else symbol.lower()

    @classmethod
    def from_symbol(cls, symbol: str) -> Square:
        if symbol in (" ", "."):
            return EMPTY
        piece = _PIECES_BY_SYMBOL.get(symbol.upper())
        if piece is None:
            raise ValueError(f"Unknown square symbol: {symbol!r}")
        owner = Player.BEIGE if symbol.isupper() else Player.BLACK
        return cls(owner, piece)

    def __repr__(self) -> str:
        if self.piece is None:
            return "Square.EMPTY"
        return f"Square({self.owner.name}, {self.piece.name})"


EMPTY = Square()


@dataclass(frozen=True)
class Board:
    """
    The 7x7 grid of squares.

    Attributes:
        squares: 49 squares, index = (y - 1) * 7 + (x - 1)
    """
    squares: tuple[Square, ...] = (EMPTY,) * NUM_SQUARES

    def __post_init__(self) -> None:
        if len(self.squares) != NUM_SQUARES:
            raise ValueError(f"a board has {NUM_SQUARES} squares, got {len(self.squares)}")

    @classmethod
    def empty(cls) -> Board:
        return cls()

    @classmethod
    def from_diagram(cls, diagram: str) -> Board:
        """
        Build a board from seven text rows, row 7 first.

        One character per square: ' ' or '.' for empty, C/M/S for Beige
        cylinder/messenger/stunned messenger, c/m/s for Black. Rows shorter
        than seven characters are padded with empty squares. A leading row
        number and the ' 1234567' header emitted by render() are accepted.
        Blank lines before the first row and after the last are ignored; a
        blank line in between is an empty row.
        """
        lines = [line for line in diagram.splitlines() if line.strip() != "1234567"]
        while lines and not lines[0].strip():
            lines.pop(0)
        while lines and not lines[-1].strip():
            lines.pop()
        if len(lines) != ROWS:
            raise ValueError(f"expected {ROWS} rows, got {len(lines)}")

        squares: list[Square] = [EMPTY] * NUM_SQUARES
        for i, line in enumerate(lines):
            y = ROWS - i
            if line[:1] == str(y):
                line = line[1:]
            if len(line) > COLS:
                raise ValueError(f"row {y} is wider than {COLS} squares: {line!r}")
            for x, symbol in enumerate(line.ljust(COLS), start=1):
                squares[Coordinate(x, y).to_index()] = Square.from_symbol(symbol)
        return cls(tuple(squares))

    def __getitem__(self, coord: Coordinate) -> Square:
        return self.squares[coord.to_index()]

    def set(self, coord: Coordinate, square: Square) -> Board:
        """Return a copy with one square replaced."""
        squares = list(self.squares)
        squares[coord.to_index()] = square
        return Board(tuple(squares))

    def move_piece(self, src: Coordinate, dst: Coordinate) -> Board:
        """Relocate whatever is at src onto dst, leaving src empty."""
        squares = list(self.squares)
        squares[dst.to_index()] = squares[src.to_index()]
        squares[src.to_index()] = EMPTY
        return Board(tuple(squares))

    def stun_if_opponents(self, at: Coordinate, player: Player) -> Board:
        """Stun the square at `at` if it is an unstunned messenger of player's opponent."""
        square = self[at]
        if square.is_unstunned_messenger() and square.is_players(player.opponent()):
            return self.set(at, Square(square.owner, Piece.STUNNED_MESSENGER))
        return self

    def un_stun(self, player: Player) -> Board:
        """Wake every stunned messenger belonging to player."""
        return Board(tuple(
            Square(player, Piece.MESSENGER)
            if square.is_stunned_messenger() and square.is_players(player)
            else square
            for square in self.squares
        ))

    def occupied(self, player: Optional[Player] = None) -> Iterator[Coordinate]:
        """Coordinates holding a piece (of player, if given), row 1 first."""
        for index, square in enumerate(self.squares):
            if square.is_empty():
                continue
            if player is None or square.is_players(player):
                yield Coordinate.from_index(index)

    def count(self, player: Player) -> int:
        """Number of squares holding one of player's pieces."""
        return sum(1 for square in self.squares if square.is_players(player))

    def piece_counts(self, player: Player) -> tuple[int, int]:
        """(cylinders, messengers in any stun state) owned by player."""
        cylinders = messengers = 0
        for square in self.squares:
            if not square.is_players(player):
                continue
            if square.is_cylinder():
                cylinders += 1
            elif square.is_messenger():
                messengers += 1
        return cylinders, messengers

    def to_planes(self, player: Player) -> np.ndarray:
        """
        Encode the board from player's perspective.

        Returns (6, 7, 7) float32 array indexed [plane, y - 1, x - 1]:
          - Plane 0: player's cylinders
          - Plane 1: player's messengers
          - Plane 2: player's stunned messengers
          - Plane 3-5: the same for the opponent
        """
        planes = np.zeros((6, ROWS, COLS), dtype=np.float32)
        order = (Piece.CYLINDER, Piece.MESSENGER, Piece.STUNNED_MESSENGER)
        for index, square in enumerate(self.squares):
            if square.is_empty():
                continue
            plane = order.index(square.piece)
            if not square.is_players(player):
                plane += 3
            planes[plane, index // COLS, index % COLS] = 1.0
        return planes

    def render(self) -> str:
        """Row 7 at the top, columns 1-7 left to right."""
        lines = [" 1234567"]
        for y in range(ROWS, 0, -1):
            row = "".join(self[Coordinate(x, y)].symbol for x in range(1, COLS + 1))
            lines.append(f"{y}{row}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"Board.from_diagram('''\n{self.render()}\n''')"


STARTING_BOARD = Board.from_diagram("""
7   C
6  MMM
5   M
4
3   m
2  mmm
1   c
""")

BAD_THROW_2 = Board.from_diagram("""
7
6 cm
5   mM
4  M M
3  MMM
2
1
""")

BAD_THROW_3 = Board.from_diagram("""
7  MMM
6 cm m
5   mM
4
3
2
1
""")
