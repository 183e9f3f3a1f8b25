"""
Game state for cotw.

Holds the board and whose turn it is. Committing a LegalMove is the only
way the state changes.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING
import logging
import numpy as np

from .board import Board, Player, STARTING_BOARD
from .coords import Coordinate, ROWS, COLS
from . import rules

if TYPE_CHECKING:
    from .moves import Move, LegalMove

logger = logging.getLogger(__name__)


class StaleMoveError(RuntimeError):
    """A LegalMove was committed against a position it is no longer legal in."""


@dataclass
class Game:
    """
    Represents the complete state of a game.

    Attributes:
        board: Current position
        to_move: Player whose turn it is
        ply: Number of committed moves
        history: Moves committed so far, oldest first
    """
    board: Board = STARTING_BOARD
    to_move: Player = Player.BEIGE
    ply: int = 0
    history: list = field(default_factory=list)

    @classmethod
    def new_game(cls) -> Game:
        """Create a new game in the starting position."""
        return cls()

    @classmethod
    def from_position(cls, board: Board, to_move: Player) -> Game:
        """Start from an arbitrary position, e.g. a puzzle or test fixture."""
        return cls(board=board, to_move=to_move)

    def attempt_move(self, move: Move) -> Optional[Board]:
        """Return the board move would produce, or None if it is illegal."""
        return rules.attempt_move(self, move)

    def check_move(self, move: Move) -> Board:
        """Like attempt_move, but raises IllegalMoveError naming the broken rule."""
        return rules.validate_move(self, move)

    def legal_moves(self) -> list[LegalMove]:
        from .moves import MoveGenerator
        return MoveGenerator.get_legal_moves(self)

    def legal_moves_for(self, messenger: Coordinate) -> list[LegalMove]:
        from .moves import MoveGenerator
        return MoveGenerator.get_legal_moves_for(self, messenger)

    def make_move(self, legal_move: LegalMove) -> None:
        """
        Commit a move. Modifies state in-place.

        The mover's stunned messengers wake up once the move is done, then
        the turn passes to the opponent.
        """
        move = legal_move.move
        try:
            board = rules.validate_move(self, move)
        except rules.IllegalMoveError as err:
            raise StaleMoveError(
                f"committed move is no longer legal ({err.rule.value}): {move}"
            ) from err

        self.board = board.un_stun(self.to_move)
        self.history.append(move)
        self.to_move = self.to_move.opponent()
        self.ply += 1
        logger.info("ply %d: %s", self.ply, move)

    def copy(self) -> Game:
        """Create a copy with its own history list. Boards are immutable and shared."""
        return Game(
            board=self.board,
            to_move=self.to_move,
            ply=self.ply,
            history=list(self.history),
        )

    def to_tensor(self) -> np.ndarray:
        """
        Convert state to a numeric array.

        Returns (7, 7, 7) float32 array:
          - Planes 0-5: Board.to_planes from the mover's perspective
          - Plane 6: Player to move indicator (all 1s if Beige, all 0s if Black)
        """
        planes = np.zeros((7, ROWS, COLS), dtype=np.float32)
        planes[:6] = self.board.to_planes(self.to_move)
        if self.to_move == Player.BEIGE:
            planes[6, :, :] = 1.0
        return planes

    def __repr__(self) -> str:
        return f"{self.board.render()}\n\n{self.to_move.name.capitalize()} to move (ply {self.ply})"
