"""
Moves and move generation for cotw.

A Move is an unchecked candidate. A LegalMove is a Move that passed
validation against a particular game, and can only be obtained that way.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Optional

from .board import Player
from .coords import Coordinate, Direction, ONE_SQUARE, ALL_DIRECTIONS
from .state import Game

MAX_EXTRA_THROWS = 3


@dataclass(frozen=True)
class Move:
    """
    A candidate turn.

    Attributes:
        player: Who is moving
        messenger: Square of the messenger that slides
        direction: Slide direction, one or two squares
        first_throw: Direction of the mandatory throw
        extra_throws: Up to three chained throws, in order
    """
    player: Player
    messenger: Coordinate
    direction: Direction
    first_throw: Direction
    extra_throws: tuple[Direction, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.extra_throws, tuple):
            object.__setattr__(self, "extra_throws", tuple(self.extra_throws))
        if len(self.extra_throws) > MAX_EXTRA_THROWS:
            raise ValueError(
                f"at most {MAX_EXTRA_THROWS} extra throws, got {len(self.extra_throws)}"
            )

    @property
    def throws(self) -> tuple[Direction, ...]:
        return (self.first_throw,) + self.extra_throws

    @property
    def move_to(self) -> Optional[Coordinate]:
        return self.messenger + self.direction

    def extended(self, throw: Direction) -> Move:
        """Copy of this move with one more throw chained on."""
        return replace(self, extra_throws=self.extra_throws + (throw,))

    def __str__(self) -> str:
        parts = [self.messenger.to_algebraic(), self.direction.name]
        parts.extend(throw.name for throw in self.throws)
        return f"{self.player.name.lower()} {'/'.join(parts)}"


_VALIDATED = object()


class LegalMove:
    """
    A Move that the validator accepted for a specific game.

    Build it with LegalMove.from_move. It is only known to be legal for the
    position it was created against.
    """

    __slots__ = ("_move",)

    def __init__(self, move: Move, _key: object = None):
        if _key is not _VALIDATED:
            raise TypeError("LegalMove must be created with LegalMove.from_move()")
        self._move = move

    @classmethod
    def from_move(cls, game: Game, move: Move) -> Optional[LegalMove]:
        if game.attempt_move(move) is None:
            return None
        return cls(move, _VALIDATED)

    @property
    def move(self) -> Move:
        return self._move

    def to_move(self) -> Move:
        return self._move

    def __getattr__(self, name: str):
        # Forward Move fields (player, messenger, direction, ...)
        if name == "_move":
            raise AttributeError(name)
        return getattr(self._move, name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LegalMove):
            return NotImplemented
        return self._move == other._move

    def __hash__(self) -> int:
        return hash(self._move)

    def __repr__(self) -> str:
        return f"LegalMove({self._move!r})"

    def __str__(self) -> str:
        return str(self._move)


@dataclass(frozen=True)
class SeenThrow:
    """
    Fingerprint of a move's net effect.

    Chains that differ only in which interchangeable piece got thrown along
    the way end on the same fingerprint and are kept once.
    """
    messenger: Coordinate
    direction: Direction
    throw_from: Coordinate
    throw_to: Coordinate

    @classmethod
    def from_move(cls, move: Move) -> SeenThrow:
        # Only called on validated moves, so every step stays on the board
        move_to = move.messenger + move.direction
        throw_to = move_to + move.first_throw
        for throw in move.extra_throws:
            throw_to = (throw_to + throw) + throw
        return cls(
            messenger=move.messenger,
            direction=move.direction,
            throw_from=move_to - move.first_throw,
            throw_to=throw_to,
        )


class MoveGenerator:
    """Generates legal moves for a game."""

    @staticmethod
    def get_legal_moves_for(game: Game, messenger: Coordinate) -> list[LegalMove]:
        """
        Generate every legal move of the messenger on the given square.

        Moves are built up one throw at a time: all slides with one throw,
        then each survivor extended by a second throw, and so on up to four.
        A candidate whose fingerprint was already produced is dropped.
        """
        square = game.board[messenger]
        if not (square.is_unstunned_messenger() and square.is_players(game.to_move)):
            return []

        seen: set[SeenThrow] = set()

        def keep(candidates):
            kept = []
            for move in candidates:
                legal_move = LegalMove.from_move(game, move)
                if legal_move is None:
                    continue
                fingerprint = SeenThrow.from_move(move)
                if fingerprint in seen:
                    continue
                seen.add(fingerprint)
                kept.append(legal_move)
            return kept

        stage = keep(
            Move(game.to_move, messenger, direction, first_throw)
            for direction in ALL_DIRECTIONS
            for first_throw in ONE_SQUARE
        )
        moves = list(stage)

        for _ in range(MAX_EXTRA_THROWS):
            stage = keep(
                legal_move.move.extended(throw)
                for legal_move in stage
                for throw in ONE_SQUARE
            )
            moves.extend(stage)

        return moves

    @staticmethod
    def get_legal_moves(game: Game) -> list[LegalMove]:
        """Get all legal moves for the player to move."""
        moves = []
        for coord in game.board.occupied(game.to_move):
            if game.board[coord].is_unstunned_messenger():
                moves.extend(MoveGenerator.get_legal_moves_for(game, coord))
        return moves


# Convenience functions
def get_legal_moves(game: Game) -> list[LegalMove]:
    """Get all legal moves for the player to move."""
    return MoveGenerator.get_legal_moves(game)


def is_legal_move(game: Game, move: Move) -> bool:
    """Check if a move is legal."""
    return game.attempt_move(move) is not None


def get_move_count(game: Game) -> int:
    """Get number of legal moves."""
    return len(MoveGenerator.get_legal_moves(game))
