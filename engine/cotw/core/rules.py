"""
Move validation for cotw.

A turn is a slide of one messenger (one or two squares) followed by a
mandatory throw and up to three chained throws. Each rule below is checked
in a fixed order; the first one that fails rejects the move with that rule
attached, so callers can tell *why* a move is illegal.
"""

from __future__ import annotations
from enum import Enum
from typing import Optional, TYPE_CHECKING
import logging

from .board import Board, Player
from .coords import Coordinate, Direction

if TYPE_CHECKING:
    from .moves import Move
    from .state import Game

logger = logging.getLogger(__name__)


class Rule(Enum):
    WRONG_PLAYER = "moving player is current player"
    NOT_OWN_PIECE = "messenger to be moved is current player's"
    NOT_UNSTUNNED_MESSENGER = "messenger to be moved is not stunned"
    SLIDE_OFF_BOARD = "messenger is not moving off the board"
    SLIDE_DESTINATION_OCCUPIED = "messenger is moving to an unoccupied square"
    SLIDE_HOPS_OCCUPIED = "messenger does not hop over occupied squares"
    THROWER_NOT_OWN_MESSENGER = "player's messenger is throwing"
    THROW_NOT_UNIT = "throw is unit length"
    THROW_SOURCE_OFF_BOARD = "messenger is throwing something on the board"
    THROW_DESTINATION_OFF_BOARD = "messenger is throwing onto the board"
    THROW_SOURCE_INELIGIBLE = "messenger is throwing their own cylinder or a messenger"
    THROW_DESTINATION_OCCUPIED = "throw destination is unoccupied"
    NO_SURROUNDING_MAJORITY = (
        "next throw requires a majority of the player's messengers "
        "surrounding the previous throw's destination"
    )
    THROWER_OFF_BOARD = "next throwing messenger is on the board"


class IllegalMoveError(ValueError):
    """
    A move broke one of the rules.

    Attributes:
        rule: The first rule the move failed
        move: The rejected move
        throw: 1-4 when the failure happened while checking that throw,
            None for the slide
    """

    def __init__(self, rule: Rule, move: Move, throw: Optional[int] = None):
        self.rule = rule
        self.move = move
        self.throw = throw
        where = f" (throw {throw})" if throw is not None else ""
        super().__init__(f"{rule.value}{where}: {move}")


def num_surrounding(board: Board, player: Player, coord: Coordinate) -> int:
    """Count player's messengers (stunned or not) on the squares around coord."""
    return sum(
        1 for neighbour in coord.neighbours()
        if board[neighbour].is_players(player) and board[neighbour].is_messenger()
    )


def check_throw(
    board: Board,
    move: Move,
    thrower: Coordinate,
    throw: Direction,
    n: int = 1,
) -> tuple[Board, Coordinate]:
    """
    Apply throw number n: the piece behind thrower lands in front of it.

    Returns the new board and the square the thrown piece landed on.
    Raises IllegalMoveError if the throw is not allowed.
    """
    player = move.player

    if not (board[thrower].is_messenger() and board[thrower].is_players(player)):
        raise IllegalMoveError(Rule.THROWER_NOT_OWN_MESSENGER, move, n)

    if not throw.is_unit:
        raise IllegalMoveError(Rule.THROW_NOT_UNIT, move, n)

    throw_from = thrower - throw
    if throw_from is None:
        raise IllegalMoveError(Rule.THROW_SOURCE_OFF_BOARD, move, n)

    throw_to = thrower + throw
    if throw_to is None:
        raise IllegalMoveError(Rule.THROW_DESTINATION_OFF_BOARD, move, n)

    thrown = board[throw_from]
    if not ((thrown.is_cylinder() and thrown.is_players(player)) or thrown.is_messenger()):
        raise IllegalMoveError(Rule.THROW_SOURCE_INELIGIBLE, move, n)

    if not board[throw_to].is_empty():
        raise IllegalMoveError(Rule.THROW_DESTINATION_OCCUPIED, move, n)

    board = board.move_piece(throw_from, throw_to).stun_if_opponents(throw_to, player)
    return board, throw_to


def validate_move(game: Game, move: Move) -> Board:
    """
    Check a move against the game and return the board it produces.

    Neither game nor its board is modified.
    Raises IllegalMoveError naming the first rule the move breaks.
    """
    board = game.board

    # Slide
    if move.player != game.to_move:
        raise IllegalMoveError(Rule.WRONG_PLAYER, move)

    if not board[move.messenger].is_players(game.to_move):
        raise IllegalMoveError(Rule.NOT_OWN_PIECE, move)

    if not board[move.messenger].is_unstunned_messenger():
        raise IllegalMoveError(Rule.NOT_UNSTUNNED_MESSENGER, move)

    move_to = move.messenger + move.direction
    if move_to is None:
        raise IllegalMoveError(Rule.SLIDE_OFF_BOARD, move)

    if not board[move_to].is_empty():
        raise IllegalMoveError(Rule.SLIDE_DESTINATION_OCCUPIED, move)

    if not move.direction.is_unit:
        # move_to is on the board, so the square in between is too
        if not board[move.messenger + move.direction.unit()].is_empty():
            raise IllegalMoveError(Rule.SLIDE_HOPS_OCCUPIED, move)

    board = board.move_piece(move.messenger, move_to)

    # Throws
    board, throw_to = check_throw(board, move, move_to, move.first_throw, 1)

    opponent = move.player.opponent()
    for n, throw in enumerate(move.extra_throws, start=2):
        mine = num_surrounding(board, move.player, throw_to)
        theirs = num_surrounding(board, opponent, throw_to)
        if mine <= theirs:
            raise IllegalMoveError(Rule.NO_SURROUNDING_MAJORITY, move, n)

        thrower = throw_to + throw
        if thrower is None:
            raise IllegalMoveError(Rule.THROWER_OFF_BOARD, move, n)

        board, throw_to = check_throw(board, move, thrower, throw, n)

    return board


def rejection_reason(game: Game, move: Move) -> Optional[IllegalMoveError]:
    """Return why move is illegal, or None if it is legal."""
    try:
        validate_move(game, move)
    except IllegalMoveError as err:
        return err
    return None


def attempt_move(game: Game, move: Move) -> Optional[Board]:
    """Return the board move produces, or None if it is illegal."""
    try:
        return validate_move(game, move)
    except IllegalMoveError as err:
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("rejected move on %r: %s\n%s", err.rule.value, move, game.board)
        return None
