"""Tests for squares, boards, and the stun lifecycle primitives."""

import numpy as np
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from cotw.core.board import (
    Board, Square, Piece, Player, EMPTY,
    STARTING_BOARD, BAD_THROW_2, BAD_THROW_3,
)
from cotw.core.coords import Coordinate


def C(x, y):
    return Coordinate(x, y)


class TestPlayer:
    def test_opponent(self):
        assert Player.BEIGE.opponent() is Player.BLACK
        assert Player.BLACK.opponent() is Player.BEIGE


class TestSquare:
    def test_empty(self):
        assert EMPTY.is_empty()
        assert EMPTY.player is None
        assert not EMPTY.is_players(Player.BEIGE)
        assert not EMPTY.is_players(Player.BLACK)
        assert not EMPTY.is_messenger()
        assert not EMPTY.is_cylinder()

    def test_predicates(self):
        cylinder = Square.of(Player.BEIGE, Piece.CYLINDER)
        messenger = Square.of(Player.BLACK, Piece.MESSENGER)
        stunned = Square.of(Player.BLACK, Piece.STUNNED_MESSENGER)

        assert cylinder.is_cylinder() and not cylinder.is_messenger()
        assert cylinder.is_players(Player.BEIGE)

        assert messenger.is_messenger()
        assert messenger.is_unstunned_messenger()
        assert not messenger.is_stunned_messenger()

        assert stunned.is_messenger()
        assert stunned.is_stunned_messenger()
        assert not stunned.is_unstunned_messenger()
        assert stunned.player is Player.BLACK

    def test_half_filled_square_rejected(self):
        with pytest.raises(ValueError):
            Square(Player.BEIGE, None)
        with pytest.raises(ValueError):
            Square(None, Piece.MESSENGER)

    def test_symbols(self):
        assert EMPTY.symbol == ' '
        assert Square.of(Player.BEIGE, Piece.CYLINDER).symbol == 'C'
        assert Square.of(Player.BEIGE, Piece.STUNNED_MESSENGER).symbol == 'S'
        assert Square.of(Player.BLACK, Piece.MESSENGER).symbol == 'm'
        for symbol in "CMScms":
            assert Square.from_symbol(symbol).symbol == symbol
        with pytest.raises(ValueError):
            Square.from_symbol('x')


class TestFixtures:
    def test_starting_board(self):
        board = STARTING_BOARD
        assert board[C(4, 7)] == Square.of(Player.BEIGE, Piece.CYLINDER)
        for x in (3, 4, 5):
            assert board[C(x, 6)] == Square.of(Player.BEIGE, Piece.MESSENGER)
            assert board[C(x, 2)] == Square.of(Player.BLACK, Piece.MESSENGER)
        assert board[C(4, 5)] == Square.of(Player.BEIGE, Piece.MESSENGER)
        assert board[C(4, 3)] == Square.of(Player.BLACK, Piece.MESSENGER)
        assert board[C(4, 1)] == Square.of(Player.BLACK, Piece.CYLINDER)
        assert board.piece_counts(Player.BEIGE) == (1, 4)
        assert board.piece_counts(Player.BLACK) == (1, 4)
        assert len(list(board.occupied())) == 10

    def test_bad_throw_2(self):
        board = BAD_THROW_2
        assert board[C(2, 6)] == Square.of(Player.BLACK, Piece.CYLINDER)
        assert board[C(3, 6)] == Square.of(Player.BLACK, Piece.MESSENGER)
        assert board[C(4, 5)] == Square.of(Player.BLACK, Piece.MESSENGER)
        assert board[C(5, 5)] == Square.of(Player.BEIGE, Piece.MESSENGER)
        assert board.piece_counts(Player.BLACK) == (1, 2)
        assert board.piece_counts(Player.BEIGE) == (0, 6)

    def test_bad_throw_3(self):
        board = BAD_THROW_3
        for x in (3, 4, 5):
            assert board[C(x, 7)] == Square.of(Player.BEIGE, Piece.MESSENGER)
        assert board[C(5, 6)] == Square.of(Player.BLACK, Piece.MESSENGER)
        assert board.piece_counts(Player.BLACK) == (1, 3)
        assert board.piece_counts(Player.BEIGE) == (0, 4)


class TestDiagram:
    def test_render(self):
        lines = STARTING_BOARD.render().splitlines()
        assert lines[0] == " 1234567"
        assert lines[1] == "7   C   "
        assert lines[2] == "6  MMM  "
        assert lines[7] == "1   c   "

    def test_render_roundtrip(self):
        for board in (STARTING_BOARD, BAD_THROW_2, BAD_THROW_3):
            assert Board.from_diagram(board.render()) == board

    def test_dots_are_empty(self):
        board = Board.from_diagram("\n".join([".......", ".s", ".", ".", ".", ".", "."]))
        assert board[C(2, 6)] == Square.of(Player.BLACK, Piece.STUNNED_MESSENGER)
        assert board.count(Player.BLACK) == 1
        assert board.count(Player.BEIGE) == 0

    def test_blank_rows_between_are_empty(self):
        diagram = "\n".join(["   C", "  MMM", "", "       ", "", "  mmm", "   c"])
        board = Board.from_diagram("\n" + diagram + "\n\n")
        assert board[C(4, 7)] == Square.of(Player.BEIGE, Piece.CYLINDER)
        assert board[C(4, 1)] == Square.of(Player.BLACK, Piece.CYLINDER)
        assert board.piece_counts(Player.BEIGE) == (1, 3)
        assert board.piece_counts(Player.BLACK) == (1, 3)
        assert all(c.y >= 6 for c in board.occupied(Player.BEIGE))
        assert all(c.y <= 2 for c in board.occupied(Player.BLACK))

    def test_wrong_row_count(self):
        with pytest.raises(ValueError):
            Board.from_diagram("M\nm\n")

    def test_row_too_wide(self):
        with pytest.raises(ValueError):
            Board.from_diagram("\n".join(["MMMMMMMM"] + ["."] * 6))


class TestBoardOperations:
    def test_move_piece(self):
        board = STARTING_BOARD.move_piece(C(4, 5), C(4, 4))
        assert board[C(4, 5)].is_empty()
        assert board[C(4, 4)] == Square.of(Player.BEIGE, Piece.MESSENGER)
        # Original untouched
        assert STARTING_BOARD[C(4, 5)].is_unstunned_messenger()
        assert STARTING_BOARD[C(4, 4)].is_empty()

    def test_set(self):
        square = Square.of(Player.BLACK, Piece.CYLINDER)
        board = Board.empty().set(C(1, 1), square)
        assert board[C(1, 1)] == square
        assert Board.empty()[C(1, 1)].is_empty()

    def test_stun_if_opponents(self):
        board = STARTING_BOARD.stun_if_opponents(C(4, 3), Player.BEIGE)
        assert board[C(4, 3)] == Square.of(Player.BLACK, Piece.STUNNED_MESSENGER)
        assert STARTING_BOARD[C(4, 3)].is_unstunned_messenger()

    def test_stun_ignores_own_and_others(self):
        # Own messenger, cylinder, empty square
        assert STARTING_BOARD.stun_if_opponents(C(4, 5), Player.BEIGE) is STARTING_BOARD
        assert STARTING_BOARD.stun_if_opponents(C(4, 1), Player.BEIGE) is STARTING_BOARD
        assert STARTING_BOARD.stun_if_opponents(C(1, 1), Player.BEIGE) is STARTING_BOARD

    def test_stun_already_stunned_unchanged(self):
        board = STARTING_BOARD.stun_if_opponents(C(4, 3), Player.BEIGE)
        assert board.stun_if_opponents(C(4, 3), Player.BEIGE) is board

    def test_un_stun_only_players(self):
        board = Board.from_diagram("""
7 S
6 s
5
4
3
2
1
""")
        woken = board.un_stun(Player.BEIGE)
        assert woken[C(2, 7)] == Square.of(Player.BEIGE, Piece.MESSENGER)
        assert woken[C(2, 6)] == Square.of(Player.BLACK, Piece.STUNNED_MESSENGER)

        woken = board.un_stun(Player.BLACK)
        assert woken[C(2, 7)] == Square.of(Player.BEIGE, Piece.STUNNED_MESSENGER)
        assert woken[C(2, 6)] == Square.of(Player.BLACK, Piece.MESSENGER)

    def test_boards_hashable(self):
        assert hash(STARTING_BOARD) == hash(Board.from_diagram(STARTING_BOARD.render()))
        assert len({STARTING_BOARD, BAD_THROW_2, BAD_THROW_3, STARTING_BOARD}) == 3


class TestPlanes:
    def test_shape_and_counts(self):
        planes = STARTING_BOARD.to_planes(Player.BEIGE)
        assert planes.shape == (6, 7, 7)
        assert planes.dtype == np.float32
        assert planes[0].sum() == 1  # own cylinder
        assert planes[1].sum() == 4  # own messengers
        assert planes[2].sum() == 0
        assert planes[3].sum() == 1
        assert planes[4].sum() == 4

    def test_indexing(self):
        planes = STARTING_BOARD.to_planes(Player.BLACK)
        # Black cylinder at (4,1) is plane 0 from Black's perspective
        assert planes[0, 0, 3] == 1.0
        # Beige cylinder at (4,7) is the opponent plane
        assert planes[3, 6, 3] == 1.0
