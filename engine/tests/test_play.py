"""Tests for the terminal driver."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from cli.play import DEMO_MOVES, explain_move, play_moves
from cotw.core.state import Game


class TestExplain:
    def test_legal(self, capsys):
        explain_move(Game.new_game(), 'd5/S/N')
        assert capsys.readouterr().out.strip() == "d5/S/N: legal"

    def test_illegal_names_rule(self, capsys):
        explain_move(Game.new_game(), 'd6/S2/N')
        out = capsys.readouterr().out
        assert "illegal" in out
        assert "SLIDE_HOPS_OCCUPIED" in out

    def test_malformed_text(self, capsys):
        explain_move(Game.new_game(), 'd5/Q')
        assert capsys.readouterr().out.startswith("Invalid format: d5/Q")


class TestPlayMoves:
    def test_demo(self, capsys):
        game = Game.new_game()
        assert play_moves(game, DEMO_MOVES)
        assert game.ply == 4
        assert "Black plays: f7/SW/E/S" in capsys.readouterr().out

    def test_stops_at_illegal(self, capsys):
        game = Game.new_game()
        assert not play_moves(game, ['d5/S/N', 'd5/S/N'])
        assert game.ply == 1
        assert "Illegal move: d5/S/N" in capsys.readouterr().out
