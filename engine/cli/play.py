#!/usr/bin/env python3
"""
Terminal driver for cotw.

Plays a scripted demo, inspects fixture positions, or applies moves given
in notation (e.g. 'd5/S/N/NE') and prints each resulting position.
"""

from __future__ import annotations
import argparse
import logging
import sys
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from cotw.core.board import Board, Player, STARTING_BOARD, BAD_THROW_2, BAD_THROW_3
from cotw.core.moves import LegalMove
from cotw.core.notation import move_to_text, text_to_move
from cotw.core.rules import rejection_reason
from cotw.core.state import Game

POSITIONS: dict[str, Board] = {
    'start': STARTING_BOARD,
    'bad-throw-2': BAD_THROW_2,
    'bad-throw-3': BAD_THROW_3,
}

# Opening played by the reference driver
DEMO_MOVES = [
    'd5/S/N/NE',
    'd2/N/S/W',
    'e6/S2/NE',
    'f7/SW/E/S',
]


def print_game(game: Game) -> None:
    print()
    print(repr(game))
    print()


def show_legal_moves(game: Game) -> None:
    """Display all legal moves, grouped by messenger."""
    moves = game.legal_moves()
    if not moves:
        print("No legal moves!")
        return

    by_messenger: dict[str, list[str]] = {}
    for legal_move in moves:
        origin = legal_move.messenger.to_algebraic()
        by_messenger.setdefault(origin, []).append(move_to_text(legal_move.move))

    print(f"{len(moves)} legal moves for {game.to_move.name.capitalize()}:")
    for origin, texts in by_messenger.items():
        print(f"  {origin} ({len(texts)}): " + ", ".join(texts))


def explain_move(game: Game, text: str) -> None:
    """Print whether a move is legal and, if not, which rule it breaks."""
    try:
        move = text_to_move(text, game.to_move)
    except ValueError as e:
        print(f"Invalid format: {text} ({e})")
        return
    err = rejection_reason(game, move)
    if err is None:
        print(f"{text}: legal")
    else:
        throw = f" at throw {err.throw}" if err.throw is not None else ""
        print(f"{text}: illegal{throw}, {err.rule.name} ({err.rule.value})")


def play_moves(game: Game, texts: list[str]) -> bool:
    """Apply moves in order, printing each position. Stops at the first illegal one."""
    for text in texts:
        try:
            move = text_to_move(text, game.to_move)
        except ValueError as e:
            print(f"Invalid format: {text} ({e})")
            return False

        legal_move = LegalMove.from_move(game, move)
        if legal_move is None:
            print(f"Illegal move: {text}")
            explain_move(game, text)
            return False

        game.make_move(legal_move)
        print(f"{game.history[-1].player.name.capitalize()} plays: {text}")
        print_game(game)
    return True


def main():
    parser = argparse.ArgumentParser(description='cotw terminal driver')
    parser.add_argument('--position', choices=sorted(POSITIONS), default='start',
                        help='Starting position')
    parser.add_argument('--to-move', choices=['beige', 'black'], default=None,
                        help='Player to move (default: beige from start, black for fixtures)')
    parser.add_argument('--demo', action='store_true', help='Play the scripted demo opening')
    parser.add_argument('--moves', nargs='*', default=[], help="Moves to play, e.g. 'd5/S/N/NE'")
    parser.add_argument('--list', action='store_true', help='List legal moves at the end')
    parser.add_argument('--explain', type=str, help='Explain why a move is (il)legal')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log every rejected rule')

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.to_move is not None:
        to_move = Player[args.to_move.upper()]
    else:
        to_move = Player.BEIGE if args.position == 'start' else Player.BLACK

    game = Game.from_position(POSITIONS[args.position], to_move)
    print_game(game)

    moves = (DEMO_MOVES if args.demo else []) + args.moves
    if not play_moves(game, moves):
        sys.exit(1)

    if args.explain:
        explain_move(game, args.explain)
    if args.list:
        show_legal_moves(game)


if __name__ == '__main__':
    main()
