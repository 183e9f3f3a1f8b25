"""
Game notation for cotw (PGN-like format).

Format example:
```
[Event "Casual Game"]
[Site "?"]
[Date "2026.10.19"]
[Beige "Player 1"]
[Black "Player 2"]

1. d5/S/N/NE d2/N/S/W 2. e6/S2/NE f7/SW/E/S
```

Moves are written origin/slide/throw[/throw...]:
- origin: square of the sliding messenger ("d5")
- slide: one of the 16 direction names ("S", "NW2")
- throws: the first throw and any chained throws, unit directions only

Beige always moves first, so each numbered pair is Beige then Black.
"""

from __future__ import annotations
import re
from datetime import date
from dataclasses import dataclass, field

from .board import Player
from .coords import Coordinate, Direction
from .moves import Move, LegalMove
from .rules import IllegalMoveError, rejection_reason
from .state import Game

_TAG_PATTERN = r'\[(\w+)\s+"([^"]*)"\]'


def move_to_text(move: Move) -> str:
    """Convert a move to notation (e.g., 'd5/S/N/NE')."""
    parts = [move.messenger.to_algebraic(), move.direction.name]
    parts.extend(throw.name for throw in move.throws)
    return "/".join(parts)


def text_to_move(s: str, player: Player) -> Move:
    """Parse notation into a Move for player."""
    parts = s.strip().split("/")
    if len(parts) < 3:
        raise ValueError(f"Invalid move format: {s}")
    messenger = Coordinate.from_algebraic(parts[0])
    direction = Direction.from_name(parts[1])
    first_throw, *extra_throws = (Direction.from_name(p) for p in parts[2:])
    return Move(player, messenger, direction, first_throw, tuple(extra_throws))


@dataclass
class GameRecord:
    """Record of a game played from the starting position."""

    # Metadata (PGN-style tags)
    event: str = "cotw Game"
    site: str = "?"
    date: str = field(default_factory=lambda: date.today().strftime("%Y.%m.%d"))
    beige: str = "Player 1"
    black: str = "Player 2"

    # Move history
    moves: list[Move] = field(default_factory=list)

    @classmethod
    def from_game(cls, game: Game, **metadata) -> GameRecord:
        """
        Create a record from a game's history.

        Records always replay from the starting position, so a game set up
        with Game.from_position raises ValueError unless its history leads
        from the starting position to where it stands.
        """
        record = cls(**metadata)
        record.moves.extend(game.history)
        try:
            replayed = record.replay()
        except IllegalMoveError as err:
            raise ValueError("game did not start from the starting position") from err
        if replayed.board != game.board or replayed.to_move != game.to_move:
            raise ValueError("game did not start from the starting position")
        return record

    def to_text(self) -> str:
        """Export to PGN-like format."""
        lines = [
            f'[Event "{self.event}"]',
            f'[Site "{self.site}"]',
            f'[Date "{self.date}"]',
            f'[Beige "{self.beige}"]',
            f'[Black "{self.black}"]',
            '',
        ]

        words = []
        for i, move in enumerate(self.moves):
            if i % 2 == 0:
                words.append(f"{i // 2 + 1}.")
            words.append(move_to_text(move))

        # Word wrap at 80 chars
        current_line = ""
        for word in words:
            if current_line and len(current_line) + len(word) + 1 > 80:
                lines.append(current_line)
                current_line = word
            else:
                current_line = f"{current_line} {word}".strip()
        if current_line:
            lines.append(current_line)

        return '\n'.join(lines)

    @classmethod
    def from_text(cls, text: str) -> GameRecord:
        """Parse PGN-like format. Raises ValueError on a malformed move."""
        record = cls()

        for match in re.finditer(_TAG_PATTERN, text):
            tag, value = match.groups()
            tag_lower = tag.lower()
            if tag_lower in ('event', 'site', 'date', 'beige', 'black'):
                setattr(record, tag_lower, value)

        move_text = re.sub(_TAG_PATTERN, '', text)
        player = Player.BEIGE
        for token in move_text.split():
            # Skip move numbers like "1." or "12."
            if re.match(r'^\d+\.$', token):
                continue
            record.moves.append(text_to_move(token, player))
            player = player.opponent()

        return record

    def replay(self) -> Game:
        """
        Replay all moves from the starting position and return the game.

        Raises IllegalMoveError (a ValueError) at the first illegal move.
        """
        game = Game.new_game()
        for move in self.moves:
            legal_move = LegalMove.from_move(game, move)
            if legal_move is None:
                raise rejection_reason(game, move)
            game.make_move(legal_move)
        return game


def game_to_text(game: Game, **metadata) -> str:
    """Convert a game to PGN-like notation."""
    return GameRecord.from_game(game, **metadata).to_text()


def text_to_game(text: str) -> Game:
    """Parse PGN-like notation and return the resulting game."""
    return GameRecord.from_text(text).replay()
