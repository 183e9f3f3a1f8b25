"""Core game logic: geometry, board, validation, state, and move generation."""

from .coords import *
from .board import Player, Piece, Square, Board, EMPTY, STARTING_BOARD, BAD_THROW_2, BAD_THROW_3
from .rules import Rule, IllegalMoveError
from .state import Game, StaleMoveError
from .moves import Move, LegalMove, MoveGenerator
