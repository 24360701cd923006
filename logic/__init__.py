"""
Logic module for the TicTacToe bot.
Handles board state, rules, the minimax AI and turn sequencing.
"""

from .game_state import Board, GameOutcome, GameResult, GameSession, GameStatus, Mark, TurnPhase
from .move_validator import InvalidMove, MoveValidator, ValidationResult
from .win_checker import WinChecker
from .ai_player import AIPlayer, SearchResult
from .turn_controller import TurnController, TurnReport

__version__ = "1.0.0"
