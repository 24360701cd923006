"""
Move validator for the TicTacToe bot.
Validates that moves follow the rules.
"""

from typing import Optional, List
from dataclasses import dataclass
from .game_state import GameSession, TurnPhase


@dataclass
class ValidationResult:
    """Result of move validation."""
    is_valid: bool
    error_message: Optional[str] = None


class InvalidMove(Exception):
    """A move or action was rejected. The session is left unchanged."""

    def __init__(self, result: ValidationResult):
        super().__init__(result.error_message)
        self.result = result


class MoveValidator:
    """
    Validates human moves.

    Rules:
    1. Game must not be over
    2. It must be the human's turn
    3. Index must be on the board
    4. Can only place on empty cells
    """

    def validate_move(self, session: GameSession, index: int) -> ValidationResult:
        """
        Validate a move.

        Args:
            session: Current game session.
            index: Cell the human wants to mark.

        Returns:
            ValidationResult with is_valid and error_message.
        """
        if session.phase == TurnPhase.TERMINAL:
            return ValidationResult(
                is_valid=False,
                error_message="Game is already over!"
            )

        if session.phase != TurnPhase.HUMAN_TURN:
            return ValidationResult(
                is_valid=False,
                error_message=f"Not the human's turn (phase: {session.phase.value})"
            )

        board = session.board
        if not 0 <= index < len(board):
            return ValidationResult(
                is_valid=False,
                error_message=f"Invalid position {index}. Must be 0-{len(board) - 1}."
            )

        if not board.is_empty_cell(index):
            return ValidationResult(
                is_valid=False,
                error_message=f"Cell {index} is already occupied by {board[index].value}"
            )

        return ValidationResult(is_valid=True)

    def get_valid_moves(self, session: GameSession) -> List[int]:
        """All cells the human could mark right now."""
        if session.phase == TurnPhase.TERMINAL:
            return []
        return session.board.empty_cells()
