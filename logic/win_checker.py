"""
Win checker for the TicTacToe bot.
Checks if a mark has won or if the game is a draw.
"""

from typing import Optional, List, Tuple

import numpy as np

from .game_state import Board, GameOutcome, Mark


Line = Tuple[int, ...]


def build_winning_lines(size: int = 3, win_length: Optional[int] = None) -> List[Line]:
    """
    Build every run of `win_length` cells on a `size` x `size` board.

    Lines come out as rows, then columns, then diagonals, each as a tuple
    of flat cell indices. For the 3x3 board these are the 8 classic lines.
    """
    if win_length is None:
        win_length = size
    if not 1 <= win_length <= size:
        raise ValueError(f"win_length must be between 1 and {size}, got {win_length}")

    grid = np.arange(size * size).reshape(size, size)
    span = size - win_length + 1
    lines: List[Line] = []

    # Rows, then columns (rows of the transposed grid)
    for view in (grid, grid.T):
        for row in range(size):
            for start in range(span):
                lines.append(tuple(int(i) for i in view[row, start:start + win_length]))

    # Diagonals, both directions, inside every win_length x win_length window
    for row in range(span):
        for col in range(span):
            window = grid[row:row + win_length, col:col + win_length]
            lines.append(tuple(int(i) for i in window.diagonal()))
    for row in range(span):
        for col in range(span):
            window = grid[row:row + win_length, col:col + win_length]
            lines.append(tuple(int(i) for i in np.fliplr(window).diagonal()))

    return lines


class WinChecker:
    """
    Checks for win conditions.

    Win condition: `win_length` marks of the same kind in a row
    (horizontally, vertically, or diagonally).
    """

    def __init__(self, size: int = 3, win_length: Optional[int] = None):
        self.size = size
        self.win_length = win_length if win_length is not None else size
        self.winning_lines = build_winning_lines(size, self.win_length)

    def has_won(self, board: Board, mark: Mark) -> bool:
        """True iff `mark` fills at least one winning line."""
        cells = board.cells
        return any(all(cells[i] == mark for i in line) for line in self.winning_lines)

    def check_winner(self, board: Board) -> Optional[Mark]:
        """
        Check if there's a winner.

        Returns:
            The winning Mark, or None if no winner yet.
        """
        line = self.get_winning_line(board)
        if line is None:
            return None
        return board.cells[line[0]]

    def is_draw(self, board: Board) -> bool:
        """A draw is a full board with no winner."""
        return board.is_full() and self.check_winner(board) is None

    def evaluate(self, board: Board) -> GameOutcome:
        """
        Evaluate the board.

        Returns:
            Exactly one of in-progress, win(mark) or draw.
        """
        winner = self.check_winner(board)
        if winner is not None:
            return GameOutcome.win(winner)
        if board.is_full():
            return GameOutcome.draw()
        return GameOutcome.in_progress()

    def get_winning_line(self, board: Board) -> Optional[Line]:
        """The first completed line, or None."""
        cells = board.cells
        for line in self.winning_lines:
            first = cells[line[0]]
            if first is not None and all(cells[i] == first for i in line[1:]):
                return line
        return None
