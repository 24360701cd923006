"""
AI player for the TicTacToe bot.
Uses the Minimax algorithm to choose the best move.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .game_state import Board, Mark
from .win_checker import WinChecker

log = logging.getLogger(__name__)

WIN_SCORE = 10
LOSS_SCORE = -10
DRAW_SCORE = 0


@dataclass(frozen=True)
class SearchResult:
    """The cell the search picked and the score it expects from it."""
    index: int
    score: int


class AIPlayer:
    """
    An AI that plays TicTacToe using the Minimax algorithm.

    Scores are always from the AI's point of view: +10 when its mark wins,
    -10 when the opponent's mark wins, 0 for a draw. The AI will win if
    possible, block the opponent if needed, and never lose.

    The search places marks on the board it is given and clears them again
    before returning, so the caller gets back the board it passed in.
    """

    def __init__(
        self,
        mark: Mark = Mark.X,
        win_checker: Optional[WinChecker] = None,
        use_pruning: bool = True,
        depth_weighted: bool = False,
    ):
        """
        Initialize the AI player.

        Args:
            mark: Which mark the AI places (default: X).
            win_checker: Detector to use; a 3x3 checker by default.
            use_pruning: Cut branches with alpha-beta. Never changes the
                chosen move or its score.
            depth_weighted: Prefer faster wins and slower losses. Off by
                default, so a win in 1 and a win in 5 score the same.
        """
        self.mark = mark
        self.win_checker = win_checker or WinChecker()
        self.use_pruning = use_pruning
        self.depth_weighted = depth_weighted

        # How many positions the last search visited (for debugging)
        self.nodes_evaluated = 0

    @property
    def opponent(self) -> Mark:
        return self.mark.opposite()

    def get_best_move(self, board: Board) -> SearchResult:
        """
        Get the AI's move for the current position.

        The board must have at least one empty cell.
        """
        assert not board.is_full(), "search called on a full board"
        self.nodes_evaluated = 0

        result = self.minimax(board, maximizing=True)

        log.debug(
            "AI %s evaluated %d positions. Best move: %d (score: %d)",
            self.mark.value, self.nodes_evaluated, result.index, result.score,
        )
        return result

    def minimax(self, board: Board, maximizing: bool) -> SearchResult:
        """
        Search the remaining game tree from `board`.

        Args:
            board: Position to search. Restored before returning.
            maximizing: True if the AI is to move.

        Returns:
            SearchResult with the best index (-1 at a terminal position)
            and its score.
        """
        return self._search(board, maximizing, 0, float("-inf"), float("inf"))

    def _terminal_score(self, board: Board, depth: int) -> Optional[int]:
        if self.win_checker.has_won(board, self.mark):
            return WIN_SCORE - depth if self.depth_weighted else WIN_SCORE
        if self.win_checker.has_won(board, self.opponent):
            return LOSS_SCORE + depth if self.depth_weighted else LOSS_SCORE
        if board.is_full():
            return DRAW_SCORE
        return None

    def _search(
        self,
        board: Board,
        maximizing: bool,
        depth: int,
        alpha: float,
        beta: float,
    ) -> SearchResult:
        self.nodes_evaluated += 1

        score = self._terminal_score(board, depth)
        if score is not None:
            return SearchResult(-1, score)

        mark = self.mark if maximizing else self.opponent
        best: Optional[SearchResult] = None

        for index in board.empty_cells():
            board.place(index, mark)
            try:
                child = self._search(board, not maximizing, depth + 1, alpha, beta)
            finally:
                board.clear(index)

            # Strict comparison: the lowest index wins ties
            if best is None or (
                child.score > best.score if maximizing else child.score < best.score
            ):
                best = SearchResult(index, child.score)

            if self.use_pruning:
                if maximizing:
                    alpha = max(alpha, child.score)
                else:
                    beta = min(beta, child.score)
                if beta <= alpha:
                    break  # Prune

        return best
