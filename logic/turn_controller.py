"""
Turn controller for the TicTacToe bot.

Game flow:
1. The human picks who moves first
2. The human marks a cell (validated, then checked for a win or draw)
3. The bot searches for its best reply and marks that cell
4. Repeat until someone wins or the board is full
5. The result is reported once, then a new game can start
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .game_state import Board, GameOutcome, GameSession, Mark, TurnPhase
from .move_validator import InvalidMove, MoveValidator, ValidationResult
from .win_checker import WinChecker
from .ai_player import AIPlayer, SearchResult

log = logging.getLogger(__name__)


@dataclass
class TurnReport:
    """What happened during one call into the controller."""
    human_move: Optional[int]
    adversary_move: Optional[SearchResult]
    outcome: GameOutcome
    phase: TurnPhase


class TurnController:
    """
    Sequences human and bot moves for a GameSession.

    Each call runs to completion: the human ply, the detector, the bot's
    search and its ply all happen before the call returns. The controller
    holds no game state of its own.
    """

    def __init__(
        self,
        ai: Optional[AIPlayer] = None,
        win_checker: Optional[WinChecker] = None,
        validator: Optional[MoveValidator] = None,
        reporter=None,
    ):
        """
        Args:
            ai: Search used for the bot's moves. Its mark is set per game.
            win_checker: Detector for the game. When given, the AI searches
                with it too; otherwise the AI's own detector is used.
            validator: Move validator.
            reporter: Anything with report_game_result(game_id, result).
                Called once per finished game. None disables reporting.
        """
        self.win_checker = win_checker or (ai.win_checker if ai else WinChecker())
        self.ai = ai or AIPlayer(win_checker=self.win_checker)

        # The search must play by the rules the game is judged by
        self.ai.win_checker = self.win_checker
        self.validator = validator or MoveValidator()
        self.reporter = reporter

    def new_session(self, game_id: str = "tictactoe", human_mark: Mark = Mark.O) -> GameSession:
        """Create a game waiting for the human to pick who moves first."""
        session = GameSession(
            game_id=game_id,
            board=Board(size=self.win_checker.size),
            human_mark=human_mark,
            adversary_mark=human_mark.opposite(),
        )
        log.info("New %s game: human plays %s", game_id, human_mark.value)
        return session

    def choose_first(self, session: GameSession, human_first: bool) -> TurnReport:
        """
        Pick who opens the game.

        If the bot opens, its move is made before this returns.
        """
        if session.phase != TurnPhase.AWAITING_FIRST_MOVE_CHOICE:
            raise InvalidMove(ValidationResult(
                is_valid=False,
                error_message=f"First mover already chosen (phase: {session.phase.value})",
            ))

        if human_first:
            session.phase = TurnPhase.HUMAN_TURN
            return TurnReport(None, None, session.outcome, session.phase)

        session.phase = TurnPhase.ADVERSARY_TURN
        adversary_move = self._adversary_turn(session)
        return TurnReport(None, adversary_move, session.outcome, session.phase)

    def play(self, session: GameSession, index: int) -> TurnReport:
        """
        Play the human's move and, if the game goes on, the bot's reply.

        Raises:
            InvalidMove: the cell is taken or off the board, or it is not
                the human's turn. The session is unchanged.
        """
        result = self.validator.validate_move(session, index)
        if not result.is_valid:
            log.debug("Rejected move %s: %s", index, result.error_message)
            raise InvalidMove(result)

        self._apply(session, index, session.human_mark)
        if session.phase == TurnPhase.TERMINAL:
            return TurnReport(index, None, session.outcome, session.phase)

        adversary_move = self._adversary_turn(session)
        return TurnReport(index, adversary_move, session.outcome, session.phase)

    def new_game(self, session: GameSession, human_mark: Optional[Mark] = None) -> GameSession:
        """
        Reset the session for a new game.

        Roles can be swapped by passing a new human mark. A game that had
        not finished is dropped without being reported.
        """
        if session.phase not in (TurnPhase.TERMINAL, TurnPhase.AWAITING_FIRST_MOVE_CHOICE):
            log.info("Abandoning unfinished %s game after %d moves",
                     session.game_id, len(session.moves))

        if human_mark is not None:
            session.human_mark = human_mark
            session.adversary_mark = human_mark.opposite()

        session.board = Board(size=session.board.size)
        session.phase = TurnPhase.AWAITING_FIRST_MOVE_CHOICE
        session.outcome = GameOutcome.in_progress()
        session.moves = []
        session.result_reported = False
        return session

    def _adversary_turn(self, session: GameSession) -> SearchResult:
        self.ai.mark = session.adversary_mark
        move = self.ai.get_best_move(session.board)
        self._apply(session, move.index, session.adversary_mark)
        return move

    def _apply(self, session: GameSession, index: int, mark: Mark):
        placed = session.board.place(index, mark)
        assert placed, f"cell {index} already taken"
        session.record_move(index, mark)

        session.outcome = self.win_checker.evaluate(session.board)
        if session.outcome.is_terminal:
            session.phase = TurnPhase.TERMINAL
            self._report(session)
        elif mark == session.human_mark:
            session.phase = TurnPhase.ADVERSARY_TURN
        else:
            session.phase = TurnPhase.HUMAN_TURN

    def _report(self, session: GameSession):
        if session.result_reported:
            return
        session.result_reported = True

        result = session.result_for_human()
        log.info("Game %s over after %d moves: human %s",
                 session.game_id, len(session.moves), result.value)

        if self.reporter is None:
            return
        try:
            self.reporter.report_game_result(session.game_id, result)
        except Exception as e:
            log.warning("Could not report %s result for %s: %s",
                        result.value, session.game_id, e)
