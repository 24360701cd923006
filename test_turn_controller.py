"""
Tests for the turn controller: phases, move rejection and result reporting.
"""

import copy
import logging
from unittest.mock import MagicMock

import pytest

from logic.game_state import (
    Board, GameOutcome, GameResult, GameSession, GameStatus, Mark, TurnPhase,
)
from logic.move_validator import InvalidMove, MoveValidator
from logic.ai_player import AIPlayer, SearchResult
from logic.win_checker import WinChecker
from logic.turn_controller import TurnController


class FirstEmptyCellAI(AIPlayer):
    """A weak stand-in that always takes the lowest empty cell."""

    def get_best_move(self, board):
        return SearchResult(board.empty_cells()[0], 0)


@pytest.fixture
def reporter():
    return MagicMock()


@pytest.fixture
def controller(reporter):
    return TurnController(reporter=reporter)


def started(controller, human_first=True, human_mark=Mark.O):
    session = controller.new_session(human_mark=human_mark)
    controller.choose_first(session, human_first=human_first)
    return session


def play_all_human_strategies(controller, session, results):
    """Branch on every legal human move until every game has ended."""
    for index in session.board.empty_cells():
        branch = copy.deepcopy(session)
        controller.play(branch, index)
        if branch.phase == TurnPhase.TERMINAL:
            results.append(branch.result_for_human())
        else:
            play_all_human_strategies(controller, branch, results)


# ════════════════════════════════════════════════════════════════════════════
#  PHASES
# ════════════════════════════════════════════════════════════════════════════

class TestPhases:
    def test_new_session_awaits_first_move_choice(self, controller):
        session = controller.new_session()
        assert session.phase == TurnPhase.AWAITING_FIRST_MOVE_CHOICE
        assert session.board.to_string() == "_" * 9
        assert session.human_mark == Mark.O
        assert session.adversary_mark == Mark.X
        assert session.game_id == "tictactoe"

    def test_human_first(self, controller):
        session = controller.new_session()
        report = controller.choose_first(session, human_first=True)
        assert report.phase == TurnPhase.HUMAN_TURN
        assert report.adversary_move is None
        assert session.board.to_string() == "_" * 9

    def test_bot_first_moves_immediately(self, controller):
        session = controller.new_session()
        report = controller.choose_first(session, human_first=False)
        assert report.adversary_move == SearchResult(0, 0)
        assert session.board[0] == Mark.X
        assert session.phase == TurnPhase.HUMAN_TURN
        assert len(session.moves) == 1
        assert not session.moves[0].by_human

    def test_choose_first_only_once(self, controller):
        session = started(controller)
        with pytest.raises(InvalidMove):
            controller.choose_first(session, human_first=False)
        assert session.phase == TurnPhase.HUMAN_TURN

    def test_play_before_choosing_first_rejected(self, controller):
        session = controller.new_session()
        with pytest.raises(InvalidMove):
            controller.play(session, 4)
        assert session.board.to_string() == "_" * 9

    def test_human_move_then_bot_reply(self, controller):
        session = started(controller)
        report = controller.play(session, 4)
        assert report.human_move == 4
        assert report.adversary_move.index in {0, 2, 6, 8}
        assert report.adversary_move.index == 0
        assert report.phase == TurnPhase.HUMAN_TURN
        assert report.outcome == GameOutcome.in_progress()
        assert [m.index for m in session.moves] == [4, 0]

    def test_roles_can_swap_between_games(self, controller):
        session = started(controller)
        controller.play(session, 4)
        controller.new_game(session, human_mark=Mark.X)
        assert session.human_mark == Mark.X
        assert session.adversary_mark == Mark.O
        controller.choose_first(session, human_first=False)
        assert session.board[0] == Mark.O


# ════════════════════════════════════════════════════════════════════════════
#  INVALID MOVES
# ════════════════════════════════════════════════════════════════════════════

class TestInvalidMoves:
    def test_occupied_cell_leaves_state_unchanged(self, controller):
        session = started(controller)
        controller.play(session, 4)
        before = copy.deepcopy(session)

        with pytest.raises(InvalidMove) as exc:
            controller.play(session, 0)     # taken by the bot

        assert "occupied" in str(exc.value)
        assert not exc.value.result.is_valid
        assert session.board.cells == before.board.cells
        assert session.phase == before.phase
        assert session.moves == before.moves

    @pytest.mark.parametrize("index", [-1, 9, 42])
    def test_off_board_rejected(self, controller, index):
        session = started(controller)
        with pytest.raises(InvalidMove):
            controller.play(session, index)

    def test_moves_after_game_over_rejected(self, controller, reporter):
        session = GameSession(
            board=Board.from_string("XX_OO____"),
            human_mark=Mark.X,
            adversary_mark=Mark.O,
            phase=TurnPhase.HUMAN_TURN,
        )
        controller.play(session, 2)
        with pytest.raises(InvalidMove) as exc:
            controller.play(session, 5)
        assert "over" in str(exc.value)
        assert session.board[5] is None

    def test_validator_lists_no_moves_when_terminal(self):
        validator = MoveValidator()
        session = GameSession(phase=TurnPhase.TERMINAL)
        assert validator.get_valid_moves(session) == []
        session.phase = TurnPhase.HUMAN_TURN
        assert validator.get_valid_moves(session) == list(range(9))


# ════════════════════════════════════════════════════════════════════════════
#  GAME ENDINGS AND REPORTING
# ════════════════════════════════════════════════════════════════════════════

class TestGameEnd:
    def test_immediate_human_win_skips_bot_turn(self, controller, reporter):
        session = GameSession(
            board=Board.from_string("XX_OO____"),
            human_mark=Mark.X,
            adversary_mark=Mark.O,
            phase=TurnPhase.HUMAN_TURN,
        )
        report = controller.play(session, 2)

        assert report.outcome == GameOutcome.win(Mark.X)
        assert report.adversary_move is None
        assert session.phase == TurnPhase.TERMINAL
        assert session.board.to_string() == "XXXOO____"
        assert len(session.moves) == 1
        reporter.report_game_result.assert_called_once_with("tictactoe", GameResult.WIN)

    def test_bot_win_reported_once(self, reporter):
        controller = TurnController(reporter=reporter)
        session = GameSession(
            board=Board.from_string("XX_OO____"),
            human_mark=Mark.O,
            adversary_mark=Mark.X,
            phase=TurnPhase.HUMAN_TURN,
        )
        # Human ignores the threat, bot completes the top row
        report = controller.play(session, 8)

        assert report.adversary_move == SearchResult(2, 10)
        assert report.outcome == GameOutcome.win(Mark.X)
        assert session.result_for_human() == GameResult.LOSE
        with pytest.raises(InvalidMove):
            controller.play(session, 5)
        reporter.report_game_result.assert_called_once_with("tictactoe", GameResult.LOSE)

    def test_draw_reported(self, controller, reporter):
        session = GameSession(
            board=Board.from_string("XOXXOOOX_"),
            human_mark=Mark.O,
            adversary_mark=Mark.X,
            phase=TurnPhase.HUMAN_TURN,
        )
        report = controller.play(session, 8)
        assert report.outcome.status == GameStatus.DRAW
        reporter.report_game_result.assert_called_once_with("tictactoe", GameResult.DRAW)

    def test_aborted_game_not_reported(self, controller, reporter):
        session = started(controller)
        controller.play(session, 4)
        controller.new_game(session)

        assert session.phase == TurnPhase.AWAITING_FIRST_MOVE_CHOICE
        assert session.board.to_string() == "_" * 9
        assert session.moves == []
        reporter.report_game_result.assert_not_called()

    def test_new_game_after_terminal_reports_next_game_too(self, controller, reporter):
        for _ in range(2):
            session = GameSession(
                board=Board.from_string("XX_OO____"),
                human_mark=Mark.X,
                adversary_mark=Mark.O,
                phase=TurnPhase.HUMAN_TURN,
            )
            controller.play(session, 2)
            controller.new_game(session)
            assert not session.result_reported
        assert reporter.report_game_result.call_count == 2

    def test_report_failure_does_not_change_outcome(self, reporter, caplog):
        reporter.report_game_result.side_effect = RuntimeError("service down")
        controller = TurnController(reporter=reporter)
        session = GameSession(
            board=Board.from_string("XX_OO____"),
            human_mark=Mark.X,
            adversary_mark=Mark.O,
            phase=TurnPhase.HUMAN_TURN,
        )
        with caplog.at_level(logging.WARNING):
            report = controller.play(session, 2)

        assert report.outcome == GameOutcome.win(Mark.X)
        assert session.phase == TurnPhase.TERMINAL
        assert "service down" in caplog.text

    def test_no_reporter_is_fine(self):
        controller = TurnController()
        session = GameSession(
            board=Board.from_string("XX_OO____"),
            human_mark=Mark.X,
            adversary_mark=Mark.O,
            phase=TurnPhase.HUMAN_TURN,
        )
        assert controller.play(session, 2).phase == TurnPhase.TERMINAL
        assert session.result_reported


# ════════════════════════════════════════════════════════════════════════════
#  BOT STRENGTH
# ════════════════════════════════════════════════════════════════════════════

class TestBotNeverLoses:
    def test_bot_second_never_loses(self, controller, reporter):
        results = []
        play_all_human_strategies(controller, started(controller, human_first=True), results)
        assert results
        assert GameResult.WIN not in results
        assert reporter.report_game_result.call_count == len(results)

    def test_bot_first_never_loses(self, controller):
        results = []
        play_all_human_strategies(controller, started(controller, human_first=False), results)
        assert results
        assert GameResult.WIN not in results

    def test_weak_bot_can_be_beaten(self):
        controller = TurnController(ai=FirstEmptyCellAI())
        session = started(controller)
        for index in (4, 1, 7):
            controller.play(session, index)
        assert session.result_for_human() == GameResult.WIN

    def test_same_line_against_real_bot_does_not_win(self, controller):
        session = started(controller)
        for index in (4, 1, 7):
            if session.phase == TurnPhase.TERMINAL:
                break
            if session.board.is_empty_cell(index):
                controller.play(session, index)
        assert session.result_for_human() != GameResult.WIN


# ════════════════════════════════════════════════════════════════════════════
#  CUSTOM RULES
# ════════════════════════════════════════════════════════════════════════════

class TestCustomRules:
    def test_ai_searches_with_game_rules(self):
        checker = WinChecker(3, 2)
        controller = TurnController(ai=AIPlayer(), win_checker=checker)
        assert controller.ai.win_checker is checker

    def test_bot_plays_two_in_a_row_rules(self, reporter):
        controller = TurnController(ai=AIPlayer(), win_checker=WinChecker(3, 2), reporter=reporter)
        session = controller.new_session()

        # With two in a row the opener always wins, and the search must know it
        report = controller.choose_first(session, human_first=False)
        assert report.adversary_move == SearchResult(0, 10)

        report = controller.play(session, 8)
        assert report.adversary_move == SearchResult(1, 10)
        assert report.outcome == GameOutcome.win(Mark.X)
        reporter.report_game_result.assert_called_once_with("tictactoe", GameResult.LOSE)

    def test_larger_board_shared_with_ai(self):
        controller = TurnController(ai=AIPlayer(), win_checker=WinChecker(4, 3))
        session = controller.new_session()
        assert len(session.board) == 16
        assert controller.ai.win_checker.size == 4
        assert controller.ai.win_checker.win_length == 3

    def test_ai_checker_used_when_none_given(self):
        checker = WinChecker(3, 2)
        controller = TurnController(ai=AIPlayer(win_checker=checker))
        assert controller.win_checker is checker
