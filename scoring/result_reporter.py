"""
Result reporting for the TicTacToe bot.

Finished games are handed to a reporter, which updates the player's score
and, when a user is signed in, submits it to the leaderboard service.
AsyncResultDispatcher sends reports from worker threads so gameplay never
waits on the network.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional

import requests

from logic.game_state import GameResult
from .config import ScoringConfig
from .score_tracker import ScoreTracker, ScoreUpdate

log = logging.getLogger(__name__)


class ReportError(Exception):
    """The leaderboard service did not accept a result."""


class ResultReporter:
    """Receives one call per finished game."""

    def report_game_result(self, game_id: str, result: GameResult):
        raise NotImplementedError


class LoggingResultReporter(ResultReporter):
    """Keeps score locally and logs each update. Used when nobody is signed in."""

    def __init__(self, tracker: Optional[ScoreTracker] = None):
        self.tracker = tracker or ScoreTracker()

    def report_game_result(self, game_id: str, result: GameResult) -> ScoreUpdate:
        update = self.tracker.record(result)
        log.info("%s: %s, score %d -> %d, streak=%d",
                 game_id, result.value, update.previous_score,
                 update.current_score, update.streak)
        return update


class HttpResultReporter(ResultReporter):
    """
    Keeps score and submits wins to the leaderboard service.

    POSTs {gameId, userId, score, gameName} to <api>/leaderboard/submit with
    the user's token in the x-auth-token header. The service refuses scores
    that are not higher than the stored best; that is not an error.
    """

    def __init__(
        self,
        user_id: str,
        auth_token: str,
        tracker: Optional[ScoreTracker] = None,
        api_base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
        config=ScoringConfig,
    ):
        self.user_id = user_id
        self.auth_token = auth_token
        self.tracker = tracker or ScoreTracker(config)
        self.url = config.submit_url(api_base_url)
        self.timeout = timeout if timeout is not None else config.REQUEST_TIMEOUT_S
        self.session = session or requests.Session()
        self.config = config

    def report_game_result(self, game_id: str, result: GameResult) -> ScoreUpdate:
        update = self.tracker.record(result)

        # Only wins are submitted; draws and losses just reset the local score
        if result == GameResult.WIN:
            self.submit_score(game_id, update.current_score)
        return update

    def submit_score(self, game_id: str, score: int):
        payload = {
            "gameId": game_id,
            "userId": self.user_id,
            "score": score,
            "gameName": game_id,
        }
        headers = {
            "Content-Type": "application/json",
            self.config.AUTH_HEADER: self.auth_token or "",
        }

        try:
            response = self.session.post(self.url, json=payload, headers=headers,
                                         timeout=self.timeout)
        except requests.RequestException as e:
            raise ReportError(f"Could not reach {self.url}: {e}") from e

        if response.ok:
            log.info("Submitted %s score %d for user %s", game_id, score, self.user_id)
            return

        message = self._error_message(response)
        if "not higher" in message:
            log.info("Score %d not higher than previous best for %s", score, game_id)
            return
        raise ReportError(f"Leaderboard rejected score ({response.status_code}): {message}")

    @staticmethod
    def _error_message(response) -> str:
        try:
            data = response.json()
        except ValueError:
            return response.text or ""
        if isinstance(data, dict):
            return str(data.get("msg") or data.get("message") or "")
        return ""


class AsyncResultDispatcher(ResultReporter):
    """
    Runs another reporter on a thread pool, fire-and-forget.

    report_game_result() returns at once with a Future. Failures are logged
    as warnings and never reach the caller. Nothing is retried.
    """

    def __init__(self, reporter: ResultReporter, max_workers: Optional[int] = None):
        self.reporter = reporter
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers or ScoringConfig.REPORT_WORKERS,
            thread_name_prefix="result-reporter",
        )

    def report_game_result(self, game_id: str, result: GameResult) -> Future:
        future = self._executor.submit(self.reporter.report_game_result, game_id, result)
        future.add_done_callback(
            lambda f: self._log_failure(f, game_id, result)
        )
        return future

    @staticmethod
    def _log_failure(future: Future, game_id: str, result: GameResult):
        error = future.exception()
        if error is not None:
            log.warning("Reporting %s result for %s failed: %s", result.value, game_id, error)

    def shutdown(self, wait: bool = True):
        """Stop accepting reports; with wait=True, finish the pending ones first."""
        self._executor.shutdown(wait=wait)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown(wait=True)
        return False
