"""
Scoring configuration for the TicTacToe bot.
Point values and where results get reported.
"""

import os


def _env(name: str, default, cast=str):
    value = os.environ.get(name)
    if value is None or value == "":
        return default
    return cast(value)


class ScoringConfig:
    """
    Configuration for score keeping and result reporting.

    Endpoint and credentials can be overridden with TICTACTOE_* environment
    variables. They are read once, when this module is imported.
    """

    # ==================== GAME ====================
    GAME_ID = "tictactoe"

    # ==================== POINTS ====================
    BASE_WIN_SCORE = 20     # Points for the first win of a streak
    STREAK_BONUS = 0.1      # Extra multiplier per win already in the streak
    DRAW_SCORE = 10         # A draw sets the score to this
    LOSE_SCORE = 0          # A loss sets the score to this

    # ==================== LEADERBOARD API ====================
    API_BASE_URL = _env("TICTACTOE_API_URL", "http://localhost:5000/api")
    SUBMIT_PATH = "/leaderboard/submit"
    USER_ID = _env("TICTACTOE_USER_ID", None)
    AUTH_TOKEN = _env("TICTACTOE_AUTH_TOKEN", None)
    AUTH_HEADER = "x-auth-token"

    # Seconds before an HTTP report gives up
    REQUEST_TIMEOUT_S = _env("TICTACTOE_REQUEST_TIMEOUT_S", 5.0, float)

    # ==================== REPORTING ====================
    # Worker threads used to send reports in the background. One worker
    # records games in the order they finished, which the streak relies on.
    REPORT_WORKERS = _env("TICTACTOE_REPORT_WORKERS", 1, int)

    @classmethod
    def win_points(cls, streak: int) -> int:
        """
        Points for a win that brings the streak to `streak`.

        20 for the first win, then 22, 24, 26, ...
        """
        return int(round(cls.BASE_WIN_SCORE * (1 + (streak - 1) * cls.STREAK_BONUS)))

    @classmethod
    def submit_url(cls, api_base_url: str = None) -> str:
        base = (api_base_url or cls.API_BASE_URL).rstrip("/")
        return base + cls.SUBMIT_PATH
