"""
Scoring module for the TicTacToe bot.
Handles score rules, configuration and result reporting.
"""

from .config import ScoringConfig
from .score_tracker import ScoreTracker, ScoreUpdate
from .result_reporter import (
    AsyncResultDispatcher,
    HttpResultReporter,
    LoggingResultReporter,
    ReportError,
    ResultReporter,
)
