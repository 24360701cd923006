"""
Score tracking for the TicTacToe bot.
Keeps the player's running score, streak and win/draw/loss counts.
"""

import threading
from dataclasses import dataclass

from logic.game_state import GameResult
from .config import ScoringConfig


@dataclass(frozen=True)
class ScoreUpdate:
    """What one finished game did to the player's score."""
    result: GameResult
    points: int             # Points awarded by this game
    previous_score: int     # Score before the game
    current_score: int      # Score after the game
    streak: int             # Win streak after the game
    is_new_high: bool       # current_score beat the previous best


class ScoreTracker:
    """
    Applies the scoring rules to finished games.

    Rules:
    - Win: streak goes up by one and the streak-scaled win points are added
    - Draw: streak resets and the score becomes DRAW_SCORE
    - Lose: streak resets and the score becomes LOSE_SCORE

    Safe to call from reporter worker threads.
    """

    def __init__(self, config=ScoringConfig, current_score: int = 0,
                 current_streak: int = 0, highest_score: int = 0):
        self.config = config
        self.current_score = current_score
        self.current_streak = current_streak
        self.highest_score = highest_score

        self.wins = 0
        self.draws = 0
        self.losses = 0

        self._lock = threading.Lock()

    @property
    def total_games_played(self) -> int:
        return self.wins + self.draws + self.losses

    def record(self, result: GameResult) -> ScoreUpdate:
        """Apply one finished game and return the change."""
        with self._lock:
            previous_score = self.current_score
            if result == GameResult.WIN:
                self.wins += 1
                self.current_streak += 1
                points = self.config.win_points(self.current_streak)
                self.current_score += points
            elif result == GameResult.DRAW:
                self.draws += 1
                self.current_streak = 0
                points = self.config.DRAW_SCORE
                self.current_score = points
            else:
                self.losses += 1
                self.current_streak = 0
                points = self.config.LOSE_SCORE
                self.current_score = points

            is_new_high = self.current_score > self.highest_score
            if is_new_high:
                self.highest_score = self.current_score

            return ScoreUpdate(
                result=result,
                points=points,
                previous_score=previous_score,
                current_score=self.current_score,
                streak=self.current_streak,
                is_new_high=is_new_high,
            )

    def snapshot(self) -> dict:
        """Stats in the shape the leaderboard service stores them."""
        with self._lock:
            return {
                "currentScore": self.current_score,
                "currentStreak": self.current_streak,
                "highestScore": self.highest_score,
                "totalGamesPlayed": self.total_games_played,
                "wins": self.wins,
                "draws": self.draws,
                "losses": self.losses,
            }
