"""
Console front-end for the TicTacToe bot.

This script ties together:
- Logic (board, win checker, minimax AI, turn controller)
- Scoring (score rules, leaderboard reporting)

Run this script to play TicTacToe against the bot!
"""

import logging
from typing import Optional

# Logic imports
from logic.game_state import Mark, GameResult
from logic.move_validator import InvalidMove
from logic.ai_player import AIPlayer
from logic.turn_controller import TurnController, TurnReport

# Scoring imports
from scoring.config import ScoringConfig
from scoring.score_tracker import ScoreTracker
from scoring.result_reporter import (
    AsyncResultDispatcher,
    HttpResultReporter,
    LoggingResultReporter,
)


class TicTacToeBot:
    """
    Console game against the bot.

    Game flow:
    1. Human picks who goes first
    2. Human types a cell number (1-9)
    3. Bot answers straight away
    4. Repeat until someone wins or it's a draw
    5. Result is reported in the background, then play again or quit
    """

    def __init__(
        self,
        human_mark: Mark = Mark.O,
        bot_first: bool = False,
        use_pruning: bool = True,
        depth_weighted: bool = False,
        user_id: Optional[str] = None,
        auth_token: Optional[str] = None,
        api_url: Optional[str] = None,
    ):
        self.human_mark = human_mark
        self.bot_first = bot_first

        self.tracker = ScoreTracker()
        if user_id and auth_token:
            reporter = HttpResultReporter(user_id, auth_token, self.tracker, api_base_url=api_url)
        else:
            reporter = LoggingResultReporter(self.tracker)
        self.dispatcher = AsyncResultDispatcher(reporter)

        self.ai = AIPlayer(use_pruning=use_pruning, depth_weighted=depth_weighted)
        self.controller = TurnController(ai=self.ai, reporter=self.dispatcher)
        self.session = self.controller.new_session(ScoringConfig.GAME_ID, human_mark)

    def start(self):
        """Play games until the human quits."""
        print("\n" + "=" * 40)
        print("   TicTacToe")
        print(f"   You play: {self.human_mark.value}")
        print("=" * 40)

        try:
            while True:
                self._play_one_game()
                if not self._ask_yes_no("\nPlay again? [y/n]: "):
                    break
                self.controller.new_game(self.session)
        finally:
            self.dispatcher.shutdown(wait=True)
            self._show_stats()

    def _play_one_game(self):
        report = self.controller.choose_first(self.session, human_first=not self.bot_first)
        self._show_bot_move(report)

        while not self.session.is_game_over:
            print("\n" + self.session.board.pretty())
            index = self._read_human_move()
            try:
                report = self.controller.play(self.session, index)
            except InvalidMove as e:
                print(f"Illegal move: {e}")
                continue
            self._show_bot_move(report)

        self._show_game_result()

    def _read_human_move(self) -> int:
        free = [i + 1 for i in self.controller.validator.get_valid_moves(self.session)]
        choices = ",".join(str(c) for c in free)
        while True:
            text = input(f"\nPlay {self.human_mark.value} at [{choices}]: ").strip()
            try:
                return int(text) - 1
            except ValueError:
                print(f"Please type one of {choices}.")

    @staticmethod
    def _ask_yes_no(prompt: str) -> bool:
        return input(prompt).strip().lower().startswith("y")

    @staticmethod
    def _show_bot_move(report: TurnReport):
        if report.adversary_move is not None:
            print(f">>> Bot plays at {report.adversary_move.index + 1}")

    def _show_game_result(self):
        print("\n" + "=" * 40)
        print("   GAME OVER!")
        print("=" * 40)
        print("\n" + self.session.board.pretty())

        result = self.session.result_for_human()
        if result == GameResult.WIN:
            print("\nYou win!")
        elif result == GameResult.LOSE:
            print("\nBot wins! Streak reset!")
        else:
            print("\nIt's a draw!")

    def _show_stats(self):
        # Reports are sent in the background; call after the dispatcher is shut down
        stats = self.tracker.snapshot()
        if not stats["totalGamesPlayed"]:
            return
        print(f"\nGames: {stats['totalGamesPlayed']}  "
              f"W/D/L: {stats['wins']}/{stats['draws']}/{stats['losses']}")
        print(f"Score: {stats['currentScore']}  Best: {stats['highestScore']}  "
              f"Streak: {stats['currentStreak']}")


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="Play TicTacToe against the bot")
    parser.add_argument(
        "--bot-first",
        action="store_true",
        help="Let the bot open the game"
    )
    parser.add_argument(
        "--human-mark",
        choices=["X", "O"],
        default="O",
        help="Mark you play with (default: O)"
    )
    parser.add_argument(
        "--depth-weighted",
        action="store_true",
        help="Make the bot prefer faster wins"
    )
    parser.add_argument(
        "--no-pruning",
        action="store_true",
        help="Search the full game tree without alpha-beta pruning"
    )
    parser.add_argument("--user-id", default=ScoringConfig.USER_ID, help="Leaderboard user id")
    parser.add_argument("--token", default=ScoringConfig.AUTH_TOKEN, help="Leaderboard auth token")
    parser.add_argument("--api-url", default=ScoringConfig.API_BASE_URL, help="Leaderboard API base URL")
    parser.add_argument("--verbose", action="store_true", help="Log search details")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    bot = TicTacToeBot(
        human_mark=Mark(args.human_mark),
        bot_first=args.bot_first,
        use_pruning=not args.no_pruning,
        depth_weighted=args.depth_weighted,
        user_id=args.user_id,
        auth_token=args.token,
        api_url=args.api_url,
    )

    try:
        bot.start()
    except (KeyboardInterrupt, EOFError):
        print("\n\nGame interrupted by user.")
    finally:
        print("Goodbye!")


if __name__ == "__main__":
    main()
