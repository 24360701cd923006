"""
Tests for the console front-end, driven through a scripted input().
"""

import re

import pytest

from logic.game_state import Mark
from main import TicTacToeBot


@pytest.fixture
def scripted_input(monkeypatch):
    """Answer each move prompt with the first cell it offers, and decline a rematch."""
    prompts = []

    def answer(prompt):
        prompts.append(prompt)
        offered = re.search(r"\[([\d,]+)\]", prompt)
        if offered:
            return offered.group(1).split(",")[0]
        return "n"

    monkeypatch.setattr("builtins.input", answer)
    return prompts


class TestConsoleGame:
    def test_prompt_offers_only_free_cells(self, scripted_input):
        TicTacToeBot(human_mark=Mark.O).start()

        move_prompts = [p for p in scripted_input if "Play O at" in p]
        first = re.search(r"\[([\d,]+)\]", move_prompts[0]).group(1).split(",")
        second = re.search(r"\[([\d,]+)\]", move_prompts[1]).group(1).split(",")
        assert first == [str(i) for i in range(1, 10)]
        assert len(second) == 7
        assert "1" not in second

    def test_stats_shown_after_last_game(self, scripted_input, capsys):
        bot = TicTacToeBot(human_mark=Mark.O, bot_first=True)
        bot.start()

        out = capsys.readouterr().out
        assert "GAME OVER!" in out
        assert "Games: 1" in out
        # The bot never loses, so the human has no wins
        assert "W/D/L: 0/" in out
        assert bot.tracker.total_games_played == 1
