"""
Game state for the TicTacToe bot.
Holds the marks, the board, the derived outcome and the game session.
"""

from enum import Enum
from typing import Optional, List
from dataclasses import dataclass, field


class Mark(Enum):
    """The two symbols a player can place."""
    X = "X"
    O = "O"

    def opposite(self) -> "Mark":
        """Get the other mark."""
        return Mark.O if self == Mark.X else Mark.X


class GameStatus(Enum):
    """Where a game stands after the last move."""
    IN_PROGRESS = "in_progress"
    WIN = "win"
    DRAW = "draw"


class GameResult(Enum):
    """Result of a finished game from the human's point of view."""
    WIN = "win"
    DRAW = "draw"
    LOSE = "lose"


@dataclass(frozen=True)
class GameOutcome:
    """
    Outcome of a board, recomputed after every move.

    `winner` is only set when status is WIN.
    """
    status: GameStatus
    winner: Optional[Mark] = None

    @classmethod
    def in_progress(cls) -> "GameOutcome":
        return cls(GameStatus.IN_PROGRESS)

    @classmethod
    def win(cls, mark: Mark) -> "GameOutcome":
        return cls(GameStatus.WIN, mark)

    @classmethod
    def draw(cls) -> "GameOutcome":
        return cls(GameStatus.DRAW)

    @property
    def is_terminal(self) -> bool:
        return self.status != GameStatus.IN_PROGRESS


@dataclass
class Board:
    """
    A square board stored as a flat list of cells.

    Cell i sits at row i // size, column i % size. None means empty.
    """

    size: int = 3
    cells: List[Optional[Mark]] = field(default=None)

    def __post_init__(self):
        if self.cells is None:
            self.cells = [None] * (self.size * self.size)
        elif len(self.cells) != self.size * self.size:
            raise ValueError(
                f"Board of size {self.size} needs {self.size * self.size} cells, "
                f"got {len(self.cells)}"
            )

    @classmethod
    def from_string(cls, layout: str) -> "Board":
        """
        Build a board from a string such as "XX_OO____".

        Any character other than X or O is read as an empty cell.
        """
        size = int(round(len(layout) ** 0.5))
        cells = [Mark(ch) if ch in ("X", "O") else None for ch in layout.upper()]
        return cls(size=size, cells=cells)

    def __len__(self) -> int:
        return len(self.cells)

    def __getitem__(self, index: int) -> Optional[Mark]:
        return self.cells[index]

    def is_empty_cell(self, index: int) -> bool:
        return self.cells[index] is None

    def place(self, index: int, mark: Mark) -> bool:
        """
        Place a mark on an empty cell.

        Returns:
            True if the mark was placed, False if the cell is taken.
        """
        if self.cells[index] is not None:
            return False
        self.cells[index] = mark
        return True

    def clear(self, index: int):
        """Empty a cell. Only the search uses this, to undo its own moves."""
        self.cells[index] = None

    def empty_cells(self) -> List[int]:
        """Indices of all empty cells, ascending."""
        return [i for i, cell in enumerate(self.cells) if cell is None]

    def is_full(self) -> bool:
        return all(cell is not None for cell in self.cells)

    def copy(self) -> "Board":
        return Board(size=self.size, cells=list(self.cells))

    def to_string(self) -> str:
        return "".join(cell.value if cell else "_" for cell in self.cells)

    def pretty(self) -> str:
        """Render the board for the console, numbering empty cells 1..n."""
        rows = []
        for row in range(self.size):
            row_cells = []
            for col in range(self.size):
                index = row * self.size + col
                cell = self.cells[index]
                row_cells.append(cell.value if cell else str(index + 1))
            rows.append(" " + " | ".join(row_cells))
        divider = "\n" + "-" * (4 * self.size - 1) + "\n"
        return divider.join(rows)


class TurnPhase(Enum):
    """Phases of one game, as driven by the turn controller."""
    AWAITING_FIRST_MOVE_CHOICE = "awaiting_first_move_choice"
    HUMAN_TURN = "human_turn"
    ADVERSARY_TURN = "adversary_turn"
    TERMINAL = "terminal"


@dataclass
class PlayedMove:
    """A move in the game."""
    mark: Mark              # Who made the move
    index: int              # Cell index
    by_human: bool          # Human or bot
    move_number: int        # Ply number, starting at 0


@dataclass
class GameSession:
    """
    The complete state of one game between a human and the bot.

    Owned by the caller and passed into every turn controller call.

    Tracks:
    - The board
    - Which mark each side plays (fixed for the game)
    - The current phase and the last outcome
    - Move history
    - Whether the result has already been reported
    """

    game_id: str = "tictactoe"
    board: Board = field(default_factory=Board)

    human_mark: Mark = Mark.O
    adversary_mark: Mark = Mark.X

    phase: TurnPhase = TurnPhase.AWAITING_FIRST_MOVE_CHOICE
    outcome: GameOutcome = field(default_factory=GameOutcome.in_progress)

    moves: List[PlayedMove] = field(default_factory=list)
    result_reported: bool = False

    def __post_init__(self):
        if self.human_mark == self.adversary_mark:
            raise ValueError("Human and bot must play different marks")

    @property
    def is_game_over(self) -> bool:
        return self.phase == TurnPhase.TERMINAL

    def record_move(self, index: int, mark: Mark):
        self.moves.append(PlayedMove(
            mark=mark,
            index=index,
            by_human=(mark == self.human_mark),
            move_number=len(self.moves),
        ))

    def result_for_human(self) -> Optional[GameResult]:
        """Win, draw or lose for the human, or None while the game runs."""
        if not self.outcome.is_terminal:
            return None
        if self.outcome.status == GameStatus.DRAW:
            return GameResult.DRAW
        if self.outcome.winner == self.human_mark:
            return GameResult.WIN
        return GameResult.LOSE
