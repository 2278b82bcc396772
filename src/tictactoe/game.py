"""Core rules for classic 3x3 tic-tac-toe."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple

Player = str  # "X" or "O"

EMPTY = " "
BOARD_SIZE = 9

# Checked in this order: rows, columns, diagonals.
WINNING_LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)

PLAYING = "playing"
WIN = "win"
DRAW = "draw"


@dataclass(frozen=True)
class GameStatus:
    """Outcome derived from a board; never stored alongside it."""

    state: str = PLAYING
    winner: Optional[Player] = None
    line: Optional[Tuple[int, int, int]] = None

    @property
    def is_over(self) -> bool:
        return self.state != PLAYING


def new_board() -> List[str]:
    return [EMPTY] * BOARD_SIZE


def other_player(player: Player) -> Player:
    return "O" if player == "X" else "X"


def evaluate_status(cells: Sequence[str]) -> GameStatus:
    """Report the first completed line, a draw on a full board, or play on."""
    for a, b, c in WINNING_LINES:
        v = cells[a]
        if v != EMPTY and v == cells[b] == cells[c]:
            return GameStatus(state=WIN, winner=v, line=(a, b, c))
    if all(c != EMPTY for c in cells):
        return GameStatus(state=DRAW)
    return GameStatus()


def apply_move(
    cells: Sequence[str], player: Player, idx: int
) -> Tuple[List[str], Player]:
    """Return the board and turn that follow ``player`` marking ``idx``.

    A move on a finished game or an occupied cell is ignored: the same
    contents and the same player come back. The input is never mutated.
    """
    if not 0 <= idx < BOARD_SIZE:
        raise ValueError(f"Cell index {idx} is outside the board")
    board = list(cells)
    if evaluate_status(board).is_over or board[idx] != EMPTY:
        return board, player
    board[idx] = player
    return board, other_player(player)


def reset() -> Tuple[List[str], Player]:
    return new_board(), "X"


Listener = Callable[["TicTacToeGame"], None]


@dataclass
class TicTacToeGame:
    cells: List[str] = field(default_factory=new_board)
    current_player: Player = "X"

    _listeners: List[Listener] = field(default_factory=list, init=False, repr=False)

    # ---- API used by UI ----

    @property
    def status(self) -> GameStatus:
        return evaluate_status(self.cells)

    def available_moves(self) -> List[int]:
        if self.status.is_over:
            return []
        return [i for i, c in enumerate(self.cells) if c == EMPTY]

    def play_move(self, idx: int) -> bool:
        """Mark ``idx`` for the current player; False if the move was ignored."""
        before = self.current_player
        self.cells, self.current_player = apply_move(self.cells, before, idx)
        accepted = self.current_player != before
        self._notify()
        return accepted

    def reset(self) -> None:
        self.cells, self.current_player = reset()
        self._notify()

    def subscribe(self, listener: Listener) -> None:
        """Call ``listener`` with this game after every move or reset."""
        self._listeners.append(listener)

    def clone(self) -> "TicTacToeGame":
        return TicTacToeGame(
            cells=self.cells.copy(), current_player=self.current_player
        )

    # ---- helpers ----

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)
