from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from .board import Board, Coord, Direction
from .generator import Puzzle
from .moves import apply_forward, legal_directions
from .rules import has_deadlock, is_loss, is_win


@dataclass(frozen=True)
class GameState:
    """The dynamic state of a game in progress: marker positions plus which circle the player drives."""
    board: Board
    circles: Tuple[Coord, ...]
    crosses: Tuple[Coord, ...]
    player_index: int

    def __post_init__(self) -> None:
        if len(self.circles) != 3:
            raise ValueError(f"expected 3 circles, got {len(self.circles)}")
        if self.player_index not in (0, 1, 2):
            raise ValueError(f"player index must be 0, 1 or 2, got {self.player_index}")
        markers = list(self.circles) + list(self.crosses)
        if len(set(markers)) != len(markers):
            raise ValueError('two markers share a cell')
        for r, c in markers:
            if not self.board.is_cell_present(r, c):
                raise ValueError(f"marker at {(r, c)} is not on a present cell")

    @classmethod
    def from_puzzle(cls, board: Board, puzzle: Puzzle) -> 'GameState':
        circles, crosses = puzzle.markers(board)
        return cls(board, tuple(circles), tuple(crosses), puzzle.player_index)

    @property
    def player(self) -> Coord:
        return self.circles[self.player_index]

    @property
    def won(self) -> bool:
        return is_win(self.circles)

    @property
    def lost(self) -> bool:
        return is_loss(self.crosses)

    @property
    def finished(self) -> bool:
        return self.won or self.lost

    def deadlocked(self) -> bool:
        return has_deadlock(self.crosses, self.board)

    def legal_moves(self) -> List[Direction]:
        if self.finished:
            return []
        return legal_directions(self.circles, self.crosses, self.player_index, self.board)

    def move(self, direction: Direction) -> 'GameState':
        """Applies one forward move; finished games and rejected moves return self."""
        if self.finished:
            return self
        circles = list(self.circles)
        crosses = list(self.crosses)
        if not apply_forward(circles, crosses, self.player_index, direction, self.board):
            return self
        return GameState(self.board, tuple(circles), tuple(crosses), self.player_index)

    def pretty(self) -> str:
        return self.board.pretty(self.circles, self.crosses, self.player_index)
