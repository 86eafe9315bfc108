import random
from dataclasses import dataclass, field
from typing import Tuple

import numpy as np

from game2048.grid_engine import Grid, copy_grid, empty_grid, new_grid


def evaluate(grid: Grid) -> bool:
    """
    Return True when no move can change `grid`: no empty cell and no
    horizontally or vertically adjacent pair of equal tiles.
    """
    board = np.asarray(grid)
    if np.any(board == 0):
        return False
    if np.any(board[:-1, :] == board[1:, :]):
        return False
    if np.any(board[:, :-1] == board[:, 1:]):
        return False
    return True


@dataclass(frozen=True)
class Snapshot:
    """Copy of the undoable part of a game: everything except the theme."""
    grid: Tuple[Tuple[int, ...], ...]
    score: int
    over: bool
    won: bool

    @classmethod
    def of(cls, grid, score, over, won):
        return cls(tuple(tuple(row) for row in grid), score, over, won)

    def board(self) -> Grid:
        return [list(row) for row in self.grid]


@dataclass
class GameState:
    grid: Grid = field(default_factory=empty_grid)
    score: int = 0
    over: bool = False
    won: bool = False
    dark_mode: bool = False

    @classmethod
    def fresh(cls, rng=random, dark_mode=False):
        """New game: two starting tiles, zero score, theme carried over."""
        return cls(grid=new_grid(rng), dark_mode=dark_mode)

    def snapshot(self) -> Snapshot:
        return Snapshot.of(self.grid, self.score, self.over, self.won)

    def restore(self, snapshot: Snapshot) -> None:
        self.grid = snapshot.board()
        self.score = snapshot.score
        self.over = snapshot.over
        self.won = snapshot.won

    def copy(self):
        return GameState(copy_grid(self.grid), self.score, self.over, self.won, self.dark_mode)
