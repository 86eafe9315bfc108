import random
from dataclasses import dataclass
from typing import List, Tuple

from game2048.commands import Direction

GRID_SIZE = 4
WIN_TILE = 2048
# largest tile a 4x4 board can hold
MAX_TILE = 2 ** 17
FOUR_PROBABILITY = 0.1
START_TILES = 2

Grid = List[List[int]]


class GridFullError(AssertionError):
    """Raised when a tile is spawned on a grid without empty cells."""


@dataclass(frozen=True)
class MoveResult:
    grid: Grid
    score_delta: int
    reached_win: bool
    moved: bool


def empty_grid() -> Grid:
    return [[0] * GRID_SIZE for _ in range(GRID_SIZE)]


def copy_grid(grid: Grid) -> Grid:
    return [row[:] for row in grid]


def empty_cells(grid: Grid) -> List[Tuple[int, int]]:
    return [(i, j) for i in range(GRID_SIZE) for j in range(GRID_SIZE) if grid[i][j] == 0]


def new_grid(rng=random) -> Grid:
    """Empty board with the two starting tiles."""
    grid = empty_grid()
    for _ in range(START_TILES):
        grid = spawn_random_tile(grid, rng)
    return grid


def spawn_random_tile(grid: Grid, rng=random) -> Grid:
    """
    Return a copy of `grid` with a 2 (90%) or a 4 (10%) in a random empty cell.

    `rng` is anything exposing the `random.Random` interface; tests pass a
    seeded `random.Random` or a scripted fake.
    """
    cells = empty_cells(grid)
    if not cells:
        raise GridFullError("Cannot spawn a tile on a full grid")
    i, j = rng.choice(cells)
    new = copy_grid(grid)
    new[i][j] = 4 if rng.random() < FOUR_PROBABILITY else 2
    return new


def apply_move(grid: Grid, direction: Direction) -> MoveResult:
    """
    Slide every line of `grid` toward `direction`.

    Every direction is reduced to a left slide: rows are reversed for RIGHT,
    the grid is transposed for UP, and both for DOWN. The input is left untouched.
    """
    if direction is Direction.LEFT:
        slid, score, won = _slide_left(grid)
        result = slid
    elif direction is Direction.RIGHT:
        slid, score, won = _slide_left(_reverse(grid))
        result = _reverse(slid)
    elif direction is Direction.UP:
        slid, score, won = _slide_left(_transpose(grid))
        result = _transpose(slid)
    elif direction is Direction.DOWN:
        slid, score, won = _slide_left(_reverse(_transpose(grid)))
        result = _transpose(_reverse(slid))
    else:
        raise ValueError(f"Invalid direction: {direction!r}")

    moved = result != grid
    if not moved:
        return MoveResult(copy_grid(grid), 0, False, False)
    return MoveResult(result, score, won, True)


def _slide_left(grid):
    """Slide everything left and return (new_grid, score_delta, reached_win)."""
    new_grid_ = []
    score = 0
    won = False
    for row in grid:
        compressed = _compress(row)
        merged, gained, line_won = _merge(compressed)
        new_grid_.append(_compress(merged))
        score += gained
        won = won or line_won
    return new_grid_, score, won


def _compress(row):
    """Push non-zero values to the front (left) of the row."""
    new_row = [num for num in row if num != 0]
    new_row += [0] * (GRID_SIZE - len(new_row))
    return new_row


def _merge(row):
    """Merge adjacent equal tiles from left to right, each tile at most once."""
    row = row[:]
    gained = 0
    won = False
    i = 0
    while i < GRID_SIZE - 1:
        if row[i] != 0 and row[i] == row[i + 1]:
            row[i] *= 2
            row[i + 1] = 0
            gained += row[i]
            if row[i] == WIN_TILE:
                won = True
            # skip the cell that was just emptied
            i += 2
        else:
            i += 1
    return row, gained, won


def _reverse(grid):
    return [row[::-1] for row in grid]


def _transpose(grid):
    return [list(r) for r in zip(*grid)]
