"""
Save and restore a game, undo history included, as a JSON document.

The record lives at a fixed path under the per-user data directory:

    {
        "board": [[0, 2, 0, 0], ...],
        "score": 0,
        "game_over": false,
        "won": false,
        "dark_mode": false,
        "history": [{"board": ..., "score": ..., "game_over": ..., "won": ...}, ...]
    }

Loading never fails: a missing or unreadable record yields a fresh game.
Saving never raises: the in-memory game stays authoritative.
"""
import json
import logging
import os
import random
from pathlib import Path

import numpy as np
import platformdirs

from game2048.game_state import GameState, Snapshot
from game2048.grid_engine import GRID_SIZE, MAX_TILE
from game2048.history import HistoryStack

logger = logging.getLogger(__name__)

APP_NAME = "game2048"
SAVE_FILENAME = "save.json"
SAVE_PATH_ENV = "GAME2048_SAVE_PATH"


class DecodeError(ValueError):
    """The record does not describe a valid game."""


def default_save_path() -> Path:
    override = os.environ.get(SAVE_PATH_ENV)
    if override:
        return Path(override)
    return platformdirs.user_data_path(APP_NAME) / SAVE_FILENAME


def encode(state: GameState, history: HistoryStack) -> dict:
    return {
        "board": [row[:] for row in state.grid],
        "score": state.score,
        "game_over": state.over,
        "won": state.won,
        "dark_mode": state.dark_mode,
        "history": [_encode_snapshot(s) for s in history],
    }


def _encode_snapshot(snapshot: Snapshot) -> dict:
    return {
        "board": snapshot.board(),
        "score": snapshot.score,
        "game_over": snapshot.over,
        "won": snapshot.won,
    }


def decode(record):
    """
    Rebuild (GameState, HistoryStack) from a record produced by `encode`.
    Raises DecodeError on any mismatch instead of returning a partial game.
    """
    if not isinstance(record, dict):
        raise DecodeError(f"Record must be an object, got {type(record).__name__}")

    board, score, over, won = _decode_fields(record, "record")
    dark_mode = _require(record, "dark_mode", bool, "record")

    raw_history = _require(record, "history", list, "record")
    snapshots = []
    for index, item in enumerate(raw_history):
        where = f"history[{index}]"
        if not isinstance(item, dict):
            raise DecodeError(f"{where} must be an object")
        snapshots.append(Snapshot.of(*_decode_fields(item, where)))

    state = GameState(grid=board, score=score, over=over, won=won, dark_mode=dark_mode)
    return state, HistoryStack.from_snapshots(snapshots)


def _decode_fields(data, where):
    board = _decode_board(_require(data, "board", list, where), where)
    score = _require(data, "score", int, where)
    if score < 0:
        raise DecodeError(f"{where}: negative score {score}")
    over = _require(data, "game_over", bool, where)
    won = _require(data, "won", bool, where)
    return board, score, over, won


def _require(data, key, kind, where):
    if key not in data:
        raise DecodeError(f"{where}: missing '{key}'")
    value = data[key]
    # bool is a subclass of int, keep them apart
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise DecodeError(f"{where}: '{key}' must be {kind.__name__}, got {type(value).__name__}")
    return value


def _decode_board(board, where):
    if len(board) != GRID_SIZE or any(not isinstance(row, list) or len(row) != GRID_SIZE for row in board):
        raise DecodeError(f"{where}: board must be {GRID_SIZE}x{GRID_SIZE}")
    if any(not isinstance(v, int) or isinstance(v, bool) for row in board for v in row):
        raise DecodeError(f"{where}: board values must be integers")

    try:
        tiles = np.asarray(board, dtype=np.int64)
    except OverflowError as e:
        raise DecodeError(f"{where}: tile value out of range") from e
    valid = (tiles == 0) | ((tiles >= 2) & ((tiles & (tiles - 1)) == 0))
    if not valid.all():
        bad = tiles[~valid].tolist()
        raise DecodeError(f"{where}: tiles must be 0 or powers of two, got {bad}")
    if np.any(tiles > MAX_TILE):
        raise DecodeError(f"{where}: tile value above {MAX_TILE}")
    return [row[:] for row in board]


def load(path=None, rng=random):
    """
    Read the saved game. Any failure falls back to a fresh game with empty history.
    """
    path = Path(path) if path is not None else default_save_path()
    try:
        with open(path, "r") as f:
            record = json.load(f)
        state, history = decode(record)
    except FileNotFoundError:
        logger.info("No saved game at %s, starting a new one", path)
    except (OSError, ValueError, RecursionError) as e:
        # json.JSONDecodeError and DecodeError are both ValueErrors;
        # deeply nested JSON raises RecursionError
        logger.warning("Could not load saved game from %s: %s", path, e)
    else:
        logger.debug("Loaded game from %s (score=%d, %d undo steps)", path, state.score, len(history))
        return state, history
    return GameState.fresh(rng), HistoryStack()


def save(state: GameState, history: HistoryStack, path=None) -> bool:
    """Write the game to disk. Returns False (and logs) if the write failed."""
    path = Path(path) if path is not None else default_save_path()
    tmp_path = path.with_name(path.name + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(tmp_path, "w") as f:
            json.dump(encode(state, history), f, indent=2)
        os.replace(tmp_path, path)
    except (OSError, TypeError, ValueError) as e:
        logger.warning("Could not save game to %s: %s", path, e)
        _discard(tmp_path)
        return False
    return True


def _discard(path):
    try:
        if path.exists():
            path.unlink()
    except OSError as e:
        logger.debug("Could not remove %s: %s", path, e)


class GameStore:
    """load/save bound to one record path."""

    def __init__(self, path=None):
        self.path = Path(path) if path is not None else default_save_path()

    def load(self, rng=random):
        return load(self.path, rng)

    def save(self, state, history):
        return save(state, history, self.path)
