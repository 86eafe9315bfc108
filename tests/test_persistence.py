import json
import logging
import random

import pytest

from game2048 import persistence
from game2048.controller import GameController
from game2048.game_state import GameState
from game2048.history import HistoryStack
from game2048.persistence import DecodeError, GameStore, decode, encode, load, save


def sample_game():
    state = GameState(
        grid=[[2, 4, 0, 0], [0, 8, 0, 0], [0, 0, 16, 0], [0, 0, 0, 2048]],
        score=2100,
        over=False,
        won=True,
        dark_mode=True,
    )
    history = HistoryStack()
    before = GameState(grid=[[2, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]], score=0)
    history.before_move(before)
    history.before_move(GameState(grid=[[4, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 2]], score=4))
    return state, history


def test_encode_layout():
    state, history = sample_game()
    record = encode(state, history)
    assert set(record) == {"board", "score", "game_over", "won", "dark_mode", "history"}
    assert record["board"] == state.grid
    assert record["dark_mode"] is True
    assert record["history"][0] == {
        "board": [[2, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]],
        "score": 0,
        "game_over": False,
        "won": False,
    }
    assert record["history"][1]["score"] == 4
    # must be plain JSON
    json.dumps(record)


def test_decode_round_trip():
    state, history = sample_game()
    decoded_state, decoded_history = decode(json.loads(json.dumps(encode(state, history))))
    assert decoded_state == state
    assert decoded_history == history


def bad_records():
    state, history = sample_game()
    good = encode(state, history)

    def with_change(change):
        record = json.loads(json.dumps(good))
        change(record)
        return record

    yield "not a dict", [1, 2, 3]
    yield "missing key", with_change(lambda r: r.pop("won"))
    yield "three rows", with_change(lambda r: r["board"].pop())
    yield "short row", with_change(lambda r: r["board"][1].pop())
    yield "not a power of two", with_change(lambda r: r["board"][0].__setitem__(0, 6))
    yield "tile of one", with_change(lambda r: r["board"][0].__setitem__(0, 1))
    yield "negative tile", with_change(lambda r: r["board"][0].__setitem__(0, -2))
    yield "float tile", with_change(lambda r: r["board"][0].__setitem__(0, 2.0))
    yield "huge tile", with_change(lambda r: r["board"][0].__setitem__(0, 2 ** 70))
    yield "tile above the largest reachable", with_change(lambda r: r["board"][0].__setitem__(0, 2 ** 40))
    yield "history tile too large", with_change(lambda r: r["history"][1]["board"][3].__setitem__(3, 2 ** 18))
    yield "bool score", with_change(lambda r: r.__setitem__("score", True))
    yield "negative score", with_change(lambda r: r.__setitem__("score", -1))
    yield "int flag", with_change(lambda r: r.__setitem__("game_over", 0))
    yield "history not a list", with_change(lambda r: r.__setitem__("history", {}))
    yield "bad snapshot board", with_change(lambda r: r["history"][0]["board"][2].__setitem__(2, 3))
    yield "snapshot not a dict", with_change(lambda r: r["history"].append("oops"))


@pytest.mark.parametrize("name, record", list(bad_records()))
def test_decode_rejects(name, record):
    with pytest.raises(DecodeError):
        decode(record)


def test_save_then_load(save_path):
    state, history = sample_game()
    assert save(state, history, save_path)
    assert save_path.exists()
    assert not save_path.with_name("save.json.tmp").exists()

    loaded_state, loaded_history = load(save_path)
    assert loaded_state == state
    assert loaded_history == history


def test_load_missing_file_starts_fresh(save_path):
    state, history = load(save_path, random.Random(0))
    tiles = [v for row in state.grid for v in row if v]
    assert len(tiles) == 2
    assert all(v in (2, 4) for v in tiles)
    assert state.score == 0
    assert not state.over and not state.won
    assert len(history) == 0


@pytest.mark.parametrize("content", ["{not json", '{"board": []}', "[]", "", "[" * 100000])
def test_load_corrupt_file_starts_fresh(save_path, content, caplog):
    save_path.parent.mkdir(parents=True)
    save_path.write_text(content)
    with caplog.at_level(logging.WARNING, logger="game2048.persistence"):
        state, history = load(save_path, random.Random(0))
    assert state.score == 0
    assert len(history) == 0
    assert "Could not load saved game" in caplog.text


def test_save_failure_is_swallowed(tmp_path, caplog):
    blocker = tmp_path / "file"
    blocker.write_text("")
    state, history = sample_game()
    with caplog.at_level(logging.WARNING, logger="game2048.persistence"):
        # parent "directory" is a regular file
        assert save(state, history, blocker / "save.json") is False
    assert "Could not save game" in caplog.text


def test_default_path_env_override(monkeypatch, tmp_path):
    monkeypatch.setenv(persistence.SAVE_PATH_ENV, str(tmp_path / "custom.json"))
    assert persistence.default_save_path() == tmp_path / "custom.json"
    assert GameStore().path == tmp_path / "custom.json"


def test_default_path_is_namespaced(monkeypatch):
    monkeypatch.delenv(persistence.SAVE_PATH_ENV, raising=False)
    path = persistence.default_save_path()
    assert path.name == "save.json"
    assert path.parent.name == "game2048"


def test_largest_reachable_tile_is_accepted():
    state = GameState(grid=[[2 ** 17, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]], won=True)
    decoded_state, _ = decode(encode(state, HistoryStack()))
    assert decoded_state == state


def test_failed_write_leaves_previous_save_and_no_temp_file(save_path):
    state, history = sample_game()
    assert save(state, history, save_path)
    before = save_path.read_text()

    # a set is not JSON serializable, so the dump fails halfway through
    broken = state.copy()
    broken.score = {1, 2}
    assert save(broken, history, save_path) is False
    assert not save_path.with_name("save.json.tmp").exists()
    assert save_path.read_text() == before


def test_deeply_nested_record_does_not_block_startup(save_path):
    save_path.parent.mkdir(parents=True)
    save_path.write_text("[" * 200000)
    controller = GameController(store=GameStore(save_path), rng=random.Random(0))
    assert controller.state.score == 0
    assert not controller.can_undo()
