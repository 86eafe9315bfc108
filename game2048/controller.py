import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from game2048.commands import Command, CommandKind
from game2048.game_state import GameState, evaluate
from game2048.grid_engine import apply_move, spawn_random_tile
from game2048.history import HistoryStack
from game2048.persistence import GameStore

logger = logging.getLogger(__name__)


class Effect(Enum):
    PERSIST = "persist"
    QUIT = "quit"


@dataclass
class Transition:
    state: GameState
    history: HistoryStack
    effects: Tuple[Effect, ...] = ()


def reduce(state: GameState, history: HistoryStack, command: Command, rng=random) -> Transition:
    """
    Apply one command and return the resulting game.

    The inputs are not modified. Side effects (saving, quitting) are only
    described in `Transition.effects`; running them is up to the caller.
    """
    state = state.copy()
    history = history.copy()
    kind = command.kind

    if kind is CommandKind.MOVE:
        return _move(state, history, command.direction, rng)

    elif kind is CommandKind.NEW_GAME:
        state = GameState.fresh(rng, dark_mode=state.dark_mode)
        return Transition(state, HistoryStack(), (Effect.PERSIST,))

    elif kind is CommandKind.RESET_BOARD:
        # same as a new game, but the undo history survives
        state = GameState.fresh(rng, dark_mode=state.dark_mode)
        return Transition(state, history, (Effect.PERSIST,))

    elif kind is CommandKind.UNDO:
        history.undo(state)
        return Transition(state, history, (Effect.PERSIST,))

    elif kind is CommandKind.TOGGLE_THEME:
        state.dark_mode = not state.dark_mode
        return Transition(state, history, (Effect.PERSIST,))

    elif kind is CommandKind.QUIT:
        return Transition(state, history, (Effect.QUIT,))

    raise ValueError(f"Unhandled command: {command!r}")


def _move(state, history, direction, rng):
    if state.over:
        return Transition(state, history)

    history.before_move(state)
    result = apply_move(state.grid, direction)
    history.discard_if_noop(result.moved)
    if not result.moved:
        return Transition(state, history)

    state.score += result.score_delta
    state.won = state.won or result.reached_win
    state.grid = spawn_random_tile(result.grid, rng)
    state.over = evaluate(state.grid)
    return Transition(state, history, (Effect.PERSIST,))


class GameController:
    """
    Owns the current game and its undo history.

    Every command goes through `reduce`; the resulting PERSIST effect is
    carried out here, after the state has been replaced.
    """

    def __init__(self, store=None, rng=None):
        self.store = store if store is not None else GameStore()
        self.rng = rng if rng is not None else random.Random()
        self.state, self.history = self.store.load(self.rng)

    def dispatch(self, command: Command) -> Tuple[Effect, ...]:
        transition = reduce(self.state, self.history, command, self.rng)
        self.state = transition.state
        self.history = transition.history
        self._after_command(transition.effects)
        return transition.effects

    def _after_command(self, effects):
        if Effect.PERSIST in effects:
            if not self.store.save(self.state, self.history):
                logger.debug("Game state not saved, continuing with in-memory state")

    def can_undo(self) -> bool:
        return self.history.can_undo()
