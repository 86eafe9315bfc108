from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Direction(Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


class CommandKind(Enum):
    MOVE = "move"
    NEW_GAME = "new_game"
    RESET_BOARD = "reset_board"
    UNDO = "undo"
    TOGGLE_THEME = "toggle_theme"
    QUIT = "quit"


@dataclass(frozen=True)
class Command:
    """A single input from the presentation layer. `direction` is only set for MOVE."""
    kind: CommandKind
    direction: Optional[Direction] = None

    def __post_init__(self):
        if (self.kind is CommandKind.MOVE) != (self.direction is not None):
            raise ValueError(f"Invalid command: {self.kind} with direction {self.direction}")


def move(direction):
    return Command(CommandKind.MOVE, Direction(direction))


NEW_GAME = Command(CommandKind.NEW_GAME)
RESET_BOARD = Command(CommandKind.RESET_BOARD)
UNDO = Command(CommandKind.UNDO)
TOGGLE_THEME = Command(CommandKind.TOGGLE_THEME)
QUIT = Command(CommandKind.QUIT)
