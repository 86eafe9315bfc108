from game2048 import commands

HELP_TEXT = "Arrows/WASD to move • Space to reset • U to undo • P for dark mode • Ctrl+Q to quit"

KEY_DIRECTIONS = {
    "up": "up", "w": "up",
    "down": "down", "s": "down",
    "left": "left", "a": "left",
    "right": "right", "d": "right",
}


def key_to_command(keysym, control=False):
    """Map a tkinter keysym to a command, or None for keys the game ignores."""
    key = keysym.lower()
    if control:
        if key == "q":
            return commands.QUIT
        if key == "z":
            return commands.UNDO
        return None
    if key in KEY_DIRECTIONS:
        return commands.move(KEY_DIRECTIONS[key])
    if key == "space":
        return commands.RESET_BOARD
    if key == "u":
        return commands.UNDO
    if key == "p":
        return commands.TOGGLE_THEME
    return None


def status_text(state):
    if state.over:
        return "Game Over! Try again."
    if state.won:
        return "You Win! Keep playing or start a new game."
    return HELP_TEXT
