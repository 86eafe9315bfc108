import math
import tkinter as tk

from game2048 import commands
from game2048.controller import Effect
from game2048.grid_engine import GRID_SIZE
from game2048.keys import HELP_TEXT, key_to_command, status_text

CELL_SIZE = 100
CELL_PADDING = 10
FONT = ("Verdana", 24, "bold")

LIGHT_THEME = {
    "background": "#92877d",
    "empty": "#9e948a",
    "window": "#faf8ef",
    "text": "#776e65",
    "small_tile_text": "#776e65",
    "big_tile_text": "#f9f6f2",
    "other": "#3c3a32",
    "tiles": {
        2: "#eee4da",
        4: "#ede0c8",
        8: "#f2b179",
        16: "#f59563",
        32: "#f67c5f",
        64: "#f65e3b",
        128: "#edcf72",
        256: "#edcc61",
        512: "#edc850",
        1024: "#edc53f",
        2048: "#edc22e",
    },
}

DARK_THEME = {
    "background": "#2b2b2b",
    "empty": "#333333",
    "window": "#1e1e1e",
    "text": "#cccccc",
    "small_tile_text": "#cccccc",
    "big_tile_text": "#ffffff",
    "other": "#cc33cc",
    "tiles": {
        2: "#4d4d4d",
        4: "#666659",
        8: "#806633",
        16: "#994d33",
        32: "#b33333",
        64: "#cc1a1a",
        128: "#b3991a",
        256: "#ccb31a",
        512: "#e6cc1a",
        1024: "#ffe61a",
        2048: "#ffcc00",
    },
}


def get_tile_color(value, theme):
    """Tile color for any 2^N tile; tiles above 2048 share the theme's fallback color."""
    return theme["tiles"].get(value, theme["other"])


def get_text_color(value, theme):
    return theme["small_tile_text"] if value <= 4 else theme["big_tile_text"]


class Game2048GUI:
    def __init__(self, master, controller):
        """
        master: Tk root
        controller: GameController owning the game
        """
        self.master = master
        self.controller = controller

        master.title("2048")
        master.resizable(False, False)

        self.top_frame = tk.Frame(master)
        self.top_frame.pack(pady=10)

        self.score_label = tk.Label(self.top_frame, text="Score: 0", font=("Verdana", 16), width=12, anchor="w")
        self.score_label.pack(side=tk.LEFT, padx=10)

        self.new_game_button = tk.Button(
            self.top_frame, text="New Game", font=("Verdana", 12),
            command=lambda: self.dispatch(commands.NEW_GAME)
        )
        self.new_game_button.pack(side=tk.LEFT, padx=5)

        self.undo_button = tk.Button(
            self.top_frame, text="Undo", font=("Verdana", 12),
            command=lambda: self.dispatch(commands.UNDO)
        )
        self.undo_button.pack(side=tk.LEFT, padx=5)

        self.theme_button = tk.Button(
            self.top_frame, text="Dark Mode", font=("Verdana", 12),
            command=lambda: self.dispatch(commands.TOGGLE_THEME)
        )
        self.theme_button.pack(side=tk.LEFT, padx=5)

        canvas_size = GRID_SIZE * (CELL_SIZE + CELL_PADDING) + CELL_PADDING
        self.canvas = tk.Canvas(master, width=canvas_size, height=canvas_size, highlightthickness=0)
        self.canvas.pack(padx=20)

        self.status_label = tk.Label(master, text=HELP_TEXT, font=("Verdana", 11))
        self.status_label.pack(pady=10)

        master.bind("<Key>", self.on_key)

        self.draw_tiles()

    # -------------------------------------------------------------------------
    #                        KEYBOARD CONTROLS
    # -------------------------------------------------------------------------
    def on_key(self, event):
        control = bool(event.state & 0x4)
        command = key_to_command(event.keysym, control)
        if command is not None:
            self.dispatch(command)

    def dispatch(self, command):
        effects = self.controller.dispatch(command)
        if Effect.QUIT in effects:
            self.master.destroy()
            return
        self.draw_tiles()

    # -------------------------------------------------------------------------
    #                             DRAWING
    # -------------------------------------------------------------------------
    def draw_tiles(self):
        state = self.controller.state
        theme = DARK_THEME if state.dark_mode else LIGHT_THEME

        self.master.configure(bg=theme["window"])
        self.top_frame.configure(bg=theme["window"])
        self.canvas.configure(bg=theme["background"])
        self.canvas.delete("all")

        for i in range(GRID_SIZE):
            for j in range(GRID_SIZE):
                value = state.grid[i][j]
                self.draw_single_tile(i, j, value, theme)

        self.score_label.config(text=f"Score: {state.score}", bg=theme["window"], fg=theme["text"])
        self.status_label.config(text=status_text(state), bg=theme["window"], fg=theme["text"])
        self.theme_button.config(text="Light Mode" if state.dark_mode else "Dark Mode")
        self.undo_button.config(state=tk.NORMAL if self.controller.can_undo() else tk.DISABLED)

        self.master.update_idletasks()

    def draw_single_tile(self, i, j, value, theme):
        x0 = CELL_PADDING + j * (CELL_SIZE + CELL_PADDING)
        y0 = CELL_PADDING + i * (CELL_SIZE + CELL_PADDING)
        x1 = x0 + CELL_SIZE
        y1 = y0 + CELL_SIZE

        if value == 0:
            self.canvas.create_rectangle(x0, y0, x1, y1, fill=theme["empty"], outline="")
            return

        self.canvas.create_rectangle(x0, y0, x1, y1, fill=get_tile_color(value, theme), outline="")
        # shrink the font for tiles with many digits
        digits = int(math.log10(value)) + 1
        font = (FONT[0], FONT[1] if digits <= 3 else FONT[1] - 4 * (digits - 3), FONT[2])
        self.canvas.create_text(
            x0 + CELL_SIZE / 2, y0 + CELL_SIZE / 2,
            text=str(value), font=font, fill=get_text_color(value, theme)
        )
