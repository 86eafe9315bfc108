import argparse
import logging
import tkinter as tk

from game2048.controller import GameController
from game2048.gameui import Game2048GUI
from game2048.persistence import GameStore


def parse_args():
    parser = argparse.ArgumentParser(description="Play 2048")
    parser.add_argument("--save-path", default=None,
                        help="Where to keep the saved game (default: per-user data directory)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log debug messages")
    return parser.parse_args()


def play_game(save_path=None):
    root = tk.Tk()
    controller = GameController(store=GameStore(save_path))

    game_gui = Game2048GUI(root, controller)
    root.mainloop()


def main():
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    play_game(args.save_path)


if __name__ == "__main__":
    main()
