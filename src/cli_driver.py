# cli_driver.py
# Lets the advisor play on the CLI: ask for a move, apply it, spawn a tile, repeat.

import argparse
import logging
import random
from typing import List, Optional

from advisor import Engine, parse_engine, select_move
from core import (
    Board,
    add_evil_tile,
    add_random_tile,
    board_from_flat,
    is_game_over,
    process_move,
    to_board,
)

logger = logging.getLogger(__name__)

START_BOARD = to_board([
    [2, 0, 0, 0],
    [0, 0, 0, 2],
    [0, 0, 0, 0],
    [0, 0, 0, 0],
])


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Watch the 2048 move advisor play.")
    parser.add_argument("--state", type=str, default=None,
                        help="Starting board as 16 comma-separated values, row-major")
    parser.add_argument("--depth", type=int, default=3, help="Search depth")
    parser.add_argument("--engine", type=str, default=Engine.LOOKAHEAD.value,
                        choices=[e.value for e in Engine], help="Search engine")
    parser.add_argument("--moves", type=int, default=100, help="Maximum number of moves to play")
    parser.add_argument("--seed", type=int, default=None, help="Seed for tile spawns")
    parser.add_argument("--spawn", type=str, default="random", choices=["random", "evil"],
                        help="How new tiles are placed after each move")
    parser.add_argument("--log-level", type=str, default="WARNING", help="Logging level")
    return parser.parse_args(argv)


def play(board: Board, depth: int, engine: Engine, moves: int,
         rng: random.Random, spawn: str = "random") -> Board:
    """
    Plays up to `moves` advised moves from `board` and returns the final board.
    Stops early when the game is over or the advice does not change the board.
    """
    for _ in range(moves):
        display_board_state(board)
        if is_game_over(board):
            print("GAME OVER!")
            break

        direction = select_move(board, depth, engine)
        print(f"Best Move: {direction.value}\n")

        next_board, moved = process_move(board, direction)
        if not moved:
            logger.warning("advised %s but it does not change the board", direction.name)
            break

        if spawn == "evil":
            board, _ = add_evil_tile(next_board, direction, rng)
        else:
            board, _ = add_random_tile(next_board, rng)
    return board


# --- Display Function (Example of external usage) ---
def display_board_state(board: Board):
    """Prints the board to the console."""
    for row in board:
        print("\t".join(map(str, row)))
    print("-" * (len(board) * 6)) # Adjust width based on board size


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s | %(name)s | %(message)s")

    if args.state:
        board = board_from_flat([int(value) for value in args.state.split(",")])
    else:
        board = START_BOARD

    rng = random.Random(args.seed)
    final_board = play(board, args.depth, parse_engine(args.engine), args.moves, rng, args.spawn)

    print("\n--- Final Board State ---")
    display_board_state(final_board)
    print(f"Largest tile: {max(max(row) for row in final_board)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
