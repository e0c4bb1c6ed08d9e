# core.py
# Stateless board mechanics shared by both search engines.
# Boards are tuples of tuples indexed board[row][col], row 0 at the top.

import math
import random
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

Board = Tuple[Tuple[int, ...], ...]
Cell = Tuple[int, int]


class InvalidBoardError(ValueError):
    """Raised when a board is empty, not square, or holds invalid tile values."""


class DIRECTION(Enum):
    """Represents the possible move directions, valued by their wire code."""
    UP = 0
    RIGHT = 1
    DOWN = 2
    LEFT = 3

    @property
    def vector(self) -> Tuple[int, int]:
        """Unit movement vector as (d_row, d_col)."""
        return _VECTORS[self]


_VECTORS = {
    DIRECTION.UP: (-1, 0),
    DIRECTION.RIGHT: (0, 1),
    DIRECTION.DOWN: (1, 0),
    DIRECTION.LEFT: (0, -1),
}

# --- Board Helper Functions ---

def to_board(rows: Iterable[Iterable[int]]) -> Board:
    """Freezes any nested sequence of ints into a Board value."""
    return tuple(tuple(int(value) for value in row) for row in rows)

def clone_board(board: Sequence[Sequence[int]]) -> Board:
    return to_board(board)

def get_board_size(board: Sequence[Sequence[int]]) -> int:
    """
    Gets the size (N) of an N x N board.
    Args:
        board (Board): The game board.
    Returns:
        int: The dimension of the board.
    Raises:
        InvalidBoardError: If the board is not square or empty.
    """
    if not board or not all(len(row) == len(board) for row in board):
        raise InvalidBoardError("Board must be a non-empty square matrix.")
    return len(board)

def _is_tile_value(value: int) -> bool:
    return value == 0 or (value >= 2 and value & (value - 1) == 0)

def validate_board(board: Sequence[Sequence[int]]) -> Board:
    """
    Checks the shape and tile values of a board and returns it as a Board value.
    Args:
        board (Sequence[Sequence[int]]): Candidate board.
    Returns:
        Board: The validated, frozen board.
    Raises:
        InvalidBoardError: If the board is empty, not square, or a cell is not
                           0 or a power of two >= 2.
    """
    n = get_board_size(board)
    for row in range(n):
        for col in range(n):
            value = board[row][col]
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidBoardError(
                    f"Cell ({row}, {col}) holds {value!r}; tile values must be integers.")
            if not _is_tile_value(value):
                raise InvalidBoardError(
                    f"Cell ({row}, {col}) holds {value}; tiles must be 0 or a power of two >= 2.")
    return to_board(board)

def board_from_flat(values: Sequence[int], size: Optional[int] = None) -> Board:
    """
    Builds a board from a row-major flattened sequence (index = row * N + col).
    Args:
        values (Sequence[int]): The N * N cell values.
        size (Optional[int]): Expected N; inferred from len(values) when omitted.
    Returns:
        Board: The validated board.
    Raises:
        InvalidBoardError: If the length does not describe an N x N board or a
                           value is not a valid tile.
    """
    count = len(values)
    if size is None:
        size = math.isqrt(count)
    if size <= 0 or size * size != count:
        raise InvalidBoardError(
            f"Expected {size * size if size else 'a square number of'} values, got {count}.")
    rows = [list(values[r * size:(r + 1) * size]) for r in range(size)]
    return validate_board(rows)

def flatten_board(board: Board) -> List[int]:
    return [value for row in board for value in row]

def get_empty_cells(board: Board) -> List[Cell]:
    """
    Get coordinates of empty (0-value) cells in the given board.
    Args:
        board (Board): The board to check.
    Returns:
        List[Cell]: List of (row, col) tuples for empty cells, row-major.
    """
    n = get_board_size(board)
    empty_cells = []
    for row in range(n):
        for col in range(n):
            if board[row][col] == 0:
                empty_cells.append((row, col))
    return empty_cells

def boards_equal(a: Board, b: Board) -> bool:
    return tuple(map(tuple, a)) == tuple(map(tuple, b))

def within_bounds(board: Board, cell: Cell) -> bool:
    n = len(board)
    return 0 <= cell[0] < n and 0 <= cell[1] < n

def neighbours(board: Board, cell: Cell) -> List[Cell]:
    """In-bounds 4-neighbourhood of a cell, in direction code order."""
    row, col = cell
    result = []
    for direction in DIRECTION:
        d_row, d_col = direction.vector
        adjacent = (row + d_row, col + d_col)
        if within_bounds(board, adjacent):
            result.append(adjacent)
    return result

def place_tile(board: Board, cell: Cell, value: int) -> Board:
    """Returns a new board with `value` written at `cell`."""
    row, col = cell
    new_board = [list(r) for r in board]
    new_board[row][col] = value
    return to_board(new_board)

# --- Tile Spawning ---

def add_random_tile(board: Board, rng: Optional[random.Random] = None) -> Tuple[Board, bool]:
    """
    Adds a new tile (90% chance of 2, 10% chance of 4) to an empty cell on a copy of the board.
    Args:
        board (Board): The current game board.
        rng (Optional[random.Random]): Random source; a fresh unseeded one when omitted.
    Returns:
        Tuple[Board, bool]: A new board with the added tile and a boolean
                            indicating if a tile was successfully added.
                            If no empty cells, returns the original board and False.
    """
    rng = rng or random.Random()
    empty_cells = get_empty_cells(board)
    if not empty_cells:
        return clone_board(board), False

    cell = rng.choice(empty_cells)
    value = 4 if rng.random() < 0.1 else 2
    return place_tile(board, cell, value), True

def add_evil_tile(board: Board, last_direction: DIRECTION,
                  rng: Optional[random.Random] = None) -> Tuple[Board, bool]:
    """
    Adds a tile in (hopefully) the worst position for the player.

    Candidates are the first free cells of every line, scanned from the edge the
    last move pushed tiles against. Among them the cells whose smallest occupied
    neighbour is largest win; a cell with no neighbours counts as 2 ** (N * N).
    A 2 is placed, or a 4 when the winning neighbour value is 2.
    Args:
        board (Board): The current game board.
        last_direction (DIRECTION): Direction of the move that was just played.
        rng (Optional[random.Random]): Random source used to break ties.
    Returns:
        Tuple[Board, bool]: The new board and whether a tile was placed.
    """
    rng = rng or random.Random()
    n = get_board_size(board)
    if not get_empty_cells(board):
        return clone_board(board), False

    d_row, d_col = (-v for v in last_direction.vector)

    def scan(index: int, offset: int, delta: int) -> int:
        if delta == 1:
            return offset
        if delta == -1:
            return n - offset - 1
        return index

    options: List[Cell] = []
    for i in range(n):
        for j in range(n):
            cell = (scan(i, j, d_row), scan(i, j, d_col))
            if board[cell[0]][cell[1]] == 0:
                options.append(cell)
                break

    best_score = 0
    winners: List[Cell] = []
    ceiling = 2 ** (n * n)
    for cell in options:
        min_value = ceiling
        for row, col in neighbours(board, cell):
            if board[row][col]:
                min_value = min(min_value, board[row][col])
        if min_value > best_score:
            winners = []
            best_score = min_value
        if min_value >= best_score:
            winners.append(cell)

    if not winners:
        return clone_board(board), False
    value = 2 if best_score != 2 else 4
    return place_tile(board, rng.choice(winners), value), True

# --- Line Manipulation (Core Move Logic Helpers) ---

def _compress_line(line: Sequence[int]) -> List[int]:
    """
    Compresses a single line to the left (moves all non-zero tiles to the "start").
    Args:
        line (Sequence[int]): The line to compress.
    Returns:
        List[int]: The compressed line.
    """
    compressed = [i for i in line if i != 0]
    return compressed + [0] * (len(line) - len(compressed))

def _merge_line(line: List[int]) -> List[int]:
    """
    Merges adjacent identical numbers in a compressed line moving toward index 0.
    The pass runs once left to right; a doubled tile leaves a zero behind it, so it
    is never compared again in the same move.
    Args:
        line (List[int]): The compressed line to merge.
    Returns:
        List[int]: The merged line, possibly with interior zeros.
    """
    merged = list(line)
    for i in range(len(merged) - 1):
        if merged[i] != 0 and merged[i] == merged[i + 1]:
            merged[i] *= 2
            merged[i + 1] = 0
    return merged

def _process_single_line_leftwise(line: Sequence[int]) -> Tuple[int, ...]:
    """Applies compress, merge, then compress again to a single line, moving left."""
    return tuple(_compress_line(_merge_line(_compress_line(line))))

# --- Board Transformations ---

def transpose_board(board: Board) -> Board:
    """
    Transposes a given board (swaps rows and columns).
    Args:
        board (Board): The board to transpose.
    Returns:
        Board: A new transposed board.
    """
    return tuple(zip(*board))

def reverse_rows(board: Board) -> Board:
    """
    Reverses each row in a given board.
    Args:
        board (Board): The board whose rows are to be reversed.
    Returns:
        Board: A new board with rows reversed.
    """
    return tuple(tuple(row[::-1]) for row in board)

# --- Core Game Move Processing ---

def move_left(board: Board) -> Board:
    return tuple(_process_single_line_leftwise(row) for row in board)

def move_right(board: Board) -> Board:
    return reverse_rows(move_left(reverse_rows(board)))

def move_up(board: Board) -> Board:
    return transpose_board(move_left(transpose_board(board)))

def move_down(board: Board) -> Board:
    return transpose_board(move_right(transpose_board(board)))

_MOVES = {
    DIRECTION.UP: move_up,
    DIRECTION.RIGHT: move_right,
    DIRECTION.DOWN: move_down,
    DIRECTION.LEFT: move_left,
}

def process_move(board: Board, direction: DIRECTION) -> Tuple[Board, bool]:
    """
    Processes a move in the specified direction.
    Args:
        board (Board): The current game board.
        direction (DIRECTION): The direction to move.
    Returns:
        Tuple[Board, bool]:
            - The new board state after the move.
            - A boolean indicating if the board changed (the move is legal).
    Raises:
        ValueError: If an invalid direction is specified.
    """
    try:
        move = _MOVES[direction]
    except KeyError:
        raise ValueError(f"Invalid direction specified for process_move: {direction!r}")
    source = clone_board(board)
    moved = move(source)
    return moved, not boards_equal(source, moved)

# --- Game State Checks ---

def is_move_possible_in_direction(board: Board, direction: DIRECTION) -> bool:
    """
    Check if any tile can move or merge in the given specific direction.
    Args:
        board (Board): The game board.
        direction (DIRECTION): The direction to check.
    Returns:
       bool: True if at least one tile can move or merge in that direction, False otherwise.
    """
    n = get_board_size(board)
    d_row, d_col = direction.vector
    for r_idx in range(n):
        for c_idx in range(n):
            if board[r_idx][c_idx] == 0:
                continue  # Only non-empty tiles can initiate a move

            target = (r_idx + d_row, c_idx + d_col)
            if not within_bounds(board, target):
                continue
            other = board[target[0]][target[1]]
            if other == 0 or other == board[r_idx][c_idx]:
                return True
    return False

def is_any_move_possible(board: Board) -> bool:
    """
    Checks if any move is possible in any direction on the board.
    Args:
        board (Board): The game board.
    Returns:
        bool: True if any move can be made, False otherwise.
    """
    return any(is_move_possible_in_direction(board, d) for d in DIRECTION)

def is_game_over(board: Board) -> bool:
    """
    The game is over when the board is full and no direction changes it.
    Args:
        board (Board): The game board.
    Returns:
        bool: True if no empty cell exists and every move is illegal.
    """
    if get_empty_cells(board):
        return False
    return not is_any_move_possible(board)
