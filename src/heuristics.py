# heuristics.py
# Static board evaluators. evaluate_board feeds the expectimax engine,
# grid_quality feeds the worst-case lookahead engine.

import math
from typing import Sequence

from core import Board, get_board_size, get_empty_cells

EMPTY_WEIGHT = 270.0
MONOTONICITY_WEIGHT = 47.0
SMOOTHNESS_WEIGHT = 0.1
MAX_TILE_WEIGHT = 100.0

EMPTY_CELL_QUALITY = 8


def count_empty_cells(board: Board) -> int:
    return len(get_empty_cells(board))

def get_max_tile(board: Board) -> int:
    return max((value for row in board for value in row), default=0)

def _log2(value: int) -> float:
    return math.log2(value) if value > 0 else 0.0

def calculate_monotonicity(board: Board) -> float:
    """
    Monotonicity penalty over rows and columns.

    Only pairs of adjacent non-zero cells are compared. For each orientation the
    decreasing steps and the increasing steps are accumulated separately (both as
    non-positive numbers) and the orientation keeps the larger, i.e. the smaller
    penalty.
    Args:
        board (Board): The board to score.
    Returns:
        float: Sum of both orientations' contributions, always <= 0.
    """
    n = get_board_size(board)
    totals = [0, 0, 0, 0]

    for r in range(n):
        for c in range(n - 1):
            current, following = board[r][c], board[r][c + 1]
            if current and following:
                if current > following:
                    totals[0] += following - current
                else:
                    totals[1] += current - following

    for c in range(n):
        for r in range(n - 1):
            current, following = board[r][c], board[r + 1][c]
            if current and following:
                if current > following:
                    totals[2] += following - current
                else:
                    totals[3] += current - following

    return max(totals[0], totals[1]) + max(totals[2], totals[3])

def calculate_smoothness(board: Board) -> float:
    """Negative sum of log2 gaps between each tile and its right and down neighbours."""
    n = get_board_size(board)
    smoothness = 0.0
    for r in range(n):
        for c in range(n):
            if board[r][c] == 0:
                continue
            value = _log2(board[r][c])
            if c < n - 1 and board[r][c + 1] != 0:
                smoothness -= abs(value - _log2(board[r][c + 1]))
            if r < n - 1 and board[r + 1][c] != 0:
                smoothness -= abs(value - _log2(board[r + 1][c]))
    return smoothness

def evaluate_board(board: Board) -> float:
    """
    Multi-feature score used by the expectimax engine.
    Args:
        board (Board): The board to score.
    Returns:
        float: empty*270 + monotonicity*47 - |smoothness|*0.1 + log2(max tile)*100.
               An empty board has a max tile bonus of 0.
    """
    empty = count_empty_cells(board)
    monotonicity = calculate_monotonicity(board)
    smoothness = calculate_smoothness(board)
    max_tile = get_max_tile(board)

    return (empty * EMPTY_WEIGHT
            + monotonicity * MONOTONICITY_WEIGHT
            - abs(smoothness) * SMOOTHNESS_WEIGHT
            + _log2(max_tile) * MAX_TILE_WEIGHT)

def _line_quality(line: Sequence[int]) -> int:
    previous = -1
    increase = 0
    decrease = 0
    for value in line:
        increase += value
        if value <= previous or previous == -1:
            decrease += value
            if value < previous:
                increase -= previous
        previous = value
    return max(increase, decrease)

def grid_quality(board: Board) -> int:
    """
    Monotonicity and emptiness score used by the lookahead engine.

    Every column is walked top to bottom and every row left to right. A line
    scores the larger of its running "increase" and "decrease" sums, and each
    empty cell adds EMPTY_CELL_QUALITY.
    """
    n = get_board_size(board)
    mono_score = 0
    for c in range(n):
        mono_score += _line_quality([board[r][c] for r in range(n)])
    for r in range(n):
        mono_score += _line_quality(board[r])
    return mono_score + count_empty_cells(board) * EMPTY_CELL_QUALITY
