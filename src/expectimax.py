# expectimax.py
# Expectimax search: a maximising player ply alternating with a chance ply
# that averages over every possible tile spawn.

import logging
from typing import NamedTuple, Optional, Tuple

from core import DIRECTION, Board, get_empty_cells, is_game_over, place_tile, process_move
from heuristics import evaluate_board

logger = logging.getLogger(__name__)

# Scan order of the player ply; equal scores keep the first direction found.
MOVE_ORDER: Tuple[DIRECTION, ...] = (DIRECTION.UP, DIRECTION.DOWN, DIRECTION.LEFT, DIRECTION.RIGHT)

# (tile value, weight) pairs enumerated for each empty cell on the chance ply.
SPAWN_OUTCOMES: Tuple[Tuple[int, float], ...] = ((2, 0.9), (4, 0.1))


class SearchResult(NamedTuple):
    """Score of a search node and, on player plies, the move that achieves it."""
    score: float
    move: Optional[DIRECTION] = None


def expectimax(board: Board, depth: int, is_player_turn: bool = True) -> SearchResult:
    """
    Evaluates `board` by expectimax search.

    Depth is decremented once per ply of either kind, so one player move plus the
    tile spawn that answers it consumes two levels.
    Args:
        board (Board): Board to search from.
        depth (int): Remaining plies.
        is_player_turn (bool): True on a maximising ply, False on a chance ply.
    Returns:
        SearchResult: The node score; `move` is set only on player plies that had
                      at least one legal direction.
    """
    if depth <= 0 or is_game_over(board):
        return SearchResult(evaluate_board(board))

    if is_player_turn:
        return _player_ply(board, depth)
    return _chance_ply(board, depth)

def _player_ply(board: Board, depth: int) -> SearchResult:
    best: Optional[SearchResult] = None
    for direction in MOVE_ORDER:
        moved, changed = process_move(board, direction)
        if not changed:
            continue
        result = expectimax(moved, depth - 1, False)
        if best is None or result.score > best.score:
            best = SearchResult(result.score, direction)

    if best is None:
        return SearchResult(evaluate_board(board))
    return best

def _chance_ply(board: Board, depth: int) -> SearchResult:
    empty_cells = get_empty_cells(board)
    if not empty_cells:
        return SearchResult(evaluate_board(board))

    total = 0.0
    outcomes = 0
    for cell in empty_cells:
        for value, weight in SPAWN_OUTCOMES:
            result = expectimax(place_tile(board, cell, value), depth - 1, True)
            total += result.score * weight
            outcomes += 1
    # Divided by the number of (cell, value) pairs, not by the summed weights.
    return SearchResult(total / outcomes)

def best_expectimax_move(board: Board, depth: int) -> Optional[DIRECTION]:
    """Runs expectimax from a player ply and returns the chosen direction, if any."""
    result = expectimax(board, depth, True)
    logger.debug("expectimax depth=%d score=%.3f move=%s", depth, result.score, result.move)
    return result.move
