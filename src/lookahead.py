# lookahead.py
# Worst-case lookahead: every player move is answered by an adversary that
# places a 2 next to the existing tiles, and moves are ranked by how much
# board quality they are expected to lose.

import logging
from typing import List, NamedTuple, Optional, Sequence

from core import (
    DIRECTION,
    Board,
    Cell,
    get_empty_cells,
    neighbours,
    place_tile,
    process_move,
)
from heuristics import grid_quality

logger = logging.getLogger(__name__)

SPAWN_VALUE = 2
NO_QUALITY = -1


class LookaheadResult(NamedTuple):
    """
    Outcome of playing `direction` and letting the adversary answer.

    quality: worst board quality the adversary can force.
    probability: share of the adversary's spawn sites that realise that quality.
    quality_loss: approximate expected drop below the root board's quality.
    """
    quality: float
    probability: float
    quality_loss: float
    direction: Optional[DIRECTION] = None


def spawn_candidates(board: Board) -> List[Cell]:
    """
    Empty cells with at least one occupied 4-neighbour.
    Isolated empty cells are never considered as spawn sites.
    """
    candidates = []
    for cell in get_empty_cells(board):
        if any(board[row][col] for row, col in neighbours(board, cell)):
            candidates.append(cell)
    return candidates

def plan_ahead(board: Board, depth: int, original_quality: float) -> List[Optional[LookaheadResult]]:
    """
    Plans `depth` moves ahead in every direction.
    Args:
        board (Board): Board before the player's move.
        depth (int): Number of player moves still to look at; values below 1 act as 1.
        original_quality (float): Quality of the root board, shared by every leaf.
    Returns:
        List[Optional[LookaheadResult]]: One entry per direction code; None when the
            direction does not change the board. A legal move with no spawn site
            keeps quality -1.
    """
    results: List[Optional[LookaheadResult]] = [None] * len(DIRECTION)

    for direction in DIRECTION:
        moved, changed = process_move(board, direction)
        if not changed:
            continue

        quality = NO_QUALITY
        probability = 1.0
        quality_loss = 0.0
        candidates = spawn_candidates(moved)
        share = len(candidates)

        for cell in candidates:
            child = place_tile(moved, cell, SPAWN_VALUE)
            if depth > 1:
                # The player answers the spawn with their own best move.
                branch = choose_best_move(plan_ahead(child, depth - 1, original_quality), original_quality)
            else:
                child_quality = grid_quality(child)
                branch = LookaheadResult(child_quality, 1.0, max(original_quality - child_quality, 0))

            # The spawn site is out of our hands: keep the worst quality.
            if quality == NO_QUALITY or branch.quality < quality:
                quality = branch.quality
                probability = branch.probability / share
            elif branch.quality == quality:
                probability += branch.probability / share
            quality_loss += branch.quality_loss / share

        results[direction.value] = LookaheadResult(quality, probability, quality_loss, direction)
    return results

def choose_best_move(results: Sequence[Optional[LookaheadResult]], original_quality: float) -> LookaheadResult:
    """
    Picks the result with the least quality loss, then the best quality, then the
    lowest probability of that quality. Earlier entries win complete ties.

    When no direction is legal a sentinel is returned: quality -1, probability 1,
    the whole original quality as loss, and UP as the direction. It means
    "no improving move", not a recommendation.
    """
    best: Optional[LookaheadResult] = None
    for result in results:
        if result is None:
            continue
        if (best is None
                or result.quality_loss < best.quality_loss
                or (result.quality_loss == best.quality_loss and result.quality > best.quality)
                or (result.quality_loss == best.quality_loss and result.quality == best.quality
                    and result.probability < best.probability)):
            best = result

    if best is None:
        return LookaheadResult(NO_QUALITY, 1.0, original_quality, DIRECTION.UP)
    return best

def best_lookahead_move(board: Board, depth: int) -> LookaheadResult:
    """Scores the root board once and runs the lookahead from it."""
    original_quality = grid_quality(board)
    results = plan_ahead(board, depth, original_quality)
    best = choose_best_move(results, original_quality)
    logger.debug("lookahead depth=%d original_quality=%s results=%s best=%s",
                 depth, original_quality, results, best)
    return best
