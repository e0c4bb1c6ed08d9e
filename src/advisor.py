# advisor.py
# Move selector: the single entry point outer layers call to pick a direction.

import logging
from enum import Enum
from typing import List, Sequence

from core import DIRECTION, Board, process_move, validate_board
from expectimax import best_expectimax_move
from lookahead import best_lookahead_move

logger = logging.getLogger(__name__)

FALLBACK_DIRECTION = DIRECTION.UP


class Engine(Enum):
    """The two search engines a move can be selected with."""
    LOOKAHEAD = "lookahead"
    EXPECTIMAX = "expectimax"


def parse_engine(name) -> Engine:
    """
    Resolves an engine from an Engine member or its (case-insensitive) name.
    Raises:
        ValueError: If the name matches no engine.
    """
    if isinstance(name, Engine):
        return name
    try:
        return Engine(str(name).strip().lower())
    except ValueError:
        choices = ", ".join(e.value for e in Engine)
        raise ValueError(f"Unknown engine {name!r}; expected one of: {choices}.")

def legal_directions(board: Board) -> List[DIRECTION]:
    """Directions that change the board, in direction code order."""
    return [d for d in DIRECTION if process_move(board, d)[1]]

def select_move(board: Sequence[Sequence[int]], depth: int,
                engine: Engine = Engine.LOOKAHEAD) -> DIRECTION:
    """
    Chooses the next move for `board`.
    Args:
        board (Sequence[Sequence[int]]): Square board, 0 for empty cells.
        depth (int): Search depth handed unchanged to the engine. For the lookahead
                     engine it counts player moves; for expectimax it counts plies.
        engine (Engine): Which search engine to run.
    Returns:
        DIRECTION: The chosen direction, or UP when the engine found no move.
    Raises:
        InvalidBoardError: If the board is empty, not square, or holds invalid values.
        ValueError: If depth is not a non-negative integer or engine is unknown.
    """
    frozen = validate_board(board)
    if isinstance(depth, bool) or not isinstance(depth, int) or depth < 0:
        raise ValueError(f"Depth must be a non-negative integer, got {depth!r}.")
    engine = parse_engine(engine)

    if engine is Engine.EXPECTIMAX:
        move = best_expectimax_move(frozen, depth)
        if move is None:
            move = FALLBACK_DIRECTION
    else:
        move = best_lookahead_move(frozen, depth).direction

    logger.debug("engine=%s depth=%d selected %s", engine.value, depth, move.name)
    return move
