import logging
from typing import List, Optional

import uvicorn
from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

import advisor
import core
from settings import load_settings

BOARD_SIZE = 4
DEFAULT_DIRECTION_CODE = 0

# (minimum max tile, extra depth), checked highest first
DEPTH_STEPS = ((8192, 3), (4096, 2), (2048, 1))

settings = load_settings()

logging.basicConfig(
    level=settings.log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
)
logger = logging.getLogger(__name__)

# Initialize the rate limiter
limiter = Limiter(key_func=get_remote_address)
app = FastAPI(
    title=settings.title,
    description="A stateless API that recommends the next 2048 move. "\
                "Send the board on every request; nothing is stored between calls.",
    version="1.0.0"
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# --- Pydantic Models for API requests and responses ---

class MoveAdviceRequest(BaseModel):
    """Board to advise on, with optional search settings."""
    board: List[List[int]] = Field(..., description="The N x N game board, 0 for empty cells.")
    depth: Optional[int] = Field(
        default=None,
        ge=0,
        description="Search depth. Derived from the largest tile when omitted."
    )
    engine: Optional[str] = Field(
        default=None,
        description="Search engine to use (lookahead or expectimax). Server default when omitted."
    )

class MoveAdviceResponse(BaseModel):
    """Recommended move and the search settings that produced it."""
    direction: int = Field(..., ge=0, le=3, description="Direction code: 0=up, 1=right, 2=down, 3=left.")
    direction_name: str = Field(..., description="Name of the recommended direction.")
    depth: int = Field(..., ge=0, description="Search depth that was used.")
    engine: str = Field(..., description="Search engine that was used.")

# --- Boundary policy ---

def depth_for_board(board: core.Board, base_depth: int) -> int:
    """
    Scales the search depth with the largest tile on the board.
    Args:
        board (core.Board): The board to advise on.
        base_depth (int): Depth used while no tile reaches 2048.
    Returns:
        int: base_depth, plus 1 at 2048, 2 at 4096 and 3 at 8192.
    """
    max_tile = max(core.flatten_board(board), default=0)
    for tile, extra in DEPTH_STEPS:
        if max_tile >= tile:
            return base_depth + extra
    return base_depth

def parse_state(state: str) -> core.Board:
    """
    Parses a comma-separated, row-major board (index = row * 4 + col).
    Raises:
        ValueError: If a value is not an integer or the board is invalid.
    """
    try:
        values = [int(value) for value in state.split(",")]
    except ValueError:
        raise core.InvalidBoardError("State must be a comma-separated list of integers.")
    return core.board_from_flat(values, BOARD_SIZE)

def advise(board: core.Board, depth: int, engine: advisor.Engine) -> int:
    """Runs the selector; any unexpected fault degrades to direction code 0."""
    try:
        return advisor.select_move(board, depth, engine).value
    except Exception:
        logger.exception("error while getting the best direction for the game.")
        return DEFAULT_DIRECTION_CODE

# --- API Endpoints ---

@app.get("/", response_class=PlainTextResponse, summary="Recommend a Move for a Flattened Board")
@limiter.limit(settings.rate_limit)
def recommend_move(
    request: Request,
    state: Optional[str] = Query(default=None, description="16 comma-separated tile values, row-major."),
    depth: Optional[int] = Query(default=None, ge=0, description="Search depth hint."),
    engine: Optional[str] = Query(default=None, description="lookahead or expectimax."),
):
    """
    Returns the recommended direction code (0=up, 1=right, 2=down, 3=left) as plain text.
    """
    if not state:
        raise HTTPException(status_code=400, detail="state input is required.")
    try:
        board = parse_state(state)
        chosen_engine = advisor.parse_engine(engine or settings.engine)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid request: {str(e)}")

    chosen_depth = depth if depth is not None else depth_for_board(board, settings.base_depth)
    logger.info("advising state=%s depth=%d engine=%s", state, chosen_depth, chosen_engine.value)
    return PlainTextResponse(str(advise(board, chosen_depth, chosen_engine)))


@app.post("/move", response_model=MoveAdviceResponse, summary="Recommend a Move for a Board")
@limiter.limit(settings.rate_limit)
def recommend_move_json(request: Request, request_data: MoveAdviceRequest):
    """
    Recommends the next move for an N x N `board`.

    - **depth**: search depth; derived from the largest tile when omitted.
    - **engine**: `lookahead` (default) or `expectimax`.
    """
    try:
        board = core.validate_board(request_data.board)
        chosen_engine = advisor.parse_engine(request_data.engine or settings.engine)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid request: {str(e)}")

    chosen_depth = request_data.depth
    if chosen_depth is None:
        chosen_depth = depth_for_board(board, settings.base_depth)
    logger.info("advising board=%s depth=%d engine=%s", board, chosen_depth, chosen_engine.value)

    direction = core.DIRECTION(advise(board, chosen_depth, chosen_engine))
    return MoveAdviceResponse(
        direction=direction.value,
        direction_name=direction.name,
        depth=chosen_depth,
        engine=chosen_engine.value,
    )


@app.get("/health", summary="Liveness Check")
async def health():
    return {"status": "ok"}


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=5000)
