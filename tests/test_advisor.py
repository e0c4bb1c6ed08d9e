import pytest

from advisor import Engine, legal_directions, parse_engine, select_move
from core import DIRECTION, InvalidBoardError, process_move

START = [[2, 0, 0, 0], [0, 0, 0, 2], [0, 0, 0, 0], [0, 0, 0, 0]]
FULL_NO_MERGE = [[2, 4, 2, 4], [4, 2, 4, 2], [2, 4, 2, 4], [4, 2, 4, 2]]


@pytest.mark.parametrize("engine", list(Engine))
@pytest.mark.parametrize("depth", [1, 2])
def test_start_board_gets_a_legal_move(engine, depth):
    move = select_move(START, depth, engine)
    assert move in legal_directions(START)
    assert process_move(START, move)[1]


def test_lookahead_is_the_default_engine():
    assert select_move([[2, 0], [0, 0]], 1) == DIRECTION.RIGHT


@pytest.mark.parametrize("engine", list(Engine))
def test_repeated_calls_agree(engine):
    assert select_move(START, 2, engine) == select_move(START, 2, engine)


@pytest.mark.parametrize("engine", list(Engine))
def test_game_over_board_falls_back_to_up(engine):
    assert select_move(FULL_NO_MERGE, 2, engine) == DIRECTION.UP


def test_expectimax_depth_zero_falls_back_to_up():
    assert select_move(START, 0, Engine.EXPECTIMAX) == DIRECTION.UP


def test_only_legal_direction_is_chosen():
    board = [[2, 4, 8, 16], [0] * 4, [0] * 4, [0] * 4]
    assert legal_directions(board) == [DIRECTION.DOWN]
    for engine in Engine:
        assert select_move(board, 2, engine) == DIRECTION.DOWN


@pytest.mark.parametrize("board", [[], [[2, 0, 0], [0, 0, 0]], [[2, 0], [0]]])
def test_rejects_empty_or_non_square_boards(board):
    with pytest.raises(InvalidBoardError):
        select_move(board, 1)


def test_rejects_invalid_tiles():
    with pytest.raises(InvalidBoardError):
        select_move([[3, 0], [0, 0]], 1)


@pytest.mark.parametrize("depth", [-1, 1.5, "2", True])
def test_rejects_bad_depth(depth):
    with pytest.raises(ValueError):
        select_move(START, depth)


def test_parse_engine():
    assert parse_engine("EXPECTIMAX") is Engine.EXPECTIMAX
    assert parse_engine(" lookahead ") is Engine.LOOKAHEAD
    assert parse_engine(Engine.LOOKAHEAD) is Engine.LOOKAHEAD
    with pytest.raises(ValueError):
        parse_engine("minimax")
