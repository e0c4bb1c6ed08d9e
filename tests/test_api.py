import threading

import pytest
from fastapi.testclient import TestClient

import advisor
import api
from core import DIRECTION, to_board

client = TestClient(api.app)

# Only DOWN changes this board.
TOP_ROW_STATE = "2,4,8,16," + ",".join(["0"] * 12)


def test_missing_state_is_rejected():
    response = client.get("/")
    assert response.status_code == 400
    assert response.json()["detail"] == "state input is required."


@pytest.mark.parametrize("state", ["2,0,0", "a,b,c", "3" + ",0" * 15, "-2" + ",0" * 15])
def test_malformed_state_is_rejected(state):
    response = client.get("/", params={"state": state})
    assert response.status_code == 400


def test_returns_direction_code_as_text():
    response = client.get("/", params={"state": TOP_ROW_STATE, "depth": 1})
    assert response.status_code == 200
    assert response.text == "2"


def test_expectimax_engine_can_be_requested():
    response = client.get("/", params={"state": TOP_ROW_STATE, "depth": 2, "engine": "expectimax"})
    assert response.status_code == 200
    assert response.text == "2"


def test_unknown_engine_is_rejected():
    response = client.get("/", params={"state": TOP_ROW_STATE, "depth": 1, "engine": "minimax"})
    assert response.status_code == 400


def test_negative_depth_is_rejected():
    response = client.get("/", params={"state": TOP_ROW_STATE, "depth": -1})
    assert response.status_code == 422


def test_search_fault_falls_back_to_zero(monkeypatch):
    def broken(*args, **kwargs):
        raise RuntimeError("search blew up")

    monkeypatch.setattr(advisor, "select_move", broken)
    response = client.get("/", params={"state": TOP_ROW_STATE, "depth": 1})
    assert response.status_code == 200
    assert response.text == "0"


def test_json_move_endpoint():
    board = [[2, 4, 8, 16], [0] * 4, [0] * 4, [0] * 4]
    response = client.post("/move", json={"board": board, "depth": 1})
    assert response.status_code == 200
    assert response.json() == {
        "direction": 2,
        "direction_name": "DOWN",
        "depth": 1,
        "engine": "lookahead",
    }


def test_json_move_endpoint_rejects_non_square_board():
    response = client.post("/move", json={"board": [[2, 0, 0], [0, 0, 0]], "depth": 1})
    assert response.status_code == 400


def test_health():
    assert client.get("/health").json() == {"status": "ok"}


@pytest.mark.parametrize("tile, expected", [(2, 5), (1024, 5), (2048, 6), (4096, 7), (8192, 8), (16384, 8)])
def test_depth_grows_with_largest_tile(tile, expected):
    board = to_board([[tile, 0, 0, 0], [0] * 4, [0] * 4, [0] * 4])
    assert api.depth_for_board(board, 5) == expected


def test_depth_scaling_is_relative_to_base_depth():
    board = to_board([[2048, 0, 0, 0], [0] * 4, [0] * 4, [0] * 4])
    assert api.depth_for_board(board, 2) == 3


def record_depths(monkeypatch):
    depths = []

    def fake_select_move(board, depth, engine):
        depths.append(depth)
        return DIRECTION.DOWN

    monkeypatch.setattr(advisor, "select_move", fake_select_move)
    return depths


def test_get_without_depth_scales_base_depth(monkeypatch):
    depths = record_depths(monkeypatch)
    state = "2048," + ",".join(["0"] * 15)
    response = client.get("/", params={"state": state})
    assert response.status_code == 200
    assert response.text == "2"
    assert depths == [api.settings.base_depth + 1]


def test_post_without_depth_scales_base_depth(monkeypatch):
    depths = record_depths(monkeypatch)
    board = [[8192, 0, 0, 0], [0] * 4, [0] * 4, [0] * 4]
    response = client.post("/move", json={"board": board})
    assert response.status_code == 200
    assert response.json()["depth"] == api.settings.base_depth + 3
    assert depths == [api.settings.base_depth + 3]


def test_health_answers_while_a_search_runs(monkeypatch):
    started = threading.Event()
    release = threading.Event()

    def slow_select_move(board, depth, engine):
        started.set()
        release.wait(10)
        return DIRECTION.DOWN

    monkeypatch.setattr(advisor, "select_move", slow_select_move)
    responses = {}

    with TestClient(api.app) as shared_client:
        def advise_request():
            responses["advice"] = shared_client.get("/", params={"state": TOP_ROW_STATE, "depth": 1})

        def health_request():
            responses["health"] = shared_client.get("/health")

        advice_thread = threading.Thread(target=advise_request)
        advice_thread.start()
        try:
            assert started.wait(5)
            health_thread = threading.Thread(target=health_request)
            health_thread.start()
            health_thread.join(5)
            assert not health_thread.is_alive()
            assert responses["health"].json() == {"status": "ok"}
            assert "advice" not in responses
        finally:
            release.set()
            advice_thread.join(10)

    assert responses["advice"].text == "2"
