"""Tests for the FastAPI tic-tac-toe interface."""

from __future__ import annotations

import time

from fastapi.testclient import TestClient

from tictactoe import ui
from tictactoe.ui import app


client = TestClient(app)


def _new_game():
    response = client.post("/api/game")
    assert response.status_code == 200
    return response.json()


def _move(game_id, cell_index):
    return client.post(f"/api/game/{game_id}/move", json={"cellIndex": cell_index})


def test_create_game_and_first_move():
    payload = _new_game()
    assert payload["currentPlayer"] == "X"
    assert payload["board"] == [""] * 9
    assert payload["status"] == "playing"
    assert payload["statusText"] == "Turn: X"
    assert payload["winningLine"] is None

    move_response = _move(payload["id"], 4)
    assert move_response.status_code == 200
    state = move_response.json()
    assert state["accepted"] is True
    assert state["board"][4] == "X"
    assert state["currentPlayer"] == "O"
    assert 4 not in state["availableMoves"]

    follow_up = client.get(f"/api/game/{payload['id']}")
    assert follow_up.status_code == 200
    assert follow_up.json()["board"][4] == "X"


def test_occupied_cell_move_is_ignored():
    game_id = _new_game()["id"]
    first = _move(game_id, 0).json()

    duplicate = _move(game_id, 0)
    assert duplicate.status_code == 200
    state = duplicate.json()
    assert state["accepted"] is False
    assert state["board"] == first["board"]
    assert state["currentPlayer"] == "O"


def test_win_is_reported_with_line():
    game_id = _new_game()["id"]
    for idx in (0, 4, 1, 5):
        _move(game_id, idx)
    state = _move(game_id, 2).json()
    assert state["status"] == "win"
    assert state["winner"] == "X"
    assert state["winningLine"] == [0, 1, 2]
    assert state["statusText"] == "Winner: X"
    assert state["availableMoves"] == []

    late = _move(game_id, 8).json()
    assert late["accepted"] is False
    assert late["board"][8] == ""


def test_draw_is_reported():
    game_id = _new_game()["id"]
    for idx in (0, 2, 1, 3, 5, 4, 6, 7, 8):
        state = _move(game_id, idx).json()
    assert state["status"] == "draw"
    assert state["winner"] is None
    assert state["statusText"] == "It’s a draw!"


def test_restart_clears_board():
    game_id = _new_game()["id"]
    for idx in (0, 4, 1, 5, 2):
        _move(game_id, idx)
    response = client.post(f"/api/game/{game_id}/restart")
    assert response.status_code == 200
    state = response.json()
    assert state["id"] == game_id
    assert state["board"] == [""] * 9
    assert state["currentPlayer"] == "X"
    assert state["status"] == "playing"


def test_rejects_index_outside_board():
    game_id = _new_game()["id"]
    assert _move(game_id, 9).status_code == 422
    assert _move(game_id, -1).status_code == 422


def test_missing_game_returns_404():
    assert client.get("/api/game/missing").status_code == 404
    assert _move("missing", 0).status_code == 404
    assert client.post("/api/game/missing/restart").status_code == 404


def test_idle_sessions_are_evicted():
    stale_id = _new_game()["id"]
    ui.SESSIONS[stale_id].updated_at = time.time() - ui.SESSION_TTL_SECONDS - 1
    fresh_id = _new_game()["id"]
    assert stale_id not in ui.SESSIONS
    assert fresh_id in ui.SESSIONS


def test_moves_keep_session_alive():
    game_id = _new_game()["id"]
    session = ui.SESSIONS[game_id]
    session.updated_at = 0.0
    _move(game_id, 0)
    assert session.updated_at > 0.0


def test_index_serves_page():
    response = client.get("/")
    assert response.status_code == 200
    assert "data-theme" in response.text
    assert "/api/game" in response.text
