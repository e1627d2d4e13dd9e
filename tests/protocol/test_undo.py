from __future__ import annotations

from fastapi.testclient import TestClient

from src.protocol.http.app import create_app


def _client() -> TestClient:
    return TestClient(create_app())


def test_undo_without_moves_returns_400() -> None:
    client = _client()
    r = client.post("/api/games")
    game_id = r.json()["game_id"]

    r_undo = client.post(f"/api/games/{game_id}/undo")
    assert r_undo.status_code == 400
    body = r_undo.json()
    assert body["error"]["code"] == "bad_request"
    assert "no moves" in body["error"]["message"].lower()


def test_undo_restores_prior_state() -> None:
    client = _client()
    r = client.post("/api/games")
    game_id = r.json()["game_id"]
    start_layout = r.json()["layout"]

    r_move = client.post(f"/api/games/{game_id}/move", json={"move": "c1-c3"})
    assert r_move.status_code == 200
    assert r_move.json()["turn"] == "white"

    r_undo = client.post(f"/api/games/{game_id}/undo")
    assert r_undo.status_code == 200
    state = r_undo.json()
    assert state["layout"] == start_layout
    assert state["turn"] == "black"
    assert len(state["legal_moves"]) == 36
    assert state["last_move"] is None
    assert state["move_history"] == []
