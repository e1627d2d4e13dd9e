from __future__ import annotations

from fastapi.testclient import TestClient

from src.engine.board import INITIAL_LAYOUT
from src.protocol.http.app import create_app


def _client() -> TestClient:
    return TestClient(create_app())


def _new_game(client: TestClient) -> str:
    r = client.post("/api/games")
    assert r.status_code == 200
    return r.json()["game_id"]


def test_create_game_and_get_state() -> None:
    client = _client()
    r = client.post("/api/games")
    assert r.status_code == 200
    body = r.json()
    assert isinstance(body["game_id"], str) and body["game_id"]
    assert body["layout"] == list(INITIAL_LAYOUT)
    assert body["turn"] == "black"

    r2 = client.get(f"/api/games/{body['game_id']}/state")
    assert r2.status_code == 200
    state = r2.json()
    assert state["game_id"] == body["game_id"]
    assert len(state["legal_moves"]) == 36
    assert state["winner"] is None
    assert state["game_over"] is False
    assert state["moves_made"] == 0
    assert state["move_limit"] == 120
    assert state["last_move"] is None


def test_get_state_unknown_id_404() -> None:
    client = _client()
    r = client.get("/api/games/does-not-exist/state")
    assert r.status_code == 404
    body = r.json()
    assert body["error"]["code"] == "not_found"


def test_set_position_validation_and_success() -> None:
    client = _client()
    game_id = _new_game(client)

    r_bad = client.post(f"/api/games/{game_id}/position", json={"layout": ["bad"]})
    assert r_bad.status_code == 400
    assert r_bad.json()["error"]["code"] == "bad_request"

    r_side = client.post(
        f"/api/games/{game_id}/position",
        json={"layout": list(INITIAL_LAYOUT), "turn": "green"},
    )
    assert r_side.status_code == 400

    layout = ["--------"] * 6 + ["-w-----b", "w------b"]
    r_ok = client.post(
        f"/api/games/{game_id}/position", json={"layout": layout, "turn": "white"}
    )
    assert r_ok.status_code == 200
    state = r_ok.json()
    assert state["layout"] == layout
    assert state["turn"] == "white"
    assert state["winner"] == "black"
    assert state["game_over"] is True
    assert state["legal_moves"] == []


def test_move_endpoint_plays_and_rejects() -> None:
    client = _client()
    game_id = _new_game(client)

    r_move = client.post(f"/api/games/{game_id}/move", json={"move": "b1-b3"})
    assert r_move.status_code == 200
    state = r_move.json()
    assert state["turn"] == "white"
    assert state["last_move"] == "b1-b3"
    assert state["move_history"] == ["b1-b3"]
    assert state["layout"][5] == "wb-----w"

    r_illegal = client.post(f"/api/games/{game_id}/move", json={"move": "a2-a3"})
    assert r_illegal.status_code == 400
    assert r_illegal.json()["error"]["message"] == "illegal move"

    r_garbage = client.post(f"/api/games/{game_id}/move", json={"move": "zz"})
    assert r_garbage.status_code == 400
    assert r_garbage.json()["error"]["code"] == "bad_request"


def test_capture_is_reported_in_text_form() -> None:
    client = _client()
    game_id = _new_game(client)
    r = client.post(f"/api/games/{game_id}/move", json={"move": "f1-h3"})
    assert r.status_code == 200
    assert r.json()["last_move"] == "f1-h3"
    assert r.json()["layout"][5] == "w------b"


def test_move_limit_configuration() -> None:
    client = _client()
    game_id = _new_game(client)
    client.post(f"/api/games/{game_id}/move", json={"move": "b1-b3"})
    client.post(f"/api/games/{game_id}/move", json={"move": "a2-c2"})

    r_conflict = client.post(f"/api/games/{game_id}/move-limit", json={"limit": 1})
    assert r_conflict.status_code == 409
    assert r_conflict.json()["error"]["code"] == "conflict"
    state = client.get(f"/api/games/{game_id}/state").json()
    assert state["move_limit"] == 120

    r_ok = client.post(f"/api/games/{game_id}/move-limit", json={"limit": 5})
    assert r_ok.status_code == 200
    assert r_ok.json()["move_limit"] == 10

    r_invalid = client.post(f"/api/games/{game_id}/move-limit", json={"limit": 0})
    assert r_invalid.status_code == 422


def test_delete_game() -> None:
    client = _client()
    game_id = _new_game(client)
    assert client.delete(f"/api/games/{game_id}").status_code == 200
    assert client.get(f"/api/games/{game_id}/state").status_code == 404
    assert client.delete(f"/api/games/{game_id}").status_code == 404
