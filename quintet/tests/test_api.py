"""
Tests for the REST API.
"""

from collections import Counter

import pytest
from fastapi.testclient import TestClient

from ..api import APIService, create_app


@pytest.fixture
def client():
    return TestClient(create_app(APIService()))


def create(client, **config):
    response = client.post("/api/v1/matches", json=config)
    assert response.status_code == 201
    return response.json()


class TestCatalog:

    def test_health(self, client):
        data = client.get("/api/v1/health").json()
        assert data["status"] == "healthy"
        assert data["service"] == "quintet"

    def test_cards(self, client):
        data = client.get("/api/v1/cards").json()
        assert data["count"] == 5
        ids = [card["card_id"] for card in data["cards"]]
        assert ids[0] == "Place"
        assert {card["target_kind"] for card in data["cards"]} == {"none", "cell", "player"}


class TestMatches:

    def test_create_default(self, client):
        response = client.post("/api/v1/matches")
        assert response.status_code == 201
        snap = response.json()
        assert snap["board"]["size"] == 15
        assert snap["phase"] == "choose"
        assert "Place" in snap["drawn"]
        assert snap["api_version"] == "v1"

    def test_create_camel_case(self, client):
        snap = create(client, boardSize=9, simultaneousFivePolicy="draw")
        assert snap["board"]["size"] == 9
        assert snap["config"]["simultaneousFivePolicy"] == "draw"

    def test_invalid_config(self, client):
        response = client.post("/api/v1/matches", json={"boardSize": 0})
        assert response.status_code == 400
        body = response.json()
        assert body["error_code"] == "INVALID_CONFIG"
        assert body["details"]["errors"]

    def test_unknown_match(self, client):
        response = client.get("/api/v1/matches/missing")
        assert response.status_code == 404
        assert response.json()["error_code"] == "MATCH_NOT_FOUND"

    def test_list_and_delete(self, client):
        snap = create(client, boardSize=9)
        listed = client.get("/api/v1/matches").json()
        assert listed["matches"] == [snap["match_id"]]
        assert listed["count"] == 1

        ended = client.delete(f"/api/v1/matches/{snap['match_id']}").json()
        assert ended == {"success": True, "match_id": snap["match_id"]}
        assert client.get(f"/api/v1/matches/{snap['match_id']}").status_code == 404
        assert client.delete(f"/api/v1/matches/{snap['match_id']}").json()["success"] is False

    def test_state_document(self, client):
        snap = create(client, boardSize=9)
        doc = client.get(f"/api/v1/matches/{snap['match_id']}/state").json()
        assert doc["match_id"] == snap["match_id"]
        assert doc["state"]["board"]["size"] == 9
        assert doc["state"]["current_player"] == 1

    def test_state_document_excludes_cards_in_hand(self, client):
        snap = create(client, boardSize=9, deckCounts={"Place": 4, "Take": 2})
        doc = client.get(f"/api/v1/matches/{snap['match_id']}/state").json()
        deck = doc["state"]["deck"]
        total = Counter(deck["draw_pile"]) + Counter(deck["discard_pile"]) + Counter(snap["drawn"])
        assert total == Counter({"Place": 4, "Take": 2})
        assert len(deck["draw_pile"]) == snap["deck"]["draw_pile"]

    def test_reset(self, client):
        snap = create(client, boardSize=9)
        match_id = snap["match_id"]
        client.post(f"/api/v1/matches/{match_id}/choose", json={"card_id": "Place"})
        client.post(f"/api/v1/matches/{match_id}/target", json={"kind": "cell", "point": {"x": 1, "y": 1}})

        reset = client.post(f"/api/v1/matches/{match_id}/reset", json={"boardSize": 11})
        assert reset.status_code == 200
        data = reset.json()
        assert data["match_id"] == match_id
        assert data["board"]["size"] == 11
        assert data["turn_number"] == 1
        assert data["history"] == []

    def test_reset_invalid(self, client):
        snap = create(client, boardSize=9)
        response = client.post(f"/api/v1/matches/{snap['match_id']}/reset", json={"firstPlayer": 5})
        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_CONFIG"


class TestIntents:

    def test_place_turn(self, client):
        match_id = create(client, boardSize=9)["match_id"]

        chosen = client.post(f"/api/v1/matches/{match_id}/choose", json={"cardId": "Place"}).json()
        assert chosen["accepted"] is True
        assert chosen["snapshot"]["awaiting_target"] is True
        assert chosen["snapshot"]["phase"] == "selectTarget"

        targeted = client.post(
            f"/api/v1/matches/{match_id}/target",
            json={"kind": "cell", "point": {"x": 4, "y": 4}},
        ).json()
        assert targeted["accepted"] is True
        snap = targeted["snapshot"]
        assert snap["board"]["cells"][4][4] == 1
        assert snap["current_player"] == 2
        assert snap["board"]["last_move"] == {"x": 4, "y": 4, "player": 1}
        assert [e["tag"] for e in snap["history"][0]["logs"]] == [
            "drawTwo", "choose", "selectTarget", "resolve", "checkWin",
        ]

    def test_card_not_drawn(self, client):
        match_id = create(client, boardSize=9)["match_id"]
        response = client.post(f"/api/v1/matches/{match_id}/choose", json={"card_id": "TimeFreeze"})
        assert response.status_code == 200
        assert response.json()["accepted"] is False

    def test_off_board_target_not_accepted(self, client):
        match_id = create(client, boardSize=9)["match_id"]
        client.post(f"/api/v1/matches/{match_id}/choose", json={"card_id": "Place"})
        response = client.post(
            f"/api/v1/matches/{match_id}/target",
            json={"kind": "cell", "point": {"x": 40, "y": 4}},
        )
        assert response.status_code == 200
        assert response.json()["accepted"] is False
        assert response.json()["snapshot"]["awaiting_target"] is True

    def test_malformed_target(self, client):
        match_id = create(client, boardSize=9)["match_id"]
        client.post(f"/api/v1/matches/{match_id}/choose", json={"card_id": "Place"})
        response = client.post(f"/api/v1/matches/{match_id}/target", json={"kind": "cell"})
        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_INTENT"

    def test_missing_card_id(self, client):
        match_id = create(client, boardSize=9)["match_id"]
        response = client.post(f"/api/v1/matches/{match_id}/choose", json={})
        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"


class TestBotTurn:

    def test_not_bot_turn(self, client):
        match_id = create(client, boardSize=9, opponent="bot")["match_id"]
        response = client.post(f"/api/v1/matches/{match_id}/bot")
        assert response.status_code == 409
        assert response.json()["error_code"] == "NOT_BOT_TURN"

    def test_human_match_has_no_bot(self, client):
        match_id = create(client, boardSize=9)["match_id"]
        response = client.post(f"/api/v1/matches/{match_id}/bot")
        assert response.status_code == 409

    def test_bot_plays(self, client):
        snap = create(client, boardSize=9, opponent="bot", firstPlayer=2)
        assert snap["is_bot_turn"] is True

        data = client.post(f"/api/v1/matches/{snap['match_id']}/bot").json()
        assert data["accepted"] is True
        assert data["decision"]["card_id"]
        assert data["decision"]["explanation"]
        assert data["snapshot"]["turn_number"] >= 2

    def test_game_over(self, client):
        match_id = create(client, opponent="bot", deckCounts={})["match_id"]
        response = client.post(f"/api/v1/matches/{match_id}/bot")
        assert response.status_code == 409
        assert response.json()["error_code"] == "GAME_OVER"
