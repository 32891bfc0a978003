"""
Tests for the HTTP routes and the WebSocket endpoint.
"""

import pytest
from fastapi.testclient import TestClient

from holdemtable.agents.base import CallAgent
from holdemtable.config import Settings
from holdemtable.server.app import create_app


SETTINGS = Settings(ai_delay_min=0, ai_delay_max=0, turn_seconds=60, next_hand_delay=60)


def call_agents(player_id, name, rng):
    return CallAgent(player_id, name)


@pytest.fixture
def client():
    with TestClient(create_app(SETTINGS, agent_factory=call_agents)) as client:
        yield client


@pytest.fixture
def table_id(client):
    response = client.post("/tables", json={"user_id": "user-1", "ai_count": 2, "seed": 1})
    assert response.status_code == 201
    return response.json()["table_id"]


class TestTables:

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok", "tables": 0}

    def test_create_table(self, client):
        response = client.post("/tables", json={"user_id": "user-1", "ai_count": 2, "seed": 1})

        assert response.status_code == 201
        state = response.json()
        assert state["table_id"] == "table-1"
        assert state["local_mode"]
        assert state["phase"] == "PRE_FLOP"
        assert state["active_seat_id"] == 0
        assert state["to_call"] == 40
        assert state["turn_deadline"] is not None
        assert len(state["players"]) == 3
        assert len(state["players"][0]["cards"]) == 2
        assert state["players"][1]["cards"] is None
        assert client.get("/health").json()["tables"] == 1

    @pytest.mark.parametrize("body", [
        {"user_id": "user-1", "ai_count": 0},
        {"user_id": "user-1", "ai_count": 10},
        {"user_id": "user-1", "small_blind": 50, "big_blind": 40},
        {"user_id": ""},
    ])
    def test_create_validation(self, client, body):
        assert client.post("/tables", json=body).status_code == 422

    def test_get_table(self, client, table_id):
        response = client.get(f"/tables/{table_id}")
        assert response.status_code == 200
        assert response.json()["hand_number"] == 1

    def test_unknown_table(self, client):
        assert client.get("/tables/table-99").status_code == 404
        assert client.post("/tables/table-99/actions", json={"action": "CALL"}).status_code == 404
        assert client.delete("/tables/table-99").status_code == 404

    def test_delete_table(self, client, table_id):
        response = client.delete(f"/tables/{table_id}")
        assert response.json() == {"success": True, "table_id": table_id}
        assert client.get(f"/tables/{table_id}").status_code == 404

    def test_new_table_replaces_old_one(self, client, table_id):
        response = client.post("/tables", json={"user_id": "user-1", "ai_count": 2})

        assert response.json()["table_id"] == "table-2"
        assert client.get(f"/tables/{table_id}").status_code == 404
        assert client.get("/health").json()["tables"] == 1

    def test_other_users_keep_their_tables(self, client, table_id):
        client.post("/tables", json={"user_id": "user-2", "ai_count": 2})

        assert client.get(f"/tables/{table_id}").status_code == 200
        assert client.get("/health").json()["tables"] == 2


class TestActions:

    def test_call_moves_to_flop(self, client, table_id):
        response = client.post(f"/tables/{table_id}/actions", json={"action": "CALL"})

        assert response.status_code == 200
        body = response.json()
        assert body["success"]
        assert body["action"] == "CALL"
        assert body["amount"] == 40
        assert body["state"]["phase"] == "FLOP"
        assert body["state"]["pot"] == 120
        assert len(body["state"]["board"]) == 3

    def test_illegal_raise_rejected(self, client, table_id):
        response = client.post(f"/tables/{table_id}/actions", json={"action": "RAISE", "amount": 50})

        assert response.status_code == 409
        assert response.json()["detail"] == "Minimum raise is to 80"
        assert client.get(f"/tables/{table_id}").json()["pot"] == 60

    @pytest.mark.parametrize("body", [
        {"action": "CHECK"},
        {"action": "RAISE", "amount": -10},
        {},
    ])
    def test_malformed_action(self, client, table_id, body):
        assert client.post(f"/tables/{table_id}/actions", json=body).status_code == 422

    @pytest.mark.parametrize("action", ["FOLD", "CALL", "RAISE"])
    def test_advertised_actions_are_accepted(self, client, action):
        table_id = client.post("/tables", json={"user_id": "user-1", "ai_count": 2, "seed": 1}).json()["table_id"]
        # Nothing is owed on the flop, so checking shows up as a CALL of 0
        state = client.post(f"/tables/{table_id}/actions", json={"action": "CALL"}).json()["state"]
        legal = {a["type"]: a for a in state["legal_actions"]}
        assert set(legal) == {"FOLD", "CALL", "RAISE"}
        assert legal["CALL"] == {"type": "CALL", "amount": 0}

        amount = legal[action].get("min", legal[action].get("amount", 0))
        response = client.post(f"/tables/{table_id}/actions", json={"action": action, "amount": amount})

        assert response.status_code == 200
        assert response.json()["success"]

    def test_fold_reports_result(self, client):
        table_id = client.post("/tables", json={"user_id": "user-1", "ai_count": 1}).json()["table_id"]

        body = client.post(f"/tables/{table_id}/actions", json={"action": "FOLD"}).json()

        result = body["state"]["result"]
        assert body["state"]["phase"] == "PAYOUT"
        assert result["won_by_fold"]
        assert result["human_delta"] == -20
        assert result["awards"] == [{"player_id": 1, "amount": 60, "pot": 0, "split": False}]

        again = client.post(f"/tables/{table_id}/actions", json={"action": "CALL"})
        assert again.status_code == 409
        assert again.json()["detail"] == "Not your turn"


class TestWebSocket:

    def test_state_and_actions(self, client, table_id):
        with client.websocket_connect(f"/ws/{table_id}") as ws:
            first = ws.receive_json()
            assert first["type"] == "state"
            assert first["phase"] == "PRE_FLOP"

            ws.send_json({"type": "action", "action": "CALL"})
            update = ws.receive_json()
            assert update["type"] == "state"
            assert update["phase"] == "FLOP"

            ws.send_json({"type": "action", "action": "RAISE", "amount": 10})
            assert ws.receive_json() == {"type": "error", "message": "Minimum raise is to 40"}

            ws.send_json({"type": "action", "action": "BET"})
            assert ws.receive_json() == {"type": "error", "message": "Invalid action: BET"}

            ws.send_json({"type": "dance"})
            assert ws.receive_json() == {"type": "error", "message": "Unknown message type: dance"}

            ws.send_json({"type": "get_state"})
            assert ws.receive_json()["pot"] == 120

    def test_last_client_leaving_closes_table(self, client, table_id):
        with client.websocket_connect(f"/ws/{table_id}") as first:
            with client.websocket_connect(f"/ws/{table_id}") as second:
                assert first.receive_json()["type"] == "state"
                assert second.receive_json()["type"] == "state"
            assert client.get(f"/tables/{table_id}").status_code == 200

        assert client.get(f"/tables/{table_id}").status_code == 404
        assert client.get("/health").json()["tables"] == 0

    def test_unknown_table(self, client):
        with client.websocket_connect("/ws/table-99") as ws:
            assert ws.receive_json() == {"type": "error", "message": "Table table-99 not found"}
