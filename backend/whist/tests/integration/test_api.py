import json

import pytest
from starlette.testclient import TestClient

from whist.persistence import FileStateRepository, InMemoryStateRepository
from whist.server.app import create_app
from whist.server.settings import WhistServerSettings
from whist.tests.conftest import GAME_ID, PLAYER_IDS, create_game_state


def _game(data: dict, game_id: str = GAME_ID) -> dict:
    return next(g for g in data["gameNights"] if g["id"] == game_id)


@pytest.fixture
def repository():
    return InMemoryStateRepository(create_game_state())


@pytest.fixture
def client(repository):
    app = create_app(settings=WhistServerSettings(), repository=repository)
    return TestClient(app)


class TestReadEndpoints:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_state(self, client):
        data = client.get("/api/state").json()
        assert [p["id"] for p in data["players"]] == list(PLAYER_IDS)
        assert data["activeGameId"] == GAME_ID

    def test_options(self, client):
        data = client.get("/api/options").json()
        assert [t["value"] for t in data["trump_types"]] == ["alm", "vip", "gode", "halve", "sans"]
        assert {"value": "open-nolo", "label": "Åben nolo"} in data["special_bids"]
        assert data["bid_levels"] == [7, 8, 9, 10, 11, 12, 13]

    def test_export(self, client):
        exported = json.loads(client.get("/api/export").json()["data"])
        assert exported["activeGameId"] == GAME_ID


class TestPreview:
    def test_preview(self, client):
        response = client.get(
            "/api/preview",
            params={"bid_level": 13, "trump_type": "sans", "special_bid": "open-nolo", "solo": "true"},
        )
        assert response.status_code == 200
        assert response.json() == {"ifMade": 408, "ifFailed": -384}

    def test_preview_with_vip_count(self, client):
        response = client.get("/api/preview", params={"bid_level": 8, "trump_type": "vip", "vip_count": 3})
        assert response.json() == {"ifMade": 12, "ifFailed": -12}

    @pytest.mark.parametrize(
        "params",
        [
            {},
            {"bid_level": "", "trump_type": "alm"},
            {"bid_level": "abc", "trump_type": "alm"},
            {"bid_level": 7, "trump_type": ""},
            {"bid_level": 3, "trump_type": "alm"},
        ],
    )
    def test_half_filled_form_previews_zero(self, client, params):
        response = client.get("/api/preview", params=params)
        assert response.status_code == 200
        assert response.json() == {"ifMade": 0, "ifFailed": 0}


class TestRounds:
    def test_add_and_delete_round(self, client, repository):
        before = _game(client.get("/api/state").json())

        response = client.post(
            f"/api/games/{GAME_ID}/rounds",
            json={"bidder": "p1", "partner": "p3", "bidLevel": 8, "trumpType": "vip", "vipCount": 3, "tricksWon": 6},
        )
        assert response.status_code == 201
        game = _game(response.json())
        new_round = game["rounds"][-1]
        assert new_round["points"] == -12
        assert new_round["success"] is False
        assert game["scores"] == {"p1": -12, "p2": 12, "p3": -12, "p4": 12}

        response = client.delete(f"/api/games/{GAME_ID}/rounds/{new_round['id']}")
        assert response.status_code == 200
        assert _game(response.json()) == before
        assert repository.save_count == 2

    def test_snake_case_body_accepted(self, client):
        response = client.post(
            f"/api/games/{GAME_ID}/rounds",
            json={"bidder": "p2", "bid_level": 7, "trump_type": "alm", "tricks_won": 7},
        )
        assert response.status_code == 201
        assert _game(response.json())["scores"]["p2"] == 6

    def test_schema_error_is_422(self, client):
        response = client.post(
            f"/api/games/{GAME_ID}/rounds",
            json={"bidder": "p1", "bidLevel": 14, "trumpType": "alm", "tricksWon": 7},
        )
        assert response.status_code == 422

    def test_unknown_field_is_422(self, client):
        response = client.post(
            f"/api/games/{GAME_ID}/rounds",
            json={"bidder": "p1", "bidLevel": 7, "trumpType": "alm", "tricksWon": 7, "bonus": 5},
        )
        assert response.status_code == 422

    def test_invalid_json_is_422(self, client):
        response = client.post(
            f"/api/games/{GAME_ID}/rounds",
            content=b"{nope",
            headers={"content-type": "application/json"},
        )
        assert response.status_code == 422
        assert response.json() == {"error": "Invalid JSON body"}

    def test_partner_equal_to_bidder_is_422(self, client):
        response = client.post(
            f"/api/games/{GAME_ID}/rounds",
            json={"bidder": "p1", "partner": "p1", "bidLevel": 7, "trumpType": "alm", "tricksWon": 7},
        )
        assert response.status_code == 422
        assert response.json()["kind"] == "InvalidRoundError"

    def test_round_on_ended_game_is_409(self, client):
        client.post(f"/api/games/{GAME_ID}/end")
        response = client.post(
            f"/api/games/{GAME_ID}/rounds",
            json={"bidder": "p1", "bidLevel": 7, "trumpType": "alm", "tricksWon": 7},
        )
        assert response.status_code == 409
        assert response.json()["kind"] == "GameNotActiveError"

    def test_delete_missing_round_is_noop(self, client, repository):
        response = client.delete(f"/api/games/{GAME_ID}/rounds/nonexistent")
        assert response.status_code == 200
        assert repository.save_count == 0


class TestPlayersAndGames:
    def test_player_lifecycle(self, client):
        response = client.post("/api/players", json={"name": "Signe"})
        assert response.status_code == 201
        player = next(p for p in response.json()["players"] if p["name"] == "Signe")

        response = client.put(f"/api/players/{player['id']}", json={"name": "Signe K"})
        assert any(p["name"] == "Signe K" for p in response.json()["players"])

        response = client.delete(f"/api/players/{player['id']}")
        assert all(p["id"] != player["id"] for p in response.json()["players"])

    def test_blank_player_name_is_422(self, client):
        assert client.post("/api/players", json={"name": "   "}).status_code == 422

    def test_cannot_delete_seated_player(self, client):
        response = client.delete("/api/players/p1")
        assert response.status_code == 409
        assert response.json()["kind"] == "PlayerInUseError"

    def test_game_night_lifecycle(self, client):
        response = client.post("/api/games", json={"playerIds": list(PLAYER_IDS)})
        assert response.status_code == 201
        data = response.json()
        new_id = data["activeGameId"]
        assert new_id != GAME_ID
        assert _game(data, new_id)["scores"] == dict.fromkeys(PLAYER_IDS, 0)

        response = client.post("/api/active-game", json={"gameId": GAME_ID})
        assert response.json()["activeGameId"] == GAME_ID

        response = client.post(f"/api/games/{GAME_ID}/end")
        data = response.json()
        assert _game(data)["isActive"] is False
        assert data["activeGameId"] is None

        response = client.delete(f"/api/games/{new_id}")
        assert [g["id"] for g in response.json()["gameNights"]] == [GAME_ID]

    def test_wrong_player_count_is_422(self, client):
        response = client.post("/api/games", json={"playerIds": ["p1", "p2"]})
        assert response.status_code == 422
        assert response.json()["kind"] == "InvalidGameNightError"


class TestStatsAndImport:
    def test_stats_count_only_ended_games(self, client):
        client.post(f"/api/games/{GAME_ID}/rounds", json={"bidder": "p1", "bidLevel": 7, "trumpType": "alm", "tricksWon": 7})
        assert client.get("/api/stats").json()["completedGames"] == 0

        client.post(f"/api/games/{GAME_ID}/end")
        data = client.get("/api/stats").json()
        assert data["completedGames"] == 1
        assert data["players"][0]["playerId"] == "p1"
        assert data["players"][0]["totalPoints"] == 6

    def test_import_replaces_state(self, client):
        exported = client.get("/api/export").json()["data"]
        client.post(f"/api/games/{GAME_ID}/end")

        response = client.post("/api/import", content=exported.encode())
        assert response.status_code == 200
        assert response.json()["activeGameId"] == GAME_ID
        assert _game(client.get("/api/state").json())["isActive"] is True

    def test_import_rejects_bad_document(self, client):
        response = client.post("/api/import", content=b'{"players": []}')
        assert response.status_code == 422
        assert "gameNights" in response.json()["error"]


class TestFilePersistence:
    def test_state_survives_restart(self, tmp_path):
        settings = WhistServerSettings(data_file=str(tmp_path / "whist.json"))
        client = TestClient(create_app(settings=settings))
        client.post("/api/players", json={"name": "Anna"})

        restarted = TestClient(create_app(settings=settings))
        assert [p["name"] for p in restarted.get("/api/state").json()["players"]] == ["Anna"]
        assert FileStateRepository(settings.data_file).load().players[0].name == "Anna"
