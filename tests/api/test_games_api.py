# tests/api/test_games_api.py
from fastapi.testclient import TestClient

from app.core.config import settings
from app.main import app
from app.models.enums import GameType
from tests.conftest import auth_headers_for, make_config, make_user

GAMES = f"{settings.API_V1_STR}/games"


def create_game(client: TestClient, db_session, host_user, host_headers, game_type=GameType.ROSCO, questions=None) -> str:
    config = make_config(db_session, host_user.id, game_type=game_type, questions=questions)
    response = client.post(GAMES, json={"configId": config.id}, headers=host_headers)
    assert response.status_code == 201
    return response.json()["code"]


def test_create_game_returns_code_and_id(client: TestClient, db_session, host_user, host_headers):
    config = make_config(db_session, host_user.id)
    response = client.post(GAMES, json={"configId": config.id}, headers=host_headers)

    assert response.status_code == 201
    body = response.json()
    assert len(body["code"]) == 6
    assert isinstance(body["id"], int)


def test_create_game_requires_host(client: TestClient, db_session, host_user):
    config = make_config(db_session, host_user.id)
    response = client.post(GAMES, json={"configId": config.id})
    assert response.status_code == 401
    assert response.json() == {"message": "Unauthorized"}


def test_unknown_code_is_not_found(client: TestClient):
    response = client.get(f"{GAMES}/ZZZZZZ")
    assert response.status_code == 404
    assert response.json() == {"message": "Not found"}


def test_join_and_poll(client: TestClient, db_session, host_user, host_headers):
    code = create_game(client, db_session, host_user, host_headers)

    assert client.post(f"{GAMES}/{code.lower()}/join", json={"name": "Ana"}).json() == {"success": True}
    assert client.post(f"{GAMES}/{code}/join", json={"name": "Ana"}).status_code == 200

    missing_name = client.post(f"{GAMES}/{code}/join", json={})
    assert missing_name.status_code == 400
    assert missing_name.json() == {"message": "Name is required"}

    view = client.get(f"{GAMES}/{code}", params={"player": "Ana"}).json()
    assert view["status"] == "WAITING"
    assert view["isHost"] is False
    assert view["myScore"] == 0
    assert view["myProgress"] == {}
    assert view["players"] == [{"name": "Ana", "score": 0, "finished": False}]
    assert view["reviewIndex"] == -1
    assert view["config"]["type"] == "ROSCO"

    as_host = client.get(f"{GAMES}/{code}", headers=host_headers).json()
    assert as_host["isHost"] is True
    assert as_host["myProgress"] is None


def test_host_only_endpoints(client: TestClient, db_session, host_user, host_headers):
    code = create_game(client, db_session, host_user, host_headers)
    other_headers = auth_headers_for(make_user(db_session, username="otra"))

    assert client.post(f"{GAMES}/{code}/start").status_code == 401
    forbidden = client.put(f"{GAMES}/{code}", json={"status": "PLAYING"}, headers=other_headers)
    assert forbidden.status_code == 403
    assert forbidden.json() == {"message": "Only the host can do that"}
    assert client.get(f"{GAMES}/{code}/host", headers=other_headers).status_code == 403


def test_start_and_host_view(client: TestClient, db_session, host_user, host_headers):
    code = create_game(client, db_session, host_user, host_headers)
    client.post(f"{GAMES}/{code}/join", json={"name": "Ana"})
    assert client.post(f"{GAMES}/{code}/start", headers=host_headers).json() == {"success": True}

    client.post(f"{GAMES}/{code}/answer", json={"player": "Ana", "action": "answer", "letter": "A", "answer": "manzana"})

    host_view = client.get(f"{GAMES}/{code}/host", headers=host_headers).json()
    assert host_view["status"] == "PLAYING"
    assert host_view["startTime"] is not None
    assert host_view["players"][0]["progress"] == {"A": "correct"}


def test_status_cannot_go_backwards(client: TestClient, db_session, host_user, host_headers):
    code = create_game(client, db_session, host_user, host_headers)
    assert client.put(f"{GAMES}/{code}", json={"status": "FINISHED"}, headers=host_headers).status_code == 200

    response = client.put(f"{GAMES}/{code}", json={"status": "PLAYING"}, headers=host_headers)
    assert response.status_code == 400
    assert client.get(f"{GAMES}/{code}").json()["status"] == "FINISHED"


def test_rosco_already_answered_payload(client: TestClient, db_session, host_user, host_headers):
    code = create_game(client, db_session, host_user, host_headers)
    client.post(f"{GAMES}/{code}/join", json={"name": "Ana"})
    body = {"player": "Ana", "action": "answer", "letter": "C", "answer": "café"}

    first = client.post(f"{GAMES}/{code}/answer", json=body)
    assert first.json() == {"correct": True, "status": "correct", "score": 1}

    again = client.post(f"{GAMES}/{code}/answer", json=body)
    assert again.status_code == 400
    assert again.json() == {"message": "Already answered", "status": "correct", "score": 1}


def test_answer_validation_and_unknown_player(client: TestClient, db_session, host_user, host_headers):
    code = create_game(client, db_session, host_user, host_headers)
    client.post(f"{GAMES}/{code}/join", json={"name": "Ana"})

    unknown_action = client.post(f"{GAMES}/{code}/answer", json={"player": "Ana", "action": "JUMP"})
    assert unknown_action.status_code == 400

    wrong_type = client.post(f"{GAMES}/{code}/answer", json={"player": "Ana", "action": "BUZZ"})
    assert wrong_type.status_code == 400

    ghost = client.post(f"{GAMES}/{code}/answer", json={"player": "Eve", "action": "answer", "letter": "A"})
    assert ghost.status_code == 404
    assert ghost.json() == {"message": "Player not found"}


def test_trivia_out_of_turn_is_403(client: TestClient, db_session, host_user, host_headers):
    code = create_game(client, db_session, host_user, host_headers, game_type=GameType.TRIVIA)
    for name in ("Ana", "Luis"):
        client.post(f"{GAMES}/{code}/join", json={"name": name})
    client.post(f"{GAMES}/{code}/start", headers=host_headers)
    client.put(f"{GAMES}/{code}", json={"triviaAction": "OPEN_BUZZER"}, headers=host_headers)

    buzz = client.post(f"{GAMES}/{code}/answer", json={"player": "Ana", "action": "BUZZ"})
    assert buzz.json() == {"success": True, "buzzed": True, "queuePos": 1}

    response = client.post(f"{GAMES}/{code}/answer", json={"player": "Luis", "action": "TRIVIA_ANSWER", "answer": "4"})
    assert response.status_code == 403
    assert response.json() == {"message": "Not your turn"}


def test_battleship_scores_are_client_reported(client: TestClient, db_session, host_user, host_headers):
    questions = {"ships": [{"x": 0, "y": 0, "size": 2}], "pool": [{"question": "1+1", "answer": "2"}]}
    code = create_game(client, db_session, host_user, host_headers, game_type=GameType.BATTLESHIP, questions=questions)
    client.post(f"{GAMES}/{code}/join", json={"name": "Ana"})

    client.post(f"{GAMES}/{code}/answer", json={"player": "Ana", "action": "BATTLESHIP_UPDATE", "score": 20})
    assert client.get(f"{GAMES}/{code}", params={"player": "Ana"}).json()["myScore"] == 20

    client.post(f"{GAMES}/{code}/answer", json={"player": "Ana", "action": "BATTLESHIP_FINISH", "score": 50})
    view = client.get(f"{GAMES}/{code}", params={"player": "Ana"}).json()
    assert view["myScore"] == 50
    assert view["status"] == "FINISHED"


def test_finish_endpoint(client: TestClient, db_session, host_user, host_headers):
    code = create_game(client, db_session, host_user, host_headers, game_type=GameType.HANGMAN, questions={"word": "luna"})
    client.post(f"{GAMES}/{code}/join", json={"name": "Ana"})

    assert client.post(f"{GAMES}/{code}/finish", json={"player": "Eve", "score": 70}).status_code == 404
    assert client.post(f"{GAMES}/{code}/finish", json={"player": "Ana", "score": 70}).json() == {"success": True}
    assert client.get(f"{GAMES}/{code}").json()["status"] == "FINISHED"


def test_unhandled_errors_become_generic_500(mocker):
    code_client = TestClient(app, raise_server_exceptions=False)
    mocker.patch("app.services.game_service.get_session_view", side_effect=RuntimeError("boom"))

    response = code_client.get(f"{GAMES}/ABCDEF")
    assert response.status_code == 500
    assert response.json() == {"message": "Error"}
