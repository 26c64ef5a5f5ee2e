# tests/api/test_game_configs_api.py
from fastapi.testclient import TestClient
from app.core.config import settings
from app.models.enums import GameType
from tests.conftest import ROSCO_QUESTIONS, auth_headers_for, make_config, make_user

CONFIGS = f"{settings.API_V1_STR}/configs"
GAMES = f"{settings.API_V1_STR}/games"


def test_create_and_list_configs(client: TestClient, host_headers):
    response = client.post(
        CONFIGS,
        json={"title": "Repaso de ciencias", "type": "TRIVIA", "questions": {"questions": [
            {"question": "H2O es...", "options": ["Agua", "Sal"], "answer": "Agua", "timeLimit": 15},
        ]}},
        headers=host_headers,
    )
    assert response.status_code == 201
    created = response.json()
    assert created["type"] == "TRIVIA"
    assert created["questions"]["questions"][0]["timeLimit"] == 15

    listed = client.get(CONFIGS, headers=host_headers).json()
    assert [c["id"] for c in listed] == [created["id"]]


def test_type_defaults_to_rosco(client: TestClient, host_headers):
    response = client.post(CONFIGS, json={"title": "Abecedario", "questions": ROSCO_QUESTIONS}, headers=host_headers)
    assert response.status_code == 201
    assert response.json()["type"] == "ROSCO"


def test_invalid_questions_are_rejected(client: TestClient, host_headers):
    response = client.post(
        CONFIGS,
        json={"title": "Sopa", "type": "WORD_SEARCH", "questions": {"words": ["demasiadolarga"], "gridSize": 5}},
        headers=host_headers,
    )
    assert response.status_code == 400
    assert "message" in response.json()


def test_configs_require_auth(client: TestClient):
    assert client.get(CONFIGS).status_code == 401
    assert client.post(CONFIGS, json={"title": "x", "questions": []}).status_code == 401


def test_update_and_delete_own_config(client: TestClient, db_session, host_user, host_headers):
    config = make_config(db_session, host_user.id)

    response = client.put(f"{CONFIGS}/{config.id}", json={"title": "Nuevo título"}, headers=host_headers)
    assert response.status_code == 200
    assert response.json()["title"] == "Nuevo título"
    assert response.json()["questions"][0]["letter"] == "A"

    bad = client.put(f"{CONFIGS}/{config.id}", json={"questions": [{"letter": "A"}]}, headers=host_headers)
    assert bad.status_code == 400

    assert client.delete(f"{CONFIGS}/{config.id}", headers=host_headers).status_code == 200
    assert client.get(f"{CONFIGS}/{config.id}", headers=host_headers).status_code == 404


def test_other_hosts_configs_look_missing(client: TestClient, db_session, host_user):
    config = make_config(db_session, host_user.id)
    other_headers = auth_headers_for(make_user(db_session, username="otra"))

    for method in ("get", "delete"):
        response = getattr(client, method)(f"{CONFIGS}/{config.id}", headers=other_headers)
        assert response.status_code == 404
        assert response.json() == {"message": "Not found"}
    assert client.put(f"{CONFIGS}/{config.id}", json={"title": "Mío"}, headers=other_headers).status_code == 404


def test_repeated_rosco_letters_are_rejected(client: TestClient, db_session, host_user, host_headers):
    questions = [
        {"letter": "A", "question": "Fruta", "answer": "Manzana"},
        {"letter": "a", "question": "Animal", "answer": "Ardilla"},
    ]
    response = client.post(CONFIGS, json={"title": "Doble A", "questions": questions}, headers=host_headers)
    assert response.status_code == 400
    assert "appears more than once" in response.json()["message"]

    config = make_config(db_session, host_user.id)
    update = client.put(f"{CONFIGS}/{config.id}", json={"questions": questions}, headers=host_headers)
    assert update.status_code == 400
    assert client.get(f"{CONFIGS}/{config.id}", headers=host_headers).json()["questions"][0]["answer"] == "Manzana"


def test_questions_are_locked_while_a_game_is_open(client: TestClient, db_session, host_user, host_headers):
    config = make_config(db_session, host_user.id, game_type=GameType.TRIVIA)
    code = client.post(GAMES, json={"configId": config.id}, headers=host_headers).json()["code"]
    client.post(f"{GAMES}/{code}/join", json={"name": "Ana"})
    client.put(f"{GAMES}/{code}", json={"status": "PLAYING"}, headers=host_headers)
    client.put(f"{GAMES}/{code}", json={"triviaAction": "NEXT_QUESTION"}, headers=host_headers)

    shorter = {"questions": [{"question": "1 + 1", "options": ["2"], "answer": "2"}]}
    response = client.put(f"{CONFIGS}/{config.id}", json={"questions": shorter}, headers=host_headers)
    assert response.status_code == 400
    assert response.json() == {"message": "Questions cannot change while a game using them is open"}

    # Renaming is harmless and the running game keeps working
    assert client.put(f"{CONFIGS}/{config.id}", json={"title": "Repaso final"}, headers=host_headers).status_code == 200
    client.put(f"{GAMES}/{code}", json={"triviaAction": "OPEN_BUZZER"}, headers=host_headers)
    buzz = client.post(f"{GAMES}/{code}/answer", json={"player": "Ana", "action": "BUZZ"})
    assert buzz.json() == {"success": True, "buzzed": True, "queuePos": 1}

    client.put(f"{GAMES}/{code}", json={"status": "FINISHED"}, headers=host_headers)
    assert client.put(f"{CONFIGS}/{config.id}", json={"questions": shorter}, headers=host_headers).status_code == 200
