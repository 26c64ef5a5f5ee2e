# tests/conftest.py
import os

# Keep the app's own engine off the developer database; must happen before app.core.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
import logging
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.db.base import Base
from app.api.deps import get_db
from app.core.security import create_access_token, get_password_hash
from app.crud import crud_game_config, crud_user
from app.models.enums import GameType
from app.models.game_config import parse_questions

SQLALCHEMY_DATABASE_URL_TEST = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL_TEST,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

@pytest.fixture(autouse=True)
def setup_test_db():
    """Fresh tables for every test; the code under test commits, so rollbacks cannot isolate it."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)

def override_get_db():
    """Dependency override for test database sessions."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

app.dependency_overrides[get_db] = override_get_db

@pytest.fixture(scope="function")
def db_session():
    session = TestingSessionLocal()
    yield session
    session.close()

@pytest.fixture(scope="function")
def client() -> TestClient:
    """Provides a TestClient for making API requests."""
    return TestClient(app)

# --- Data helpers ---

ROSCO_QUESTIONS = [
    {"letter": "A", "question": "Fruta roja o verde", "answer": "Manzana", "startsWith": False},
    {"letter": "B", "question": "Se usa para escribir en la pizarra", "answer": "Borrador"},
    {"letter": "C", "question": "Bebida de la mañana", "answer": "Café"},
]

QUIZ_QUESTIONS = {
    "questions": [
        {"question": "2 + 2", "options": ["3", "4", "5"], "answer": "4", "timeLimit": 10},
        {"question": "Capital de Francia", "options": ["París", "Roma"], "answer": "París"},
    ]
}

def make_user(db, username="profe", password="secreto123"):
    return crud_user.create_user(db, username=username, hashed_password=get_password_hash(password))

def auth_headers_for(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(data={'sub': str(user.id)})}"}

def make_config(db, creator_id, game_type=GameType.ROSCO, questions=None, title="Repaso"):
    if questions is None:
        questions = QUIZ_QUESTIONS if game_type in (GameType.TRIVIA, GameType.KAHOOT) else ROSCO_QUESTIONS
    return crud_game_config.create_config(
        db, creator_id=creator_id, title=title, game_type=game_type,
        questions=parse_questions(game_type, questions),
    )

@pytest.fixture
def host_user(db_session):
    return make_user(db_session)

@pytest.fixture
def host_headers(host_user):
    return auth_headers_for(host_user)

def pytest_configure(config):
    """
    Hook to configure logging levels before tests are run.
    This silences noisy third-party libraries.
    """
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
