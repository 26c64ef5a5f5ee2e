"""
Creates a demo host account and a full 26-letter Rosco so a fresh install can
be tried right away.

Usage: python scripts/seed_demo_content.py [--username testuser] [--password password123]
"""
import argparse
import os
import string
import sys

# Add project root to Python path to allow importing app modules
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from sqlalchemy.orm import Session

from app.core.security import get_password_hash
from app.crud import crud_game_config, crud_user
from app.db.base import Base
from app.db.session import SessionLocal, engine
from app.models.enums import GameType
from app.models.game_config import RoscoQuestion

DEFAULT_USERNAME = "testuser"
DEFAULT_PASSWORD = "password123"


def demo_rosco_questions():
    return [
        RoscoQuestion(letter=letter, question=f"Question for {letter}", answer=f"Answer{letter}", starts_with=True)
        for letter in string.ascii_uppercase
    ]


def seed(db: Session, username: str = DEFAULT_USERNAME, password: str = DEFAULT_PASSWORD) -> dict:
    """Idempotent for the user; adds a new 'Test Rosco' on every run."""
    user = crud_user.get_user_by_username(db, username=username)
    if user is None:
        user = crud_user.create_user(db, username=username, hashed_password=get_password_hash(password))
    rosco = crud_game_config.create_config(
        db, creator_id=user.id, title="Test Rosco", game_type=GameType.ROSCO, questions=demo_rosco_questions(),
    )
    return {"user": username, "password": password, "rosco_id": rosco.id}


def main():
    parser = argparse.ArgumentParser(description="Seed a demo host and Rosco.")
    parser.add_argument("--username", default=DEFAULT_USERNAME)
    parser.add_argument("--password", default=DEFAULT_PASSWORD)
    args = parser.parse_args()

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        result = seed(db, username=args.username, password=args.password)
    finally:
        db.close()
    print(f"Seeded successfully: log in as {result['user']} / {result['password']}, Rosco id {result['rosco_id']}")


if __name__ == "__main__":
    main()
