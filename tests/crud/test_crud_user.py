# tests/crud/test_crud_user.py
from sqlalchemy.orm import Session
from app.crud import crud_user
from app.schemas.user import User as DBUser # SQLAlchemy model

def test_create_user(db_session: Session):
    db_user = crud_user.create_user(db_session, username="maestra", hashed_password="hash")

    assert db_user.id is not None
    assert db_user.username == "maestra"

    # Verify it's in the DB
    queried_user = db_session.query(DBUser).filter(DBUser.username == "maestra").first()
    assert queried_user is not None
    assert queried_user.hashed_password == "hash"

def test_get_user_by_username(db_session: Session):
    created = crud_user.create_user(db_session, username="profe", hashed_password="hash")

    assert crud_user.get_user_by_username(db_session, username="profe").id == created.id
    assert crud_user.get_user(db_session, user_id=created.id).username == "profe"
    assert crud_user.get_user_by_username(db_session, username="nadie") is None

def test_create_user_without_commit_flushes(db_session: Session):
    db_user = crud_user.create_user(db_session, username="suplente", hashed_password="hash", commit_db=False)
    assert db_user.id is not None
    db_session.rollback()
    assert crud_user.get_user_by_username(db_session, username="suplente") is None
