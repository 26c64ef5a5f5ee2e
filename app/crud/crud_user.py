# app/crud/crud_user.py
import logging
from sqlalchemy.orm import Session
from app.schemas.user import User

logger = logging.getLogger("app.crud.user")  # Logger for this module

def get_user(db: Session, user_id: int) -> User | None:
    return db.query(User).filter(User.id == user_id).first()

def get_user_by_username(db: Session, username: str) -> User | None:
    return db.query(User).filter(User.username == username).first()

def create_user(db: Session, username: str, hashed_password: str, commit_db: bool = True) -> User:
    db_user = User(username=username, hashed_password=hashed_password)
    db.add(db_user)
    if commit_db:
        try:
            db.commit()
            db.refresh(db_user)
        except Exception as e:
            logger.exception(f"Error committing new user to DB: {e}")
            db.rollback()
            raise e
    else:
        db.flush()
        db.refresh(db_user)

    logger.info(f"Created new user: {username}")
    return db_user
