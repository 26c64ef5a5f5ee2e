# app/crud/crud_game_config.py
import logging
from typing import Any, List
from sqlalchemy.orm import Session

from app.models.enums import GameType, SessionStatus
from app.models.game_config import QuestionContent, dump_questions, parse_questions
from app.schemas.game_config import GameConfig
from app.schemas.game_session import GameSession

logger = logging.getLogger("app.crud.game_config")

def get_config(db: Session, config_id: int) -> GameConfig | None:
    return db.query(GameConfig).filter(GameConfig.id == config_id).first()

def get_config_for_creator(db: Session, config_id: int, creator_id: int) -> GameConfig | None:
    return db.query(GameConfig).filter(GameConfig.id == config_id, GameConfig.creator_id == creator_id).first()

def list_configs_for_creator(db: Session, creator_id: int) -> List[GameConfig]:
    return (
        db.query(GameConfig)
        .filter(GameConfig.creator_id == creator_id)
        .order_by(GameConfig.created_at.desc(), GameConfig.id.desc())
        .all()
    )

def create_config(db: Session, creator_id: int, title: str, game_type: GameType, questions: QuestionContent) -> GameConfig:
    db_item = GameConfig(
        creator_id=creator_id,
        title=title,
        type=game_type,
        questions=dump_questions(game_type, questions),
    )
    db.add(db_item)
    db.commit()
    db.refresh(db_item)
    logger.info(f"Created {game_type.value} config {db_item.id} '{title}' for user {creator_id}")
    return db_item

def has_unfinished_sessions(db: Session, config_id: int) -> bool:
    return db.query(GameSession.id).filter(
        GameSession.config_id == config_id, GameSession.status != SessionStatus.FINISHED,
    ).first() is not None

def update_config(db: Session, db_item: GameConfig, title: str | None = None, questions: Any = None) -> GameConfig:
    """Updates title and/or questions in place. Questions are re-validated against the config's type."""
    if title is not None:
        db_item.title = title
    if questions is not None:
        db_item.questions = dump_questions(db_item.type, parse_questions(db_item.type, questions))
    db.commit()
    db.refresh(db_item)
    return db_item

def delete_config(db: Session, db_item: GameConfig) -> None:
    config_id = db_item.id
    # Sessions played from this config go with it
    db.query(GameSession).filter(GameSession.config_id == config_id).delete(synchronize_session=False)
    db.delete(db_item)
    db.commit()
    logger.info(f"Deleted config {config_id}")
