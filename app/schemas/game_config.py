# app/schemas/game_config.py
from datetime import datetime, timezone
from sqlalchemy import Column, Enum, ForeignKey, String, Integer, DateTime, JSON
from sqlalchemy.orm import relationship

from app.db.base_class import Base
from app.models.enums import GameType


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class GameConfig(Base):
    """A teacher-authored question set. `questions` holds the payload whose shape depends on `type`."""
    __tablename__ = "game_configs"

    id = Column(Integer, primary_key=True, index=True)
    creator_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    type = Column(Enum(GameType, native_enum=False, length=20), nullable=False, default=GameType.ROSCO)
    questions = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    creator = relationship("User")
