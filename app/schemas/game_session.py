# app/schemas/game_session.py
from datetime import datetime, timezone
from sqlalchemy import Column, Enum, ForeignKey, String, Integer, DateTime, JSON
from sqlalchemy.orm import relationship

from app.db.base_class import Base
from app.models.enums import SessionStatus


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class GameSession(Base):
    """
    One live play instance of a GameConfig.

    Players and the per-type state blocks are stored as JSON documents and are
    always written back whole by app.crud.crud_game_session. `version` is the
    optimistic concurrency counter: a flush against a row somebody else updated
    in the meantime raises StaleDataError.
    """
    __tablename__ = "game_sessions"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(12), unique=True, index=True, nullable=False)
    config_id = Column(Integer, ForeignKey("game_configs.id", ondelete="CASCADE"), nullable=False)
    host_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    status = Column(Enum(SessionStatus, native_enum=False, length=10), nullable=False, default=SessionStatus.WAITING, index=True)
    start_time = Column(DateTime(timezone=True), nullable=True)
    review_index = Column(Integer, nullable=False, default=-1)
    players = Column(JSON, nullable=False, default=list)
    trivia_state = Column(JSON, nullable=True)
    kahoot_state = Column(JSON, nullable=True)
    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    config = relationship("GameConfig")

    __mapper_args__ = {"version_id_col": version}
