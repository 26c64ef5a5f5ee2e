# app/crud/crud_game_session.py
import logging
from datetime import datetime, timedelta
from typing import Callable, Tuple, TypeVar

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.core.config import settings
from app.core.exceptions import ConflictError, NotFoundError
from app.models.enums import SessionStatus
from app.models.game_session import KahootState, SessionDocument, TriviaState
from app.schemas.game_config import GameConfig
from app.schemas.game_session import GameSession

logger = logging.getLogger("app.crud.game_session")

T = TypeVar("T")

def get_session_by_code(db: Session, code: str, refresh: bool = False) -> GameSession | None:
    query = db.query(GameSession).filter(GameSession.code == code.strip().upper())
    if refresh:
        # Ignore whatever this Session already holds for the row
        query = query.populate_existing()
    return query.first()

def code_exists(db: Session, code: str) -> bool:
    return db.query(GameSession.id).filter(GameSession.code == code).first() is not None

def create_session(
    db: Session,
    code: str,
    config_id: int,
    host_id: int | None,
    trivia_state: TriviaState | None = None,
    kahoot_state: KahootState | None = None,
) -> GameSession:
    db_session = GameSession(
        code=code,
        config_id=config_id,
        host_id=host_id,
        status=SessionStatus.WAITING,
        players=[],
        trivia_state=trivia_state.model_dump(mode="json", by_alias=True) if trivia_state else None,
        kahoot_state=kahoot_state.model_dump(mode="json", by_alias=True) if kahoot_state else None,
    )
    db.add(db_session)
    db.commit()
    db.refresh(db_session)
    logger.info(f"Created game session {code} for config {config_id} (host {host_id})")
    return db_session

def delete_stale_sessions(db: Session, now: datetime) -> int:
    """Deletes sessions FINISHED for over an hour or still WAITING after a day. Returns how many went."""
    finished_cutoff = now - timedelta(seconds=settings.FINISHED_SESSION_TTL_SECONDS)
    waiting_cutoff = now - timedelta(seconds=settings.WAITING_SESSION_TTL_SECONDS)
    deleted = (
        db.query(GameSession)
        .filter(
            or_(
                and_(GameSession.status == SessionStatus.FINISHED, GameSession.updated_at < finished_cutoff),
                and_(GameSession.status == SessionStatus.WAITING, GameSession.created_at < waiting_cutoff),
            )
        )
        .delete(synchronize_session=False)
    )
    db.commit()
    if deleted:
        logger.info(f"Cleaned up {deleted} stale game sessions")
    return deleted

def to_document(row: GameSession) -> SessionDocument:
    return SessionDocument(
        code=row.code,
        config_id=row.config_id,
        host_id=row.host_id,
        status=row.status,
        start_time=row.start_time,
        review_index=row.review_index,
        players=row.players or [],
        trivia_state=row.trivia_state,
        kahoot_state=row.kahoot_state,
    )

def write_document(row: GameSession, doc: SessionDocument) -> None:
    """Copies a (possibly mutated) document back onto its row. Unchanged values produce no UPDATE."""
    row.status = doc.status
    row.review_index = doc.review_index
    row.players = [p.model_dump(mode="json", by_alias=True) for p in doc.players]
    row.trivia_state = doc.trivia_state.model_dump(mode="json", by_alias=True) if doc.trivia_state else None
    row.kahoot_state = doc.kahoot_state.model_dump(mode="json", by_alias=True) if doc.kahoot_state else None
    # start_time is stamped once; some backends hand it back without tzinfo, so never rewrite it
    if row.start_time is None and doc.start_time is not None:
        row.start_time = doc.start_time

def apply_session_update(
    db: Session,
    code: str,
    mutate: Callable[[SessionDocument, GameConfig], T],
    max_attempts: int | None = None,
) -> Tuple[T, GameSession]:
    """
    Read-modify-write of one session, applied exactly once.

    Loads the row, lets `mutate` change the document, and commits. When another
    request committed in between, the version check fails, the mutation is
    re-run against the fresh row, and after `max_attempts` a ConflictError is
    raised. Errors raised by `mutate` propagate and nothing is written.
    """
    attempts = max_attempts or settings.SESSION_UPDATE_MAX_ATTEMPTS
    for attempt in range(1, attempts + 1):
        row = get_session_by_code(db, code, refresh=True)
        if row is None:
            raise NotFoundError()
        config = row.config
        if config is None:
            logger.error(f"Session {row.code} points to missing config {row.config_id}")
            raise NotFoundError("Game config not found")

        doc = to_document(row)
        result = mutate(doc, config)
        write_document(row, doc)
        try:
            db.commit()
        except StaleDataError:
            db.rollback()
            logger.warning(f"Concurrent update on session {code} (attempt {attempt}/{attempts}), retrying")
            continue
        db.refresh(row)
        return result, row

    logger.error(f"Giving up on session {code} after {attempts} conflicting attempts")
    raise ConflictError()
