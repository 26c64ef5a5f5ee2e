# app/services/game_service.py
"""
Session lifecycle and the answer dispatcher.

Every operation that reads or changes a session goes through
crud_game_session.apply_session_update: the closure below receives a fresh
SessionDocument plus its GameConfig, first applies whatever deadlines have
expired since the last request, then performs the action. The closure may be
re-run when a concurrent request wins the race, so it only touches the
document it is given.
"""
import logging
import secrets
import time
from datetime import datetime, timezone
from typing import Any, Dict, FrozenSet, List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import ForbiddenError, InvalidStateError, NotFoundError
from app.crud import crud_game_config, crud_game_session
from app.models.enums import AnswerAction, GameType, LetterStatus, SessionStatus, TriviaHostAction
from app.models.game_config import GameConfigPublic, parse_questions
from app.models.game_session import (
    AnswerRequest, HostSessionView, HostUpdateRequest, KahootState, Player, PlayerSummary, SessionDocument,
    SessionView, TriviaState,
)
from app.schemas.game_config import GameConfig
from app.schemas.game_session import GameSession
from app.services import kahoot_service, player_service, rosco_service, trivia_service

logger = logging.getLogger("app.services.game_service")

MAX_CODE_ATTEMPTS = 10

# Player actions accepted per game type. Hangman reports through /finish only.
ACTIONS_BY_TYPE: Dict[GameType, FrozenSet[AnswerAction]] = {
    GameType.ROSCO: frozenset({AnswerAction.ANSWER, AnswerAction.PASAPALABRA}),
    GameType.TRIVIA: frozenset({AnswerAction.BUZZ, AnswerAction.TRIVIA_ANSWER, AnswerAction.TRIVIA_TIMEOUT}),
    GameType.KAHOOT: frozenset({AnswerAction.KAHOOT_ANSWER}),
    GameType.BATTLESHIP: frozenset({AnswerAction.BATTLESHIP_UPDATE, AnswerAction.BATTLESHIP_FINISH}),
    GameType.WORD_SEARCH: frozenset({AnswerAction.WORD_SEARCH_FINISH}),
    GameType.MEMORY: frozenset({AnswerAction.MEMORY_FINISH}),
    GameType.HANGMAN: frozenset(),
}


def generate_session_code() -> str:
    return "".join(secrets.choice(settings.SESSION_CODE_ALPHABET) for _ in range(settings.SESSION_CODE_LENGTH))


def _quiz_questions(config: GameConfig):
    return parse_questions(config.type, config.questions).questions


def _require_host(doc: SessionDocument, host_id: int) -> None:
    if doc.host_id is None or doc.host_id != host_id:
        logger.warning(f"User {host_id} tried a host-only operation on session {doc.code}")
        raise ForbiddenError()


def normalize_expired_deadlines(doc: SessionDocument, config: GameConfig, now: float) -> bool:
    """Brings timer-driven state up to date. Returns True if anything changed."""
    if config.type == GameType.TRIVIA:
        return trivia_service.normalize_expired_deadlines(doc, _quiz_questions(config), now)
    if config.type == GameType.KAHOOT:
        return kahoot_service.normalize_expired_deadlines(doc, now)
    return False


# --- Lifecycle ---

def create_session(db: Session, config_id: int, host_id: int) -> GameSession:
    config = crud_game_config.get_config(db, config_id)
    if config is None:
        raise NotFoundError("Game config not found")

    crud_game_session.delete_stale_sessions(db, datetime.now(timezone.utc))

    trivia_state = TriviaState() if config.type == GameType.TRIVIA else None
    kahoot_state = KahootState() if config.type == GameType.KAHOOT else None
    for attempt in range(1, MAX_CODE_ATTEMPTS + 1):
        code = generate_session_code()
        if crud_game_session.code_exists(db, code):
            logger.debug(f"Session code {code} already taken (attempt {attempt})")
            continue
        try:
            return crud_game_session.create_session(
                db, code=code, config_id=config.id, host_id=host_id,
                trivia_state=trivia_state, kahoot_state=kahoot_state,
            )
        except IntegrityError:
            # Taken by a concurrent create between the check and the insert
            db.rollback()
            logger.warning(f"Session code {code} collided on insert (attempt {attempt})")
    logger.error(f"Could not find a free session code after {MAX_CODE_ATTEMPTS} attempts")
    raise InvalidStateError("Could not allocate a session code, try again")


def join_session(db: Session, code: str, name: str | None) -> Dict[str, Any]:
    clean_name = (name or "").strip()
    if not clean_name:
        raise InvalidStateError("Name is required")

    def mutate(doc: SessionDocument, config: GameConfig) -> Dict[str, Any]:
        if doc.find_player(clean_name) is None:
            doc.players.append(Player(name=clean_name))
            logger.info(f"'{clean_name}' joined session {doc.code}")
        return {"success": True}

    result, _ = crud_game_session.apply_session_update(db, code, mutate)
    return result


def _enter_playing(doc: SessionDocument, config: GameConfig, now: float) -> None:
    doc.status = SessionStatus.PLAYING
    if doc.start_time is None:
        doc.start_time = datetime.now(timezone.utc)
    if config.type == GameType.TRIVIA:
        trivia_service.initialize_buzzer(doc, now)


def start_session(db: Session, code: str, host_id: int, now: float | None = None) -> Dict[str, Any]:
    now = time.time() if now is None else now

    def mutate(doc: SessionDocument, config: GameConfig) -> Dict[str, Any]:
        _require_host(doc, host_id)
        if doc.status == SessionStatus.FINISHED:
            raise InvalidStateError("Game already finished")
        if doc.status == SessionStatus.WAITING:
            _enter_playing(doc, config, now)
            logger.info(f"Session {doc.code} started with {len(doc.players)} players")
        return {"success": True}

    result, _ = crud_game_session.apply_session_update(db, code, mutate)
    return result


def finish_player(db: Session, code: str, player_name: str, score: int | None, now: float | None = None) -> Dict[str, Any]:
    """A player reports their final score (Hangman and the other client-scored games)."""
    now = time.time() if now is None else now

    def mutate(doc: SessionDocument, config: GameConfig) -> Dict[str, Any]:
        normalize_expired_deadlines(doc, config, now)
        if doc.status == SessionStatus.FINISHED:
            raise InvalidStateError("Game already finished")
        player_service.finish_with_client_score(doc, player_name, score, now)
        return {"success": True}

    result, _ = crud_game_session.apply_session_update(db, code, mutate)
    return result


def host_update(db: Session, code: str, host_id: int, update: HostUpdateRequest, now: float | None = None) -> Dict[str, Any]:
    now = time.time() if now is None else now

    def mutate(doc: SessionDocument, config: GameConfig) -> Dict[str, Any]:
        _require_host(doc, host_id)
        normalize_expired_deadlines(doc, config, now)

        if update.status is not None and update.status != doc.status:
            if update.status.rank < doc.status.rank:
                raise InvalidStateError(f"Cannot go back from {doc.status.value} to {update.status.value}")
            if update.status == SessionStatus.PLAYING:
                _enter_playing(doc, config, now)
            else:
                doc.status = update.status
            logger.info(f"Host set session {doc.code} to {doc.status.value}")

        if update.review_index is not None:
            doc.review_index = update.review_index

        if update.player is not None and update.score is not None:
            player_service.require_player(doc, update.player).score = update.score

        if update.trivia_action is not None:
            if config.type != GameType.TRIVIA:
                raise InvalidStateError("Trivia actions need a TRIVIA game")
            if doc.status != SessionStatus.PLAYING:
                raise InvalidStateError("Game is not in progress")
            if update.trivia_action == TriviaHostAction.OPEN_BUZZER:
                trivia_service.open_buzzer(doc)
            else:
                trivia_service.skip_question(doc, _quiz_questions(config), now)

        if update.kahoot_action is not None:
            if config.type != GameType.KAHOOT:
                raise InvalidStateError("Kahoot actions need a KAHOOT game")
            if doc.status == SessionStatus.FINISHED:
                raise InvalidStateError("Game already finished")
            kahoot_service.host_action(doc, _quiz_questions(config), update.kahoot_action, now)
        return {"success": True}

    result, _ = crud_game_session.apply_session_update(db, code, mutate)
    return result


# --- Player actions ---

def _dispatch_answer(doc: SessionDocument, config: GameConfig, request: AnswerRequest, now: float) -> Dict[str, Any]:
    if doc.status == SessionStatus.FINISHED:
        raise InvalidStateError("Game already finished")
    player_service.require_player(doc, request.player)

    if request.force_finish:
        return rosco_service.force_finish(doc, request.player, request.status == LetterStatus.CORRECT, now)

    action = request.action
    if action is None and config.type == GameType.ROSCO:
        action = AnswerAction.ANSWER
    if action not in ACTIONS_BY_TYPE[config.type]:
        raise InvalidStateError(f"Action {action.value if action else None} is not valid for a {config.type.value} game")

    if config.type == GameType.ROSCO:
        return rosco_service.answer_letter(
            doc, parse_questions(config.type, config.questions), request.player,
            request.letter, request.answer, action == AnswerAction.ANSWER, now,
        )
    if config.type == GameType.TRIVIA:
        questions = _quiz_questions(config)
        if action == AnswerAction.BUZZ:
            return trivia_service.buzz(doc, questions, request.player, now)
        return trivia_service.submit_answer(
            doc, questions, request.player, request.answer, action == AnswerAction.TRIVIA_TIMEOUT, now,
        )
    if config.type == GameType.KAHOOT:
        return kahoot_service.submit_answer(
            doc, _quiz_questions(config), request.player, request.answer, request.answer_index, now,
        )
    if action == AnswerAction.BATTLESHIP_UPDATE:
        return player_service.record_client_score(doc, request.player, request.score)
    return player_service.finish_with_client_score(doc, request.player, request.score, now)


def process_answer(db: Session, code: str, request: AnswerRequest, now: float | None = None) -> Dict[str, Any]:
    now = time.time() if now is None else now

    def mutate(doc: SessionDocument, config: GameConfig) -> Dict[str, Any]:
        normalize_expired_deadlines(doc, config, now)
        return _dispatch_answer(doc, config, request, now)

    result, _ = crud_game_session.apply_session_update(db, code, mutate)
    return result


# --- Views ---

def get_session_view(
    db: Session, code: str, player_name: str | None = None, viewer_id: int | None = None, now: float | None = None,
) -> SessionView:
    """The poll payload. Writes only when an expired deadline had to be applied."""
    now = time.time() if now is None else now

    def mutate(doc: SessionDocument, config: GameConfig) -> SessionView:
        normalize_expired_deadlines(doc, config, now)
        me = doc.find_player(player_name)
        return SessionView(
            status=doc.status,
            start_time=doc.start_time,
            host_id=doc.host_id,
            is_host=viewer_id is not None and viewer_id == doc.host_id,
            config=GameConfigPublic.model_validate(config),
            my_progress=me.progress if me else None,
            my_score=me.score if me else None,
            players=[PlayerSummary(name=p.name, score=p.score, finished=p.finished) for p in doc.players],
            review_index=doc.review_index,
            trivia_state=doc.trivia_state,
            kahoot_state=doc.kahoot_state,
        )

    view, _ = crud_game_session.apply_session_update(db, code, mutate)
    return view


def get_host_view(db: Session, code: str, host_id: int, now: float | None = None) -> HostSessionView:
    now = time.time() if now is None else now

    def mutate(doc: SessionDocument, config: GameConfig) -> HostSessionView:
        _require_host(doc, host_id)
        normalize_expired_deadlines(doc, config, now)
        players: List[Player] = [p.model_copy(deep=True) for p in doc.players]
        return HostSessionView(
            status=doc.status,
            start_time=doc.start_time,
            config=GameConfigPublic.model_validate(config),
            players=players,
            review_index=doc.review_index,
            trivia_state=doc.trivia_state,
            kahoot_state=doc.kahoot_state,
        )

    view, _ = crud_game_session.apply_session_update(db, code, mutate)
    return view
