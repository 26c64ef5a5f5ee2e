# app/services/rosco_service.py
import logging
import unicodedata
from typing import Any, Dict, List

from app.core.config import settings
from app.core.exceptions import InvalidStateError, NotFoundError
from app.models.enums import LetterStatus
from app.models.game_config import RoscoQuestion
from app.models.game_session import SessionDocument
from app.services.player_service import mark_finished_if_everyone_done, require_player

logger = logging.getLogger("app.services.rosco_service")


def normalize_answer(text: str | None) -> str:
    """Lowercase, strip diacritics and surrounding whitespace, so "Café " matches "CAFE"."""
    decomposed = unicodedata.normalize("NFD", (text or "").lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).strip()


def answers_match(submitted: str | None, expected: str) -> bool:
    return normalize_answer(submitted) == normalize_answer(expected)


def playable_question_count(questions: List[RoscoQuestion]) -> int:
    return sum(1 for q in questions if q.is_playable)


def answer_letter(
    doc: SessionDocument,
    questions: List[RoscoQuestion],
    player_name: str,
    letter: str | None,
    answer: str | None,
    is_answer: bool,
    now: float,
) -> Dict[str, Any]:
    """
    Records a player's answer (or pasapalabra) for one letter.

    A letter already settled as correct/incorrect cannot be answered again.
    The player finishes once every playable letter is settled, and the session
    finishes once every player has.
    """
    wanted = (letter or "").strip().upper()
    question = next((q for q in questions if q.letter == wanted), None)
    if question is None:
        raise NotFoundError("Question not found")
    if not question.is_playable:
        raise InvalidStateError("This letter is not part of the game")

    player = require_player(doc, player_name)
    current_status = player.progress.get(wanted)
    if current_status in (LetterStatus.CORRECT, LetterStatus.INCORRECT):
        raise InvalidStateError("Already answered", status=current_status.value, score=player.score)

    is_correct = False
    status = LetterStatus.PASAPALABRA
    if is_answer:
        is_correct = answers_match(answer, question.answer)
        status = LetterStatus.CORRECT if is_correct else LetterStatus.INCORRECT

    player.progress[wanted] = status
    if is_correct:
        player.score += 1

    if player.answered_count() >= playable_question_count(questions):
        player.finished = True
        player.finished_at = now
        logger.info(f"Player '{player.name}' completed the rosco in session {doc.code} with {player.score} points")

    mark_finished_if_everyone_done(doc)
    return {"correct": is_correct, "status": status.value, "score": player.score}


def force_finish(doc: SessionDocument, player_name: str, completed: bool, now: float) -> Dict[str, Any]:
    """Ends a player's game early (e.g. their clock ran out). `completed` awards the completion bonus."""
    player = require_player(doc, player_name)
    player.finished = True
    player.finished_at = now
    if completed:
        player.score += settings.ROSCO_FORCE_FINISH_BONUS
    mark_finished_if_everyone_done(doc)
    return {"success": True, "score": player.score}
