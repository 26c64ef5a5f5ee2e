# app/services/kahoot_service.py
"""
Kahoot mode: the host walks every player through the same question in
lock-step phases, LOBBY -> PREVIEW -> ANSWERING -> RESULTS -> LEADERBOARD ->
PREVIEW ... -> PODIUM. Faster correct answers earn more points.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, FrozenSet, List

from app.core.config import settings
from app.core.exceptions import InvalidStateError
from app.models.enums import KahootHostAction, KahootPhase, SessionStatus
from app.models.game_config import QuizQuestion
from app.models.game_session import KahootState, SessionDocument
from app.services.player_service import require_player

logger = logging.getLogger("app.services.kahoot_service")

# Phases each host action may be issued from
ALLOWED_SOURCE_PHASES: Dict[KahootHostAction, FrozenSet[KahootPhase]] = {
    KahootHostAction.START_GAME: frozenset({KahootPhase.LOBBY}),
    KahootHostAction.START_QUESTION: frozenset({KahootPhase.PREVIEW}),
    KahootHostAction.SHOW_RESULTS: frozenset({KahootPhase.ANSWERING, KahootPhase.RESULTS}),
    KahootHostAction.SHOW_LEADERBOARD: frozenset({KahootPhase.RESULTS}),
    KahootHostAction.NEXT_QUESTION: frozenset({KahootPhase.RESULTS, KahootPhase.LEADERBOARD}),
    KahootHostAction.END_GAME: frozenset(set(KahootPhase) - {KahootPhase.PODIUM}),
}


def _state(doc: SessionDocument) -> KahootState:
    if doc.kahoot_state is None:
        doc.kahoot_state = KahootState()
    return doc.kahoot_state


def question_time_limit(question: QuizQuestion) -> int:
    return question.time_limit or settings.DEFAULT_QUESTION_TIME_LIMIT_SECONDS


def kahoot_points(remaining: float, total: float) -> int:
    """Base points plus a bonus proportional to the time left; always within [base, base + bonus]."""
    if total <= 0:
        return settings.KAHOOT_BASE_POINTS
    fraction = min(1.0, max(0.0, remaining / total))
    return round(settings.KAHOOT_BASE_POINTS + settings.KAHOOT_SPEED_BONUS_POINTS * fraction)


def _is_correct(question: QuizQuestion, answer: str | None, answer_index: int | None) -> bool:
    expected = question.correct_answer.strip()
    if answer is not None:
        return answer.strip() == expected
    if answer_index is not None and 0 <= answer_index < len(question.options):
        return question.options[answer_index].strip() == expected
    return False


def _podium(doc: SessionDocument) -> None:
    state = _state(doc)
    state.phase = KahootPhase.PODIUM
    state.timer_end_time = None
    doc.status = SessionStatus.FINISHED
    logger.info(f"Kahoot session {doc.code} reached the podium")


def host_action(doc: SessionDocument, questions: List[QuizQuestion], action: KahootHostAction, now: float) -> None:
    state = _state(doc)
    if state.phase not in ALLOWED_SOURCE_PHASES[action]:
        raise InvalidStateError(f"Cannot {action.value} during {state.phase.value}")

    if action == KahootHostAction.START_GAME:
        state.phase = KahootPhase.PREVIEW
        state.current_question_index = 0
        state.answers = {}
        if doc.status == SessionStatus.WAITING:
            doc.status = SessionStatus.PLAYING
            doc.start_time = datetime.now(timezone.utc)

    elif action == KahootHostAction.START_QUESTION:
        question = questions[state.current_question_index]
        state.phase = KahootPhase.ANSWERING
        state.timer_end_time = now + question_time_limit(question)
        state.answers = {}
        for player in doc.players:
            player.last_points_earned = 0
            player.last_answer_correct = False

    elif action == KahootHostAction.SHOW_RESULTS:
        state.phase = KahootPhase.RESULTS
        state.timer_end_time = None

    elif action == KahootHostAction.SHOW_LEADERBOARD:
        state.phase = KahootPhase.LEADERBOARD

    elif action == KahootHostAction.NEXT_QUESTION:
        if state.current_question_index + 1 >= len(questions):
            _podium(doc)
        else:
            state.current_question_index += 1
            state.answers = {}
            state.phase = KahootPhase.PREVIEW

    elif action == KahootHostAction.END_GAME:
        _podium(doc)

    logger.debug(f"Kahoot {doc.code}: {action.value} -> {state.phase.value} (question {state.current_question_index})")


def submit_answer(
    doc: SessionDocument,
    questions: List[QuizQuestion],
    player_name: str,
    answer: str | None,
    answer_index: int | None,
    now: float,
) -> Dict[str, Any]:
    player = require_player(doc, player_name)
    state = _state(doc)
    if state.phase != KahootPhase.ANSWERING:
        raise InvalidStateError("Not answering phase")
    if player.answered_question_index == state.current_question_index:
        raise InvalidStateError("Already answered")

    question = questions[state.current_question_index]
    is_correct = _is_correct(question, answer, answer_index)
    points = 0
    if is_correct:
        remaining = (state.timer_end_time or now) - now
        points = kahoot_points(remaining, question_time_limit(question))

    player.score += points
    player.last_points_earned = points
    player.last_answer_correct = is_correct
    player.answered_question_index = state.current_question_index

    if answer_index is not None:
        key = str(answer_index)
        state.answers[key] = state.answers.get(key, 0) + 1

    logger.info(f"Kahoot {doc.code}: '{player_name}' answered question {state.current_question_index}, points={points}")
    return {"success": True, "correct": is_correct, "points": points}


def normalize_expired_deadlines(doc: SessionDocument, now: float) -> bool:
    """An ANSWERING phase whose timer ran out becomes RESULTS. Returns True if the document changed."""
    state = doc.kahoot_state
    if state is None or state.phase != KahootPhase.ANSWERING:
        return False
    if state.timer_end_time is None or now < state.timer_end_time:
        return False
    state.phase = KahootPhase.RESULTS
    state.timer_end_time = None
    logger.info(f"Kahoot {doc.code}: time is up on question {state.current_question_index}")
    return True
