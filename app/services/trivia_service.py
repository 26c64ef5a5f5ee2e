# app/services/trivia_service.py
"""
Buzzer-mode Trivia.

Per question: the buzzer opens (host click or `buzzer_enable_time` passing),
players BUZZ into a queue, the head of the queue answers against a deadline.
A correct answer scores and moves everyone to the next question; a wrong
answer or timeout costs points, blocks the player for this question and hands
the turn to the next in the queue, or reopens the buzzer for whoever has not
tried yet. Once everyone has tried, the question is skipped.
"""
import logging
from typing import Any, Dict, List

from app.core.config import settings
from app.core.exceptions import NotYourTurnError
from app.models.enums import SessionStatus
from app.models.game_config import QuizQuestion
from app.models.game_session import SessionDocument, TriviaState
from app.services.player_service import require_player

logger = logging.getLogger("app.services.trivia_service")


def _state(doc: SessionDocument) -> TriviaState:
    if doc.trivia_state is None:
        doc.trivia_state = TriviaState()
    return doc.trivia_state


def _answer_deadline(question: QuizQuestion, now: float) -> float:
    return now + (question.time_limit or settings.DEFAULT_QUESTION_TIME_LIMIT_SECONDS)


def _give_turn(state: TriviaState, player_name: str, questions: List[QuizQuestion], now: float) -> None:
    state.buzzed_player = player_name
    state.buzz_time = now
    state.answer_deadline = _answer_deadline(questions[state.current_question_index], now)


def _advance_question(doc: SessionDocument, questions: List[QuizQuestion], now: float) -> None:
    state = _state(doc)
    state.current_question_index += 1
    state.buzzer_open = False
    state.buzzed_player = None
    state.buzz_time = None
    state.answer_deadline = None
    state.buzz_queue = []
    state.attempted_players = []
    state.buzzer_enable_time = now + settings.BUZZER_ENABLE_DELAY_SECONDS
    if state.current_question_index >= len(questions):
        doc.status = SessionStatus.FINISHED
        logger.info(f"Trivia session {doc.code} ran out of questions")


def initialize_buzzer(doc: SessionDocument, now: float) -> bool:
    """Arms the first question's buzzer timer once the game is running. Returns True if it changed anything."""
    state = _state(doc)
    if state.buzzer_enable_time is not None:
        return False
    state.buzzer_open = False
    state.buzzed_player = None
    state.buzz_queue = []
    state.attempted_players = []
    state.buzzer_enable_time = now + settings.BUZZER_ENABLE_DELAY_SECONDS
    return True


def can_buzz(state: TriviaState, now: float) -> bool:
    timer_passed = state.buzzer_enable_time is not None and now >= state.buzzer_enable_time
    return state.buzzer_open or timer_passed


def buzz(doc: SessionDocument, questions: List[QuizQuestion], player_name: str, now: float) -> Dict[str, Any]:
    require_player(doc, player_name)
    state = _state(doc)
    if not can_buzz(state, now):
        return {"success": False, "reason": "LOCKED"}
    if player_name in state.buzz_queue or player_name in state.attempted_players:
        return {"success": False, "reason": "ALREADY_BUZZED"}

    state.buzz_queue.append(player_name)
    if not state.buzzed_player:
        _give_turn(state, player_name, questions, now)
        # Others can keep queueing behind the active player
        state.buzzer_open = True
        logger.debug(f"'{player_name}' has the turn on question {state.current_question_index} of {doc.code}")
    return {"success": True, "buzzed": True, "queuePos": len(state.buzz_queue)}


def _resolve_miss(doc: SessionDocument, questions: List[QuizQuestion], player_name: str, now: float) -> None:
    """Wrong answer or timeout by the active player."""
    state = _state(doc)
    player = require_player(doc, player_name)
    player.score -= settings.TRIVIA_WRONG_PENALTY
    state.last_answer_correct = False
    if player_name not in state.attempted_players:
        state.attempted_players.append(player_name)
    if player_name in state.buzz_queue:
        state.buzz_queue.remove(player_name)

    if state.buzz_queue:
        _give_turn(state, state.buzz_queue[0], questions, now)
    elif len(state.attempted_players) >= len(doc.players):
        _advance_question(doc, questions, now)
    else:
        # Blocked players stay in attempted_players until the question changes
        state.buzzed_player = None
        state.buzz_time = None
        state.answer_deadline = None
        state.buzzer_open = True


def submit_answer(
    doc: SessionDocument,
    questions: List[QuizQuestion],
    player_name: str,
    answer: str | None,
    timed_out: bool,
    now: float,
) -> Dict[str, Any]:
    player = require_player(doc, player_name)
    state = _state(doc)
    if timed_out and state.buzzed_player != player_name and player_name in state.attempted_players:
        # The server already expired this turn before the client's own timer fired
        return {"success": True, "correct": False}
    if state.buzzed_player != player_name:
        raise NotYourTurnError()

    question = questions[state.current_question_index]
    is_correct = not timed_out and (answer or "").strip() == question.correct_answer.strip()

    if is_correct:
        player.score += settings.TRIVIA_CORRECT_POINTS
        _advance_question(doc, questions, now)
        state.last_answer_correct = True
    else:
        _resolve_miss(doc, questions, player_name, now)
    logger.info(
        f"Trivia {doc.code}: '{player_name}' {'timed out' if timed_out else 'answered'} "
        f"question {question.question!r}, correct={is_correct}"
    )
    return {"success": True, "correct": is_correct}


def open_buzzer(doc: SessionDocument) -> None:
    _state(doc).buzzer_open = True


def skip_question(doc: SessionDocument, questions: List[QuizQuestion], now: float) -> None:
    """Host moves everyone on without a correct answer."""
    _advance_question(doc, questions, now)


def normalize_expired_deadlines(doc: SessionDocument, questions: List[QuizQuestion], now: float) -> bool:
    """
    Applies whatever the clock has decided since the last request: an expired
    answer deadline counts as a timeout, and a passed enable time opens the
    buzzer. Returns True if the document changed.
    """
    if doc.status != SessionStatus.PLAYING:
        return False
    changed = initialize_buzzer(doc, now)
    state = _state(doc)

    if state.buzzed_player and state.answer_deadline is not None and now >= state.answer_deadline:
        logger.info(f"Trivia {doc.code}: answer deadline passed for '{state.buzzed_player}'")
        if doc.find_player(state.buzzed_player) is None:
            state.buzzed_player = None
            state.answer_deadline = None
        else:
            # The next player gets a fresh deadline from `now`, so this never cascades
            _resolve_miss(doc, questions, state.buzzed_player, now)
        changed = True

    if (
        doc.status == SessionStatus.PLAYING
        and not state.buzzer_open
        and not state.buzzed_player
        and state.buzzer_enable_time is not None
        and now >= state.buzzer_enable_time
    ):
        state.buzzer_open = True
        changed = True
    return changed
