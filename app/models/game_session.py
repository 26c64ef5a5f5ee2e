# app/models/game_session.py
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import Field

from app.models.enums import (
    AnswerAction, KahootHostAction, KahootPhase, LetterStatus, SessionStatus, TriviaHostAction,
)
from app.models.game_config import CamelModel, GameConfigPublic


class Player(CamelModel):
    name: str
    progress: Dict[str, LetterStatus] = Field(default_factory=dict) # Rosco only: letter -> status
    score: int = 0
    finished: bool = False
    finished_at: Optional[float] = None
    last_points_earned: int = 0 # Kahoot only
    last_answer_correct: bool = False # Kahoot only
    answered_question_index: Optional[int] = None # Kahoot only: last question this player answered

    def answered_count(self) -> int:
        return sum(1 for s in self.progress.values() if s in (LetterStatus.CORRECT, LetterStatus.INCORRECT))


class TriviaState(CamelModel):
    current_question_index: int = 0
    buzzer_open: bool = False
    buzzed_player: Optional[str] = None
    buzz_time: Optional[float] = None
    answer_deadline: Optional[float] = None # When the buzzed player's time to answer expires
    last_answer_correct: Optional[bool] = None
    buzz_queue: List[str] = Field(default_factory=list)
    attempted_players: List[str] = Field(default_factory=list)
    buzzer_enable_time: Optional[float] = None # When the buzzer opens on its own


class KahootState(CamelModel):
    current_question_index: int = 0
    phase: KahootPhase = KahootPhase.LOBBY
    timer_end_time: Optional[float] = None
    answers: Dict[str, int] = Field(default_factory=dict) # option index -> count, for the live bar chart


class SessionDocument(CamelModel):
    """In-memory form of a GameSession row; the services mutate it and the CRUD layer writes it back."""
    code: str
    config_id: int
    host_id: Optional[int] = None
    status: SessionStatus = SessionStatus.WAITING
    start_time: Optional[datetime] = None
    review_index: int = -1
    players: List[Player] = Field(default_factory=list)
    trivia_state: Optional[TriviaState] = None
    kahoot_state: Optional[KahootState] = None

    def find_player(self, name: str | None) -> Optional[Player]:
        if not name:
            return None
        return next((p for p in self.players if p.name == name), None)

    def all_players_finished(self) -> bool:
        return len(self.players) > 0 and all(p.finished for p in self.players)


# --- Request bodies ---

class CreateSessionRequest(CamelModel):
    config_id: int


class JoinRequest(CamelModel):
    name: Optional[str] = None


class FinishRequest(CamelModel):
    player: str
    score: int = 0


class AnswerRequest(CamelModel):
    player: str
    action: Optional[AnswerAction] = None
    letter: Optional[str] = None
    answer: Optional[str] = None
    answer_index: Optional[int] = None
    force_finish: bool = False
    status: Optional[LetterStatus] = None # With force_finish: "correct" awards the completion bonus
    score: Optional[int] = None


class HostUpdateRequest(CamelModel):
    status: Optional[SessionStatus] = None
    review_index: Optional[int] = None
    trivia_action: Optional[TriviaHostAction] = None
    kahoot_action: Optional[KahootHostAction] = None
    player: Optional[str] = None
    score: Optional[int] = None


# --- Responses ---

class SessionCreated(CamelModel):
    code: str
    id: int


class PlayerSummary(CamelModel):
    name: str
    score: int
    finished: bool


class SessionView(CamelModel):
    """What the 2-second poll returns to players and the host screen."""
    status: SessionStatus
    start_time: Optional[datetime] = None
    host_id: Optional[int] = None
    is_host: bool = False
    config: GameConfigPublic
    my_progress: Optional[Dict[str, LetterStatus]] = None
    my_score: Optional[int] = None
    players: List[PlayerSummary]
    review_index: int = -1
    trivia_state: Optional[TriviaState] = None
    kahoot_state: Optional[KahootState] = None


class HostSessionView(CamelModel):
    status: SessionStatus
    start_time: Optional[datetime] = None
    config: GameConfigPublic
    players: List[Player]
    review_index: int = -1
    trivia_state: Optional[TriviaState] = None
    kahoot_state: Optional[KahootState] = None
