# app/models/game_config.py
from datetime import datetime
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator
from pydantic.alias_generators import to_camel

from app.models.enums import GameType


class CamelModel(BaseModel):
    """Accepts and emits the camelCase keys the web client uses (timeLimit, gridSize, ...)."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Question payloads, one shape per GameType ---

class RoscoQuestion(CamelModel):
    letter: str = Field(..., min_length=1, max_length=2)
    question: str
    answer: str
    starts_with: bool = True # False means "contains the letter"
    justification: Optional[str] = None
    disabled: bool = False

    @field_validator("letter")
    @classmethod
    def _upper_letter(cls, value: str) -> str:
        return value.strip().upper()

    @property
    def is_playable(self) -> bool:
        return not self.disabled and bool(self.answer.strip())


def _unique_letters(questions: List[RoscoQuestion]) -> List[RoscoQuestion]:
    # A player holds one progress entry per letter
    seen = set()
    for q in questions:
        if q.letter in seen:
            raise ValueError(f"Letter {q.letter} appears more than once")
        seen.add(q.letter)
    return questions


RoscoContent = Annotated[List[RoscoQuestion], AfterValidator(_unique_letters)]


class HangmanContent(CamelModel):
    word: str = Field(..., min_length=1)
    hint: Optional[str] = None
    hints: List[str] = Field(default_factory=list)
    time_limit: Optional[int] = Field(None, gt=0)

    @field_validator("word")
    @classmethod
    def _upper_word(cls, value: str) -> str:
        return value.strip().upper()


class QuizQuestion(CamelModel):
    question: str
    options: List[str] = Field(default_factory=list)
    answer: Optional[str] = None
    time_limit: Optional[int] = Field(None, gt=0)

    @model_validator(mode="after")
    def _has_answer(self) -> "QuizQuestion":
        if not self.answer and not self.options:
            raise ValueError("A quiz question needs an answer or at least one option")
        return self

    @property
    def correct_answer(self) -> str:
        # Older configs only carry options, with the right one listed first
        return self.answer if self.answer else self.options[0]


class QuizContent(CamelModel):
    """Shared by TRIVIA (buzzer) and KAHOOT (synchronous multiple choice)."""
    questions: List[QuizQuestion] = Field(..., min_length=1)


class WordSearchContent(CamelModel):
    words: List[str] = Field(..., min_length=1)
    grid_size: int = Field(15, ge=5, le=30)
    time_limit: Optional[int] = Field(None, gt=0)

    @model_validator(mode="after")
    def _words_fit_grid(self) -> "WordSearchContent":
        too_long = [w for w in self.words if len(w) > self.grid_size]
        if too_long:
            raise ValueError(f"Words longer than the grid: {', '.join(too_long)}")
        return self


class MemoryPair(CamelModel):
    a: str
    b: str


class MemoryContent(CamelModel):
    pairs: List[MemoryPair] = Field(..., min_length=2)


class Ship(CamelModel):
    x: int = Field(..., ge=0)
    y: int = Field(..., ge=0)
    size: int = Field(..., ge=1)
    orientation: Literal["H", "V"] = "H"


class BattleshipQuestion(CamelModel):
    question: str
    answer: str
    type: Literal["TEXT", "CHOICE"] = "TEXT"
    options: Optional[List[str]] = None


class BattleshipContent(CamelModel):
    ships: List[Ship] = Field(..., min_length=1)
    pool: List[BattleshipQuestion] = Field(..., min_length=1)


QuestionContent = Union[
    RoscoContent, HangmanContent, QuizContent, WordSearchContent, MemoryContent, BattleshipContent
]

QUESTION_ADAPTERS: Dict[GameType, TypeAdapter] = {
    GameType.ROSCO: TypeAdapter(RoscoContent),
    GameType.HANGMAN: TypeAdapter(HangmanContent),
    GameType.TRIVIA: TypeAdapter(QuizContent),
    GameType.KAHOOT: TypeAdapter(QuizContent),
    GameType.WORD_SEARCH: TypeAdapter(WordSearchContent),
    GameType.MEMORY: TypeAdapter(MemoryContent),
    GameType.BATTLESHIP: TypeAdapter(BattleshipContent),
}


def parse_questions(game_type: GameType, raw: Any) -> QuestionContent:
    """Validates a stored or submitted `questions` payload against the model for its game type."""
    return QUESTION_ADAPTERS[game_type].validate_python(raw)


def dump_questions(game_type: GameType, content: QuestionContent) -> Any:
    return QUESTION_ADAPTERS[game_type].dump_python(content, mode="json", by_alias=True, exclude_none=True)


# --- API bodies ---

class GameConfigCreate(CamelModel):
    title: str = Field(..., min_length=1)
    type: GameType = GameType.ROSCO
    questions: Any

    @model_validator(mode="after")
    def _validate_questions(self) -> "GameConfigCreate":
        self.questions = parse_questions(self.type, self.questions)
        return self


class GameConfigUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1)
    questions: Any = None


class GameConfigPublic(CamelModel):
    id: int
    creator_id: int
    title: str
    type: GameType
    questions: Any
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)
