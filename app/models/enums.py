from enum import Enum

class GameType(str, Enum):
    ROSCO = "ROSCO"
    HANGMAN = "HANGMAN"
    TRIVIA = "TRIVIA"
    WORD_SEARCH = "WORD_SEARCH"
    MEMORY = "MEMORY"
    BATTLESHIP = "BATTLESHIP"
    KAHOOT = "KAHOOT"

class SessionStatus(str, Enum):
    WAITING = "WAITING"
    PLAYING = "PLAYING"
    FINISHED = "FINISHED"

    @property
    def rank(self) -> int:
        # Position in the lifecycle; status may only move to a higher rank
        return list(SessionStatus).index(self)

class LetterStatus(str, Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    PASAPALABRA = "pasapalabra"

class KahootPhase(str, Enum):
    LOBBY = "LOBBY"
    PREVIEW = "PREVIEW"
    ANSWERING = "ANSWERING"
    RESULTS = "RESULTS"
    LEADERBOARD = "LEADERBOARD"
    PODIUM = "PODIUM"

class AnswerAction(str, Enum):
    ANSWER = "answer"
    PASAPALABRA = "pasapalabra"
    BUZZ = "BUZZ"
    TRIVIA_ANSWER = "TRIVIA_ANSWER"
    TRIVIA_TIMEOUT = "TRIVIA_TIMEOUT"
    KAHOOT_ANSWER = "KAHOOT_ANSWER"
    BATTLESHIP_UPDATE = "BATTLESHIP_UPDATE"
    BATTLESHIP_FINISH = "BATTLESHIP_FINISH"
    WORD_SEARCH_FINISH = "WORD_SEARCH_FINISH"
    MEMORY_FINISH = "MEMORY_FINISH"

class TriviaHostAction(str, Enum):
    OPEN_BUZZER = "OPEN_BUZZER"
    NEXT_QUESTION = "NEXT_QUESTION"

class KahootHostAction(str, Enum):
    START_GAME = "START_GAME"
    START_QUESTION = "START_QUESTION"
    SHOW_RESULTS = "SHOW_RESULTS"
    SHOW_LEADERBOARD = "SHOW_LEADERBOARD"
    NEXT_QUESTION = "NEXT_QUESTION"
    END_GAME = "END_GAME"
