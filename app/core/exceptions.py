# app/core/exceptions.py
from typing import Any, Dict


class GameError(Exception):
    """Base error raised by the services; converted to `{message}` responses in app.main."""
    status_code: int = 500
    default_message: str = "Error"

    def __init__(self, message: str | None = None, **extra: Any):
        self.message = message or self.default_message
        self.extra: Dict[str, Any] = extra
        super().__init__(self.message)

    def to_payload(self) -> Dict[str, Any]:
        return {"message": self.message, **self.extra}


class NotFoundError(GameError):
    status_code = 404
    default_message = "Not found"


class InvalidStateError(GameError):
    status_code = 400
    default_message = "Invalid action for the current game state"


class NotYourTurnError(GameError):
    status_code = 403
    default_message = "Not your turn"


class UnauthorizedError(GameError):
    status_code = 401
    default_message = "Unauthorized"


class ConflictError(GameError):
    status_code = 409
    default_message = "Concurrent update, retry"


class ForbiddenError(GameError):
    status_code = 403
    default_message = "Only the host can do that"
