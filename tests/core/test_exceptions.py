# tests/core/test_exceptions.py
from app.core.exceptions import ConflictError, InvalidStateError, NotFoundError, NotYourTurnError

def test_default_messages_and_status_codes():
    assert NotFoundError().to_payload() == {"message": "Not found"}
    assert NotFoundError().status_code == 404
    assert NotYourTurnError().status_code == 403
    assert ConflictError().status_code == 409

def test_extra_fields_are_part_of_the_payload():
    error = InvalidStateError("Already answered", status="correct", score=3)
    assert error.status_code == 400
    assert error.to_payload() == {"message": "Already answered", "status": "correct", "score": 3}
