# app/api/games.py
"""Routes used by the host screen and by the players' 2-second polling loop."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api import deps
from app.models.game_session import (
    AnswerRequest, CreateSessionRequest, FinishRequest, HostSessionView, HostUpdateRequest, JoinRequest,
    SessionCreated, SessionView,
)
from app.models.user import UserPublic
from app.services import game_service

logger = logging.getLogger("app.api.games")  # Logger for this module
router = APIRouter()


@router.post("", response_model=SessionCreated, status_code=status.HTTP_201_CREATED)
def create_game(
    body: CreateSessionRequest,
    db: Session = Depends(deps.get_db),
    host: UserPublic = Depends(deps.get_current_host),
):
    game = game_service.create_session(db, config_id=body.config_id, host_id=host.id)
    return SessionCreated(code=game.code, id=game.id)


@router.get("/{code}", response_model=SessionView)
def poll_game(
    code: str,
    player: Optional[str] = Query(None, description="Name of the polling player, to include their own progress."),
    db: Session = Depends(deps.get_db),
    viewer: UserPublic | None = Depends(deps.get_optional_host),
):
    return game_service.get_session_view(db, code, player_name=player, viewer_id=viewer.id if viewer else None)


@router.put("/{code}")
def update_game(
    code: str,
    body: HostUpdateRequest,
    db: Session = Depends(deps.get_db),
    host: UserPublic = Depends(deps.get_current_host),
):
    return game_service.host_update(db, code, host_id=host.id, update=body)


@router.get("/{code}/host", response_model=HostSessionView)
def host_view(code: str, db: Session = Depends(deps.get_db), host: UserPublic = Depends(deps.get_current_host)):
    return game_service.get_host_view(db, code, host_id=host.id)


@router.post("/{code}/join")
def join_game(code: str, body: JoinRequest, db: Session = Depends(deps.get_db)):
    return game_service.join_session(db, code, body.name)


@router.post("/{code}/start")
def start_game(code: str, db: Session = Depends(deps.get_db), host: UserPublic = Depends(deps.get_current_host)):
    return game_service.start_session(db, code, host_id=host.id)


@router.post("/{code}/answer")
def answer(code: str, body: AnswerRequest, db: Session = Depends(deps.get_db)):
    return game_service.process_answer(db, code, body)


@router.post("/{code}/finish")
def finish(code: str, body: FinishRequest, db: Session = Depends(deps.get_db)):
    return game_service.finish_player(db, code, body.player, body.score)
