# app/api/game_configs.py
import logging
from typing import List
from fastapi import APIRouter, Depends, status
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.api import deps
from app.core.exceptions import InvalidStateError, NotFoundError
from app.crud import crud_game_config
from app.models.game_config import GameConfigCreate, GameConfigPublic, GameConfigUpdate
from app.models.user import UserPublic

logger = logging.getLogger("app.api.game_configs")  # Logger for this module
router = APIRouter()


def _owned_config(db: Session, config_id: int, host: UserPublic):
    # Someone else's config is reported as missing rather than forbidden
    db_item = crud_game_config.get_config_for_creator(db, config_id=config_id, creator_id=host.id)
    if db_item is None:
        raise NotFoundError()
    return db_item


@router.get("", response_model=List[GameConfigPublic])
def list_my_configs(db: Session = Depends(deps.get_db), host: UserPublic = Depends(deps.get_current_host)):
    return crud_game_config.list_configs_for_creator(db, creator_id=host.id)


@router.post("", response_model=GameConfigPublic, status_code=status.HTTP_201_CREATED)
def create_config(
    config_in: GameConfigCreate,
    db: Session = Depends(deps.get_db),
    host: UserPublic = Depends(deps.get_current_host),
):
    return crud_game_config.create_config(
        db, creator_id=host.id, title=config_in.title, game_type=config_in.type, questions=config_in.questions,
    )


@router.get("/{config_id}", response_model=GameConfigPublic)
def read_config(config_id: int, db: Session = Depends(deps.get_db), host: UserPublic = Depends(deps.get_current_host)):
    return _owned_config(db, config_id, host)


@router.put("/{config_id}", response_model=GameConfigPublic)
def update_config(
    config_id: int,
    config_in: GameConfigUpdate,
    db: Session = Depends(deps.get_db),
    host: UserPublic = Depends(deps.get_current_host),
):
    db_item = _owned_config(db, config_id, host)
    if config_in.questions is not None and crud_game_config.has_unfinished_sessions(db, config_id):
        # Sessions index into the question list they started with
        logger.info(f"Rejected questions update for config {config_id}: a session is still open")
        raise InvalidStateError("Questions cannot change while a game using them is open")
    try:
        return crud_game_config.update_config(db, db_item, title=config_in.title, questions=config_in.questions)
    except ValidationError as e:
        db.rollback()
        logger.info(f"Rejected questions update for config {config_id}: {e.error_count()} errors")
        raise InvalidStateError(f"Invalid questions for a {db_item.type.value} game")


@router.delete("/{config_id}")
def delete_config(config_id: int, db: Session = Depends(deps.get_db), host: UserPublic = Depends(deps.get_current_host)):
    crud_game_config.delete_config(db, _owned_config(db, config_id, host))
    return {"message": "Deleted"}
