# app/services/player_service.py
"""Player bookkeeping shared by every game type, plus the client-scored games.

Battleship, Word Search, Memory and Hangman compute their score in the
browser; the server stores what it is sent (never negative) and only tracks
who has finished.
"""
import logging
from typing import Any, Dict

from app.core.exceptions import NotFoundError
from app.models.enums import SessionStatus
from app.models.game_session import Player, SessionDocument

logger = logging.getLogger("app.services.player_service")


def require_player(doc: SessionDocument, name: str | None) -> Player:
    player = doc.find_player(name)
    if player is None:
        raise NotFoundError("Player not found")
    return player


def mark_finished_if_everyone_done(doc: SessionDocument) -> None:
    if doc.all_players_finished() and doc.status != SessionStatus.FINISHED:
        doc.status = SessionStatus.FINISHED
        logger.info(f"All players finished in session {doc.code}")


def record_client_score(doc: SessionDocument, player_name: str, score: int | None) -> Dict[str, Any]:
    """Live score update while the player is still playing (Battleship hits)."""
    player = require_player(doc, player_name)
    player.score = max(0, score or 0)
    return {"success": True, "score": player.score}


def finish_with_client_score(doc: SessionDocument, player_name: str, score: int | None, now: float) -> Dict[str, Any]:
    player = require_player(doc, player_name)
    player.score = max(0, score or 0)
    player.finished = True
    player.finished_at = now
    logger.info(f"Player '{player.name}' finished session {doc.code} with a reported score of {player.score}")
    mark_finished_if_everyone_done(doc)
    return {"success": True, "score": player.score}
