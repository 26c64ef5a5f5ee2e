# app/api/deps.py
import logging
from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer # Only used to read an optional "Bearer" header
from sqlalchemy.orm import Session

from app.core import security
from app.core.config import settings
from app.core.exceptions import UnauthorizedError
from app.crud import crud_user
from app.db.session import SessionLocal
from app.models.user import UserPublic

logger = logging.getLogger("app.api.deps")  # Logger for this module

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

# The browser sends the httpOnly cookie; scripts and tests may send a Bearer header instead
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/login", auto_error=False)

def _token_from_request(request: Request, bearer_token: str | None) -> str | None:
    return request.cookies.get(settings.AUTH_COOKIE_NAME) or bearer_token

def _user_from_token(db: Session, token: str) -> UserPublic:
    payload = security.verify_backend_token(token)
    user_id_str: str | None = payload.get("sub") # Expect user.id as string
    if user_id_str is None:
        raise UnauthorizedError()
    try:
        user_db_id = int(user_id_str)
    except ValueError:
        logger.warning(f"Invalid user ID format in token 'sub': {user_id_str}")
        raise UnauthorizedError()

    user = crud_user.get_user(db, user_id=user_db_id)
    if user is None:
        # Valid signature for a user that no longer exists
        logger.error(f"User with DB ID {user_db_id} from valid token not found in database.")
        raise UnauthorizedError()
    return UserPublic.model_validate(user)

def get_current_host(
    request: Request,
    bearer_token: str | None = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> UserPublic:
    token = _token_from_request(request, bearer_token)
    if not token:
        raise UnauthorizedError()
    return _user_from_token(db, token)

def get_optional_host(
    request: Request,
    bearer_token: str | None = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> UserPublic | None:
    """Like get_current_host, but anonymous players (or a stale cookie) simply get None."""
    token = _token_from_request(request, bearer_token)
    if not token:
        return None
    try:
        return _user_from_token(db, token)
    except UnauthorizedError:
        logger.debug("Ignoring invalid auth token on a public endpoint")
        return None
