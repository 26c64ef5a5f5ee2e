# app/api/auth.py
import logging
from datetime import timedelta
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.api import deps
from app.core import security
from app.core.config import settings
from app.core.exceptions import InvalidStateError, UnauthorizedError
from app.crud import crud_user
from app.models.user import BackendToken, UserCredentials, UserPublic

logger = logging.getLogger("app.api.auth")  # Logger for this module
router = APIRouter()


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(credentials: UserCredentials, db: Session = Depends(deps.get_db)):
    username = (credentials.username or "").strip()
    if not username or not credentials.password:
        raise InvalidStateError("Missing data")
    if crud_user.get_user_by_username(db, username=username):
        raise InvalidStateError("User already exists")

    crud_user.create_user(db, username=username, hashed_password=security.get_password_hash(credentials.password))
    return {"message": "User created"}


@router.post("/login", response_model=BackendToken)
def login(credentials: UserCredentials, response: Response, db: Session = Depends(deps.get_db)):
    user = crud_user.get_user_by_username(db, username=(credentials.username or "").strip())
    if (
        not user
        or not user.hashed_password
        or not credentials.password
        or not security.verify_password(credentials.password, user.hashed_password)
    ):
        # Same message whether or not the username exists
        raise UnauthorizedError("Invalid credentials")

    access_token_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = security.create_access_token(data={"sub": str(user.id)}, expires_delta=access_token_expires)
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=access_token,
        httponly=True,
        samesite="lax",
        secure=settings.COOKIE_SECURE,
        max_age=int(access_token_expires.total_seconds()),
        path="/",
    )
    logger.info(f"User {user.id} ({user.username}) logged in")
    return BackendToken(
        access_token=access_token,
        user=UserPublic.model_validate(user),
        expires_in=int(access_token_expires.total_seconds()),
    )


@router.post("/logout")
def logout(response: Response):
    response.delete_cookie(key=settings.AUTH_COOKIE_NAME, path="/")
    return {"message": "Logged out"}


@router.get("/me", response_model=UserPublic)
def read_current_host(current_user: UserPublic = Depends(deps.get_current_host)):
    return current_user
