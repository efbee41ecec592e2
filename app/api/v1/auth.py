"""Registration, login and auth dependencies (get_current_user)."""

import logging
from typing import Annotated

import jwt
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.errors import AuthenticationError, ConflictError, InputValidationError
from app.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    user_id_from_payload,
    verify_password,
)
from app.models.user import ROLE_DEVELOPER, User
from app.schemas.auth import (
    CurrentUser,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter()
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


@router.post("/register", response_model=RegisterResponse, status_code=201)
def register(
    body: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
) -> RegisterResponse:
    """Create a developer account. Privileged roles are provisioned with the create_user script."""
    username = body.username.strip()
    if not username:
        raise InputValidationError("username and password are required")
    if db.query(User.id).filter(User.username == username).first() is not None:
        raise ConflictError("username already exists")

    user = User(
        username=username,
        password_hash=hash_password(body.password),
        role=ROLE_DEVELOPER,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        # Lost a race with a concurrent registration of the same name.
        db.rollback()
        raise ConflictError("username already exists") from e
    db.refresh(user)
    logger.info("User registered", extra={"user_id": user.id})
    return RegisterResponse(id=user.id, username=user.username)


@router.post("/login", response_model=LoginResponse)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
) -> LoginResponse:
    """
    Authenticate with username and password; returns the user and a JWT access token.
    Include the token in the Authorization header as: Bearer <access_token>
    """
    user = db.query(User).filter(User.username == body.username.strip()).first()
    if user is None or not verify_password(body.password, user.password_hash):
        raise AuthenticationError("invalid credentials")
    token = create_access_token(sub=user.id, role=user.role)
    return LoginResponse(
        id=user.id,
        username=user.username,
        role=user.role,
        access_token=token,
        token_type="bearer",
    )


def _resolve_user(token: str, db: Session) -> CurrentUser:
    try:
        payload = decode_access_token(token)
    except jwt.PyJWTError:
        raise _unauthorized("Invalid or expired token")
    user_id = user_id_from_payload(payload)
    if user_id is None:
        raise _unauthorized("Invalid token payload")
    # Role is read from the database, not from the token.
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise _unauthorized("User not found")
    return CurrentUser(id=user.id, username=user.username, role=user.role)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> CurrentUser:
    """Dependency: require valid Bearer JWT and return the current user. Raises 401 if missing or invalid."""
    if credentials is None:
        raise _unauthorized("Not authenticated")
    return _resolve_user(credentials.credentials, db)

