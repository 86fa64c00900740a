import logging
from typing import Any

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from taskboard.api.deps import get_db
from taskboard.core.errors import ConflictError, InternalError, UnauthorizedError, ValidationError
from taskboard.models.user import User
from taskboard.schemas.token import AccessTokenResponse, RefreshRequest
from taskboard.schemas.user import AuthResponse, LoginRequest, RegisterRequest
from taskboard.services.token_service import TokenService
from taskboard.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter()


def _auth_response(user: User) -> AuthResponse:
    tokens = TokenService.issue_for(user)
    return AuthResponse(
        id=user.id,
        email=user.email,
        username=user.username,
        roles=user.role_names,
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    user_in: RegisterRequest,
    db: Session = Depends(get_db)
) -> Any:
    """Register a new user and sign them in."""
    if not user_in.email or not user_in.username:
        raise ValidationError("Email and username are required")

    try:
        if UserService.get_user_by_email(db, user_in.email):
            raise ConflictError("User already exists")
        user = UserService.create_user(db, user_in.email, user_in.username, user_in.password)
        return _auth_response(user)
    except SQLAlchemyError:
        logger.exception("Registration failed")
        raise InternalError("Registration failed")


@router.post("/login", response_model=AuthResponse)
def login(
    credentials: LoginRequest,
    db: Session = Depends(get_db)
) -> Any:
    """Sign in by email.

    The password is accepted but not checked yet; only the email is used
    to find the account.
    """
    if not credentials.email:
        raise ValidationError("Email is required")

    try:
        user = UserService.get_user_by_email(db, credentials.email)
    except SQLAlchemyError:
        logger.exception("Login lookup failed")
        raise InternalError("Login failed")

    if not user:
        raise UnauthorizedError("User not found")

    logger.info("User %s logged in", user.id)
    return _auth_response(user)


@router.post("/refresh", response_model=AccessTokenResponse)
def refresh_token(body: RefreshRequest) -> Any:
    """Get a new access token using a refresh token."""
    if not body.refresh_token:
        raise ValidationError("Refresh token is required")
    return AccessTokenResponse(access_token=TokenService.refresh(body.refresh_token))
