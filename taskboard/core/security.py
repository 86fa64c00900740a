import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTError
from passlib.context import CryptContext
from pydantic import ValidationError as PayloadError

from taskboard.core.config import settings
from taskboard.schemas.token import TokenPayload

logger = logging.getLogger(__name__)

ACCESS = "access"
REFRESH = "refresh"

INVALID_TOKEN_MESSAGE = "Invalid or expired token"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class InvalidTokenError(ValueError):
    """Raised for every token failure; the reason is never exposed."""

    def __init__(self) -> None:
        super().__init__(INVALID_TOKEN_MESSAGE)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    """Generate password hash from plain password."""
    return pwd_context.hash(password)

def _secret_for(kind: str) -> str:
    if kind == ACCESS:
        return settings.JWT_ACCESS_SECRET
    if kind == REFRESH:
        return settings.JWT_REFRESH_SECRET
    raise ValueError(f"Unknown token kind: {kind}")

def _lifetime_for(kind: str) -> timedelta:
    if kind == ACCESS:
        return timedelta(minutes=int(settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    return timedelta(days=int(settings.REFRESH_TOKEN_EXPIRE_DAYS))

def create_token(kind: str, payload: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """Sign a JWT of the given kind around payload ({"sub", "email"})."""
    secret_key = _secret_for(kind)
    current_time = datetime.now(timezone.utc)
    expire = current_time + (expires_delta if expires_delta is not None else _lifetime_for(kind))

    to_encode = {
        "sub": str(payload["sub"]),
        "email": payload["email"],
        "type": kind,
        "iat": current_time,
        "exp": expire,
    }
    return jwt.encode(to_encode, secret_key, algorithm=settings.ALGORITHM)

def verify_token(kind: str, token: str) -> TokenPayload:
    """Verify signature, kind and expiry of a token and return its claims.

    Wrong secret, tampering, a token of the other kind and expiry all raise
    the same InvalidTokenError.
    """
    secret_key = _secret_for(kind)
    try:
        claims = jwt.decode(token, secret_key, algorithms=[settings.ALGORITHM])
        if claims.get("type") != kind:
            raise JWTError("Invalid token type")
        return TokenPayload(**claims)
    except ExpiredSignatureError:
        logger.debug("Rejected %s token: expired", kind)
        raise InvalidTokenError()
    except (JWTError, PayloadError) as e:
        logger.debug("Rejected %s token: %s", kind, e)
        raise InvalidTokenError()

def create_access_token(payload: Dict[str, Any]) -> str:
    """Create access token."""
    return create_token(ACCESS, payload)

def create_refresh_token(payload: Dict[str, Any]) -> str:
    """Create refresh token."""
    return create_token(REFRESH, payload)
