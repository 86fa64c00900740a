from dataclasses import dataclass
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from taskboard.core.errors import UnauthorizedError
from taskboard.core.security import ACCESS, INVALID_TOKEN_MESSAGE, InvalidTokenError, verify_token
from taskboard.db.database import get_db
from taskboard.schemas.token import TokenPayload

__all__ = ["RequestContext", "get_current_identity", "get_db"]

# auto_error is off so a missing header yields our own 401 body instead of a 403
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class RequestContext:
    """Authenticated subject of the current request."""

    identity: TokenPayload

    @property
    def user_id(self) -> int:
        return self.identity.sub


async def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> RequestContext:
    """Resolve the bearer access token into a RequestContext or reject with 401."""
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("No token provided")
    try:
        payload = verify_token(ACCESS, credentials.credentials)
    except InvalidTokenError:
        raise UnauthorizedError(INVALID_TOKEN_MESSAGE)
    return RequestContext(identity=payload)
