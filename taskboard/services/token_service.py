import logging
from taskboard.core.errors import UnauthorizedError
from taskboard.core.security import (
    INVALID_TOKEN_MESSAGE,
    InvalidTokenError,
    create_access_token,
    create_refresh_token,
    verify_token,
    REFRESH,
)
from taskboard.models.user import User
from taskboard.schemas.token import TokenPair

logger = logging.getLogger(__name__)

class TokenService:
    """Issues token pairs and mints access tokens from refresh tokens.

    There is no server-side token state: refresh tokens are not stored,
    not revoked and not rotated. A refresh token stays usable until its
    own expiry.
    """

    @staticmethod
    def issue_for(user: User) -> TokenPair:
        """Create an access/refresh pair for the user."""
        payload = {"sub": user.id, "email": user.email}
        return TokenPair(
            access_token=create_access_token(payload),
            refresh_token=create_refresh_token(payload),
        )

    @staticmethod
    def refresh(refresh_token: str) -> str:
        """Return a new access token for the subject of refresh_token."""
        try:
            payload = verify_token(REFRESH, refresh_token)
        except InvalidTokenError:
            logger.info("Refresh rejected")
            raise UnauthorizedError(INVALID_TOKEN_MESSAGE)
        return create_access_token({"sub": payload.sub, "email": payload.email})
