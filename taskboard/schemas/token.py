from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from taskboard.schemas.base import CamelModel

# Claims carried inside both token kinds
class TokenPayload(BaseModel):
    sub: int  # user id
    email: str
    type: str  # "access" or "refresh"
    exp: datetime
    iat: datetime

class TokenPair(CamelModel):
    access_token: str
    refresh_token: str

class RefreshRequest(CamelModel):
    refresh_token: Optional[str] = None

class AccessTokenResponse(CamelModel):
    access_token: str
