from datetime import datetime
from typing import Any, List, Optional

from pydantic import field_validator

from taskboard.schemas.base import CamelModel, PaginationMeta

class RegisterRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None
    username: Optional[str] = None

class LoginRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None

class ProfileResponse(CamelModel):
    full_name: Optional[str] = None

class UserResponse(CamelModel):
    id: int
    email: str
    created_at: datetime
    profile: Optional[ProfileResponse] = None
    roles: List[str] = []

    @field_validator("roles", mode="before")
    @classmethod
    def role_names(cls, roles: Any) -> List[str]:
        return [getattr(role, "name", role) for role in (roles or [])]

class AuthResponse(CamelModel):
    id: int
    email: str
    username: Optional[str] = None
    roles: List[str] = []
    access_token: str
    refresh_token: str

class UserListResponse(CamelModel):
    users: List[UserResponse]
    pagination: PaginationMeta
