import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from taskboard.api.deps import RequestContext, get_current_identity, get_db
from taskboard.core.errors import InternalError
from taskboard.schemas.user import UserListResponse, UserResponse
from taskboard.services.pagination import PageRequest, list_page
from taskboard.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=UserListResponse)
def read_users(
    page: Optional[str] = None,
    limit: Optional[str] = None,
    context: RequestContext = Depends(get_current_identity),
    db: Session = Depends(get_db)
) -> Any:
    """Get one page of users with their profile and roles."""
    request = PageRequest.from_query(page, limit)
    try:
        result = list_page(
            request,
            lambda: UserService.count_users(db),
            lambda skip, size: UserService.get_users(db, skip, size),
        )
    except SQLAlchemyError:
        logger.exception("Listing users failed")
        raise InternalError("Failed to fetch users")

    return UserListResponse(
        users=[UserResponse.model_validate(user) for user in result.items],
        pagination=result.meta(),
    )
