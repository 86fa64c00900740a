import logging
from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload
from taskboard.core.errors import ConflictError
from taskboard.core.security import get_password_hash
from taskboard.models.user import AuthProvider, Account, Profile, Role, User

logger = logging.getLogger(__name__)

DEFAULT_ROLE = "user"

class UserService:
    @staticmethod
    def get_user_by_email(db: Session, email: str) -> Optional[User]:
        """Get user by email."""
        return db.query(User).filter(User.email == email).first()

    @staticmethod
    def count_users(db: Session) -> int:
        return db.query(func.count(User.id)).scalar() or 0

    @staticmethod
    def get_users(db: Session, skip: int = 0, limit: int = 10) -> List[User]:
        """Get users oldest first; id breaks created_at ties."""
        return (
            db.query(User)
            .options(selectinload(User.profile), selectinload(User.roles))
            .order_by(User.created_at.asc(), User.id.asc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    @staticmethod
    def get_or_create_role(db: Session, name: str) -> Role:
        role = db.query(Role).filter(Role.name == name).first()
        if not role:
            role = Role(name=name)
            db.add(role)
            db.flush()
        return role

    @staticmethod
    def create_user(db: Session, email: str, username: str, password: Optional[str] = None) -> User:
        """Create user, profile and default role link in one transaction."""
        try:
            role = UserService.get_or_create_role(db, DEFAULT_ROLE)
            db_user = User(
                email=email,
                password_hash=get_password_hash(password) if password else None,
                profile=Profile(full_name=username),
                roles=[role],
            )
            if password:
                db_user.accounts.append(
                    Account(provider=AuthProvider.CREDENTIALS, provider_account_id=email)
                )
            db.add(db_user)
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ConflictError("User already exists")
        except Exception:
            db.rollback()
            raise
        db.refresh(db_user)
        logger.info("Registered user %s", db_user.id)
        return db_user
