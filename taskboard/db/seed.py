import logging
from sqlalchemy.orm import Session
from taskboard.core.config import settings
from taskboard.models.user import Account, AuthProvider, Profile, User
from taskboard.services.user_service import UserService

logger = logging.getLogger(__name__)

ADMIN_EMAIL = "admin@example.com"

def seed(db: Session) -> None:
    """Create the base roles and the admin user if they are missing."""
    if not settings.seeding_enabled:
        logger.info("Seeding disabled")
        return

    admin_role = UserService.get_or_create_role(db, "admin")
    UserService.get_or_create_role(db, "user")
    logger.info("Seeded roles: admin, user")

    admin = db.query(User).filter(User.email == ADMIN_EMAIL).first()
    if not admin:
        admin = User(
            email=ADMIN_EMAIL,
            password_hash=None,
            profile=Profile(full_name="Admin One"),
            accounts=[Account(provider=AuthProvider.GOOGLE, provider_account_id="sample")],
            roles=[admin_role],
        )
        db.add(admin)
        logger.info("Seeded admin user: %s", ADMIN_EMAIL)
    db.commit()
