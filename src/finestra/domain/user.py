"""User onboarding."""

import logging
from finestra.database.base import Database
from finestra.domain.category import CategoryService

logger = logging.getLogger(__name__)


class UserService:
    """Service for users seen by the store."""

    def __init__(self, db: Database):
        self.db = db
        self.categories = CategoryService(db)

    def ensure_user(self, user_id: str) -> bool:
        """Register a user on first use and give them the default categories.

        Later calls do nothing, so categories the user deleted stay deleted.

        Returns:
            True if the user was new
        """
        if not self.db.register_user(user_id):
            return False
        created = self.categories.seed_defaults(user_id)
        logger.info("Registered user %s with %d default categories", user_id, len(created))
        return True
