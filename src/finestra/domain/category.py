"""Cost category domain service."""

from typing import Optional
from finestra.database.base import Database
from finestra.domain.entities import DEFAULT_COST_CATEGORIES, CostCategory
from finestra.domain.errors import NotFoundError, ValidationError, category_not_found
from finestra.domain.validation import require_text


class CategoryService:
    """Service for managing cost categories."""

    def __init__(self, db: Database):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def seed_defaults(self, user_id: str) -> list[str]:
        """Create the default categories the user does not have yet.

        Returns:
            Names of the categories that were created
        """
        created = []
        for name in DEFAULT_COST_CATEGORIES:
            if self.db.get_category_by_name(user_id, name) is None:
                self.db.create_category(user_id, name)
                created.append(name)
        return created

    def create_category(self, user_id: str, name: str) -> str:
        """Create a category.

        Args:
            user_id: Owner
            name: Category name, unique per user

        Returns:
            Category ID

        Raises:
            ValidationError: If the name is blank
            ConflictError: If the user already has a category with that name
        """
        return self.db.create_category(user_id, require_text(name, "Category name"))

    def get_category(self, user_id: str, name: str) -> Optional[CostCategory]:
        """Get a category by name."""
        return self.db.get_category_by_name(user_id, name)

    def list_categories(self, user_id: str) -> list[CostCategory]:
        """List the user's categories by name."""
        return self.db.list_categories(user_id)

    def require_category(self, user_id: str, name: Optional[str]) -> str:
        """Return the category name if the user has it.

        Raises:
            ValidationError: If the name is blank or unknown
        """
        name = require_text(name, "Category")
        if self.db.get_category_by_name(user_id, name) is None:
            raise ValidationError(category_not_found(name))
        return name

    def delete_category(self, user_id: str, name: str) -> None:
        """Delete a category by name.

        Items already filed under it keep the label.

        Raises:
            NotFoundError: If the category does not exist
        """
        category = self.db.get_category_by_name(user_id, name)
        if category is None:
            raise NotFoundError(category_not_found(name))
        self.db.delete_category(user_id, category.id)
