"""Project domain service."""

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Optional
from finestra.database.base import Database
from finestra.domain.entities import (
    Project,
    ProjectMetrics,
    ProjectStatus,
)
from finestra.domain.errors import NotFoundError, ValidationError, project_not_found
from finestra.domain.metrics import (
    project_metrics,
    totals_drift,
)
from finestra.domain.validation import (
    optional_text,
    require_name,
    require_non_negative,
    require_status,
    require_text,
)

logger = logging.getLogger(__name__)

_AMOUNT_FIELDS = {
    "planned_total_revenue": "Planned revenue",
    "planned_total_cost": "Planned cost",
}


class ProjectService:
    """Service for managing projects."""

    def __init__(self, db: Database):
        """Initialize project service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_project(
        self,
        user_id: str,
        name: str,
        client: str,
        start_date: date,
        planned_total_revenue: Decimal,
        planned_total_cost: Decimal,
        status: ProjectStatus = ProjectStatus.PENDENTE,
        description: Optional[str] = None,
    ) -> str:
        """Create a new project.

        Args:
            user_id: Owner
            name: Project name
            client: Client name
            start_date: Start date
            planned_total_revenue: Expected revenue, not negative
            planned_total_cost: Expected cost, not negative
            status: Initial status
            description: Optional description

        Returns:
            Project ID

        Raises:
            ValidationError: If any field is invalid
        """
        if start_date is None:
            raise ValidationError("Start date is required")
        return self.db.create_project(
            user_id=user_id,
            name=require_name(name, "Project name"),
            client=require_text(client, "Client"),
            start_date=start_date,
            status=require_status(status, ProjectStatus),
            planned_total_revenue=require_non_negative(planned_total_revenue, "Planned revenue"),
            planned_total_cost=require_non_negative(planned_total_cost, "Planned cost"),
            description=optional_text(description),
        )

    def get_project(self, user_id: str, project_id: str) -> Optional[Project]:
        """Get project by ID."""
        return self.db.get_project(user_id, project_id)

    def require_project(self, user_id: str, project_id: str) -> Project:
        """Get project by ID.

        Raises:
            NotFoundError: If the project does not exist for the user
        """
        project = self.db.get_project(user_id, project_id)
        if project is None:
            raise NotFoundError(project_not_found(project_id))
        return project

    def list_projects(self, user_id: str) -> list[Project]:
        """List all projects, most recent start first."""
        return self.db.list_projects(user_id)

    def search_projects(self, user_id: str, query: str) -> list[Project]:
        """Projects whose name or client contains ``query``, ignoring case."""
        if not query or not query.strip():
            return []
        return self.db.list_projects(user_id, search=query)

    def update_project(self, user_id: str, project_id: str, **fields: Any) -> None:
        """Update the given project fields.

        Raises:
            NotFoundError: If the project does not exist
            ValidationError: If a value is invalid
        """
        self.require_project(user_id, project_id)
        changes: dict[str, Any] = {}
        for key, value in fields.items():
            if key == "name":
                value = require_name(value, "Project name")
            elif key == "client":
                value = require_text(value, "Client")
            elif key == "status":
                value = require_status(value, ProjectStatus)
            elif key in _AMOUNT_FIELDS:
                value = require_non_negative(value, _AMOUNT_FIELDS[key])
            elif key == "description":
                value = optional_text(value)
            elif key == "start_date" and value is None:
                raise ValidationError("Start date is required")
            changes[key] = value
        if changes:
            self.db.update_project(user_id, project_id, **changes)

    def delete_project(self, user_id: str, project_id: str) -> None:
        """Delete a project.

        Its cost and revenue items are not deleted; they stay listed and
        show "N/A" as their project.
        """
        self.require_project(user_id, project_id)
        self.db.delete_project(user_id, project_id)

    def project_metrics(self, user_id: str, project_id: str) -> ProjectMetrics:
        """Realised totals computed from the project's items."""
        self.require_project(user_id, project_id)
        revenues = self.db.list_revenue_items(user_id, project_id=project_id)
        costs = self.db.list_cost_items(user_id, project_id=project_id)
        return project_metrics(revenues, costs)

    def reconcile_totals(self, user_id: str, project_id: str) -> Optional[ProjectMetrics]:
        """Rewrite the stored running totals from the project's items.

        Returns:
            The corrected totals, or None when they already matched
        """
        project = self.require_project(user_id, project_id)
        revenues = self.db.list_revenue_items(user_id, project_id=project_id)
        costs = self.db.list_cost_items(user_id, project_id=project_id)
        metrics = totals_drift(project, revenues, costs)
        if metrics is None:
            return None

        logger.info(
            "Project %s totals drifted (revenue %s -> %s, cost %s -> %s)",
            project_id,
            project.actual_total_revenue,
            metrics.actual_total_revenue,
            project.actual_total_cost,
            metrics.actual_total_cost,
        )
        self.db.update_project(
            user_id,
            project_id,
            actual_total_revenue=metrics.actual_total_revenue,
            actual_total_cost=metrics.actual_total_cost,
        )
        return metrics
