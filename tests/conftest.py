"""Shared pytest fixtures for finestra tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from finestra.database.factories import create_sqlite_database
from finestra.domain.category import CategoryService
from finestra.domain.cost import CostService
from finestra.domain.dashboard import DashboardService
from finestra.domain.deviation import Explainer
from finestra.domain.errors import ExplanationError
from finestra.domain.fixed_cost import FixedCostService
from finestra.domain.project import ProjectService
from finestra.domain.revenue import RevenueService

USER = "user-1"
OTHER_USER = "user-2"


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for CLI tests
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def user_id():
    return USER


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with the default categories seeded."""
    service = CategoryService(temp_db)
    service.seed_defaults(USER)
    return service


@pytest.fixture
def project_service(temp_db):
    return ProjectService(temp_db)


@pytest.fixture
def cost_service(temp_db, category_service):
    return CostService(temp_db)


@pytest.fixture
def revenue_service(temp_db):
    return RevenueService(temp_db)


@pytest.fixture
def fixed_cost_service(temp_db, category_service):
    return FixedCostService(temp_db)


@pytest.fixture
def dashboard_service(temp_db):
    return DashboardService(temp_db)


@pytest.fixture
def sample_project(project_service):
    """Create a sample project for testing."""
    project_id = project_service.create_project(
        user_id=USER,
        name="Casa Verde",
        client="Ana Souza",
        start_date=date(2024, 7, 1),
        planned_total_revenue=Decimal("15000.00"),
        planned_total_cost=Decimal("9000.00"),
    )
    return project_service.get_project(USER, project_id)


class FakeExplainer(Explainer):
    """Explainer returning canned text and recording what it was asked."""

    def __init__(self, text="Material prices went up.", error=None):
        self.text = text
        self.error = error
        self.requests = []

    def explain(self, request):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture
def fake_explainer():
    return FakeExplainer()


@pytest.fixture
def failing_explainer():
    return FakeExplainer(error=ExplanationError("service unavailable"))


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
