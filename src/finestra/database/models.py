"""SQLAlchemy models for the finestra store."""

import uuid
from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Date,
    Numeric,
    Boolean,
    Text,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


def _new_id() -> str:
    return uuid.uuid4().hex


def _now() -> datetime:
    return datetime.now(UTC)


class TimestampMixin:
    """Store-assigned creation and update timestamps."""

    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)


class Project(TimestampMixin, Base):
    """Project model."""

    __tablename__ = "projects"

    id = Column(String(32), primary_key=True, default=_new_id)
    user_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    client = Column(String, nullable=False)
    start_date = Column(Date, nullable=False)
    status = Column(String, nullable=False)
    planned_total_revenue = Column(Numeric(12, 2), nullable=False, default=0)
    planned_total_cost = Column(Numeric(12, 2), nullable=False, default=0)
    actual_total_cost = Column(Numeric(12, 2), nullable=False, default=0)
    actual_total_revenue = Column(Numeric(12, 2), nullable=False, default=0)
    description = Column(Text, nullable=True)


class CostItem(TimestampMixin, Base):
    """Payable model.

    ``project_id`` is a plain reference without a foreign key: deleting a
    project leaves its items in place.
    """

    __tablename__ = "cost_items"

    id = Column(String(32), primary_key=True, default=_new_id)
    user_id = Column(String, nullable=False, index=True)
    project_id = Column(String(32), nullable=True, index=True)
    name = Column(String, nullable=False)
    supplier = Column(String, nullable=True)
    category = Column(String, nullable=False)
    status = Column(String, nullable=False)
    planned_amount = Column(Numeric(12, 2), nullable=False)
    actual_amount = Column(Numeric(12, 2), nullable=False, default=0)
    transaction_date = Column(Date, nullable=False)
    description = Column(Text, nullable=True)
    is_installment = Column(Boolean, default=False, nullable=False)
    installment_number = Column(Integer, nullable=True)
    total_installments = Column(Integer, nullable=True)
    installment_group_id = Column(String(32), nullable=True, index=True)
    is_recurring = Column(Boolean, default=False, nullable=False)
    frequency = Column(String, nullable=True)
    fixed_cost_id = Column(String(32), nullable=True, index=True)
    deviation_analysis_note = Column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint(
            "user_id", "installment_group_id", "installment_number",
            name="uq_cost_item_installment",
        ),
    )


class RevenueItem(TimestampMixin, Base):
    """Receivable model, nested under a project."""

    __tablename__ = "revenue_items"

    id = Column(String(32), primary_key=True, default=_new_id)
    user_id = Column(String, nullable=False, index=True)
    project_id = Column(String(32), nullable=False, index=True)
    name = Column(String, nullable=False)
    payment_method = Column(String, nullable=True)
    planned_amount = Column(Numeric(12, 2), nullable=False)
    received_amount = Column(Numeric(12, 2), nullable=False, default=0)
    transaction_date = Column(Date, nullable=False)
    description = Column(Text, nullable=True)
    is_installment = Column(Boolean, default=False, nullable=False)
    installment_number = Column(Integer, nullable=True)
    total_installments = Column(Integer, nullable=True)
    installment_group_id = Column(String(32), nullable=True, index=True)

    __table_args__ = (
        UniqueConstraint(
            "user_id", "installment_group_id", "installment_number",
            name="uq_revenue_item_installment",
        ),
    )


class FixedCost(TimestampMixin, Base):
    """Fixed cost template model."""

    __tablename__ = "fixed_costs"

    id = Column(String(32), primary_key=True, default=_new_id)
    user_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    category = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    frequency = Column(String, nullable=False, default="monthly")
    next_payment_date = Column(Date, nullable=False)
    description = Column(Text, nullable=True)


class CostCategory(Base):
    """Cost category model."""

    __tablename__ = "cost_categories"

    id = Column(String(32), primary_key=True, default=_new_id)
    user_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)

    __table_args__ = (UniqueConstraint("user_id", "name", name="uq_user_category_name"),)


class User(Base):
    """A user the store has seen. The row is written on first use."""

    __tablename__ = "users"

    id = Column(String, primary_key=True)
    created_at = Column(DateTime, default=_now, nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
