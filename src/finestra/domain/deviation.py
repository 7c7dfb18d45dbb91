"""Cost deviation analysis.

The evaluation itself is plain arithmetic. When a deviation is significant
an external explainer is asked for free text, which is attached to the
result verbatim. The explainer is optional and its failures never fail the
analysis.
"""

import logging
from abc import ABC, abstractmethod
from collections import defaultdict
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Optional, Sequence

from finestra.database.base import Database
from finestra.domain.entities import (
    CategoryDeviation,
    CostItem,
    DeviationResult,
    Project,
)
from finestra.domain.errors import (
    ExplanationError,
    NotFoundError,
    ValidationError,
    cost_item_not_found,
    project_not_found,
)
from finestra.domain.metrics import actual_total_cost, planned_total_cost

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD_PERCENTAGE = Decimal("10")


def evaluate_deviation(
    predicted_cost: Decimal,
    actual_cost: Decimal,
    threshold_percentage: Decimal = DEFAULT_THRESHOLD_PERCENTAGE,
) -> DeviationResult:
    """Compare actual cost with the prediction.

    Args:
        predicted_cost: Predicted total, must not be zero
        actual_cost: Actual total
        threshold_percentage: Absolute percentage at or above which the
            deviation is significant

    Returns:
        DeviationResult without explanation

    Raises:
        ValidationError: If predicted_cost is zero
    """
    predicted = Decimal(predicted_cost)
    actual = Decimal(actual_cost)
    threshold = Decimal(threshold_percentage)
    if predicted == 0:
        raise ValidationError(
            "Cannot evaluate a deviation against a predicted cost of zero"
        )
    amount = actual - predicted
    percentage = amount / predicted * 100
    return DeviationResult(
        predicted_cost=predicted,
        actual_cost=actual,
        threshold_percentage=threshold,
        deviation_amount=amount,
        deviation_percentage=percentage,
        is_significant=abs(percentage) >= threshold,
    )


def category_breakdown(costs: Sequence[CostItem]) -> list[CategoryDeviation]:
    """Predicted vs actual cost per category, in first-seen order."""
    predicted: dict[str, Decimal] = defaultdict(lambda: Decimal("0.00"))
    actual: dict[str, Decimal] = defaultdict(lambda: Decimal("0.00"))
    for item in costs:
        predicted[item.category] += item.planned_amount
        actual[item.category] += item.actual_amount
    return [
        CategoryDeviation(category=name, predicted=predicted[name], actual=actual[name])
        for name in predicted
    ]


@dataclass(frozen=True)
class ExplanationRequest:
    """Everything the explanation service is told about a deviation."""

    project_name: str
    predicted_cost: Decimal
    actual_cost: Decimal
    deviation_amount: Decimal
    deviation_percentage: Decimal
    threshold_percentage: Decimal
    project_description: Optional[str] = None
    cost_categories: tuple[CategoryDeviation, ...] = field(default_factory=tuple)


class Explainer(ABC):
    """Remote service producing a free-text explanation for a deviation."""

    @abstractmethod
    def explain(self, request: ExplanationRequest) -> str:
        """Return the explanation text.

        Raises:
            ExplanationError: If the service failed or returned nothing
        """
        pass


def describe_project(project: Project) -> str:
    """Default description sent along with a project's numbers."""
    if project.description:
        return project.description
    return (
        f"Análise de custos para o projeto {project.name}, "
        f"cliente {project.client}, com início em {project.start_date.isoformat()}."
    )


class DeviationService:
    """Service running deviation analysis over stored projects."""

    def __init__(
        self,
        db: Database,
        explainer: Optional[Explainer] = None,
        threshold_percentage: Decimal = DEFAULT_THRESHOLD_PERCENTAGE,
    ):
        """Initialize deviation service.

        Args:
            db: Database instance
            explainer: Optional explanation service
            threshold_percentage: Default significance threshold
        """
        self.db = db
        self.explainer = explainer
        self.threshold_percentage = Decimal(threshold_percentage)

    def analyze_project(
        self,
        user_id: str,
        project_id: str,
        threshold_percentage: Optional[Decimal] = None,
    ) -> Optional[DeviationResult]:
        """Analyse the cost deviation of a project.

        Returns:
            DeviationResult, or None when the project has no planned cost to
            compare against

        Raises:
            NotFoundError: If the project does not exist for the user
        """
        project = self.db.get_project(user_id, project_id)
        if project is None:
            raise NotFoundError(project_not_found(project_id))

        costs = self.db.list_cost_items(user_id, project_id=project_id)
        predicted = planned_total_cost(costs)
        if predicted == 0:
            logger.info("Skipping deviation analysis for %s: no planned cost", project_id)
            return None

        threshold = (
            self.threshold_percentage
            if threshold_percentage is None
            else Decimal(threshold_percentage)
        )
        result = evaluate_deviation(predicted, actual_total_cost(costs), threshold)
        if not result.is_significant:
            return result

        request = ExplanationRequest(
            project_name=project.name,
            project_description=describe_project(project),
            predicted_cost=result.predicted_cost,
            actual_cost=result.actual_cost,
            deviation_amount=result.deviation_amount,
            deviation_percentage=result.deviation_percentage,
            threshold_percentage=result.threshold_percentage,
            cost_categories=tuple(category_breakdown(costs)),
        )
        return replace(result, explanation=self.explain(request))

    def explain(self, request: ExplanationRequest) -> Optional[str]:
        """Ask the explainer, returning None if it is absent or fails."""
        if self.explainer is None:
            return None
        try:
            return self.explainer.explain(request)
        except ExplanationError as e:
            logger.warning("Deviation explanation unavailable for %s: %s", request.project_name, e)
            return None

    def annotate_cost_item(self, user_id: str, item_id: str, note: Optional[str]) -> None:
        """Store an analysis note on a payable.

        Raises:
            NotFoundError: If the item does not exist for the user
        """
        if self.db.get_cost_item(user_id, item_id) is None:
            raise NotFoundError(cost_item_not_found(item_id))
        self.db.update_cost_item(user_id, item_id, deviation_analysis_note=note)
