"""Cost deviation analysis command."""

from decimal import Decimal, InvalidOperation

import click
from finestra.ai import create_explainer
from finestra.domain.deviation import DEFAULT_THRESHOLD_PERCENTAGE, DeviationService
from finestra.domain.errors import DomainError
from finestra.cli.error_handling import handle_domain_error
from finestra.cli.formatting import format_money, format_percentage
from finestra.cli.project_resolution import resolve_project_or_exit


@click.command("deviation")
@click.argument("project")
@click.option(
    "--threshold",
    default=str(DEFAULT_THRESHOLD_PERCENTAGE),
    show_default=True,
    help="Deviation percentage considered significant",
)
@click.option("--no-ai", is_flag=True, help="Do not ask Gemini for an explanation")
@click.option("--annotate", "annotate_item", help="Store the explanation on this cost item ID")
@click.pass_context
def deviation(ctx, project: str, threshold: str, no_ai: bool, annotate_item: str | None):
    """Compare a project's actual costs with the plan.

    When the deviation reaches the threshold and GOOGLE_API_KEY is set, an
    explanation is requested from Gemini.

    Examples:
        finestra deviation "Casa Verde"
        finestra deviation "Casa Verde" --threshold 5 --no-ai
    """
    user_id = ctx.obj["user_id"]
    project_id = resolve_project_or_exit(ctx, project)

    try:
        threshold_percentage = Decimal(threshold)
    except InvalidOperation:
        threshold_percentage = None
    if threshold_percentage is None or not threshold_percentage.is_finite():
        click.echo(f"Error: Invalid threshold '{threshold}'", err=True)
        ctx.exit(1)

    explainer = None if no_ai else create_explainer()
    service = DeviationService(ctx.obj["db"], explainer=explainer)

    try:
        result = service.analyze_project(user_id, project_id, threshold_percentage)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if result is None:
        click.echo("No planned costs for this project; deviation analysis skipped.")
        _not_annotated(annotate_item)
        return

    click.echo(f"\nPredicted cost: {format_money(result.predicted_cost)}")
    click.echo(f"Actual cost:    {format_money(result.actual_cost)}")
    click.echo(
        f"Deviation:      {format_money(result.deviation_amount)} "
        f"({format_percentage(result.deviation_percentage)})"
    )
    if not result.is_significant:
        click.echo(
            f"Within the {format_percentage(result.threshold_percentage)} threshold."
        )
        _not_annotated(annotate_item)
        return

    click.echo(
        f"Significant deviation (threshold {format_percentage(result.threshold_percentage)})."
    )
    if result.explanation is None:
        click.echo("No explanation available.")
        _not_annotated(annotate_item)
        return

    click.echo("\nExplanation:")
    click.echo(result.explanation)

    if annotate_item is not None:
        try:
            service.annotate_cost_item(user_id, annotate_item, result.explanation)
        except DomainError as e:
            handle_domain_error(ctx, e)
        click.echo(f"\nSaved explanation on cost item {annotate_item}")


def _not_annotated(item_id: str | None) -> None:
    if item_id is not None:
        click.echo(f"Nothing saved on cost item {item_id}: there is no explanation.")


def register_commands(cli):
    """Register deviation command with main CLI."""
    cli.add_command(deviation)
