"""AI advisor commands."""

import click

from finnexus.advisor.service import FinanceAdvisor
from finnexus.cli.error_handling import echo_load_errors
from finnexus.domain.summary import SummaryService


@click.group()
def advisor_group():
    """Ask the AI advisor about your figures."""
    pass


def _build_advisor(ctx) -> FinanceAdvisor:
    return FinanceAdvisor.from_settings(ctx.obj["settings"].ai)


@advisor_group.command("insights")
@click.pass_context
def insights(ctx) -> None:
    """Get three short insights on the all-time figures."""
    db = ctx.obj["db"]
    overview = SummaryService(db).build_overview()
    echo_load_errors(overview.errors)

    click.echo(_build_advisor(ctx).insights(overview.summary, overview.transactions))


@advisor_group.command("chat")
@click.argument("message")
@click.pass_context
def chat(ctx, message: str) -> None:
    """Ask a free-form question, answered from your figures.

    Examples:
        finnexus advisor chat "What is my net profit?"
    """
    db = ctx.obj["db"]
    overview = SummaryService(db).build_overview()
    echo_load_errors(overview.errors)

    click.echo(_build_advisor(ctx).chat(message, overview.summary))


def register_commands(cli: click.Group) -> None:
    """Register advisor commands with main CLI."""
    cli.add_command(advisor_group, name="advisor")
