"""Command-line interface for BudgetSage."""

from __future__ import annotations

from datetime import date
from pathlib import Path

import click

from .config import BaseConfig
from .infra.database import bootstrap_database
from .infra.repositories import (
    SQLModelCategoryRepository,
    SQLModelNotificationRepository,
    SQLModelSettingsRepository,
    SQLModelTransactionRepository,
)
from .logging_config import get_logger, setup_logging
from .models import TransactionBehavior, TransactionDraft
from .services.import_csv import StatementImportError
from .services.ledger_service import BudgetLedger

logger = get_logger("cli")


class CliContext:
    """Lazily built ledger shared by the commands of one invocation."""

    def __init__(self, profile: str | None) -> None:
        self.config = BaseConfig()
        self.profile = profile or self.config.DEFAULT_PROFILE
        self._ledger: BudgetLedger | None = None

    @property
    def ledger(self) -> BudgetLedger:
        if self._ledger is None:
            _engine, session_factory = bootstrap_database(self.config)
            self._ledger = BudgetLedger(
                categories=SQLModelCategoryRepository(session_factory),
                transactions=SQLModelTransactionRepository(session_factory),
                notifications=SQLModelNotificationRepository(session_factory),
                settings=SQLModelSettingsRepository(session_factory),
                log_limit=self.config.NOTIFICATION_LIMIT,
                income_category_name=self.config.INCOME_CATEGORY_NAME,
            )
        return self._ledger


pass_context = click.make_pass_decorator(CliContext)


def _echo_alerts(alerts) -> None:
    for alert in alerts:
        click.echo(f"[{alert.notification_type.value.upper()}] {alert.title}: {alert.message}")


@click.group()
@click.option("--profile", envvar="BUDGETSAGE_PROFILE", default=None, help="Profile to operate on")
@click.pass_context
def main(ctx: click.Context, profile: str | None) -> None:
    """Track budgets, raise spending alerts and import bank statements."""

    cli_ctx = CliContext(profile)
    setup_logging(cli_ctx.config)
    ctx.obj = cli_ctx


@main.command("seed")
@pass_context
def seed(ctx: CliContext) -> None:
    """Create the starter categories for the profile."""

    categories = ctx.ledger.seed_defaults(profile_id=ctx.profile)
    click.echo(f"{len(categories)} categories available for profile {ctx.profile}.")


@main.command("add")
@click.argument("amount", type=click.FloatRange(min=0, min_open=True))
@click.argument("description")
@click.option("--category", "category_name", required=True, help="Category name")
@click.option("--type", "type_id", default=None, help="Transaction type id [default: first outflow type]")
@click.option("--date", "occurred_on", type=click.DateTime(formats=["%Y-%m-%d"]), default=None)
@click.option("--account", "account_id", default=None, help="Account id")
@pass_context
def add(
    ctx: CliContext,
    amount: float,
    description: str,
    category_name: str,
    type_id: str | None,
    occurred_on,
    account_id: str | None,
) -> None:
    """Record one transaction and print any alerts it raised."""

    ledger = ctx.ledger
    wanted = category_name.strip().lower()
    category = next(
        (c for c in ledger.categories.list_all(profile_id=ctx.profile) if c.name.lower() == wanted),
        None,
    )
    if category is None:
        raise click.ClickException(f"Unknown category: {category_name}")

    prefs = ledger.preferences(profile_id=ctx.profile)
    if type_id is None:
        type_id = prefs.type_for_behavior(TransactionBehavior.OUTFLOW).id
    elif prefs.behavior_for(type_id) is None:
        raise click.ClickException(f"Unknown transaction type: {type_id}")

    recorded = ledger.add_transaction(
        TransactionDraft(
            occurred_on=occurred_on.date() if occurred_on else ledger.clock().date(),
            description=description,
            amount=amount,
            category_id=category.id,
            type_id=type_id,
            account_id=account_id,
        ),
        profile_id=ctx.profile,
    )
    click.echo(f"Recorded {description!r} for {prefs.currency}{amount:,.2f} in {category.name}.")
    _echo_alerts(recorded.alerts)


@main.command("import-statement")
@click.argument("csv_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--encoding", default="utf-8-sig", show_default=True)
@pass_context
def import_statement(ctx: CliContext, csv_path: Path, encoding: str) -> None:
    """Import transactions from a bank CSV export."""

    text = csv_path.read_text(encoding=encoding)
    try:
        result = ctx.ledger.import_statement(text, profile_id=ctx.profile)
    except StatementImportError as exc:
        logger.warning("Import of %s rejected: %s", csv_path, exc)
        raise click.ClickException(str(exc)) from exc

    if not result.succeeded:
        raise click.ClickException(result.message.removeprefix("Error: "))
    click.echo(result.message)
    if result.skipped:
        click.echo(f"Skipped {result.skipped} row(s).")
    if result.duplicate_count:
        click.echo(f"Skipped {result.duplicate_count} duplicate(s) already in the ledger.")


@main.command("check")
@pass_context
def check(ctx: CliContext) -> None:
    """Run a budget health pass and print any new alerts."""

    new_alerts = ctx.ledger.run_budget_check(profile_id=ctx.profile)
    if not new_alerts:
        click.echo("No new alerts.")
    _echo_alerts(new_alerts)


@main.command("progress")
@click.option("--account", default="all", show_default=True, help="Account id filter")
@pass_context
def show_progress(ctx: CliContext, account: str) -> None:
    """Print progress for every category."""

    prefs = ctx.ledger.preferences(profile_id=ctx.profile)
    for category, result in ctx.ledger.category_progress(
        profile_id=ctx.profile, account_filter=account
    ):
        line = (
            f"{category.name:<16} {result.label:<9} "
            f"{prefs.currency}{result.current:,.2f} / {prefs.currency}{result.target:,.2f} "
            f"({result.percentage:.0f}%)"
        )
        if result.rollover > 0:
            line += f" +{prefs.currency}{result.rollover:,.0f} rollover"
        if result.is_over:
            line += " OVER"
        click.echo(line)


@main.command("notifications")
@click.option("--mark-read", is_flag=True, default=False, help="Mark every notification read")
@click.option("--clear", "clear_all", is_flag=True, default=False, help="Delete the log")
@pass_context
def notifications(ctx: CliContext, mark_read: bool, clear_all: bool) -> None:
    """List, mark read or clear the notification log."""

    if clear_all:
        ctx.ledger.clear_notifications(profile_id=ctx.profile)
        click.echo("Notifications cleared.")
        return
    entries = (
        ctx.ledger.mark_notifications_read(profile_id=ctx.profile)
        if mark_read
        else ctx.ledger.notification_log(profile_id=ctx.profile)
    )
    if not entries:
        click.echo("No notifications.")
    for entry in entries:
        marker = " " if entry.is_read else "*"
        click.echo(f"{marker} {entry.timestamp:%Y-%m-%d %H:%M} {entry.title}: {entry.message}")


@main.command("export")
@click.argument("output_path", type=click.Path(dir_okay=False, path_type=Path), required=False)
@pass_context
def export(ctx: CliContext, output_path: Path | None) -> None:
    """Export the ledger to CSV."""

    target = output_path or ctx.config.DATA_DIR / f"budgetsage_export_{date.today().isoformat()}.csv"
    written = ctx.ledger.export_csv(target, profile_id=ctx.profile)
    click.echo(f"Export written: {written}")


if __name__ == "__main__":  # pragma: no cover
    main()
