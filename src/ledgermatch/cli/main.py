#!/usr/bin/env python3
"""
Main CLI Entry Point for ledgermatch

Reconciles a YNAB transaction export against retailer order files and writes
proposed memos back to YNAB.
"""

import logging
import os
from datetime import datetime
from pathlib import Path

import click

from ..core.config import Config, get_config
from ..core.json_utils import format_json, write_json
from ..matching import (
    BUILTIN_PROFILES,
    ConfidenceClass,
    ProcessedLedger,
    ReconciliationOrchestrator,
    RetailerProfile,
    load_profiles,
    resolve_profiles,
)
from ..orders import Order, load_orders
from ..ynab import YnabCliUpdater, load_transactions


@click.group()
@click.option(
    "--config-env",
    type=click.Choice(["development", "test", "production"]),
    help="Override environment configuration",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, config_env: str | None, verbose: bool, debug: bool) -> None:
    """
    ledgermatch - Retailer Order Reconciliation for YNAB

    Matches ledger transactions to Amazon and Walmart orders and annotates the
    matched transactions with what was bought.
    """
    ctx.ensure_object(dict)

    if config_env:
        os.environ["LEDGERMATCH_ENV"] = config_env

    if debug:
        os.environ["LOG_LEVEL"] = "DEBUG"
        logging.getLogger().setLevel(logging.DEBUG)
        logging.getLogger("ledgermatch").setLevel(logging.DEBUG)

    try:
        config = get_config()
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    ctx.obj["verbose"] = verbose
    ctx.obj["debug"] = debug
    ctx.obj["config"] = config

    if verbose:
        click.echo(f"Environment: {config.environment.value}")
        click.echo(f"Data directory: {config.data_dir}")

    if debug:
        click.echo("Debug logging enabled")


@main.command()
def version() -> None:
    """Show version information."""
    from ledgermatch import __version__

    click.echo(f"ledgermatch v{__version__}")


@main.command()
@click.pass_context
def config(ctx: click.Context) -> None:
    """Show current configuration."""
    config_obj: Config = ctx.obj["config"]

    click.echo("Current Configuration:")
    click.echo(f"  Environment: {config_obj.environment.value}")
    click.echo(f"  Data Directory: {config_obj.data_dir}")
    click.echo(f"  Output Directory: {config_obj.output_dir}")
    click.echo(f"  Processed File: {config_obj.processed_file}")
    click.echo(f"  Retailers: {', '.join(config_obj.matching.retailers)}")
    click.echo(f"  Dry Run: {config_obj.dry_run}")
    click.echo(f"  Log Level: {config_obj.log_level}")


def _configured_profiles(config_obj: Config) -> list[RetailerProfile]:
    available = BUILTIN_PROFILES
    if config_obj.matching.retailers_file:
        available = load_profiles(config_obj.matching.retailers_file)
    return resolve_profiles(config_obj.matching.retailers, available)


def _parse_order_sources(values: tuple, profiles: list[RetailerProfile]) -> dict[str, list[Order]]:
    """Load each RETAILER=PATH order file, keyed by retailer name."""
    known = {profile.name.lower(): profile.name for profile in profiles}
    orders_by_retailer: dict[str, list[Order]] = {}
    for value in values:
        retailer, sep, path = value.partition("=")
        if not sep or not retailer or not path:
            raise click.BadParameter(f"Expected RETAILER=PATH, got '{value}'", param_hint="--orders")
        name = known.get(retailer.strip().lower())
        if name is None:
            raise click.BadParameter(
                f"Retailer '{retailer}' is not enabled. Enabled: {', '.join(sorted(known))}",
                param_hint="--orders",
            )
        orders_by_retailer.setdefault(name, []).extend(load_orders(Path(path)))
    return orders_by_retailer


@main.command()
@click.option(
    "--transactions",
    "transactions_file",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YNAB transactions JSON export",
)
@click.option(
    "--orders",
    "order_sources",
    multiple=True,
    required=True,
    help="Retailer order file as RETAILER=PATH (JSON or CSV); repeatable",
)
@click.option("--dry-run/--apply", "dry_run", default=None, help="Preview only, or write memos to YNAB")
@click.option("--output", type=click.Path(dir_okay=False, path_type=Path), help="Write the result JSON here")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def reconcile(
    ctx: click.Context,
    transactions_file: Path,
    order_sources: tuple,
    dry_run: bool | None,
    output: Path | None,
    verbose: bool,
) -> None:
    """
    Match YNAB transactions to retailer orders and propose memos.

    Only high-confidence matches are written, and only with --apply.

    Examples:
      ledgermatch reconcile --transactions ynab.json --orders amazon=amazon_orders.csv
      ledgermatch reconcile --transactions ynab.json --orders walmart=walmart.json --apply
    """
    config_obj: Config = ctx.obj["config"]
    verbose = verbose or ctx.obj.get("verbose", False)
    if dry_run is None:
        dry_run = config_obj.dry_run

    try:
        profiles = _configured_profiles(config_obj)
        orders_by_retailer = _parse_order_sources(order_sources, profiles)
        transactions = load_transactions(transactions_file)

        if verbose:
            click.echo(f"Loaded {len(transactions)} transactions from {transactions_file}")
            for name, orders in orders_by_retailer.items():
                click.echo(f"Loaded {len(orders)} {name} orders")
            click.echo(f"Mode: {'dry run' if dry_run else 'apply'}")
            click.echo()

        ledger = ProcessedLedger(config_obj.processed_file)
        ledger.load()

        updater = None
        if not dry_run:
            updater = YnabCliUpdater(
                command=config_obj.ynab.cli_command,
                budget_id=config_obj.ynab.budget_id,
                timeout=config_obj.ynab.timeout,
            )

        orchestrator = ReconciliationOrchestrator(
            profiles,
            ledger,
            updater=updater,
            memo_length_threshold=config_obj.matching.memo_history_threshold,
        )
        result = orchestrator.run(transactions, orders_by_retailer, dry_run=dry_run)
    except click.ClickException:
        raise
    except (OSError, ValueError) as e:
        click.echo(f"❌ Error during reconciliation: {e}", err=True)
        raise click.ClickException(str(e)) from e

    if output is None:
        timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        output = config_obj.output_dir / f"{timestamp}_reconciliation_results.json"
    write_json(output, result.to_dict())

    if verbose:
        for match in result.matches:
            click.echo(format_json(match.to_dict()))

    label = "Would update" if dry_run else "Updated"
    updates = sum(len(m.transactions) for m in result.matches if m.confidence_class is ConfidenceClass.HIGH)
    click.echo(f"✅ Found {len(result.matches)} matches among {result.candidates} candidate transactions")
    click.echo(f"   High: {result.high_confidence}  Medium: {result.medium_confidence}  Low: {result.low_confidence}")
    click.echo(f"   {label}: {updates if dry_run else result.updated} transactions")
    if result.failed:
        click.echo(f"   Failed: {result.failed} transactions", err=True)
    click.echo(f"   Results saved to: {output}")


@main.group()
def processed() -> None:
    """Inspect or reset the processed-transactions ledger."""
    pass


@processed.command()
@click.option(
    "--transactions",
    "transactions_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Report coverage of this YNAB transactions export",
)
@click.pass_context
def stats(ctx: click.Context, transactions_file: Path | None) -> None:
    """Show processed-transaction statistics."""
    config_obj: Config = ctx.obj["config"]
    ledger = ProcessedLedger(config_obj.processed_file)
    ledger.load()

    transactions = load_transactions(transactions_file) if transactions_file else []
    statistics = ledger.statistics(transactions)

    click.echo(f"Processed ledger: {config_obj.processed_file}")
    click.echo(f"  Processed IDs: {statistics['processed_ids_count']}")
    click.echo(f"  Last Updated: {statistics['last_updated'] or 'never'}")
    if transactions_file:
        click.echo(f"  Transactions: {statistics['total_transactions']}")
        click.echo(f"  Already Processed: {statistics['processed_transactions']}")
        click.echo(f"  Unprocessed: {statistics['unprocessed_transactions']}")


@processed.command()
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def reset(ctx: click.Context, yes: bool) -> None:
    """Forget every processed transaction id."""
    config_obj: Config = ctx.obj["config"]
    ledger = ProcessedLedger(config_obj.processed_file)
    ledger.load()

    if not yes and not click.confirm(f"Clear {len(ledger)} processed transaction ids?"):
        click.echo("Aborted.")
        return

    ledger.clear()
    click.echo(f"Cleared processed ledger: {config_obj.processed_file}")


if __name__ == "__main__":
    main()
