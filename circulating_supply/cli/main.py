"""CLI entry point for the Circulating Supply Service.

Usage:
    circulating-supply serve
    circulating-supply serve --port 8080 --verbose
    circulating-supply once
    circulating-supply addresses
"""

import asyncio
import dataclasses
import logging
import sys
from typing import Optional

import typer
import uvicorn
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from ..api.server import create_app
from ..calculator.exclusion import ExclusionSet
from ..calculator.supply import SUPPLY_LINE_LOGGER, SupplyCalculator
from ..core.config import ServiceConfig, reload_config
from ..core.exceptions import ConfigurationError, SupplyServiceError
from ..core.models import CycleResult
from ..providers.ledger import LedgerClient
from ..storage.snapshot_store import SnapshotStore

# Initialize app
app = typer.Typer(
    name="circulating-supply",
    help="Circulating supply service for an ERC-20 token",
    add_completion=False,
)

console = Console()


def setup_logging(level: str = "INFO", verbose: bool = False) -> None:
    """Configure logging."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_time=False, show_path=False)],
        force=True,
    )

    # Supply lines are printed bare so stdout consumers can parse them
    line_handler = logging.StreamHandler(sys.stdout)
    line_handler.setFormatter(logging.Formatter("%(message)s"))
    supply_logger = logging.getLogger(SUPPLY_LINE_LOGGER)
    supply_logger.handlers = [line_handler]
    supply_logger.propagate = False


def load_config(**overrides: object) -> ServiceConfig:
    """Load configuration, exiting with status 1 if it is invalid."""
    try:
        config = reload_config()
        values = {k: v for k, v in overrides.items() if v is not None}
        return dataclasses.replace(config, **values) if values else config
    except ConfigurationError as e:
        console.print(f"[red]{escape(str(e))}[/]")
        raise typer.Exit(1)


def build_exclusions(config: ServiceConfig) -> ExclusionSet:
    """Build the exclusion set, exiting with status 1 on malformed addresses."""
    try:
        return ExclusionSet.from_config(config.burn_addresses)
    except ConfigurationError as e:
        console.print(f"[red]{escape(str(e))}[/]")
        raise typer.Exit(1)


@app.command()
def serve(
    host: Optional[str] = typer.Option(
        None,
        "--host",
        help="Bind host (default: HOST or 0.0.0.0)",
    ),
    port: Optional[int] = typer.Option(
        None,
        "--port", "-p",
        help="Listen port (default: PORT or 3000)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable verbose logging",
    ),
) -> None:
    """
    Run the refresh loop and serve the snapshot over HTTP.

    Examples:
        circulating-supply serve
        circulating-supply serve --port 8080
    """
    config = load_config(host=host, port=port)
    setup_logging(config.log_level, verbose)
    exclusions = build_exclusions(config)

    ledger = LedgerClient(config.rpc_url, timeout_seconds=config.rpc_timeout_seconds)
    store = SnapshotStore()
    calculator = SupplyCalculator(
        ledger,
        exclusions,
        store,
        refresh_interval=config.refresh_interval,
    )

    console.print(f"[bold]Serving circulating supply on {config.host}:{config.port}[/]")
    uvicorn.run(
        create_app(store, calculator),
        host=config.host,
        port=config.port,
        log_level="debug" if verbose else config.log_level.lower(),
    )


async def _run_single_cycle(config: ServiceConfig, exclusions: ExclusionSet) -> CycleResult:
    async with LedgerClient(
        config.rpc_url, timeout_seconds=config.rpc_timeout_seconds
    ) as ledger:
        calculator = SupplyCalculator(
            ledger,
            exclusions,
            SnapshotStore(),
            refresh_interval=config.refresh_interval,
        )
        return await calculator.run_cycle()


def format_cycle_table(result: CycleResult) -> Table:
    """Render a cycle's raw and display figures as a rich table."""
    table = Table(title="Circulating Supply")
    table.add_column("Item")
    table.add_column("Base units", justify="right")

    table.add_row("Total supply", str(result.total))
    for role, balance in result.escrow_balances.items():
        table.add_row(f"  − {role.display_name}", str(balance))
    table.add_row("  − Burned", str(result.burned))
    table.add_row("[bold]Circulating[/]", f"[bold]{result.circulating}[/]")
    table.caption = (
        f"circulating {result.snapshot.circulating_supply} / "
        f"total {result.snapshot.total_supply}"
    )
    return table


@app.command()
def once(
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable verbose logging",
    ),
) -> None:
    """Run a single refresh cycle and print the breakdown."""
    config = load_config()
    setup_logging(config.log_level, verbose)
    exclusions = build_exclusions(config)

    try:
        result = asyncio.run(_run_single_cycle(config, exclusions))
    except SupplyServiceError as e:
        console.print(f"[red]Error: {escape(str(e))}[/]")
        raise typer.Exit(1)

    console.print(format_cycle_table(result))


@app.command()
def addresses() -> None:
    """List every address excluded from circulating supply."""
    exclusions = build_exclusions(load_config())

    console.print("[bold]Escrow accounts:[/]")
    for account in exclusions.escrow_accounts:
        console.print(f"  - {account.role.display_name}: {account.address}")
    console.print("[bold]Burn addresses:[/]")
    for address in exclusions.burn_addresses:
        console.print(f"  - {address}")


@app.command()
def version() -> None:
    """Show version information."""
    from .. import __version__
    console.print(f"Circulating Supply v{__version__}")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
