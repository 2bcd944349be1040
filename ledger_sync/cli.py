"""CLI for the ``ledger_sync`` package.

``ledger-sync CSV_PATH`` replicates a WeChat Pay bill export into the Notion
database named by ``NOTION_DATABASE_ID``. Environment variables are loaded from
a local ``.env`` with ``python-dotenv`` (existing variables win) before any
check runs. Business logic lives in :mod:`ledger_sync.workflows.import_flow`.

Exit codes
----------
0  run completed (rows may still have failed individually)
1  input or configuration problem, detected before any remote call
2  usage error (missing argument), reported by Typer
3  schema sync failed; no records were created
4  unexpected error
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Annotated
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import SyncSettings
from .logging_setup import configure_logging, get_logger
from .models import ImportSummary

EXIT_OK = 0
EXIT_INPUT = 1
EXIT_SCHEMA_SYNC = 3
EXIT_UNEXPECTED = 4

logger = get_logger("ledger_sync.cli")

app = typer.Typer(
    name="ledger-sync",
    add_completion=False,
    help=(
        "Import a WeChat Pay bill export (CSV) into a Notion database. "
        "Loads NOTION_TOKEN and NOTION_DATABASE_ID from a local .env before running."
    ),
)
console = Console(soft_wrap=True)


def _print_summary(summary: ImportSummary) -> None:
    table = Table(title="Import summary")
    table.add_column("Result")
    table.add_column("Rows", justify="right")
    table.add_row("[green]imported[/green]", str(summary.imported))
    table.add_row("[red]failed[/red]", str(summary.failed))
    table.add_row("skipped", str(summary.skipped))
    console.print(table)

    for failure in summary.failures:
        console.print(f"  line {failure.line_no}: {escape(failure.reason)}")


@app.command()
def import_csv(
    csv_path: Annotated[Path, typer.Argument(help="Path to the WeChat Pay bill CSV export")],
    database_id: Annotated[
        str | None,
        typer.Option(help="Override NOTION_DATABASE_ID (falls back to env var)."),
    ] = None,
) -> None:
    """Sync the schema from the file's categories, then create one page per row."""

    # Load environment from .env in CWD (override=False to keep existing env)
    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging()

    # Deferred imports keep `--help` fast
    from .notion_store import NotionStore
    from .sync import SchemaSyncError
    from .workflows.import_flow import import_ledger_from_csv

    resolved = csv_path.expanduser().resolve()
    if not resolved.is_file():
        console.print(f"[red]Error:[/red] File not found: {escape(str(resolved))}")
        raise typer.Exit(EXIT_INPUT)

    settings = SyncSettings.from_env(database_id=database_id)
    missing = settings.missing()
    if missing:
        console.print(
            f"[red]Error:[/red] {', '.join(missing)} is not set in the environment."
        )
        raise typer.Exit(EXIT_INPUT)

    try:
        tz = ZoneInfo(settings.timezone)
    except (ZoneInfoNotFoundError, ValueError):
        console.print(f"[red]Error:[/red] Unknown timezone: {escape(settings.timezone)}")
        raise typer.Exit(EXIT_INPUT) from None

    console.print(f"[cyan]Reading file:[/cyan] {escape(str(resolved))}")
    try:
        store = NotionStore.from_settings(settings)
        report = import_ledger_from_csv(
            resolved,
            store=store,
            tz=tz,
            on_progress=lambda s: console.print(f"[cyan]{escape(s)}[/cyan]"),
        )
    except csv.Error as e:
        console.print(f"[red]Error:[/red] Failed to parse CSV: {escape(str(e))}")
        raise typer.Exit(EXIT_INPUT) from None
    except UnicodeDecodeError as e:
        console.print(f"[red]Error:[/red] File is not valid UTF-8: {escape(str(e))}")
        raise typer.Exit(EXIT_INPUT) from None
    except SchemaSyncError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(EXIT_SCHEMA_SYNC) from None
    except Exception as e:
        logger.error("unexpected failure: %s", e)
        console.print(f"[red]Error:[/red] Unexpected failure: {escape(str(e))}")
        raise typer.Exit(EXIT_UNEXPECTED) from None

    _print_summary(report.summary)
    console.print("[green]Done.[/green]")


def main() -> None:  # pragma: no cover - console entrypoint
    app()


if __name__ == "__main__":  # pragma: no cover
    # Running as a module: `python -m ledger_sync.cli`
    main()
