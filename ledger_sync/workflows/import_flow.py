"""End-to-end import: CSV -> ledger -> schema options -> schema sync -> pages.

Two passes over the parsed rows: the first collects the categorical values and
pushes a schema that accepts all of them, the second creates one page per
valid row. The schema is always applied before the first ``create_record``
call, and a schema failure stops the run before any page is written.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import tzinfo
from os import PathLike
from typing import Any

from ..importer import RowOutcome, import_rows
from ..ingest.utils import load_ledger
from ..logging_setup import get_logger
from ..models import ImportSummary, RawRow, SchemaOptions
from ..notion_store import RecordStore
from ..schema import infer_schema_options
from ..sync import sync_schema

logger = get_logger("ledger_sync.workflows.import_flow")


@dataclass(frozen=True, slots=True)
class ImportReport:
    """What one run inferred, applied, and imported."""

    options: SchemaOptions
    schema: dict[str, Any]
    summary: ImportSummary


def import_ledger_from_csv(
    csv_path: str | PathLike[str],
    *,
    store: RecordStore,
    tz: tzinfo | str | None = None,
    on_progress: Callable[[str], None] | None = None,
    on_row: Callable[[RawRow, RowOutcome], None] | None = None,
) -> ImportReport:
    """Replicate every transaction in ``csv_path`` into ``store``.

    Parameters
    ----------
    csv_path:
        Path to a WeChat Pay bill export.
    store:
        Remote database (see :class:`~ledger_sync.notion_store.RecordStore`).
    tz:
        Zone used to localize export timestamps; ``Asia/Shanghai`` when
        ``None``.
    on_progress:
        Optional callable receiving short status lines (e.g. ``print``).
    on_row:
        Optional per-row callback forwarded to the importer.

    Raises
    ------
    csv.Error
        The file has no column header; raised before any remote call.
    ledger_sync.sync.SchemaSyncError
        The schema could not be retrieved or updated; no pages were created.
    """

    ledger = load_ledger(csv_path, strict=True)
    logger.info("parsed %d data rows from %s", len(ledger.rows), csv_path)

    # Pass 1: schema inference
    options = infer_schema_options(ledger.rows)
    logger.info("categories found: %s", list(options.categories))
    logger.info("payment methods found: %s", list(options.payment_methods))
    if on_progress:
        on_progress(
            f"Found {len(options.categories)} categories and "
            f"{len(options.payment_methods)} payment methods."
        )
        on_progress("Updating database schema…")

    schema = sync_schema(store, options)

    # Pass 2: record import
    if on_progress:
        on_progress(f"Importing {len(ledger.rows)} rows…")
    summary = import_rows(ledger.rows, store=store, tz=tz, on_row=on_row)

    return ImportReport(options=options, schema=schema, summary=summary)


__all__ = ["ImportReport", "import_ledger_from_csv"]
