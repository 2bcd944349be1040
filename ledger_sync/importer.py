"""Record import: one ``create_record`` call per valid ledger row.

Each row ends in exactly one of three states:

- ``skipped``: no timestamp or amount text. Not counted as imported or failed.
- ``failed``: the timestamp or amount does not parse, or the remote call
  raised. The reason is logged and recorded; processing continues.
- ``imported``: the page was created.

Rows are submitted strictly one at a time in source order. There is no
transaction across rows; a partially imported ledger is an expected outcome.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import tzinfo
from enum import StrEnum
from typing import Any

from .logging_setup import get_logger
from .models import ImportSummary, RawRow, RowFailure, Transaction
from .normalizers import (
    InvalidAmountError,
    InvalidTimestampError,
    resolve_timezone,
    to_iso_instant,
    to_transaction,
)
from .notion_store import RecordStore, error_body
from .schema import (
    PROP_AMOUNT,
    PROP_CATEGORY,
    PROP_COUNTERPARTY,
    PROP_DATE,
    PROP_NAME,
    PROP_PAYMENT_METHOD,
    PROP_TYPE,
)

logger = get_logger("ledger_sync.importer")


class RowOutcome(StrEnum):
    IMPORTED = "imported"
    SKIPPED = "skipped"
    FAILED = "failed"


def _text(content: str) -> list[dict[str, Any]]:
    return [{"text": {"content": content}}]


def build_page_properties(tx: Transaction) -> dict[str, Any]:
    """Map a transaction onto the database's property values."""

    return {
        PROP_NAME: {"title": _text(tx.description)},
        PROP_DATE: {"date": {"start": to_iso_instant(tx.timestamp)}},
        PROP_CATEGORY: {"select": {"name": tx.category}},
        PROP_COUNTERPARTY: {"rich_text": _text(tx.counterparty)},
        PROP_TYPE: {"select": {"name": tx.direction.value}},
        # JSON has no decimal type
        PROP_AMOUNT: {"number": float(tx.amount)},
        PROP_PAYMENT_METHOD: {"select": {"name": tx.payment_method}},
    }


def _fail(summary: ImportSummary, row: RawRow, reason: str) -> RowOutcome:
    summary.failed += 1
    summary.failures.append(RowFailure(line_no=row.line_no, raw=row.raw, reason=reason))
    return RowOutcome.FAILED


def import_row(
    row: RawRow,
    *,
    store: RecordStore,
    summary: ImportSummary,
    tz: tzinfo,
) -> RowOutcome:
    """Run one row through validation and submission, updating ``summary``."""

    if not row.timestamp or not row.amount:
        logger.info("skipped line %d: no timestamp or amount", row.line_no)
        summary.skipped += 1
        return RowOutcome.SKIPPED

    try:
        tx = to_transaction(row, tz=tz)
    except InvalidTimestampError:
        logger.error("invalid date on line %d: %s", row.line_no, row.timestamp)
        return _fail(summary, row, f"invalid date: {row.timestamp}")
    except InvalidAmountError:
        logger.error("invalid amount on line %d: %s", row.line_no, row.amount)
        return _fail(summary, row, f"invalid amount: {row.amount}")

    try:
        store.create_record(build_page_properties(tx))
    except Exception as e:
        logger.error("import failed on line %d: %s", row.line_no, e)
        logger.error("failed row: %s", row.raw)
        body = error_body(e)
        if body:
            logger.error("error details: %s", body)
        return _fail(summary, row, str(e) or type(e).__name__)

    summary.imported += 1
    logger.info("imported: %s %s %s", row.timestamp, row.description or "", row.amount)
    return RowOutcome.IMPORTED


def import_rows(
    rows: Iterable[RawRow],
    *,
    store: RecordStore,
    tz: tzinfo | str | None = None,
    on_row: Callable[[RawRow, RowOutcome], None] | None = None,
) -> ImportSummary:
    """Import ``rows`` sequentially and return the tallies.

    ``on_row`` is called after each row with its terminal state, e.g. to drive
    a progress display.
    """

    zone = resolve_timezone(tz)
    summary = ImportSummary()
    for row in rows:
        outcome = import_row(row, store=store, summary=summary, tz=zone)
        if on_row is not None:
            on_row(row, outcome)

    logger.info(
        "import finished: %d imported, %d failed, %d skipped",
        summary.imported,
        summary.failed,
        summary.skipped,
    )
    return summary


__all__ = ["RowOutcome", "build_page_properties", "import_row", "import_rows"]
