"""Row normalization: timestamps, amounts, direction, and fallbacks.

Turns a :class:`~ledger_sync.models.RawRow` into a
:class:`~ledger_sync.models.Transaction`. Date and amount problems raise
``ValueError`` with the offending text so the importer can count the row as
failed and move on.

Out of scope: locale-aware parsing beyond the WeChat export format, currency
conversion, and negative-amount conventions (the export carries direction in
its own ``收/支`` column and amounts are always positive).
"""

from __future__ import annotations

import math
import re
from datetime import datetime, tzinfo
from decimal import Decimal, InvalidOperation
from zoneinfo import ZoneInfo

from .logging_setup import get_logger
from .models import (
    FALLBACK_CATEGORY,
    FALLBACK_COUNTERPARTY,
    FALLBACK_DESCRIPTION,
    FALLBACK_DIRECTION,
    FALLBACK_PAYMENT_METHOD,
    Direction,
    RawRow,
    Transaction,
)

logger = get_logger("ledger_sync.normalizers")

# Local time of the export when the file carries no offset
DEFAULT_TIMEZONE = "Asia/Shanghai"

# Currency symbols, any whitespace, and thousands separators
_AMOUNT_NOISE = re.compile(r"[¥￥$\s,，]")

_TIMESTAMP_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y/%m/%d %H:%M:%S",
    "%Y/%m/%d %H:%M",
    "%Y-%m-%d",
    "%Y/%m/%d",
)


class InvalidTimestampError(ValueError):
    """Timestamp text is missing or not in a recognized format."""


class InvalidAmountError(ValueError):
    """Amount text is missing or not a finite number."""


def resolve_timezone(tz: tzinfo | str | None) -> tzinfo:
    if tz is None:
        return ZoneInfo(DEFAULT_TIMEZONE)
    if isinstance(tz, str):
        return ZoneInfo(tz)
    return tz


# ---------------------------------------------------------------------------
# Amounts
# ---------------------------------------------------------------------------


def normalize_amount_text(text: str) -> str:
    """Strip currency symbols, whitespace, and thousands separators.

    Idempotent: ``normalize_amount_text(normalize_amount_text(x))`` equals
    ``normalize_amount_text(x)``.
    """

    return _AMOUNT_NOISE.sub("", text)


def parse_amount(text: str | None) -> Decimal:
    """Parse export amount text such as ``"¥1,200.00"`` into a ``Decimal``."""

    if text is None:
        raise InvalidAmountError("amount is required")
    s = normalize_amount_text(text)
    if not s:
        raise InvalidAmountError(f"amount is empty: {text!r}")
    try:
        d = Decimal(s)
    except InvalidOperation as exc:
        raise InvalidAmountError(f"invalid amount: {text!r}") from exc
    # Page values are JSON numbers, so the amount must also fit a float
    if not d.is_finite() or not math.isfinite(float(d)):
        raise InvalidAmountError(f"invalid amount: {text!r}")
    return d


# ---------------------------------------------------------------------------
# Timestamps
# ---------------------------------------------------------------------------


def parse_timestamp(text: str | None, *, tz: tzinfo | str | None = None) -> datetime:
    """Parse an export timestamp into a timezone-aware ``datetime``.

    The export writes ``YYYY-MM-DD HH:MM:SS`` in local time; slash-separated
    dates, minute precision, bare dates, and ISO-8601 strings (with or without
    an offset) are accepted too. Naive values are localized to ``tz``
    (``Asia/Shanghai`` by default).
    """

    if text is None:
        raise InvalidTimestampError("timestamp is required")
    s = text.strip()
    if not s:
        raise InvalidTimestampError("timestamp is empty")

    parsed: datetime | None = None
    for fmt in _TIMESTAMP_FORMATS:
        try:
            parsed = datetime.strptime(s, fmt)
            break
        except ValueError:
            continue
    if parsed is None:
        try:
            parsed = datetime.fromisoformat(s)
        except ValueError as exc:
            raise InvalidTimestampError(f"invalid timestamp: {text!r}") from exc

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=resolve_timezone(tz))
    return parsed


def to_iso_instant(ts: datetime) -> str:
    """Render ``ts`` as ISO-8601 with its UTC offset (``2024-01-01T10:00:00+08:00``)."""

    return ts.isoformat(timespec="seconds")


# ---------------------------------------------------------------------------
# Row -> Transaction
# ---------------------------------------------------------------------------


def parse_direction(text: str | None) -> Direction:
    """Map the ``收/支`` column onto :class:`Direction`.

    Only ``收入`` is income. Empty values, ``支出`` and the export's neutral
    marker ``/`` (transfers, refunds to change) all map to expense.
    """

    if text is not None and text.strip() == Direction.INCOME.value:
        return Direction.INCOME
    return FALLBACK_DIRECTION


def to_transaction(row: RawRow, *, tz: tzinfo | str | None = None) -> Transaction:
    """Validate and normalize ``row``; raises ``ValueError`` on bad date/amount."""

    timestamp = parse_timestamp(row.timestamp, tz=tz)
    amount = parse_amount(row.amount)
    direction = parse_direction(row.direction)
    if row.direction and row.direction.strip() != direction.value:
        logger.info(
            "line %d: direction %r recorded as %s", row.line_no, row.direction, direction.value
        )
    return Transaction(
        timestamp=timestamp,
        category=row.category or FALLBACK_CATEGORY,
        counterparty=row.counterparty or FALLBACK_COUNTERPARTY,
        description=row.description or FALLBACK_DESCRIPTION,
        direction=direction,
        amount=amount,
        payment_method=row.payment_method or FALLBACK_PAYMENT_METHOD,
        source_date_text=row.timestamp or "",
        source_amount_text=row.amount or "",
    )


__all__ = [
    "DEFAULT_TIMEZONE",
    "InvalidAmountError",
    "InvalidTimestampError",
    "normalize_amount_text",
    "parse_amount",
    "parse_direction",
    "parse_timestamp",
    "resolve_timezone",
    "to_iso_instant",
    "to_transaction",
]
