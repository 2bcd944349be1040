"""Data models for ``ledger_sync``.

Rows move through three shapes:

- :class:`RawRow` is one data line of the bill export split into its seven
  positional text fields (``None`` where a field is empty or missing).
- :class:`Transaction` is a validated, normalized row ready to be written to
  the remote database. It is built per row during import and discarded after
  submission.
- :class:`SchemaOptions` holds the distinct categorical values observed in a
  full scan of the rows; it drives the select options of the remote schema.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, field_validator

# ---------------------------------------------------------------------------
# Fallback values (substituted when a source field is empty)
# ---------------------------------------------------------------------------

FALLBACK_CATEGORY = "其他"
FALLBACK_COUNTERPARTY = "未知"
FALLBACK_DESCRIPTION = "(无商品名)"
FALLBACK_PAYMENT_METHOD = "未知"


class Direction(StrEnum):
    """Income/expense marker from the ``收/支`` column."""

    INCOME = "收入"
    EXPENSE = "支出"


FALLBACK_DIRECTION = Direction.EXPENSE


# ---------------------------------------------------------------------------
# Parsed rows
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RawRow:
    """One non-empty data line split into the export's first seven columns.

    Field order matches the export columns:
    ``交易时间, 交易类型, 交易对方, 商品, 收/支, 金额, 支付方式``.

    ``line_no`` is 1-based within the source text and ``raw`` holds the
    trimmed source line for diagnostics. ``padded`` is ``True`` when the line
    had fewer than seven columns and the missing trailing positions were
    filled with ``None``.
    """

    line_no: int
    raw: str
    timestamp: str | None
    category: str | None
    counterparty: str | None
    description: str | None
    direction: str | None
    amount: str | None
    payment_method: str | None
    padded: bool = False


@dataclass(frozen=True, slots=True)
class ParsedLedger:
    """Result of locating the header and splitting the data section."""

    header_index: int | None
    header: str | None
    rows: tuple[RawRow, ...] = ()

    @property
    def has_data_section(self) -> bool:
        return self.header_index is not None


# ---------------------------------------------------------------------------
# Normalized transaction
# ---------------------------------------------------------------------------


class Transaction(BaseModel):
    """A validated ledger row with fallbacks applied.

    ``timestamp`` is always timezone-aware; naive export times are localized
    by the normalizer before construction. ``source_date_text`` and
    ``source_amount_text`` keep the original text for log lines.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    timestamp: datetime
    category: str = FALLBACK_CATEGORY
    counterparty: str = FALLBACK_COUNTERPARTY
    description: str = FALLBACK_DESCRIPTION
    direction: Direction = FALLBACK_DIRECTION
    amount: Decimal
    payment_method: str = FALLBACK_PAYMENT_METHOD
    source_date_text: str = ""
    source_amount_text: str = ""

    @field_validator("timestamp")
    @classmethod
    def _timestamp_is_aware(cls, v: datetime) -> datetime:
        if v.tzinfo is None or v.utcoffset() is None:
            raise ValueError("timestamp must be timezone-aware")
        return v

    @field_validator("amount")
    @classmethod
    def _amount_is_finite(cls, v: Decimal) -> Decimal:
        if not v.is_finite():
            raise ValueError("amount must be a finite number")
        return v


# ---------------------------------------------------------------------------
# Schema inference and import results
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SchemaOptions:
    """Distinct categorical values observed across all data rows.

    Values are deduplicated and kept in first-seen order; the order carries no
    meaning beyond making schema payloads deterministic.
    """

    categories: tuple[str, ...] = ()
    payment_methods: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.categories and not self.payment_methods


@dataclass(frozen=True, slots=True)
class RowFailure:
    """A row that was counted as failed, with the reason it failed."""

    line_no: int
    raw: str
    reason: str


@dataclass(slots=True)
class ImportSummary:
    """Tallies for one import pass.

    ``skipped`` rows (no timestamp or amount text) are reported separately and
    never count towards ``imported`` or ``failed``.
    """

    imported: int = 0
    failed: int = 0
    skipped: int = 0
    failures: list[RowFailure] = field(default_factory=list)

    @property
    def total_processed(self) -> int:
        return self.imported + self.failed


__all__ = [
    "FALLBACK_CATEGORY",
    "FALLBACK_COUNTERPARTY",
    "FALLBACK_DESCRIPTION",
    "FALLBACK_DIRECTION",
    "FALLBACK_PAYMENT_METHOD",
    "Direction",
    "ImportSummary",
    "ParsedLedger",
    "RawRow",
    "RowFailure",
    "SchemaOptions",
    "Transaction",
]
