"""Adapter for WeChat Pay bill exports (``微信支付账单``) in CSV form.

The export starts with a human-readable preamble of variable length (account
name, period, totals, notices) followed by the real column header and the
transaction lines. Only the first seven columns are used:

``交易时间, 交易类型, 交易对方, 商品, 收/支, 金额(元), 支付方式``

Later columns (status, transaction ids, notes) are ignored.

Contract
--------
- The header is the first line containing :data:`HEADER_MARKER`. When no line
  contains it, :func:`parse_ledger` returns a ledger without a data section;
  line 0 is never assumed to be data.
- Each data line is split on ``,`` (quoted commas stay inside their field
  when the line is well-formed CSV); every field is trimmed and a single
  leading/trailing ``"`` pair is removed. Empty fields become ``None``.
- Blank lines are skipped and do not count as rows.
- Lines with fewer than seven columns are padded with ``None``; validation of
  the padded positions happens in the importer, not here.
"""

from __future__ import annotations

import csv
from collections.abc import Iterator, Sequence

from ...logging_setup import get_logger
from ...models import ParsedLedger, RawRow

logger = get_logger("ledger_sync.ingest.wechat_pay_csv")

# Literal prefix of the column list in the real header line
HEADER_MARKER = "交易时间,交易类型"

# Number of positional fields consumed from each data line
COLUMN_COUNT = 7

_BOM = "\ufeff"


def _clean_field(value: str) -> str | None:
    s = value.strip()
    if len(s) >= 2 and s.startswith('"') and s.endswith('"'):
        s = s[1:-1].strip()
    return s if s else None


def find_header_index(lines: Sequence[str]) -> int | None:
    """Return the index of the header line, or ``None`` when absent."""

    for idx, line in enumerate(lines):
        if HEADER_MARKER in line.lstrip(_BOM):
            return idx
    return None


def _split_fields(line: str, *, line_no: int) -> list[str]:
    try:
        return next(csv.reader([line], skipinitialspace=True, strict=True), [])
    except csv.Error as e:
        # Stray quotes inside a field; fall back to the export's plain layout
        logger.debug("line %d is not well-formed CSV (%s); splitting on ','", line_no, e)
        return line.split(",")


def split_row(line: str, *, line_no: int = 0) -> RawRow:
    """Split one data line into a :class:`RawRow`.

    Well-formed quoted fields containing commas stay intact (stdlib :mod:`csv`
    handles the quoting). A line the reader rejects, such as one with an
    unbalanced ``"`` inside a description, is split on every ``,`` instead so
    its later columns keep their positions. Each field is then trimmed.
    """

    stripped = line.strip()
    fields = _split_fields(stripped, line_no=line_no)
    values = [_clean_field(f) for f in fields[:COLUMN_COUNT]]
    padded = len(values) < COLUMN_COUNT
    if padded:
        values.extend([None] * (COLUMN_COUNT - len(values)))
        logger.debug(
            "line %d has %d of %d columns; padded with empty values",
            line_no,
            len(fields),
            COLUMN_COUNT,
        )

    return RawRow(
        line_no,
        stripped,
        *values,
        padded=padded,
    )


def iter_data_rows(lines: Sequence[str], header_index: int) -> Iterator[RawRow]:
    """Yield a :class:`RawRow` for each non-empty line after ``header_index``."""

    for idx in range(header_index + 1, len(lines)):
        line = lines[idx].strip()
        if not line:
            continue
        yield split_row(line, line_no=idx + 1)


def parse_ledger(text: str) -> ParsedLedger:
    """Locate the header in ``text`` and split the data section into rows."""

    lines = text.splitlines()
    header_index = find_header_index(lines)
    if header_index is None:
        logger.debug("header marker %r not found in %d lines", HEADER_MARKER, len(lines))
        return ParsedLedger(header_index=None, header=None, rows=())

    rows = tuple(iter_data_rows(lines, header_index))
    logger.debug("header at line %d, %d data rows", header_index + 1, len(rows))
    return ParsedLedger(
        header_index=header_index,
        header=lines[header_index].strip().lstrip(_BOM),
        rows=rows,
    )


def require_data_section(ledger: ParsedLedger) -> ParsedLedger:
    """Return ``ledger`` unchanged, or raise ``csv.Error`` if it has no header."""

    if not ledger.has_data_section:
        raise csv.Error(
            "WeChat Pay bill: could not locate the column header. "
            f"Expected a line containing: {HEADER_MARKER}"
        )
    return ledger


__all__ = [
    "COLUMN_COUNT",
    "HEADER_MARKER",
    "find_header_index",
    "iter_data_rows",
    "parse_ledger",
    "require_data_section",
    "split_row",
]
