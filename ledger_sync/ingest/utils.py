"""Ingest utilities shared by the CLI and workflows.

Exposes a single helper that reads a WeChat Pay bill export from disk and
returns the parsed ledger.
"""

from __future__ import annotations

from os import PathLike
from pathlib import Path

from ..models import ParsedLedger
from .adapters.wechat_pay_csv import parse_ledger, require_data_section


def load_ledger(csv_path: str | PathLike[str], *, strict: bool = False) -> ParsedLedger:
    """Read ``csv_path`` as UTF-8 and parse it into a :class:`ParsedLedger`.

    A leading byte-order mark is tolerated. With ``strict=True`` a file
    without the column header raises ``csv.Error`` instead of returning an
    empty ledger.
    """

    text = Path(csv_path).read_text(encoding="utf-8-sig")
    ledger = parse_ledger(text)
    return require_data_section(ledger) if strict else ledger


__all__ = ["load_ledger"]
