"""Public API for the ``ledger_sync`` package.

A stable import surface over the pipeline stages. The implementations live in
the stage modules and are re-exported here.
"""

from __future__ import annotations

from .importer import RowOutcome, build_page_properties, import_rows
from .ingest.adapters.wechat_pay_csv import find_header_index, parse_ledger, split_row
from .ingest.utils import load_ledger
from .notion_store import NotionStore, RecordStore
from .schema import build_database_properties, extract_unique_values, infer_schema_options
from .sync import SchemaSyncError, sync_schema
from .workflows.import_flow import ImportReport, import_ledger_from_csv

__all__ = [
    "ImportReport",
    "NotionStore",
    "RecordStore",
    "RowOutcome",
    "SchemaSyncError",
    "build_database_properties",
    "build_page_properties",
    "extract_unique_values",
    "find_header_index",
    "import_ledger_from_csv",
    "import_rows",
    "infer_schema_options",
    "load_ledger",
    "parse_ledger",
    "split_row",
    "sync_schema",
]
