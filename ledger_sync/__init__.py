"""Public interface for the ``ledger_sync`` package.

Replicates a WeChat Pay bill export into a Notion database. This module only
re-exports the API functions and models; there is no runtime logic here.
"""

from .api import (
    ImportReport,
    NotionStore,
    RecordStore,
    RowOutcome,
    SchemaSyncError,
    build_database_properties,
    build_page_properties,
    extract_unique_values,
    find_header_index,
    import_ledger_from_csv,
    import_rows,
    infer_schema_options,
    load_ledger,
    parse_ledger,
    split_row,
    sync_schema,
)
from .config import SyncSettings
from .models import (
    Direction,
    ImportSummary,
    ParsedLedger,
    RawRow,
    RowFailure,
    SchemaOptions,
    Transaction,
)
from .normalizers import normalize_amount_text, parse_amount, parse_timestamp

__all__ = [
    # API
    "build_database_properties",
    "build_page_properties",
    "extract_unique_values",
    "find_header_index",
    "import_ledger_from_csv",
    "import_rows",
    "infer_schema_options",
    "load_ledger",
    "normalize_amount_text",
    "parse_amount",
    "parse_ledger",
    "parse_timestamp",
    "split_row",
    "sync_schema",
    # Remote store / config
    "NotionStore",
    "RecordStore",
    "SyncSettings",
    # Models / types
    "Direction",
    "ImportReport",
    "ImportSummary",
    "ParsedLedger",
    "RawRow",
    "RowFailure",
    "RowOutcome",
    "SchemaOptions",
    "SchemaSyncError",
    "Transaction",
]
