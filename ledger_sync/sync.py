"""Schema synchronization: push the inferred property definitions to Notion.

Runs before any record is created so every category and payment method about
to be written already exists as a select option. A failure here is fatal to
the run: it is logged with context and re-raised as :class:`SchemaSyncError`;
nothing retries it.
"""

from __future__ import annotations

from typing import Any

from .logging_setup import get_logger
from .models import SchemaOptions
from .notion_store import RecordStore, error_body, property_names
from .schema import build_database_properties

logger = get_logger("ledger_sync.sync")


class SchemaSyncError(RuntimeError):
    """Retrieving or updating the remote schema failed."""


def sync_schema(store: RecordStore, options: SchemaOptions) -> dict[str, Any]:
    """Apply the schema built from ``options`` and return the updated database.

    Steps: retrieve the current schema (diagnostics only), update with the full
    definition, retrieve again and return the result.
    """

    properties = build_database_properties(options)
    stage = "retrieve current schema"
    try:
        current = store.retrieve_schema()
        logger.info("current database properties: %s", property_names(current))

        stage = "update schema"
        store.update_schema(properties)
        logger.info("database properties updated (%d definitions)", len(properties))

        stage = "retrieve updated schema"
        updated = store.retrieve_schema()
    except Exception as e:
        logger.error("schema sync failed during %s: %s", stage, e)
        body = error_body(e)
        if body:
            logger.error("error details: %s", body)
        raise SchemaSyncError(f"schema sync failed during {stage}: {e}") from e

    logger.info("database properties after update: %s", property_names(updated))
    return updated


__all__ = ["SchemaSyncError", "sync_schema"]
