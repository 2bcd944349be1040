"""Thin wrapper around the Notion SDK for the three calls the pipeline makes.

Usage
-----
from ledger_sync.notion_store import NotionStore

store = NotionStore.from_settings(settings)
store.update_schema(properties)
store.create_record(page_properties)

The client and the target database id are held by the store instance and
passed in by the caller; there is no module-level client. Tests substitute a
stub for :class:`notion_client.Client` or pass any object that satisfies
:class:`RecordStore`.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, Protocol

from notion_client import Client

from .config import SyncSettings


class RecordStore(Protocol):
    """The remote operations the pipeline depends on."""

    def retrieve_schema(self) -> dict[str, Any]: ...

    def update_schema(self, properties: Mapping[str, Any]) -> dict[str, Any]: ...

    def create_record(self, properties: Mapping[str, Any]) -> dict[str, Any]: ...


class NotionStore:
    """A Notion database addressed by id, accessed through ``notion_client``."""

    def __init__(self, client: Any, database_id: str) -> None:
        if not database_id:
            raise ValueError("database_id is required")
        self._client = client
        self.database_id = database_id

    @classmethod
    def from_settings(cls, settings: SyncSettings) -> NotionStore:
        token, database_id = settings.notion_token, settings.database_id
        if not token or not database_id:
            raise RuntimeError(f"missing required settings: {', '.join(settings.missing())}")
        return cls(Client(auth=token), database_id)

    def retrieve_schema(self) -> dict[str, Any]:
        """Return the database object, including its ``properties`` map."""

        return self._client.databases.retrieve(database_id=self.database_id)

    def update_schema(self, properties: Mapping[str, Any]) -> dict[str, Any]:
        """Apply ``properties`` to the database (adds or replaces definitions)."""

        return self._client.databases.update(
            database_id=self.database_id, properties=dict(properties)
        )

    def create_record(self, properties: Mapping[str, Any]) -> dict[str, Any]:
        """Create one page (row) in the database."""

        return self._client.pages.create(
            parent={"database_id": self.database_id}, properties=dict(properties)
        )


def property_names(schema: Mapping[str, Any]) -> list[str]:
    """Property names of a database object returned by the API."""

    props = schema.get("properties")
    return list(props) if isinstance(props, Mapping) else []


def error_body(exc: BaseException) -> str | None:
    """Return the structured payload carried by a remote error, if any.

    ``notion_client.APIResponseError`` exposes the raw response text as
    ``body``; JSON bodies are re-indented for the log.
    """

    body = getattr(exc, "body", None)
    if body is None or body == "":
        return None
    if isinstance(body, (bytes, bytearray)):
        body = body.decode("utf-8", errors="replace")
    if isinstance(body, str):
        try:
            body = json.loads(body)
        except ValueError:
            return body
    try:
        return json.dumps(body, indent=2, ensure_ascii=False)
    except TypeError:
        return str(body)


__all__ = ["NotionStore", "RecordStore", "error_body", "property_names"]
