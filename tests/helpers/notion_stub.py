"""Test helpers to stub the Notion client used by ``notion_store.py``.

:class:`NotionStub` matches the subset of ``notion_client.Client`` the store
calls (``databases.retrieve``, ``databases.update``, ``pages.create``). It
keeps the database properties in memory, applies updates to them, and records
every call so tests can assert on ordering and payloads. Failures are injected
per operation; ``fail_create`` may be a callable so only some rows fail.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

DATABASE_ID = "db-0000-test"


class StubAPIError(Exception):
    """Stand-in for ``notion_client.APIResponseError`` (message + ``body``)."""

    def __init__(self, message: str, body: str | None = None) -> None:
        super().__init__(message)
        self.body = body


def _to_api_property(name: str, definition: Mapping[str, Any]) -> dict[str, Any]:
    (type_key, config), *_ = definition.items()
    return {"id": name.lower().replace(" ", "_"), "name": name, "type": type_key, type_key: config}


class NotionStub:
    """Minimal in-memory stand-in for ``notion_client.Client``."""

    def __init__(
        self,
        *,
        properties: Mapping[str, Mapping[str, Any]] | None = None,
        fail_retrieve: Exception | None = None,
        fail_update: Exception | None = None,
        fail_create: Exception | Callable[[dict[str, Any]], Exception | None] | None = None,
    ) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.created: list[dict[str, Any]] = []
        self.properties: dict[str, dict[str, Any]] = {
            name: _to_api_property(name, d) for name, d in (properties or {}).items()
        }
        self.fail_retrieve = fail_retrieve
        self.fail_update = fail_update
        self.fail_create = fail_create

        class _Databases:
            def __init__(self, outer: NotionStub) -> None:
                self._outer = outer

            def retrieve(self, **kwargs: Any) -> dict[str, Any]:
                self._outer.calls.append(("databases.retrieve", kwargs))
                if self._outer.fail_retrieve is not None:
                    raise self._outer.fail_retrieve
                return self._outer.database_object(kwargs["database_id"])

            def update(self, **kwargs: Any) -> dict[str, Any]:
                self._outer.calls.append(("databases.update", kwargs))
                if self._outer.fail_update is not None:
                    raise self._outer.fail_update
                for name, definition in kwargs["properties"].items():
                    self._outer.properties[name] = _to_api_property(name, definition)
                return self._outer.database_object(kwargs["database_id"])

        class _Pages:
            def __init__(self, outer: NotionStub) -> None:
                self._outer = outer

            def create(self, **kwargs: Any) -> dict[str, Any]:
                self._outer.calls.append(("pages.create", kwargs))
                fail = self._outer.fail_create
                if callable(fail) and not isinstance(fail, Exception):
                    fail = fail(kwargs["properties"])
                if fail is not None:
                    raise fail
                page = {"object": "page", "id": f"page-{len(self._outer.created) + 1}", **kwargs}
                self._outer.created.append(page)
                return page

        self.databases = _Databases(self)
        self.pages = _Pages(self)

    def database_object(self, database_id: str) -> dict[str, Any]:
        return {
            "object": "database",
            "id": database_id,
            "properties": {k: dict(v) for k, v in self.properties.items()},
        }

    def ops(self) -> list[str]:
        """Operation names in call order."""

        return [op for op, _ in self.calls]


def page_title(page: Mapping[str, Any]) -> str:
    return page["properties"]["Name"]["title"][0]["text"]["content"]


def page_select(page: Mapping[str, Any], name: str) -> str:
    return page["properties"][name]["select"]["name"]
