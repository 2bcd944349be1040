"""Process configuration for ``ledger_sync``.

Settings are read from the environment once at startup (the CLI loads a local
``.env`` first via ``python-dotenv``) and passed explicitly to the components
that need them. Nothing in the package reads these variables on its own.

Environment variables
---------------------
``NOTION_TOKEN``
    Integration token used to authenticate against the Notion API. Required.
``NOTION_DATABASE_ID``
    Identifier of the target database. Required unless overridden on the
    command line.
``LEDGER_SYNC_TIMEZONE``
    IANA zone used to localize export timestamps. Defaults to
    ``Asia/Shanghai``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from .normalizers import DEFAULT_TIMEZONE

TOKEN_ENV = "NOTION_TOKEN"
DATABASE_ID_ENV = "NOTION_DATABASE_ID"
TIMEZONE_ENV = "LEDGER_SYNC_TIMEZONE"


def _env_str(name: str) -> str | None:
    val = os.getenv(name)
    if val is None:
        return None
    val = val.strip()
    return val or None


@dataclass(frozen=True, slots=True)
class SyncSettings:
    """Credentials and target for one run."""

    notion_token: str | None
    database_id: str | None
    timezone: str = DEFAULT_TIMEZONE

    @classmethod
    def from_env(cls, *, database_id: str | None = None) -> SyncSettings:
        """Build settings from the environment; ``database_id`` overrides the env var."""

        return cls(
            notion_token=_env_str(TOKEN_ENV),
            database_id=(database_id or "").strip() or _env_str(DATABASE_ID_ENV),
            timezone=_env_str(TIMEZONE_ENV) or DEFAULT_TIMEZONE,
        )

    def missing(self) -> list[str]:
        """Names of required settings that are not set."""

        out: list[str] = []
        if not self.notion_token:
            out.append(TOKEN_ENV)
        if not self.database_id:
            out.append(DATABASE_ID_ENV)
        return out


__all__ = ["DATABASE_ID_ENV", "TIMEZONE_ENV", "TOKEN_ENV", "SyncSettings"]
