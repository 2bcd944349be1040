"""Schema inference and the Notion property definitions built from it.

Inference walks every data row once and collects the distinct category
(``交易类型``) and payment-method (``支付方式``) values. It does not validate
rows: a row that later fails date or amount validation still contributes its
categorical text, so the two passes stay independent.

The property definition returned by :func:`build_database_properties` is the
complete database schema the importer writes against. Select fields list the
inferred values followed by a fixed fallback option; the direction field has a
fixed two-value option list that is never inferred.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from .ingest.adapters.wechat_pay_csv import parse_ledger
from .models import (
    FALLBACK_CATEGORY,
    FALLBACK_PAYMENT_METHOD,
    Direction,
    RawRow,
    SchemaOptions,
)

# Property names in the target database
PROP_NAME = "Name"
PROP_DATE = "Date"
PROP_CATEGORY = "Category"
PROP_COUNTERPARTY = "Counterparty"
PROP_TYPE = "Type"
PROP_AMOUNT = "Amount"
PROP_PAYMENT_METHOD = "Payment Method"

PROPERTY_NAMES: tuple[str, ...] = (
    PROP_NAME,
    PROP_DATE,
    PROP_CATEGORY,
    PROP_COUNTERPARTY,
    PROP_TYPE,
    PROP_AMOUNT,
    PROP_PAYMENT_METHOD,
)


def infer_schema_options(rows: Iterable[RawRow]) -> SchemaOptions:
    """Collect distinct non-empty categories and payment methods from ``rows``."""

    # dict keys keep first-seen order while deduplicating
    categories: dict[str, None] = {}
    payment_methods: dict[str, None] = {}
    for row in rows:
        if row.category:
            categories.setdefault(row.category, None)
        if row.payment_method:
            payment_methods.setdefault(row.payment_method, None)
    return SchemaOptions(
        categories=tuple(categories),
        payment_methods=tuple(payment_methods),
    )


def extract_unique_values(text: str) -> SchemaOptions:
    """Infer options straight from export text.

    Text without the column header yields empty collections.
    """

    return infer_schema_options(parse_ledger(text).rows)


def _select_options(observed: Iterable[str], fallback: str) -> list[dict[str, str]]:
    names = [v for v in dict.fromkeys(observed) if v != fallback]
    names.append(fallback)
    return [{"name": n} for n in names]


def build_database_properties(options: SchemaOptions) -> dict[str, dict[str, Any]]:
    """Return the full property definition map for ``databases.update``."""

    return {
        # Title: item description
        PROP_NAME: {"title": {}},
        PROP_DATE: {"date": {}},
        PROP_CATEGORY: {
            "select": {"options": _select_options(options.categories, FALLBACK_CATEGORY)}
        },
        PROP_COUNTERPARTY: {"rich_text": {}},
        PROP_TYPE: {"select": {"options": [{"name": d.value} for d in Direction]}},
        PROP_AMOUNT: {"number": {}},
        PROP_PAYMENT_METHOD: {
            "select": {
                "options": _select_options(options.payment_methods, FALLBACK_PAYMENT_METHOD)
            }
        },
    }


def select_option_names(properties: Mapping[str, Any], name: str) -> list[str]:
    """Read the option names of select property ``name`` from a definition map.

    Works on both locally built definitions and schemas returned by the API.
    Returns an empty list when the property is missing or not a select.
    """

    prop = properties.get(name)
    if not isinstance(prop, Mapping):
        return []
    select = prop.get("select")
    if not isinstance(select, Mapping):
        return []
    return [str(o.get("name")) for o in select.get("options") or [] if isinstance(o, Mapping)]


__all__ = [
    "PROPERTY_NAMES",
    "PROP_AMOUNT",
    "PROP_CATEGORY",
    "PROP_COUNTERPARTY",
    "PROP_DATE",
    "PROP_NAME",
    "PROP_PAYMENT_METHOD",
    "PROP_TYPE",
    "build_database_properties",
    "extract_unique_values",
    "infer_schema_options",
    "select_option_names",
]
