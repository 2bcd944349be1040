from __future__ import annotations

import csv
from pathlib import Path

import pytest

from ledger_sync.notion_store import NotionStore
from ledger_sync.schema import select_option_names
from ledger_sync.sync import SchemaSyncError
from ledger_sync.workflows.import_flow import import_ledger_from_csv
from tests.helpers.notion_stub import (
    DATABASE_ID,
    NotionStub,
    StubAPIError,
    page_select,
    page_title,
)

_ROOT = Path(__file__).resolve().parents[1]
SAMPLE_CSV = _ROOT / "data/wechat_bill_sample.csv"


def test_e2e_import_sample_bill():
    # -------------------------
    # Stubbed Notion database with one pre-existing property
    # -------------------------
    client = NotionStub(properties={"Name": {"title": {}}})
    store = NotionStore(client, DATABASE_ID)
    progress: list[str] = []

    # -------------------------
    # Execute the end-to-end workflow
    # -------------------------
    report = import_ledger_from_csv(
        SAMPLE_CSV, store=store, tz="Asia/Shanghai", on_progress=progress.append
    )

    # -------------------------
    # Schema applied before any record, with every observed value
    # -------------------------
    ops = client.ops()
    assert ops[:3] == ["databases.retrieve", "databases.update", "databases.retrieve"]
    assert set(ops[3:]) == {"pages.create"}

    assert report.options.categories == ("商户消费", "餐饮美食", "交通出行", "转账", "红包")
    assert report.options.payment_methods == ("零钱", "招商银行(1234)", "零钱通")

    schema_props = report.schema["properties"]
    assert select_option_names(schema_props, "Category") == [
        "商户消费",
        "餐饮美食",
        "交通出行",
        "转账",
        "红包",
        "其他",
    ]
    assert select_option_names(schema_props, "Payment Method") == [
        "零钱",
        "招商银行(1234)",
        "零钱通",
        "未知",
    ]
    assert select_option_names(schema_props, "Type") == ["收入", "支出"]

    # -------------------------
    # Every written categorical value exists in the applied schema
    # -------------------------
    for page in client.created:
        assert page_select(page, "Category") in select_option_names(schema_props, "Category")
        assert page_select(page, "Payment Method") in select_option_names(
            schema_props, "Payment Method"
        )

    # -------------------------
    # Counts and written rows
    # -------------------------
    summary = report.summary
    assert (summary.imported, summary.failed, summary.skipped) == (5, 2, 1)
    assert [f.reason.split(":")[0] for f in summary.failures] == [
        "invalid date",
        "invalid amount",
    ]
    assert [page_title(p) for p in client.created] == [
        "饮料",
        "午餐",
        "乘车码",
        "/",
        "(无商品名)",
    ]
    income = client.created[3]["properties"]
    assert income["Amount"] == {"number": 1200.0}
    assert income["Type"] == {"select": {"name": "收入"}}
    assert income["Date"] == {"date": {"start": "2024-01-20T10:00:00+08:00"}}

    assert any("Updating database schema" in line for line in progress)


def test_e2e_schema_failure_creates_no_records():
    client = NotionStub(fail_update=StubAPIError("could not find database"))
    store = NotionStore(client, DATABASE_ID)

    with pytest.raises(SchemaSyncError):
        import_ledger_from_csv(SAMPLE_CSV, store=store)

    assert "pages.create" not in client.ops()
    assert client.created == []


def test_e2e_missing_header_fails_before_remote_calls(tmp_path: Path):
    csv_path = tmp_path / "not_a_bill.csv"
    csv_path.write_text("Date,Description,Amount\n2024-01-01,Coffee,3.50\n", encoding="utf-8")
    client = NotionStub()

    with pytest.raises(csv.Error):
        import_ledger_from_csv(csv_path, store=NotionStore(client, DATABASE_ID))

    assert client.calls == []


def test_e2e_utf8_bom_file(tmp_path: Path):
    csv_path = tmp_path / "bom.csv"
    csv_path.write_text(
        "交易时间,交易类型,交易对方,商品,收/支,金额,支付方式\n"
        '2024-01-01 10:00:00,餐饮美食,"测试商户","测试商品",支出,¥25.50,零钱\n',
        encoding="utf-8-sig",
    )
    client = NotionStub()

    report = import_ledger_from_csv(csv_path, store=NotionStore(client, DATABASE_ID))

    assert report.summary.imported == 1
    assert report.options.categories == ("餐饮美食",)
