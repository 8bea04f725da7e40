# ruff: noqa: E402, I001
from __future__ import annotations

import json
import sys
from datetime import date
from pathlib import Path
from typing import Any

import pytest

_ROOT = Path(__file__).resolve().parents[1]
sys.path[:0] = [p for p in [str(_ROOT / "packages"), str(_ROOT)] if p not in sys.path]

from finance_dashboard.errors import DataError
from finance_dashboard.ingest.adapters.plaid_json import (
    account_record,
    dashboard_amount,
    parse_link_payload,
    parse_sync_payload,
    provider_category,
    transactions_from_export,
)
from finance_dashboard.ingest.utils import load_json
from finance_dashboard.models import AccountRecord, Transaction


def _account(**overrides: Any) -> dict[str, Any]:
    acct = {
        "account_id": "acc_1",
        "name": "Everyday Checking",
        "official_name": "",
        "mask": "0000",
        "type": "depository",
        "subtype": "checking",
        "balances": {"current": 110.5, "available": 100, "limit": None},
        "verification_status": None,
    }
    acct.update(overrides)
    return acct


def _link(*accounts: dict[str, Any]) -> dict[str, Any]:
    return {
        "access_token": "access-sandbox-1",
        "item": {"item_id": "item_1", "institution_id": "ins_3"},
        "institution": {"name": "Chase", "logo": None},
        "accounts": list(accounts),
    }


def test_accounts_map_to_records_with_blank_fields_absent() -> None:
    payload = parse_link_payload(_link(_account(mask="", subtype=" ")))
    records = [account_record(a) for a in payload.accounts]
    assert records == [
        AccountRecord(
            type="depository",
            mask=None,
            subtype=None,
            account_id="acc_1",
            name="Everyday Checking",
            official_name=None,
            current=110.5,
            available=100.0,
            limit=None,
        )
    ]


def test_link_payload_requires_accounts() -> None:
    payload = _link()
    del payload["accounts"]
    with pytest.raises(DataError):
        parse_link_payload(payload)


def test_account_without_type_is_rejected() -> None:
    acct = _account()
    del acct["type"]
    with pytest.raises(DataError):
        parse_link_payload(_link(acct))


def test_link_payload() -> None:
    payload = parse_link_payload(_link(_account()))
    assert payload.item.institution_id == "ins_3"
    assert payload.institution.name == "Chase"
    assert payload.accounts[0].balances.current == 110.5


def test_sync_payload_and_sign_convention() -> None:
    payload = parse_sync_payload(
        {
            "added": [
                {
                    "transaction_id": "t1",
                    "account_id": "acc_1",
                    "date": "2024-06-03",
                    "name": "Uber 063015 SF**POOL**",
                    "amount": 5.4,
                    "merchant_name": "Uber",
                    "payment_channel": "online",
                    "personal_finance_category": {
                        "primary": "TRANSPORTATION",
                        "detailed": "TRANSPORTATION_TAXIS_AND_RIDE_SHARES",
                    },
                },
                {
                    "transaction_id": "t2",
                    "account_id": "acc_1",
                    "date": "2024-06-04T00:00:00",
                    "name": "Payroll",
                    "amount": -2500,
                    "merchant_name": "",
                },
            ],
            "removed": [{"transaction_id": "t0"}],
            "next_cursor": "abc",
            "has_more": False,
        }
    )
    t1, t2 = payload.added
    assert t2.date == date(2024, 6, 4)
    assert t2.merchant_name is None
    assert provider_category(t1) == "TRANSPORTATION"
    assert provider_category(t2) is None
    assert dashboard_amount(t1.amount) == -5.4
    assert dashboard_amount(t2.amount) == 2500
    assert [r.transaction_id for r in payload.removed] == ["t0"]
    assert payload.modified == []


def test_zero_amount_stays_positive_zero() -> None:
    assert str(dashboard_amount(0.0)) == "0.0"


def test_sync_payload_with_bad_date_raises() -> None:
    with pytest.raises(DataError):
        parse_sync_payload(
            {
                "added": [
                    {
                        "transaction_id": "t1",
                        "account_id": "a",
                        "date": "06/03/2024",
                        "name": "x",
                        "amount": 1,
                    }
                ]
            }
        )


def test_export_uses_camel_case_keys() -> None:
    txs = transactions_from_export(
        {
            "transactions": [
                {
                    "id": "1",
                    "date": "2024-01-15",
                    "name": "Grocer",
                    "amount": -50,
                    "accountName": "Checking",
                    "personalFinanceCategory": "Grocery",
                    "merchant": "",
                    "paymentChannel": "in store",
                }
            ]
        }
    )
    assert txs == [
        Transaction(
            id="1",
            date=date(2024, 1, 15),
            name="Grocer",
            amount=-50.0,
            account_name="Checking",
            category="Grocery",
            merchant="",
            payment_channel="in store",
        )
    ]


def test_load_json_reports_malformed_documents(tmp_path: Path) -> None:
    good = tmp_path / "good.json"
    good.write_text(json.dumps({"accounts": []}), encoding="utf-8")
    assert load_json(good) == {"accounts": []}

    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    with pytest.raises(DataError):
        load_json(bad)

    with pytest.raises(FileNotFoundError):
        load_json(tmp_path / "missing.json")
