# ruff: noqa: E402, I001
from __future__ import annotations

import sys
from pathlib import Path

import pytest

_ROOT = Path(__file__).resolve().parents[1]
sys.path[:0] = [p for p in [str(_ROOT / "packages"), str(_ROOT)] if p not in sys.path]

from finance_dashboard.models import AccountRecord
from finance_dashboard.reconcile import find_match, format_logo_url, is_match, plan_account_sync


def _acct(mask: str | None, type: str = "depository", subtype: str | None = None, **kw):
    return AccountRecord(type=type, mask=mask, subtype=subtype, **kw)


def test_subtype_must_agree_and_first_match_wins() -> None:
    stored = [
        _acct("1234", subtype="savings", id=1),
        _acct("1234", subtype="checking", id=2),
        _acct("1234", subtype="checking", id=3),
    ]
    hit = find_match(_acct("1234", subtype="checking"), stored)
    assert hit is not None and hit.id == 2


@pytest.mark.parametrize("mask", [None, ""])
def test_accounts_without_mask_never_match(mask: str | None) -> None:
    stored = [_acct(mask, subtype="checking", id=1), _acct("1234", subtype="checking", id=2)]
    assert find_match(_acct(mask, subtype="checking"), stored) is None


def test_type_must_agree() -> None:
    stored = [_acct("9999", type="credit", subtype="credit card", id=1)]
    assert find_match(_acct("9999", type="depository", subtype="credit card"), stored) is None


@pytest.mark.parametrize(
    ("candidate", "stored", "expected"),
    [
        (None, None, True),
        ("", None, True),
        (None, "", True),
        ("checking", None, False),
        (None, "checking", False),
        ("checking", "Checking", False),
    ],
)
def test_subtype_presence_rules(
    candidate: str | None, stored: str | None, expected: bool
) -> None:
    assert is_match(_acct("1111", subtype=candidate), _acct("1111", subtype=stored)) is expected


def test_no_stored_accounts_means_no_match() -> None:
    assert find_match(_acct("1234"), []) is None


def test_sync_plan_splits_matched_and_new_in_fetched_order() -> None:
    stored = [
        _acct("1111", subtype="checking", id=10, name="Old Checking"),
        _acct("2222", type="credit", subtype="credit card", id=11),
    ]
    fetched = [
        _acct("3333", subtype="savings", account_id="n3"),
        _acct("1111", subtype="checking", account_id="n1"),
        _acct(None, type="loan", account_id="n4"),
        _acct("2222", type="credit", subtype="credit card", account_id="n2"),
    ]
    plan = plan_account_sync(fetched, stored)
    assert [(f.account_id, s.id) for f, s in plan.matched] == [("n1", 10), ("n2", 11)]
    assert [f.account_id for f in plan.new] == ["n3", "n4"]


def test_two_fetched_accounts_may_match_the_same_stored_one() -> None:
    stored = [_acct("1111", subtype="checking", id=10)]
    fetched = [
        _acct("1111", subtype="checking", account_id="a"),
        _acct("1111", subtype="checking", account_id="b"),
    ]
    plan = plan_account_sync(fetched, stored)
    assert [s.id for _, s in plan.matched] == [10, 10]
    assert plan.new == ()


@pytest.mark.parametrize(
    ("logo", "expected"),
    [
        ("iVBORw0KGgo=", "data:image/png;base64,iVBORw0KGgo="),
        ("data:image/svg+xml;base64,AAA", "data:image/svg+xml;base64,AAA"),
        ("https://cdn.example/logo.png", "https://cdn.example/logo.png"),
    ],
)
def test_provider_logo_is_made_displayable(logo: str, expected: str) -> None:
    assert format_logo_url(logo, "ins_1") == expected


def test_missing_logo_uses_fallback_table() -> None:
    fallbacks = {"ins_1": "https://cdn.example/ins_1.svg"}
    assert format_logo_url(None, "ins_1", fallbacks) == "https://cdn.example/ins_1.svg"
    assert format_logo_url("", "ins_2", fallbacks) is None
    assert format_logo_url(None, "ins_1") is None
