"""Form parsing tests for ledger amounts and shared field rules."""

from __future__ import annotations

from decimal import Decimal

import pytest

from alphawealth.blueprints.ledger.forms import TransactionForm


def _payload(**overrides) -> dict:
    payload = {"account_id": "1", "amount": "12.50", "type": "expense", "date": "2024-02-14"}
    payload.update(overrides)
    return payload


def test_transaction_form_parses_valid_input():
    form = TransactionForm.from_mapping(_payload(description="  Lunch  "))

    assert form.validate()
    assert form.amount == Decimal("12.50")
    assert form.description == "Lunch"


@pytest.mark.parametrize("amount", ["0", "0.001", "0.004", "-0.001", "-3"])
def test_amount_rounding_to_zero_or_below_is_rejected(amount):
    form = TransactionForm.from_mapping(_payload(amount=amount))

    assert not form.validate()
    assert "amount" in form.errors


def test_amount_rounds_to_cents():
    form = TransactionForm.from_mapping(_payload(amount="0.006"))

    assert form.validate()
    assert form.amount == Decimal("0.01")


def test_amount_too_large_is_rejected():
    form = TransactionForm.from_mapping(_payload(amount="1e30"))

    assert not form.validate()
    assert form.errors["amount"] == ["Amount is too large."]
