# -*- coding: utf-8 -*-
"""
tests/modules/payments/utils/test_money_and_identifiers.py

Aritmética monetaria y formato de identificadores de pago.
"""

import re
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from app.modules.payments.utils import (
    from_cents,
    generate_receipt_number,
    generate_transaction_id,
    has_at_most_two_decimals,
    sum_money,
    to_cents,
    to_money,
)


class TestToMoney:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("1500", Decimal("1500.00")),
            (Decimal("10.005"), Decimal("10.01")),
            (Decimal("10.004"), Decimal("10.00")),
            (7, Decimal("7.00")),
            ("-3.5", Decimal("-3.50")),
        ],
    )
    def test_rounds_half_up(self, raw, expected):
        assert to_money(raw) == expected
        assert to_money(raw).as_tuple().exponent == -2

    def test_rejects_float(self):
        with pytest.raises(ValueError, match="float"):
            to_money(10.5)

    @pytest.mark.parametrize("raw", ["abc", "", None, "NaN", "Infinity"])
    def test_rejects_invalid(self, raw):
        with pytest.raises(ValueError):
            to_money(raw)


def test_has_at_most_two_decimals():
    assert has_at_most_two_decimals(Decimal("99.99"))
    assert has_at_most_two_decimals(Decimal("100"))
    assert not has_at_most_two_decimals(Decimal("99.999"))


def test_sum_money_is_exact():
    # 0.1 + 0.2 en float no es 0.3
    assert sum_money([Decimal("0.10"), Decimal("0.20")]) == Decimal("0.30")
    assert sum_money([]) == Decimal("0.00")


class TestCents:
    def test_to_cents(self):
        assert to_cents(Decimal("1500.00")) == 150000
        assert to_cents(Decimal("0.01")) == 1
        assert to_cents(Decimal("19.999")) == 2000

    def test_from_cents(self):
        assert from_cents(50000) == Decimal("500.00")
        assert from_cents(1) == Decimal("0.01")


class TestIdentifiers:
    def test_transaction_id_format(self):
        assert re.fullmatch(r"TXN-\d{13}-[A-Z0-9]{9}", generate_transaction_id())

    def test_transaction_ids_are_unique(self):
        assert len({generate_transaction_id() for _ in range(200)}) == 200

    def test_receipt_number_format(self):
        receipt = generate_receipt_number(datetime(2026, 3, 9, tzinfo=timezone.utc))
        assert re.fullmatch(r"RCP-20260309-[0-9A-F]{8}", receipt)

# Fin del archivo tests/modules/payments/utils/test_money_and_identifiers.py
