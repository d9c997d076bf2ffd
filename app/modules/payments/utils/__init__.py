# -*- coding: utf-8 -*-
"""
app/modules/payments/utils/__init__.py
"""

from .money import to_money, to_cents, from_cents, sum_money, has_at_most_two_decimals, ZERO
from .identifiers import generate_transaction_id, generate_receipt_number

__all__ = [
    "to_money",
    "to_cents",
    "from_cents",
    "sum_money",
    "has_at_most_two_decimals",
    "ZERO",
    "generate_transaction_id",
    "generate_receipt_number",
]
