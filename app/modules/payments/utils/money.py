# -*- coding: utf-8 -*-
"""
app/modules/payments/utils/money.py

Aritmética monetaria del ledger: Decimal con 2 decimales, ROUND_HALF_UP.
Nunca se usa float para montos.

Autor: Equipo Backend Escolar
Fecha: 2026-03-05
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable, Union

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

Number = Union[Decimal, int, str]


def to_money(value: Number) -> Decimal:
    """
    Normaliza un valor a Decimal con 2 decimales (ROUND_HALF_UP).

    Raises:
        ValueError: si el valor no es numérico o es float
    """
    if isinstance(value, float):
        # Los floats traen error binario: se exige str/Decimal/int
        raise ValueError("Los montos no pueden ser float")
    try:
        dec = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, TypeError) as e:
        raise ValueError(f"Monto inválido: {value!r}") from e
    if not dec.is_finite():
        raise ValueError(f"Monto inválido: {value!r}")
    return dec.quantize(CENT, rounding=ROUND_HALF_UP)


def has_at_most_two_decimals(value: Decimal) -> bool:
    return value == value.quantize(CENT, rounding=ROUND_HALF_UP)


def sum_money(values: Iterable[Decimal]) -> Decimal:
    total = ZERO
    for v in values:
        total += v
    return to_money(total)


def to_cents(amount: Decimal) -> int:
    """Monto en unidades menores (centavos), como esperan Stripe y Conekta."""
    return int((to_money(amount) * 100).to_integral_value(rounding=ROUND_HALF_UP))


def from_cents(cents: int) -> Decimal:
    return to_money(Decimal(int(cents)) / 100)


__all__ = [
    "CENT",
    "ZERO",
    "to_money",
    "has_at_most_two_decimals",
    "sum_money",
    "to_cents",
    "from_cents",
]
