# -*- coding: utf-8 -*-
"""
app/modules/payments/enums/payment_method_enum.py

Método con el que se cubrió el pago.
'paypal' solo existe en registros históricos: no tiene adaptador.

Autor: Equipo Backend Escolar
Fecha: 2026-03-05
"""

from enum import StrEnum

from sqlalchemy import Enum as SAEnum

from app.shared.database.base import as_db_enum as _as_db_enum


class PaymentMethod(StrEnum):
    CASH = "cash"
    CARD = "card"
    TRANSFER = "transfer"
    STRIPE = "stripe"
    PAYPAL = "paypal"
    CONEKTA = "conekta"

    __pg_enum_name__ = "payment_method_enum"

    @classmethod
    def as_db_enum(cls, name: str = "payment_method_enum") -> SAEnum:
        return _as_db_enum(cls, name=name)


__all__ = ["PaymentMethod"]

# Fin del archivo app/modules/payments/enums/payment_method_enum.py
