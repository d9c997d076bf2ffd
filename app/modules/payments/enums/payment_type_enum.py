# -*- coding: utf-8 -*-
"""
app/modules/payments/enums/payment_type_enum.py

Tipo de pago respecto al saldo de la inscripción.

Autor: Equipo Backend Escolar
Fecha: 2026-03-05
"""

from enum import StrEnum

from sqlalchemy import Enum as SAEnum

from app.shared.database.base import as_db_enum as _as_db_enum


class PaymentType(StrEnum):
    FULL = "full"
    PARTIAL = "partial"
    INSTALLMENT = "installment"
    REFUND = "refund"

    __pg_enum_name__ = "payment_type_enum"

    @classmethod
    def as_db_enum(cls, name: str = "payment_type_enum") -> SAEnum:
        return _as_db_enum(cls, name=name)


__all__ = ["PaymentType"]

# Fin del archivo app/modules/payments/enums/payment_type_enum.py
