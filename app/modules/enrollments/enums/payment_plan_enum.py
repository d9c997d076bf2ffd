# -*- coding: utf-8 -*-
"""
app/modules/enrollments/enums/payment_plan_enum.py

Plan de pagos acordado al inscribirse.

Autor: Equipo Backend Escolar
Fecha: 2026-03-04
"""

from enum import StrEnum

from sqlalchemy import Enum as SAEnum

from app.shared.database.base import as_db_enum as _as_db_enum


class PaymentPlan(StrEnum):
    FULL = "full"
    MONTHLY = "monthly"
    WEEKLY = "weekly"

    __pg_enum_name__ = "payment_plan_enum"

    @classmethod
    def as_db_enum(cls, name: str = "payment_plan_enum") -> SAEnum:
        return _as_db_enum(cls, name=name)


__all__ = ["PaymentPlan"]

# Fin del archivo app/modules/enrollments/enums/payment_plan_enum.py
