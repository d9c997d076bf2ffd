# -*- coding: utf-8 -*-
"""
app/modules/enrollments/enums/enrollment_payment_status_enum.py

Estado del saldo de una inscripción. Lo escribe exclusivamente el
motor de conciliación (ReconciliationService).

Autor: Equipo Backend Escolar
Fecha: 2026-03-04
"""

from enum import StrEnum

from sqlalchemy import Enum as SAEnum

from app.shared.database.base import as_db_enum as _as_db_enum


class EnrollmentPaymentStatus(StrEnum):
    """Estado del saldo: pendiente, parcial, liquidado o vencido."""

    PENDING = "pending"
    PARTIAL = "partial"
    COMPLETED = "completed"
    OVERDUE = "overdue"

    __pg_enum_name__ = "enrollment_payment_status_enum"

    @classmethod
    def as_db_enum(cls, name: str = "enrollment_payment_status_enum") -> SAEnum:
        return _as_db_enum(cls, name=name)


__all__ = ["EnrollmentPaymentStatus"]

# Fin del archivo app/modules/enrollments/enums/enrollment_payment_status_enum.py
