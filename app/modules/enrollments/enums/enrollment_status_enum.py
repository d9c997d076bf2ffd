# -*- coding: utf-8 -*-
"""
app/modules/enrollments/enums/enrollment_status_enum.py

Enum de estados de la inscripción (ciclo de vida académico).
Los cambios de estado nunca modifican campos monetarios.

Autor: Equipo Backend Escolar
Fecha: 2026-03-04
"""

from enum import StrEnum

from sqlalchemy import Enum as SAEnum

from app.shared.database.base import as_db_enum as _as_db_enum


class EnrollmentStatus(StrEnum):
    """Estado de la inscripción."""

    PENDING = "pending"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    SUSPENDED = "suspended"

    __pg_enum_name__ = "enrollment_status_enum"

    @classmethod
    def as_db_enum(cls, name: str = "enrollment_status_enum") -> SAEnum:
        return _as_db_enum(cls, name=name)


__all__ = ["EnrollmentStatus"]

# Fin del archivo app/modules/enrollments/enums/enrollment_status_enum.py
