# -*- coding: utf-8 -*-
"""
app/modules/payments/enums/currency_enum.py

Monedas soportadas (ISO 4217).

Autor: Equipo Backend Escolar
Fecha: 2026-03-05
"""

from enum import StrEnum

from sqlalchemy import Enum as SAEnum

from app.shared.database.base import as_db_enum as _as_db_enum


class Currency(StrEnum):
    MXN = "MXN"
    USD = "USD"

    __pg_enum_name__ = "currency_enum"

    @classmethod
    def as_db_enum(cls, name: str = "currency_enum") -> SAEnum:
        return _as_db_enum(cls, name=name)


__all__ = ["Currency"]

# Fin del archivo app/modules/payments/enums/currency_enum.py
