# -*- coding: utf-8 -*-
"""
app/shared/database/base.py

Base declarativa y convención de nombres para modelos ORM.

Este módulo proporciona:
- Base: clase base declarativa de SQLAlchemy
- NAMING_CONVENTION: convención de nombres para constraints
- as_db_enum: helper para mapear enums Python a columnas VARCHAR + CHECK
- json_column_type: JSON portable (JSONB en PostgreSQL)

Autor: Equipo Backend Escolar
Fecha: 2026-03-02
"""

from __future__ import annotations

from enum import Enum
from typing import Type

from sqlalchemy import JSON, MetaData
from sqlalchemy import Enum as SAEnum
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase

# ===== NAMING CONVENTION =====
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


# ===== BASE DECLARATIVA =====
class Base(DeclarativeBase):
    """
    Base declarativa para todos los modelos ORM.
    Incluye convención de nombres para constraints.
    """
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


# ===== HELPER GENÉRICO PARA ENUMS =====
def as_db_enum(enum_cls: Type[Enum], name: str | None = None) -> SAEnum:
    """
    Devuelve un tipo Enum de SQLAlchemy persistido por VALOR (no por nombre).

    Uso típico:

        from app.shared.database.base import Base, as_db_enum
        from .enums import PaymentStatus

        class Payment(Base):
            status: Mapped[PaymentStatus] = mapped_column(
                as_db_enum(PaymentStatus),
                nullable=False,
            )

    - native_enum=False: VARCHAR + CHECK, portable entre PostgreSQL y SQLite
      (los tests corren sobre aiosqlite).
    - Si no se pasa `name`, usa `__pg_enum_name__` del enum o el nombre de
      la clase en minúsculas (nombre del CHECK constraint).
    """
    enum_name = name or getattr(enum_cls, "__pg_enum_name__", enum_cls.__name__.lower())

    def _values(_: object) -> list[str]:
        return [e.value for e in enum_cls]  # type: ignore[arg-type]

    return SAEnum(
        enum_cls,
        name=enum_name,
        native_enum=False,
        create_constraint=True,
        validate_strings=True,
        length=32,
        values_callable=_values,
    )


# JSON portable: JSONB en PostgreSQL, JSON genérico en el resto
json_column_type = JSON().with_variant(JSONB(), "postgresql")


__all__ = ["Base", "NAMING_CONVENTION", "as_db_enum", "json_column_type"]
# Fin del archivo app/shared/database/base.py
