# -*- coding: utf-8 -*-
"""
app/shared/database/__init__.py

Re-exporta utilidades comunes de base de datos.
"""

from __future__ import annotations

from .database import (
    engine,
    SessionLocal,
    get_async_session,
    session_scope,
    check_database_health,
)
from .base import Base, NAMING_CONVENTION, as_db_enum, json_column_type
from .repository import BaseRepository

__all__ = [
    "engine",
    "SessionLocal",
    "Base",
    "BaseRepository",
    "NAMING_CONVENTION",
    "as_db_enum",
    "json_column_type",
    "get_async_session",
    "session_scope",
    "check_database_health",
]

# Fin del archivo app/shared/database/__init__.py
