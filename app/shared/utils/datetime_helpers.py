# -*- coding: utf-8 -*-
"""
app/shared/utils/datetime_helpers.py

Utilidades para manejo consistente de timestamps UTC.

Autor: Equipo Backend Escolar
Fecha: 2026-03-04
"""

from datetime import date, datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """
    Retorna el timestamp UTC actual (timezone-aware).

    Examples:
        >>> utcnow().tzinfo == timezone.utc
        True
    """
    return datetime.now(timezone.utc)


def utctoday() -> date:
    """Fecha actual en UTC."""
    return utcnow().date()


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Asegura que un datetime sea UTC timezone-aware.

    SQLite devuelve datetimes naive aunque la columna sea timezone=True;
    en ese caso se asume que ya están en UTC.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def from_unix(ts: Optional[int | float]) -> Optional[datetime]:
    """Convierte un epoch (segundos) de una pasarela a datetime UTC."""
    if ts is None:
        return None
    return datetime.fromtimestamp(float(ts), tz=timezone.utc)


__all__ = ["utcnow", "utctoday", "ensure_utc", "from_unix"]
