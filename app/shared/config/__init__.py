# -*- coding: utf-8 -*-
"""
app/shared/config/__init__.py

Punto único de acceso a la configuración:
    from app.shared.config import get_settings, get_payments_settings

Los settings se instancian de forma perezosa (no al importar) para que
los tests puedan fijar variables de entorno antes del primer acceso.
"""

from __future__ import annotations

from functools import lru_cache

from .settings_base import BaseAppSettings
from .settings_payments import PaymentsSettings, get_payments_settings, reset_payments_settings
from .logging_config import setup_logging


@lru_cache(maxsize=1)
def get_settings() -> BaseAppSettings:
    """Singleton de settings de la aplicación."""
    return BaseAppSettings()


__all__ = [
    "BaseAppSettings",
    "PaymentsSettings",
    "get_settings",
    "get_payments_settings",
    "reset_payments_settings",
    "setup_logging",
]
