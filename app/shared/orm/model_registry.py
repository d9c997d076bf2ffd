# -*- coding: utf-8 -*-
"""
app/shared/orm/model_registry.py

Registro de modelos ORM entre módulos.

Enrollment ↔ Payment se relacionan por nombre de clase; ambos módulos
deben estar importados antes de configurar los mappers. Se invoca en el
startup de la app y en los fixtures de tests.

Autor: Equipo Backend Escolar
Fecha: 2026-03-04
"""

from __future__ import annotations

import logging

from sqlalchemy.orm import configure_mappers

logger = logging.getLogger(__name__)

_MODELS_LOADED = False


def load_all_models() -> None:
    """Importa todos los modelos y configura los mappers (idempotente)."""
    global _MODELS_LOADED

    if _MODELS_LOADED:
        return

    import app.modules.enrollments.models  # noqa: F401
    import app.modules.payments.models  # noqa: F401

    configure_mappers()
    logger.debug("Modelos ORM registrados: enrollments, payments")
    _MODELS_LOADED = True


__all__ = ["load_all_models"]
