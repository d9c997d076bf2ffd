# -*- coding: utf-8 -*-
"""
app/modules/payments/jobs/recompute_ledgers_job.py

Mantenimiento: recalcula paid_amount / payment_status de TODAS las
inscripciones a partir de su historial de pagos.

Uso manual (p. ej. tras corregir datos directamente en la base):

    python -m app.modules.payments.jobs.recompute_ledgers_job

Autor: Equipo Backend Escolar
Fecha: 2026-03-09
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.database import session_scope
from app.modules.payments.dependencies import PaymentServices, get_payment_services

logger = logging.getLogger(__name__)


async def recompute_all_ledgers(
    session: Optional[AsyncSession] = None,
    services: Optional[PaymentServices] = None,
) -> int:
    """Recalcula y confirma. Devuelve el número de inscripciones procesadas."""
    services = services or get_payment_services()

    async def _run(s: AsyncSession) -> int:
        try:
            count = await services.reconciliation.recompute_all(s)
        except Exception:
            await s.rollback()
            raise
        await s.commit()
        return count

    if session is not None:
        return await _run(session)
    async with session_scope() as own_session:
        return await _run(own_session)


def main() -> None:
    from app.shared.config import get_settings, setup_logging
    from app.shared.orm import load_all_models

    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    load_all_models()

    count = asyncio.run(recompute_all_ledgers())
    logger.info("Saldos recalculados: %d inscripciones", count)


if __name__ == "__main__":
    main()

# Fin del archivo app/modules/payments/jobs/recompute_ledgers_job.py
