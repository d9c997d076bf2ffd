# -*- coding: utf-8 -*-
"""
app/modules/payments/jobs/expire_pending_payments_job.py

Job programado: marca como 'failed' (expired) los pagos OXXO/SPEI y
'processing' que vencieron sin confirmación y recalcula sus saldos.

Autor: Equipo Backend Escolar
Fecha: 2026-03-08
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.database import session_scope
from app.shared.scheduler import get_scheduler
from app.modules.payments.dependencies import PaymentServices, get_payment_services
from app.modules.payments.facades.payments import run_expiry_sweep

logger = logging.getLogger(__name__)

EXPIRE_PAYMENTS_JOB_ID = "payments_expire_pending"


async def expire_pending_payments(
    session: Optional[AsyncSession] = None,
    services: Optional[PaymentServices] = None,
) -> int:
    """
    Ejecuta el barrido. Si no se provee sesión, abre una propia.

    Returns:
        Número de pagos expirados
    """
    services = services or get_payment_services()

    if session is not None:
        result = await run_expiry_sweep(session, services=services)
    else:
        async with session_scope() as own_session:
            result = await run_expiry_sweep(own_session, services=services)

    if result.expired:
        logger.info("Job de expiración: %d pagos expirados", result.expired)
    else:
        logger.debug("Job de expiración: sin pagos vencidos")
    return result.expired


def register_expire_payments_job(interval_minutes: int) -> str:
    """Registra el barrido en el scheduler global."""
    job_id = get_scheduler().add_interval_job(
        func=expire_pending_payments,
        job_id=EXPIRE_PAYMENTS_JOB_ID,
        minutes=interval_minutes,
    )
    logger.info("Job de expiración registrado: id=%s cada %d min", job_id, interval_minutes)
    return job_id


__all__ = [
    "expire_pending_payments",
    "register_expire_payments_job",
    "EXPIRE_PAYMENTS_JOB_ID",
]

# Fin del archivo app/modules/payments/jobs/expire_pending_payments_job.py
