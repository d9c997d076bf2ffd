# -*- coding: utf-8 -*-
"""
app/modules/payments/facades/payments/sweep.py

Barrido de expiración con commit propio (endpoint admin y job programado).

Autor: Equipo Backend Escolar
Fecha: 2026-03-08
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.payments.services.expiry_service import ExpirySweepResult

if TYPE_CHECKING:
    from app.modules.payments.dependencies import PaymentServices


async def run_expiry_sweep(
    session: AsyncSession,
    *,
    services: "PaymentServices",
    now: Optional[datetime] = None,
) -> ExpirySweepResult:
    try:
        result = await services.expiry.expire_stale_payments(session, now=now)
    except Exception:
        await session.rollback()
        raise
    await session.commit()
    return result


__all__ = ["run_expiry_sweep"]
