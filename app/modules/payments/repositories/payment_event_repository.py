# -*- coding: utf-8 -*-
"""
app/modules/payments/repositories/payment_event_repository.py

Repositorio para la bitácora de webhooks (payment_events).

Autor: Equipo Backend Escolar
Fecha: 2026-03-05
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.repository import BaseRepository
from app.modules.payments.enums import WebhookProvider
from app.modules.payments.models.payment_event_models import PaymentEvent


class PaymentEventRepository(BaseRepository[PaymentEvent]):
    def __init__(self) -> None:
        super().__init__(PaymentEvent)

    async def get_by_provider_event_id(
        self,
        session: AsyncSession,
        *,
        provider: WebhookProvider,
        provider_event_id: str,
    ) -> Optional[PaymentEvent]:
        """Evento previo del mismo proveedor con el mismo id (reenvío)."""
        stmt = select(PaymentEvent).where(
            PaymentEvent.provider == provider,
            PaymentEvent.provider_event_id == provider_event_id,
        )
        result = await session.execute(stmt)
        return result.scalars().first()


__all__ = ["PaymentEventRepository"]

# Fin del archivo app/modules/payments/repositories/payment_event_repository.py
