# -*- coding: utf-8 -*-
"""
app/modules/payments/services/payment_event_service.py

Registro de eventos de webhook (payment_events).

La unicidad (provider, provider_event_id) es la deduplicación de
entregas repetidas: si el evento ya existe se devuelve el existente y el
llamador lo trata como duplicado. El payload se sanitiza antes de
persistir.

Autor: Equipo Backend Escolar
Fecha: 2026-03-08
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.payments.enums import WebhookEventKind, WebhookProvider
from app.modules.payments.repositories.payment_event_repository import PaymentEventRepository
from app.modules.payments.services.webhooks.payload_sanitizer import sanitize_webhook_payload

if TYPE_CHECKING:
    from app.modules.payments.models.payment_event_models import PaymentEvent


class PaymentEventService:
    def __init__(self, event_repo: PaymentEventRepository) -> None:
        self.event_repo = event_repo

    async def register_event(
        self,
        session: AsyncSession,
        *,
        provider: WebhookProvider,
        provider_event_id: str,
        event_type: str,
        event_kind: WebhookEventKind,
        payload: Optional[dict] = None,
        raw_payload: Optional[bytes] = None,
    ) -> Tuple["PaymentEvent", bool]:
        """
        Registra el evento si no existe.

        Returns:
            (evento, created): created=False si es una entrega repetida
        """
        existing = await self.event_repo.get_by_provider_event_id(
            session,
            provider=provider,
            provider_event_id=provider_event_id,
        )
        if existing:
            return existing, False

        event = await self.event_repo.create(
            session,
            provider=provider,
            provider_event_id=provider_event_id,
            event_type=event_type,
            event_kind=event_kind,
            outcome="received",
            payload=sanitize_webhook_payload(provider.value, payload or {}, raw_payload=raw_payload),
        )
        return event, True

    @staticmethod
    def set_outcome(event: "PaymentEvent", outcome: str, payment_id: Optional[uuid.UUID] = None) -> None:
        event.outcome = outcome
        if payment_id is not None:
            event.payment_id = payment_id


__all__ = ["PaymentEventService"]

# Fin del archivo app/modules/payments/services/payment_event_service.py
