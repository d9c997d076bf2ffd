# -*- coding: utf-8 -*-
"""
app/modules/payments/routes/webhooks.py

Webhooks de pasarelas.

Endpoints:
- POST /payments/webhooks/stripe
- POST /payments/webhooks/conekta

Firma inválida → 400 (SignatureVerificationError). Después de verificar
siempre 200, incluso si el procesamiento interno falla.

Autor: Equipo Backend Escolar
Fecha: 2026-03-08
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.database import get_async_session
from app.modules.payments.dependencies import PaymentServices, get_payment_services
from app.modules.payments.enums import WebhookProvider
from app.modules.payments.facades.webhooks import handle_webhook
from app.modules.payments.schemas import WebhookAck

router = APIRouter(prefix="/webhooks", tags=["payments:webhooks"])


async def _receive(
    provider: WebhookProvider,
    request: Request,
    session: AsyncSession,
    services: PaymentServices,
) -> WebhookAck:
    raw_body = await request.body()
    result = await handle_webhook(
        session,
        provider=provider,
        raw_body=raw_body,
        headers=dict(request.headers),
        services=services,
    )
    return WebhookAck(**result)


@router.post("/stripe", response_model=WebhookAck, status_code=status.HTTP_200_OK)
async def stripe_webhook(
    request: Request,
    session: AsyncSession = Depends(get_async_session),
    services: PaymentServices = Depends(get_payment_services),
) -> WebhookAck:
    return await _receive(WebhookProvider.STRIPE, request, session, services)


@router.post("/conekta", response_model=WebhookAck, status_code=status.HTTP_200_OK)
async def conekta_webhook(
    request: Request,
    session: AsyncSession = Depends(get_async_session),
    services: PaymentServices = Depends(get_payment_services),
) -> WebhookAck:
    return await _receive(WebhookProvider.CONEKTA, request, session, services)


__all__ = ["router"]

# Fin del archivo app/modules/payments/routes/webhooks.py
