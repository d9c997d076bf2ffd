# -*- coding: utf-8 -*-
"""
app/modules/payments/facades/webhooks/handler.py

Entrada unificada para procesar webhooks de Stripe o Conekta.

Pasos:
1. Verificar firma (SignatureVerificationError → HTTP 400, nada se toca)
2. Normalizar el payload
3. Registrar PaymentEvent (reenvío del mismo evento → duplicate)
4. Aplicar al ledger (WebhookLedgerService)
5. Commit y notificación fire-and-forget

Tras verificar la firma SIEMPRE se responde 200: un error interno hace
rollback, se loguea y se reporta {"received": true, "status": "error"}
para que el proveedor reintente sin marcar el endpoint como caído.

Autor: Equipo Backend Escolar
Fecha: 2026-03-08
"""
from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.payments.enums import WebhookProvider
from app.modules.payments.metrics import observe_webhook_outcome, observe_webhook_received
from app.modules.payments.services.webhooks import WebhookApplyResult, WebhookOutcome
from .normalize import normalize_webhook_payload
from .verify import verify_webhook_signature

if TYPE_CHECKING:
    from app.modules.payments.dependencies import PaymentServices

logger = logging.getLogger(__name__)


async def handle_webhook(
    session: AsyncSession,
    *,
    provider: WebhookProvider,
    raw_body: bytes,
    headers: Mapping[str, str],
    services: "PaymentServices",
) -> Dict[str, Any]:
    """
    Procesa un webhook del proveedor.

    Raises:
        SignatureVerificationError: firma ausente o inválida
    """
    observe_webhook_received(provider.value)
    verify_webhook_signature(provider, raw_body, headers)

    started = time.perf_counter()
    event_id: Optional[str] = None
    result = WebhookApplyResult(WebhookOutcome.ERROR)

    try:
        normalized = normalize_webhook_payload(provider, raw_body)
        event_id = normalized.event_id

        event, created = await services.events.register_event(
            session,
            provider=provider,
            provider_event_id=normalized.event_id,
            event_type=normalized.event_type,
            event_kind=normalized.kind,
            payload=normalized.raw,
            raw_payload=raw_body,
        )
        if not created:
            logger.info(f"Webhook {provider.value} {event_id} ya procesado; se reconoce sin cambios")
            result = WebhookApplyResult(WebhookOutcome.DUPLICATE)
        else:
            result = await services.webhooks.apply_event(session, normalized)
            services.events.set_outcome(
                event,
                result.outcome.value,
                payment_id=result.payment.id if result.payment is not None else None,
            )
        await session.commit()

    except IntegrityError:
        # Carrera con otra entrega del mismo evento / cobro
        await session.rollback()
        logger.info(f"Webhook {provider.value} {event_id}: carrera resuelta por unicidad → duplicate")
        result = WebhookApplyResult(WebhookOutcome.DUPLICATE)

    except Exception:
        await session.rollback()
        logger.exception(f"Webhook {provider.value} {event_id}: error interno; se reconoce con status=error")
        observe_webhook_outcome(provider.value, WebhookOutcome.ERROR.value, time.perf_counter() - started)
        return {"received": True, "status": WebhookOutcome.ERROR.value}

    observe_webhook_outcome(provider.value, result.outcome.value, time.perf_counter() - started)

    if result.completed:
        await services.notifications.payment_completed(result.payment, result.enrollment)

    response: Dict[str, Any] = {"received": True, "status": result.outcome.value}
    if event_id:
        response["event_id"] = event_id
    if result.payment is not None and result.outcome != WebhookOutcome.DUPLICATE:
        response["payment_id"] = str(result.payment.id)
    return response


__all__ = ["handle_webhook"]

# Fin del archivo app/modules/payments/facades/webhooks/handler.py
