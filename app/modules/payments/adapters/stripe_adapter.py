# -*- coding: utf-8 -*-
"""
app/modules/payments/adapters/stripe_adapter.py

Canal stripe_card: PaymentIntent confirmado de forma síncrona.

- succeeded                  → completed
- processing                 → pending (lo resuelve el webhook)
- requires_action / otros    → failed (el cobro síncrono no admite 3DS)
- stripe.CardError           → failed (declinada, se registra sin reintento)
- otros StripeError / timeout → GatewayError

El SDK de Stripe es bloqueante: se ejecuta en threadpool y se acota con
gateway_timeout_seconds.

Autor: Equipo Backend Escolar
Fecha: 2026-03-06
"""

from __future__ import annotations

import asyncio
import logging
import time
from decimal import Decimal
from typing import Any, Optional

import stripe
from fastapi.concurrency import run_in_threadpool

from app.shared.config.settings_payments import PaymentsSettings, get_payments_settings
from app.shared.errors import GatewayError
from app.modules.payments.enums import Currency
from app.modules.payments.metrics import GATEWAY_CALL_SECONDS
from app.modules.payments.utils.money import to_cents
from .base import ChargeRequest, GatewayOutcome, GatewayResult, RefundResult

logger = logging.getLogger(__name__)

PROVIDER = "stripe"


class StripeCardAdapter:
    provider = PROVIDER

    def __init__(self, settings: Optional[PaymentsSettings] = None) -> None:
        self.settings = settings or get_payments_settings()

    @property
    def is_configured(self) -> bool:
        return bool(self.settings.stripe_secret_key)

    async def _call(self, operation: str, fn: Any, **kwargs: Any) -> Any:
        """Ejecuta una llamada del SDK en threadpool con timeout."""
        if not self.is_configured:
            raise GatewayError("Stripe no está configurado", provider=PROVIDER, transient=False)

        started = time.perf_counter()
        try:
            return await asyncio.wait_for(
                run_in_threadpool(fn, api_key=self.settings.stripe_secret_key, **kwargs),
                timeout=self.settings.gateway_timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            logger.error("Stripe %s excedió %ss", operation, self.settings.gateway_timeout_seconds)
            raise GatewayError("Tiempo de espera agotado con Stripe", provider=PROVIDER) from e
        finally:
            GATEWAY_CALL_SECONDS.labels(provider=PROVIDER, operation=operation).observe(
                time.perf_counter() - started
            )

    async def charge(self, request: ChargeRequest) -> GatewayResult:
        if not request.payment_token:
            raise GatewayError("Falta el método de pago de Stripe", provider=PROVIDER, transient=False)

        metadata = {
            **request.metadata,
            "enrollment_id": request.enrollment_id,
            "transaction_id": request.transaction_id,
        }

        try:
            intent = await self._call(
                "charge",
                stripe.PaymentIntent.create,
                amount=to_cents(request.amount),
                currency=request.currency.value.lower(),
                payment_method=request.payment_token,
                confirm=True,
                description=request.description,
                metadata=metadata,
                automatic_payment_methods={"enabled": True, "allow_redirects": "never"},
                idempotency_key=request.transaction_id,
            )
        except stripe.CardError as e:
            intent_id = _card_error_intent_id(e)
            logger.info(
                "Stripe declinó txn=%s intent=%s code=%s",
                request.transaction_id,
                intent_id,
                e.code,
            )
            return GatewayResult(
                outcome=GatewayOutcome.FAILED,
                external_id=intent_id,
                failure_reason=e.code or "card_declined",
                raw={"code": e.code, "decline_code": getattr(e, "decline_code", None)},
            )
        except stripe.StripeError as e:
            logger.error("Error de Stripe txn=%s: %r", request.transaction_id, e)
            transient = isinstance(e, (stripe.APIConnectionError, stripe.RateLimitError, stripe.APIError))
            raise GatewayError("Stripe no pudo procesar el cargo", provider=PROVIDER, transient=transient) from e

        status = intent.status
        raw = {"id": intent.id, "status": status}
        logger.info("Stripe PaymentIntent %s status=%s txn=%s", intent.id, status, request.transaction_id)

        if status == "succeeded":
            return GatewayResult(outcome=GatewayOutcome.COMPLETED, external_id=intent.id, raw=raw)
        if status == "processing":
            return GatewayResult(outcome=GatewayOutcome.PENDING, external_id=intent.id, raw=raw)
        reason = "authentication_required" if status == "requires_action" else status
        return GatewayResult(
            outcome=GatewayOutcome.FAILED,
            external_id=intent.id,
            failure_reason=reason,
            raw=raw,
        )

    async def refund(
        self,
        *,
        external_id: str,
        amount: Decimal,
        currency: Currency,
        reason: Optional[str] = None,
        idempotency_key: Optional[str] = None,
    ) -> RefundResult:
        params: dict[str, Any] = {
            "payment_intent": external_id,
            "amount": to_cents(amount),
            "reason": "requested_by_customer",
            "metadata": {"reason": (reason or "")[:500]},
        }
        if idempotency_key:
            params["idempotency_key"] = idempotency_key

        try:
            refund = await self._call("refund", stripe.Refund.create, **params)
        except stripe.StripeError as e:
            logger.error("Stripe rechazó reembolso intent=%s: %r", external_id, e)
            transient = isinstance(e, (stripe.APIConnectionError, stripe.RateLimitError, stripe.APIError))
            raise GatewayError("Stripe no pudo procesar el reembolso", provider=PROVIDER, transient=transient) from e

        logger.info("Stripe refund %s status=%s intent=%s", refund.id, refund.status, external_id)
        return RefundResult(
            provider_refund_id=refund.id,
            status=refund.status,
            raw={"id": refund.id, "status": refund.status},
        )


def _card_error_intent_id(error: "stripe.CardError") -> Optional[str]:
    """ID del PaymentIntent adjunto a un CardError, si Stripe lo incluyó."""
    err = getattr(error, "error", None)
    intent = getattr(err, "payment_intent", None) if err is not None else None
    if intent is None:
        return None
    if isinstance(intent, dict):
        return intent.get("id")
    return getattr(intent, "id", None)


__all__ = ["StripeCardAdapter"]
