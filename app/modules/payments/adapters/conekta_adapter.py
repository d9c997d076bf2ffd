# -*- coding: utf-8 -*-
"""
app/modules/payments/adapters/conekta_adapter.py

Canales Conekta:
- conekta_card: orden con cargo a tarjeta (token). paid → completed.
- conekta_oxxo: orden con ficha OXXO (oxxo_cash). Queda pending con
  referencia de pago y vigencia (3 días por defecto).
- conekta_spei: orden con referencia SPEI (CLABE). Queda pending con
  vigencia (24 horas por defecto).

Los canales diferidos solo se resuelven por webhook o por el barrido
de vigencia.

Autor: Equipo Backend Escolar
Fecha: 2026-03-06
"""

from __future__ import annotations

import logging
from datetime import timedelta
from decimal import Decimal
from typing import Any, Dict, Optional

from app.shared.config.settings_payments import PaymentsSettings, get_payments_settings
from app.shared.errors import GatewayError
from app.shared.utils.datetime_helpers import from_unix, utcnow
from app.modules.payments.enums import Currency, GatewayChannel
from app.modules.payments.utils.money import to_cents
from .base import ChargeRequest, GatewayOutcome, GatewayResult, RefundResult
from .conekta_client import PROVIDER, ConektaClient, ConektaDecline

logger = logging.getLogger(__name__)


class ConektaAdapter:
    provider = PROVIDER

    def __init__(
        self,
        channel: GatewayChannel,
        client: Optional[ConektaClient] = None,
        settings: Optional[PaymentsSettings] = None,
    ) -> None:
        if channel not in (
            GatewayChannel.CONEKTA_CARD,
            GatewayChannel.CONEKTA_OXXO,
            GatewayChannel.CONEKTA_SPEI,
        ):
            raise ValueError(f"Canal no soportado por Conekta: {channel}")
        self.channel = channel
        self.settings = settings or get_payments_settings()
        self.client = client or ConektaClient(self.settings)

    # ---------------------------------------------------------
    # Payload
    # ---------------------------------------------------------
    def _payment_method(self, request: ChargeRequest) -> Dict[str, Any]:
        if self.channel == GatewayChannel.CONEKTA_CARD:
            if not request.payment_token:
                raise GatewayError("Falta el token de tarjeta", provider=PROVIDER, transient=False)
            return {"type": "card", "token_id": request.payment_token}

        hours = (
            self.settings.oxxo_expiry_hours
            if self.channel == GatewayChannel.CONEKTA_OXXO
            else self.settings.spei_expiry_hours
        )
        expires_at = int((utcnow() + timedelta(hours=hours)).timestamp())
        pm_type = "oxxo_cash" if self.channel == GatewayChannel.CONEKTA_OXXO else "spei"
        return {"type": pm_type, "expires_at": expires_at}

    def build_order_payload(self, request: ChargeRequest) -> Dict[str, Any]:
        cents = to_cents(request.amount)
        payer = request.payer
        customer_info: Dict[str, Any] = {}
        if payer is not None:
            customer_info = {"name": payer.name, "email": payer.email}
            if payer.phone:
                customer_info["phone"] = payer.phone

        return {
            "currency": request.currency.value,
            "customer_info": customer_info,
            "line_items": [
                {"name": request.description[:250], "unit_price": cents, "quantity": 1},
            ],
            "charges": [{"payment_method": self._payment_method(request), "amount": cents}],
            "metadata": {
                **request.metadata,
                "enrollment_id": request.enrollment_id,
                "transaction_id": request.transaction_id,
            },
        }

    # ---------------------------------------------------------
    # Cobro
    # ---------------------------------------------------------
    async def charge(self, request: ChargeRequest) -> GatewayResult:
        payload = self.build_order_payload(request)
        try:
            order = await self.client.create_order(payload)
        except ConektaDecline as e:
            logger.info("Conekta declinó txn=%s code=%s", request.transaction_id, e.code)
            return GatewayResult(
                outcome=GatewayOutcome.FAILED,
                external_id=e.order_id,
                failure_reason=e.code,
                raw={"code": e.code},
            )

        order_id = order.get("id")
        charge = _first_charge(order)
        charge_status = charge.get("status") or order.get("payment_status")
        pm = charge.get("payment_method") or {}
        raw = {"id": order_id, "payment_status": order.get("payment_status"), "charge_status": charge_status}

        logger.info(
            "Conekta orden %s canal=%s status=%s txn=%s",
            order_id,
            self.channel.value,
            charge_status,
            request.transaction_id,
        )

        if charge_status == "paid":
            return GatewayResult(outcome=GatewayOutcome.COMPLETED, external_id=order_id, raw=raw)

        if charge_status in ("pending_payment", "pending"):
            return GatewayResult(
                outcome=GatewayOutcome.PENDING,
                external_id=order_id,
                reference=pm.get("reference") or pm.get("clabe"),
                expires_at=from_unix(pm.get("expires_at")),
                raw=raw,
            )

        return GatewayResult(
            outcome=GatewayOutcome.FAILED,
            external_id=order_id,
            failure_reason=charge.get("failure_code") or charge_status or "declined",
            raw=raw,
        )

    # ---------------------------------------------------------
    # Reembolso
    # ---------------------------------------------------------
    async def refund(
        self,
        *,
        external_id: str,
        amount: Decimal,
        currency: Currency,
        reason: Optional[str] = None,
        idempotency_key: Optional[str] = None,
    ) -> RefundResult:
        try:
            order = await self.client.refund_order(
                external_id,
                {"reason": "requested_by_client", "amount": to_cents(amount)},
            )
        except ConektaDecline as e:
            # Rechazo definitivo (fondos ya liquidados, cargo no reembolsable)
            logger.warning("Conekta rechazó reembolso orden=%s code=%s", external_id, e.code)
            raise GatewayError(
                f"Conekta rechazó el reembolso: {e}", provider=PROVIDER, transient=False
            ) from e
        refund_id = _last_refund_id(order)
        logger.info("Conekta reembolso orden=%s refund=%s", external_id, refund_id)
        return RefundResult(
            provider_refund_id=refund_id,
            status=str(order.get("payment_status") or "refunded"),
            raw={"id": order.get("id"), "payment_status": order.get("payment_status")},
        )


def _first_charge(order: Dict[str, Any]) -> Dict[str, Any]:
    data = (order.get("charges") or {}).get("data") or []
    return data[0] if data and isinstance(data[0], dict) else {}


def _last_refund_id(order: Dict[str, Any]) -> Optional[str]:
    refunds = (_first_charge(order).get("refunds") or {}).get("data") or []
    if refunds and isinstance(refunds[-1], dict):
        return refunds[-1].get("id")
    return None


__all__ = ["ConektaAdapter"]
