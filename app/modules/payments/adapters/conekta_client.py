# -*- coding: utf-8 -*-
"""
app/modules/payments/adapters/conekta_client.py

Cliente HTTP mínimo para la API REST de Conekta (httpx async).

- Autenticación Bearer con la llave privada
- Header Accept con la versión de API (application/vnd.conekta-v2.1.0+json)
- Timeouts explícitos acotados por gateway_timeout_seconds
- Mapeo de errores:
    402 (tarjeta declinada)      → ConektaDecline (resultado de negocio)
    5xx / red / timeout          → GatewayError transitorio
    otros 4xx (auth, parámetros) → GatewayError no transitorio

Autor: Equipo Backend Escolar
Fecha: 2026-03-06
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional

import httpx

from app.shared.config.settings_payments import PaymentsSettings, get_payments_settings
from app.shared.errors import GatewayError
from app.modules.payments.metrics import GATEWAY_CALL_SECONDS

logger = logging.getLogger(__name__)

PROVIDER = "conekta"


class ConektaDecline(Exception):
    """La pasarela rechazó el cargo (402). No es un error de infraestructura."""

    def __init__(self, code: str, message: str, order_id: Optional[str] = None):
        self.code = code
        self.order_id = order_id
        super().__init__(message)


class ConektaClient:
    def __init__(
        self,
        settings: Optional[PaymentsSettings] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings or get_payments_settings()
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self.settings.conekta_private_key)

    def _headers(self) -> Dict[str, str]:
        return {
            "Accept": f"application/vnd.conekta-v{self.settings.conekta_api_version}+json",
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.settings.conekta_private_key}",
            "Accept-Language": "es",
        }

    def _timeout(self) -> httpx.Timeout:
        total = self.settings.gateway_timeout_seconds
        return httpx.Timeout(total, connect=min(5.0, total))

    async def _post(self, operation: str, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        if not self.is_configured:
            raise GatewayError("Conekta no está configurado", provider=PROVIDER, transient=False)

        started = time.perf_counter()
        try:
            async with httpx.AsyncClient(
                base_url=self.settings.conekta_api_base,
                timeout=self._timeout(),
                transport=self._transport,
            ) as client:
                resp = await client.post(path, json=payload, headers=self._headers())
        except httpx.TimeoutException as e:
            logger.error("Conekta %s excedió el tiempo de espera", operation)
            raise GatewayError("Tiempo de espera agotado con Conekta", provider=PROVIDER) from e
        except httpx.HTTPError as e:
            logger.error("Conekta %s error de red: %r", operation, e)
            raise GatewayError("No fue posible contactar a Conekta", provider=PROVIDER) from e
        finally:
            GATEWAY_CALL_SECONDS.labels(provider=PROVIDER, operation=operation).observe(
                time.perf_counter() - started
            )

        body = _safe_json(resp)

        if resp.status_code == 402:
            detail = _first_detail(body)
            raise ConektaDecline(
                code=detail.get("code") or "card_declined",
                message=detail.get("message") or "Cargo declinado",
                order_id=_declined_order_id(body),
            )

        if resp.status_code >= 500:
            logger.error("Conekta %s HTTP %s", operation, resp.status_code)
            raise GatewayError("Conekta no está disponible", provider=PROVIDER)

        if resp.status_code >= 400:
            detail = _first_detail(body)
            logger.error(
                "Conekta %s HTTP %s code=%s debug=%s",
                operation,
                resp.status_code,
                detail.get("code"),
                detail.get("debug_message"),
            )
            raise GatewayError("Conekta rechazó la solicitud", provider=PROVIDER, transient=False)

        return body

    async def create_order(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._post("charge", "/orders", payload)

    async def refund_order(self, order_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._post("refund", f"/orders/{order_id}/refunds", payload)


def _safe_json(resp: httpx.Response) -> Dict[str, Any]:
    try:
        data = resp.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def _first_detail(body: Dict[str, Any]) -> Dict[str, Any]:
    details = body.get("details") or []
    if details and isinstance(details[0], dict):
        return details[0]
    return {}


def _declined_order_id(body: Dict[str, Any]) -> Optional[str]:
    # Conekta puede adjuntar la orden declinada en "data"
    data = body.get("data")
    if isinstance(data, dict):
        return data.get("id")
    return None


__all__ = ["ConektaClient", "ConektaDecline"]
