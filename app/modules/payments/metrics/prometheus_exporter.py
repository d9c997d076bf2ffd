# -*- coding: utf-8 -*-
"""
app/modules/payments/metrics/prometheus_exporter.py

Métricas Prometheus del módulo de pagos (registro global de prometheus_client,
expuestas en /metrics por app.observability.prom).

Autor: Equipo Backend Escolar
Fecha: 2026-03-06
"""

import logging

from prometheus_client import Counter, Histogram

logger = logging.getLogger(__name__)

# --------------------------------------------------------------------------
# Definición de métricas
# --------------------------------------------------------------------------

PAYMENTS_INITIATED_TOTAL = Counter(
    "payments_initiated_total",
    "Intentos de pago por canal y resultado (completed/pending/failed/error)",
    ["channel", "outcome"],
)

GATEWAY_CALL_SECONDS = Histogram(
    "payments_gateway_call_seconds",
    "Latencia de llamadas a pasarelas (segundos)",
    ["provider", "operation"],
)

WEBHOOKS_RECEIVED_TOTAL = Counter(
    "payments_webhook_received_total",
    "Total webhooks recibidos por proveedor",
    ["provider"],
)

WEBHOOKS_OUTCOME_TOTAL = Counter(
    "payments_webhook_outcome_total",
    "Webhooks por outcome (ok/created/duplicate/ignored/error)",
    ["provider", "outcome"],
)

WEBHOOKS_REJECTED_TOTAL = Counter(
    "payments_webhook_rejected_total",
    "Webhooks rechazados por proveedor y razón",
    ["provider", "reason"],
)

WEBHOOKS_PROCESSING_SECONDS = Histogram(
    "payments_webhook_processing_seconds",
    "Tiempo de procesamiento de webhooks (segundos)",
    ["provider"],
)

REFUNDS_TOTAL = Counter(
    "payments_refunds_total",
    "Reembolsos por método y resultado",
    ["method", "outcome"],
)

RECONCILIATIONS_TOTAL = Counter(
    "payments_reconciliations_total",
    "Recálculos de saldo por estado resultante",
    ["payment_status"],
)

EXPIRED_PAYMENTS_TOTAL = Counter(
    "payments_expired_total",
    "Pagos abiertos marcados como vencidos por el barrido",
)


# --------------------------------------------------------------------------
# Funciones auxiliares
# --------------------------------------------------------------------------
def observe_payment_initiated(channel: str, outcome: str) -> None:
    PAYMENTS_INITIATED_TOTAL.labels(channel=channel, outcome=outcome).inc()


def observe_webhook_received(provider: str) -> None:
    WEBHOOKS_RECEIVED_TOTAL.labels(provider=provider).inc()


def observe_webhook_outcome(provider: str, outcome: str, duration: float) -> None:
    WEBHOOKS_OUTCOME_TOTAL.labels(provider=provider, outcome=outcome).inc()
    WEBHOOKS_PROCESSING_SECONDS.labels(provider=provider).observe(duration)
    logger.debug(f"[Prometheus] Webhook {provider} outcome={outcome} duration={duration:.4f}s")


def observe_webhook_rejected(provider: str, reason: str) -> None:
    """reason: invalid_signature"""
    WEBHOOKS_REJECTED_TOTAL.labels(provider=provider, reason=reason).inc()


def observe_refund(method: str, outcome: str) -> None:
    REFUNDS_TOTAL.labels(method=method, outcome=outcome).inc()


def observe_reconciliation(payment_status: str) -> None:
    RECONCILIATIONS_TOTAL.labels(payment_status=payment_status).inc()


def observe_expired_payments(count: int) -> None:
    if count:
        EXPIRED_PAYMENTS_TOTAL.inc(count)


__all__ = [
    "GATEWAY_CALL_SECONDS",
    "observe_payment_initiated",
    "observe_webhook_received",
    "observe_webhook_outcome",
    "observe_webhook_rejected",
    "observe_refund",
    "observe_reconciliation",
    "observe_expired_payments",
]
