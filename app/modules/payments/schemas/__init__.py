# -*- coding: utf-8 -*-
"""
app/modules/payments/schemas/__init__.py

Esquemas Pydantic del módulo Payments.
"""

from __future__ import annotations

from .payment_schemas import (
    PayerIn,
    PaymentCreate,
    PaymentOut,
    EnrollmentBalanceOut,
    PaymentResult,
    ExpirySweepOut,
    WebhookAck,
)
from .refund_schemas import RefundCreate, RefundResult

__all__ = [
    "PayerIn",
    "PaymentCreate",
    "PaymentOut",
    "EnrollmentBalanceOut",
    "PaymentResult",
    "ExpirySweepOut",
    "WebhookAck",
    "RefundCreate",
    "RefundResult",
]
