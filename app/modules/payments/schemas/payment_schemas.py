# -*- coding: utf-8 -*-
"""
app/modules/payments/schemas/payment_schemas.py

Esquemas para iniciar y consultar pagos.

Autor: Equipo Backend Escolar
Fecha: 2026-03-08
"""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.modules.enrollments.enums import EnrollmentPaymentStatus
from app.modules.payments.enums import (
    Currency,
    GatewayChannel,
    PaymentMethod,
    PaymentStatus,
    PaymentType,
)


class PayerIn(BaseModel):
    """Datos del pagador; Conekta los exige para crear la orden."""

    name: str = Field(min_length=1, max_length=200)
    email: str = Field(min_length=3, max_length=254)
    phone: Optional[str] = Field(default=None, max_length=30)


class PaymentCreate(BaseModel):
    enrollment_id: uuid.UUID
    amount: Decimal = Field(description="Monto en la moneda indicada, máximo 2 decimales.")
    currency: Currency = Currency.MXN
    channel: GatewayChannel
    payment_method: Optional[PaymentMethod] = Field(
        default=None,
        description="Obligatorio en canal manual (cash/card/transfer); se infiere en pasarelas.",
    )
    payment_type: PaymentType = PaymentType.PARTIAL
    description: Optional[str] = Field(default=None, max_length=500)
    payment_token: Optional[str] = Field(
        default=None,
        description="PaymentMethod de Stripe (pm_...) o token de tarjeta Conekta.",
    )
    payer: Optional[PayerIn] = None
    installment_number: Optional[int] = Field(default=None, ge=1)
    total_installments: Optional[int] = Field(default=None, ge=1)


class PaymentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    enrollment_id: uuid.UUID
    amount: Decimal
    currency: Currency
    payment_method: PaymentMethod
    payment_type: PaymentType
    status: PaymentStatus
    transaction_id: str
    external_payment_id: Optional[str] = None
    receipt_number: Optional[str] = None
    payment_reference: Optional[str] = None
    expires_at: Optional[datetime] = None
    failure_reason: Optional[str] = None
    refund_amount: Decimal
    refund_reason: Optional[str] = None
    refunded_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    created_at: datetime


class EnrollmentBalanceOut(BaseModel):
    """Saldo de la inscripción después de la operación."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    total_amount: Decimal
    discount_amount: Decimal
    paid_amount: Decimal
    remaining_amount: Decimal
    payment_status: EnrollmentPaymentStatus


class PaymentResult(BaseModel):
    payment: PaymentOut
    enrollment: EnrollmentBalanceOut


class ExpirySweepOut(BaseModel):
    expired: int
    expired_payment_ids: list[uuid.UUID]
    enrollment_ids: list[uuid.UUID]


class WebhookAck(BaseModel):
    received: bool = True
    status: str
    event_id: Optional[str] = None
    payment_id: Optional[str] = None


__all__ = [
    "PayerIn",
    "PaymentCreate",
    "PaymentOut",
    "EnrollmentBalanceOut",
    "PaymentResult",
    "ExpirySweepOut",
    "WebhookAck",
]

# Fin del archivo app/modules/payments/schemas/payment_schemas.py
