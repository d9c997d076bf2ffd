# -*- coding: utf-8 -*-
"""
app/shared/config/settings_payments.py

Configuración de pagos, pasarelas (Stripe / Conekta) y webhooks.

Descripción:
    Centraliza credenciales de pasarelas, límites de montos, tiempos de
    espera, vigencias de fichas OXXO/SPEI y banderas de notificación.
    Las variables se leen con el prefijo PAYMENTS_ o por su nombre
    histórico (STRIPE_SECRET_KEY, CONEKTA_PRIVATE_KEY, ...).

Autor: Equipo Backend Escolar
Fecha: 2026-03-02
"""

from __future__ import annotations

import os
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PaymentsSettings(BaseSettings):
    """Configuración del subsistema de pagos."""

    # =========================================================================
    # STRIPE
    # =========================================================================

    stripe_secret_key: Optional[str] = Field(
        default=None,
        description="Stripe secret key (sk_live_... o sk_test_...)",
    )

    stripe_webhook_secret: Optional[str] = Field(
        default=None,
        description="Stripe webhook signing secret (whsec_...)",
    )

    stripe_webhook_tolerance_seconds: int = Field(
        default=300,
        description="Tolerancia del timestamp en la firma de webhooks Stripe (5 minutos)",
    )

    @field_validator("stripe_secret_key", mode="before")
    @classmethod
    def _load_stripe_secret_key(cls, v: Optional[str]) -> Optional[str]:
        """Fallback a STRIPE_SECRET_KEY si no viene con prefijo."""
        if v:
            return v
        return os.getenv("STRIPE_SECRET_KEY")

    @field_validator("stripe_webhook_secret", mode="before")
    @classmethod
    def _load_stripe_webhook_secret(cls, v: Optional[str]) -> Optional[str]:
        if v:
            return v
        return os.getenv("STRIPE_WEBHOOK_SECRET")

    # =========================================================================
    # CONEKTA
    # =========================================================================

    conekta_private_key: Optional[str] = Field(
        default=None,
        description="Llave privada de Conekta (key_...)",
    )

    conekta_api_base: str = Field(
        default="https://api.conekta.io",
        description="URL base de la API REST de Conekta",
    )

    conekta_api_version: str = Field(
        default="2.1.0",
        description="Versión de API enviada en el header Accept",
    )

    conekta_webhook_secret: Optional[str] = Field(
        default=None,
        description="Secreto compartido para la firma HMAC de webhooks Conekta",
    )

    @field_validator("conekta_private_key", mode="before")
    @classmethod
    def _load_conekta_private_key(cls, v: Optional[str]) -> Optional[str]:
        if v:
            return v
        return os.getenv("CONEKTA_PRIVATE_KEY")

    @field_validator("conekta_webhook_secret", mode="before")
    @classmethod
    def _load_conekta_webhook_secret(cls, v: Optional[str]) -> Optional[str]:
        if v:
            return v
        return os.getenv("CONEKTA_WEBHOOK_SECRET")

    # =========================================================================
    # LÍMITES Y VALIDACIONES
    # =========================================================================

    min_payment_amount_cents: int = Field(
        default=1,
        description="Monto mínimo de pago en centavos (0.01 MXN)",
    )

    max_payment_amount_cents: int = Field(
        default=10_000_000,
        description="Monto máximo de pago en centavos (100,000.00 MXN)",
    )

    # =========================================================================
    # TIEMPOS DE ESPERA Y VIGENCIAS
    # =========================================================================

    gateway_timeout_seconds: float = Field(
        default=15.0,
        description="Tiempo máximo por llamada a una pasarela",
    )

    oxxo_expiry_hours: int = Field(
        default=72,
        description="Vigencia de una ficha OXXO (3 días)",
    )

    spei_expiry_hours: int = Field(
        default=24,
        description="Vigencia de una referencia SPEI (24 horas)",
    )

    stale_processing_minutes: int = Field(
        default=30,
        description="Minutos tras los cuales un pago en 'processing' sin vigencia se considera abandonado",
    )
    expiry_sweep_interval_minutes: int = Field(
        default=15,
        ge=0,
        description="Intervalo del barrido de expiración programado (0 = deshabilitado)",
    )

    # =========================================================================
    # SEGURIDAD
    # =========================================================================

    allow_insecure_webhooks: bool = Field(
        default=False,
        description="Permite webhooks sin validación de firma (SOLO DESARROLLO)",
    )

    # =========================================================================
    # NOTIFICACIONES
    # =========================================================================

    notify_payment_completed: bool = Field(
        default=True,
        description="Notificar al completar un pago",
    )

    notify_payment_refunded: bool = Field(
        default=True,
        description="Notificar al procesar un reembolso",
    )

    # =========================================================================
    # CONFIGURACIÓN DE PYDANTIC
    # =========================================================================

    model_config = SettingsConfigDict(
        env_prefix="PAYMENTS_",
        validate_default=True,
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


# Singleton global
_payments_settings: Optional[PaymentsSettings] = None


def get_payments_settings() -> PaymentsSettings:
    """
    Obtiene la instancia global de configuración de pagos.

    Returns:
        PaymentsSettings: Configuración de pagos
    """
    global _payments_settings
    if _payments_settings is None:
        _payments_settings = PaymentsSettings()
    return _payments_settings


def reset_payments_settings() -> None:
    """Descarta el singleton (los tests lo usan tras cambiar variables de entorno)."""
    global _payments_settings
    _payments_settings = None


__all__ = [
    "PaymentsSettings",
    "get_payments_settings",
    "reset_payments_settings",
]
# Fin del archivo app/shared/config/settings_payments.py
