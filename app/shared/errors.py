# -*- coding: utf-8 -*-
"""
app/shared/errors.py

Excepciones de dominio compartidas por inscripciones y pagos.

Cada excepción lleva un `error_code` estable (para la UI y los tests) y un
`http_status` que usa el handler de FastAPI registrado en
app.shared.middleware.exception_handler. El mensaje es seguro para el
usuario: los detalles internos de las pasarelas se loguean, no se exponen.

Autor: Equipo Backend Escolar
Fecha: 2026-03-03
"""

from __future__ import annotations

from typing import Any, Optional


class DomainError(Exception):
    """Base de todos los errores de negocio."""

    error_code: str = "domain_error"
    http_status: int = 400

    def __init__(self, message: str, *, error_code: Optional[str] = None):
        self.message = message
        if error_code:
            self.error_code = error_code
        super().__init__(message)

    def to_detail(self) -> dict[str, Any]:
        return {"error_code": self.error_code, "message": self.message}


class ValidationError(DomainError):
    """Entrada mal formada: monto no positivo, fechas invertidas, canal inválido."""

    error_code = "validation_error"
    http_status = 422


class NotFoundError(DomainError):
    """Se lanza cuando no existe la inscripción o el pago referenciado."""

    error_code = "not_found"
    http_status = 404

    def __init__(self, entity: str, identifier: Any):
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} no encontrado: {identifier}")


class InvalidStateError(DomainError):
    """La entidad existe pero su estado no permite la operación."""

    error_code = "invalid_state"
    http_status = 409

    def __init__(self, message: str, *, current_state: Optional[str] = None):
        self.current_state = current_state
        super().__init__(message)


class ConflictError(DomainError):
    """Violación de unicidad (p. ej. inscripción duplicada estudiante/curso)."""

    error_code = "conflict"
    http_status = 409


class PermissionDeniedError(DomainError):
    """El principal no tiene permisos para la operación."""

    error_code = "permission_denied"
    http_status = 403


class GatewayError(DomainError):
    """
    Falla de red, timeout o error del procesador de pagos.

    `transient` indica si reintentar más tarde tiene sentido (5xx, timeouts).
    """

    error_code = "gateway_error"
    http_status = 502

    def __init__(self, message: str, *, provider: str, transient: bool = True):
        self.provider = provider
        self.transient = transient
        super().__init__(message)


class PaymentCreationFailed(DomainError):
    """
    No se pudo crear el cargo. El intento queda registrado como 'failed'
    con su transaction_id; `reason` es un código seguro para el usuario.
    """

    error_code = "payment_creation_failed"
    http_status = 502

    def __init__(self, reason: str, *, transaction_id: Optional[str] = None):
        self.reason = reason
        self.transaction_id = transaction_id
        super().__init__(f"No fue posible procesar el pago ({reason})")

    def to_detail(self) -> dict[str, Any]:
        detail = super().to_detail()
        detail["reason"] = self.reason
        if self.transaction_id:
            detail["transaction_id"] = self.transaction_id
        return detail


class SignatureVerificationError(DomainError):
    """Firma de webhook ausente o inválida. El ledger no se toca."""

    error_code = "invalid_signature"
    http_status = 400

    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(f"Firma de webhook {provider} inválida")


__all__ = [
    "DomainError",
    "ValidationError",
    "NotFoundError",
    "InvalidStateError",
    "ConflictError",
    "PermissionDeniedError",
    "GatewayError",
    "PaymentCreationFailed",
    "SignatureVerificationError",
]

# Fin del archivo app/shared/errors.py
