# -*- coding: utf-8 -*-
"""
app/modules/enrollments/dependencies.py

Construcción del servicio de inscripciones. Comparte el motor de
conciliación de Payments para que solo exista un escritor del saldo.

Autor: Equipo Backend Escolar
Fecha: 2026-03-08
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends

from app.modules.enrollments.repositories.enrollment_repository import EnrollmentRepository
from app.modules.enrollments.services import EnrollmentEligibility, EnrollmentService
from app.modules.payments.dependencies import PaymentServices, get_payment_services


def build_enrollment_service(
    services: PaymentServices,
    eligibility: Optional[EnrollmentEligibility] = None,
) -> EnrollmentService:
    reconciliation = services.reconciliation
    return EnrollmentService(
        EnrollmentRepository(),
        reconciliation.payment_repo,
        reconciliation,
        eligibility=eligibility,
    )


def get_enrollment_service(
    services: PaymentServices = Depends(get_payment_services),
) -> EnrollmentService:
    """Dependencia FastAPI."""
    return build_enrollment_service(services)


__all__ = ["build_enrollment_service", "get_enrollment_service"]

# Fin del archivo app/modules/enrollments/dependencies.py
