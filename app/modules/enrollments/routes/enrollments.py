# -*- coding: utf-8 -*-
"""
app/modules/enrollments/routes/enrollments.py

Endpoints de inscripciones:
- POST /enrollments                      alta (admin)
- GET  /enrollments/{id}/ledger          estado de cuenta
- POST /enrollments/{id}/activate        (admin)
- POST /enrollments/{id}/suspend         (admin)
- POST /enrollments/{id}/cancel          admin, estudiante o docente
- POST /enrollments/{id}/complete        admin o docente
- POST /enrollments/{id}/discount        (admin)

Autor: Equipo Backend Escolar
Fecha: 2026-03-08
"""

from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.auth_context import Principal, get_current_principal, require_admin
from app.shared.database.database import get_async_session
from app.modules.enrollments import facades
from app.modules.enrollments.dependencies import get_enrollment_service
from app.modules.enrollments.facades.enrollment_flows import StatusAction
from app.modules.enrollments.schemas import (
    DiscountApply,
    EnrollmentCancel,
    EnrollmentComplete,
    EnrollmentCreate,
    EnrollmentLedgerOut,
    EnrollmentOut,
    LedgerPaymentOut,
)
from app.modules.enrollments.services import EnrollmentService

router = APIRouter(prefix="/enrollments", tags=["enrollments"])


@router.post("", response_model=EnrollmentOut, status_code=status.HTTP_201_CREATED)
async def create_enrollment(
    data: EnrollmentCreate,
    principal: Principal = Depends(require_admin),
    session: AsyncSession = Depends(get_async_session),
    service: EnrollmentService = Depends(get_enrollment_service),
) -> EnrollmentOut:
    enrollment = await facades.create_enrollment(session, data=data, principal=principal, service=service)
    return EnrollmentOut.model_validate(enrollment)


@router.get("/{enrollment_id}/ledger", response_model=EnrollmentLedgerOut)
async def get_ledger(
    enrollment_id: uuid.UUID,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_async_session),
    service: EnrollmentService = Depends(get_enrollment_service),
) -> EnrollmentLedgerOut:
    ledger = await service.get_ledger(session, enrollment_id, principal)
    return EnrollmentLedgerOut(
        enrollment=EnrollmentOut.model_validate(ledger.enrollment),
        payments=[LedgerPaymentOut.model_validate(p) for p in ledger.payments],
    )


async def _change_status(
    action: StatusAction,
    enrollment_id: uuid.UUID,
    principal: Principal,
    session: AsyncSession,
    service: EnrollmentService,
    reason: Optional[str] = None,
) -> EnrollmentOut:
    enrollment = await facades.change_status(
        session,
        action=action,
        enrollment_id=enrollment_id,
        principal=principal,
        service=service,
        reason=reason,
    )
    return EnrollmentOut.model_validate(enrollment)


@router.post("/{enrollment_id}/activate", response_model=EnrollmentOut)
async def activate_enrollment(
    enrollment_id: uuid.UUID,
    principal: Principal = Depends(require_admin),
    session: AsyncSession = Depends(get_async_session),
    service: EnrollmentService = Depends(get_enrollment_service),
) -> EnrollmentOut:
    return await _change_status("activate", enrollment_id, principal, session, service)


@router.post("/{enrollment_id}/suspend", response_model=EnrollmentOut)
async def suspend_enrollment(
    enrollment_id: uuid.UUID,
    principal: Principal = Depends(require_admin),
    session: AsyncSession = Depends(get_async_session),
    service: EnrollmentService = Depends(get_enrollment_service),
) -> EnrollmentOut:
    return await _change_status("suspend", enrollment_id, principal, session, service)


@router.post("/{enrollment_id}/cancel", response_model=EnrollmentOut)
async def cancel_enrollment(
    enrollment_id: uuid.UUID,
    data: Optional[EnrollmentCancel] = None,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_async_session),
    service: EnrollmentService = Depends(get_enrollment_service),
) -> EnrollmentOut:
    reason = data.reason if data else None
    return await _change_status("cancel", enrollment_id, principal, session, service, reason=reason)


@router.post("/{enrollment_id}/complete", response_model=EnrollmentOut)
async def complete_enrollment(
    enrollment_id: uuid.UUID,
    data: Optional[EnrollmentComplete] = None,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_async_session),
    service: EnrollmentService = Depends(get_enrollment_service),
) -> EnrollmentOut:
    data = data or EnrollmentComplete()
    enrollment = await facades.complete_enrollment(
        session,
        enrollment_id=enrollment_id,
        principal=principal,
        service=service,
        final_grade=data.final_grade,
        issue_certificate=data.issue_certificate,
    )
    return EnrollmentOut.model_validate(enrollment)


@router.post("/{enrollment_id}/discount", response_model=EnrollmentOut)
async def apply_discount(
    enrollment_id: uuid.UUID,
    data: DiscountApply,
    principal: Principal = Depends(require_admin),
    session: AsyncSession = Depends(get_async_session),
    service: EnrollmentService = Depends(get_enrollment_service),
) -> EnrollmentOut:
    enrollment = await facades.apply_discount(
        session,
        enrollment_id=enrollment_id,
        amount=data.amount,
        reason=data.reason,
        principal=principal,
        service=service,
    )
    return EnrollmentOut.model_validate(enrollment)


__all__ = ["router"]

# Fin del archivo app/modules/enrollments/routes/enrollments.py
