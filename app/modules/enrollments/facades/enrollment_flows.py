# -*- coding: utf-8 -*-
"""
app/modules/enrollments/facades/enrollment_flows.py

Fachadas de inscripciones: dueñas de la transacción.

Commit al terminar; ante cualquier error rollback y se relanza.

Autor: Equipo Backend Escolar
Fecha: 2026-03-08
"""

from __future__ import annotations

import uuid
from decimal import Decimal
from typing import Awaitable, Callable, Literal, Optional, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.auth_context import Principal
from app.modules.enrollments.models.enrollment_models import Enrollment
from app.modules.enrollments.schemas import EnrollmentCreate
from app.modules.enrollments.services import EnrollmentService

T = TypeVar("T")

StatusAction = Literal["activate", "suspend", "cancel"]


async def _in_transaction(session: AsyncSession, work: Callable[[], Awaitable[T]]) -> T:
    try:
        result = await work()
    except Exception:
        await session.rollback()
        raise
    await session.commit()
    return result


async def create_enrollment(
    session: AsyncSession,
    *,
    data: EnrollmentCreate,
    principal: Principal,
    service: EnrollmentService,
) -> Enrollment:
    return await _in_transaction(
        session,
        lambda: service.create_enrollment(
            session,
            principal=principal,
            student_id=data.student_id,
            course_id=data.course_id,
            teacher_id=data.teacher_id,
            start_date=data.start_date,
            end_date=data.end_date,
            total_amount=data.total_amount,
            payment_plan=data.payment_plan,
            next_payment_date=data.next_payment_date,
            activate=data.activate,
            notes=data.notes,
        ),
    )


async def change_status(
    session: AsyncSession,
    *,
    action: StatusAction,
    enrollment_id: uuid.UUID,
    principal: Principal,
    service: EnrollmentService,
    reason: Optional[str] = None,
) -> Enrollment:
    if action == "activate":
        work = lambda: service.activate(session, enrollment_id, principal)  # noqa: E731
    elif action == "suspend":
        work = lambda: service.suspend(session, enrollment_id, principal)  # noqa: E731
    else:
        work = lambda: service.cancel(session, enrollment_id, principal, reason=reason)  # noqa: E731
    return await _in_transaction(session, work)


async def complete_enrollment(
    session: AsyncSession,
    *,
    enrollment_id: uuid.UUID,
    principal: Principal,
    service: EnrollmentService,
    final_grade: Optional[Decimal] = None,
    issue_certificate: bool = False,
) -> Enrollment:
    return await _in_transaction(
        session,
        lambda: service.complete(
            session,
            enrollment_id,
            principal,
            final_grade=final_grade,
            issue_certificate=issue_certificate,
        ),
    )


async def apply_discount(
    session: AsyncSession,
    *,
    enrollment_id: uuid.UUID,
    amount: Decimal,
    reason: str,
    principal: Principal,
    service: EnrollmentService,
) -> Enrollment:
    return await _in_transaction(
        session,
        lambda: service.apply_discount(
            session,
            enrollment_id,
            principal,
            amount=amount,
            reason=reason,
        ),
    )


__all__ = ["create_enrollment", "change_status", "complete_enrollment", "apply_discount"]

# Fin del archivo app/modules/enrollments/facades/enrollment_flows.py
