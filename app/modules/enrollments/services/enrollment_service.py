# -*- coding: utf-8 -*-
"""
app/modules/enrollments/services/enrollment_service.py

Ciclo de vida de la inscripción.

Responsabilidades:
- Alta (solo admin) con validación de fechas, monto y elegibilidad
- Transiciones de estado: activar, suspender, cancelar, completar
- Descuento (delegado al motor de conciliación)
- Estado de cuenta (inscripción + historial de pagos)

Los cambios de estado nunca tocan campos monetarios. Solo hace flush;
el commit lo hace la fachada.

Autor: Equipo Backend Escolar
Fecha: 2026-03-07
"""

from __future__ import annotations

import logging
import secrets
import uuid
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.auth_context import Principal, PrincipalRole, ensure_admin
from app.shared.errors import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from app.shared.utils.datetime_helpers import utcnow
from app.modules.enrollments.enums import (
    EnrollmentPaymentStatus,
    EnrollmentStatus,
    PaymentPlan,
)
from app.modules.enrollments.models.enrollment_models import Enrollment
from app.modules.enrollments.repositories.enrollment_repository import EnrollmentRepository
from app.modules.enrollments.services.eligibility import AllowAllEligibility, EnrollmentEligibility
from app.modules.payments.models.payment_models import Payment
from app.modules.payments.repositories.payment_repository import PaymentRepository
from app.modules.payments.services.reconciliation_service import ReconciliationService
from app.modules.payments.utils.money import ZERO, has_at_most_two_decimals, to_money

logger = logging.getLogger(__name__)

# Estados desde los que se permite cada transición
_ACTIVATABLE = {EnrollmentStatus.PENDING, EnrollmentStatus.SUSPENDED}
_SUSPENDABLE = {EnrollmentStatus.ACTIVE}
_FINAL = {EnrollmentStatus.CANCELLED, EnrollmentStatus.COMPLETED}


@dataclass
class EnrollmentLedger:
    enrollment: Enrollment
    payments: Sequence[Payment]


def generate_certificate_number(today: Optional[date] = None) -> str:
    today = today or utcnow().date()
    return f"CERT-{today:%Y%m%d}-{secrets.token_hex(4).upper()}"


class EnrollmentService:
    def __init__(
        self,
        enrollment_repo: EnrollmentRepository,
        payment_repo: PaymentRepository,
        reconciliation_service: ReconciliationService,
        eligibility: Optional[EnrollmentEligibility] = None,
    ) -> None:
        self.enrollment_repo = enrollment_repo
        self.payment_repo = payment_repo
        self.reconciliation_service = reconciliation_service
        self.eligibility = eligibility or AllowAllEligibility()

    # ---------------------------------------------------------
    # Consultas
    # ---------------------------------------------------------
    async def get_enrollment(self, session: AsyncSession, enrollment_id: uuid.UUID) -> Enrollment:
        enrollment = await self.enrollment_repo.get(session, enrollment_id)
        if enrollment is None:
            raise NotFoundError("Inscripción", enrollment_id)
        return enrollment

    async def get_ledger(
        self,
        session: AsyncSession,
        enrollment_id: uuid.UUID,
        principal: Principal,
    ) -> EnrollmentLedger:
        """Inscripción con su historial completo de pagos (admin, estudiante o docente)."""
        enrollment = await self.get_enrollment(session, enrollment_id)
        self._ensure_participant(enrollment, principal)
        payments = await self.payment_repo.list_by_enrollment(session, enrollment_id)
        return EnrollmentLedger(enrollment=enrollment, payments=payments)

    # ---------------------------------------------------------
    # Alta
    # ---------------------------------------------------------
    async def create_enrollment(
        self,
        session: AsyncSession,
        *,
        principal: Principal,
        student_id: uuid.UUID,
        course_id: uuid.UUID,
        teacher_id: uuid.UUID,
        start_date: date,
        end_date: date,
        total_amount: Decimal,
        payment_plan: PaymentPlan = PaymentPlan.FULL,
        next_payment_date: Optional[date] = None,
        activate: bool = True,
        notes: Optional[str] = None,
    ) -> Enrollment:
        """
        Crea la inscripción con saldo pendiente.

        Raises:
            PermissionDeniedError: si el principal no es admin
            ValidationError: fechas invertidas o monto no positivo
            ConflictError: ya existe una inscripción no cancelada (estudiante, curso)
        """
        ensure_admin(principal)

        if start_date >= end_date:
            raise ValidationError("La fecha de fin debe ser posterior a la de inicio")
        if not isinstance(total_amount, Decimal) or total_amount <= 0:
            raise ValidationError("El monto total debe ser mayor a cero")
        if not has_at_most_two_decimals(total_amount):
            raise ValidationError("El monto total admite máximo 2 decimales")

        await self.eligibility.check(
            session,
            student_id=student_id,
            course_id=course_id,
            teacher_id=teacher_id,
        )

        existing = await self.enrollment_repo.find_open_by_student_course(
            session,
            student_id=student_id,
            course_id=course_id,
        )
        if existing is not None:
            raise ConflictError("El estudiante ya está inscrito en este curso")

        try:
            # Una carrera con otra alta choca con el índice único parcial
            enrollment = await self.enrollment_repo.create(
                session,
                student_id=student_id,
                course_id=course_id,
                teacher_id=teacher_id,
                status=EnrollmentStatus.ACTIVE if activate else EnrollmentStatus.PENDING,
                start_date=start_date,
                end_date=end_date,
                total_amount=to_money(total_amount),
                discount_amount=ZERO,
                paid_amount=ZERO,
                payment_status=EnrollmentPaymentStatus.PENDING,
                payment_plan=payment_plan,
                next_payment_date=next_payment_date,
                notes=notes,
            )
        except IntegrityError as e:
            logger.info("Alta duplicada student=%s course=%s: %s", student_id, course_id, e.orig)
            raise ConflictError("El estudiante ya está inscrito en este curso") from e

        logger.info(
            "Inscripción creada id=%s student=%s course=%s total=%s estado=%s",
            enrollment.id,
            student_id,
            course_id,
            enrollment.total_amount,
            enrollment.status.value,
        )
        return enrollment

    # ---------------------------------------------------------
    # Transiciones
    # ---------------------------------------------------------
    async def activate(self, session: AsyncSession, enrollment_id: uuid.UUID, principal: Principal) -> Enrollment:
        ensure_admin(principal)
        enrollment = await self.reconciliation_service.lock_enrollment(session, enrollment_id)
        if enrollment.status not in _ACTIVATABLE:
            raise InvalidStateError(
                "La inscripción no puede activarse desde su estado actual",
                current_state=enrollment.status.value,
            )
        return await self._transition(session, enrollment, EnrollmentStatus.ACTIVE)

    async def suspend(self, session: AsyncSession, enrollment_id: uuid.UUID, principal: Principal) -> Enrollment:
        ensure_admin(principal)
        enrollment = await self.reconciliation_service.lock_enrollment(session, enrollment_id)
        if enrollment.status not in _SUSPENDABLE:
            raise InvalidStateError(
                "Solo una inscripción activa puede suspenderse",
                current_state=enrollment.status.value,
            )
        return await self._transition(session, enrollment, EnrollmentStatus.SUSPENDED)

    async def cancel(
        self,
        session: AsyncSession,
        enrollment_id: uuid.UUID,
        principal: Principal,
        *,
        reason: Optional[str] = None,
    ) -> Enrollment:
        """Admin, el estudiante o el docente. No aplica a inscripciones cerradas."""
        enrollment = await self.reconciliation_service.lock_enrollment(session, enrollment_id)
        self._ensure_participant(enrollment, principal)
        if enrollment.status == EnrollmentStatus.CANCELLED:
            raise InvalidStateError("La inscripción ya está cancelada", current_state=enrollment.status.value)
        if enrollment.status == EnrollmentStatus.COMPLETED:
            raise InvalidStateError(
                "No se puede cancelar una inscripción completada",
                current_state=enrollment.status.value,
            )
        if reason:
            enrollment.notes = f"{enrollment.notes or ''}\nCancelada: {reason}".strip()
        return await self._transition(session, enrollment, EnrollmentStatus.CANCELLED)

    async def complete(
        self,
        session: AsyncSession,
        enrollment_id: uuid.UUID,
        principal: Principal,
        *,
        final_grade: Optional[Decimal] = None,
        issue_certificate: bool = False,
    ) -> Enrollment:
        """Admin o el docente del curso."""
        enrollment = await self.reconciliation_service.lock_enrollment(session, enrollment_id)
        if not (principal.is_admin or (
            principal.role == PrincipalRole.TEACHER and principal.user_id == enrollment.teacher_id
        )):
            raise PermissionDeniedError("Solo el docente del curso puede completar la inscripción")
        if enrollment.status in _FINAL:
            raise InvalidStateError(
                "La inscripción ya está cerrada",
                current_state=enrollment.status.value,
            )

        enrollment.completion_date = utcnow()
        if final_grade is not None:
            enrollment.final_grade = final_grade
        if issue_certificate and not enrollment.certificate_number:
            enrollment.certificate_number = generate_certificate_number()
            enrollment.certificate_issued = True
        return await self._transition(session, enrollment, EnrollmentStatus.COMPLETED)

    # ---------------------------------------------------------
    # Descuento
    # ---------------------------------------------------------
    async def apply_discount(
        self,
        session: AsyncSession,
        enrollment_id: uuid.UUID,
        principal: Principal,
        *,
        amount: Decimal,
        reason: str,
    ) -> Enrollment:
        ensure_admin(principal)
        return await self.reconciliation_service.apply_discount(
            session,
            enrollment_id,
            amount=amount,
            reason=reason,
        )

    # ---------------------------------------------------------
    # Helpers
    # ---------------------------------------------------------
    async def _transition(
        self,
        session: AsyncSession,
        enrollment: Enrollment,
        new_status: EnrollmentStatus,
    ) -> Enrollment:
        previous = enrollment.status
        enrollment.status = new_status
        await session.flush()
        logger.info("Inscripción %s: %s → %s", enrollment.id, previous.value, new_status.value)
        return enrollment

    @staticmethod
    def _ensure_participant(enrollment: Enrollment, principal: Principal) -> None:
        if principal.is_admin:
            return
        if principal.user_id in (enrollment.student_id, enrollment.teacher_id):
            return
        raise PermissionDeniedError("Solo puedes consultar tus propias inscripciones")


__all__ = ["EnrollmentService", "EnrollmentLedger", "generate_certificate_number"]

# Fin del archivo app/modules/enrollments/services/enrollment_service.py
