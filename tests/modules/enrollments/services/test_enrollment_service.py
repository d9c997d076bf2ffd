# -*- coding: utf-8 -*-
"""
tests/modules/enrollments/services/test_enrollment_service.py

Ciclo de vida de inscripciones: alta, transiciones, descuento y estado de cuenta.
"""

import re
import uuid
from datetime import date
from decimal import Decimal

import pytest

from app.shared.auth_context import Principal, PrincipalRole
from app.shared.errors import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from app.modules.enrollments.dependencies import build_enrollment_service
from app.modules.enrollments.enums import EnrollmentPaymentStatus, EnrollmentStatus, PaymentPlan
from app.modules.enrollments.facades import change_status, create_enrollment
from app.modules.enrollments.schemas import EnrollmentCreate
from app.modules.enrollments.services import generate_certificate_number
from app.modules.payments.enums import GatewayChannel, PaymentMethod


@pytest.fixture
def enrollment_service(services):
    return build_enrollment_service(services)


def _new(student, teacher, **overrides):
    data = {
        "student_id": student.user_id,
        "course_id": uuid.uuid4(),
        "teacher_id": teacher.user_id,
        "start_date": date(2026, 1, 10),
        "end_date": date(2026, 6, 30),
        "total_amount": Decimal("1500.00"),
    }
    data.update(overrides)
    return data


class TestCreate:
    async def test_admin_creates_active_enrollment(self, session, enrollment_service, admin, student, teacher):
        enrollment = await enrollment_service.create_enrollment(
            session, principal=admin, **_new(student, teacher, payment_plan=PaymentPlan.MONTHLY)
        )

        assert enrollment.status == EnrollmentStatus.ACTIVE
        assert enrollment.paid_amount == Decimal("0.00")
        assert enrollment.discount_amount == Decimal("0.00")
        assert enrollment.remaining_amount == Decimal("1500.00")
        assert enrollment.payment_status == EnrollmentPaymentStatus.PENDING
        assert enrollment.payment_plan == PaymentPlan.MONTHLY

    async def test_can_start_pending(self, session, enrollment_service, admin, student, teacher):
        enrollment = await enrollment_service.create_enrollment(
            session, principal=admin, activate=False, **_new(student, teacher)
        )
        assert enrollment.status == EnrollmentStatus.PENDING

    async def test_only_admin(self, session, enrollment_service, student, teacher):
        with pytest.raises(PermissionDeniedError):
            await enrollment_service.create_enrollment(session, principal=student, **_new(student, teacher))

    async def test_dates_must_be_ordered(self, session, enrollment_service, admin, student, teacher):
        with pytest.raises(ValidationError):
            await enrollment_service.create_enrollment(
                session,
                principal=admin,
                **_new(student, teacher, start_date=date(2026, 6, 30), end_date=date(2026, 6, 30)),
            )

    @pytest.mark.parametrize("total", [Decimal("0"), Decimal("-10.00"), Decimal("99.999")])
    async def test_total_must_be_positive_money(self, session, enrollment_service, admin, student, teacher, total):
        with pytest.raises(ValidationError):
            await enrollment_service.create_enrollment(
                session, principal=admin, **_new(student, teacher, total_amount=total)
            )

    async def test_duplicate_open_enrollment(self, session, enrollment_service, admin, student, teacher):
        course_id = uuid.uuid4()
        await enrollment_service.create_enrollment(
            session, principal=admin, **_new(student, teacher, course_id=course_id)
        )
        with pytest.raises(ConflictError):
            await enrollment_service.create_enrollment(
                session, principal=admin, **_new(student, teacher, course_id=course_id)
            )

    async def test_cancelled_enrollment_allows_reenrollment(
        self, session, enrollment_service, admin, student, teacher
    ):
        course_id = uuid.uuid4()
        first = await enrollment_service.create_enrollment(
            session, principal=admin, **_new(student, teacher, course_id=course_id)
        )
        await enrollment_service.cancel(session, first.id, admin)

        second = await enrollment_service.create_enrollment(
            session, principal=admin, **_new(student, teacher, course_id=course_id)
        )
        assert second.id != first.id

    async def test_eligibility_hook_can_reject(self, session, services, admin, student, teacher):
        class ClosedCourse:
            async def check(self, session, *, student_id, course_id, teacher_id):
                raise ValidationError("Curso sin cupo")

        service = build_enrollment_service(services, eligibility=ClosedCourse())
        with pytest.raises(ValidationError, match="cupo"):
            await service.create_enrollment(session, principal=admin, **_new(student, teacher))


class TestTransitions:
    async def test_suspend_and_reactivate(self, session, enrollment_service, admin, make_enrollment):
        enrollment = await make_enrollment()

        await enrollment_service.suspend(session, enrollment.id, admin)
        assert enrollment.status == EnrollmentStatus.SUSPENDED

        await enrollment_service.activate(session, enrollment.id, admin)
        assert enrollment.status == EnrollmentStatus.ACTIVE

    async def test_cannot_suspend_pending(self, session, enrollment_service, admin, make_enrollment):
        enrollment = await make_enrollment(status=EnrollmentStatus.PENDING)
        with pytest.raises(InvalidStateError):
            await enrollment_service.suspend(session, enrollment.id, admin)

    async def test_cannot_activate_completed(self, session, enrollment_service, admin, make_enrollment):
        enrollment = await make_enrollment(status=EnrollmentStatus.COMPLETED)
        with pytest.raises(InvalidStateError):
            await enrollment_service.activate(session, enrollment.id, admin)

    async def test_student_cancels_own_with_reason(self, session, enrollment_service, student, make_enrollment):
        enrollment = await make_enrollment()

        await enrollment_service.cancel(session, enrollment.id, student, reason="Cambio de horario")

        assert enrollment.status == EnrollmentStatus.CANCELLED
        assert "Cancelada: Cambio de horario" in enrollment.notes

    async def test_cancel_twice(self, session, enrollment_service, admin, make_enrollment):
        enrollment = await make_enrollment(status=EnrollmentStatus.CANCELLED)
        with pytest.raises(InvalidStateError):
            await enrollment_service.cancel(session, enrollment.id, admin)

    async def test_cannot_cancel_completed(self, session, enrollment_service, admin, make_enrollment):
        enrollment = await make_enrollment(status=EnrollmentStatus.COMPLETED)
        with pytest.raises(InvalidStateError):
            await enrollment_service.cancel(session, enrollment.id, admin)

    async def test_stranger_cannot_cancel(self, session, enrollment_service, make_enrollment):
        enrollment = await make_enrollment()
        stranger = Principal(user_id=uuid.uuid4(), role=PrincipalRole.STUDENT)
        with pytest.raises(PermissionDeniedError):
            await enrollment_service.cancel(session, enrollment.id, stranger)

    async def test_transitions_keep_money_fields(self, session, services, enrollment_service, admin, make_enrollment):
        enrollment = await make_enrollment()
        await services.payments.initiate_payment(
            session,
            principal=admin,
            enrollment_id=enrollment.id,
            amount=Decimal("500.00"),
            channel=GatewayChannel.MANUAL,
            payment_method=PaymentMethod.CASH,
        )

        await enrollment_service.suspend(session, enrollment.id, admin)
        await enrollment_service.cancel(session, enrollment.id, admin)

        assert enrollment.paid_amount == Decimal("500.00")
        assert enrollment.payment_status == EnrollmentPaymentStatus.PARTIAL

    async def test_missing_enrollment(self, session, enrollment_service, admin):
        with pytest.raises(NotFoundError):
            await enrollment_service.activate(session, uuid.uuid4(), admin)


class TestComplete:
    async def test_course_teacher_completes_with_certificate(
        self, session, enrollment_service, teacher, make_enrollment
    ):
        enrollment = await make_enrollment()

        await enrollment_service.complete(
            session, enrollment.id, teacher, final_grade=Decimal("95.50"), issue_certificate=True
        )

        assert enrollment.status == EnrollmentStatus.COMPLETED
        assert enrollment.completion_date is not None
        assert enrollment.final_grade == Decimal("95.50")
        assert enrollment.certificate_issued is True
        assert re.fullmatch(r"CERT-\d{8}-[0-9A-F]{8}", enrollment.certificate_number)

    async def test_other_teacher_cannot_complete(self, session, enrollment_service, make_enrollment):
        enrollment = await make_enrollment()
        other_teacher = Principal(user_id=uuid.uuid4(), role=PrincipalRole.TEACHER)
        with pytest.raises(PermissionDeniedError):
            await enrollment_service.complete(session, enrollment.id, other_teacher)

    async def test_student_cannot_complete(self, session, enrollment_service, student, make_enrollment):
        enrollment = await make_enrollment()
        with pytest.raises(PermissionDeniedError):
            await enrollment_service.complete(session, enrollment.id, student)

    async def test_cancelled_cannot_complete(self, session, enrollment_service, admin, make_enrollment):
        enrollment = await make_enrollment(status=EnrollmentStatus.CANCELLED)
        with pytest.raises(InvalidStateError):
            await enrollment_service.complete(session, enrollment.id, admin)

    def test_certificate_number_format(self):
        assert generate_certificate_number(date(2026, 3, 9)).startswith("CERT-20260309-")


class TestDiscountAndLedger:
    async def test_discount_is_admin_only(self, session, enrollment_service, student, make_enrollment):
        enrollment = await make_enrollment()
        with pytest.raises(PermissionDeniedError):
            await enrollment_service.apply_discount(
                session, enrollment.id, student, amount=Decimal("100.00"), reason="x"
            )

    async def test_discount_recomputes(self, session, enrollment_service, admin, make_enrollment):
        enrollment = await make_enrollment()
        await enrollment_service.apply_discount(
            session, enrollment.id, admin, amount=Decimal("1500.00"), reason="Beca completa"
        )
        assert enrollment.remaining_amount == Decimal("0.00")
        assert enrollment.payment_status == EnrollmentPaymentStatus.COMPLETED

    async def test_ledger_lists_payments(
        self, session, services, enrollment_service, admin, student, teacher, make_enrollment
    ):
        enrollment = await make_enrollment()
        for amount in ("500.00", "300.00"):
            await services.payments.initiate_payment(
                session,
                principal=admin,
                enrollment_id=enrollment.id,
                amount=Decimal(amount),
                channel=GatewayChannel.MANUAL,
                payment_method=PaymentMethod.CASH,
            )

        for principal in (admin, student, teacher):
            ledger = await enrollment_service.get_ledger(session, enrollment.id, principal)
            assert ledger.enrollment.paid_amount == Decimal("800.00")
            assert sorted(p.amount for p in ledger.payments) == [Decimal("300.00"), Decimal("500.00")]

        stranger = Principal(user_id=uuid.uuid4(), role=PrincipalRole.STUDENT)
        with pytest.raises(PermissionDeniedError):
            await enrollment_service.get_ledger(session, enrollment.id, stranger)


class TestFacades:
    async def test_create_commits(self, session, session_factory, enrollment_service, admin, student, teacher):
        from app.modules.enrollments.models.enrollment_models import Enrollment

        enrollment = await create_enrollment(
            session,
            data=EnrollmentCreate(**_new(student, teacher)),
            principal=admin,
            service=enrollment_service,
        )

        async with session_factory() as fresh:
            row = await fresh.get(Enrollment, enrollment.id)
            assert row is not None
            assert row.total_amount == Decimal("1500.00")

    async def test_failed_transition_rolls_back(self, session, enrollment_service, admin, make_enrollment):
        enrollment = await make_enrollment(status=EnrollmentStatus.PENDING)
        enrollment_id = enrollment.id

        with pytest.raises(InvalidStateError):
            await change_status(
                session,
                action="suspend",
                enrollment_id=enrollment_id,
                principal=admin,
                service=enrollment_service,
            )

        reloaded = await enrollment_service.get_enrollment(session, enrollment_id)
        assert reloaded.status == EnrollmentStatus.PENDING

# Fin del archivo tests/modules/enrollments/services/test_enrollment_service.py
