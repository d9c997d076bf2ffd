# -*- coding: utf-8 -*-
"""
tests/modules/payments/services/test_reconciliation_service.py

Conciliación del saldo: recalcular desde el historial, nunca incrementar.
"""

from datetime import date
from decimal import Decimal

import pytest

from app.shared.errors import InvalidStateError, NotFoundError, ValidationError
from app.modules.enrollments.enums import EnrollmentPaymentStatus, EnrollmentStatus
from app.modules.payments.enums import Currency, PaymentMethod, PaymentStatus, PaymentType
from app.modules.payments.services.reconciliation_service import derive_payment_status
from app.modules.payments.utils.identifiers import generate_transaction_id


async def _add_payment(session, services, enrollment_id, amount, status=PaymentStatus.COMPLETED, refund="0.00"):
    payment = await services.payments.payment_repo.create(
        session,
        enrollment_id=enrollment_id,
        amount=Decimal(amount),
        currency=Currency.MXN,
        payment_method=PaymentMethod.CASH,
        payment_type=PaymentType.PARTIAL,
        status=status,
        transaction_id=generate_transaction_id(),
        refund_amount=Decimal(refund),
    )
    return payment


class TestDerivePaymentStatus:
    def test_nothing_paid_is_pending(self):
        assert derive_payment_status(
            net_amount=Decimal("1500.00"), total_paid=Decimal("0.00")
        ) == EnrollmentPaymentStatus.PENDING

    def test_partial(self):
        assert derive_payment_status(
            net_amount=Decimal("1500.00"), total_paid=Decimal("500.00")
        ) == EnrollmentPaymentStatus.PARTIAL

    def test_exact_or_overpaid_is_completed(self):
        assert derive_payment_status(
            net_amount=Decimal("1500.00"), total_paid=Decimal("1500.00")
        ) == EnrollmentPaymentStatus.COMPLETED
        assert derive_payment_status(
            net_amount=Decimal("1500.00"), total_paid=Decimal("1600.00")
        ) == EnrollmentPaymentStatus.COMPLETED

    def test_partial_past_due_is_overdue(self):
        status = derive_payment_status(
            net_amount=Decimal("1500.00"),
            total_paid=Decimal("100.00"),
            next_payment_date=date(2026, 2, 1),
            today=date(2026, 3, 1),
        )
        assert status == EnrollmentPaymentStatus.OVERDUE

    def test_future_due_date_stays_partial(self):
        status = derive_payment_status(
            net_amount=Decimal("1500.00"),
            total_paid=Decimal("100.00"),
            next_payment_date=date(2026, 4, 1),
            today=date(2026, 3, 1),
        )
        assert status == EnrollmentPaymentStatus.PARTIAL

    def test_full_discount_counts_as_completed(self):
        assert derive_payment_status(
            net_amount=Decimal("0.00"), total_paid=Decimal("0.00")
        ) == EnrollmentPaymentStatus.COMPLETED


class TestApplyPayment:
    async def test_single_full_payment_completes(self, session, services, make_enrollment):
        """Pago único en efectivo que cubre el total."""
        enrollment = await make_enrollment()
        await _add_payment(session, services, enrollment.id, "1500.00")

        result = await services.reconciliation.apply_payment(session, enrollment.id)

        assert result.paid_amount == Decimal("1500.00")
        assert result.remaining_amount == Decimal("0.00")
        assert result.payment_status == EnrollmentPaymentStatus.COMPLETED

    async def test_two_partial_payments(self, session, services, make_enrollment):
        enrollment = await make_enrollment()
        await _add_payment(session, services, enrollment.id, "500.00")
        result = await services.reconciliation.apply_payment(session, enrollment.id)
        assert result.paid_amount == Decimal("500.00")
        assert result.payment_status == EnrollmentPaymentStatus.PARTIAL

        await _add_payment(session, services, enrollment.id, "1000.00")
        result = await services.reconciliation.apply_payment(session, enrollment.id)
        assert result.paid_amount == Decimal("1500.00")
        assert result.payment_status == EnrollmentPaymentStatus.COMPLETED

    async def test_is_idempotent(self, session, services, make_enrollment):
        enrollment = await make_enrollment()
        await _add_payment(session, services, enrollment.id, "700.00")

        first = await services.reconciliation.apply_payment(session, enrollment.id)
        first_paid = first.paid_amount
        second = await services.reconciliation.apply_payment(session, enrollment.id)

        assert second.paid_amount == first_paid == Decimal("700.00")
        assert second.payment_status == EnrollmentPaymentStatus.PARTIAL

    async def test_open_and_failed_payments_do_not_count(self, session, services, make_enrollment):
        enrollment = await make_enrollment()
        await _add_payment(session, services, enrollment.id, "300.00", status=PaymentStatus.PENDING)
        await _add_payment(session, services, enrollment.id, "400.00", status=PaymentStatus.FAILED)
        await _add_payment(session, services, enrollment.id, "200.00", status=PaymentStatus.PROCESSING)

        result = await services.reconciliation.apply_payment(session, enrollment.id)

        assert result.paid_amount == Decimal("0.00")
        assert result.payment_status == EnrollmentPaymentStatus.PENDING

    async def test_refunded_payment_contributes_net(self, session, services, make_enrollment):
        enrollment = await make_enrollment()
        await _add_payment(session, services, enrollment.id, "1000.00", status=PaymentStatus.REFUNDED, refund="400.00")

        result = await services.reconciliation.apply_payment(session, enrollment.id)

        assert result.paid_amount == Decimal("600.00")
        assert result.payment_status == EnrollmentPaymentStatus.PARTIAL

    async def test_overdue_when_next_payment_date_passed(self, session, services, make_enrollment):
        enrollment = await make_enrollment(next_payment_date=date(2026, 2, 1))
        await _add_payment(session, services, enrollment.id, "100.00")

        result = await services.reconciliation.apply_payment(
            session, enrollment.id, today=date(2026, 3, 1)
        )

        assert result.payment_status == EnrollmentPaymentStatus.OVERDUE

    async def test_unknown_enrollment(self, session, services):
        import uuid

        with pytest.raises(NotFoundError):
            await services.reconciliation.apply_payment(session, uuid.uuid4())


class TestApplyDiscount:
    async def test_discount_reduces_remaining_and_can_complete(self, session, services, make_enrollment):
        enrollment = await make_enrollment()
        await _add_payment(session, services, enrollment.id, "1200.00")
        await services.reconciliation.apply_payment(session, enrollment.id)

        result = await services.reconciliation.apply_discount(
            session, enrollment.id, amount=Decimal("300.00"), reason="Beca parcial"
        )

        assert result.discount_amount == Decimal("300.00")
        assert result.discount_reason == "Beca parcial"
        assert result.remaining_amount == Decimal("0.00")
        assert result.payment_status == EnrollmentPaymentStatus.COMPLETED

    async def test_discount_replaces_previous(self, session, services, make_enrollment):
        enrollment = await make_enrollment()
        await services.reconciliation.apply_discount(
            session, enrollment.id, amount=Decimal("500.00"), reason="Beca"
        )
        result = await services.reconciliation.apply_discount(
            session, enrollment.id, amount=Decimal("100.00"), reason="Ajuste"
        )
        assert result.discount_amount == Decimal("100.00")
        assert result.remaining_amount == Decimal("1400.00")

    @pytest.mark.parametrize("amount", [Decimal("-1.00"), Decimal("10.001")])
    async def test_invalid_amount(self, session, services, make_enrollment, amount):
        enrollment = await make_enrollment()
        with pytest.raises(ValidationError):
            await services.reconciliation.apply_discount(
                session, enrollment.id, amount=amount, reason="x"
            )

    async def test_requires_reason(self, session, services, make_enrollment):
        enrollment = await make_enrollment()
        with pytest.raises(ValidationError):
            await services.reconciliation.apply_discount(
                session, enrollment.id, amount=Decimal("10.00"), reason="  "
            )

    async def test_cannot_exceed_total(self, session, services, make_enrollment):
        enrollment = await make_enrollment()
        with pytest.raises(ValidationError):
            await services.reconciliation.apply_discount(
                session, enrollment.id, amount=Decimal("1500.01"), reason="x"
            )

    async def test_rejected_on_cancelled_enrollment(self, session, services, make_enrollment):
        enrollment = await make_enrollment(status=EnrollmentStatus.CANCELLED)
        with pytest.raises(InvalidStateError):
            await services.reconciliation.apply_discount(
                session, enrollment.id, amount=Decimal("10.00"), reason="x"
            )


async def test_recompute_all(session, services, make_enrollment):
    import uuid

    first = await make_enrollment()
    second = await make_enrollment(course_id=uuid.uuid4())
    await _add_payment(session, services, first.id, "1500.00")
    await _add_payment(session, services, second.id, "10.00")

    count = await services.reconciliation.recompute_all(session)

    assert count == 2
    assert first.payment_status == EnrollmentPaymentStatus.COMPLETED
    assert second.payment_status == EnrollmentPaymentStatus.PARTIAL

# Fin del archivo tests/modules/payments/services/test_reconciliation_service.py
