# -*- coding: utf-8 -*-
"""
tests/modules/payments/services/test_refund_service.py

Reembolsos: la fila original se conserva y su aporte al saldo pasa a
ser amount - refund_amount.
"""

import uuid
from decimal import Decimal

import pytest

from app.shared.errors import (
    GatewayError,
    InvalidStateError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from app.modules.enrollments.enums import EnrollmentPaymentStatus
from app.modules.enrollments.models.enrollment_models import Enrollment
from app.modules.payments.adapters import GatewayOutcome
from app.modules.payments.enums import GatewayChannel, PaymentMethod, PaymentStatus
from app.modules.payments.facades.refunds import process_refund
from app.modules.payments.models.payment_models import Payment


async def _paid(session, services, admin, enrollment, amount="1000.00", channel=GatewayChannel.MANUAL):
    kwargs = {}
    if channel == GatewayChannel.MANUAL:
        kwargs["payment_method"] = PaymentMethod.CASH
    else:
        kwargs["payment_token"] = "pm_card_visa"
    outcome = await services.payments.initiate_payment(
        session,
        principal=admin,
        enrollment_id=enrollment.id,
        amount=Decimal(amount),
        channel=channel,
        **kwargs,
    )
    await session.commit()
    return outcome.payment


class TestRefund:
    async def test_partial_refund_lowers_paid_amount(self, session, services, admin, make_enrollment):
        enrollment = await make_enrollment()
        payment = await _paid(session, services, admin, enrollment)
        assert enrollment.paid_amount == Decimal("1000.00")

        outcome = await services.refunds.refund(
            session,
            payment_id=payment.id,
            amount=Decimal("400.00"),
            reason="Baja parcial",
            principal=admin,
        )

        assert outcome.payment.status == PaymentStatus.REFUNDED
        assert outcome.payment.refund_amount == Decimal("400.00")
        assert outcome.payment.refund_reason == "Baja parcial"
        assert outcome.payment.refunded_by == admin.user_id
        assert outcome.payment.refunded_at is not None
        assert outcome.payment.amount == Decimal("1000.00")
        assert outcome.enrollment.paid_amount == Decimal("600.00")
        assert outcome.enrollment.payment_status == EnrollmentPaymentStatus.PARTIAL
        assert outcome.provider_refund_id is None

    async def test_full_refund_returns_to_pending(self, session, services, admin, make_enrollment):
        enrollment = await make_enrollment()
        payment = await _paid(session, services, admin, enrollment, amount="1500.00")
        assert enrollment.payment_status == EnrollmentPaymentStatus.COMPLETED

        outcome = await services.refunds.refund(
            session, payment_id=payment.id, amount=Decimal("1500.00"), reason=None, principal=admin
        )

        assert outcome.enrollment.paid_amount == Decimal("0.00")
        assert outcome.enrollment.payment_status == EnrollmentPaymentStatus.PENDING

    async def test_gateway_refund_uses_idempotency_key(
        self, session, services, admin, stripe_gateway, make_enrollment
    ):
        enrollment = await make_enrollment()
        payment = await _paid(session, services, admin, enrollment, channel=GatewayChannel.STRIPE_CARD)

        outcome = await services.refunds.refund(
            session, payment_id=payment.id, amount=Decimal("250.00"), reason="x", principal=admin
        )

        call = stripe_gateway.refunds[0]
        assert call["external_id"] == payment.external_payment_id
        assert call["amount"] == Decimal("250.00")
        assert call["idempotency_key"] == f"refund-{payment.transaction_id}"
        assert outcome.provider_refund_id == "re_1"
        assert outcome.payment.payment_metadata["refund_id"] == "re_1"

    async def test_manual_refund_skips_processor(
        self, session, services, admin, stripe_gateway, conekta_gateway, make_enrollment
    ):
        enrollment = await make_enrollment()
        payment = await _paid(session, services, admin, enrollment)

        await services.refunds.refund(
            session, payment_id=payment.id, amount=Decimal("100.00"), reason=None, principal=admin
        )

        assert stripe_gateway.refunds == []
        assert conekta_gateway.refunds == []

    async def test_amount_exceeding_payment(self, session, services, admin, make_enrollment):
        enrollment = await make_enrollment()
        payment = await _paid(session, services, admin, enrollment)

        with pytest.raises(InvalidStateError):
            await services.refunds.refund(
                session, payment_id=payment.id, amount=Decimal("1000.01"), reason=None, principal=admin
            )

    async def test_only_completed_payments(self, session, services, admin, stripe_gateway, make_enrollment):
        enrollment = await make_enrollment()
        stripe_gateway.outcome = GatewayOutcome.PENDING
        payment = await _paid(session, services, admin, enrollment, channel=GatewayChannel.STRIPE_CARD)
        assert payment.status == PaymentStatus.PENDING

        with pytest.raises(InvalidStateError):
            await services.refunds.refund(
                session, payment_id=payment.id, amount=Decimal("10.00"), reason=None, principal=admin
            )

    async def test_cannot_refund_twice(self, session, services, admin, make_enrollment):
        enrollment = await make_enrollment()
        payment = await _paid(session, services, admin, enrollment)
        await services.refunds.refund(
            session, payment_id=payment.id, amount=Decimal("100.00"), reason=None, principal=admin
        )

        with pytest.raises(InvalidStateError):
            await services.refunds.refund(
                session, payment_id=payment.id, amount=Decimal("100.00"), reason=None, principal=admin
            )

    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-1.00"), Decimal("1.001")])
    async def test_invalid_amount(self, session, services, admin, make_enrollment, amount):
        enrollment = await make_enrollment()
        payment = await _paid(session, services, admin, enrollment)

        with pytest.raises(ValidationError):
            await services.refunds.refund(
                session, payment_id=payment.id, amount=amount, reason=None, principal=admin
            )

    async def test_admin_only(self, session, services, admin, student, make_enrollment):
        enrollment = await make_enrollment()
        payment = await _paid(session, services, admin, enrollment)

        with pytest.raises(PermissionDeniedError):
            await services.refunds.refund(
                session, payment_id=payment.id, amount=Decimal("10.00"), reason=None, principal=student
            )

    async def test_missing_payment(self, session, services, admin):
        with pytest.raises(NotFoundError):
            await services.refunds.refund(
                session, payment_id=uuid.uuid4(), amount=Decimal("10.00"), reason=None, principal=admin
            )


class TestRefundFacade:
    async def test_gateway_error_leaves_ledger_untouched(
        self, session, session_factory, services, admin, stripe_gateway, make_enrollment
    ):
        enrollment = await make_enrollment()
        payment = await _paid(session, services, admin, enrollment, channel=GatewayChannel.STRIPE_CARD)
        stripe_gateway.refund_error = GatewayError("rechazado", provider="stripe", transient=False)
        payment_id, enrollment_id = payment.id, enrollment.id

        with pytest.raises(GatewayError):
            await process_refund(
                session,
                payment_id=payment_id,
                amount=Decimal("400.00"),
                reason="x",
                principal=admin,
                services=services,
            )

        # tras el rollback no se tocan las instancias de la sesión original
        async with session_factory() as fresh:
            row = await fresh.get(Payment, payment_id)
            assert row.status == PaymentStatus.COMPLETED
            assert row.refund_amount == Decimal("0.00")
            enr = await fresh.get(Enrollment, enrollment_id)
            assert enr.paid_amount == Decimal("1000.00")

    async def test_commits_and_notifies(
        self, session, session_factory, services, admin, notifier, make_enrollment
    ):
        enrollment = await make_enrollment()
        payment = await _paid(session, services, admin, enrollment)

        await process_refund(
            session,
            payment_id=payment.id,
            amount=Decimal("400.00"),
            reason="Baja",
            principal=admin,
            services=services,
        )

        assert notifier.refunded == [(payment.id, enrollment.id)]
        async with session_factory() as fresh:
            enr = await fresh.get(Enrollment, enrollment.id)
            assert enr.paid_amount == Decimal("600.00")
            row = await fresh.get(Payment, payment.id)
            assert row.status == PaymentStatus.REFUNDED
            assert row.refund_amount == Decimal("400.00")

# Fin del archivo tests/modules/payments/services/test_refund_service.py
