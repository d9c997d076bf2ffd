# -*- coding: utf-8 -*-
"""
tests/modules/payments/jobs/test_jobs.py

Jobs de pagos: registro del barrido en el scheduler (sin arrancarlo) y
recálculo masivo de saldos.
"""

from decimal import Decimal

from app.shared.scheduler import SchedulerService
from app.modules.enrollments.enums import EnrollmentPaymentStatus
from app.modules.enrollments.models.enrollment_models import Enrollment
from app.modules.payments.enums import Currency, PaymentMethod, PaymentStatus, PaymentType
from app.modules.payments.jobs import expire_pending_payments_job as job_module
from app.modules.payments.jobs import (
    EXPIRE_PAYMENTS_JOB_ID,
    recompute_all_ledgers,
    register_expire_payments_job,
)
from app.modules.payments.utils.identifiers import generate_transaction_id


def test_register_expire_job(monkeypatch):
    scheduler = SchedulerService()
    monkeypatch.setattr(job_module, "get_scheduler", lambda: scheduler)

    job_id = register_expire_payments_job(15)

    assert job_id == EXPIRE_PAYMENTS_JOB_ID
    jobs = scheduler.get_jobs()
    assert [j["id"] for j in jobs] == [EXPIRE_PAYMENTS_JOB_ID]
    assert "0:15:00" in jobs[0]["trigger"]
    assert scheduler.is_running is False


def test_register_twice_replaces(monkeypatch):
    scheduler = SchedulerService()
    monkeypatch.setattr(job_module, "get_scheduler", lambda: scheduler)

    register_expire_payments_job(15)
    register_expire_payments_job(5)

    jobs = scheduler.get_jobs()
    assert len(jobs) == 1
    assert "0:05:00" in jobs[0]["trigger"]


async def test_recompute_all_ledgers_fixes_stale_balance(session, session_factory, services, make_enrollment):
    # Saldo desalineado: pago completado que nunca pasó por la conciliación
    enrollment = await make_enrollment()
    await services.payments.payment_repo.create(
        session,
        enrollment_id=enrollment.id,
        amount=Decimal("700.00"),
        currency=Currency.MXN,
        payment_method=PaymentMethod.TRANSFER,
        payment_type=PaymentType.PARTIAL,
        status=PaymentStatus.COMPLETED,
        transaction_id=generate_transaction_id(),
        refund_amount=Decimal("0.00"),
    )
    await session.commit()

    count = await recompute_all_ledgers(session=session, services=services)

    assert count == 1
    async with session_factory() as fresh:
        row = await fresh.get(Enrollment, enrollment.id)
        assert row.paid_amount == Decimal("700.00")
        assert row.payment_status == EnrollmentPaymentStatus.PARTIAL

# Fin del archivo tests/modules/payments/jobs/test_jobs.py
