# -*- coding: utf-8 -*-
"""
tests/conftest.py

Config global de tests del backend escolar.

- Variables de entorno fijadas ANTES de importar la app (settings perezosos)
- Engine aiosqlite en memoria por test con todas las tablas
- Pasarelas falsas (Stripe/Conekta) y notifier que registra llamadas
- Cliente httpx con ASGITransport + LifespanManager para tests de API
"""

import os
import uuid
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional

# -----------------------------------------------------------------------------
# 0) Entorno de pruebas (fail-closed en firmas, sin scheduler, sin correo real)
# -----------------------------------------------------------------------------
os.environ["PYTHON_ENV"] = "test"
os.environ["DB_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET_KEY"] = "test-jwt-secret"
os.environ["JWT_ALGORITHM"] = "HS256"
os.environ["STRIPE_WEBHOOK_SECRET"] = "whsec_test_secret"
os.environ["CONEKTA_WEBHOOK_SECRET"] = "conekta_test_secret"
os.environ["PAYMENTS_EXPIRY_SWEEP_INTERVAL_MINUTES"] = "0"
os.environ["EMAIL_MODE"] = "console"
os.environ.pop("PAYMENTS_ALLOW_INSECURE_WEBHOOKS", None)

import pytest
import pytest_asyncio
from asgi_lifespan import LifespanManager
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.shared.auth_context import Principal, PrincipalRole
from app.shared.config.settings_payments import PaymentsSettings, reset_payments_settings
from app.shared.database.base import Base
from app.shared.orm import load_all_models
from app.modules.enrollments.enums import EnrollmentPaymentStatus, EnrollmentStatus
from app.modules.enrollments.models.enrollment_models import Enrollment
from app.modules.payments.adapters import (
    ChargeRequest,
    GatewayOutcome,
    GatewayRegistry,
    GatewayResult,
    RefundResult,
)
from app.modules.payments.adapters.manual_adapter import ManualAdapter
from app.modules.payments.dependencies import PaymentServices, build_payment_services
from app.modules.payments.enums import Currency, GatewayChannel

TEST_JWT_SECRET = "test-jwt-secret"


# -----------------------------------------------------------------------------
# 1) Base de datos
# -----------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine():
    load_all_models()
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(
        bind=engine,
        expire_on_commit=False,
        autoflush=False,
        class_=AsyncSession,
    )


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as s:
        yield s


# -----------------------------------------------------------------------------
# 2) Principales y tokens
# -----------------------------------------------------------------------------
@pytest.fixture
def admin() -> Principal:
    return Principal(user_id=uuid.uuid4(), role=PrincipalRole.ADMIN)


@pytest.fixture
def student() -> Principal:
    return Principal(user_id=uuid.uuid4(), role=PrincipalRole.STUDENT)


@pytest.fixture
def teacher() -> Principal:
    return Principal(user_id=uuid.uuid4(), role=PrincipalRole.TEACHER)


def make_token(principal: Principal, *, expires_in: int = 3600) -> str:
    claims = {
        "sub": str(principal.user_id),
        "role": principal.role.value,
        "exp": datetime.now(timezone.utc) + timedelta(seconds=expires_in),
    }
    return jwt.encode(claims, TEST_JWT_SECRET, algorithm="HS256")


def auth_headers(principal: Principal) -> Dict[str, str]:
    return {"Authorization": f"Bearer {make_token(principal)}"}


@pytest.fixture
def auth():
    """auth(principal) -> headers con Bearer token firmado para la app."""
    return auth_headers


# -----------------------------------------------------------------------------
# 3) Factories
# -----------------------------------------------------------------------------
@pytest.fixture
def make_enrollment(session, student, teacher):
    """Crea y confirma una inscripción activa con saldo pendiente."""

    async def _make(**overrides: Any) -> Enrollment:
        data = {
            "student_id": student.user_id,
            "course_id": uuid.uuid4(),
            "teacher_id": teacher.user_id,
            "status": EnrollmentStatus.ACTIVE,
            "start_date": date(2026, 1, 10),
            "end_date": date(2026, 6, 30),
            "total_amount": Decimal("1500.00"),
            "discount_amount": Decimal("0.00"),
            "paid_amount": Decimal("0.00"),
            "payment_status": EnrollmentPaymentStatus.PENDING,
        }
        data.update(overrides)
        enrollment = Enrollment(**data)
        session.add(enrollment)
        await session.commit()
        return enrollment

    return _make


# -----------------------------------------------------------------------------
# 4) Pasarelas y notifier falsos
# -----------------------------------------------------------------------------
class FakeGatewayAdapter:
    """
    Adaptador en memoria. El id externo se deriva del transaction_id para
    que cada cobro tenga uno único.
    """

    def __init__(self, provider: str) -> None:
        self.provider = provider
        self.outcome = GatewayOutcome.COMPLETED
        self.reference: Optional[str] = None
        self.expires_at: Optional[datetime] = None
        self.failure_reason: Optional[str] = None
        self.charge_error: Optional[Exception] = None
        self.refund_error: Optional[Exception] = None
        self.charges: List[ChargeRequest] = []
        self.refunds: List[Dict[str, Any]] = []

    def external_id_for(self, request: ChargeRequest) -> str:
        return f"{self.provider}_{request.transaction_id}"

    async def charge(self, request: ChargeRequest) -> GatewayResult:
        self.charges.append(request)
        if self.charge_error is not None:
            raise self.charge_error
        return GatewayResult(
            outcome=self.outcome,
            external_id=self.external_id_for(request),
            reference=self.reference,
            expires_at=self.expires_at,
            failure_reason=self.failure_reason,
        )

    async def refund(
        self,
        *,
        external_id: str,
        amount: Decimal,
        currency: Currency,
        reason: Optional[str] = None,
        idempotency_key: Optional[str] = None,
    ) -> RefundResult:
        self.refunds.append({
            "external_id": external_id,
            "amount": amount,
            "currency": currency,
            "reason": reason,
            "idempotency_key": idempotency_key,
        })
        if self.refund_error is not None:
            raise self.refund_error
        return RefundResult(provider_refund_id=f"re_{len(self.refunds)}", status="succeeded")


class RecordingNotifier:
    def __init__(self) -> None:
        self.completed: List[Any] = []
        self.refunded: List[Any] = []
        self.fail = False

    async def payment_completed(self, payment, enrollment) -> None:
        if self.fail:
            raise RuntimeError("smtp caído")
        self.completed.append((payment.id, enrollment.id))

    async def payment_refunded(self, payment, enrollment) -> None:
        if self.fail:
            raise RuntimeError("smtp caído")
        self.refunded.append((payment.id, enrollment.id))


@pytest.fixture
def stripe_gateway() -> FakeGatewayAdapter:
    return FakeGatewayAdapter("stripe")


@pytest.fixture
def conekta_gateway() -> FakeGatewayAdapter:
    return FakeGatewayAdapter("conekta")


@pytest.fixture
def oxxo_gateway() -> FakeGatewayAdapter:
    adapter = FakeGatewayAdapter("conekta")
    adapter.outcome = GatewayOutcome.PENDING
    adapter.reference = "93000262276908"
    return adapter


@pytest.fixture
def gateway_registry(stripe_gateway, conekta_gateway, oxxo_gateway) -> GatewayRegistry:
    return GatewayRegistry({
        GatewayChannel.MANUAL: ManualAdapter(),
        GatewayChannel.STRIPE_CARD: stripe_gateway,
        GatewayChannel.CONEKTA_CARD: conekta_gateway,
        GatewayChannel.CONEKTA_OXXO: oxxo_gateway,
        GatewayChannel.CONEKTA_SPEI: oxxo_gateway,
    })


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def payments_settings() -> PaymentsSettings:
    reset_payments_settings()
    return PaymentsSettings()


@pytest.fixture
def services(payments_settings, gateway_registry, notifier) -> PaymentServices:
    return build_payment_services(
        settings=payments_settings,
        gateway_registry=gateway_registry,
        notifier=notifier,
    )


# -----------------------------------------------------------------------------
# 5) App FastAPI y cliente httpx (con ciclo de vida)
# -----------------------------------------------------------------------------
@pytest.fixture(scope="session")
def app():
    """Carga la app principal DESPUÉS de fijar las variables de entorno."""
    from app.main import app as fastapi_app
    return fastapi_app


@pytest_asyncio.fixture
async def client(app, session_factory, services):
    from app.shared.database.database import get_async_session
    from app.modules.payments.dependencies import get_payment_services

    async def _session_override():
        async with session_factory() as s:
            try:
                yield s
            finally:
                if s.in_transaction():
                    await s.rollback()

    app.dependency_overrides[get_async_session] = _session_override
    app.dependency_overrides[get_payment_services] = lambda: services

    async with LifespanManager(app):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
            yield c

    app.dependency_overrides.clear()
