# -*- coding: utf-8 -*-
"""
tests/modules/payments/adapters/test_gateway_adapters.py

Adaptadores de pasarela sin red:
- Stripe: se sustituye stripe.PaymentIntent.create / stripe.Refund.create
- Conekta: httpx.MockTransport
"""

import json
from decimal import Decimal
from types import SimpleNamespace

import httpx
import pytest
import stripe

from app.shared.config.settings_payments import PaymentsSettings
from app.shared.errors import GatewayError
from app.modules.payments.adapters import (
    ChargeRequest,
    GatewayOutcome,
    GatewayRegistry,
    PayerInfo,
    build_gateway_registry,
)
from app.modules.payments.adapters.conekta_adapter import ConektaAdapter
from app.modules.payments.adapters.conekta_client import ConektaClient
from app.modules.payments.adapters.manual_adapter import ManualAdapter
from app.modules.payments.adapters.stripe_adapter import StripeCardAdapter
from app.modules.payments.enums import Currency, GatewayChannel, PaymentMethod


def _request(channel=GatewayChannel.STRIPE_CARD, token="pm_card_visa", payer=None, method=PaymentMethod.STRIPE):
    return ChargeRequest(
        channel=channel,
        transaction_id="TXN-1700000000000-ABCDEFGHI",
        enrollment_id="6f1c2f7e-0000-4000-8000-000000000001",
        amount=Decimal("1500.00"),
        currency=Currency.MXN,
        description="Pago de inscripción",
        payment_method=method,
        payment_token=token,
        payer=payer,
        metadata={"student_id": "s-1"},
    )


@pytest.fixture
def gateway_settings():
    return PaymentsSettings(
        stripe_secret_key="sk_test_123",
        conekta_private_key="key_test_123",
        gateway_timeout_seconds=5,
    )


# ---------------------------------------------------------------------------
# Stripe
# ---------------------------------------------------------------------------
class TestStripeCardAdapter:
    async def test_succeeded_intent(self, gateway_settings, monkeypatch):
        calls = []

        def fake_create(**kwargs):
            calls.append(kwargs)
            return SimpleNamespace(id="pi_123", status="succeeded")

        monkeypatch.setattr(stripe.PaymentIntent, "create", fake_create)

        result = await StripeCardAdapter(gateway_settings).charge(_request())

        assert result.outcome == GatewayOutcome.COMPLETED
        assert result.external_id == "pi_123"
        sent = calls[0]
        assert sent["amount"] == 150000
        assert sent["currency"] == "mxn"
        assert sent["api_key"] == "sk_test_123"
        assert sent["idempotency_key"] == "TXN-1700000000000-ABCDEFGHI"
        assert sent["metadata"]["enrollment_id"] == "6f1c2f7e-0000-4000-8000-000000000001"
        assert sent["metadata"]["student_id"] == "s-1"

    @pytest.mark.parametrize(
        "status,outcome",
        [
            ("processing", GatewayOutcome.PENDING),
            ("requires_action", GatewayOutcome.FAILED),
            ("requires_payment_method", GatewayOutcome.FAILED),
        ],
    )
    async def test_other_statuses(self, gateway_settings, monkeypatch, status, outcome):
        monkeypatch.setattr(
            stripe.PaymentIntent, "create", lambda **kw: SimpleNamespace(id="pi_9", status=status)
        )
        result = await StripeCardAdapter(gateway_settings).charge(_request())
        assert result.outcome == outcome
        if status == "requires_action":
            assert result.failure_reason == "authentication_required"

    async def test_card_error_is_declined(self, gateway_settings, monkeypatch):
        def declined(**kwargs):
            raise stripe.CardError("Your card was declined.", None, "card_declined")

        monkeypatch.setattr(stripe.PaymentIntent, "create", declined)

        result = await StripeCardAdapter(gateway_settings).charge(_request())

        assert result.outcome == GatewayOutcome.FAILED
        assert result.failure_reason == "card_declined"

    async def test_connection_error_is_transient_gateway_error(self, gateway_settings, monkeypatch):
        def down(**kwargs):
            raise stripe.APIConnectionError("network down")

        monkeypatch.setattr(stripe.PaymentIntent, "create", down)

        with pytest.raises(GatewayError) as exc_info:
            await StripeCardAdapter(gateway_settings).charge(_request())
        assert exc_info.value.transient is True
        assert exc_info.value.provider == "stripe"

    async def test_not_configured(self):
        settings = PaymentsSettings(_env_file=None)
        settings.stripe_secret_key = None
        adapter = StripeCardAdapter(settings)
        with pytest.raises(GatewayError) as exc_info:
            await adapter.charge(_request())
        assert exc_info.value.transient is False

    async def test_refund(self, gateway_settings, monkeypatch):
        calls = []

        def fake_refund(**kwargs):
            calls.append(kwargs)
            return SimpleNamespace(id="re_1", status="succeeded")

        monkeypatch.setattr(stripe.Refund, "create", fake_refund)

        result = await StripeCardAdapter(gateway_settings).refund(
            external_id="pi_123",
            amount=Decimal("400.00"),
            currency=Currency.MXN,
            reason="Baja",
            idempotency_key="refund-TXN-1",
        )

        assert result.provider_refund_id == "re_1"
        assert calls[0]["payment_intent"] == "pi_123"
        assert calls[0]["amount"] == 40000
        assert calls[0]["idempotency_key"] == "refund-TXN-1"


# ---------------------------------------------------------------------------
# Conekta
# ---------------------------------------------------------------------------
def _conekta(channel, settings, handler):
    client = ConektaClient(settings, transport=httpx.MockTransport(handler))
    return ConektaAdapter(channel, client, settings)


PAYER = PayerInfo(name="Ana López", email="ana@example.com", phone="5555555555")


class TestConektaAdapter:
    async def test_card_paid(self, gateway_settings):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["authorization"]
            seen["accept"] = request.headers["accept"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={
                "id": "ord_1",
                "payment_status": "paid",
                "charges": {"data": [{"status": "paid", "payment_method": {"type": "credit"}}]},
            })

        adapter = _conekta(GatewayChannel.CONEKTA_CARD, gateway_settings, handler)
        result = await adapter.charge(
            _request(GatewayChannel.CONEKTA_CARD, token="tok_test", payer=PAYER, method=PaymentMethod.CONEKTA)
        )

        assert result.outcome == GatewayOutcome.COMPLETED
        assert result.external_id == "ord_1"
        assert seen["url"].endswith("/orders")
        assert seen["auth"] == "Bearer key_test_123"
        assert "conekta-v2.1.0" in seen["accept"]
        body = seen["body"]
        assert body["charges"][0]["payment_method"] == {"type": "card", "token_id": "tok_test"}
        assert body["charges"][0]["amount"] == 150000
        assert body["customer_info"]["email"] == "ana@example.com"
        assert body["metadata"]["transaction_id"] == "TXN-1700000000000-ABCDEFGHI"

    async def test_oxxo_pending_reference(self, gateway_settings):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={
                "id": "ord_2",
                "payment_status": "pending_payment",
                "charges": {"data": [{
                    "status": "pending_payment",
                    "payment_method": {"type": "oxxo", "reference": "93000262276908", "expires_at": 1893456000},
                }]},
            })

        adapter = _conekta(GatewayChannel.CONEKTA_OXXO, gateway_settings, handler)
        result = await adapter.charge(
            _request(GatewayChannel.CONEKTA_OXXO, token=None, payer=PAYER, method=PaymentMethod.CONEKTA)
        )

        assert result.outcome == GatewayOutcome.PENDING
        assert result.reference == "93000262276908"
        assert int(result.expires_at.timestamp()) == 1893456000

    async def test_spei_uses_clabe(self, gateway_settings):
        def handler(request: httpx.Request) -> httpx.Response:
            body = json.loads(request.content)
            assert body["charges"][0]["payment_method"]["type"] == "spei"
            return httpx.Response(200, json={
                "id": "ord_3",
                "charges": {"data": [{
                    "status": "pending_payment",
                    "payment_method": {"type": "spei", "clabe": "646180111812345678"},
                }]},
            })

        adapter = _conekta(GatewayChannel.CONEKTA_SPEI, gateway_settings, handler)
        result = await adapter.charge(
            _request(GatewayChannel.CONEKTA_SPEI, token=None, payer=PAYER, method=PaymentMethod.CONEKTA)
        )

        assert result.reference == "646180111812345678"

    async def test_402_is_declined(self, gateway_settings):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(402, json={
                "details": [{"code": "conekta.errors.processing.bank.declined", "message": "Declinada"}],
                "data": {"id": "ord_declined"},
            })

        adapter = _conekta(GatewayChannel.CONEKTA_CARD, gateway_settings, handler)
        result = await adapter.charge(
            _request(GatewayChannel.CONEKTA_CARD, token="tok_test", payer=PAYER, method=PaymentMethod.CONEKTA)
        )

        assert result.outcome == GatewayOutcome.FAILED
        assert result.failure_reason == "conekta.errors.processing.bank.declined"
        assert result.external_id == "ord_declined"

    @pytest.mark.parametrize("status_code,transient", [(500, True), (503, True), (401, False), (422, False)])
    async def test_errors_raise_gateway_error(self, gateway_settings, status_code, transient):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status_code, json={"details": [{"code": "x"}]})

        adapter = _conekta(GatewayChannel.CONEKTA_CARD, gateway_settings, handler)
        with pytest.raises(GatewayError) as exc_info:
            await adapter.charge(
                _request(GatewayChannel.CONEKTA_CARD, token="tok", payer=PAYER, method=PaymentMethod.CONEKTA)
            )
        assert exc_info.value.transient is transient

    async def test_network_error(self, gateway_settings):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        adapter = _conekta(GatewayChannel.CONEKTA_OXXO, gateway_settings, handler)
        with pytest.raises(GatewayError) as exc_info:
            await adapter.charge(
                _request(GatewayChannel.CONEKTA_OXXO, token=None, payer=PAYER, method=PaymentMethod.CONEKTA)
            )
        assert exc_info.value.transient is True

    async def test_refund(self, gateway_settings):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/orders/ord_1/refunds"
            assert json.loads(request.content)["amount"] == 40000
            return httpx.Response(200, json={
                "id": "ord_1",
                "payment_status": "partially_refunded",
                "charges": {"data": [{"status": "paid", "refunds": {"data": [{"id": "ref_1"}]}}]},
            })

        adapter = _conekta(GatewayChannel.CONEKTA_CARD, gateway_settings, handler)
        result = await adapter.refund(external_id="ord_1", amount=Decimal("400.00"), currency=Currency.MXN)

        assert result.provider_refund_id == "ref_1"
        assert result.status == "partially_refunded"

    async def test_refund_declined_is_permanent_gateway_error(self, gateway_settings):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/orders/ord_1/refunds"
            return httpx.Response(402, json={
                "details": [{"code": "conekta.errors.processing.refund.not_allowed", "message": "No reembolsable"}],
            })

        adapter = _conekta(GatewayChannel.CONEKTA_CARD, gateway_settings, handler)
        with pytest.raises(GatewayError) as exc_info:
            await adapter.refund(external_id="ord_1", amount=Decimal("400.00"), currency=Currency.MXN)

        assert exc_info.value.transient is False
        assert exc_info.value.provider == "conekta"

    def test_rejects_non_conekta_channel(self, gateway_settings):
        with pytest.raises(ValueError):
            ConektaAdapter(GatewayChannel.STRIPE_CARD, settings=gateway_settings)


# ---------------------------------------------------------------------------
# Manual y registro
# ---------------------------------------------------------------------------
async def test_manual_adapter_always_completes():
    result = await ManualAdapter().charge(
        _request(GatewayChannel.MANUAL, token=None, method=PaymentMethod.CASH)
    )
    assert result.outcome == GatewayOutcome.COMPLETED
    assert result.external_id is None


def test_registry_routes_by_channel_and_method(gateway_settings):
    registry = build_gateway_registry(gateway_settings)

    assert isinstance(registry.for_channel(GatewayChannel.MANUAL), ManualAdapter)
    assert isinstance(registry.for_channel(GatewayChannel.STRIPE_CARD), StripeCardAdapter)
    assert registry.for_channel(GatewayChannel.CONEKTA_OXXO).channel == GatewayChannel.CONEKTA_OXXO
    assert isinstance(registry.for_refund(PaymentMethod.STRIPE), StripeCardAdapter)
    assert registry.for_refund(PaymentMethod.CONEKTA).channel == GatewayChannel.CONEKTA_CARD
    assert registry.for_refund(PaymentMethod.CASH) is None


def test_registry_missing_channel():
    with pytest.raises(LookupError):
        GatewayRegistry({}).for_channel(GatewayChannel.STRIPE_CARD)

# Fin del archivo tests/modules/payments/adapters/test_gateway_adapters.py
