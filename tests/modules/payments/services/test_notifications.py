# -*- coding: utf-8 -*-
"""
tests/modules/payments/services/test_notifications.py

Notificaciones de pago (fire-and-forget) y construcción del sender de correo.
"""

from decimal import Decimal
from types import SimpleNamespace

import pytest
from pydantic import SecretStr

from app.shared.config import get_settings
from app.shared.config.settings_payments import PaymentsSettings
from app.shared.integrations import ConsoleEmailSender, SMTPEmailSender, build_email_sender
from app.modules.payments.enums import Currency
from app.modules.payments.services import (
    EmailPaymentNotifier,
    LoggingPaymentNotifier,
    PaymentNotificationDispatcher,
    build_payment_notifier,
)


class FakeSender:
    def __init__(self):
        self.sent = []

    async def send_email(self, to_email, subject, text):
        self.sent.append((to_email, subject, text))


def _payment(**overrides):
    data = {
        "amount": Decimal("500.00"),
        "currency": Currency.MXN,
        "receipt_number": "RCP-20260309-ABCDEF12",
        "transaction_id": "TXN-1-ABC",
        "refund_amount": Decimal("200.00"),
        "refund_reason": "Baja",
        "payment_metadata": {"payer_email": "ana@example.com"},
    }
    data.update(overrides)
    return SimpleNamespace(**data)


ENROLLMENT = SimpleNamespace(id="e-1", student_id="s-1", remaining_amount=Decimal("1000.00"))


class TestEmailPaymentNotifier:
    async def test_completed_mail(self):
        sender = FakeSender()
        await EmailPaymentNotifier(sender).payment_completed(_payment(), ENROLLMENT)

        to_email, subject, text = sender.sent[0]
        assert to_email == "ana@example.com"
        assert subject == "Pago recibido"
        assert "RCP-20260309-ABCDEF12" in text
        assert "1000.00" in text

    async def test_refunded_mail(self):
        sender = FakeSender()
        await EmailPaymentNotifier(sender).payment_refunded(_payment(), ENROLLMENT)

        _, subject, text = sender.sent[0]
        assert subject == "Reembolso procesado"
        assert "200.00 MXN" in text
        assert "Baja" in text

    async def test_without_payer_email_sends_nothing(self):
        sender = FakeSender()
        notifier = EmailPaymentNotifier(sender)
        await notifier.payment_completed(_payment(payment_metadata={}), ENROLLMENT)
        await notifier.payment_refunded(_payment(payment_metadata=None), ENROLLMENT)
        assert sender.sent == []


class TestDispatcher:
    async def test_swallows_notifier_errors(self):
        class Broken:
            async def payment_completed(self, payment, enrollment):
                raise ConnectionError("smtp caído")

            async def payment_refunded(self, payment, enrollment):
                raise ConnectionError("smtp caído")

        dispatcher = PaymentNotificationDispatcher(Broken(), settings=PaymentsSettings())
        await dispatcher.payment_completed(_payment(), ENROLLMENT)
        await dispatcher.payment_refunded(_payment(), ENROLLMENT)

    async def test_respects_flags(self):
        sender = FakeSender()
        settings = PaymentsSettings(notify_payment_completed=False, notify_payment_refunded=False)
        dispatcher = PaymentNotificationDispatcher(EmailPaymentNotifier(sender), settings=settings)

        await dispatcher.payment_completed(_payment(), ENROLLMENT)
        await dispatcher.payment_refunded(_payment(), ENROLLMENT)

        assert sender.sent == []

    async def test_defaults_to_logging(self):
        dispatcher = PaymentNotificationDispatcher(settings=PaymentsSettings())
        assert isinstance(dispatcher.notifier, LoggingPaymentNotifier)
        await dispatcher.payment_completed(_payment(), ENROLLMENT)


class TestBuilders:
    def test_console_mode(self):
        settings = get_settings().model_copy(update={"email_mode": "console"})
        assert isinstance(build_email_sender(settings), ConsoleEmailSender)
        assert isinstance(build_payment_notifier(settings), LoggingPaymentNotifier)

    def test_smtp_mode(self):
        settings = get_settings().model_copy(update={
            "email_mode": "smtp",
            "email_server": "smtp.example.com",
            "email_username": "bot",
            "email_password": SecretStr("secreto"),
            "email_from": "pagos@example.com",
        })
        notifier = build_payment_notifier(settings)
        assert isinstance(notifier, EmailPaymentNotifier)
        assert isinstance(notifier.sender, SMTPEmailSender)
        assert notifier.sender.server == "smtp.example.com"

    def test_smtp_mode_requires_credentials(self):
        settings = get_settings().model_copy(update={"email_mode": "smtp", "email_server": None})
        with pytest.raises(ValueError):
            build_email_sender(settings)

    def test_smtp_message(self):
        sender = SMTPEmailSender(
            server="smtp.example.com",
            port=587,
            username="bot",
            password="x",
            from_email="pagos@example.com",
        )
        msg = sender.build_message("ana@example.com", "Pago recibido", "Hola")
        assert msg["To"] == "ana@example.com"
        assert "pagos@example.com" in msg["From"]
        assert msg.get_content().strip() == "Hola"

# Fin del archivo tests/modules/payments/services/test_notifications.py
