# -*- coding: utf-8 -*-
"""
app/modules/payments/facades/__init__.py

Fachadas del módulo Payments. Cada una es dueña de la transacción.

Este __init__ NO importa submódulos; se importan explícitamente:

      from app.modules.payments.facades.payments import initiate_payment, run_expiry_sweep
      from app.modules.payments.facades.refunds import process_refund
      from app.modules.payments.facades.webhooks import handle_webhook
"""

__all__: list[str] = []
