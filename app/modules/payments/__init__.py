# -*- coding: utf-8 -*-
"""
app/modules/payments/__init__.py

Módulo de pagos del backend escolar.

Este módulo gestiona:
- Pagos por canal (manual, Stripe, Conekta tarjeta/OXXO/SPEI)
- Conciliación del saldo de inscripciones
- Webhooks de pasarelas y su bitácora (payment_events)
- Reembolsos y barrido de pagos vencidos

Estructura:
- enums, models, repositories: ledger
- adapters: pasarelas de pago
- services: lógica de negocio (solo flush)
- facades: orquestación con commit/rollback
- routes: API REST

Los submódulos se importan explícitamente para evitar ciclos.
"""

__all__: list[str] = []
