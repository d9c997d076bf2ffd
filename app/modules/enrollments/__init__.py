# -*- coding: utf-8 -*-
"""
app/modules/enrollments/__init__.py

Módulo de inscripciones: ciclo de vida académico y ledger del saldo.
El saldo (paid_amount / payment_status) lo recalcula exclusivamente el
motor de conciliación de Payments.
"""

__all__: list[str] = []
