"""Tutor services: prompt composition, reply validation, turn orchestration.

Use explicit imports:
    from app.services.tutor.exchange import ExchangeService
"""
