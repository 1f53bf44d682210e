from .idempotency import IdempotencyService

__all__ = ['IdempotencyService']
