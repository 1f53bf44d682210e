# shared/utils/idempotency.py
"""
Idempotency service to prevent duplicate processing.
Used for enrollment submissions and other multi-write operations.
"""
from django.core.cache import cache


class IdempotencyService:
    """Service to ensure operations are processed only once."""

    @staticmethod
    def get_idempotency_key(request, scope):
        """Build a per-user cache key from the X-Idempotency-Key header."""
        key = request.headers.get('X-Idempotency-Key')
        if not key:
            return None

        # Prefix with user ID to ensure the key is unique to this user
        user_id = getattr(request.user, 'id', None) or 'anonymous'
        return f"idemp_{scope}_{user_id}_{key}"

    @staticmethod
    def check_and_lock(key, ttl=300):  # 5 minutes lock
        """
        Check if operation was already processed and lock for processing.
        Returns True if should proceed, False if duplicate or in flight.
        """
        if cache.add(f"{key}_lock", True, ttl):
            if cache.get(f"{key}_processed") is not None:
                cache.delete(f"{key}_lock")
                return False
            return True
        return False

    @staticmethod
    def get_result(key):
        """Result stored by mark_processed, or None."""
        return cache.get(f"{key}_processed")

    @staticmethod
    def mark_processed(key, result=True, ttl=24*60*60):  # 24 hours
        """Mark operation as successfully processed and keep its result."""
        cache.set(f"{key}_processed", result, ttl)
        cache.delete(f"{key}_lock")

    @staticmethod
    def mark_failed(key):
        """Mark operation as failed (release lock for retry)."""
        cache.delete(f"{key}_lock")
