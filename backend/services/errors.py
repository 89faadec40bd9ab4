# backend/services/errors.py


class StorefrontError(Exception):
    """Base class for domain errors raised below the route layer."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class CartEmptyError(StorefrontError):
    status_code = 400


class PaymentDeclinedError(StorefrontError):
    status_code = 402

    def __init__(self, message: str, order_id=None):
        super().__init__(message)
        self.order_id = order_id


class PaymentProviderError(StorefrontError):
    """Transport or protocol failure talking to the payment gateway."""

    status_code = 502


class IdempotencyConflictError(StorefrontError):
    """Idempotency key already used by another session or account."""

    status_code = 409
