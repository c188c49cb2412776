"""Exceptions raised by the store's service layer.

Each class carries the HTTP status code views answer with, so views can
catch ``StoreError`` at the call site and return a one-shot message.
"""


class StoreError(Exception):
    """Base class for store errors."""

    status_code = 400
    default_message = "Request could not be completed"

    def __init__(self, message: str | None = None, **details):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class AuthError(StoreError):
    """Invalid credentials or a registration that cannot be completed."""

    status_code = 401
    default_message = "Invalid credentials"


class DuplicateRegistrationError(AuthError):
    status_code = 400
    default_message = "Email already registered"


class AccessDeniedError(StoreError):
    status_code = 403
    default_message = "You don't have permission to do that"


class NotFoundError(StoreError):
    """Product or order missing at read time."""

    status_code = 404
    default_message = "Not found"


class ValidationError(StoreError):
    """Malformed input: quantities, prices, uploads."""

    status_code = 400
    default_message = "Invalid input"


class EmptyCartError(StoreError):
    status_code = 400
    default_message = "Cart is empty"


class InvalidStatusTransition(StoreError):
    """Order status may only move forward."""

    status_code = 409

    def __init__(self, from_status: str, to_status: str):
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            f"Cannot move order from {from_status} back to {to_status}",
            from_status=from_status,
            to_status=to_status,
        )


class PersistenceError(StoreError):
    """A database write failed."""

    status_code = 503
    default_message = "Could not save changes, please try again"
