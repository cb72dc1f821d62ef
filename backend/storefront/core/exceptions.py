"""
Domain errors.

Every error raised by a service derives from StorefrontError and carries
the HTTP status it maps to. The API layer turns them into
``{"error": message}`` responses in a single exception handler.
"""


class StorefrontError(Exception):
    """Base class for all domain errors."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(StorefrontError):
    """Requested entity does not exist."""

    status_code = 404


class InsufficientStockError(StorefrontError):
    """Product stock is lower than the requested quantity."""

    status_code = 409

    def __init__(self, product_name: str, available: int, requested: int) -> None:
        super().__init__(f"Not enough stock for product: {product_name}")
        self.product_name = product_name
        self.available = available
        self.requested = requested


class UnauthorizedError(StorefrontError):
    """Caller does not own the resource or lacks the required role."""

    status_code = 403


class AuthenticationError(StorefrontError):
    """Credentials or access token are invalid."""

    status_code = 401


class ValidationFailedError(StorefrontError):
    """Input violates a business rule."""

    status_code = 400


class PaymentError(StorefrontError):
    """Payment processor rejected or failed the charge."""

    status_code = 402


class OrderCreationError(StorefrontError):
    """Order could not be created. The underlying error is chained."""

    status_code = 400

    def __init__(self, reason: str) -> None:
        super().__init__(f"Error creating order: {reason}")
        self.reason = reason
