from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 500
    category = "internal_error"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    status_code = 400
    category = "validation_error"


class EmptyCartError(ValidationError):
    """Raised when checkout or payment is attempted on an empty cart."""

    category = "empty_cart"


class AuthenticationError(DomainError):
    """Raised when credentials or tokens are missing, invalid or expired."""

    status_code = 401
    category = "unauthenticated"


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403
    category = "forbidden"


class NotFoundError(DomainError):
    status_code = 404
    category = "not_found"


class ConflictError(DomainError):
    status_code = 409
    category = "conflict"


class InsufficientInventoryError(ConflictError):
    """Raised when stock cannot cover the requested quantity."""

    category = "insufficient_inventory"

    def __init__(self, product_id: int, product_name: Optional[str] = None):
        self.product_id = int(product_id)
        self.product_name = product_name
        label = f"{product_name} (#{product_id})" if product_name else f"#{product_id}"
        super().__init__(f"Insufficient inventory for product {label}")


class PaymentError(DomainError):
    """Raised when the payment processor rejects or has not completed a payment."""

    status_code = 400
    category = "payment_error"
