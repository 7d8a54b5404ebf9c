"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Input validation
  2xxx: Account / balance
  3xxx: Charge requests
  4xxx: Catalog / purchase
  9xxx: System

An already-approved charge request is NOT an error: the approval workflow
reports it as a successful replay (``already=True``).
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Input ---

class InvalidArgumentError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(1001, detail, 400)


# --- 2xxx: Account ---

class InsufficientBalanceError(AppError):
    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            2001,
            f"Insufficient balance: required {required}ks, available {available}ks",
            422,
        )
        self.required = required
        self.available = available


class UserNotFoundError(AppError):
    def __init__(self, ref: str) -> None:
        super().__init__(2002, f"User not found: {ref}", 404)


# --- 3xxx: Charge requests ---

class ChargeRequestNotFoundError(AppError):
    def __init__(self, request_id: int) -> None:
        super().__init__(3001, f"Charge request not found: {request_id}", 404)


# --- 4xxx: Catalog / purchase ---

class ProductNotFoundError(AppError):
    def __init__(self, product_id: int) -> None:
        super().__init__(4001, f"Product not found: {product_id}", 404)


class PriceMismatchError(AppError):
    def __init__(self, product_id: int, submitted: int, current: int) -> None:
        super().__init__(
            4002,
            f"Price mismatch for product {product_id}: submitted {submitted}ks, current {current}ks",
            409,
        )


# --- 9xxx: System ---

class RateLimitError(AppError):
    def __init__(self, retry_after: int = 60) -> None:
        super().__init__(9001, "Rate limit exceeded", 429)
        self.retry_after = retry_after


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)


class TransientStoreError(AppError):
    """Store timeout or connection failure. Nothing was committed; safe to retry."""

    def __init__(self, detail: str = "Store temporarily unavailable") -> None:
        super().__init__(9003, detail, 503)
