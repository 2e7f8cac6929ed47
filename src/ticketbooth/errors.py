"""Error taxonomy for ticket sales operations."""

from __future__ import annotations

from enum import Enum


class ErrorCode(Enum):
    """Stable error codes surfaced to callers."""

    VALIDATION_FAILED = "VALIDATION_FAILED"
    UNKNOWN_CATEGORY = "UNKNOWN_CATEGORY"
    INVALID_QUANTITY = "INVALID_QUANTITY"
    SALE_NOT_FOUND = "SALE_NOT_FOUND"
    DUPLICATE_SALE_ID = "DUPLICATE_SALE_ID"
    STORAGE_FAILED = "STORAGE_FAILED"
    SUMMARY_INCONSISTENT = "SUMMARY_INCONSISTENT"


class TicketboothError(Exception):
    """Base exception with a code and a user-safe message."""

    code: ErrorCode = ErrorCode.VALIDATION_FAILED

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


# ---------------------------------------------------------------------------
# Input errors (recovered locally, shown next to form fields)
# ---------------------------------------------------------------------------


class ValidationError(TicketboothError):
    """One or more form fields failed validation. No state was touched."""

    code = ErrorCode.VALIDATION_FAILED

    def __init__(self, field_errors: dict[str, str], message: str) -> None:
        super().__init__(message)
        self.field_errors = dict(field_errors)


# ---------------------------------------------------------------------------
# Integrity errors (should be unreachable when validation gated the input)
# ---------------------------------------------------------------------------


class UnknownCategoryError(TicketboothError, KeyError):
    """Category key is not in the price list."""

    code = ErrorCode.UNKNOWN_CATEGORY

    def __init__(self, category: object) -> None:
        super().__init__(f"Unknown ticket category: {category!r}")
        self.category = category

    def __str__(self) -> str:
        return TicketboothError.__str__(self)


class InvalidQuantityError(TicketboothError, ValueError):
    """Quantity is not a positive integer."""

    code = ErrorCode.INVALID_QUANTITY

    def __init__(self, quantity: object) -> None:
        super().__init__(f"Quantity must be a positive integer, got {quantity!r}")
        self.quantity = quantity


class SummaryConsistencyError(TicketboothError, AssertionError):
    """Summary would go negative: it no longer mirrors the ledger."""

    code = ErrorCode.SUMMARY_INCONSISTENT


# ---------------------------------------------------------------------------
# Ledger misuse (surfaced as a notification, state unchanged)
# ---------------------------------------------------------------------------


class SaleNotFoundError(TicketboothError):
    """No sale with the given id is in the ledger."""

    code = ErrorCode.SALE_NOT_FOUND

    def __init__(self, sale_id: int) -> None:
        super().__init__(f"Sale {sale_id} not found")
        self.sale_id = sale_id


class DuplicateSaleIdError(TicketboothError):
    """A sale with the same id is already in the ledger."""

    code = ErrorCode.DUPLICATE_SALE_ID

    def __init__(self, sale_id: int) -> None:
        super().__init__(f"Sale {sale_id} already exists")
        self.sale_id = sale_id


# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------


class StorageError(TicketboothError):
    """The key-value store could not be read or written."""

    code = ErrorCode.STORAGE_FAILED
