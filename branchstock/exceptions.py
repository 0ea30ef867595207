"""
Exceptions for Branchstock.

Every failure raised by the ledger is a LedgerError subclass carrying a
structured code for programmatic handling and an HTTP-equivalent status.

    NotFoundError            404  product, branch or inventory record missing
    InsufficientStockError   400  reduction would drive current_stock negative
    AlreadyInitializedError  400  duplicate initialization
    ValidationError          400  bad quantity, direction or missing metadata
    PersistenceError         500  the atomic unit failed to commit (safe to retry)
"""

from datetime import date
from decimal import Decimal
from typing import Any


class LedgerError(Exception):
    """
    Structured exception for ledger operations.

    Usage:
        try:
            ledger.apply_transaction(product_id, branch_id, TransactionType.SALE, -5, user)
        except InsufficientStockError as e:
            print(f"Only {e.available} left")

    Attributes:
        code: Error code for programmatic handling
        message: Human-readable message
        data: Additional context data
    """

    status_code = 400
    default_code = 'LEDGER_ERROR'
    _default_messages: dict[str, str] = {}

    def __init__(self, code: str | None = None, message: str | None = None, **data: Any):
        self.code = code or self.default_code
        self.message = message or self._default_messages.get(self.code, self.code)
        self.data = data
        super().__init__(self.message)

    def as_dict(self) -> dict[str, Any]:
        """Serialize to dict (useful for APIs)."""
        return {
            'code': self.code,
            'message': self.message,
            'data': {
                k: str(v) if isinstance(v, (Decimal, date)) else v
                for k, v in self.data.items()
            },
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.code!r}, {self.data!r})"


class NotFoundError(LedgerError):
    """Referenced product, branch or branch inventory record does not exist."""

    status_code = 404
    default_code = 'NOT_FOUND'
    _default_messages = {
        'NOT_FOUND': 'Record not found',
        'PRODUCT_NOT_FOUND': 'Product not found',
        'BRANCH_NOT_FOUND': 'Branch not found',
        'INVENTORY_NOT_FOUND': 'Branch stock not found',
    }


class InsufficientStockError(LedgerError):
    """Requested reduction would drive current_stock below zero."""

    default_code = 'INSUFFICIENT_STOCK'
    _default_messages = {
        'INSUFFICIENT_STOCK': 'Insufficient stock',
    }

    @property
    def available(self) -> int:
        """Shortcut for data['available']."""
        return self.data.get('available', 0)

    @property
    def requested(self) -> int:
        """Shortcut for data['requested']."""
        return self.data.get('requested', 0)


class AlreadyInitializedError(LedgerError):
    default_code = 'ALREADY_INITIALIZED'
    _default_messages = {
        'ALREADY_INITIALIZED': 'Branch stock already initialized for this product',
    }


class ValidationError(LedgerError):
    """Invalid input or missing metadata for the transaction type."""

    default_code = 'INVALID'
    _default_messages = {
        'INVALID': 'Invalid request',
        'INVALID_QUANTITY': 'Quantity must be a non-zero integer',
        'INVALID_DIRECTION': 'Quantity sign not allowed for this transaction type',
        'INVALID_TRANSACTION_TYPE': 'Unknown transaction type',
        'INVALID_UNIT_COST': 'Unit cost cannot be negative',
        'INVALID_THRESHOLDS': 'Stock thresholds are inconsistent',
        'REASON_REQUIRED': 'Reason is required',
        'ACTOR_REQUIRED': 'The user performing the operation is required',
        'SAME_BRANCH': 'Cannot transfer to the same branch',
    }

    @property
    def field(self) -> str | None:
        """Name of the offending field, when known."""
        return self.data.get('field')


class PersistenceError(LedgerError):
    """The atomic unit failed to commit. Nothing was written."""

    status_code = 500
    default_code = 'PERSISTENCE_FAILED'
    _default_messages = {
        'PERSISTENCE_FAILED': 'Stock transaction could not be saved',
    }
