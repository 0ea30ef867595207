"""
Transaction rules — isolated, testable, reusable.

Pure functions that decide whether a ledger transaction is well-formed and
how a branch inventory record should be classified. No database access.

Examples:
    - SALE of -5: valid (sales always reduce stock)
    - SALE of +5: INVALID_DIRECTION
    - DAMAGE of -2 without a reason: REASON_REQUIRED
    - 15 units with minimum=10, reorder=20: LOW
"""

from decimal import Decimal

from branchstock.exceptions import ValidationError
from branchstock.models.enums import StockStatus, TransactionType


# Required sign of the delta per type (None = either sign)
DIRECTION = {
    TransactionType.INITIAL_STOCK: 1,
    TransactionType.PURCHASE: 1,
    TransactionType.RETURN: 1,
    TransactionType.SALE: -1,
    TransactionType.DAMAGE: -1,
    TransactionType.EXPIRED: -1,
    TransactionType.ADJUSTMENT: None,
}

REASON_REQUIRED = frozenset({
    TransactionType.ADJUSTMENT,
    TransactionType.DAMAGE,
    TransactionType.EXPIRED,
})

INBOUND_TYPES = frozenset({
    TransactionType.PURCHASE,
    TransactionType.INITIAL_STOCK,
    TransactionType.RETURN,
})

LOSS_TYPES = frozenset({
    TransactionType.DAMAGE,
    TransactionType.EXPIRED,
})


def is_whole_number(value) -> bool:
    """True for ints, excluding bools."""
    return isinstance(value, int) and not isinstance(value, bool)


def coerce_transaction_type(value) -> TransactionType:
    """Return the TransactionType for value or raise INVALID_TRANSACTION_TYPE."""
    try:
        return TransactionType(value)
    except ValueError:
        raise ValidationError(
            'INVALID_TRANSACTION_TYPE',
            field='transaction_type',
            transaction_type=value,
        ) from None


def validate_transaction(transaction_type: TransactionType, quantity, *,
                         reason: str = '', unit_cost=None) -> None:
    """
    Check a transaction before it touches the database.

    Args:
        transaction_type: Business reason for the change
        quantity: Signed delta (positive = in, negative = out)
        reason: Free text, required for ADJUSTMENT, DAMAGE and EXPIRED
        unit_cost: Optional cost per unit, must not be negative

    Raises:
        ValidationError: With code INVALID_QUANTITY, INVALID_DIRECTION,
            REASON_REQUIRED or INVALID_UNIT_COST
    """
    if not is_whole_number(quantity) or quantity == 0:
        raise ValidationError('INVALID_QUANTITY', field='quantity', quantity=quantity)

    direction = DIRECTION[transaction_type]
    if direction is not None and (quantity > 0) != (direction > 0):
        raise ValidationError(
            'INVALID_DIRECTION',
            field='quantity',
            transaction_type=transaction_type.value,
            quantity=quantity,
        )

    if transaction_type in REASON_REQUIRED and not (reason or '').strip():
        raise ValidationError(
            'REASON_REQUIRED',
            field='reason',
            transaction_type=transaction_type.value,
        )

    if unit_cost is not None and Decimal(str(unit_cost)) < 0:
        raise ValidationError('INVALID_UNIT_COST', field='unit_cost', unit_cost=unit_cost)


def total_cost(unit_cost, quantity: int) -> Decimal | None:
    """unit_cost × |quantity|, or None when no cost was given."""
    if unit_cost is None:
        return None
    return Decimal(str(unit_cost)) * abs(quantity)


def validate_thresholds(minimum_stock=None, reorder_point=None, maximum_stock=None) -> None:
    """
    Thresholds are non-negative integers ordered minimum <= reorder <= maximum.

    Unset (None) values are skipped, both for the type check and the ordering.
    """
    values = {
        'minimum_stock': minimum_stock,
        'reorder_point': reorder_point,
        'maximum_stock': maximum_stock,
    }
    for field, value in values.items():
        if value is not None and (not is_whole_number(value) or value < 0):
            raise ValidationError('INVALID_THRESHOLDS', field=field, **{field: value})

    if minimum_stock is not None and reorder_point is not None and minimum_stock > reorder_point:
        raise ValidationError(
            'INVALID_THRESHOLDS',
            field='reorder_point',
            minimum_stock=minimum_stock,
            reorder_point=reorder_point,
        )
    if reorder_point is not None and maximum_stock is not None and reorder_point > maximum_stock:
        raise ValidationError(
            'INVALID_THRESHOLDS',
            field='maximum_stock',
            reorder_point=reorder_point,
            maximum_stock=maximum_stock,
        )


def stock_status(current: int, minimum: int, reorder: int) -> StockStatus:
    """Classify a quantity against its thresholds."""
    if current <= 0:
        return StockStatus.OUT_OF_STOCK
    if current <= minimum:
        return StockStatus.CRITICAL
    if current <= reorder:
        return StockStatus.LOW
    return StockStatus.IN_STOCK
