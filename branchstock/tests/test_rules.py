"""
Tests for branchstock.rules — pure functions, no database.
"""

from decimal import Decimal

import pytest

from branchstock.exceptions import ValidationError
from branchstock.models import StockStatus, TransactionType
from branchstock.rules import (
    coerce_transaction_type,
    stock_status,
    total_cost,
    validate_thresholds,
    validate_transaction,
)


class TestValidateTransaction:

    @pytest.mark.parametrize('transaction_type,quantity', [
        (TransactionType.PURCHASE, 5),
        (TransactionType.INITIAL_STOCK, 1),
        (TransactionType.RETURN, 2),
        (TransactionType.SALE, -5),
    ])
    def test_valid(self, transaction_type, quantity):
        validate_transaction(transaction_type, quantity)

    def test_adjustment_either_sign(self):
        validate_transaction(TransactionType.ADJUSTMENT, 3, reason='Recount')
        validate_transaction(TransactionType.ADJUSTMENT, -3, reason='Recount')

    def test_zero(self):
        with pytest.raises(ValidationError) as exc:
            validate_transaction(TransactionType.PURCHASE, 0)

        assert exc.value.code == 'INVALID_QUANTITY'

    def test_loss_needs_reason(self):
        with pytest.raises(ValidationError) as exc:
            validate_transaction(TransactionType.EXPIRED, -1)

        assert exc.value.code == 'REASON_REQUIRED'
        assert exc.value.field == 'reason'

    def test_coerce(self):
        assert coerce_transaction_type('SALE') is TransactionType.SALE
        with pytest.raises(ValidationError):
            coerce_transaction_type('sale')


class TestStockStatus:

    @pytest.mark.parametrize('current,expected', [
        (0, StockStatus.OUT_OF_STOCK),
        (1, StockStatus.CRITICAL),
        (10, StockStatus.CRITICAL),
        (11, StockStatus.LOW),
        (20, StockStatus.LOW),
        (21, StockStatus.IN_STOCK),
    ])
    def test_boundaries(self, current, expected):
        assert stock_status(current, 10, 20) == expected


class TestThresholds:

    def test_ordered(self):
        validate_thresholds(5, 10, 100)
        validate_thresholds(10, 10, 10)
        validate_thresholds(None, None, None)

    @pytest.mark.parametrize('values,field', [
        ((-1, 10, None), 'minimum_stock'),
        ((11, 10, None), 'reorder_point'),
        ((5, 10, 9), 'maximum_stock'),
    ])
    def test_rejected(self, values, field):
        with pytest.raises(ValidationError) as exc:
            validate_thresholds(*values)

        assert exc.value.code == 'INVALID_THRESHOLDS'
        assert exc.value.field == field


def test_total_cost():
    assert total_cost(None, 5) is None
    assert total_cost(Decimal('1.25'), -4) == Decimal('5.00')
    assert total_cost('0.10', 3) == Decimal('0.30')
