"""
Tests for ledger.record_sale() — the glue used by the sales flow.
"""

import pytest
from django.db import transaction

from branchstock.exceptions import InsufficientStockError, ValidationError
from branchstock.models import LedgerEntry, TransactionType
from branchstock.services import SaleLine


pytestmark = pytest.mark.django_db


@pytest.fixture
def shelf(ledger, bread, milk, central, user):
    ledger.add_stock(bread.pk, central.pk, 20, user)
    ledger.add_stock(milk.pk, central.pk, 3, user)


class TestRecordSale:

    def test_every_line_deducted(self, ledger, shelf, bread, milk, central, cashier):
        entries = ledger.record_sale(1001, central.pk, [SaleLine(bread.pk, 4), SaleLine(milk.pk, 1)], cashier)

        assert [e.transaction_type for e in entries] == [TransactionType.SALE, TransactionType.SALE]
        assert [e.quantity for e in entries] == [-4, -1]
        assert all(e.reference_id == 1001 and e.reference_type == 'sale' for e in entries)
        assert all(e.performed_by == cashier for e in entries)
        assert ledger.get_inventory(bread.pk, central.pk).current_stock == 16
        assert ledger.get_inventory(milk.pk, central.pk).current_stock == 2

    def test_plain_tuples_accepted(self, ledger, shelf, bread, central, cashier):
        entries = ledger.record_sale(1002, central.pk, [(bread.pk, 2)], cashier)

        assert entries[0].quantity_after == 18

    def test_one_short_line_cancels_all(self, ledger, shelf, bread, milk, central, cashier):
        """Bread is available, milk is not: neither is deducted."""
        with pytest.raises(InsufficientStockError) as exc:
            ledger.record_sale(1003, central.pk, [SaleLine(bread.pk, 4), SaleLine(milk.pk, 5)], cashier)

        assert exc.value.data['product_id'] == milk.pk
        assert ledger.get_inventory(bread.pk, central.pk).current_stock == 20
        assert ledger.get_inventory(milk.pk, central.pk).current_stock == 3
        assert not LedgerEntry.objects.filter(reference_id=1003).exists()

    def test_rolls_back_with_the_sale(self, ledger, shelf, bread, central, cashier):
        """Stock and sale record share the caller's transaction."""
        with pytest.raises(RuntimeError):
            with transaction.atomic():
                ledger.record_sale(1004, central.pk, [SaleLine(bread.pk, 4)], cashier)
                raise RuntimeError("payment declined")

        assert ledger.get_inventory(bread.pk, central.pk).current_stock == 20

    def test_non_positive_line(self, ledger, shelf, bread, central, cashier):
        with pytest.raises(ValidationError) as exc:
            ledger.record_sale(1005, central.pk, [SaleLine(bread.pk, 0)], cashier)

        assert exc.value.code == 'INVALID_QUANTITY'
