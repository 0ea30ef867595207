"""
Tests for BranchInventory and LedgerEntry model guarantees.
"""

import pytest
from django.db import IntegrityError, transaction
from django.db.models.deletion import ProtectedError

from branchstock.models import BranchInventory, LedgerEntry, StockStatus, TransactionType


pytestmark = pytest.mark.django_db


class TestLedgerEntryImmutability:

    def test_cannot_update(self, ledger, stocked):
        entry = stocked.latest_entry()
        entry.quantity = 999

        with pytest.raises(ValueError, match="immutable"):
            entry.save()

    def test_cannot_delete(self, ledger, stocked):
        with pytest.raises(ValueError, match="immutable"):
            stocked.latest_entry().delete()

    def test_arithmetic_checked_before_insert(self, stocked, user):
        entry = LedgerEntry(
            inventory=stocked,
            product_id=stocked.product_id,
            branch_id=stocked.branch_id,
            transaction_type=TransactionType.ADJUSTMENT,
            quantity=5,
            quantity_before=50,
            quantity_after=60,
            reason='Bad math',
            performed_by=user,
        )
        with pytest.raises(ValueError, match="must equal"):
            entry.save()

        stocked.refresh_from_db()
        assert stocked.current_stock == 50

    def test_save_moves_cached_quantity(self, stocked, user):
        LedgerEntry(
            inventory=stocked,
            product_id=stocked.product_id,
            branch_id=stocked.branch_id,
            transaction_type=TransactionType.ADJUSTMENT,
            quantity=-20,
            quantity_before=50,
            quantity_after=30,
            reason='Count',
            performed_by=user,
        ).save()

        stocked.refresh_from_db()
        assert stocked.current_stock == 30

    def test_str(self, stocked):
        assert str(stocked.latest_entry()) == "INITIAL_STOCK +50 (0 → 50)"


class TestBranchInventoryModel:

    def test_unique_pair(self, stocked):
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                BranchInventory.objects.create(product_id=stocked.product_id, branch_id=stocked.branch_id)

    def test_negative_stock_rejected_by_database(self, stocked):
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                BranchInventory.objects.filter(pk=stocked.pk).update(current_stock=-1)

    def test_protected_by_entries(self, stocked):
        with pytest.raises(ProtectedError):
            stocked.delete()

    def test_status_properties(self):
        inventory = BranchInventory(product_id=1, branch_id=1, current_stock=0)
        assert inventory.is_out_of_stock
        assert not inventory.is_low_stock
        assert inventory.status == StockStatus.OUT_OF_STOCK

        inventory.current_stock = 12
        assert inventory.is_low_stock
        assert inventory.status == StockStatus.LOW

    def test_null_thresholds_fall_back(self):
        inventory = BranchInventory(product_id=1, branch_id=1, current_stock=9,
                                    minimum_stock=None, reorder_point=None)

        assert inventory.effective_minimum_stock == 10
        assert inventory.effective_reorder_point == 20
        assert inventory.status == StockStatus.CRITICAL

    def test_latest_entry(self, ledger, stocked, bread, central, user):
        entry = ledger.adjust_stock(bread.pk, central.pk, -1, 'Count', user)

        assert stocked.latest_entry() == entry
