"""
Tests for the read-only ledger queries.
"""

from datetime import timedelta

import pytest
from django.utils import timezone

from branchstock.exceptions import NotFoundError
from branchstock.models import BranchInventory, LedgerEntry, StockStatus, TransactionType


pytestmark = pytest.mark.django_db


@pytest.fixture
def shelves(ledger, bread, milk, central, north, user):
    """
    Central: bread 50 (IN_STOCK), milk 0 (OUT_OF_STOCK)
    North:   bread 8 (CRITICAL), milk 15 (LOW)
    """
    ledger.initialize(bread.pk, central.pk, user, initial_stock=50)
    ledger.initialize(milk.pk, central.pk, user)
    ledger.initialize(bread.pk, north.pk, user, initial_stock=8)
    ledger.initialize(milk.pk, north.pk, user, initial_stock=15)


class TestLookups:

    def test_get_inventory_missing(self, ledger, bread, central):
        assert ledger.get_inventory(bread.pk, central.pk) is None

    def test_total_stock(self, ledger, shelves, bread, milk):
        assert ledger.total_stock(bread.pk) == 58
        assert ledger.total_stock(milk.pk) == 15

    def test_total_stock_unknown_product(self, ledger):
        assert ledger.total_stock(12345) == 0

    def test_list_by_branch(self, ledger, shelves, north):
        records = ledger.list_inventory(branch_id=north.pk)

        assert {r.branch_id for r in records} == {north.pk}
        assert records.count() == 2

    def test_list_by_product(self, ledger, shelves, bread):
        assert ledger.list_inventory(product_id=bread.pk).count() == 2

    @pytest.mark.parametrize('status,expected', [
        (StockStatus.OUT_OF_STOCK, 1),
        (StockStatus.CRITICAL, 1),
        (StockStatus.LOW, 1),
        (StockStatus.IN_STOCK, 1),
    ])
    def test_list_by_status(self, ledger, shelves, status, expected):
        records = list(ledger.list_inventory(status=status))

        assert len(records) == expected
        assert all(r.status == status for r in records)

    def test_list_by_status_string(self, ledger, shelves, milk):
        records = list(ledger.list_inventory(status='OUT_OF_STOCK'))

        assert [r.product_id for r in records] == [milk.pk]

    def test_reads_do_not_change_state(self, ledger, shelves, bread, central):
        snapshot = list(BranchInventory.objects.values_list('pk', 'current_stock'))

        ledger.get_inventory(bread.pk, central.pk)
        list(ledger.list_inventory())
        ledger.alerts()
        ledger.branch_summary(central.pk)

        assert list(BranchInventory.objects.values_list('pk', 'current_stock')) == snapshot


class TestProductStock:

    def test_across_branches(self, ledger, shelves, bread, central, north):
        stock = ledger.product_stock(bread.pk)

        assert stock['product_id'] == bread.pk
        assert stock['total_stock'] == 58
        assert [(r.branch_id, r.current_stock) for r in stock['inventory']] == [
            (central.pk, 50),
            (north.pk, 8),
        ]

    def test_product_without_records(self, ledger, milk):
        stock = ledger.product_stock(milk.pk)

        assert stock['total_stock'] == 0
        assert list(stock['inventory']) == []

    def test_unknown_product(self, ledger, db):
        with pytest.raises(NotFoundError) as exc:
            ledger.product_stock(9999)

        assert exc.value.code == 'PRODUCT_NOT_FOUND'


class TestHistory:

    def test_newest_first(self, ledger, bread, central, user, cashier):
        ledger.add_stock(bread.pk, central.pk, 10, user)
        ledger.apply_transaction(bread.pk, central.pk, TransactionType.SALE, -2, cashier)
        ledger.apply_transaction(bread.pk, central.pk, TransactionType.SALE, -3, cashier)

        assert [e.quantity for e in ledger.history(product_id=bread.pk)] == [-3, -2, 10]

    def test_filters(self, ledger, shelves, bread, milk, north, user):
        ledger.adjust_stock(bread.pk, north.pk, 1, 'Recount', user)

        history = ledger.history(branch_id=north.pk, transaction_type='ADJUSTMENT')
        assert [(e.product_id, e.quantity) for e in history] == [(bread.pk, 1)]

        assert ledger.history(product_id=milk.pk).count() == 1  # milk at central had no stock

    def test_date_to_includes_whole_day(self, ledger, bread, central, user):
        ledger.add_stock(bread.pk, central.pk, 10, user)
        today = timezone.localdate()

        assert ledger.history(date_to=today).count() == 1
        assert ledger.history(date_from=today, date_to=today).count() == 1
        assert ledger.history(date_from=today + timedelta(days=1)).count() == 0
        assert ledger.history(date_to=today - timedelta(days=1)).count() == 0

    def test_datetime_bounds(self, ledger, bread, central, user):
        ledger.add_stock(bread.pk, central.pk, 10, user)
        now = timezone.now()

        assert ledger.history(date_from=now - timedelta(minutes=5), date_to=now).count() == 1
        assert ledger.history(date_from=now + timedelta(minutes=5)).count() == 0


class TestSummaryAndAlerts:

    def test_branch_summary(self, ledger, shelves, central, north):
        assert ledger.branch_summary(north.pk) == {
            'branch_id': north.pk,
            'total_products': 2,
            'total_units': 23,
            'recent_transactions': 2,
            'out_of_stock': 0,
            'critical': 1,
            'low': 1,
            'in_stock': 0,
        }
        summary = ledger.branch_summary(central.pk)
        assert (summary['out_of_stock'], summary['in_stock']) == (1, 1)

    def test_empty_branch_summary(self, ledger, db):
        summary = ledger.branch_summary(777)

        assert summary['total_products'] == 0
        assert summary['total_units'] == 0

    def test_recent_transactions_window(self, ledger, shelves, bread, north, user):
        ledger.adjust_stock(bread.pk, north.pk, 2, 'Recount', user)
        LedgerEntry.objects.filter(branch_id=north.pk, transaction_type=TransactionType.INITIAL_STOCK).update(
            created_at=timezone.now() - timedelta(days=8)
        )

        assert ledger.branch_summary(north.pk)['recent_transactions'] == 1

    def test_alerts_grouped(self, ledger, shelves, bread, milk, central, north):
        alerts = ledger.alerts()

        assert [(r.product_id, r.branch_id) for r in alerts['out_of_stock']] == [(milk.pk, central.pk)]
        assert [(r.product_id, r.branch_id) for r in alerts['critical']] == [(bread.pk, north.pk)]
        assert [(r.product_id, r.branch_id) for r in alerts['low']] == [(milk.pk, north.pk)]

    def test_alerts_for_branch(self, ledger, shelves, central):
        alerts = ledger.alerts(branch_id=central.pk)

        assert len(alerts['out_of_stock']) == 1
        assert alerts['critical'] == []
        assert alerts['low'] == []

    def test_null_thresholds_use_fallbacks(self, ledger, bread, central, user):
        ledger.add_stock(bread.pk, central.pk, 15, user)
        BranchInventory.objects.update(minimum_stock=None, reorder_point=None)

        assert len(ledger.alerts()['low']) == 1
        assert ledger.list_inventory(status=StockStatus.LOW).count() == 1


class TestConsistency:

    def test_consistent_ledger(self, ledger, shelves, bread, central, north, user):
        ledger.transfer(bread.pk, central.pk, north.pk, 5, user)

        assert ledger.find_inconsistencies() == []

    def test_detects_tampered_quantity(self, ledger, shelves, bread, north):
        BranchInventory.objects.filter(product_id=bread.pk, branch_id=north.pk).update(current_stock=99)

        broken = ledger.find_inconsistencies()

        assert len(broken) == 1
        inventory, expected = broken[0]
        assert (inventory.product_id, inventory.branch_id) == (bread.pk, north.pk)
        assert inventory.current_stock == 99
        assert expected == 8

    def test_record_without_entries_expects_zero(self, ledger, shelves, milk, central):
        BranchInventory.objects.filter(product_id=milk.pk, branch_id=central.pk).update(current_stock=4)

        assert [(inv.product_id, expected) for inv, expected in ledger.find_inconsistencies()] == [(milk.pk, 0)]

    def test_filter_by_branch(self, ledger, shelves, bread, central, north):
        BranchInventory.objects.filter(branch_id=north.pk).update(current_stock=1)

        assert ledger.find_inconsistencies(branch_id=central.pk) == []
        assert len(ledger.find_inconsistencies(branch_id=north.pk)) == 2
