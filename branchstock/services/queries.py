"""
Ledger queries — read-only operations.

No locking; results reflect the last committed state.
"""

from datetime import datetime, timedelta

from django.db.models import Count, F, IntegerField, OuterRef, Subquery, Sum, Value
from django.db.models.functions import Coalesce
from django.utils import timezone

from branchstock.models.entry import LedgerEntry
from branchstock.models.enums import StockStatus
from branchstock.models.inventory import BranchInventory
from branchstock.rules import coerce_transaction_type

# Window for the recent_transactions count of a branch summary
RECENT_TRANSACTION_DAYS = 7


class LedgerQueries:
    """Read-only ledger query methods."""

    def get_inventory(self, product_id, branch_id) -> BranchInventory | None:
        """Inventory record for the pair, or None if never touched."""
        return BranchInventory.objects.filter(product_id=product_id, branch_id=branch_id).first()

    def list_inventory(self, branch_id=None, product_id=None, status=None):
        """
        Inventory records, optionally filtered.

        Args:
            branch_id: Only this branch
            product_id: Only this product
            status: StockStatus (or its value), evaluated in the database

        Returns:
            QuerySet of BranchInventory
        """
        qs = BranchInventory.objects.all()
        if branch_id is not None:
            qs = qs.for_branch(branch_id)
        if product_id is not None:
            qs = qs.for_product(product_id)
        if status:
            qs = qs.with_status(status)
        return qs

    def total_stock(self, product_id) -> int:
        """Sum of current_stock across all branches."""
        return BranchInventory.objects.for_product(product_id).aggregate(
            t=Coalesce(Sum('current_stock'), 0)
        )['t']

    def product_stock(self, product_id) -> dict:
        """
        One product's stock across every branch that holds a record.

        Raises:
            NotFoundError('PRODUCT_NOT_FOUND'): Unknown product (when
                references are validated)

        Returns:
            {'product_id', 'total_stock', 'inventory': QuerySet ordered by branch}
        """
        self._check_references(product_id)
        return {
            'product_id': product_id,
            'total_stock': self.total_stock(product_id),
            'inventory': self.list_inventory(product_id=product_id).order_by('branch_id'),
        }

    def history(self, product_id=None, branch_id=None, transaction_type=None,
                date_from=None, date_to=None):
        """
        Ledger entries, newest first.

        Args:
            date_from: Lower bound (date or datetime)
            date_to: Upper bound; a date includes that whole day
        """
        qs = LedgerEntry.objects.select_related('performed_by')
        if product_id is not None:
            qs = qs.filter(product_id=product_id)
        if branch_id is not None:
            qs = qs.filter(branch_id=branch_id)
        if transaction_type:
            qs = qs.filter(transaction_type=coerce_transaction_type(transaction_type))

        if date_from is not None:
            if isinstance(date_from, datetime):
                qs = qs.filter(created_at__gte=date_from)
            else:
                qs = qs.filter(created_at__date__gte=date_from)
        if date_to is not None:
            if isinstance(date_to, datetime):
                qs = qs.filter(created_at__lte=date_to)
            else:
                qs = qs.filter(created_at__date__lte=date_to)

        return qs.newest_first()

    def branch_summary(self, branch_id) -> dict:
        """
        Counts of records per status for one branch, plus the number of
        ledger entries written there in the last RECENT_TRANSACTION_DAYS days.

        Returns:
            {'branch_id', 'total_products', 'total_units', 'recent_transactions',
             'out_of_stock', 'critical', 'low', 'in_stock'}
        """
        qs = BranchInventory.objects.for_branch(branch_id)
        counts = {
            row['status_code']: row['n']
            for row in qs.annotate_status().values('status_code').annotate(n=Count('pk')).order_by()
        }
        totals = qs.aggregate(products=Count('pk'), units=Coalesce(Sum('current_stock'), 0))
        since = timezone.now() - timedelta(days=RECENT_TRANSACTION_DAYS)
        recent = LedgerEntry.objects.filter(branch_id=branch_id, created_at__gte=since).count()

        return {
            'branch_id': branch_id,
            'total_products': totals['products'],
            'total_units': totals['units'],
            'recent_transactions': recent,
            'out_of_stock': counts.get(StockStatus.OUT_OF_STOCK.value, 0),
            'critical': counts.get(StockStatus.CRITICAL.value, 0),
            'low': counts.get(StockStatus.LOW.value, 0),
            'in_stock': counts.get(StockStatus.IN_STOCK.value, 0),
        }

    def alerts(self, branch_id=None) -> dict:
        """
        Records at or below their reorder point, grouped by severity.

        Returns:
            {'out_of_stock': [...], 'critical': [...], 'low': [...]}
        """
        qs = BranchInventory.objects.needing_attention().order_by('current_stock', 'branch_id', 'product_id')
        if branch_id is not None:
            qs = qs.for_branch(branch_id)

        grouped = {'out_of_stock': [], 'critical': [], 'low': []}
        for inventory in qs:
            grouped[inventory.status.value.lower()].append(inventory)
        return grouped

    def find_inconsistencies(self, branch_id=None) -> list[tuple[BranchInventory, int]]:
        """
        Records whose cached current_stock disagrees with the ledger.

        The expected value is quantity_after of the latest entry (0 when
        the record has no entries).

        Returns:
            List of (inventory, expected)
        """
        latest = (
            LedgerEntry.objects
            .filter(inventory=OuterRef('pk'))
            .order_by('-created_at', '-pk')
            .values('quantity_after')[:1]
        )
        qs = BranchInventory.objects.annotate(
            expected=Coalesce(Subquery(latest), Value(0), output_field=IntegerField())
        ).exclude(current_stock=F('expected'))
        if branch_id is not None:
            qs = qs.for_branch(branch_id)

        return [(inventory, inventory.expected) for inventory in qs]
