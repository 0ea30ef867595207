"""
BranchInventory model — current quantity and thresholds per (product, branch).
"""

from django.db import models
from django.db.models import Case, F, Q, Value, When
from django.db.models.functions import Coalesce
from django.utils.translation import gettext_lazy as _

from branchstock.models.enums import StockStatus


# Fallbacks for null thresholds when classifying records
MINIMUM_STOCK_FALLBACK = 10
REORDER_POINT_FALLBACK = 20


class BranchInventoryQuerySet(models.QuerySet):
    """QuerySet with helpers for branch stock queries."""

    def for_product(self, product_id):
        return self.filter(product_id=product_id)

    def for_branch(self, branch_id):
        return self.filter(branch_id=branch_id)

    def with_thresholds(self):
        """Annotate effective thresholds (null thresholds read as fallbacks)."""
        return self.annotate(
            effective_minimum=Coalesce(
                F('minimum_stock'), Value(MINIMUM_STOCK_FALLBACK), output_field=models.IntegerField()
            ),
            effective_reorder=Coalesce(
                F('reorder_point'), Value(REORDER_POINT_FALLBACK), output_field=models.IntegerField()
            ),
        )

    def with_status(self, status):
        """
        Filter by derived status, evaluated in the database.

        Args:
            status: StockStatus value (or its string)
        """
        qs = self.with_thresholds()
        status = StockStatus(status)
        if status == StockStatus.OUT_OF_STOCK:
            return qs.filter(current_stock=0)
        if status == StockStatus.CRITICAL:
            return qs.filter(current_stock__gt=0, current_stock__lte=F('effective_minimum'))
        if status == StockStatus.LOW:
            return qs.filter(
                current_stock__gt=F('effective_minimum'),
                current_stock__lte=F('effective_reorder'),
            )
        return qs.filter(current_stock__gt=F('effective_reorder'))

    def needing_attention(self):
        """Records at or below their reorder point (includes out of stock)."""
        return self.with_thresholds().filter(
            Q(current_stock=0) | Q(current_stock__lte=F('effective_reorder'))
        )

    def annotate_status(self):
        """Annotate `status_code` so callers can group without Python loops."""
        return self.with_thresholds().annotate(
            status_code=Case(
                When(current_stock=0, then=Value(StockStatus.OUT_OF_STOCK.value)),
                When(current_stock__lte=F('effective_minimum'),
                     then=Value(StockStatus.CRITICAL.value)),
                When(current_stock__lte=F('effective_reorder'),
                     then=Value(StockStatus.LOW.value)),
                default=Value(StockStatus.IN_STOCK.value),
                output_field=models.CharField(),
            )
        )


class BranchInventory(models.Model):
    """
    Branch Inventory Record — one row per (product_id, branch_id).

    Products and branches live outside this app; they are referenced by id
    and validated through the configured CatalogBackend.

    current_stock is a cache of the ledger:
    - it is written ONLY by LedgerEntry.save() (see models/entry.py)
    - it always equals quantity_after of the latest entry for the pair
    - thresholds can be edited freely, they never create entries
    """

    product_id = models.PositiveIntegerField(
        db_index=True,
        verbose_name=_('Product ID'),
    )
    branch_id = models.PositiveIntegerField(
        db_index=True,
        verbose_name=_('Branch ID'),
    )

    current_stock = models.IntegerField(
        default=0,
        editable=False,
        verbose_name=_('Current stock'),
        help_text=_('Updated only through ledger entries.'),
    )
    minimum_stock = models.PositiveIntegerField(
        null=True,
        blank=True,
        default=10,
        verbose_name=_('Minimum stock'),
    )
    reorder_point = models.PositiveIntegerField(
        null=True,
        blank=True,
        default=20,
        verbose_name=_('Reorder point'),
    )
    maximum_stock = models.PositiveIntegerField(
        null=True,
        blank=True,
        verbose_name=_('Maximum stock'),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = BranchInventoryQuerySet.as_manager()

    class Meta:
        verbose_name = _('Branch stock')
        verbose_name_plural = _('Branch stocks')
        ordering = ['branch_id', 'product_id']
        constraints = [
            models.UniqueConstraint(
                fields=['product_id', 'branch_id'],
                name='unique_branch_inventory',
            ),
            models.CheckConstraint(
                condition=Q(current_stock__gte=0),
                name='branch_inventory_stock_non_negative',
            ),
        ]

    # ══════════════════════════════════════════════════════════════
    # PROPERTIES
    # ══════════════════════════════════════════════════════════════

    @property
    def effective_minimum_stock(self) -> int:
        return MINIMUM_STOCK_FALLBACK if self.minimum_stock is None else self.minimum_stock

    @property
    def effective_reorder_point(self) -> int:
        return REORDER_POINT_FALLBACK if self.reorder_point is None else self.reorder_point

    @property
    def status(self) -> StockStatus:
        """Derived stock status, never stored."""
        # Import here to avoid circular import
        from branchstock.rules import stock_status

        return stock_status(
            self.current_stock,
            self.effective_minimum_stock,
            self.effective_reorder_point,
        )

    @property
    def is_out_of_stock(self) -> bool:
        return self.current_stock == 0

    @property
    def is_low_stock(self) -> bool:
        """In stock but at or below the reorder point."""
        return 0 < self.current_stock <= self.effective_reorder_point

    # ══════════════════════════════════════════════════════════════
    # METHODS
    # ══════════════════════════════════════════════════════════════

    def latest_entry(self):
        """Most recent ledger entry for this record, or None."""
        return self.entries.order_by('-created_at', '-pk').first()

    def __str__(self) -> str:
        return f"product {self.product_id} @ branch {self.branch_id}: {self.current_stock}"
