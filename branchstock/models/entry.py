"""
LedgerEntry model — Immutable ledger of branch stock changes.
"""

from django.conf import settings
from django.db import models, transaction
from django.db.models import F, Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from branchstock.models.enums import TransactionType


class LedgerEntryQuerySet(models.QuerySet):

    def for_pair(self, product_id, branch_id):
        return self.filter(product_id=product_id, branch_id=branch_id)

    def newest_first(self):
        return self.order_by('-created_at', '-pk')


class LedgerEntry(models.Model):
    """
    Immutable record of one inventory-affecting event.

    Rules:
    - NEVER update() or delete()
    - Corrections are new entries with an inverse quantity
    - quantity_after = quantity_before + quantity, and quantity_after >= 0
    - Sets BranchInventory.current_stock atomically on save()

    This is the ONLY model that changes current_stock.
    """

    inventory = models.ForeignKey(
        'branchstock.BranchInventory',
        on_delete=models.PROTECT,
        related_name='entries',
        verbose_name=_('Branch stock'),
    )
    product_id = models.PositiveIntegerField(verbose_name=_('Product ID'))
    branch_id = models.PositiveIntegerField(verbose_name=_('Branch ID'))

    transaction_type = models.CharField(
        max_length=20,
        choices=TransactionType.choices,
        db_index=True,
        verbose_name=_('Transaction type'),
    )
    quantity = models.IntegerField(
        verbose_name=_('Quantity'),
        help_text=_('Positive = addition, negative = reduction'),
    )
    quantity_before = models.IntegerField(verbose_name=_('Quantity before'))
    quantity_after = models.IntegerField(verbose_name=_('Quantity after'))

    # Cost / batch metadata
    unit_cost = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        verbose_name=_('Unit cost'),
    )
    total_cost = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        verbose_name=_('Total cost'),
    )
    batch_number = models.CharField(max_length=100, blank=True, default='', verbose_name=_('Batch number'))
    expiry_date = models.DateField(null=True, blank=True, verbose_name=_('Expiry date'))
    supplier = models.CharField(max_length=255, blank=True, default='', verbose_name=_('Supplier'))
    reason = models.TextField(blank=True, default='', verbose_name=_('Reason'))

    # External reference (sale, purchase order, ...)
    reference_id = models.PositiveIntegerField(null=True, blank=True, verbose_name=_('Reference ID'))
    reference_type = models.CharField(max_length=50, blank=True, default='', verbose_name=_('Reference type'))

    performed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='branch_stock_entries',
        verbose_name=_('Performed by'),
    )
    created_at = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Created at'))

    objects = LedgerEntryQuerySet.as_manager()

    class Meta:
        verbose_name = _('Stock transaction')
        verbose_name_plural = _('Stock transactions')
        ordering = ['created_at', 'pk']
        indexes = [
            models.Index(fields=['product_id', 'branch_id', 'created_at'], name='ledger_pair_created_idx'),
            models.Index(fields=['branch_id', 'created_at'], name='ledger_branch_created_idx'),
        ]
        constraints = [
            models.CheckConstraint(condition=~Q(quantity=0), name='ledger_quantity_non_zero'),
            models.CheckConstraint(condition=Q(quantity_before__gte=0), name='ledger_before_non_negative'),
            models.CheckConstraint(condition=Q(quantity_after__gte=0), name='ledger_after_non_negative'),
            models.CheckConstraint(
                condition=Q(quantity_after=F('quantity_before') + F('quantity')),
                name='ledger_after_equals_before_plus_quantity',
            ),
        ]

    def save(self, *args, **kwargs):
        """Save entry and set the inventory's current_stock atomically."""
        if self.pk:
            raise ValueError(
                "Ledger entries are immutable. "
                "To correct, create a new entry with the inverse quantity."
            )

        if self.quantity_after != self.quantity_before + self.quantity:
            raise ValueError(
                f"quantity_after ({self.quantity_after}) must equal "
                f"quantity_before ({self.quantity_before}) + quantity ({self.quantity})"
            )
        if self.quantity_after < 0:
            raise ValueError("quantity_after cannot be negative")

        using = kwargs.get('using')
        with transaction.atomic(using=using):
            super().save(*args, **kwargs)

            # Import here to avoid circular import
            from branchstock.models.inventory import BranchInventory

            BranchInventory.objects.using(using).filter(pk=self.inventory_id).update(
                current_stock=self.quantity_after,
                updated_at=timezone.now(),
            )

    def delete(self, *args, **kwargs):
        """Prevent deletion — entries are immutable."""
        raise ValueError(
            "Ledger entries are immutable. "
            "To reverse, create a new entry with the inverse quantity."
        )

    @property
    def is_addition(self) -> bool:
        return self.quantity > 0

    def __str__(self) -> str:
        sign = '+' if self.quantity > 0 else ''
        return f"{self.transaction_type} {sign}{self.quantity} ({self.quantity_before} → {self.quantity_after})"
