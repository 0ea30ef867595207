"""
Ledger movements — state-changing operations (apply, add, adjust, loss, sale).

Every quantity change goes through apply_transaction(), which runs under
transaction.atomic() with a row lock on the BranchInventory record.
"""

import logging
from typing import NamedTuple

from django.db import DatabaseError, transaction

from branchstock.conf import branchstock_settings
from branchstock.exceptions import InsufficientStockError, PersistenceError, ValidationError
from branchstock.models.entry import LedgerEntry
from branchstock.models.enums import TransactionType
from branchstock.models.inventory import BranchInventory
from branchstock.protocols.sinks import AuditRecord, LowStockAlert, StockUpdate
from branchstock.rules import (
    INBOUND_TYPES,
    LOSS_TYPES,
    coerce_transaction_type,
    is_whole_number,
    total_cost,
    validate_transaction,
)
from branchstock.services.effects import after_commit, deliver

logger = logging.getLogger('branchstock')


class SaleLine(NamedTuple):
    """One sold line item: product and (positive) quantity sold."""

    product_id: int
    quantity: int


class LedgerMovements:
    """State-changing ledger methods."""

    def apply_transaction(self, product_id, branch_id, transaction_type, quantity,
                          performed_by, *, unit_cost=None, batch_number='',
                          expiry_date=None, supplier='', reason='',
                          reference_id=None, reference_type='', using=None) -> LedgerEntry:
        """
        Apply a signed quantity delta to a branch and append a ledger entry.

        The single authorized path for changing current_stock.

        Args:
            product_id: Product primary key (validated by the catalog)
            branch_id: Branch primary key (validated by the catalog)
            transaction_type: TransactionType (or its value)
            quantity: Non-zero signed int, positive = in, negative = out
            performed_by: User performing the operation (required)
            using: Database alias. An enclosing transaction.atomic() block
                is joined, so multi-step callers commit or roll back as one.

        Returns:
            The created LedgerEntry

        Raises:
            ValidationError: Bad quantity, direction or missing reason
            NotFoundError: Unknown product or branch
            InsufficientStockError: quantity_after would be negative
            PersistenceError: The atomic unit failed to commit

        Concurrency:
            - Runs under transaction.atomic()
            - Creates the inventory row lazily (get_or_create)
            - Uses select_for_update() on BranchInventory
            - Notifications and audit run on commit only
        """
        transaction_type = coerce_transaction_type(transaction_type)
        validate_transaction(transaction_type, quantity, reason=reason, unit_cost=unit_cost)
        self._require_actor(performed_by)
        self._check_references(product_id, branch_id)

        try:
            with transaction.atomic(using=using):
                inventory = self._lock_inventory(product_id, branch_id, using=using)

                quantity_before = inventory.current_stock
                quantity_after = quantity_before + quantity

                if quantity_after < 0:
                    raise InsufficientStockError(
                        available=quantity_before,
                        requested=abs(quantity),
                        product_id=product_id,
                        branch_id=branch_id,
                    )

                entry = LedgerEntry(
                    inventory=inventory,
                    product_id=product_id,
                    branch_id=branch_id,
                    transaction_type=transaction_type,
                    quantity=quantity,
                    quantity_before=quantity_before,
                    quantity_after=quantity_after,
                    unit_cost=unit_cost,
                    total_cost=total_cost(unit_cost, quantity),
                    batch_number=batch_number or '',
                    expiry_date=expiry_date,
                    supplier=supplier or '',
                    reason=reason or '',
                    reference_id=reference_id,
                    reference_type=reference_type or '',
                    performed_by=performed_by,
                )
                entry.save(using=using)
                inventory.current_stock = quantity_after
        except DatabaseError as exc:
            logger.error(
                "ledger.apply.failed",
                extra={
                    "product_id": product_id,
                    "branch_id": branch_id,
                    "transaction_type": transaction_type.value,
                    "qty": quantity,
                },
                exc_info=True,
            )
            raise PersistenceError(product_id=product_id, branch_id=branch_id) from exc

        logger.info(
            "ledger.apply",
            extra={
                "entry_id": entry.pk,
                "product_id": product_id,
                "branch_id": branch_id,
                "transaction_type": transaction_type.value,
                "qty": quantity,
                "before": quantity_before,
                "after": quantity_after,
            },
        )
        self._schedule_entry_effects(entry, inventory, using=using)
        return entry

    # ══════════════════════════════════════════════════════════════
    # STOCK SURFACE
    # ══════════════════════════════════════════════════════════════

    def add_stock(self, product_id, branch_id, quantity, performed_by,
                  transaction_type=TransactionType.PURCHASE, **details) -> LedgerEntry:
        """
        Stock entry (purchase, initial stock or customer return).

        details: unit_cost, batch_number, expiry_date, supplier, reason,
        reference_id, reference_type, using.
        """
        transaction_type = coerce_transaction_type(transaction_type)
        if transaction_type not in INBOUND_TYPES:
            raise ValidationError(
                'INVALID_TRANSACTION_TYPE',
                field='transaction_type',
                transaction_type=transaction_type.value,
                allowed=sorted(t.value for t in INBOUND_TYPES),
            )
        return self.apply_transaction(
            product_id, branch_id, transaction_type, quantity, performed_by, **details
        )

    def adjust_stock(self, product_id, branch_id, quantity, reason, performed_by,
                     using=None) -> LedgerEntry:
        """Manual adjustment by a signed quantity. Reason is required."""
        return self.apply_transaction(
            product_id, branch_id, TransactionType.ADJUSTMENT, quantity, performed_by,
            reason=reason, using=using,
        )

    def record_loss(self, product_id, branch_id, quantity, transaction_type, reason,
                    performed_by, batch_number='', using=None) -> LedgerEntry:
        """
        Record damaged or expired stock.

        Args:
            quantity: Positive number of units lost (stored as a negative delta)
            transaction_type: DAMAGE or EXPIRED
        """
        transaction_type = coerce_transaction_type(transaction_type)
        if transaction_type not in LOSS_TYPES:
            raise ValidationError(
                'INVALID_TRANSACTION_TYPE',
                field='transaction_type',
                transaction_type=transaction_type.value,
                allowed=sorted(t.value for t in LOSS_TYPES),
            )
        if not is_whole_number(quantity) or quantity <= 0:
            raise ValidationError('INVALID_QUANTITY', field='quantity', quantity=quantity)

        return self.apply_transaction(
            product_id, branch_id, transaction_type, -quantity, performed_by,
            reason=reason, batch_number=batch_number, using=using,
        )

    def record_sale(self, sale_id, branch_id, lines, sold_by, using=None) -> list[LedgerEntry]:
        """
        Deduct stock for every line of a sale, all or nothing.

        Call inside the same transaction.atomic() block that inserts the
        sale record, so the sale and its stock movements commit together.

        Args:
            sale_id: Sale primary key, stored as reference_id
            lines: Iterable of SaleLine (or (product_id, quantity) pairs)
            sold_by: Cashier performing the sale

        Raises:
            InsufficientStockError: For the first line that cannot be served;
                no line is applied
        """
        entries = []
        with transaction.atomic(using=using):
            for product_id, quantity in lines:
                if not is_whole_number(quantity) or quantity <= 0:
                    raise ValidationError(
                        'INVALID_QUANTITY', field='quantity',
                        product_id=product_id, quantity=quantity,
                    )
                entries.append(self.apply_transaction(
                    product_id, branch_id, TransactionType.SALE, -quantity, sold_by,
                    reference_id=sale_id, reference_type='sale', using=using,
                ))
        return entries

    # ══════════════════════════════════════════════════════════════
    # INTERNALS
    # ══════════════════════════════════════════════════════════════

    def _lock_inventory(self, product_id, branch_id, using=None) -> BranchInventory:
        """Get (or lazily create) the inventory row and lock it until commit."""
        inventory, created = BranchInventory.objects.using(using).get_or_create(
            product_id=product_id,
            branch_id=branch_id,
            defaults={
                'minimum_stock': branchstock_settings.DEFAULT_MINIMUM_STOCK,
                'reorder_point': branchstock_settings.DEFAULT_REORDER_POINT,
            },
        )
        if created:
            logger.info(
                "ledger.inventory.created",
                extra={"product_id": product_id, "branch_id": branch_id},
            )
        return BranchInventory.objects.using(using).select_for_update().get(pk=inventory.pk)

    def _schedule_entry_effects(self, entry: LedgerEntry, inventory: BranchInventory,
                                using=None) -> None:
        """Snapshot the events now, deliver them after commit."""
        update = StockUpdate(
            product_id=entry.product_id,
            branch_id=entry.branch_id,
            entry_id=entry.pk,
            transaction_type=entry.transaction_type,
            quantity=entry.quantity,
            quantity_before=entry.quantity_before,
            quantity_after=entry.quantity_after,
            status=inventory.status.value,
        )

        alert = None
        if entry.quantity_after <= inventory.effective_reorder_point:
            alert = LowStockAlert(
                product_id=entry.product_id,
                branch_id=entry.branch_id,
                current_stock=entry.quantity_after,
                minimum_stock=inventory.effective_minimum_stock,
                reorder_point=inventory.effective_reorder_point,
                status=inventory.status.value,
            )

        record = AuditRecord(
            action='UPDATE' if entry.transaction_type == TransactionType.ADJUSTMENT else 'CREATE',
            module='stocks',
            description=describe_entry(entry),
            actor_id=entry.performed_by_id,
            record_id=entry.pk,
            metadata={
                'transaction_type': entry.transaction_type,
                'quantity': entry.quantity,
                'quantity_before': entry.quantity_before,
                'quantity_after': entry.quantity_after,
                'reason': entry.reason,
                'reference_id': entry.reference_id,
                'reference_type': entry.reference_type,
            },
        )

        def run():
            deliver(self.notifications.stock_updated, update, effect='stock_updated')
            if alert is not None:
                logger.warning(
                    "ledger.low_stock",
                    extra={
                        "product_id": alert.product_id,
                        "branch_id": alert.branch_id,
                        "current_stock": alert.current_stock,
                        "reorder_point": alert.reorder_point,
                    },
                )
                deliver(self.notifications.low_stock, alert, effect='low_stock')
            deliver(self.audit.record, record, effect='audit')

        after_commit(run, using=using)


def describe_entry(entry: LedgerEntry) -> str:
    """Human-readable description of an entry for the audit log."""
    if entry.quantity > 0:
        text = (
            f"Added {entry.quantity} units ({entry.transaction_type!s}) "
            f"to product {entry.product_id} at branch {entry.branch_id}"
        )
    else:
        text = (
            f"Removed {-entry.quantity} units ({entry.transaction_type!s}) "
            f"from product {entry.product_id} at branch {entry.branch_id}"
        )
    if entry.reason:
        text = f"{text}: {entry.reason}"
    return text
