"""
Inventory records — explicit initialization and threshold maintenance.

Neither operation writes current_stock directly: initialize() records any
starting quantity as an INITIAL_STOCK entry, update_thresholds() never
touches the quantity at all.
"""

import logging
from functools import partial

from django.db import DatabaseError, IntegrityError, transaction

from branchstock.conf import branchstock_settings
from branchstock.exceptions import (
    AlreadyInitializedError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from branchstock.models.enums import TransactionType
from branchstock.models.inventory import BranchInventory
from branchstock.protocols.sinks import AuditRecord
from branchstock.rules import is_whole_number, validate_thresholds
from branchstock.services.effects import after_commit, deliver

logger = logging.getLogger('branchstock')

THRESHOLD_FIELDS = ('minimum_stock', 'reorder_point', 'maximum_stock')

# Default for update_thresholds() arguments that were not passed
UNSET = object()


class LedgerInventory:
    """Initialization and threshold methods."""

    def initialize(self, product_id, branch_id, performed_by, initial_stock=0,
                   minimum_stock=None, maximum_stock=None, reorder_point=None,
                   using=None) -> BranchInventory:
        """
        Create the inventory record for a (product, branch) pair.

        Unset thresholds take the configured defaults. A positive
        initial_stock is recorded as an INITIAL_STOCK entry so the record
        is backed by the ledger from its first row.

        Raises:
            AlreadyInitializedError: The pair already has a record
            ValidationError: Negative initial stock or inconsistent thresholds
            NotFoundError: Unknown product or branch
        """
        if not is_whole_number(initial_stock) or initial_stock < 0:
            raise ValidationError('INVALID_QUANTITY', field='initial_stock', initial_stock=initial_stock)

        if minimum_stock is None:
            minimum_stock = branchstock_settings.DEFAULT_MINIMUM_STOCK
        if reorder_point is None:
            reorder_point = branchstock_settings.DEFAULT_REORDER_POINT
        validate_thresholds(minimum_stock, reorder_point, maximum_stock)

        self._require_actor(performed_by)
        self._check_references(product_id, branch_id)

        try:
            with transaction.atomic(using=using):
                manager = BranchInventory.objects.using(using)
                if manager.filter(product_id=product_id, branch_id=branch_id).exists():
                    raise AlreadyInitializedError(product_id=product_id, branch_id=branch_id)

                try:
                    with transaction.atomic(using=using):
                        inventory = manager.create(
                            product_id=product_id,
                            branch_id=branch_id,
                            minimum_stock=minimum_stock,
                            reorder_point=reorder_point,
                            maximum_stock=maximum_stock,
                        )
                except IntegrityError:
                    # Lost the race against a concurrent initialize()
                    raise AlreadyInitializedError(product_id=product_id, branch_id=branch_id) from None

                if initial_stock > 0:
                    self.apply_transaction(
                        product_id, branch_id, TransactionType.INITIAL_STOCK, initial_stock,
                        performed_by, reason='Initial stock', using=using,
                    )
                    inventory.refresh_from_db(using=using)
        except DatabaseError as exc:
            logger.error(
                "ledger.initialize.failed",
                extra={"product_id": product_id, "branch_id": branch_id},
                exc_info=True,
            )
            raise PersistenceError(product_id=product_id, branch_id=branch_id) from exc

        record = AuditRecord(
            action='CREATE',
            module='stocks',
            description=(
                f"Initialized stock for product {product_id} at branch {branch_id} "
                f"with {initial_stock} units"
            ),
            actor_id=performed_by.pk,
            record_id=inventory.pk,
            metadata={
                'product_id': product_id,
                'branch_id': branch_id,
                'initial_stock': initial_stock,
                **_thresholds(inventory),
            },
        )
        after_commit(partial(deliver, self.audit.record, record, effect='audit'), using=using)

        logger.info(
            "ledger.inventory.initialized",
            extra={"product_id": product_id, "branch_id": branch_id, "qty": initial_stock},
        )
        return inventory

    def update_thresholds(self, product_id, branch_id, minimum_stock=UNSET,
                          maximum_stock=UNSET, reorder_point=UNSET,
                          performed_by=None, using=None) -> BranchInventory:
        """
        Change the thresholds of an existing record.

        Omitted thresholds stay unchanged; an explicit None clears one
        (minimum and reorder then read as their fallbacks). The merged
        values must still be ordered minimum <= reorder <= maximum.

        Raises:
            NotFoundError('INVENTORY_NOT_FOUND'): No record for the pair
            ValidationError('INVALID_THRESHOLDS'): Inconsistent values
        """
        changes = {
            'minimum_stock': minimum_stock,
            'reorder_point': reorder_point,
            'maximum_stock': maximum_stock,
        }
        changes = {k: v for k, v in changes.items() if v is not UNSET}

        with transaction.atomic(using=using):
            try:
                inventory = (
                    BranchInventory.objects.using(using)
                    .select_for_update()
                    .get(product_id=product_id, branch_id=branch_id)
                )
            except BranchInventory.DoesNotExist:
                raise NotFoundError(
                    'INVENTORY_NOT_FOUND', product_id=product_id, branch_id=branch_id
                ) from None

            before = _thresholds(inventory)
            merged = {**before, **changes}
            validate_thresholds(merged['minimum_stock'], merged['reorder_point'], merged['maximum_stock'])

            if changes:
                for name, value in changes.items():
                    setattr(inventory, name, value)
                inventory.save(using=using, update_fields=[*changes, 'updated_at'])

        after = _thresholds(inventory)
        record = AuditRecord(
            action='UPDATE',
            module='stocks',
            description=f"Updated stock thresholds for product {product_id} at branch {branch_id}",
            actor_id=getattr(performed_by, 'pk', None),
            record_id=inventory.pk,
            metadata={'before': before, 'after': after},
        )
        after_commit(partial(deliver, self.audit.record, record, effect='audit'), using=using)

        logger.info(
            "ledger.thresholds.updated",
            extra={"product_id": product_id, "branch_id": branch_id, "changes": changes},
        )
        return inventory


def _thresholds(inventory: BranchInventory) -> dict:
    return {name: getattr(inventory, name) for name in THRESHOLD_FIELDS}
