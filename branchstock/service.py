"""
Ledger Service — The single public interface for branch stock operations.

Usage:
    from branchstock import ledger, TransactionType

    ledger.add_stock(product.pk, branch.pk, 50, user, unit_cost=Decimal('2.50'))
    ledger.apply_transaction(product.pk, branch.pk, TransactionType.SALE, -3, cashier)
    ledger.transfer(product.pk, central.pk, north.pk, 10, user)
    ledger.get_inventory(product.pk, north.pk).current_stock  # 10
"""

import threading

from branchstock.services import (
    LedgerBase,
    LedgerInventory,
    LedgerMovements,
    LedgerQueries,
    LedgerTransfers,
)


class LedgerService(LedgerQueries, LedgerMovements, LedgerTransfers, LedgerInventory, LedgerBase):
    """
    Single interface for all branch stock operations.

    Parameter convention: (product_id, branch_id, ..., performed_by)

    IMPORTANT: All state-changing methods use atomic transactions and
    lock the BranchInventory row. Notifications and audit records are
    delivered only after commit. See each method's docstring.

    Collaborators:
        catalog: CatalogBackend (existence of products and branches)
        notifications: NotificationSink (stock_updated, low_stock)
        audit: AuditSink (record)
    Any collaborator left as None is built from BRANCHSTOCK settings.
    """


_default = None
_lock = threading.Lock()


def get_ledger() -> LedgerService:
    """Default LedgerService, built on first use."""
    global _default
    if _default is None:
        with _lock:
            if _default is None:
                _default = LedgerService()
    return _default


def reset_ledger() -> None:
    """Forget the default LedgerService and its cached collaborators."""
    global _default
    with _lock:
        _default = None
