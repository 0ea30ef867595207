"""
Django Branchstock — Per-branch inventory ledger.

Every stock change is an immutable ledger entry; the quantity cached on each
branch inventory record is always the running total of its entries.

Usage:
    from branchstock import ledger, TransactionType, LedgerError

    ledger.add_stock(product.pk, branch.pk, 50, user)
    ledger.apply_transaction(product.pk, branch.pk, TransactionType.SALE, -5, cashier)
    ledger.transfer(product.pk, central.pk, north.pk, 10, user)
"""


def __getattr__(name):
    """Lazy import to avoid circular imports during app loading."""
    if name == 'ledger':
        from branchstock.service import get_ledger
        return get_ledger()
    elif name == 'LedgerService':
        from branchstock.service import LedgerService
        return LedgerService
    elif name == 'LedgerError':
        from branchstock.exceptions import LedgerError
        return LedgerError
    elif name == 'BranchInventory':
        from branchstock.models.inventory import BranchInventory
        return BranchInventory
    elif name == 'LedgerEntry':
        from branchstock.models.entry import LedgerEntry
        return LedgerEntry
    elif name == 'TransactionType':
        from branchstock.models.enums import TransactionType
        return TransactionType
    elif name == 'StockStatus':
        from branchstock.models.enums import StockStatus
        return StockStatus
    elif name == 'SaleLine':
        from branchstock.services.movements import SaleLine
        return SaleLine
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'ledger',
    'LedgerService',
    'LedgerError',
    'BranchInventory',
    'LedgerEntry',
    'TransactionType',
    'StockStatus',
    'SaleLine',
]

__version__ = '0.1.0'
