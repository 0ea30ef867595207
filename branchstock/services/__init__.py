"""
Ledger services — modular organization of branch stock operations.

Re-exports the building blocks of LedgerService:
    from branchstock.services import LedgerQueries, LedgerMovements, LedgerTransfers, LedgerInventory
"""

from branchstock.services.base import LedgerBase
from branchstock.services.inventory import LedgerInventory
from branchstock.services.movements import LedgerMovements, SaleLine
from branchstock.services.queries import LedgerQueries
from branchstock.services.transfers import LedgerTransfers, TransferResult

__all__ = [
    'LedgerBase',
    'LedgerQueries',
    'LedgerMovements',
    'LedgerTransfers',
    'LedgerInventory',
    'SaleLine',
    'TransferResult',
]
