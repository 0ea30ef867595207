"""
Branchstock Models.

Core models for branch stock management:
- BranchInventory: Current quantity and thresholds per (product, branch)
- LedgerEntry: Immutable ledger of changes
"""

from branchstock.models.entry import LedgerEntry
from branchstock.models.enums import StockStatus, TransactionType
from branchstock.models.inventory import BranchInventory

__all__ = [
    'TransactionType',
    'StockStatus',
    'BranchInventory',
    'LedgerEntry',
]
