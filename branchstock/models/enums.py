"""
Enums for Branchstock models.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class TransactionType(models.TextChoices):
    """
    Business reason for a quantity change.

    The type constrains the direction of the delta (see branchstock.rules)
    but never changes the arithmetic: quantity_after = quantity_before + quantity.

    A transfer between branches is written as two ADJUSTMENT entries,
    negative at the source and positive at the destination.
    """
    INITIAL_STOCK = 'INITIAL_STOCK', _('Initial stock')
    PURCHASE = 'PURCHASE', _('Purchase')
    SALE = 'SALE', _('Sale')
    RETURN = 'RETURN', _('Return')
    ADJUSTMENT = 'ADJUSTMENT', _('Adjustment')
    DAMAGE = 'DAMAGE', _('Damage')
    EXPIRED = 'EXPIRED', _('Expired')


class StockStatus(models.TextChoices):
    """Derived status of a branch inventory record (never stored)."""
    OUT_OF_STOCK = 'OUT_OF_STOCK', _('Out of stock')  # current = 0
    CRITICAL = 'CRITICAL', _('Critical')              # 0 < current <= minimum
    LOW = 'LOW', _('Low')                             # minimum < current <= reorder
    IN_STOCK = 'IN_STOCK', _('In stock')
