"""
Ledger transfers — move quantity between two branches as one unit.
"""

import logging
from dataclasses import dataclass
from functools import partial

from django.db import transaction

from branchstock.exceptions import ValidationError
from branchstock.models.entry import LedgerEntry
from branchstock.models.enums import TransactionType
from branchstock.protocols.sinks import AuditRecord
from branchstock.rules import is_whole_number
from branchstock.services.effects import after_commit, deliver

logger = logging.getLogger('branchstock')


@dataclass(frozen=True)
class TransferResult:
    """Both legs of a transfer."""

    debit: LedgerEntry   # negative ADJUSTMENT at the source branch
    credit: LedgerEntry  # positive ADJUSTMENT at the destination branch

    @property
    def quantity(self) -> int:
        return self.credit.quantity


class LedgerTransfers:
    """Inter-branch transfer."""

    def transfer(self, product_id, from_branch_id, to_branch_id, quantity,
                 performed_by, reason='', using=None) -> TransferResult:
        """
        Transfer stock from one branch to another.

        1. Debits the source branch (ADJUSTMENT, -quantity)
        2. Credits the destination branch (ADJUSTMENT, +quantity)

        Both legs share one transaction: if either fails, no stock moves
        and no entry exists at either branch.

        Raises:
            ValidationError('INVALID_QUANTITY'): quantity is not a positive int
            ValidationError('SAME_BRANCH'): source and destination are equal
            NotFoundError: Unknown product or branch
            InsufficientStockError: Source branch cannot cover the quantity
        """
        if not is_whole_number(quantity) or quantity <= 0:
            raise ValidationError('INVALID_QUANTITY', field='quantity', quantity=quantity)

        if from_branch_id == to_branch_id:
            raise ValidationError('SAME_BRANCH', field='to_branch_id', branch_id=to_branch_id)

        self._require_actor(performed_by)
        self._check_references(product_id, from_branch_id, to_branch_id)

        with transaction.atomic(using=using):
            debit = self.apply_transaction(
                product_id, from_branch_id, TransactionType.ADJUSTMENT, -quantity, performed_by,
                reason=reason or f"Transfer to branch {to_branch_id}",
                using=using,
            )
            credit = self.apply_transaction(
                product_id, to_branch_id, TransactionType.ADJUSTMENT, quantity, performed_by,
                reason=reason or f"Transfer from branch {from_branch_id}",
                using=using,
            )

            record = AuditRecord(
                action='TRANSFER',
                module='stocks',
                description=(
                    f"Transferred {quantity} units of product {product_id} "
                    f"from branch {from_branch_id} to branch {to_branch_id}"
                ),
                actor_id=performed_by.pk,
                metadata={
                    'product_id': product_id,
                    'from_branch_id': from_branch_id,
                    'to_branch_id': to_branch_id,
                    'quantity': quantity,
                    'reason': reason,
                    'debit_entry_id': debit.pk,
                    'credit_entry_id': credit.pk,
                },
            )
            after_commit(partial(deliver, self.audit.record, record, effect='audit'), using=using)

        logger.info(
            "ledger.transfer",
            extra={
                "product_id": product_id,
                "from_branch_id": from_branch_id,
                "to_branch_id": to_branch_id,
                "qty": quantity,
            },
        )
        return TransferResult(debit=debit, credit=credit)
