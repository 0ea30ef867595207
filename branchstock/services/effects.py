"""
Post-commit side effects — notification and audit delivery.

Effects are scheduled with transaction.on_commit(), so they:
- run only once the outermost transaction commits
- are discarded when the transaction rolls back
- can never roll back the ledger (sink errors are logged, not raised)
"""

import logging
from collections.abc import Callable

from django.db import transaction

logger = logging.getLogger('branchstock')


def deliver(call: Callable, event, *, effect: str) -> None:
    """Call a sink method, logging any failure."""
    try:
        call(event)
    except Exception:
        logger.exception(
            "ledger.effect.failed",
            extra={"effect": effect, "event": repr(event)},
        )


def after_commit(func: Callable[[], None], using: str | None = None) -> None:
    """Run func after the current transaction commits (immediately in autocommit)."""
    transaction.on_commit(func, using=using)
