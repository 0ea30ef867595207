"""
Ledger base — collaborators and shared guards.

Collaborators are injected at construction. Anything not injected is
resolved from BRANCHSTOCK settings on first use.
"""

from branchstock.adapters.loader import get_audit_sink, get_catalog_backend, get_notification_sink
from branchstock.conf import branchstock_settings
from branchstock.exceptions import NotFoundError, ValidationError


class LedgerBase:
    """Holds the catalog backend and the two post-commit sinks."""

    def __init__(self, catalog=None, notifications=None, audit=None):
        self._catalog = catalog
        self._notifications = notifications
        self._audit = audit

    @property
    def catalog(self):
        if self._catalog is None:
            self._catalog = get_catalog_backend()
        return self._catalog

    @property
    def notifications(self):
        if self._notifications is None:
            self._notifications = get_notification_sink()
        return self._notifications

    @property
    def audit(self):
        if self._audit is None:
            self._audit = get_audit_sink()
        return self._audit

    # ══════════════════════════════════════════════════════════════
    # GUARDS
    # ══════════════════════════════════════════════════════════════

    def _require_actor(self, performed_by) -> None:
        if performed_by is None or getattr(performed_by, 'pk', None) is None:
            raise ValidationError('ACTOR_REQUIRED', field='performed_by')

    def _check_references(self, product_id, *branch_ids) -> None:
        """Ask the catalog whether the product and every branch exist."""
        if not branchstock_settings.VALIDATE_REFERENCES:
            return

        if not self.catalog.product_exists(product_id):
            raise NotFoundError('PRODUCT_NOT_FOUND', product_id=product_id)

        for branch_id in branch_ids:
            if not self.catalog.branch_exists(branch_id):
                raise NotFoundError('BRANCH_NOT_FOUND', branch_id=branch_id)
