"""
Noop adapters — Stub collaborators for development and testing.

Usage in settings.py:
    BRANCHSTOCK = {
        "CATALOG_BACKEND": "branchstock.adapters.noop.NoopCatalogBackend",
        "NOTIFICATION_SINK": "branchstock.adapters.noop.NoopNotificationSink",
        "AUDIT_SINK": "branchstock.adapters.noop.NoopAuditSink",
    }

WARNING: Do NOT use NoopCatalogBackend in production. It accepts any id,
including products and branches that do not exist.
"""

from __future__ import annotations

from branchstock.protocols.sinks import AuditRecord, LowStockAlert, StockUpdate


class NoopCatalogBackend:
    """
    No-operation catalog for development and testing.

    Every product and branch exists. Implements the ``CatalogBackend``
    protocol without any external dependencies.
    """

    def product_exists(self, product_id: int) -> bool:
        return True

    def branch_exists(self, branch_id: int) -> bool:
        return True


class NoopNotificationSink:
    """Drops every notification."""

    def stock_updated(self, event: StockUpdate) -> None:
        pass

    def low_stock(self, event: LowStockAlert) -> None:
        pass


class NoopAuditSink:
    """Drops every audit record."""

    def record(self, event: AuditRecord) -> None:
        pass
