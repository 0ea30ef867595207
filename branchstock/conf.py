"""
Branchstock configuration.

Usage in settings.py:
    BRANCHSTOCK = {
        "CATALOG_BACKEND": "branchstock.adapters.models.ModelCatalogBackend",
        "PRODUCT_MODEL": "catalog.Product",
        "BRANCH_MODEL": "catalog.Branch",
        "NOTIFICATION_SINK": "branchstock.adapters.signals.SignalNotificationSink",
        "AUDIT_SINK": "branchstock.adapters.audit.LoggingAuditSink",
        "DEFAULT_MINIMUM_STOCK": 10,
        "DEFAULT_REORDER_POINT": 20,
    }
"""

from dataclasses import dataclass
from typing import Any

from django.conf import settings


@dataclass
class BranchstockSettings:
    """Branchstock configuration settings."""

    # Catalog backend answering "does this product/branch exist?" (dotted path)
    CATALOG_BACKEND: str = ""

    # Models checked by ModelCatalogBackend ("app_label.ModelName")
    PRODUCT_MODEL: str = ""
    BRANCH_MODEL: str = ""

    # Consult the catalog backend before every stock mutation
    VALIDATE_REFERENCES: bool = True

    # Post-commit collaborators (dotted paths)
    NOTIFICATION_SINK: str = "branchstock.adapters.signals.SignalNotificationSink"
    AUDIT_SINK: str = "branchstock.adapters.audit.LoggingAuditSink"

    # Thresholds for lazily created inventory records
    DEFAULT_MINIMUM_STOCK: int = 10
    DEFAULT_REORDER_POINT: int = 20

    # Page size for the ledger history endpoint
    HISTORY_PAGE_SIZE: int = 50


def get_branchstock_settings() -> BranchstockSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "BRANCHSTOCK", {})
    return BranchstockSettings(**{
        k: v for k, v in user_settings.items()
        if k in BranchstockSettings.__dataclass_fields__
    })


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_branchstock_settings(), name)


branchstock_settings = _LazySettings()
