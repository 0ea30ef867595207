"""
Branchstock Protocols.

Defines interfaces for external system integration.
"""

from branchstock.protocols.catalog import CatalogBackend
from branchstock.protocols.sinks import (
    AuditRecord,
    AuditSink,
    LowStockAlert,
    NotificationSink,
    StockUpdate,
)

__all__ = [
    "CatalogBackend",
    "NotificationSink",
    "AuditSink",
    "StockUpdate",
    "LowStockAlert",
    "AuditRecord",
]
