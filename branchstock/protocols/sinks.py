"""
Sink Protocols — where the ledger reports what it did.

Both sinks are informed after the database transaction commits. They are
fire-and-forget: a failing sink is logged and never rolls back the ledger.

    NotificationSink  UI refresh (stock:update, stock:low-alert)
    AuditSink         compliance log ("who changed what, when")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


# ══════════════════════════════════════════════════════════════
# EVENTS
# ══════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class StockUpdate:
    """Quantity of a (product, branch) pair changed."""

    product_id: int
    branch_id: int
    entry_id: int
    transaction_type: str
    quantity: int
    quantity_before: int
    quantity_after: int
    status: str


@dataclass(frozen=True)
class LowStockAlert:
    """Quantity fell to or below the reorder point."""

    product_id: int
    branch_id: int
    current_stock: int
    minimum_stock: int
    reorder_point: int
    status: str


@dataclass(frozen=True)
class AuditRecord:
    """One human-readable line for the compliance log."""

    action: str  # "CREATE", "UPDATE", "TRANSFER", ...
    module: str  # "stocks", "branch_stocks"
    description: str
    actor_id: int | None = None
    record_id: int | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


# ══════════════════════════════════════════════════════════════
# PROTOCOLS
# ══════════════════════════════════════════════════════════════


@runtime_checkable
class NotificationSink(Protocol):
    """Receives stock change notifications for realtime consumers."""

    def stock_updated(self, event: StockUpdate) -> None:
        """Called once per committed ledger entry."""
        ...

    def low_stock(self, event: LowStockAlert) -> None:
        """Called when a committed entry leaves the pair at or below its reorder point."""
        ...


@runtime_checkable
class AuditSink(Protocol):
    """Receives audit records for every committed mutation."""

    def record(self, event: AuditRecord) -> None:
        ...
