"""
Branchstock Adapters.

Implementations of protocols for external systems.
"""

from branchstock.adapters.loader import (
    get_audit_sink,
    get_catalog_backend,
    get_notification_sink,
    reset_backends,
)

__all__ = [
    "get_catalog_backend",
    "get_notification_sink",
    "get_audit_sink",
    "reset_backends",
]
