"""
Collaborator loader — builds the configured catalog backend and sinks.

Usage:
    from branchstock.adapters import get_catalog_backend

    catalog = get_catalog_backend()
    catalog.product_exists(42)

Settings:
    BRANCHSTOCK = {
        "CATALOG_BACKEND": "branchstock.adapters.models.ModelCatalogBackend",
        "NOTIFICATION_SINK": "branchstock.adapters.signals.SignalNotificationSink",
        "AUDIT_SINK": "branchstock.adapters.audit.LoggingAuditSink",
    }

If CATALOG_BACKEND is not configured, get_catalog_backend() raises ImproperlyConfigured.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from django.core.exceptions import ImproperlyConfigured
from django.utils.module_loading import import_string

from branchstock.conf import branchstock_settings

if TYPE_CHECKING:
    from branchstock.protocols import AuditSink, CatalogBackend, NotificationSink

logger = logging.getLogger(__name__)


# Cached instances, keyed by setting name
_lock = threading.Lock()
_instances: dict[str, object] = {}


def _load(setting: str):
    instance = _instances.get(setting)
    if instance is None:
        with _lock:
            instance = _instances.get(setting)
            if instance is None:  # double-checked
                path = getattr(branchstock_settings, setting)

                if not path:
                    raise ImproperlyConfigured(
                        f"BRANCHSTOCK['{setting}'] must be configured. "
                        "Example: 'branchstock.adapters.noop.Noop...'"
                    )

                try:
                    instance = import_string(path)()
                except ImportError as e:
                    raise ImproperlyConfigured(
                        f"Failed to import BRANCHSTOCK['{setting}'] '{path}': {e}"
                    ) from e

                _instances[setting] = instance
                logger.debug("Loaded %s: %s", setting, path)

    return instance


def get_catalog_backend() -> CatalogBackend:
    """Return the configured catalog backend."""
    return _load('CATALOG_BACKEND')


def get_notification_sink() -> NotificationSink:
    """Return the configured notification sink."""
    return _load('NOTIFICATION_SINK')


def get_audit_sink() -> AuditSink:
    """Return the configured audit sink."""
    return _load('AUDIT_SINK')


def reset_backends() -> None:
    """Drop cached instances. Useful for testing and settings overrides."""
    with _lock:
        _instances.clear()
