"""
Model catalog backend — existence checks against the host project's models.

Settings:
    BRANCHSTOCK = {
        "CATALOG_BACKEND": "branchstock.adapters.models.ModelCatalogBackend",
        "PRODUCT_MODEL": "catalog.Product",
        "BRANCH_MODEL": "catalog.Branch",
    }
"""

from __future__ import annotations

from django.apps import apps
from django.core.exceptions import ImproperlyConfigured

from branchstock.conf import branchstock_settings


class ModelCatalogBackend:
    """
    Catalog backed by two Django models, looked up by primary key.

    Args:
        product_model: "app_label.Model" (defaults to PRODUCT_MODEL)
        branch_model: "app_label.Model" (defaults to BRANCH_MODEL)
    """

    def __init__(self, product_model: str | None = None, branch_model: str | None = None):
        self.product_model = self._resolve(product_model or branchstock_settings.PRODUCT_MODEL, 'PRODUCT_MODEL')
        self.branch_model = self._resolve(branch_model or branchstock_settings.BRANCH_MODEL, 'BRANCH_MODEL')

    @staticmethod
    def _resolve(label: str, setting: str):
        if not label:
            raise ImproperlyConfigured(
                f"BRANCHSTOCK['{setting}'] must be configured for ModelCatalogBackend. "
                "Example: 'catalog.Product'"
            )
        try:
            return apps.get_model(label)
        except (LookupError, ValueError) as e:
            raise ImproperlyConfigured(
                f"BRANCHSTOCK['{setting}'] refers to unknown model '{label}': {e}"
            ) from e

    def product_exists(self, product_id: int) -> bool:
        return self.product_model._default_manager.filter(pk=product_id).exists()

    def branch_exists(self, branch_id: int) -> bool:
        return self.branch_model._default_manager.filter(pk=branch_id).exists()
