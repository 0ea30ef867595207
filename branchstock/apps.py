"""Django app configuration for Branchstock."""

from django.apps import AppConfig
from django.core.signals import setting_changed
from django.utils.translation import gettext_lazy as _


def _reload_collaborators(*, setting, **kwargs):
    if setting == 'BRANCHSTOCK':
        from branchstock.adapters import reset_backends
        from branchstock.service import reset_ledger

        reset_backends()
        reset_ledger()


class BranchstockConfig(AppConfig):
    """Configuration for Branchstock app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "branchstock"
    verbose_name = _("Branch Stock")

    def ready(self):
        setting_changed.connect(_reload_collaborators, dispatch_uid='branchstock.reload_collaborators')
