"""
Branchstock Admin.

- BranchInventory: thresholds editable, quantity read-only, status column
- LedgerEntry: read-only audit trail

Stock never changes through the admin; every quantity change is a ledger
entry created by the ledger service. Threshold edits go through the same
service, so they are validated and audited like API updates.
"""

import logging

from django import forms
from django.contrib import admin, messages
from django.utils.translation import gettext_lazy as _

from branchstock.exceptions import ValidationError
from branchstock.models import BranchInventory, LedgerEntry
from branchstock.rules import validate_thresholds
from branchstock.service import get_ledger
from branchstock.services.inventory import THRESHOLD_FIELDS

logger = logging.getLogger(__name__)


# =========================================================================
# BRANCH INVENTORY ADMIN
# =========================================================================

class BranchInventoryAdminForm(forms.ModelForm):
    """Threshold form; rejects out-of-order values before saving."""

    class Meta:
        model = BranchInventory
        fields = list(THRESHOLD_FIELDS)

    def clean(self):
        cleaned_data = super().clean()
        try:
            validate_thresholds(*(cleaned_data.get(name) for name in THRESHOLD_FIELDS))
        except ValidationError as exc:
            raise forms.ValidationError({exc.field or '__all__': exc.message}) from exc
        return cleaned_data


@admin.register(BranchInventory)
class BranchInventoryAdmin(admin.ModelAdmin):
    """Branch inventory admin — only thresholds are editable."""

    form = BranchInventoryAdminForm
    list_display = ['product_id', 'branch_id', 'current_stock', 'minimum_stock',
                    'reorder_point', 'maximum_stock', 'status_display', 'updated_at']
    list_filter = ['branch_id']
    search_fields = ['product_id']
    fields = ['product_id', 'branch_id', 'current_stock', 'minimum_stock',
              'reorder_point', 'maximum_stock', 'created_at', 'updated_at']
    readonly_fields = ['product_id', 'branch_id', 'current_stock', 'created_at', 'updated_at']
    actions = ['check_consistency']

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def save_model(self, request, obj, form, change):
        # Locks the row and never writes current_stock from the form instance
        get_ledger().update_thresholds(
            obj.product_id,
            obj.branch_id,
            performed_by=request.user,
            **{name: form.cleaned_data.get(name) for name in THRESHOLD_FIELDS},
        )

    @admin.display(description=_('Status'))
    def status_display(self, obj):
        return obj.status.label

    @admin.action(description=_('Check selected records against the ledger'))
    def check_consistency(self, request, queryset):
        selected = set(queryset.values_list('pk', flat=True))
        broken = [
            (inventory, expected)
            for inventory, expected in get_ledger().find_inconsistencies()
            if inventory.pk in selected
        ]
        for inventory, expected in broken:
            logger.warning(
                "Ledger mismatch for %s: expected %s", inventory, expected,
            )
            self.message_user(
                request,
                _('{inventory}: ledger says {expected}').format(inventory=inventory, expected=expected),
                level=messages.ERROR,
            )
        if not broken:
            self.message_user(request, _('{count} record(s) consistent.').format(count=len(selected)))


# =========================================================================
# LEDGER ENTRY ADMIN (read-only audit trail)
# =========================================================================

@admin.register(LedgerEntry)
class LedgerEntryAdmin(admin.ModelAdmin):
    """Ledger entry admin — read-only. Immutable audit trail."""

    list_display = ['created_at', 'product_id', 'branch_id', 'transaction_type',
                    'quantity', 'quantity_before', 'quantity_after', 'performed_by']
    list_filter = ['transaction_type', 'branch_id', 'created_at']
    search_fields = ['reason', 'batch_number', 'supplier']
    readonly_fields = [f.name for f in LedgerEntry._meta.fields]
    date_hierarchy = 'created_at'
    list_select_related = ['performed_by']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
