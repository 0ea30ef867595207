"""
Serializers for the branch stock API.

Input serializers only check shapes; business rules (direction, reasons,
stock levels, thresholds) are enforced by the ledger service.
"""

from rest_framework import serializers

from branchstock.models import BranchInventory, LedgerEntry, StockStatus, TransactionType
from branchstock.rules import INBOUND_TYPES, LOSS_TYPES


def _choices(types):
    return [(t.value, t.label) for t in TransactionType if t in types]


class BranchInventorySerializer(serializers.ModelSerializer):
    """Inventory record with its derived status."""

    status = serializers.CharField(source="status.value", read_only=True)
    is_low_stock = serializers.BooleanField(read_only=True)
    is_out_of_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = BranchInventory
        fields = [
            "id",
            "product_id",
            "branch_id",
            "current_stock",
            "minimum_stock",
            "reorder_point",
            "maximum_stock",
            "status",
            "is_low_stock",
            "is_out_of_stock",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class LedgerEntrySerializer(serializers.ModelSerializer):
    """Read-only ledger entry."""

    performed_by_username = serializers.CharField(source="performed_by.get_username", read_only=True)

    class Meta:
        model = LedgerEntry
        fields = [
            "id",
            "product_id",
            "branch_id",
            "transaction_type",
            "quantity",
            "quantity_before",
            "quantity_after",
            "unit_cost",
            "total_cost",
            "batch_number",
            "expiry_date",
            "supplier",
            "reason",
            "reference_id",
            "reference_type",
            "performed_by",
            "performed_by_username",
            "created_at",
        ]
        read_only_fields = fields


class AddStockSerializer(serializers.Serializer):
    """Purchase, initial stock or customer return."""

    product_id = serializers.IntegerField(min_value=1)
    branch_id = serializers.IntegerField(min_value=1)
    quantity = serializers.IntegerField(min_value=1)
    transaction_type = serializers.ChoiceField(
        choices=_choices(INBOUND_TYPES), default=TransactionType.PURCHASE.value
    )
    unit_cost = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    batch_number = serializers.CharField(max_length=100, required=False, allow_blank=True)
    expiry_date = serializers.DateField(required=False, allow_null=True)
    supplier = serializers.CharField(max_length=255, required=False, allow_blank=True)
    reason = serializers.CharField(required=False, allow_blank=True)
    reference_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    reference_type = serializers.CharField(max_length=50, required=False, allow_blank=True)


class AdjustStockSerializer(serializers.Serializer):
    """Manual correction by a signed quantity."""

    product_id = serializers.IntegerField(min_value=1)
    branch_id = serializers.IntegerField(min_value=1)
    quantity = serializers.IntegerField()
    reason = serializers.CharField()

    def validate_quantity(self, value):
        if value == 0:
            raise serializers.ValidationError("Quantity cannot be zero.")
        return value


class RecordLossSerializer(serializers.Serializer):
    """Damaged or expired units, as a positive count."""

    product_id = serializers.IntegerField(min_value=1)
    branch_id = serializers.IntegerField(min_value=1)
    quantity = serializers.IntegerField(min_value=1)
    transaction_type = serializers.ChoiceField(choices=_choices(LOSS_TYPES))
    reason = serializers.CharField()
    batch_number = serializers.CharField(max_length=100, required=False, allow_blank=True)


class TransferSerializer(serializers.Serializer):
    product_id = serializers.IntegerField(min_value=1)
    from_branch_id = serializers.IntegerField(min_value=1)
    to_branch_id = serializers.IntegerField(min_value=1)
    quantity = serializers.IntegerField(min_value=1)
    reason = serializers.CharField(required=False, allow_blank=True, default="")


class InitializeSerializer(serializers.Serializer):
    product_id = serializers.IntegerField(min_value=1)
    branch_id = serializers.IntegerField(min_value=1)
    initial_stock = serializers.IntegerField(min_value=0, default=0)
    minimum_stock = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    reorder_point = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    maximum_stock = serializers.IntegerField(min_value=0, required=False, allow_null=True)


class ThresholdsSerializer(serializers.Serializer):
    """Partial threshold update; omitted fields stay unchanged, null clears a field."""

    minimum_stock = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    reorder_point = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    maximum_stock = serializers.IntegerField(min_value=0, required=False, allow_null=True)


class HistoryFilterSerializer(serializers.Serializer):
    """Query string filters for the ledger history."""

    product_id = serializers.IntegerField(min_value=1, required=False)
    branch_id = serializers.IntegerField(min_value=1, required=False)
    transaction_type = serializers.ChoiceField(choices=TransactionType.choices, required=False)
    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)

    def validate(self, data):
        date_from = data.get("date_from")
        date_to = data.get("date_to")
        if date_from and date_to and date_from > date_to:
            raise serializers.ValidationError({"date_to": "Must not be before date_from."})
        return data


class InventoryFilterSerializer(serializers.Serializer):
    """Query string filters for the inventory list."""

    product_id = serializers.IntegerField(min_value=1, required=False)
    branch_id = serializers.IntegerField(min_value=1, required=False)
    status = serializers.ChoiceField(choices=StockStatus.choices, required=False)


class AlertsFilterSerializer(serializers.Serializer):
    """Query string filters for the alert listing."""

    branch_id = serializers.IntegerField(min_value=1, required=False)
