"""
Views for the branch stock API.

Every endpoint requires an authenticated user, who is passed to the ledger
as performed_by. LedgerError subclasses are rendered as
{"code", "message", "data"} with their own HTTP status.
"""

import logging

from django.shortcuts import get_object_or_404

from rest_framework import generics, permissions, status
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response
from rest_framework.views import APIView

from branchstock.conf import branchstock_settings
from branchstock.exceptions import LedgerError
from branchstock.models import BranchInventory
from branchstock.service import get_ledger

from .serializers import (
    AddStockSerializer,
    AdjustStockSerializer,
    AlertsFilterSerializer,
    BranchInventorySerializer,
    HistoryFilterSerializer,
    InitializeSerializer,
    InventoryFilterSerializer,
    LedgerEntrySerializer,
    RecordLossSerializer,
    ThresholdsSerializer,
    TransferSerializer,
)

logger = logging.getLogger(__name__)


class LedgerErrorMixin:
    """Render ledger errors with their code and status."""

    def handle_exception(self, exc):
        if isinstance(exc, LedgerError):
            if exc.status_code >= 500:
                logger.error("API ledger failure: %r", exc)
            return Response(exc.as_dict(), status=exc.status_code)
        return super().handle_exception(exc)


class LedgerAPIView(LedgerErrorMixin, APIView):
    permission_classes = [permissions.IsAuthenticated]
    serializer_class = None

    def validated(self, data):
        serializer = self.serializer_class(data=data)
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data


class HistoryPagination(PageNumberPagination):
    page_size_query_param = "page_size"
    max_page_size = 500

    def get_page_size(self, request):
        self.page_size = branchstock_settings.HISTORY_PAGE_SIZE
        return super().get_page_size(request)


# Stock movements


class AddStockView(LedgerAPIView):
    """
    API endpoint for stock entries (purchase, initial stock, return).

    Request body:
    {
        "product_id": 1, "branch_id": 2, "quantity": 50,
        "transaction_type": "PURCHASE", "unit_cost": "2.50", ...
    }
    """

    serializer_class = AddStockSerializer

    def post(self, request):
        data = self.validated(request.data)
        entry = get_ledger().add_stock(
            data.pop("product_id"),
            data.pop("branch_id"),
            data.pop("quantity"),
            request.user,
            **data,
        )
        return Response(LedgerEntrySerializer(entry).data, status=status.HTTP_201_CREATED)


class AdjustStockView(LedgerAPIView):
    """API endpoint for manual adjustments (signed quantity, reason required)."""

    serializer_class = AdjustStockSerializer

    def post(self, request):
        data = self.validated(request.data)
        entry = get_ledger().adjust_stock(
            data["product_id"],
            data["branch_id"],
            data["quantity"],
            data["reason"],
            request.user,
        )
        return Response(LedgerEntrySerializer(entry).data, status=status.HTTP_201_CREATED)


class RecordLossView(LedgerAPIView):
    """API endpoint for damaged or expired stock."""

    serializer_class = RecordLossSerializer

    def post(self, request):
        data = self.validated(request.data)
        entry = get_ledger().record_loss(
            data["product_id"],
            data["branch_id"],
            data["quantity"],
            data["transaction_type"],
            data["reason"],
            request.user,
            batch_number=data.get("batch_number", ""),
        )
        return Response(LedgerEntrySerializer(entry).data, status=status.HTTP_201_CREATED)


class TransferView(LedgerAPIView):
    """API endpoint for transfers between two branches."""

    serializer_class = TransferSerializer

    def post(self, request):
        data = self.validated(request.data)
        result = get_ledger().transfer(
            data["product_id"],
            data["from_branch_id"],
            data["to_branch_id"],
            data["quantity"],
            request.user,
            reason=data["reason"],
        )
        return Response(
            {
                "debit": LedgerEntrySerializer(result.debit).data,
                "credit": LedgerEntrySerializer(result.credit).data,
            },
            status=status.HTTP_201_CREATED,
        )


class HistoryView(LedgerErrorMixin, generics.ListAPIView):
    """
    API endpoint for the ledger history, newest first.

    Filters: product_id, branch_id, transaction_type, date_from, date_to
    """

    serializer_class = LedgerEntrySerializer
    permission_classes = [permissions.IsAuthenticated]
    pagination_class = HistoryPagination

    def get_queryset(self):
        filters = HistoryFilterSerializer(data=self.request.query_params)
        filters.is_valid(raise_exception=True)
        return get_ledger().history(**filters.validated_data)


# Inventory records


class InventoryListView(LedgerErrorMixin, generics.ListAPIView):
    """
    API endpoint for listing inventory records.

    Filters: branch_id, product_id, status
    """

    serializer_class = BranchInventorySerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        filters = InventoryFilterSerializer(data=self.request.query_params)
        filters.is_valid(raise_exception=True)
        return get_ledger().list_inventory(**filters.validated_data)


class InitializeInventoryView(LedgerAPIView):
    """API endpoint for explicit initialization of a (product, branch) pair."""

    serializer_class = InitializeSerializer

    def post(self, request):
        data = self.validated(request.data)
        inventory = get_ledger().initialize(
            data["product_id"],
            data["branch_id"],
            request.user,
            initial_stock=data["initial_stock"],
            minimum_stock=data.get("minimum_stock"),
            maximum_stock=data.get("maximum_stock"),
            reorder_point=data.get("reorder_point"),
        )
        return Response(BranchInventorySerializer(inventory).data, status=status.HTTP_201_CREATED)


class ThresholdsView(LedgerAPIView):
    """
    API endpoint for partial threshold updates.

    Only the fields present in the body are changed; null clears one.
    """

    serializer_class = ThresholdsSerializer

    def patch(self, request, pk):
        inventory = get_object_or_404(BranchInventory, pk=pk)
        data = self.validated(request.data)
        inventory = get_ledger().update_thresholds(
            inventory.product_id,
            inventory.branch_id,
            performed_by=request.user,
            **data,
        )
        return Response(BranchInventorySerializer(inventory).data)


class AlertsView(LedgerAPIView):
    """
    API endpoint for records at or below their reorder point.

    Optional filter: branch_id
    """

    serializer_class = AlertsFilterSerializer

    def get(self, request):
        filters = self.validated(request.query_params)
        grouped = get_ledger().alerts(**filters)
        alerts = {
            severity: BranchInventorySerializer(records, many=True).data
            for severity, records in grouped.items()
        }
        return Response({
            "total": sum(len(records) for records in grouped.values()),
            "out_of_stock_count": len(grouped["out_of_stock"]),
            "critical_count": len(grouped["critical"]),
            "low_count": len(grouped["low"]),
            "alerts": alerts,
        })


class BranchSummaryView(LedgerAPIView):
    """API endpoint for per-status counts of one branch."""

    def get(self, request, branch_id):
        return Response(get_ledger().branch_summary(branch_id))


class ProductStockView(LedgerAPIView):
    """API endpoint for one product's stock across every branch."""

    def get(self, request, product_id):
        stock = get_ledger().product_stock(product_id)
        return Response({
            "product_id": stock["product_id"],
            "total_stock": stock["total_stock"],
            "inventory": BranchInventorySerializer(stock["inventory"], many=True).data,
        })
