"""
URL configuration for the branch stock API.
"""

from django.urls import path

from . import views

app_name = "branchstock"

urlpatterns = [
    # Stock movements
    path("stock/add/", views.AddStockView.as_view(), name="stock_add"),
    path("stock/adjust/", views.AdjustStockView.as_view(), name="stock_adjust"),
    path("stock/loss/", views.RecordLossView.as_view(), name="stock_loss"),
    path("stock/transfer/", views.TransferView.as_view(), name="stock_transfer"),
    path("stock/history/", views.HistoryView.as_view(), name="stock_history"),
    # Inventory records
    path("inventory/", views.InventoryListView.as_view(), name="inventory_list"),
    path(
        "inventory/initialize/",
        views.InitializeInventoryView.as_view(),
        name="inventory_initialize",
    ),
    path(
        "inventory/<int:pk>/thresholds/",
        views.ThresholdsView.as_view(),
        name="inventory_thresholds",
    ),
    path("inventory/alerts/", views.AlertsView.as_view(), name="inventory_alerts"),
    path(
        "branches/<int:branch_id>/summary/",
        views.BranchSummaryView.as_view(),
        name="branch_summary",
    ),
    path(
        "products/<int:product_id>/stock/",
        views.ProductStockView.as_view(),
        name="product_stock",
    ),
]
