"""
Branchstock signals.

Sent by SignalNotificationSink after a ledger mutation commits.

    from django.dispatch import receiver
    from branchstock.signals import stock_updated

    @receiver(stock_updated)
    def push_to_clients(sender, event, **kwargs):
        channel_layer.group_send(f"branch-{event.branch_id}", ...)

Receivers get a single ``event`` keyword argument (a StockUpdate or a
LowStockAlert from branchstock.protocols.sinks).
"""

from django.dispatch import Signal

stock_updated = Signal()
low_stock_alert = Signal()
