"""
Signal notification sink — in-process pub/sub over Django signals.

Default NOTIFICATION_SINK. Realtime transports (websockets, SSE, channels)
subscribe to branchstock.signals instead of being imported by the ledger.
"""

from __future__ import annotations

import logging

from branchstock.protocols.sinks import LowStockAlert, StockUpdate
from branchstock.signals import low_stock_alert, stock_updated

logger = logging.getLogger(__name__)


class SignalNotificationSink:
    """
    Fan out notifications to every connected receiver.

    Uses send_robust(): one broken receiver must not starve the others.
    Receiver errors are logged here.
    """

    def stock_updated(self, event: StockUpdate) -> None:
        self._send(stock_updated, event)

    def low_stock(self, event: LowStockAlert) -> None:
        self._send(low_stock_alert, event)

    def _send(self, signal, event) -> None:
        for receiver, response in signal.send_robust(sender=type(self), event=event):
            if isinstance(response, Exception):
                logger.error(
                    "Notification receiver %r failed: %s",
                    receiver,
                    response,
                    exc_info=(type(response), response, response.__traceback__),
                )
