"""
Pytest fixtures for Branchstock tests.
"""

import pytest
from django.contrib.auth import get_user_model

from branchstock.adapters import reset_backends
from branchstock.models import TransactionType
from branchstock.service import LedgerService, reset_ledger
from branchstock.tests.catalog.models import Branch, Product


User = get_user_model()


class RecordingNotifications:
    """NotificationSink that keeps every event."""

    def __init__(self):
        self.updates = []
        self.alerts = []

    def stock_updated(self, event):
        self.updates.append(event)

    def low_stock(self, event):
        self.alerts.append(event)


class RecordingAudit:
    """AuditSink that keeps every record."""

    def __init__(self):
        self.records = []

    def record(self, event):
        self.records.append(event)

    def actions(self):
        return [r.action for r in self.records]


@pytest.fixture(autouse=True)
def fresh_collaborators():
    """Each test builds its own catalog backend and sinks."""
    reset_backends()
    reset_ledger()
    yield
    reset_backends()
    reset_ledger()


@pytest.fixture
def user(db):
    """Create a test user."""
    return User.objects.create_user(
        username='manager',
        password='testpass123'
    )


@pytest.fixture
def cashier(db):
    return User.objects.create_user(username='cashier', password='testpass123')


@pytest.fixture
def central(db):
    """Main branch."""
    return Branch.objects.create(name='Central')


@pytest.fixture
def north(db):
    """Second branch."""
    return Branch.objects.create(name='North')


@pytest.fixture
def bread(db):
    return Product.objects.create(name='Bread', sku='BRD-001')


@pytest.fixture
def milk(db):
    return Product.objects.create(name='Milk', sku='MLK-001')


@pytest.fixture
def notifications():
    return RecordingNotifications()


@pytest.fixture
def audit():
    return RecordingAudit()


@pytest.fixture
def ledger(notifications, audit):
    """LedgerService wired to recording sinks and the configured catalog."""
    return LedgerService(notifications=notifications, audit=audit)


@pytest.fixture
def stocked(ledger, bread, central, user):
    """Bread at Central: 50 units, minimum 10, reorder point 20."""
    return ledger.initialize(
        bread.pk, central.pk, user,
        initial_stock=50, minimum_stock=10, reorder_point=20,
    )


@pytest.fixture
def two_branches(ledger, bread, central, north, user):
    """Bread at Central (30) and North (5)."""
    ledger.add_stock(bread.pk, central.pk, 30, user, transaction_type=TransactionType.INITIAL_STOCK)
    ledger.add_stock(bread.pk, north.pk, 5, user, transaction_type=TransactionType.INITIAL_STOCK)
    return central, north
