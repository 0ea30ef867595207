"""
Tests for the Branchstock admin.
"""

import logging

import pytest
from django.urls import reverse

from branchstock.models import BranchInventory


pytestmark = pytest.mark.django_db


def change_url(inventory):
    return reverse('admin:branchstock_branchinventory_change', args=[inventory.pk])


class TestBranchInventoryAdmin:

    def test_changelist(self, admin_client, stocked):
        response = admin_client.get(reverse('admin:branchstock_branchinventory_changelist'))

        assert response.status_code == 200
        assert b'In stock' in response.content

    def test_thresholds_editable_stock_not(self, admin_client, stocked):
        response = admin_client.post(
            change_url(stocked),
            {'minimum_stock': 5, 'reorder_point': 25, 'maximum_stock': ''},
        )

        assert response.status_code == 302
        stocked.refresh_from_db()
        assert (stocked.minimum_stock, stocked.reorder_point, stocked.maximum_stock) == (5, 25, None)
        assert stocked.current_stock == 50

    def test_out_of_order_thresholds_rejected(self, admin_client, stocked):
        response = admin_client.post(
            change_url(stocked),
            {'minimum_stock': 50, 'reorder_point': 5, 'maximum_stock': 1},
        )

        assert response.status_code == 200
        assert 'reorder_point' in response.context['adminform'].form.errors
        stocked.refresh_from_db()
        assert (stocked.minimum_stock, stocked.reorder_point, stocked.maximum_stock) == (10, 20, None)

    def test_blank_clears_maximum(self, admin_client, ledger, stocked, bread, central):
        ledger.update_thresholds(bread.pk, central.pk, maximum_stock=100)

        admin_client.post(
            change_url(stocked),
            {'minimum_stock': 10, 'reorder_point': 20, 'maximum_stock': ''},
        )

        stocked.refresh_from_db()
        assert stocked.maximum_stock is None

    def test_threshold_edit_is_audited(self, admin_client, admin_user, stocked, bread, central, caplog,
                                       django_capture_on_commit_callbacks):
        with caplog.at_level(logging.INFO, logger='branchstock.audit'):
            with django_capture_on_commit_callbacks(execute=True):
                admin_client.post(
                    change_url(stocked),
                    {'minimum_stock': 5, 'reorder_point': 15, 'maximum_stock': 90},
                )

        records = [r for r in caplog.records if r.name == 'branchstock.audit']
        assert [r.getMessage() for r in records] == [
            f"Updated stock thresholds for product {bread.pk} at branch {central.pk}"
        ]
        assert records[0].actor_id == admin_user.pk
        assert records[0].audit_metadata['after'] == {
            'minimum_stock': 5, 'reorder_point': 15, 'maximum_stock': 90,
        }

    def test_check_consistency_action(self, admin_client, stocked):
        BranchInventory.objects.filter(pk=stocked.pk).update(current_stock=7)
        stocked.refresh_from_db()

        response = admin_client.post(
            reverse('admin:branchstock_branchinventory_changelist'),
            {'action': 'check_consistency', '_selected_action': [stocked.pk]},
            follow=True,
        )

        assert response.status_code == 200
        assert [str(m) for m in response.context['messages']] == [f"{stocked}: ledger says 50"]

    def test_no_add(self, admin_client, db):
        response = admin_client.get(reverse('admin:branchstock_branchinventory_add'))

        assert response.status_code == 403


class TestLedgerEntryAdmin:

    def test_read_only(self, admin_client, stocked):
        entry = stocked.latest_entry()

        view = admin_client.get(reverse('admin:branchstock_ledgerentry_change', args=[entry.pk]))
        delete = admin_client.get(reverse('admin:branchstock_ledgerentry_delete', args=[entry.pk]))

        assert view.status_code == 200
        assert delete.status_code == 403
        assert BranchInventory.objects.get(pk=stocked.pk).entries.count() == 1
