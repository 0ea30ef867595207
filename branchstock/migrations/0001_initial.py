"""
Initial migration for Branchstock models.
"""

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    """Create Branchstock models: BranchInventory, LedgerEntry."""

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='BranchInventory',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('product_id', models.PositiveIntegerField(db_index=True, verbose_name='Product ID')),
                ('branch_id', models.PositiveIntegerField(db_index=True, verbose_name='Branch ID')),
                ('current_stock', models.IntegerField(default=0, editable=False, help_text='Updated only through ledger entries.', verbose_name='Current stock')),
                ('minimum_stock', models.PositiveIntegerField(blank=True, default=10, null=True, verbose_name='Minimum stock')),
                ('reorder_point', models.PositiveIntegerField(blank=True, default=20, null=True, verbose_name='Reorder point')),
                ('maximum_stock', models.PositiveIntegerField(blank=True, null=True, verbose_name='Maximum stock')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Branch stock',
                'verbose_name_plural': 'Branch stocks',
                'ordering': ['branch_id', 'product_id'],
                'constraints': [
                    models.UniqueConstraint(fields=('product_id', 'branch_id'), name='unique_branch_inventory'),
                    models.CheckConstraint(condition=models.Q(('current_stock__gte', 0)), name='branch_inventory_stock_non_negative'),
                ],
            },
        ),
        migrations.CreateModel(
            name='LedgerEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('product_id', models.PositiveIntegerField(verbose_name='Product ID')),
                ('branch_id', models.PositiveIntegerField(verbose_name='Branch ID')),
                ('transaction_type', models.CharField(choices=[('INITIAL_STOCK', 'Initial stock'), ('PURCHASE', 'Purchase'), ('SALE', 'Sale'), ('RETURN', 'Return'), ('ADJUSTMENT', 'Adjustment'), ('DAMAGE', 'Damage'), ('EXPIRED', 'Expired')], db_index=True, max_length=20, verbose_name='Transaction type')),
                ('quantity', models.IntegerField(help_text='Positive = addition, negative = reduction', verbose_name='Quantity')),
                ('quantity_before', models.IntegerField(verbose_name='Quantity before')),
                ('quantity_after', models.IntegerField(verbose_name='Quantity after')),
                ('unit_cost', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True, verbose_name='Unit cost')),
                ('total_cost', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True, verbose_name='Total cost')),
                ('batch_number', models.CharField(blank=True, default='', max_length=100, verbose_name='Batch number')),
                ('expiry_date', models.DateField(blank=True, null=True, verbose_name='Expiry date')),
                ('supplier', models.CharField(blank=True, default='', max_length=255, verbose_name='Supplier')),
                ('reason', models.TextField(blank=True, default='', verbose_name='Reason')),
                ('reference_id', models.PositiveIntegerField(blank=True, null=True, verbose_name='Reference ID')),
                ('reference_type', models.CharField(blank=True, default='', max_length=50, verbose_name='Reference type')),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Created at')),
                ('inventory', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='entries', to='branchstock.branchinventory', verbose_name='Branch stock')),
                ('performed_by', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='branch_stock_entries', to=settings.AUTH_USER_MODEL, verbose_name='Performed by')),
            ],
            options={
                'verbose_name': 'Stock transaction',
                'verbose_name_plural': 'Stock transactions',
                'ordering': ['created_at', 'pk'],
                'indexes': [
                    models.Index(fields=['product_id', 'branch_id', 'created_at'], name='ledger_pair_created_idx'),
                    models.Index(fields=['branch_id', 'created_at'], name='ledger_branch_created_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('quantity', 0), _negated=True), name='ledger_quantity_non_zero'),
                    models.CheckConstraint(condition=models.Q(('quantity_before__gte', 0)), name='ledger_before_non_negative'),
                    models.CheckConstraint(condition=models.Q(('quantity_after__gte', 0)), name='ledger_after_non_negative'),
                    models.CheckConstraint(condition=models.Q(('quantity_after', models.F('quantity_before') + models.F('quantity'))), name='ledger_after_equals_before_plus_quantity'),
                ],
            },
        ),
    ]
