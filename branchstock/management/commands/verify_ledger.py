"""
Management command to check cached quantities against the ledger.

Usage:
    python manage.py verify_ledger
    python manage.py verify_ledger --branch 3
"""

from django.core.management.base import BaseCommand, CommandError

from branchstock.service import get_ledger


class Command(BaseCommand):
    """Verify ledger consistency command."""

    help = 'Reports branch inventory records whose current stock disagrees with the ledger'

    def add_arguments(self, parser):
        parser.add_argument(
            '--branch',
            type=int,
            help='Only check this branch id',
        )

    def handle(self, *args, **options):
        broken = get_ledger().find_inconsistencies(branch_id=options['branch'])

        for inventory, expected in broken:
            self.stdout.write(
                f'product {inventory.product_id} @ branch {inventory.branch_id}: '
                f'current_stock={inventory.current_stock} ledger={expected}'
            )

        if broken:
            raise CommandError(f'{len(broken)} inconsistent record(s) found')

        self.stdout.write(self.style.SUCCESS('Ledger is consistent'))
