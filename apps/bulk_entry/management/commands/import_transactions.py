"""
Management command to import income or expense entries from a CSV or
Excel file and commit them as one batch.

Usage:
    python manage.py import_transactions giving.csv --kind income --organization 1 --user treasurer
    python manage.py import_transactions bills.xlsx --kind expense --organization 1 --user treasurer --dry-run
"""
import logging
from pathlib import Path

from django.contrib.auth import get_user_model
from django.core.files import File
from django.core.management.base import BaseCommand, CommandError

from apps.bulk_entry.session import BulkEntrySession
from apps.core.exceptions import LedgerException
from apps.core.models import Organization
from apps.finance.models import TransactionKind

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = 'Import income or expense entries from a CSV or Excel file'

    def add_arguments(self, parser):
        parser.add_argument(
            'import_file',
            type=str,
            help='Path to the .csv or .xlsx file to import',
        )
        parser.add_argument(
            '--kind',
            choices=TransactionKind.values,
            required=True,
            help='Whether the file holds income or expense entries',
        )
        parser.add_argument(
            '--organization',
            type=int,
            required=True,
            help='ID of the church the entries belong to',
        )
        parser.add_argument(
            '--user',
            type=str,
            required=True,
            help='Username recorded as the creator of the entries',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Parse and validate without writing anything',
        )

    def handle(self, *args, **options):
        path = Path(options['import_file'])
        kind = options['kind']
        dry_run = options['dry_run']

        if not path.exists():
            raise CommandError(f"Import file not found: {path}")

        try:
            organization = Organization.objects.get(pk=options['organization'])
        except Organization.DoesNotExist:
            raise CommandError(f"Organization not found: {options['organization']}")

        User = get_user_model()
        try:
            user = User.objects.get(username=options['user'])
        except User.DoesNotExist:
            raise CommandError(f"User not found: {options['user']}")

        self.stdout.write("=" * 80)
        self.stdout.write(f"BULK {kind.upper()} IMPORT")
        self.stdout.write("=" * 80)
        self.stdout.write(f"\nFile: {path}")
        self.stdout.write(f"Organization: {organization.name}")
        if dry_run:
            self.stdout.write(self.style.WARNING("⚠ DRY RUN: nothing will be saved"))

        session = BulkEntrySession(organization, user, kind)

        try:
            with path.open('rb') as handle:
                drafts = session.import_file(File(handle, name=path.name))
            self.stdout.write(self.style.SUCCESS(f"  ✓ Parsed {len(drafts)} rows"))

            aggregates = session.get_aggregates()
            self.stdout.write(f"  Total: {organization.format_amount(aggregates.overall_total)}")

            if dry_run:
                session.prepare()
                logger.info(f"Dry run of {path.name} passed validation for {organization.name}")
                self.stdout.write(self.style.SUCCESS("\n✓ Validation passed. Run without --dry-run to save."))
                return

            result = session.submit()
        except LedgerException as e:
            logger.warning(f"Import of {path.name} failed for {organization.name}: {e.error_code}")
            self.stdout.write(self.style.ERROR(f"\n✗ Import failed: {e.error_code}"))
            for line in e.message.split('; '):
                self.stdout.write(f"  - {line}")
            raise CommandError(e.message)

        self.stdout.write(self.style.SUCCESS(
            f"\n✓ Committed {result.row_count} rows"
            f"\n  Batch: {result.batch_id}"
            f"\n  Total: {organization.format_amount(result.total)}"
        ))
