"""
-------------------------------------------------------------------------
System: ChMS-Finance (Church Management System - Finance Core)
Client: Church Administration SaaS Dashboard
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Test cases for the import_transactions management command
-------------------------------------------------------------------------
"""
import tempfile
from io import StringIO
from pathlib import Path
from unittest import mock

from django.core.cache import cache
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase

from apps.bulk_entry.tests.fixtures import TODAY, ChurchFixtureMixin
from apps.finance.models import FinancialTransaction


class ImportTransactionsCommandTest(ChurchFixtureMixin, TestCase):
    """Test cases for the import_transactions command"""

    def setUp(self):
        super().setUp()
        cache.clear()
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)
        patcher = mock.patch('apps.bulk_entry.session.timezone.localdate', return_value=TODAY)
        patcher.start()
        self.addCleanup(patcher.stop)

    def write_csv(self, content: str) -> str:
        path = Path(self.tmpdir.name) / 'entries.csv'
        path.write_text(content, encoding='utf-8')
        return str(path)

    def run_command(self, path, *extra, kind='expense'):
        out = StringIO()
        call_command(
            'import_transactions', path,
            '--kind', kind,
            '--organization', str(self.org.pk),
            '--user', self.user.username,
            *extra,
            stdout=out,
        )
        return out.getvalue()

    def test_commits_file(self):
        """Test that a valid file is committed as one batch"""
        path = self.write_csv(
            f"budget_id,amount,category,date\n{self.missions.pk},125.00,supplies,2025-05-01\n"
        )
        output = self.run_command(path)

        self.assertIn('Committed 1 rows', output)
        self.assertEqual(FinancialTransaction.objects.get().budget, self.missions)

    def test_dry_run_writes_nothing(self):
        """Test that a dry run validates without saving"""
        path = self.write_csv(
            f"budget_id,amount,category,date\n{self.missions.pk},125.00,supplies,2025-05-01\n"
        )
        with self.assertLogs('apps.bulk_entry', level='INFO') as logs:
            output = self.run_command(path, '--dry-run')

        self.assertIn('Validation passed', output)
        self.assertTrue(any('passed validation for Grace Community Church' in line for line in logs.output))
        self.assertFalse(FinancialTransaction.objects.exists())

    def test_dry_run_still_checks_capacity(self):
        """Test that a dry run still reports budget overruns"""
        path = self.write_csv(
            f"budget_id,amount,category,date\n{self.youth.pk},600.00,supplies,2025-05-01\n"
        )
        with self.assertRaises(CommandError) as ctx:
            self.run_command(path, '--dry-run')
        self.assertIn('exceeds remaining budget for Youth Ministry', str(ctx.exception))

    def test_missing_file(self):
        """Test that a missing file is a command error"""
        with self.assertRaises(CommandError):
            self.run_command('/nonexistent/entries.csv')

    def test_unknown_user(self):
        """Test that an unknown username is a command error"""
        path = self.write_csv("budget_id,amount,category,date\n")
        with self.assertRaises(CommandError):
            call_command(
                'import_transactions', path, '--kind', 'expense',
                '--organization', str(self.org.pk), '--user', 'nobody', stdout=StringIO()
            )
