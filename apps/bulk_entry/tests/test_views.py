"""
-------------------------------------------------------------------------
System: ChMS-Finance (Church Management System - Finance Core)
Client: Church Administration SaaS Dashboard
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Test cases for bulk entry JSON endpoints
-------------------------------------------------------------------------
"""
import json
from decimal import Decimal
from unittest import mock

from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, Client
from django.urls import reverse

from apps.bulk_entry.tests.fixtures import TODAY, ChurchFixtureMixin
from apps.core.exceptions import CommitException
from apps.finance.models import FinancialTransaction

User = get_user_model()


class BulkEntryViewsTest(ChurchFixtureMixin, TestCase):
    """Test cases for bulk entry views"""

    def setUp(self):
        super().setUp()
        cache.clear()
        self.client = Client()
        self.client.force_login(self.user)
        patcher = mock.patch('apps.bulk_entry.session.timezone.localdate', return_value=TODAY)
        patcher.start()
        self.addCleanup(patcher.stop)

    def post_json(self, name, payload):
        return self.client.post(reverse(name), data=json.dumps(payload), content_type='application/json')

    def expense_row(self, amount, budget=None, **extra):
        row = {
            'amount': amount,
            'counterparty_ref': str((budget or self.youth).pk),
            'category_ref': 'supplies',
            'date': '2025-06-01',
        }
        row.update(extra)
        return row

    def test_login_required(self):
        """Test that anonymous users are redirected to login"""
        self.client.logout()
        response = self.post_json('bulk_entry:submit', {'kind': 'income', 'rows': []})
        self.assertEqual(response.status_code, 302)

    def test_user_without_church_is_refused(self):
        """Test that a user with no church assignment gets 403"""
        outsider = User.objects.create_user(username='visitor', password='testpass123')
        self.client.force_login(outsider)
        response = self.client.get(reverse('bulk_entry:budget_usage_list'))
        self.assertEqual(response.status_code, 403)

    def test_import_returns_drafts_and_totals(self):
        """Test that an upload comes back as drafts with totals and nothing is saved"""
        upload = SimpleUploadedFile(
            'giving.csv',
            b"envelope_number,amount,category,date\n101,20,tithe,2025-06-01\n102,30.5,offering,2025-06-01\n"
        )
        response = self.client.post(reverse('bulk_entry:import'), {'kind': 'income', 'import_file': upload})

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(len(data['rows']), 2)
        self.assertEqual(data['aggregates']['overall_total'], '50.50')
        self.assertFalse(FinancialTransaction.objects.exists())

    def test_import_structural_error(self):
        """Test that a file with missing columns returns 400 with the error code"""
        upload = SimpleUploadedFile('giving.csv', b"amount,date\n20,2025-06-01\n")
        response = self.client.post(reverse('bulk_entry:import'), {'kind': 'income', 'import_file': upload})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error_code'], 'ERR_IMPORT_STRUCTURE')

    def test_import_rejects_other_file_types(self):
        """Test that the upload form refuses other file types"""
        upload = SimpleUploadedFile('giving.txt', b"hello")
        response = self.client.post(reverse('bulk_entry:import'), {'kind': 'income', 'import_file': upload})

        self.assertEqual(response.status_code, 400)
        self.assertIn('import_file', response.json()['fields'])

    def test_preview(self):
        """Test that preview returns running totals by category"""
        response = self.post_json('bulk_entry:preview', {
            'kind': 'expense',
            'rows': [self.expense_row('10.10'), self.expense_row('0.90')],
        })
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['aggregates']['by_category'], {'supplies': '11.00'})

    def test_submit_commits_batch(self):
        """Test that submit commits every row under one batch id"""
        response = self.post_json('bulk_entry:submit', {
            'kind': 'expense',
            'rows': [self.expense_row('100'), self.expense_row('250', budget=self.missions)],
        })

        self.assertEqual(response.status_code, 201)
        data = response.json()
        self.assertEqual(data['row_count'], 2)
        self.assertEqual(data['total'], '350.00')
        self.assertEqual(FinancialTransaction.objects.filter(batch_id=data['batch_id']).count(), 2)

    def test_submit_over_budget_is_conflict(self):
        """Test that an over-budget batch returns 409 and saves nothing"""
        response = self.post_json('bulk_entry:submit', {
            'kind': 'expense',
            'rows': [self.expense_row('300'), self.expense_row('300')],
        })

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()['error_code'], 'ERR_BUDGET_EXCEEDED')
        self.assertFalse(FinancialTransaction.objects.exists())

    def test_submit_empty_batch(self):
        """Test that a batch of placeholder rows returns 400"""
        response = self.post_json('bulk_entry:submit', {'kind': 'income', 'rows': [{}]})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error_code'], 'ERR_EMPTY_BATCH')

    def test_submit_unknown_kind(self):
        """Test that an unknown kind returns 400"""
        response = self.post_json('bulk_entry:submit', {'kind': 'transfer', 'rows': []})
        self.assertEqual(response.status_code, 400)

    def test_submit_commit_failure(self):
        """Test that a database rejection returns 502 with its message"""
        with mock.patch(
            'apps.finance.gateway.DjangoLedgerGateway.insert_transaction_batch',
            side_effect=CommitException('database is locked')
        ):
            response = self.post_json('bulk_entry:submit', {'kind': 'expense', 'rows': [self.expense_row('5')]})

        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.json()['message'], 'database is locked')

    def test_budget_usage_after_commit(self):
        """Test that budget usage reflects a commit made after it was cached"""
        self.client.get(reverse('bulk_entry:budget_usage_list'))
        self.post_json('bulk_entry:submit', {'kind': 'expense', 'rows': [self.expense_row('400')]})

        response = self.client.get(reverse('bulk_entry:budget_usage_detail', args=[self.youth.pk]))
        data = response.json()
        self.assertEqual(data['used_amount'], '400.00')
        self.assertEqual(data['percentage'], '80.0')
        self.assertEqual(data['level'], 'warning')

    def test_budget_usage_list(self):
        """Test that every budget of the church is listed by name"""
        response = self.client.get(reverse('bulk_entry:budget_usage_list'))
        names = [item['name'] for item in response.json()['budgets']]
        self.assertEqual(names, ['Missions', 'Retreat 2024', 'Youth Ministry'])

    def test_budget_usage_of_other_church_is_not_found(self):
        """Test that an unknown budget id returns 404"""
        response = self.client.get(reverse('bulk_entry:budget_usage_detail', args=[999999]))
        self.assertEqual(response.status_code, 404)

    def test_rows_must_be_objects(self):
        """Test that a rows list holding anything but objects returns 400"""
        for rows in ([5], 'amount', [{'amount': '5'}, None]):
            with self.subTest(rows=rows):
                response = self.post_json('bulk_entry:submit', {'kind': 'income', 'rows': rows})
                self.assertEqual(response.status_code, 400)
                self.assertEqual(response.json()['error'], 'rows must be a list of objects')

    def test_malformed_body_is_logged(self):
        """Test that a rejected request body is logged as a warning"""
        with self.assertLogs('apps.bulk_entry', level='WARNING') as logs:
            self.post_json('bulk_entry:preview', {'kind': 'income', 'rows': [5]})
        self.assertIn('rows must be a list of objects', logs.output[0])

    def test_preview_switch_kind(self):
        """Test that preview can move the whole grid to the other kind"""
        response = self.post_json('bulk_entry:preview', {
            'kind': 'income',
            'rows': [{'amount': '20', 'counterparty_ref': str(self.alice.pk), 'date': '2025-06-01'}],
            'switch_kind': 'expense',
        })

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data['kind'], 'expense')
        self.assertEqual(data['rows'][0]['category_ref'], 'ministry_expense')
        self.assertEqual(data['rows'][0]['counterparty_ref'], '')
        self.assertEqual(data['rows'][0]['amount'], '20.00')

    def test_preview_add_carried_forward_row(self):
        """Test that preview can append a row copying the last one"""
        response = self.post_json('bulk_entry:preview', {
            'kind': 'expense',
            'rows': [self.expense_row('10', date='2025-06-02')],
            'add_row': 'carry_forward',
        })

        rows = response.json()['rows']
        self.assertEqual(len(rows), 2)
        self.assertEqual(rows[1]['counterparty_ref'], str(self.youth.pk))
        self.assertEqual(rows[1]['category_ref'], 'supplies')
        self.assertEqual(rows[1]['date'], '2025-06-02')
        self.assertIsNone(rows[1]['amount'])

    def test_preview_unknown_add_row_mode(self):
        """Test that an unknown add_row mode returns 400"""
        response = self.post_json('bulk_entry:preview', {'kind': 'income', 'rows': [], 'add_row': 'copy'})
        self.assertEqual(response.status_code, 400)

    def test_period_totals_follow_commits(self):
        """Test that period totals are recomputed after a batch is committed"""
        url = reverse('bulk_entry:period_totals')
        params = {'start': '2025-06-01', 'end': '2025-06-30'}

        before = self.client.get(url, params).json()
        self.assertEqual(before['income'], '0.00')

        self.post_json('bulk_entry:submit', {
            'kind': 'income',
            'rows': [
                {'amount': '75', 'secondary_lookup': '101', 'category_ref': 'tithe', 'date': '2025-06-01'},
                {'amount': '25.50', 'secondary_lookup': '102', 'category_ref': 'offering', 'date': '2025-06-08'},
            ],
        })
        self.post_json('bulk_entry:submit', {'kind': 'expense', 'rows': [self.expense_row('40')]})

        response = self.client.get(url, params)
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data['income'], '100.50')
        self.assertEqual(data['expense'], '40.00')
        self.assertEqual(data['net'], '60.50')
        self.assertEqual(data['currency'], self.org.currency_code)

    def test_period_totals_need_valid_dates(self):
        """Test that missing, malformed or reversed dates return 400"""
        url = reverse('bulk_entry:period_totals')
        for params in ({}, {'start': '2025-06-01'}, {'start': '2025-06-31', 'end': '2025-07-01'},
                       {'start': '2025-07-01', 'end': '2025-06-01'}):
            with self.subTest(params=params):
                self.assertEqual(self.client.get(url, params).status_code, 400)
