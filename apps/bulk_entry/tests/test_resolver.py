"""
-------------------------------------------------------------------------
System: ChMS-Finance (Church Management System - Finance Core)
Client: Church Administration SaaS Dashboard
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Test cases for counterparty and category resolution
-------------------------------------------------------------------------
"""
from datetime import date
from decimal import Decimal

from django.test import SimpleTestCase

from apps.bulk_entry.drafts import TransactionDraft
from apps.bulk_entry.resolver import EntityResolver, LedgerSnapshot
from apps.bulk_entry.tests.fixtures import sample_gateway
from apps.core.exceptions import ResolutionException
from apps.finance.gateway import CategorySnapshot, MemberSnapshot
from apps.finance.models import TransactionKind

TODAY = date(2025, 6, 15)


def income(**kwargs):
    kwargs.setdefault('amount', Decimal('25.00'))
    kwargs.setdefault('category_ref', 'tithe')
    kwargs.setdefault('date', TODAY)
    return TransactionDraft(kind='income', **kwargs)


def expense(**kwargs):
    kwargs.setdefault('amount', Decimal('25.00'))
    kwargs.setdefault('category_ref', 'ministry_expense')
    kwargs.setdefault('date', TODAY)
    return TransactionDraft(kind='expense', **kwargs)


class LedgerSnapshotTest(SimpleTestCase):

    def test_income_snapshot_skips_budgets(self):
        """Test that an income snapshot fetches members and categories only"""
        gateway = sample_gateway()
        snapshot = LedgerSnapshot.fetch(gateway, None, 'income', TODAY)

        self.assertEqual(snapshot.budgets, ())
        self.assertEqual(len(snapshot.members), 2)
        self.assertEqual([c.code for c in snapshot.categories], ['tithe'])
        self.assertNotIn('fetch_active_budgets', gateway.calls)

    def test_expense_snapshot_skips_members(self):
        """Test that an expense snapshot fetches budgets and categories only"""
        gateway = sample_gateway()
        snapshot = LedgerSnapshot.fetch(gateway, None, 'expense', TODAY)

        self.assertEqual(len(snapshot.budgets), 2)
        self.assertEqual(snapshot.members, ())


class EntityResolverTest(SimpleTestCase):
    """Test cases for EntityResolver"""

    def resolver(self, kind, **kwargs):
        return EntityResolver(LedgerSnapshot.fetch(sample_gateway(**kwargs), None, kind, TODAY))

    def test_envelope_number_resolves_to_single_member(self):
        """Test that an envelope number shared by no one else resolves to its member"""
        resolved = self.resolver('income').resolve([income(secondary_lookup='102')])

        self.assertEqual(resolved[0].counterparty_id, 11)
        self.assertEqual(resolved[0].category_id, 100)

    def test_direct_member_reference_wins_over_envelope(self):
        """Test that a member id is used even when an envelope number is also given"""
        resolved = self.resolver('income').resolve([income(counterparty_ref='10', secondary_lookup='102')])
        self.assertEqual(resolved[0].counterparty_id, 10)

    def test_unknown_envelope_number(self):
        """Test that an envelope number with no member fails with the row number"""
        with self.assertRaises(ResolutionException) as ctx:
            self.resolver('income').resolve([income(secondary_lookup='999')])

        self.assertEqual(ctx.exception.message, 'No member found with envelope number 999 (row 1)')
        self.assertEqual(ctx.exception.row_errors[0].value, '999')

    def test_shared_envelope_number_is_ambiguous(self):
        """Test that an envelope number held by two members is rejected"""
        members = [
            MemberSnapshot(10, 'Alice Moore', '101'),
            MemberSnapshot(12, 'Carl Moore', '101'),
        ]
        with self.assertRaises(ResolutionException) as ctx:
            self.resolver('income', members=members).resolve([income(secondary_lookup='101')])

        self.assertIn('Multiple members found with envelope number 101 (row 1)', ctx.exception.message)

    def test_unknown_member_id(self):
        """Test that a member id outside the church's active members fails"""
        with self.assertRaises(ResolutionException) as ctx:
            self.resolver('income').resolve([income(counterparty_ref='77')])
        self.assertIn('No member found with id 77', ctx.exception.message)

    def test_income_without_counterparty(self):
        """Test that an income row with neither member nor envelope fails"""
        with self.assertRaises(ResolutionException):
            self.resolver('income').resolve([income()])

    def test_expired_budget_is_not_found(self):
        """Test that a budget outside its window is treated as not found"""
        with self.assertRaises(ResolutionException) as ctx:
            self.resolver('expense').resolve([expense(counterparty_ref='99')])
        self.assertIn('Budget not found or not active: 99 (row 1)', ctx.exception.message)

    def test_category_by_code_or_id(self):
        """Test that a category can be referenced by code or by id"""
        resolved = self.resolver('expense').resolve([
            expense(counterparty_ref='1'),
            expense(counterparty_ref='2', category_ref='200'),
        ])
        self.assertEqual([item.category_id for item in resolved], [200, 200])

    def test_numeric_code_is_preferred_over_matching_id(self):
        """Test that a code wins when no other category has that id"""
        categories = [CategorySnapshot(5, '1', 'Code one', TransactionKind.EXPENSE)]
        resolved = self.resolver('expense', categories=categories).resolve(
            [expense(counterparty_ref='1', category_ref='1')]
        )
        self.assertEqual(resolved[0].category_id, 5)

    def test_code_equal_to_another_category_id_is_ambiguous(self):
        """Test that a reference matching one category's id and another's code is rejected"""
        categories = [
            CategorySnapshot(1, 'supplies', 'Supplies', TransactionKind.EXPENSE),
            CategorySnapshot(2, '1', 'Code one', TransactionKind.EXPENSE),
        ]
        with self.assertRaises(ResolutionException) as ctx:
            self.resolver('expense', categories=categories).resolve(
                [expense(counterparty_ref='1', category_ref='supplies'),
                 expense(counterparty_ref='1', category_ref='1')]
            )

        self.assertEqual(ctx.exception.rows, [2])
        self.assertIn('Ambiguous expense category 1', ctx.exception.message)
        self.assertIn('(row 2)', ctx.exception.message)
        self.assertEqual(ctx.exception.row_errors[0].field, 'category_ref')

    def test_category_of_other_kind_is_unknown(self):
        """Test that an income category cannot be used on an expense row"""
        with self.assertRaises(ResolutionException) as ctx:
            self.resolver('expense').resolve([expense(counterparty_ref='1', category_ref='tithe')])
        self.assertIn('Unknown expense category tithe', ctx.exception.message)

    def test_every_failing_row_is_reported(self):
        """Test that resolution continues past the first bad row"""
        drafts = [
            income(secondary_lookup='999'),
            income(counterparty_ref='10'),
            income(counterparty_ref='88'),
        ]
        with self.assertRaises(ResolutionException) as ctx:
            self.resolver('income').resolve(drafts, rows=[2, 3, 5])

        self.assertEqual(ctx.exception.rows, [2, 5])
        self.assertEqual(len(ctx.exception.details['errors']), 2)

    def test_to_record_carries_resolved_ids(self):
        """Test that a resolved expense row becomes a record against its budget"""
        resolved = self.resolver('expense').resolve([expense(counterparty_ref='2', description='Bibles')])
        record = resolved[0].to_record()

        self.assertEqual(record.budget_id, 2)
        self.assertIsNone(record.member_id)
        self.assertEqual(record.description, 'Bibles')
