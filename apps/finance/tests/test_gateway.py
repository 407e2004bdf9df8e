"""
-------------------------------------------------------------------------
System: ChMS-Finance (Church Management System - Finance Core)
Client: Church Administration SaaS Dashboard
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Test cases for the ORM ledger gateway and ledger aggregates
-------------------------------------------------------------------------
"""
import uuid
from datetime import date
from decimal import Decimal

from django.core.cache import cache
from django.test import TestCase

from apps.bulk_entry.tests.fixtures import TODAY, ChurchFixtureMixin
from apps.core.exceptions import CommitException
from apps.core.models import Organization
from apps.finance.gateway import DjangoLedgerGateway, TransactionRecord
from apps.finance.models import Category, FinancialTransaction, TransactionKind
from apps.finance.services import get_period_totals, invalidate_ledger_aggregates
from apps.membership.models import Member


class DjangoLedgerGatewayTest(ChurchFixtureMixin, TestCase):
    """Test cases for DjangoLedgerGateway"""

    def setUp(self):
        super().setUp()
        self.gateway = DjangoLedgerGateway()

    def expense(self, amount, budget=None, category=None):
        return TransactionRecord(
            kind=TransactionKind.EXPENSE,
            counterparty_id=(budget or self.youth).pk,
            category_id=(category or self.supplies).pk,
            amount=Decimal(amount),
            date=TODAY,
        )

    def test_active_budgets_carry_used_amount(self):
        self.gateway.insert_transaction_batch(self.org, self.user, [self.expense('120.00')])
        budgets = {b.name: b for b in self.gateway.fetch_active_budgets(self.org, TODAY)}

        self.assertEqual(set(budgets), {'Youth Ministry', 'Missions'})
        self.assertEqual(budgets['Youth Ministry'].used_amount, Decimal('120.00'))
        self.assertEqual(budgets['Youth Ministry'].remaining, Decimal('380.00'))
        self.assertEqual(budgets['Missions'].used_amount, Decimal('0.00'))

    def test_income_does_not_count_as_budget_use(self):
        self.gateway.insert_transaction_batch(self.org, self.user, [
            TransactionRecord(TransactionKind.INCOME, self.alice.pk, self.tithe.pk, Decimal('75.00'), TODAY),
        ])
        budgets = self.gateway.fetch_active_budgets(self.org, TODAY)
        self.assertTrue(all(b.used_amount == Decimal('0.00') for b in budgets))

    def test_members_and_categories_are_active_only(self):
        Member.objects.create(organization=self.org, first_name='Gone', envelope_number='103', is_active=False)
        Category.objects.create(
            organization=self.org, kind=TransactionKind.INCOME, code='legacy', name='Legacy', is_active=False
        )

        self.assertEqual(
            sorted(m.envelope_number for m in self.gateway.fetch_members(self.org)), ['101', '102']
        )
        self.assertEqual(
            sorted(c.code for c in self.gateway.fetch_categories(self.org, TransactionKind.INCOME)),
            ['offering', 'tithe']
        )

    def test_other_church_data_is_invisible(self):
        other = Organization.objects.create(name='Other Church')
        self.assertEqual(self.gateway.fetch_members(other), [])
        self.assertEqual(self.gateway.fetch_active_budgets(other, TODAY), [])

    def test_batch_shares_id_and_audit_stamp(self):
        batch_id = uuid.uuid4()
        ids = self.gateway.insert_transaction_batch(
            self.org, self.user, [self.expense('10.00'), self.expense('20.00', budget=self.missions)],
            batch_id=batch_id
        )

        rows = FinancialTransaction.objects.filter(pk__in=ids)
        self.assertEqual(rows.count(), 2)
        self.assertEqual({row.batch_id for row in rows}, {batch_id})
        self.assertEqual({row.created_by_id for row in rows}, {self.user.pk})

    def test_rejected_row_rolls_back_whole_batch(self):
        bad = TransactionRecord(
            kind=TransactionKind.EXPENSE,
            counterparty_id=self.youth.pk,
            category_id=self.supplies.pk,
            amount=Decimal('-5.00'),
            date=TODAY,
        )
        with self.assertRaises(CommitException) as ctx:
            self.gateway.insert_transaction_batch(self.org, self.user, [self.expense('10.00'), bad])

        self.assertIn('fin_txn_amount_positive', ctx.exception.message)
        self.assertEqual(ctx.exception.details['row_count'], 2)
        self.assertFalse(FinancialTransaction.objects.exists())


class PeriodTotalsTest(ChurchFixtureMixin, TestCase):

    def setUp(self):
        super().setUp()
        cache.clear()
        DjangoLedgerGateway().insert_transaction_batch(self.org, self.user, [
            TransactionRecord(TransactionKind.INCOME, self.alice.pk, self.tithe.pk, Decimal('300.00'), TODAY),
            TransactionRecord(TransactionKind.EXPENSE, self.youth.pk, self.supplies.pk, Decimal('120.50'), TODAY),
        ])

    def test_totals_and_net(self):
        totals = get_period_totals(self.org, date(2025, 6, 1), date(2025, 6, 30))

        self.assertEqual(totals.income, Decimal('300.00'))
        self.assertEqual(totals.expense, Decimal('120.50'))
        self.assertEqual(totals.net, Decimal('179.50'))

    def test_cached_until_ledger_changes(self):
        get_period_totals(self.org, date(2025, 6, 1), date(2025, 6, 30))
        DjangoLedgerGateway().insert_transaction_batch(self.org, self.user, [
            TransactionRecord(TransactionKind.INCOME, self.bob.pk, self.tithe.pk, Decimal('50.00'), TODAY),
        ])

        stale = get_period_totals(self.org, date(2025, 6, 1), date(2025, 6, 30))
        self.assertEqual(stale.income, Decimal('300.00'))

        invalidate_ledger_aggregates(self.org)
        fresh = get_period_totals(self.org, date(2025, 6, 1), date(2025, 6, 30))
        self.assertEqual(fresh.income, Decimal('350.00'))
