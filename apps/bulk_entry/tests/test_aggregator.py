"""
-------------------------------------------------------------------------
System: ChMS-Finance (Church Management System - Finance Core)
Client: Church Administration SaaS Dashboard
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Test cases for running totals
-------------------------------------------------------------------------
"""
from decimal import Decimal

from django.test import SimpleTestCase

from apps.bulk_entry.aggregator import compute_aggregates
from apps.bulk_entry.drafts import TransactionDraft


class ComputeAggregatesTest(SimpleTestCase):
    """Test cases for running totals"""

    def test_ten_dimes_make_one_dollar(self):
        """Test that ten additions of 0.10 total exactly 1.00"""
        drafts = [
            TransactionDraft(kind='income', amount=Decimal('0.10'), category_ref='tithe', counterparty_ref='10')
            for _ in range(10)
        ]
        aggregates = compute_aggregates(drafts)

        self.assertEqual(aggregates.overall_total, Decimal('1.00'))
        self.assertEqual(aggregates.by_category, {'tithe': Decimal('1.00')})
        self.assertEqual(aggregates.by_counterparty, {'10': Decimal('1.00')})

    def test_breakdowns_skip_rows_without_key_or_positive_amount(self):
        """Test that breakdowns only count rows with a key and a positive amount"""
        drafts = [
            TransactionDraft(kind='income', amount=Decimal('20.00'), category_ref='tithe', secondary_lookup='101'),
            TransactionDraft(kind='income', amount=Decimal('5.00'), category_ref=''),
            TransactionDraft(kind='income', amount=Decimal('0.00'), category_ref='offering', counterparty_ref='11'),
            TransactionDraft(kind='income', category_ref='offering', counterparty_ref='11'),
        ]
        aggregates = compute_aggregates(drafts)

        self.assertEqual(aggregates.overall_total, Decimal('25.00'))
        self.assertEqual(aggregates.by_category, {'tithe': Decimal('20.00')})
        self.assertEqual(aggregates.by_counterparty, {'#101': Decimal('20.00')})

    def test_recomputing_gives_the_same_result(self):
        """Test that aggregates are a pure function of the rows"""
        drafts = [
            TransactionDraft(kind='expense', amount=Decimal('33.33'), category_ref='supplies', counterparty_ref='1'),
            TransactionDraft(kind='expense', amount=Decimal('66.67'), category_ref='supplies', counterparty_ref='2'),
        ]
        self.assertEqual(compute_aggregates(drafts), compute_aggregates(drafts))
        self.assertEqual(compute_aggregates(drafts).to_dict()['overall_total'], '100.00')

    def test_empty_list(self):
        """Test that no rows total zero"""
        self.assertEqual(compute_aggregates([]).overall_total, Decimal('0.00'))
