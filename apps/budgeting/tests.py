"""
-------------------------------------------------------------------------
System: ChMS-Finance (Church Management System - Finance Core)
Client: Church Administration SaaS Dashboard
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Unit tests for the budgeting module.
-------------------------------------------------------------------------
"""
from decimal import Decimal
from datetime import date
from django.core.cache import cache
from django.core.exceptions import ValidationError
from django.test import SimpleTestCase, TestCase

from apps.budgeting.models import Budget, BudgetWindowStatus
from apps.budgeting.services import (
    ProposedCharge, UsageLevel, compute_budget_usage, get_budget_usage_summary,
    invalidate_budget_usage, usage_level, validate_batch_capacity,
)
from apps.core.exceptions import BudgetExceededException, ResolutionException
from apps.core.models import Organization
from apps.finance.gateway import BudgetSnapshot


def snapshot(budget_id=1, name='Youth Ministry', allocation='1000.00', used='500.00') -> BudgetSnapshot:
    return BudgetSnapshot(
        id=budget_id,
        name=name,
        allocation=Decimal(allocation),
        used_amount=Decimal(used),
        start_date=date(2025, 1, 1),
        end_date=date(2025, 12, 31),
    )


class CapacityValidationTests(SimpleTestCase):
    """Tests for validate_batch_capacity."""

    def test_single_row_within_remaining(self) -> None:
        """Test that a row equal to the remaining capacity passes."""
        proposed = validate_batch_capacity([ProposedCharge(1, 1, Decimal('500.00'))], [snapshot()])
        self.assertEqual(proposed, {1: Decimal('500.00')})

    def test_running_total_exceeds_remaining(self) -> None:
        """Test that two rows of 400 against 500 remaining fail on the second row."""
        charges = [ProposedCharge(1, 1, Decimal('400.00')), ProposedCharge(2, 1, Decimal('400.00'))]

        with self.assertRaises(BudgetExceededException) as ctx:
            validate_batch_capacity(charges, [snapshot()])

        self.assertEqual(ctx.exception.rows, [2])
        self.assertIn('Row 2 amount ($400.00)', ctx.exception.message)
        self.assertIn('($100.00)', ctx.exception.message)
        self.assertEqual(ctx.exception.details['budgets']['1']['proposed'], '800.00')

    def test_every_violation_is_reported(self) -> None:
        """Test that all rows over budget are listed together."""
        charges = [
            ProposedCharge(1, 1, Decimal('600.00')),
            ProposedCharge(2, 2, Decimal('50.00')),
            ProposedCharge(3, 2, Decimal('60.00')),
        ]
        budgets = [snapshot(), snapshot(2, 'Missions', '100.00', '0.00')]

        with self.assertRaises(BudgetExceededException) as ctx:
            validate_batch_capacity(charges, budgets)

        self.assertEqual(ctx.exception.rows, [1, 3])

    def test_currency_symbol_in_message(self) -> None:
        """Test that amounts are rendered with the church's currency symbol."""
        with self.assertRaises(BudgetExceededException) as ctx:
            validate_batch_capacity(
                [ProposedCharge(4, 1, Decimal('1234.50'))], [snapshot()], currency_symbol='£'
            )
        self.assertEqual(
            ctx.exception.message,
            'Row 4 amount (£1,234.50) exceeds remaining budget for Youth Ministry (£500.00)'
        )

    def test_unknown_budget(self) -> None:
        """Test that a charge against a budget missing from the snapshot is a resolution error."""
        with self.assertRaises(ResolutionException):
            validate_batch_capacity([ProposedCharge(1, 9, Decimal('1.00'))], [snapshot()])

    def test_decimal_accumulation_is_exact(self) -> None:
        """Test that repeated cent amounts do not drift past the ceiling."""
        charges = [ProposedCharge(row, 1, Decimal('0.10')) for row in range(1, 11)]
        proposed = validate_batch_capacity(charges, [snapshot(allocation='1.00', used='0.00')])
        self.assertEqual(proposed[1], Decimal('1.00'))


class BudgetUsageTests(SimpleTestCase):
    """Tests for budget usage figures."""

    def test_usage_levels(self) -> None:
        """Test warning and critical thresholds."""
        self.assertEqual(usage_level(Decimal('70.0')), UsageLevel.NORMAL)
        self.assertEqual(usage_level(Decimal('70.1')), UsageLevel.WARNING)
        self.assertEqual(usage_level(Decimal('90.1')), UsageLevel.CRITICAL)

    def test_compute_usage(self) -> None:
        """Test remaining, percentage and level for a nearly spent budget"""
        usage = compute_budget_usage(snapshot(used='925.00'), date(2025, 6, 1))

        self.assertEqual(usage.remaining, Decimal('75.00'))
        self.assertEqual(usage.percentage, Decimal('92.5'))
        self.assertEqual(usage.level, UsageLevel.CRITICAL)
        self.assertEqual(usage.status, BudgetWindowStatus.ACTIVE)

    def test_window_status(self) -> None:
        """Test that usage reports upcoming and expired windows"""
        self.assertEqual(compute_budget_usage(snapshot(), date(2024, 12, 31)).status, BudgetWindowStatus.UPCOMING)
        self.assertEqual(compute_budget_usage(snapshot(), date(2026, 1, 1)).status, BudgetWindowStatus.EXPIRED)

    def test_zero_allocation(self) -> None:
        """Test that a zero allocation reports zero percent"""
        usage = compute_budget_usage(snapshot(allocation='0.00', used='0.00'), date(2025, 6, 1))
        self.assertEqual(usage.percentage, Decimal('0.0'))


class BudgetModelTests(TestCase):
    """Tests for the Budget model and cached usage summary."""

    def setUp(self) -> None:
        cache.clear()
        self.org = Organization.objects.create(name="St. Mark's Parish")
        self.budget = Budget.objects.create(
            organization=self.org,
            name='Music',
            allocation=Decimal('300.00'),
            start_date=date(2025, 1, 1),
            end_date=date(2025, 12, 31),
        )

    def test_end_before_start_is_invalid(self) -> None:
        """Test that a window ending before it starts fails validation"""
        self.budget.end_date = date(2024, 12, 31)
        with self.assertRaises(ValidationError):
            self.budget.full_clean()

    def test_is_active_on(self) -> None:
        """Test that the end date is inside the window"""
        self.assertTrue(self.budget.is_active_on(date(2025, 12, 31)))
        self.assertFalse(self.budget.is_active_on(date(2026, 1, 1)))

    def test_summary_is_cached_until_invalidated(self) -> None:
        """Test that a new budget only appears after invalidation."""
        first = get_budget_usage_summary(self.org, date(2025, 6, 1))
        Budget.objects.create(
            organization=self.org,
            name='Outreach',
            allocation=Decimal('100.00'),
            start_date=date(2025, 1, 1),
            end_date=date(2025, 12, 31),
        )

        self.assertEqual(len(get_budget_usage_summary(self.org, date(2025, 6, 1))), len(first))
        invalidate_budget_usage(self.org)
        self.assertEqual(len(get_budget_usage_summary(self.org, date(2025, 6, 1))), 2)

    def test_tenant_isolation(self) -> None:
        """Test that another church sees none of these budgets"""
        other = Organization.objects.create(name='Other Church')
        self.assertEqual(get_budget_usage_summary(other, date(2025, 6, 1)), [])

    def test_model_and_usage_share_window_rules(self) -> None:
        """Test that the model and the usage figures classify a window the same way"""
        for day in (date(2024, 12, 31), date(2025, 1, 1), date(2025, 12, 31), date(2026, 1, 1)):
            with self.subTest(day=day):
                expected = BudgetWindowStatus.for_window(self.budget.start_date, self.budget.end_date, day)
                self.assertEqual(self.budget.window_status(day), expected)
                self.assertEqual(
                    compute_budget_usage(snapshot(), day).status,
                    expected
                )
        self.assertEqual(
            BudgetWindowStatus.for_window(date(2025, 1, 1), date(2025, 1, 1), date(2025, 1, 1)),
            BudgetWindowStatus.ACTIVE
        )
