"""
-------------------------------------------------------------------------
System: ChMS-Finance (Church Management System - Finance Core)
Client: Church Administration SaaS Dashboard
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Shared test fixtures for bulk entry: a populated church and
             an in-memory ledger gateway.
-------------------------------------------------------------------------
"""
from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model

from apps.budgeting.models import Budget
from apps.core.exceptions import CommitException
from apps.core.models import Organization, StaffAssignment
from apps.finance.gateway import (
    BudgetSnapshot, CategorySnapshot, LedgerGateway, MemberSnapshot,
)
from apps.finance.models import Category, TransactionKind
from apps.membership.models import Member

User = get_user_model()

TODAY = date(2025, 6, 15)


class ChurchFixtureMixin:
    """Creates one church with members, budgets and categories."""

    def setUp(self):
        super().setUp()
        self.org = Organization.objects.create(name="Grace Community Church")
        self.user = User.objects.create_user(username='treasurer', password='testpass123')
        StaffAssignment.objects.create(user=self.user, organization=self.org)

        self.alice = Member.objects.create(
            organization=self.org, first_name='Alice', last_name='Moore', envelope_number='101'
        )
        self.bob = Member.objects.create(
            organization=self.org, first_name='Bob', last_name='Reyes', envelope_number='102'
        )

        self.youth = Budget.objects.create(
            organization=self.org,
            name='Youth Ministry',
            allocation=Decimal('500.00'),
            start_date=date(2025, 1, 1),
            end_date=date(2025, 12, 31),
        )
        self.missions = Budget.objects.create(
            organization=self.org,
            name='Missions',
            allocation=Decimal('2000.00'),
            start_date=date(2025, 1, 1),
            end_date=date(2025, 12, 31),
        )
        self.retreat = Budget.objects.create(
            organization=self.org,
            name='Retreat 2024',
            allocation=Decimal('1000.00'),
            start_date=date(2024, 1, 1),
            end_date=date(2024, 12, 31),
        )

        self.tithe = Category.objects.create(
            organization=self.org, kind=TransactionKind.INCOME, code='tithe', name='Tithe'
        )
        self.offering = Category.objects.create(
            organization=self.org, kind=TransactionKind.INCOME, code='offering', name='Offering'
        )
        self.ministry = Category.objects.create(
            organization=self.org, kind=TransactionKind.EXPENSE, code='ministry_expense', name='Ministry'
        )
        self.supplies = Category.objects.create(
            organization=self.org, kind=TransactionKind.EXPENSE, code='supplies', name='Supplies'
        )


class InMemoryGateway(LedgerGateway):
    """
    Ledger gateway holding reference data in lists.

    Set fail_with to a message to make the next insert raise
    CommitException. Every call is recorded in calls.
    """

    def __init__(self, budgets=(), members=(), categories=(), fail_with=None):
        self.budgets = list(budgets)
        self.members = list(members)
        self.categories = list(categories)
        self.fail_with = fail_with
        self.inserted = []
        self.calls = []

    def fetch_active_budgets(self, organization, on_date):
        self.calls.append('fetch_active_budgets')
        return [budget for budget in self.budgets if budget.is_active_on(on_date)]

    def fetch_members(self, organization):
        self.calls.append('fetch_members')
        return list(self.members)

    def fetch_categories(self, organization, kind):
        self.calls.append('fetch_categories')
        return [category for category in self.categories if category.kind == kind]

    def insert_transaction_batch(self, organization, actor, records, batch_id=None):
        self.calls.append('insert_transaction_batch')
        if self.fail_with:
            raise CommitException(self.fail_with)
        start = len(self.inserted) + 1
        self.inserted.extend(records)
        return list(range(start, start + len(records)))


def sample_gateway(**kwargs) -> InMemoryGateway:
    """Gateway with two members, two budgets and one category per kind."""
    defaults = {
        'budgets': [
            BudgetSnapshot(1, 'Youth Ministry', Decimal('1000.00'), Decimal('500.00'),
                           date(2025, 1, 1), date(2025, 12, 31)),
            BudgetSnapshot(2, 'Missions', Decimal('2000.00'), Decimal('0.00'),
                           date(2025, 1, 1), date(2025, 12, 31)),
        ],
        'members': [
            MemberSnapshot(10, 'Alice Moore', '101'),
            MemberSnapshot(11, 'Bob Reyes', '102'),
        ],
        'categories': [
            CategorySnapshot(100, 'tithe', 'Tithe', TransactionKind.INCOME),
            CategorySnapshot(200, 'ministry_expense', 'Ministry', TransactionKind.EXPENSE),
        ],
    }
    defaults.update(kwargs)
    return InMemoryGateway(**defaults)
