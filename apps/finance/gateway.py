"""
-------------------------------------------------------------------------
System: ChMS-Finance (Church Management System - Finance Core)
Client: Church Administration SaaS Dashboard
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Ledger gateway. The bulk entry engine only talks to storage
             through the four operations defined here: active budgets
             with their usage, members, categories, and one atomic
             batch insert.
-------------------------------------------------------------------------
"""
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, List, Optional, Sequence

from django.db import DatabaseError, transaction
from django.db.models import DecimalField, Q, Sum, Value
from django.db.models.functions import Coalesce

from apps.budgeting.models import Budget
from apps.core.exceptions import CommitException
from apps.core.formatting import round_money
from apps.finance.models import Category, FinancialTransaction, TransactionKind
from apps.membership.models import Member


@dataclass(frozen=True)
class BudgetSnapshot:
    """Point-in-time view of a budget and what has been spent against it."""
    id: Any
    name: str
    allocation: Decimal
    used_amount: Decimal
    start_date: date
    end_date: date

    @property
    def remaining(self) -> Decimal:
        return round_money(self.allocation - self.used_amount)

    def is_active_on(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


@dataclass(frozen=True)
class MemberSnapshot:
    """Member reference data used to resolve income counterparties."""
    id: Any
    display_name: str
    envelope_number: str = ''


@dataclass(frozen=True)
class CategorySnapshot:
    """Category reference data for one kind."""
    id: Any
    code: str
    name: str
    kind: str


@dataclass(frozen=True)
class TransactionRecord:
    """
    Payload for one ledger row, ready to be written.

    counterparty_id is a member id for income and a budget id for expense.
    """
    kind: str
    counterparty_id: Any
    category_id: Any
    amount: Decimal
    date: date
    description: str = ''

    @property
    def member_id(self) -> Optional[Any]:
        return self.counterparty_id if self.kind == TransactionKind.INCOME else None

    @property
    def budget_id(self) -> Optional[Any]:
        return self.counterparty_id if self.kind == TransactionKind.EXPENSE else None


class LedgerGateway(ABC):
    """
    Storage collaborator used by the bulk entry engine.

    Implementations must make insert_transaction_batch all-or-nothing and
    report rejection by raising CommitException.
    """

    @abstractmethod
    def fetch_active_budgets(self, organization, on_date: date) -> List[BudgetSnapshot]:
        """Budgets whose window contains on_date, with used amounts."""

    @abstractmethod
    def fetch_members(self, organization) -> List[MemberSnapshot]:
        """Active members of the church."""

    @abstractmethod
    def fetch_categories(self, organization, kind: str) -> List[CategorySnapshot]:
        """Active categories of one kind."""

    @abstractmethod
    def insert_transaction_batch(
        self,
        organization,
        actor,
        records: Sequence[TransactionRecord],
        batch_id: Optional[uuid.UUID] = None
    ) -> List[Any]:
        """Write all records atomically and return their ids."""


class DjangoLedgerGateway(LedgerGateway):
    """
    Ledger gateway backed by the Django ORM.

    Used amounts are derived on every call from committed expense rows,
    so a snapshot always reflects the ledger at the moment it was read.
    """

    def budget_queryset(self, organization):
        """
        Budgets of a church annotated with used_amount.

        Args:
            organization: The church whose budgets are requested.

        Returns:
            Queryset of Budget objects with a used_amount annotation.
        """
        return Budget.get_tenant_filtered_queryset(organization).annotate(
            used_amount=Coalesce(
                Sum('transactions__amount', filter=Q(transactions__kind=TransactionKind.EXPENSE)),
                Value(Decimal('0.00')),
                output_field=DecimalField(max_digits=15, decimal_places=2)
            )
        ).order_by('name')

    def fetch_budgets(self, organization) -> List[BudgetSnapshot]:
        """All budgets of a church regardless of window, for usage views."""
        return [self._to_snapshot(budget) for budget in self.budget_queryset(organization)]

    def fetch_active_budgets(self, organization, on_date: date) -> List[BudgetSnapshot]:
        budgets = self.budget_queryset(organization).filter(
            start_date__lte=on_date,
            end_date__gte=on_date
        )
        return [self._to_snapshot(budget) for budget in budgets]

    def fetch_members(self, organization) -> List[MemberSnapshot]:
        members = Member.get_tenant_filtered_queryset(organization).filter(is_active=True)
        return [
            MemberSnapshot(
                id=member.pk,
                display_name=member.display_name,
                envelope_number=member.envelope_number
            )
            for member in members
        ]

    def fetch_categories(self, organization, kind: str) -> List[CategorySnapshot]:
        categories = Category.get_tenant_filtered_queryset(organization).filter(
            kind=kind,
            is_active=True
        )
        return [
            CategorySnapshot(id=category.pk, code=category.code, name=category.name, kind=category.kind)
            for category in categories
        ]

    def insert_transaction_batch(
        self,
        organization,
        actor,
        records: Sequence[TransactionRecord],
        batch_id: Optional[uuid.UUID] = None
    ) -> List[Any]:
        """
        Write a batch of ledger rows in one transaction.

        Args:
            organization: The church that owns the rows.
            actor: The user committing the batch (audit stamp).
            records: Payloads to write.
            batch_id: Identifier shared by all rows; generated if omitted.

        Returns:
            Primary keys of the created rows, in record order.

        Raises:
            CommitException: If the database rejects any row. Nothing is
                written in that case.
        """
        batch_id = batch_id or uuid.uuid4()
        rows = [
            FinancialTransaction(
                organization=organization,
                batch_id=batch_id,
                kind=record.kind,
                category_id=record.category_id,
                member_id=record.member_id,
                budget_id=record.budget_id,
                amount=record.amount,
                date=record.date,
                description=record.description,
                created_by=actor,
                updated_by=actor,
            )
            for record in records
        ]

        try:
            with transaction.atomic():
                created = FinancialTransaction.objects.bulk_create(rows)
        except DatabaseError as exc:
            raise CommitException(
                str(exc),
                details={'batch_id': str(batch_id), 'row_count': len(rows)}
            ) from exc

        return [row.pk for row in created]

    @staticmethod
    def _to_snapshot(budget: Budget) -> BudgetSnapshot:
        return BudgetSnapshot(
            id=budget.pk,
            name=budget.name,
            allocation=round_money(budget.allocation),
            used_amount=round_money(budget.used_amount),
            start_date=budget.start_date,
            end_date=budget.end_date,
        )
