"""
-------------------------------------------------------------------------
System: ChMS-Finance (Church Management System - Finance Core)
Client: Church Administration SaaS Dashboard
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Ledger models. Category is reference data scoped by kind;
             FinancialTransaction is an immutable ledger row written by
             bulk commits.
-------------------------------------------------------------------------
"""
from decimal import Decimal
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q
from django.utils.translation import gettext_lazy as _

from apps.core.mixins import AuditLogMixin, TenantAwareMixin, TimeStampedMixin


class TransactionKind(models.TextChoices):
    """
    Direction of a ledger row. Drives which counterparty and category
    catalog apply.
    """
    INCOME = 'income', _('Income')
    EXPENSE = 'expense', _('Expense')


class Category(TenantAwareMixin, TimeStampedMixin):
    """
    Classification for ledger rows, scoped to one kind.

    Income and expense categories are disjoint sets even when they share a
    code (e.g., "other").

    Attributes:
        kind: income or expense.
        code: Stable slug used in import files (e.g., "tithe").
        name: Display name.
    """

    kind = models.CharField(
        max_length=10,
        choices=TransactionKind.choices,
        verbose_name=_('Kind')
    )
    code = models.SlugField(
        max_length=50,
        verbose_name=_('Code'),
        help_text=_('Value used in the category column of import files.')
    )
    name = models.CharField(
        max_length=100,
        verbose_name=_('Category Name')
    )
    is_active = models.BooleanField(
        default=True,
        verbose_name=_('Is Active')
    )

    class Meta:
        verbose_name = _('Category')
        verbose_name_plural = _('Categories')
        ordering = ['kind', 'name']
        unique_together = ['organization', 'kind', 'code']

    def __str__(self) -> str:
        return f"{self.name} ({self.get_kind_display()})"


class FinancialTransaction(AuditLogMixin, TenantAwareMixin):
    """
    A committed income or expense row.

    Income rows are credited to a member, expense rows are charged to a
    budget. Rows committed together share a batch_id.

    Attributes:
        batch_id: Identifier shared by all rows of one bulk commit.
        kind: income or expense.
        category: Category of the same kind.
        member: Contributing member (income only).
        budget: Budget charged (expense only).
        amount: Positive amount in the church's currency.
        date: Transaction date.
        description: Optional free text.
    """

    batch_id = models.UUIDField(
        null=True,
        blank=True,
        db_index=True,
        verbose_name=_('Batch ID')
    )
    kind = models.CharField(
        max_length=10,
        choices=TransactionKind.choices,
        verbose_name=_('Kind')
    )
    category = models.ForeignKey(
        Category,
        on_delete=models.PROTECT,
        related_name='transactions',
        verbose_name=_('Category')
    )
    member = models.ForeignKey(
        'membership.Member',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='contributions',
        verbose_name=_('Member')
    )
    budget = models.ForeignKey(
        'budgeting.Budget',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='transactions',
        verbose_name=_('Budget')
    )
    amount = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))],
        verbose_name=_('Amount')
    )
    date = models.DateField(
        verbose_name=_('Date')
    )
    description = models.TextField(
        blank=True,
        verbose_name=_('Description')
    )

    class Meta:
        verbose_name = _('Financial Transaction')
        verbose_name_plural = _('Financial Transactions')
        ordering = ['-date', '-id']
        indexes = [
            models.Index(fields=['organization', 'kind', 'date'], name='fin_txn_org_kind_date_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gt=0),
                name='fin_txn_amount_positive'
            ),
            models.CheckConstraint(
                condition=(
                    Q(kind='income', member__isnull=False, budget__isnull=True)
                    | Q(kind='expense', budget__isnull=False, member__isnull=True)
                ),
                name='fin_txn_counterparty_matches_kind'
            ),
        ]

    def __str__(self) -> str:
        return f"{self.get_kind_display()} {self.amount} on {self.date}"
