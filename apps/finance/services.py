"""
-------------------------------------------------------------------------
System: ChMS-Finance (Church Management System - Finance Core)
Client: Church Administration SaaS Dashboard
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Ledger aggregates for dashboards (period totals) and the
             cache invalidation run after every committed batch.
-------------------------------------------------------------------------
"""
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Dict

from django.conf import settings
from django.core.cache import cache
from django.db.models import Sum

from apps.budgeting.services import invalidate_budget_usage
from apps.core.formatting import round_money
from apps.finance.models import FinancialTransaction, TransactionKind


@dataclass(frozen=True)
class PeriodTotals:
    """Income, expense and net for a date range."""
    start: date
    end: date
    income: Decimal
    expense: Decimal

    @property
    def net(self) -> Decimal:
        return round_money(self.income - self.expense)

    def to_dict(self) -> Dict[str, str]:
        return {
            'start': self.start.isoformat(),
            'end': self.end.isoformat(),
            'income': str(self.income),
            'expense': str(self.expense),
            'net': str(self.net),
        }


def _ledger_version_key(organization) -> str:
    return f'ledger_version_{organization.pk}'


def get_ledger_version(organization) -> int:
    """Current cache generation for a church's ledger aggregates."""
    return cache.get_or_set(_ledger_version_key(organization), 1, None)


def get_period_totals(organization, start: date, end: date) -> PeriodTotals:
    """
    Sum committed income and expense between two dates (inclusive).

    Results are cached under the church's current ledger version; bumping
    the version makes every cached period stale at once.

    Args:
        organization: The church.
        start: First day of the period.
        end: Last day of the period.

    Returns:
        PeriodTotals for the range.
    """
    version = get_ledger_version(organization)
    cache_key = f'period_totals_{organization.pk}_{version}_{start.isoformat()}_{end.isoformat()}'

    totals = cache.get(cache_key)
    if totals is not None:
        return totals

    rows = FinancialTransaction.get_tenant_filtered_queryset(organization).filter(
        date__gte=start,
        date__lte=end
    ).values('kind').annotate(total=Sum('amount'))
    by_kind = {row['kind']: row['total'] or Decimal('0.00') for row in rows}

    totals = PeriodTotals(
        start=start,
        end=end,
        income=round_money(by_kind.get(TransactionKind.INCOME, Decimal('0.00'))),
        expense=round_money(by_kind.get(TransactionKind.EXPENSE, Decimal('0.00'))),
    )
    cache.set(cache_key, totals, settings.BUDGET_USAGE_CACHE_SECONDS)
    return totals


def invalidate_ledger_aggregates(organization) -> None:
    """
    Drop every cached aggregate derived from a church's ledger.

    Called after a batch commit so budget usage and period totals are
    recomputed from the updated ledger on the next read.
    """
    invalidate_budget_usage(organization)
    key = _ledger_version_key(organization)
    try:
        cache.incr(key)
    except ValueError:
        cache.set(key, 2, None)
