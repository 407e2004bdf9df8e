"""
-------------------------------------------------------------------------
System: ChMS-Finance (Church Management System - Finance Core)
Client: Church Administration SaaS Dashboard
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Business logic services for the budgeting module. Budget
             usage for list/detail views and the batch capacity check
             applied to expense entries before commit.
-------------------------------------------------------------------------
"""
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from django.conf import settings
from django.core.cache import cache
from django.utils import timezone

from apps.budgeting.models import BudgetWindowStatus
from apps.core.exceptions import BudgetExceededException, ResolutionException, RowError
from apps.core.formatting import format_currency, round_money
from apps.finance.gateway import BudgetSnapshot, DjangoLedgerGateway


# Usage level thresholds (percentage of allocation used)
WARNING_THRESHOLD = Decimal('70')
CRITICAL_THRESHOLD = Decimal('90')


class UsageLevel:
    NORMAL = 'normal'
    WARNING = 'warning'
    CRITICAL = 'critical'


@dataclass(frozen=True)
class BudgetUsage:
    """Budget usage figures shown on budget list and detail screens."""
    budget_id: Any
    name: str
    allocation: Decimal
    used_amount: Decimal
    remaining: Decimal
    percentage: Decimal
    status: str
    level: str
    start_date: date
    end_date: date

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.budget_id,
            'name': self.name,
            'allocation': str(self.allocation),
            'used_amount': str(self.used_amount),
            'remaining': str(self.remaining),
            'percentage': str(self.percentage),
            'status': self.status,
            'level': self.level,
            'start_date': self.start_date.isoformat(),
            'end_date': self.end_date.isoformat(),
        }


@dataclass(frozen=True)
class ProposedCharge:
    """One expense row's claim on a budget."""
    row: int
    budget_id: Any
    amount: Decimal


def usage_level(percentage: Decimal) -> str:
    if percentage > CRITICAL_THRESHOLD:
        return UsageLevel.CRITICAL
    if percentage > WARNING_THRESHOLD:
        return UsageLevel.WARNING
    return UsageLevel.NORMAL


def compute_budget_usage(snapshot: BudgetSnapshot, today: date) -> BudgetUsage:
    """
    Derive usage figures for one budget.

    Args:
        snapshot: Budget state including the used amount.
        today: Day used to classify the budget window.

    Returns:
        BudgetUsage with percentage rounded to one decimal place.
    """
    if snapshot.allocation > Decimal('0.00'):
        percentage = (snapshot.used_amount / snapshot.allocation * 100).quantize(Decimal('0.1'))
    else:
        percentage = Decimal('0.0')

    status = BudgetWindowStatus.for_window(snapshot.start_date, snapshot.end_date, today)

    return BudgetUsage(
        budget_id=snapshot.id,
        name=snapshot.name,
        allocation=snapshot.allocation,
        used_amount=snapshot.used_amount,
        remaining=snapshot.remaining,
        percentage=percentage,
        status=str(status),
        level=usage_level(percentage),
        start_date=snapshot.start_date,
        end_date=snapshot.end_date,
    )


def budget_usage_cache_key(organization) -> str:
    return f'budget_usage_{organization.pk}'


def get_budget_usage_summary(organization, today: Optional[date] = None) -> List[BudgetUsage]:
    """
    Usage for every budget of a church, cached per church.

    The cache is dropped by invalidate_budget_usage whenever a batch is
    committed, so the figures never lag behind the ledger for longer than
    a failed invalidation would allow.

    Args:
        organization: The church.
        today: Day used for window status (defaults to local today).

    Returns:
        List of BudgetUsage ordered by budget name.
    """
    today = today or timezone.localdate()
    cache_key = budget_usage_cache_key(organization)

    snapshots = cache.get(cache_key)
    if snapshots is None:
        snapshots = DjangoLedgerGateway().fetch_budgets(organization)
        cache.set(cache_key, snapshots, settings.BUDGET_USAGE_CACHE_SECONDS)

    return [compute_budget_usage(snapshot, today) for snapshot in snapshots]


def get_budget_usage(organization, budget_id: Any, today: Optional[date] = None) -> Optional[BudgetUsage]:
    """Usage for a single budget, or None if the church has no such budget."""
    for usage in get_budget_usage_summary(organization, today):
        if str(usage.budget_id) == str(budget_id):
            return usage
    return None


def invalidate_budget_usage(organization) -> None:
    cache.delete(budget_usage_cache_key(organization))


def validate_batch_capacity(
    charges: Iterable[ProposedCharge],
    budgets: Iterable[BudgetSnapshot],
    currency_symbol: str = '$'
) -> Dict[Any, Decimal]:
    """
    Check that a batch of expense rows fits in the remaining budgets.

    Spend is accumulated per budget in row order and the running total is
    compared against the remaining capacity of the single snapshot passed
    in. Two rows of 400 against 500 remaining therefore fail on the
    second row even though each fits on its own.

    Args:
        charges: Expense rows in batch order.
        budgets: Snapshot of budget state taken once before validation.
        currency_symbol: Symbol used to render amounts in messages.

    Returns:
        Proposed spend per budget id.

    Raises:
        ResolutionException: If a charge names a budget not in the snapshot.
        BudgetExceededException: If any budget's running total exceeds its
            remaining capacity. Every violation in the batch is reported.
    """
    by_id = {str(budget.id): budget for budget in budgets}
    proposed: Dict[Any, Decimal] = {}
    missing: List[RowError] = []
    violations: List[RowError] = []
    exceeded: Dict[str, Dict[str, str]] = {}

    for charge in charges:
        budget = by_id.get(str(charge.budget_id))
        if budget is None:
            missing.append(RowError(
                row=charge.row,
                message=f"Budget not found (row {charge.row})",
                field='budget_id',
                value=charge.budget_id
            ))
            continue

        already = proposed.get(budget.id, Decimal('0.00'))
        available = max(round_money(budget.remaining - already), Decimal('0.00'))
        running_total = round_money(already + charge.amount)
        proposed[budget.id] = running_total

        if running_total > budget.remaining:
            violations.append(RowError(
                row=charge.row,
                message=(
                    f"Row {charge.row} amount ({format_currency(charge.amount, currency_symbol)}) "
                    f"exceeds remaining budget for {budget.name} "
                    f"({format_currency(available, currency_symbol)})"
                ),
                field='amount',
                value=charge.amount
            ))
            exceeded[str(budget.id)] = {
                'name': budget.name,
                'remaining': str(budget.remaining),
                'proposed': str(running_total),
            }

    if missing:
        raise ResolutionException(missing)
    if violations:
        raise BudgetExceededException(violations, details={'budgets': exceeded})

    return proposed
