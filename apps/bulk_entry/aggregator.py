"""
-------------------------------------------------------------------------
System: ChMS-Finance (Church Management System - Finance Core)
Client: Church Administration SaaS Dashboard
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Running totals shown beside the entry grid. Pure functions
             of the draft list, recomputed after every edit.
-------------------------------------------------------------------------
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable

from apps.bulk_entry.drafts import TransactionDraft
from apps.core.formatting import round_money

ZERO = Decimal('0.00')


@dataclass(frozen=True)
class DraftAggregates:
    overall_total: Decimal = ZERO
    by_category: Dict[str, Decimal] = field(default_factory=dict)
    by_counterparty: Dict[str, Decimal] = field(default_factory=dict)

    def to_dict(self) -> Dict:
        return {
            'overall_total': str(self.overall_total),
            'by_category': {key: str(value) for key, value in self.by_category.items()},
            'by_counterparty': {key: str(value) for key, value in self.by_counterparty.items()},
        }


def accumulate(totals: Dict[str, Decimal], key: str, amount: Decimal) -> None:
    """Add amount under key, rounding the running total to cents."""
    totals[key] = round_money(totals.get(key, ZERO) + amount)


def compute_aggregates(drafts: Iterable[TransactionDraft]) -> DraftAggregates:
    """
    Totals over a draft list.

    The overall total counts every draft with an amount. The category and
    counterparty breakdowns only count drafts with a positive amount and
    a non-empty key; envelope-only income rows are keyed '#<envelope>'.
    """
    overall = ZERO
    by_category: Dict[str, Decimal] = {}
    by_counterparty: Dict[str, Decimal] = {}

    for draft in drafts:
        if draft.amount is None:
            continue
        overall = round_money(overall + draft.amount)

        if draft.amount <= 0:
            continue
        if draft.category_ref:
            accumulate(by_category, draft.category_ref, draft.amount)
        if draft.counterparty_key:
            accumulate(by_counterparty, draft.counterparty_key, draft.amount)

    return DraftAggregates(
        overall_total=overall,
        by_category=by_category,
        by_counterparty=by_counterparty,
    )
