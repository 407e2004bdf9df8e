"""
-------------------------------------------------------------------------
System: ChMS-Finance (Church Management System - Finance Core)
Client: Church Administration SaaS Dashboard
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: TransactionDraft, the in-memory row an operator edits
             before a batch is committed.
-------------------------------------------------------------------------
"""
import datetime
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional

from apps.bulk_entry.normalizers import normalize_amount, normalize_date, normalize_lookup_code
from apps.bulk_entry.results import RowResult
from apps.finance.models import TransactionKind


# Category preselected on a new manual row
DEFAULT_CATEGORY = {
    TransactionKind.INCOME: 'tithe',
    TransactionKind.EXPENSE: 'ministry_expense',
}

EDITABLE_FIELDS = (
    'amount', 'category_ref', 'counterparty_ref', 'date', 'description', 'secondary_lookup',
)


@dataclass(frozen=True)
class TransactionDraft:
    """
    One row of a batch being prepared.

    Attributes:
        kind: income or expense.
        amount: Non-negative amount, None while not yet entered.
        category_ref: Category code or id within the kind's catalog.
        counterparty_ref: Member id (income) or budget id (expense).
        date: Transaction date.
        description: Optional free text.
        secondary_lookup: Envelope number, used for income rows when
            counterparty_ref is empty.
    """
    kind: str
    amount: Optional[Decimal] = None
    category_ref: str = ''
    counterparty_ref: str = ''
    date: Optional[datetime.date] = None
    description: str = ''
    secondary_lookup: str = ''

    @classmethod
    def blank(cls, kind: str, today: datetime.date) -> 'TransactionDraft':
        """A fresh manual row: no amount, today's date, default category."""
        kind = TransactionKind(kind)
        return cls(kind=kind, category_ref=DEFAULT_CATEGORY[kind], date=today)

    def is_blank(self) -> bool:
        """True for a row the operator never filled in."""
        return (
            not self.amount
            and not self.counterparty_ref
            and not self.secondary_lookup
            and not self.description
        )

    @property
    def counterparty_key(self) -> str:
        """Counterparty label for running totals: the id, else '#<envelope>'."""
        if self.counterparty_ref:
            return self.counterparty_ref
        if self.secondary_lookup:
            return f"#{self.secondary_lookup}"
        return ''

    def with_changes(self, **changes: Any) -> 'TransactionDraft':
        return replace(self, **changes)

    def to_payload(self) -> Dict[str, Any]:
        return {
            'kind': str(self.kind),
            'amount': None if self.amount is None else str(self.amount),
            'category_ref': self.category_ref,
            'counterparty_ref': self.counterparty_ref,
            'date': self.date.isoformat() if self.date else None,
            'description': self.description,
            'secondary_lookup': self.secondary_lookup,
        }


def normalize_field(field: str, value: Any, row: int) -> RowResult:
    """
    Coerce one edited value to the type a draft stores.

    Raises:
        ValueError: If field is not an editable draft field.
    """
    if field not in EDITABLE_FIELDS:
        raise ValueError(f"'{field}' is not an editable draft field")

    if field == 'amount':
        return normalize_amount(value, row, required=False)
    if field == 'date':
        if value in (None, ''):
            return RowResult.success(row, None)
        return normalize_date(value, row)
    if field == 'secondary_lookup':
        return normalize_lookup_code(value, row)
    return RowResult.success(row, str(value or '').strip())


def draft_from_payload(data: Mapping[str, Any], kind: str, row: int) -> RowResult:
    """
    Build a draft from a JSON row sent by the entry screen.

    Unknown keys are ignored. The first field that fails normalization
    decides the error.
    """
    changes: Dict[str, Any] = {}
    for field in EDITABLE_FIELDS:
        if field not in data:
            continue
        result = normalize_field(field, data[field], row)
        if not result.ok:
            return result
        changes[field] = result.value
    return RowResult.success(row, TransactionDraft(kind=TransactionKind(kind), **changes))
