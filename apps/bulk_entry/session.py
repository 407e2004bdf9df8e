"""
-------------------------------------------------------------------------
System: ChMS-Finance (Church Management System - Finance Core)
Client: Church Administration SaaS Dashboard
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Bulk entry session. Holds the editable draft list for one
             operator and runs submit: completeness check, entity
             resolution, budget capacity check and the atomic commit.
-------------------------------------------------------------------------
"""
import uuid
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional

from django.utils import timezone

from apps.budgeting.services import ProposedCharge, validate_batch_capacity
from apps.bulk_entry.aggregator import DraftAggregates, compute_aggregates
from apps.bulk_entry.drafts import (
    DEFAULT_CATEGORY, TransactionDraft, draft_from_payload, normalize_field,
)
from apps.bulk_entry.importer import parse_import_file, parse_import_payload
from apps.bulk_entry.resolver import EntityResolver, LedgerSnapshot
from apps.bulk_entry.results import RowResult, partition
from apps.core.exceptions import (
    CommitException, EmptyBatchException, LedgerException, RowFormatException,
)
from apps.core.formatting import round_money
from apps.finance.gateway import DjangoLedgerGateway, LedgerGateway
from apps.finance.logging import LedgerLogger
from apps.finance.models import TransactionKind
from apps.finance.services import invalidate_ledger_aggregates


@dataclass(frozen=True)
class CommitResult:
    """Outcome of a committed batch."""
    batch_id: uuid.UUID
    kind: str
    transaction_ids: List[Any]
    total: Decimal

    @property
    def row_count(self) -> int:
        return len(self.transaction_ids)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'batch_id': str(self.batch_id),
            'kind': str(self.kind),
            'row_count': self.row_count,
            'total': str(self.total),
            'transaction_ids': [str(pk) for pk in self.transaction_ids],
        }


def check_complete(draft: TransactionDraft, row: int) -> RowResult:
    """A filled-in row needs a positive amount, a category and a date."""
    if draft.amount is None or draft.amount <= 0:
        return RowResult.failure(
            row, f"Amount must be greater than zero in row {row}", field='amount', value=draft.amount
        )
    if not draft.category_ref:
        return RowResult.failure(row, f"Missing category in row {row}", field='category_ref')
    if draft.date is None:
        return RowResult.failure(row, f"Missing date in row {row}", field='date')
    return RowResult.success(row, draft)


class BulkEntrySession:
    """
    Editable batch of income or expense drafts for one church and operator.

    The draft list always holds at least one row. Aggregates are derived
    from the list on demand and never stored.
    """

    def __init__(self, organization, user, kind: str,
                 gateway: Optional[LedgerGateway] = None, today: Optional[date] = None):
        self.organization = organization
        self.user = user
        self.kind = TransactionKind(kind)
        self.gateway = gateway or DjangoLedgerGateway()
        self.today = today or timezone.localdate()
        self._drafts: List[TransactionDraft] = [self._blank()]

    def _blank(self) -> TransactionDraft:
        return TransactionDraft.blank(self.kind, self.today)

    @property
    def drafts(self) -> List[TransactionDraft]:
        return list(self._drafts)

    def get_aggregates(self) -> DraftAggregates:
        return compute_aggregates(self._drafts)

    # Editing

    def add_row(self, carry_forward: bool = False) -> int:
        """
        Append a row and return its index.

        Args:
            carry_forward: Start the new row with the category, date and
                counterparty of the last row instead of the defaults. The
                amount and description always start empty.
        """
        draft = self._blank()
        if carry_forward:
            last = self._drafts[-1]
            draft = draft.with_changes(
                category_ref=last.category_ref,
                date=last.date,
                counterparty_ref=last.counterparty_ref,
                secondary_lookup=last.secondary_lookup,
            )
        self._drafts.append(draft)
        return len(self._drafts) - 1

    def change_kind(self, kind: str) -> None:
        """
        Switch the whole batch between income and expense.

        Every row keeps its amount, date and description, takes the new
        kind's default category and drops its counterparty, since member
        and budget references do not carry across kinds.
        """
        kind = TransactionKind(kind)
        if kind == self.kind:
            return
        self.kind = kind
        self._drafts = [
            TransactionDraft(
                kind=kind,
                amount=draft.amount,
                category_ref=DEFAULT_CATEGORY[kind],
                date=draft.date or self.today,
                description=draft.description,
            )
            for draft in self._drafts
        ]

    def remove_row(self, index: int) -> None:
        """Remove a row. The last remaining row is never removed."""
        if len(self._drafts) <= 1:
            return
        del self._drafts[index]

    def update_row(self, index: int, **patch: Any) -> TransactionDraft:
        """
        Apply field edits to one row.

        Raises:
            RowFormatException: If a value cannot be normalized. The row is
                left unchanged.
            ValueError: For a field that is not editable.
            IndexError: For a row that does not exist.
        """
        draft = self._drafts[index]
        row = index + 1
        changes: Dict[str, Any] = {}
        for field, value in patch.items():
            result = normalize_field(field, value, row)
            if not result.ok:
                raise RowFormatException([result.error])
            changes[field] = result.value

        updated = draft.with_changes(**changes)
        self._drafts[index] = updated
        return updated

    def load_drafts(self, drafts: Iterable[TransactionDraft]) -> None:
        """Replace the draft list."""
        drafts = list(drafts)
        for draft in drafts:
            if draft.kind != self.kind:
                raise ValueError(f"Cannot load a {draft.kind} draft into a {self.kind} batch")
        self._drafts = drafts or [self._blank()]

    def load_payload(self, rows: Iterable[Mapping[str, Any]]) -> None:
        """
        Replace the draft list with rows sent by the entry screen.

        Raises:
            RowFormatException: Listing every row with a bad value.
        """
        results = [draft_from_payload(data, self.kind, row) for row, data in enumerate(rows, start=1)]
        drafts, errors = partition(results)
        if errors:
            raise RowFormatException(errors)
        self.load_drafts(drafts)

    def import_payload(self, text: str) -> List[TransactionDraft]:
        """Replace the draft list with the rows of a CSV text."""
        return self._import(lambda: parse_import_payload(text, self.kind), source='payload')

    def import_file(self, uploaded_file) -> List[TransactionDraft]:
        """Replace the draft list with the rows of an uploaded .csv or .xlsx file."""
        return self._import(
            lambda: parse_import_file(uploaded_file, self.kind),
            source=getattr(uploaded_file, 'name', '') or 'file'
        )

    def _import(self, parse, source: str) -> List[TransactionDraft]:
        try:
            drafts = parse()
        except LedgerException as exc:
            LedgerLogger.log_import_rejected(self.organization, self.user, self.kind, exc)
            raise

        self.load_drafts(drafts)
        LedgerLogger.log_import_parsed(self.organization, self.user, self.kind, len(drafts), source)
        return self.drafts

    def reset(self) -> None:
        """Discard all drafts, leaving a single blank row."""
        self._drafts = [self._blank()]

    # Submit

    def prepare(self, drafts: Optional[List[TransactionDraft]] = None):
        """
        Run every check short of writing.

        Args:
            drafts: Batch to check. Defaults to a copy of the current list.

        Returns:
            List of ResolvedDraft for the filled-in rows.

        Raises:
            EmptyBatchException: No filled-in rows.
            RowFormatException: Incomplete rows.
            ResolutionException: Unknown members, budgets or categories.
            BudgetExceededException: Expense rows over budget.
        """
        drafts = list(self._drafts) if drafts is None else drafts
        indexed = [(row, draft) for row, draft in enumerate(drafts, start=1) if not draft.is_blank()]
        if not indexed:
            raise EmptyBatchException()

        complete, errors = partition(check_complete(draft, row) for row, draft in indexed)
        if errors:
            raise RowFormatException(errors)

        snapshot = LedgerSnapshot.fetch(self.gateway, self.organization, self.kind, self.today)
        resolved = EntityResolver(snapshot).resolve(complete, rows=[row for row, _ in indexed])

        if self.kind == TransactionKind.EXPENSE:
            validate_batch_capacity(
                [ProposedCharge(row=item.row, budget_id=item.counterparty_id, amount=item.draft.amount)
                 for item in resolved],
                snapshot.budgets,
                currency_symbol=self.organization.currency_symbol
            )

        return resolved

    def submit(self) -> CommitResult:
        """
        Resolve, validate and commit the batch.

        The draft list is read once at invocation. On success it is reset to
        a single blank row and cached budget usage and period totals are
        invalidated. On any failure the drafts are left as they were.

        Raises:
            LedgerException: Any subclass raised by prepare, or
                CommitException when the insert is rejected.
        """
        drafts = list(self._drafts)
        row_count = sum(1 for draft in drafts if not draft.is_blank())

        try:
            resolved = self.prepare(drafts)
        except LedgerException as exc:
            LedgerLogger.log_batch_rejected(self.organization, self.user, self.kind, row_count, exc)
            raise

        batch_id = uuid.uuid4()
        records = [item.to_record() for item in resolved]
        try:
            transaction_ids = self.gateway.insert_transaction_batch(
                self.organization, self.user, records, batch_id=batch_id
            )
        except CommitException as exc:
            LedgerLogger.log_commit_failed(self.organization, self.user, self.kind, len(records), exc)
            raise

        total = Decimal('0.00')
        for record in records:
            total = round_money(total + record.amount)

        LedgerLogger.log_batch_committed(
            self.organization, self.user, self.kind, batch_id, len(records), total
        )
        invalidate_ledger_aggregates(self.organization)
        self.reset()

        return CommitResult(batch_id=batch_id, kind=self.kind, transaction_ids=list(transaction_ids), total=total)
