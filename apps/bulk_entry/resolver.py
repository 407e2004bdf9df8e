"""
-------------------------------------------------------------------------
System: ChMS-Finance (Church Management System - Finance Core)
Client: Church Administration SaaS Dashboard
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Entity resolver. Maps each draft's counterparty and
             category references to concrete ids using one snapshot of
             reference data taken at submit time.
-------------------------------------------------------------------------
"""
from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Tuple

from apps.bulk_entry.drafts import TransactionDraft
from apps.bulk_entry.results import RowResult, partition
from apps.core.exceptions import ResolutionException
from apps.finance.gateway import (
    BudgetSnapshot, CategorySnapshot, LedgerGateway, MemberSnapshot, TransactionRecord,
)
from apps.finance.models import TransactionKind


@dataclass(frozen=True)
class LedgerSnapshot:
    """
    Reference data read once before resolution and validation.

    Only the data a kind needs is fetched: budgets for expense batches,
    members for income batches.
    """
    kind: str
    taken_on: date
    budgets: Tuple[BudgetSnapshot, ...] = ()
    members: Tuple[MemberSnapshot, ...] = ()
    categories: Tuple[CategorySnapshot, ...] = ()

    @classmethod
    def fetch(cls, gateway: LedgerGateway, organization, kind: str, on_date: date) -> 'LedgerSnapshot':
        kind = TransactionKind(kind)
        budgets: Sequence[BudgetSnapshot] = ()
        members: Sequence[MemberSnapshot] = ()
        if kind == TransactionKind.EXPENSE:
            budgets = gateway.fetch_active_budgets(organization, on_date)
        else:
            members = gateway.fetch_members(organization)

        return cls(
            kind=kind,
            taken_on=on_date,
            budgets=tuple(budgets),
            members=tuple(members),
            categories=tuple(gateway.fetch_categories(organization, kind)),
        )


@dataclass(frozen=True)
class ResolvedDraft:
    """A draft whose references have been resolved to ids."""
    row: int
    draft: TransactionDraft
    counterparty_id: Any
    category_id: Any

    def to_record(self) -> TransactionRecord:
        return TransactionRecord(
            kind=self.draft.kind,
            counterparty_id=self.counterparty_id,
            category_id=self.category_id,
            amount=self.draft.amount,
            date=self.draft.date,
            description=self.draft.description,
        )


class EntityResolver:
    """
    Resolves drafts against a LedgerSnapshot.

    Every row is resolved and every failure is collected, so an operator
    sees all bad rows of a batch at once.
    """

    def __init__(self, snapshot: LedgerSnapshot):
        self.snapshot = snapshot
        self._budgets = {str(budget.id): budget for budget in snapshot.budgets}
        self._members = {str(member.id): member for member in snapshot.members}
        self._by_envelope: Dict[str, List[MemberSnapshot]] = defaultdict(list)
        for member in snapshot.members:
            if member.envelope_number:
                self._by_envelope[member.envelope_number].append(member)
        self._categories_by_code = {category.code: category for category in snapshot.categories}
        self._categories_by_id = {str(category.id): category for category in snapshot.categories}

    def resolve(self, drafts: Sequence[TransactionDraft],
                rows: Optional[Sequence[int]] = None) -> List[ResolvedDraft]:
        """
        Resolve a batch.

        Args:
            drafts: Drafts in batch order.
            rows: Row numbers to report for each draft. Defaults to the
                1-based position in drafts.

        Returns:
            ResolvedDraft per draft, same order.

        Raises:
            ResolutionException: Listing every row that failed.
        """
        rows = list(rows) if rows is not None else list(range(1, len(drafts) + 1))
        results = [self.resolve_draft(draft, row) for draft, row in zip(drafts, rows)]
        resolved, errors = partition(results)
        if errors:
            raise ResolutionException(errors)
        return resolved

    def resolve_draft(self, draft: TransactionDraft, row: int) -> RowResult:
        counterparty = self._resolve_counterparty(draft, row)
        if not counterparty.ok:
            return counterparty

        category = self._resolve_category(draft, row)
        if not category.ok:
            return category

        return RowResult.success(row, ResolvedDraft(
            row=row,
            draft=draft,
            counterparty_id=counterparty.value,
            category_id=category.value.id,
        ))

    def _resolve_category(self, draft: TransactionDraft, row: int) -> RowResult:
        """Look a category up by code, then by id."""
        ref = str(draft.category_ref).strip()
        by_code = self._categories_by_code.get(ref)
        by_id = self._categories_by_id.get(ref)

        if by_code is not None and by_id is not None and by_code.id != by_id.id:
            return RowResult.failure(
                row,
                f"Ambiguous {draft.kind} category {draft.category_ref}: matches the code of "
                f"{by_code.name} and the id of {by_id.name} (row {row})",
                field='category_ref',
                value=draft.category_ref
            )

        category = by_code or by_id
        if category is None:
            return RowResult.failure(
                row,
                f"Unknown {draft.kind} category {draft.category_ref} (row {row})",
                field='category_ref',
                value=draft.category_ref
            )
        return RowResult.success(row, category)

    def _resolve_counterparty(self, draft: TransactionDraft, row: int) -> RowResult:
        if draft.kind == TransactionKind.EXPENSE:
            budget = self._budgets.get(str(draft.counterparty_ref))
            if budget is None:
                return RowResult.failure(
                    row,
                    f"Budget not found or not active: {draft.counterparty_ref} (row {row})",
                    field='counterparty_ref',
                    value=draft.counterparty_ref
                )
            return RowResult.success(row, budget.id)

        if draft.counterparty_ref:
            member = self._members.get(str(draft.counterparty_ref))
            if member is None:
                return RowResult.failure(
                    row,
                    f"No member found with id {draft.counterparty_ref} (row {row})",
                    field='counterparty_ref',
                    value=draft.counterparty_ref
                )
            return RowResult.success(row, member.id)

        if draft.secondary_lookup:
            matches = self._by_envelope.get(draft.secondary_lookup, [])
            if not matches:
                return RowResult.failure(
                    row,
                    f"No member found with envelope number {draft.secondary_lookup} (row {row})",
                    field='secondary_lookup',
                    value=draft.secondary_lookup
                )
            if len(matches) > 1:
                return RowResult.failure(
                    row,
                    f"Multiple members found with envelope number {draft.secondary_lookup} (row {row})",
                    field='secondary_lookup',
                    value=draft.secondary_lookup
                )
            return RowResult.success(row, matches[0].id)

        return RowResult.failure(
            row,
            f"Either member or envelope number must be provided (row {row})",
            field='counterparty_ref'
        )
