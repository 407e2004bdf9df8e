"""
-------------------------------------------------------------------------
System: ChMS-Finance (Church Management System - Finance Core)
Client: Church Administration SaaS Dashboard
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: JSON endpoints for the bulk entry screen: file import,
             running totals preview, batch submit, budget usage and
             period totals.
-------------------------------------------------------------------------
"""
import json
import logging
from typing import Any, Dict

from django.contrib.auth.mixins import LoginRequiredMixin
from django.http import JsonResponse
from django.utils.dateparse import parse_date
from django.views import View

from apps.budgeting.services import get_budget_usage, get_budget_usage_summary
from apps.bulk_entry.forms import BulkImportForm
from apps.bulk_entry.session import BulkEntrySession
from apps.core.exceptions import (
    BudgetExceededException, CommitException, LedgerException,
)
from apps.finance.models import TransactionKind
from apps.finance.services import get_period_totals

logger = logging.getLogger(__name__)


def error_status(exc: LedgerException) -> int:
    """HTTP status for a ledger error."""
    if isinstance(exc, BudgetExceededException):
        return 409
    if isinstance(exc, CommitException):
        return 502
    return 400


def session_payload(session: BulkEntrySession) -> Dict[str, Any]:
    return {
        'kind': str(session.kind),
        'rows': [draft.to_payload() for draft in session.drafts],
        'aggregates': session.get_aggregates().to_dict(),
    }


class TenantRequiredMixin:
    """Refuse requests from users who are not assigned to a church."""

    def dispatch(self, request, *args, **kwargs):
        if getattr(request, 'organization', None) is None:
            return JsonResponse({'error': 'No organization assigned to this user'}, status=403)
        return super().dispatch(request, *args, **kwargs)


class JsonBatchMixin:
    """Builds a session from a JSON body of the form {kind, rows: [...]}."""

    def read_payload(self, request) -> Dict[str, Any]:
        data = json.loads(request.body or b'{}')
        if not isinstance(data, dict):
            raise ValueError('Request body must be a JSON object')
        return data

    def build_session(self, request, data: Dict[str, Any]) -> BulkEntrySession:
        kind = data.get('kind', '')
        if kind not in TransactionKind.values:
            raise ValueError(f"Unknown kind: {kind or '(empty)'}")

        rows = data.get('rows') or []
        if not isinstance(rows, list) or not all(isinstance(row, dict) for row in rows):
            raise ValueError('rows must be a list of objects')

        session = BulkEntrySession(request.organization, request.user, kind)
        session.load_payload(rows)
        return session

    def load_session(self, request) -> BulkEntrySession:
        return self.build_session(request, self.read_payload(request))


class BulkImportView(LoginRequiredMixin, TenantRequiredMixin, View):
    """
    Parse an uploaded CSV or Excel file into drafts.

    Nothing is written; the parsed rows come back for review and are
    committed through the submit endpoint.
    """

    def post(self, request):
        form = BulkImportForm(request.POST, request.FILES)
        if not form.is_valid():
            return JsonResponse({'error': 'Invalid upload', 'fields': form.errors.get_json_data()}, status=400)

        session = BulkEntrySession(request.organization, request.user, form.cleaned_data['kind'])
        try:
            session.import_file(form.cleaned_data['import_file'])
        except LedgerException as e:
            return JsonResponse(e.to_dict(), status=error_status(e))

        return JsonResponse(session_payload(session))


class BulkPreviewView(LoginRequiredMixin, TenantRequiredMixin, JsonBatchMixin, View):
    """
    Normalize edited rows and return them with running totals.

    Optional keys apply a grid action before the rows come back:
    switch_kind moves the whole batch to the other kind, and add_row
    appends a 'blank' or 'carry_forward' row.
    """

    ADD_ROW_MODES = ('blank', 'carry_forward')

    def post(self, request):
        try:
            data = self.read_payload(request)
            session = self.build_session(request, data)

            switch_kind = data.get('switch_kind')
            if switch_kind:
                if switch_kind not in TransactionKind.values:
                    raise ValueError(f"Unknown kind: {switch_kind}")
                session.change_kind(switch_kind)

            add_row = data.get('add_row')
            if add_row:
                if add_row not in self.ADD_ROW_MODES:
                    raise ValueError(f"add_row must be one of: {', '.join(self.ADD_ROW_MODES)}")
                session.add_row(carry_forward=add_row == 'carry_forward')
        except (json.JSONDecodeError, ValueError) as e:
            logger.warning(f"Bulk preview rejected for {request.user}: {e}")
            return JsonResponse({'error': str(e)}, status=400)
        except LedgerException as e:
            return JsonResponse(e.to_dict(), status=error_status(e))

        return JsonResponse(session_payload(session))


class BulkSubmitView(LoginRequiredMixin, TenantRequiredMixin, JsonBatchMixin, View):
    """Resolve, validate and commit a batch of rows."""

    def post(self, request):
        try:
            session = self.load_session(request)
            result = session.submit()
        except (json.JSONDecodeError, ValueError) as e:
            logger.warning(f"Bulk submit rejected for {request.user}: {e}")
            return JsonResponse({'error': str(e)}, status=400)
        except LedgerException as e:
            return JsonResponse(e.to_dict(), status=error_status(e))

        return JsonResponse(result.to_dict(), status=201)


class BudgetUsageListView(LoginRequiredMixin, TenantRequiredMixin, View):
    """Usage figures for every budget of the church."""

    def get(self, request):
        usage = get_budget_usage_summary(request.organization)
        return JsonResponse({
            'currency': request.organization.currency_code,
            'budgets': [item.to_dict() for item in usage],
        })


class BudgetUsageDetailView(LoginRequiredMixin, TenantRequiredMixin, View):
    """Usage figures for one budget."""

    def get(self, request, pk):
        usage = get_budget_usage(request.organization, pk)
        if usage is None:
            return JsonResponse({'error': 'Budget not found'}, status=404)
        return JsonResponse(usage.to_dict())


class PeriodTotalsView(LoginRequiredMixin, TenantRequiredMixin, View):
    """Committed income, expense and net between ?start= and ?end= (inclusive)."""

    def get(self, request):
        try:
            start = parse_date(request.GET.get('start', ''))
            end = parse_date(request.GET.get('end', ''))
        except ValueError:
            start = end = None

        if start is None or end is None:
            return JsonResponse({'error': 'start and end must be dates in YYYY-MM-DD format'}, status=400)
        if start > end:
            return JsonResponse({'error': 'start must not be after end'}, status=400)

        totals = get_period_totals(request.organization, start, end)
        return JsonResponse({
            'currency': request.organization.currency_code,
            **totals.to_dict(),
        })
