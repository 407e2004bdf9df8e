"""
-------------------------------------------------------------------------
System: ChMS-Finance (Church Management System - Finance Core)
Client: Church Administration SaaS Dashboard
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Custom exceptions for the finance core. These provide
             specific error codes for import, resolution, budget and
             commit failures raised while processing bulk entries.
-------------------------------------------------------------------------
"""
from dataclasses import dataclass, asdict
from typing import Any, List, Optional, Sequence


@dataclass(frozen=True)
class RowError:
    """
    A single row-indexed failure.

    Attributes:
        row: 1-based row number the operator can locate in the source.
        message: Human readable description of the failure.
        field: Name of the offending field, if any.
        value: The offending value as entered.
    """
    row: int
    message: str
    field: str = ''
    value: Any = ''

    def to_dict(self) -> dict:
        data = asdict(self)
        data['value'] = '' if self.value is None else str(self.value)
        return data


class LedgerException(Exception):
    """Base exception for all finance core errors."""

    error_code: str = "ERR_LEDGER_GENERIC"
    default_message: str = "An error occurred while processing financial entries."

    def __init__(self, message: Optional[str] = None, details: Optional[dict] = None) -> None:
        """
        Initialize ledger exception.

        Args:
            message: Custom error message. If None, uses default_message.
            details: Additional context dictionary for the operator.
        """
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Convert exception to dictionary for API responses."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }


class RowIndexedException(LedgerException):
    """
    Base for failures that point at one or more rows of a batch.

    The individual failures are kept in ``row_errors`` and their
    messages are joined to build the exception message, so a batch
    with several bad rows is reported in one go.
    """

    def __init__(self, row_errors: Sequence[RowError], message: Optional[str] = None,
                 details: Optional[dict] = None) -> None:
        self.row_errors: List[RowError] = list(row_errors)
        if message is None and self.row_errors:
            message = '; '.join(error.message for error in self.row_errors)
        merged = {'errors': [error.to_dict() for error in self.row_errors]}
        merged.update(details or {})
        super().__init__(message, merged)

    @property
    def rows(self) -> List[int]:
        """Row numbers involved, in reporting order."""
        return [error.row for error in self.row_errors]


# Import-related Exceptions
class StructuralImportException(LedgerException):
    """Raised when an import payload is malformed before any row is read."""

    error_code = "ERR_IMPORT_STRUCTURE"
    default_message = "The import file is not in the expected format."

    def __init__(self, message: Optional[str] = None,
                 missing_columns: Optional[Sequence[str]] = None) -> None:
        self.missing_columns = list(missing_columns or [])
        details = {'missing_columns': self.missing_columns} if self.missing_columns else {}
        super().__init__(message, details)


class RowFormatException(RowIndexedException):
    """Raised when a row's date, amount or lookup code cannot be normalized."""

    error_code = "ERR_ROW_FORMAT"
    default_message = "A row contains a value in an unexpected format."


# Resolution and Budget Exceptions
class ResolutionException(RowIndexedException):
    """Raised when a counterparty or category cannot be resolved to exactly one entity."""

    error_code = "ERR_RESOLUTION"
    default_message = "One or more rows reference an unknown member, budget or category."


class BudgetExceededException(RowIndexedException):
    """Raised when proposed spend in a batch exceeds a budget's remaining capacity."""

    error_code = "ERR_BUDGET_EXCEEDED"
    default_message = "The requested amount exceeds the remaining budget."


# Submit and Commit Exceptions
class EmptyBatchException(LedgerException):
    """Raised when a submit contains no filled-in rows."""

    error_code = "ERR_EMPTY_BATCH"
    default_message = "Please fill in all required fields for at least one entry"


class CommitException(LedgerException):
    """Raised when the atomic batch insert is rejected by the store."""

    error_code = "ERR_COMMIT_FAILED"
    default_message = "The batch could not be saved. No entries were recorded."
