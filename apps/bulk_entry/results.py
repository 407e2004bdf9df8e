"""
-------------------------------------------------------------------------
System: ChMS-Finance (Church Management System - Finance Core)
Client: Church Administration SaaS Dashboard
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Tagged per-row results. Row checks return a RowResult
             instead of raising, and callers fold the results into a
             single row-indexed exception.
-------------------------------------------------------------------------
"""
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Tuple

from apps.core.exceptions import RowError


@dataclass(frozen=True)
class RowResult:
    """Outcome of checking one row: a value or a RowError, never both."""
    row: int
    value: Any = None
    error: Optional[RowError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, row: int, value: Any) -> 'RowResult':
        return cls(row=row, value=value)

    @classmethod
    def failure(cls, row: int, message: str, field: str = '', value: Any = '') -> 'RowResult':
        return cls(row=row, error=RowError(row=row, message=message, field=field, value=value))


def partition(results: Iterable[RowResult]) -> Tuple[List[Any], List[RowError]]:
    """
    Split results into successful values and errors, keeping row order.
    """
    values: List[Any] = []
    errors: List[RowError] = []
    for result in results:
        if result.ok:
            values.append(result.value)
        else:
            errors.append(result.error)
    return values, errors
