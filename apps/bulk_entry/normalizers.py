"""
-------------------------------------------------------------------------
System: ChMS-Finance (Church Management System - Finance Core)
Client: Church Administration SaaS Dashboard
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Cell normalizers shared by file import and manual entry.
             Each returns a RowResult so callers decide whether to stop
             at the first bad row or collect them all.
-------------------------------------------------------------------------
"""
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from apps.bulk_entry.results import RowResult
from apps.core.formatting import CENT


# Tried in order; the first format giving a valid calendar date wins.
# %m and %d accept one or two digits, so the second entry also covers
# M/d/yyyy. A value such as 03/04/2025 always reads as US month/day.
DATE_FORMATS = (
    '%Y-%m-%d',     # 2025-02-12
    '%m/%d/%Y',     # 02/12/2025, 2/12/2025
    '%d/%m/%Y',     # 13/02/2025
    '%m-%d-%Y',     # 02-12-2025
    '%Y/%m/%d',     # 2025/02/12
)

MAX_AMOUNT = Decimal('10000000000000')

THOUSANDS_PATTERN = re.compile(r'^-?\d{1,3}(,\d{3})+(\.\d*)?$')
LOOKUP_CODE_PATTERN = re.compile(r'^\d+$')


def normalize_date(raw: Any, row: int) -> RowResult:
    """
    Parse a date cell against DATE_FORMATS.

    Args:
        raw: Cell value (string, date or datetime).
        row: Row number used in the error message.

    Returns:
        RowResult holding a date, or an "invalid date" error.
    """
    if isinstance(raw, datetime):
        return RowResult.success(row, raw.date())
    if isinstance(raw, date):
        return RowResult.success(row, raw)

    text = str(raw or '').strip()
    for fmt in DATE_FORMATS:
        try:
            return RowResult.success(row, datetime.strptime(text, fmt).date())
        except ValueError:
            continue

    return RowResult.failure(
        row, f"Invalid date format in row {row}: {text}", field='date', value=text
    )


def normalize_amount(raw: Any, row: int, required: bool = True) -> RowResult:
    """
    Parse an amount cell as a non-negative decimal with at most two places.

    Thousands separators ("1,250.00") are accepted; a comma used as a
    decimal mark ("12,50") is not.

    Args:
        raw: Cell value.
        row: Row number used in the error message.
        required: Whether an empty cell is an error (import) or None
            (a manual row still being typed).

    Returns:
        RowResult holding a Decimal (or None), or a format error.
    """
    text = str(raw if raw is not None else '').strip()
    if THOUSANDS_PATTERN.match(text):
        text = text.replace(',', '')

    if not text:
        if required:
            return RowResult.failure(row, f"Invalid amount in row {row}: {text}", field='amount', value=text)
        return RowResult.success(row, None)

    try:
        amount = Decimal(text)
    except InvalidOperation:
        return RowResult.failure(row, f"Invalid amount in row {row}: {text}", field='amount', value=text)

    if not amount.is_finite():
        return RowResult.failure(row, f"Invalid amount in row {row}: {text}", field='amount', value=text)
    if amount < 0:
        return RowResult.failure(
            row, f"Amount cannot be negative in row {row}: {text}", field='amount', value=text
        )
    if amount >= MAX_AMOUNT:
        return RowResult.failure(row, f"Amount is too large in row {row}: {text}", field='amount', value=text)
    if amount != amount.quantize(CENT):
        return RowResult.failure(
            row, f"Amount has more than two decimal places in row {row}: {text}",
            field='amount', value=text
        )

    return RowResult.success(row, amount.quantize(CENT))


def normalize_lookup_code(raw: Any, row: int) -> RowResult:
    """Validate an envelope number: empty, or digits only."""
    text = str(raw or '').strip()
    if text and not LOOKUP_CODE_PATTERN.match(text):
        return RowResult.failure(
            row,
            f"Invalid envelope number format in row {row}: {text}. Must contain only digits.",
            field='envelope_number',
            value=text
        )
    return RowResult.success(row, text)
