"""
-------------------------------------------------------------------------
System: ChMS-Finance (Church Management System - Finance Core)
Client: Church Administration SaaS Dashboard
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Money formatting and rounding helpers shared by the
             finance apps.
-------------------------------------------------------------------------
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Union

CENT = Decimal('0.01')

Number = Union[Decimal, int, float, str, None]


def to_decimal(value: Number) -> Decimal:
    """Convert a loosely typed number to Decimal without float artefacts."""
    if value is None or value == '':
        return Decimal('0.00')
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_money(value: Number) -> Decimal:
    """Round to two decimal places, half up."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def format_currency(value: Number, symbol: str = '$') -> str:
    """
    Format an amount with the church's currency symbol.

    Usage: format_currency(Decimal('1234.5'), '$')
    Result: $1,234.50
    """
    return f"{symbol}{round_money(value):,.2f}"
