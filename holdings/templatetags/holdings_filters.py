from decimal import Decimal, InvalidOperation
from typing import Any

from django import template

register = template.Library()


def _accounting(formatted: str, negative: bool) -> str:
    return f"({formatted})" if negative else formatted


@register.filter
def money(value: Any, symbol: str = "$") -> str:
    """
    Format an amount with its currency symbol, negatives in parentheses.

    Examples:
        {{ 1234.5|money }}         -> $1,234.50
        {{ -1234.5|money:"S$" }}   -> (S$1,234.50)
    """
    try:
        val = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return str(value)
    return _accounting(f"{symbol}{abs(val):,.2f}", val < 0)


@register.filter
def percent(value: Any, decimals: int = 2) -> str:
    """
    Format a value that is already a percentage.

    Examples:
        {{ 12.5|percent }}    -> 12.50%
        {{ -0.4|percent:1 }}  -> (0.4%)
    """
    try:
        val = float(value)
    except (ValueError, TypeError):
        return str(value)
    return _accounting(f"{abs(val):.{decimals}f}%", val < 0)


@register.filter
def rate_percent(value: Any, decimals: int = 2) -> str:
    """Format a fractional rate (IRR, ROI) as a percentage: 0.125 -> 12.50%."""
    try:
        val = float(value) * 100
    except (ValueError, TypeError):
        return str(value)
    return percent(val, decimals)


@register.filter
def number(value: Any, precision: int = 0) -> str:
    """
    Format a quantity with thousands separators.

    Examples:
        {{ 1234|number }}        -> 1,234
        {{ 10.5|number:2 }}      -> 10.50
    """
    try:
        val = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return str(value)
    return _accounting(f"{abs(val):,.{int(precision)}f}", val < 0)


@register.filter
def percentage_of(value: Any, total: Any) -> Decimal:
    """
    Share of ``total`` that ``value`` represents, as a percentage.
    Usage: {{ value|percentage_of:total }}
    """
    try:
        val_d = Decimal(str(value))
        tot_d = Decimal(str(total))
    except (ValueError, TypeError, InvalidOperation):
        return Decimal("0")
    if tot_d == 0:
        return Decimal("0")
    return val_d / tot_d * Decimal("100")
