"""Currency rounding and display helpers"""

import math

CURRENCY_SYMBOL = "R"


def round_currency(amount: float) -> float:
    """Round to the minor currency unit (cents)"""
    return round(amount, 2)


def format_currency(amount: float) -> str:
    """R-prefixed amount with thousands separators, e.g. R1,234,567.89"""
    if not math.isfinite(amount):
        return "n/a"
    sign = "-" if amount < 0 else ""
    return f"{sign}{CURRENCY_SYMBOL}{abs(amount):,.2f}"


def format_percent(value: float, digits: int = 1) -> str:
    if not math.isfinite(value):
        return "n/a"
    return f"{value:.{digits}f}%"


def format_months(months: int) -> str:
    """Express a month count as 'X years, Y months'"""
    years, remainder = divmod(max(months, 0), 12)
    return f"{years} years, {remainder} months"
