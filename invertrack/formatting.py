"""Display-time formatting. Calculations never round; only these helpers do."""

DEFAULT_CURRENCY_SYMBOL = "$"


def format_currency(value: float, symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    """
    Format money with thousands separators and 2 decimals.

    >>> format_currency(2230450.09)
    '$2,230,450.09'
    >>> format_currency(-5)
    '-$5.00'
    """
    rounded = round(value, 2)
    sign = "-" if rounded < 0 else ""
    return f"{sign}{symbol}{abs(rounded):,.2f}"


def format_percent(value: float) -> str:
    """Format a percentage value (11.76 -> '11.76%')."""
    return f"{value:.2f}%"
