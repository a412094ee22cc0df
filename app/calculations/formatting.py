"""
Display formatting for monetary values.
"""

DEFAULT_CURRENCY_SYMBOL = "£"


def format_currency(value: float, currency: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    """
    Format an amount with a currency symbol, thousands separators and two decimals.

    The sign is not shown: -99.99 formats as "£99.99".
    """
    return f"{currency}{abs(value):,.2f}"


def format_percentage(value: float) -> str:
    """Format a percentage to two decimal places (e.g., "17.59%")."""
    return f"{value:.2f}%"
