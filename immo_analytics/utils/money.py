"""
Currency and percentage formatting in German locale style.

Separators are swapped by hand; the process locale is never touched.

    >>> format_eur(1234567.891)
    '1.234.567,89 €'
    >>> format_percent(12.5)
    '12,50 %'
"""

from __future__ import annotations


def _swap_separators(text: str) -> str:
    return text.replace(",", "_").replace(".", ",").replace("_", ".")


def format_eur(amount: float, decimals: int = 2) -> str:
    """Format ``amount`` as EUR with ``.`` thousands and ``,`` decimal separators."""
    return f"{_swap_separators(f'{amount:,.{decimals}f}')} €"


def format_percent(value: float, decimals: int = 2) -> str:
    """Format a percentage value (``12.5`` -> ``"12,50 %"``)."""
    return f"{_swap_separators(f'{value:.{decimals}f}')} %"
