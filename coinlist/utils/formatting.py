from __future__ import annotations


def format_usd(amount: float) -> str:
    """
    Currency rendering used by list rows and the detail view.
      20000.0  -> "$20,000.00"
      -1.5     -> "-$1.50"
      0.000012 -> "$0.000012"
    Sub-cent prices keep their significant digits instead of rounding to $0.00.
    """
    sign = "-" if amount < 0 else ""
    value = abs(amount)

    if 0 < value < 0.01:
        digits = f"{value:.8f}".rstrip("0")
        return f"{sign}${digits}"

    return f"{sign}${value:,.2f}"
