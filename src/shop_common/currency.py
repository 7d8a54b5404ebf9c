"""Integer currency helpers.

All prices, amounts and balances are non-negative ints in "ks" (kyat).
There are no minor units: no float, no Decimal.
"""

# Upper bound of the BIGINT columns amounts are stored in
MAX_KS = 2**63 - 1


def ks_display(amount: int) -> str:
    """Convert an amount to display string: 5000 -> '5,000ks', -1200 -> '-1,200ks'."""
    if amount < 0:
        return f"-{-amount:,}ks"
    return f"{amount:,}ks"
