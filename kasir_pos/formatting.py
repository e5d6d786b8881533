# ==============================================================================
# CURRENCY FORMATTING
# ==============================================================================
# Presentation helper only. The ledgers work with plain int/Decimal amounts.
# Output follows the Indonesian convention: "Rp 3.500", no decimals.
# ==============================================================================

from decimal import Decimal, ROUND_HALF_UP
from typing import Union

from kasir_pos.config import CURRENCY_SYMBOL


def format_currency(amount: Union[int, float, Decimal, None]) -> str:
    """
    Formats an amount as whole Rupiah.

    Args:
        amount: Amount in whole currency units (None is treated as 0)

    Returns:
        Text like "Rp 12.500" or "-Rp 500"
    """
    value = Decimal(str(amount or 0)).quantize(Decimal('1'), rounding=ROUND_HALF_UP)
    sign = '-' if value < 0 else ''
    digits = f"{abs(int(value)):,}".replace(',', '.')
    return f"{sign}{CURRENCY_SYMBOL} {digits}"
