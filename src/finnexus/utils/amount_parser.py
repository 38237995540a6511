"""Amount parsing and formatting utilities.

Amounts are entered and displayed in the pt-BR convention ("1.234,56"), but
plain "1234.56" input is accepted as well.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
import re

# Scale of the stored columns: money in cents, commission rates with two
# decimals, tax percentages with three
MONEY_PLACES = 2
RATE_PLACES = 2
TAX_PERCENT_PLACES = 3


def round_to_places(value: Decimal, places: int = MONEY_PLACES) -> Decimal:
    """Round half-up to a fixed number of decimal places."""
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a nonnegative Decimal.

    Handles various formats:
    - "123.45"
    - "R$ 123,45"
    - "1.234,56"
    - "1,234.56"

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed or is negative
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    # Remove whitespace and currency symbols
    amount_str = re.sub(r"R\$|[$€£¥\s]", "", amount_str.strip())

    # The rightmost separator is the decimal mark
    last_comma = amount_str.rfind(",")
    last_dot = amount_str.rfind(".")
    if last_comma > last_dot:
        amount_str = amount_str.replace(".", "").replace(",", ".")
    else:
        amount_str = amount_str.replace(",", "")

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")

    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if amount < 0:
        raise ValueError(f"Amount must not be negative: {amount_str}")
    return amount


def parse_percentage(value: str) -> Decimal:
    """Parse a percentage like '12.5', '12,5' or '12.5%' into a Decimal."""
    return parse_amount(value.strip().rstrip("%"))


def format_decimal(value: Decimal, places: int = 2, thousands: bool = True) -> str:
    """Format a Decimal with a decimal comma (pt-BR)."""
    rounded = round_to_places(value, places)
    text = f"{rounded:,.{places}f}" if thousands else f"{rounded:.{places}f}"
    # Swap separators: 1,234.56 -> 1.234,56
    return text.replace(",", "_").replace(".", ",").replace("_", ".")


def format_currency(value: Decimal) -> str:
    """Format a Decimal as BRL currency, e.g. 'R$ 1.234,56'."""
    if value < 0:
        return f"-R$ {format_decimal(-value)}"
    return f"R$ {format_decimal(value)}"


def format_percent(rate: Decimal) -> str:
    """Format a fractional rate as a percentage, e.g. 0.125 -> '12,5%'."""
    return f"{format_decimal(rate * 100, places=1, thousands=False)}%"
