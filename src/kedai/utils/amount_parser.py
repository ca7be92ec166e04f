"""Price parsing utilities."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
import re


def parse_price(price_str: str) -> int:
    """Parse a price string into an integer amount of the minor currency unit.

    Handles various formats:
    - "12000"
    - "Rp 12.000" / "Rp12.000" (dot thousands separators)
    - "12,000"
    - "12000.6" (rounded half up to 12001)

    Args:
        price_str: Price string

    Returns:
        Non-negative integer price

    Raises:
        ValueError: If price string cannot be parsed or is negative
    """
    if not price_str or not price_str.strip():
        raise ValueError("Empty price string")

    price_str = price_str.strip()

    # Remove currency symbols and prefixes
    price_str = re.sub(r"^(rp\.?|idr)\s*", "", price_str, flags=re.IGNORECASE)
    price_str = re.sub(r"[$€£¥]", "", price_str).strip()

    # Thousands separators: "12.000", "1.250.000", "12,000"
    if re.fullmatch(r"-?\d{1,3}([.,]\d{3})+", price_str):
        price_str = price_str.replace(".", "").replace(",", "")
    else:
        price_str = price_str.replace(",", "")

    try:
        amount = Decimal(price_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse price '{price_str}': {e}")

    if amount < 0:
        raise ValueError(f"Price cannot be negative: '{price_str}'")

    return int(amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_price(amount: int, currency: str = "Rp ") -> str:
    """Format an integer amount with dot thousands separators ("Rp 12.000")."""
    return currency + f"{amount:,}".replace(",", ".")
