# salon/services/discount_resolver.py
"""
Discount resolution for service prices.

Rule: discounts do NOT stack. The single discount with the largest
savings for the service's price wins; on a tie the first one is kept.

- percentage: price * value / 100
- flat:       min(value, price)   (value in cents)
"""

from datetime import date
from typing import Optional, Sequence

from ..models.generated import Discounts as DBDiscount

PERCENTAGE = "percentage"
FLAT = "flat"


def is_discount_active(discount: DBDiscount, today: date) -> bool:
    """Active flag plus the optional [start_date, end_date] window."""
    if not discount.is_active:
        return False
    today_str = today.isoformat()
    if discount.start_date and discount.start_date[:10] > today_str:
        return False
    if discount.end_date and discount.end_date[:10] < today_str:
        return False
    return True


def calculate_savings(discount: DBDiscount, price_cents: int) -> float:
    if discount.discount_type == PERCENTAGE:
        return (price_cents * discount.discount_value) / 100
    return min(discount.discount_value, price_cents)


def calculate_discounted_price(price_cents: int, discount: DBDiscount) -> int:
    savings = calculate_savings(discount, price_cents)
    return max(0, round(price_cents - savings))


def find_best_discount(
    discounts: Sequence[DBDiscount],
    price_cents: int,
) -> Optional[DBDiscount]:
    """
    Pick the discount saving the most on price_cents.

    Returns:
        The winning discount, or None if the list is empty.
    """
    best = None
    best_savings = 0.0

    for discount in discounts:
        savings = calculate_savings(discount, price_cents)
        if best is None or savings > best_savings:
            best = discount
            best_savings = savings

    return best
