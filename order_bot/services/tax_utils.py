"""
Tax and total calculation utilities.

Money is rounded to cents once, at the order level. Item totals are summed
unrounded and tax is taken on that unrounded sum. Subtotal, tax and delivery
fee are then each rounded to two decimals, and the total is their sum, so
total == subtotal + tax + delivery_fee on the receipt.
"""

from dataclasses import dataclass
from typing import Iterable


def round_money(amount: float) -> float:
    """Round to 2 decimal places for currency."""
    return round(amount, 2)


@dataclass(frozen=True)
class OrderTotals:
    subtotal: float
    tax: float
    delivery_fee: float
    total: float


def calculate_order_total(
    item_totals: Iterable[float],
    tax_rate: float,
    delivery_fee: float = 0.0,
    is_delivery: bool = False,
) -> OrderTotals:
    """
    Calculate order totals from line item totals.

    Args:
        item_totals: Unrounded per-item totals
        tax_rate: Restaurant tax rate (0.08 for 8%)
        delivery_fee: Restaurant delivery fee
        is_delivery: Whether the fee applies

    Returns:
        OrderTotals with every field rounded to cents
    """
    raw_subtotal = sum(item_totals)
    subtotal = round_money(raw_subtotal)
    tax = round_money(raw_subtotal * (tax_rate or 0.0))
    fee = round_money(delivery_fee or 0.0) if is_delivery else 0.0
    total = round_money(subtotal + tax + fee)
    return OrderTotals(subtotal=subtotal, tax=tax, delivery_fee=fee, total=total)
