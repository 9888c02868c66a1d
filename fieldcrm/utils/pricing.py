"""Line-item arithmetic for quotes and sales orders."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, NamedTuple

CENT = Decimal("0.01")
ZERO = Decimal("0")


def money(value) -> Decimal:
    """Round to two places, half up."""
    return Decimal(value if value is not None else 0).quantize(CENT, rounding=ROUND_HALF_UP)


def line_total(quantity, unit_price, discount=ZERO) -> Decimal:
    """quantity * unit_price - discount"""
    return money(Decimal(quantity) * Decimal(unit_price) - Decimal(discount or 0))


class DocumentTotals(NamedTuple):
    subtotal: Decimal
    discount: Decimal
    tax: Decimal
    total: Decimal


def document_totals(items: Iterable, tax=ZERO) -> DocumentTotals:
    """
    Totals for a priced document.

    ``items`` are objects with quantity, unit_price and discount attributes.
    Subtotal is the gross sum before item discounts; total subtracts the
    discounts and adds tax.
    """
    subtotal = ZERO
    discount = ZERO
    for item in items:
        subtotal += Decimal(item.quantity) * Decimal(item.unit_price)
        discount += Decimal(item.discount or 0)
    tax = Decimal(tax or 0)
    return DocumentTotals(
        subtotal=money(subtotal),
        discount=money(discount),
        tax=money(tax),
        total=money(subtotal - discount + tax),
    )
