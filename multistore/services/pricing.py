"""Cart and checkout arithmetic.

Money is handled as ``Decimal`` and rounded to cents (half up) once per
figure. Tax and the shipping waiver are applied to each vendor order
separately, since every vendor ships its own parcel.
"""
from collections import OrderedDict
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List

from multistore.core.config import settings

CENTS = Decimal("0.01")

def to_money(value) -> Decimal:
    return Decimal(str(value if value is not None else 0)).quantize(CENTS, rounding=ROUND_HALF_UP)

def line_total(price, quantity: int) -> Decimal:
    return to_money(to_money(price) * quantity)

def shipping_fee_for(subtotal: Decimal) -> Decimal:
    """Flat fee unless the subtotal is strictly above the free shipping threshold"""
    if subtotal <= 0 or subtotal > settings.FREE_SHIPPING_THRESHOLD:
        return to_money(0)
    return to_money(settings.SHIPPING_FEE)

def compute_totals(lines: Iterable) -> Dict[str, Decimal]:
    """Totals for ``(price, quantity)`` pairs.

    Returns subtotal, tax_amount, shipping_fee, total and the amount still
    needed to reach free shipping.
    """
    subtotal = to_money(sum((line_total(price, qty) for price, qty in lines), Decimal("0")))
    tax_amount = to_money(subtotal * settings.TAX_RATE)
    shipping_fee = shipping_fee_for(subtotal)

    # The waiver needs a subtotal strictly above the threshold
    remaining = settings.FREE_SHIPPING_THRESHOLD + CENTS - subtotal if shipping_fee > 0 else 0
    return {
        "subtotal": subtotal,
        "tax_amount": tax_amount,
        "shipping_fee": shipping_fee,
        "total": to_money(subtotal + tax_amount + shipping_fee),
        "free_shipping_remaining": to_money(remaining),
    }

def group_by_vendor(cart_items) -> "OrderedDict[str, List]":
    """Split cart rows into per-vendor buckets, keeping first-seen vendor order"""
    groups = OrderedDict()
    for item in cart_items:
        groups.setdefault(item.product.vendor_id, []).append(item)
    return groups

def summarize_cart(cart_items) -> Dict:
    """Cart summary priced the way checkout charges it: one order per vendor.

    The top-level ``free_shipping_remaining`` is only reported for a
    single-vendor cart; otherwise each vendor entry carries its own.
    """
    vendors = []
    for vendor_id, items in group_by_vendor(cart_items).items():
        totals = compute_totals((i.product.price, i.quantity) for i in items)
        vendors.append(dict(totals, vendor_id=vendor_id))

    summary = {
        field: to_money(sum((v[field] for v in vendors), Decimal("0")))
        for field in ("subtotal", "tax_amount", "shipping_fee", "total")
    }
    if len(vendors) > 1:
        summary["free_shipping_remaining"] = None
    else:
        summary["free_shipping_remaining"] = vendors[0]["free_shipping_remaining"] if vendors else to_money(0)
    summary["vendors"] = vendors
    return summary
