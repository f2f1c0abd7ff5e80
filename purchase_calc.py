import math
from typing import Dict, List, Optional

from config import get_settings
from tax_calc import allocate_proportional_discount, calc_inclusive_line, clamp_gst_rate, split_gst

PERCENT_PER_UNIT = "percent_per_unit"
AMOUNT_PER_UNIT = "amount_per_unit"
TOTAL_AMOUNT = "total_amount"

DISCOUNT_TYPES = (PERCENT_PER_UNIT, AMOUNT_PER_UNIT, TOTAL_AMOUNT)


def calculate_line_discount(purchase_price, quantity, discount_type: Optional[str], discount_value) -> float:
    """Calculate line item discount based on discount type and value."""
    if not discount_type or discount_value == 0:
        return 0

    if discount_type == PERCENT_PER_UNIT:
        return purchase_price * quantity * (discount_value / 100)
    if discount_type == AMOUNT_PER_UNIT:
        return discount_value * quantity
    if discount_type == TOTAL_AMOUNT:
        return discount_value
    return 0


def calculate_line_total(purchase_price, quantity, discount_type: Optional[str], discount_value) -> float:
    """Line total after discount, never below zero."""
    subtotal = purchase_price * quantity
    discount = calculate_line_discount(purchase_price, quantity, discount_type, discount_value)
    return max(0, subtotal - discount)


def calculate_mrp(purchase_price, margin_percent):
    if margin_percent == 0:
        return purchase_price
    return purchase_price * (1 + margin_percent / 100)


def apply_margin_if_enabled(purchase_price, margin_enabled: bool, margin_percent, manual_mrp=None):
    """
    MRP precedence: margin (when enabled and positive) → manual MRP → purchase price.
    """
    if margin_enabled and margin_percent > 0:
        return calculate_mrp(purchase_price, margin_percent)
    return manual_mrp or purchase_price


def calculate_bill_totals(line_items: List[Dict], bill_discount, round_off_amount, tax_percent=0) -> Dict[str, float]:
    """
    Roll purchase lines up into bill totals.
    Line totals already carry their own discounts; bill_discount is a second,
    bill-wide discount. Tax is charged on the amount after that discount.
    round_off_amount is applied as given (see suggest_round_off).
    """
    subtotal = sum(item["total_amount"] for item in line_items)
    after_bill_discount = max(0, subtotal - bill_discount)
    tax_amount = after_bill_discount * (tax_percent / 100)
    before_round_off = after_bill_discount + tax_amount
    final_amount = before_round_off + round_off_amount

    return {
        "subtotal": subtotal,
        "bill_discount": bill_discount,
        "after_bill_discount": after_bill_discount,
        "tax_amount": tax_amount,
        "before_round_off": before_round_off,
        "round_off_amount": round_off_amount,
        "final_amount": final_amount,
    }


def suggest_round_off(amount) -> float:
    if not math.isfinite(amount):
        return float("nan")
    # halves round up (toward +inf), not to even
    whole = math.floor(amount)
    rounded = whole + (1 if amount - whole >= 0.5 else 0)
    return rounded - amount


def format_currency(amount) -> str:
    return f"{get_settings().currency_symbol}{float(amount):.2f}"


def build_purchase_item(product_name: str, purchase_qty, purchase_price, discount_type: Optional[str] = None,
                        discount_value=0, gst_rate=0, hsn_code: Optional[str] = None, sku_code: str = "",
                        margin_enabled: bool = False, margin_percent=0, manual_mrp=None) -> Dict:
    """Build one purchase table row with its discount, total, MRP and taxable amount filled in."""
    rate = clamp_gst_rate(gst_rate)
    calculated_discount = calculate_line_discount(purchase_price, purchase_qty, discount_type, discount_value)
    total = calculate_line_total(purchase_price, purchase_qty, discount_type, discount_value)
    return {
        "sku_code": sku_code,
        "product_name": product_name,
        "purchase_qty": purchase_qty,
        "purchase_price": purchase_price,
        "hsn_code": hsn_code,
        "gst_rate": rate,
        "discount_type": discount_type,
        "discount_value": discount_value,
        "calculated_discount": calculated_discount,
        "total_amount": total,
        "mrp": apply_margin_if_enabled(purchase_price, margin_enabled, margin_percent, manual_mrp),
        "taxable_amount": calc_inclusive_line(total, rate)["taxable_value"],
    }


def purchase_tax_breakdown(line_items: List[Dict], bill_discount, inter_state: bool) -> Dict:
    """
    Spread the bill discount over the lines, then back GST out of each
    discounted (tax-inclusive) line total and split it by jurisdiction.
    """
    allocations = allocate_proportional_discount([item["total_amount"] for item in line_items], bill_discount)
    lines = []
    totals = {"taxable_subtotal": 0.0, "tax_amount": 0.0, "cgst": 0.0, "sgst": 0.0, "igst": 0.0}

    for item, allocated in zip(line_items, allocations):
        discounted_gross = max(0, item["total_amount"] - allocated)
        rate = clamp_gst_rate(item.get("gst_rate", 0))
        line = calc_inclusive_line(discounted_gross, rate)
        split = split_gst(inter_state, line["gst_amount"])
        lines.append({
            "allocated_discount": allocated,
            "discounted_gross": line["gross_amount"],
            "gst_rate": rate,
            "taxable_value": line["taxable_value"],
            "gst_amount": line["gst_amount"],
            "cgst_amount": split["cgst"],
            "sgst_amount": split["sgst"],
            "igst_amount": split["igst"],
        })
        totals["taxable_subtotal"] += line["taxable_value"]
        totals["tax_amount"] += line["gst_amount"]
        for k in ("cgst", "sgst", "igst"):
            totals[k] += split[k]

    totals["lines"] = lines
    return totals
