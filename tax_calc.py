import math
from functools import reduce
from typing import Dict, List, Optional

from config import MAX_GST_RATE


def _running_sum(values) -> float:
    """Left-to-right float sum (no compensated summation), so totals match line by line."""
    return reduce(lambda acc, v: acc + v, values, 0.0)


def _finite(val) -> float:
    """Coerce to float; anything non-numeric or non-finite becomes 0."""
    try:
        num = float(val)
    except (TypeError, ValueError):
        return 0.0
    return num if math.isfinite(num) else 0.0


def normalize_state(value: Optional[str]) -> Optional[str]:
    v = (value or "").strip()
    if not v:
        return None
    return v.upper()


def clamp_gst_rate(rate) -> float:
    return max(0.0, min(MAX_GST_RATE, _finite(rate)))


def is_inter_state(shop_state: Optional[str], party_state: Optional[str]) -> bool:
    """
    Inter-state only when both states are known and differ.
    An unknown state on either side is billed as intra-state.
    """
    shop = normalize_state(shop_state)
    party = normalize_state(party_state)
    return bool(shop) and bool(party) and shop != party


def calc_inclusive_line(gross_amount, gst_rate) -> Dict[str, float]:
    """
    Reverse-calculate a tax-inclusive amount.
    gross_amount is what the line actually charges (after discounts),
    GST already folded in. gst_amount is the residual, so
    taxable_value + gst_amount == gross_amount.
    """
    gross = max(0.0, _finite(gross_amount))
    rate = clamp_gst_rate(gst_rate)
    if rate <= 0:
        return {"gross_amount": gross, "taxable_value": gross, "gst_amount": 0.0}
    divisor = 1 + rate / 100
    taxable = gross / divisor
    gst = gross - taxable
    return {"gross_amount": gross, "taxable_value": taxable, "gst_amount": gst}


def split_gst(inter_state: bool, gst_amount) -> Dict[str, float]:
    """
    Inter-state → IGST
    Else → CGST + SGST (equal halves)
    """
    amt = _finite(gst_amount)
    if amt <= 0:
        return {"cgst": 0.0, "sgst": 0.0, "igst": 0.0}
    if inter_state:
        return {"cgst": 0.0, "sgst": 0.0, "igst": amt}
    return {"cgst": amt / 2, "sgst": amt / 2, "igst": 0.0}


def allocate_proportional_discount(line_gross_amounts: List[float], bill_discount) -> List[float]:
    discount = max(0.0, _finite(bill_discount))
    weights = [max(0.0, _finite(g)) for g in line_gross_amounts]
    total = _running_sum(weights)
    if discount <= 0 or total <= 0:
        return [0.0 for _ in weights]

    allocations = [(w / total) * discount for w in weights]

    # float drift: whole residual goes to the last line carrying a share
    diff = discount - _running_sum(allocations)
    if abs(diff) > 1e-9:
        for idx in range(len(allocations) - 1, -1, -1):
            if allocations[idx] > 0:
                allocations[idx] += diff
                break
    return allocations


def compute_line(gross_amount, rate, seller_state, buyer_state) -> Dict[str, float]:
    """
    Compute tax breakdown for one tax-inclusive invoice line.
    Both states known and different → IGST
    Else (same state, or either state unknown) → CGST + SGST
    """
    line = calc_inclusive_line(gross_amount, rate)
    split = split_gst(is_inter_state(seller_state, buyer_state), line["gst_amount"])
    return {
        "gross_amount": line["gross_amount"],
        "taxable": line["taxable_value"],
        "gst_amount": line["gst_amount"],
        "cgst": split["cgst"],
        "sgst": split["sgst"],
        "igst": split["igst"],
        "line_total": line["gross_amount"],
    }


def money(val):
    """Round to 2 decimals consistently for money values."""
    return round(float(val), 2)
