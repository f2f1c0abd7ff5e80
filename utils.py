import io
import logging
import pandas as pd # type: ignore
from typing import List, Dict, Optional

from purchase_calc import DISCOUNT_TYPES, build_purchase_item

logger = logging.getLogger(__name__)


def _read_frame(file_bytes: bytes, filename: str) -> Optional[pd.DataFrame]:
    fname = filename.lower()
    if fname.endswith(".csv"):
        return pd.read_csv(io.BytesIO(file_bytes), dtype=str)
    if fname.endswith(".xlsx"):
        return pd.read_excel(io.BytesIO(file_bytes), dtype=str)
    return None


def _cell(row, key, default=None):
    val = row.get(key, default)
    if val is None or (isinstance(val, float) and pd.isna(val)):
        return default
    if isinstance(val, str):
        val = val.strip()
        return val if val else default
    return val


def _number(row, key, default=None):
    """Numeric cell or default when blank; raises ValueError on junk."""
    val = _cell(row, key)
    if val is None:
        return default
    num = float(val)
    if pd.isna(num):
        return default
    return num


def items_from_dataframe(df: pd.DataFrame, hsn_lookup=None) -> List[Dict]:
    """
    Turn purchase rows into purchase items.
    Required columns: product_name, purchase_qty, purchase_price.
    Optional: discount_type, discount_value, gst_rate, hsn_code, mrp, sku_code.
    Rows with missing or unparseable numbers are skipped.
    """
    df = df.rename(columns=lambda c: str(c).strip().lower())
    items = []
    for pos, row in df.iterrows():
        try:
            name = str(_cell(row, "product_name", ""))
            qty = _number(row, "purchase_qty")
            price = _number(row, "purchase_price")
            if qty is None or price is None:
                raise ValueError("blank qty/price")
            discount_value = _number(row, "discount_value", 0.0)
            rate = _number(row, "gst_rate")
            mrp = _number(row, "mrp")
        except (TypeError, ValueError):
            logger.warning("Skipping purchase row %s: missing or invalid numeric value", pos)
            continue

        discount_type = _cell(row, "discount_type")
        if discount_type not in DISCOUNT_TYPES:
            discount_type = None
        hsn_code = _cell(row, "hsn_code")
        if hsn_lookup is not None and (rate is None or hsn_code is None):
            sugg = hsn_lookup.suggest(name, limit=1)
            if sugg:
                rate = sugg[0]["rate"] if rate is None else rate
                hsn_code = sugg[0]["hsn_code"] if hsn_code is None else hsn_code

        items.append(build_purchase_item(
            name,
            qty,
            price,
            discount_type=discount_type,
            discount_value=discount_value,
            gst_rate=rate or 0,
            hsn_code=str(hsn_code) if hsn_code is not None else None,
            sku_code=str(_cell(row, "sku_code", "")),
            manual_mrp=mrp,
        ))
    return items


def load_purchase_items(file_bytes: bytes, filename: str, hsn_lookup=None) -> List[Dict]:
    """Read a CSV/XLSX purchase sheet into purchase items; other formats give []."""
    df = _read_frame(file_bytes, filename)
    if df is None:
        logger.warning("Unsupported purchase sheet: %s", filename)
        return []
    items = items_from_dataframe(df, hsn_lookup)
    logger.info("Imported %d purchase items from %s", len(items), filename)
    return items
