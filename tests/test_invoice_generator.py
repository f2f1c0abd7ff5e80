import io

import pandas as pd
import pytest

from invoice_generator import build_purchase_bill, generate_bill_csv_bytes, generate_bill_pdf, generate_bill_xlsx_bytes
from purchase_calc import build_purchase_item

SHOP = {"name": "Friends Group", "gstin": "27ABCDE1234F1Z5", "state": "Maharashtra"}


@pytest.fixture
def items():
    return [
        build_purchase_item("Cotton Shirt", 1, 500, gst_rate=5, hsn_code="6205"),
        build_purchase_item("Phone cover", 1, 300, gst_rate=18),
    ]


def test_build_bill_intra_state(items):
    bill = build_purchase_bill("PB-1", "2026-10-19", {"name": "Local Traders", "state": " maharashtra"},
                               items, bill_discount=50, round_off_amount=-0.30, tax_percent=5, shop=SHOP)

    assert bill["is_inter_state"] is False
    assert bill["totals"]["subtotal"] == 800
    assert bill["totals"]["final_amount"] == 787.2
    assert [row["sr"] for row in bill["items"]] == [1, 2]
    assert bill["items"][0]["hsn"] == "6205"
    assert bill["items"][1]["hsn"] == ""
    assert bill["gst"]["igst"] == 0
    assert bill["gst"]["cgst"] == bill["gst"]["sgst"]


def test_build_bill_inter_state(items):
    bill = build_purchase_bill("PB-2", "2026-10-19", {"name": "Far Away", "state": "Karnataka"}, items, shop=SHOP)

    assert bill["is_inter_state"] is True
    assert bill["gst"]["cgst"] == 0
    assert bill["gst"]["igst"] > 0
    assert bill["items"][0]["taxable"] == pytest.approx(476.19)


def test_generators(items):
    bill = build_purchase_bill("PB-3", "2026-10-19", {"name": "Far Away", "state": "Karnataka"}, items, 10, shop=SHOP)

    assert generate_bill_pdf(bill).startswith(b"%PDF")

    csv_text = generate_bill_csv_bytes(bill).decode("utf-8")
    assert csv_text.splitlines()[0].startswith("sr,sku_code,description,hsn")
    assert "Cotton Shirt" in csv_text

    sheets = pd.read_excel(io.BytesIO(generate_bill_xlsx_bytes(bill)), sheet_name=None)
    assert set(sheets) == {"Items", "Totals"}
    assert len(sheets["Items"]) == 2
    assert sheets["Totals"]["final_amount"][0] == pytest.approx(790)


def test_shop_defaults_to_configured_shop(monkeypatch, items):
    from config import get_settings

    monkeypatch.setenv("SHOP_STATE", "Karnataka")
    monkeypatch.setenv("SHOP_NAME", "Bengaluru Store")
    get_settings.cache_clear()
    try:
        bill = build_purchase_bill("PB-4", "2026-10-19", {"name": "Local", "state": "karnataka"}, items)
    finally:
        get_settings.cache_clear()

    assert bill["shop"]["name"] == "Bengaluru Store"
    assert bill["is_inter_state"] is False
