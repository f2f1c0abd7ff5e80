import logging
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas
from io import BytesIO
import pandas as pd

from config import get_settings
from purchase_calc import calculate_bill_totals, purchase_tax_breakdown
from tax_calc import is_inter_state, money

logger = logging.getLogger(__name__)


def build_purchase_bill(bill_number, date, supplier, items, bill_discount=0, round_off_amount=0, tax_percent=0, shop=None):
    """
    Assemble the purchase bill dict consumed by the generators below.
    shop / supplier are dicts with at least name and state;
    shop defaults to the configured shop info.
    """
    if shop is None:
        shop = get_settings().shop_info
    inter_state = is_inter_state(shop.get("state"), supplier.get("state"))
    totals = calculate_bill_totals(items, bill_discount, round_off_amount, tax_percent)
    gst = purchase_tax_breakdown(items, bill_discount, inter_state)

    rows = []
    for sr, (item, line) in enumerate(zip(items, gst["lines"]), start=1):
        rows.append({
            "sr": sr,
            "sku_code": item.get("sku_code", ""),
            "description": item.get("product_name", ""),
            "hsn": item.get("hsn_code") or "",
            "qty": item["purchase_qty"],
            "unit_price": money(item["purchase_price"]),
            "discount": money(item.get("calculated_discount", 0)),
            "line_total": money(item["total_amount"]),
            "gst_rate": line["gst_rate"],
            "taxable": money(line["taxable_value"]),
            "cgst": money(line["cgst_amount"]),
            "sgst": money(line["sgst_amount"]),
            "igst": money(line["igst_amount"]),
            "mrp": money(item.get("mrp", 0)),
        })

    return {
        "bill_number": bill_number,
        "date": date,
        "shop": shop,
        "supplier": supplier,
        "is_inter_state": inter_state,
        "items": rows,
        "totals": {k: money(v) for k, v in totals.items()},
        "gst": {k: money(v) for k, v in gst.items() if k != "lines"},
    }


def generate_bill_pdf(bill):
    buffer = BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    width, height = A4

    # Set initial coordinates
    x, y = 40, height - 40

    # Header Section
    c.setFont("Helvetica-Bold", 14)
    c.drawCentredString(width/2, y, "PURCHASE BILL")
    y -= 30

    # Bill Details
    c.setFont("Helvetica", 10)
    c.drawString(x, y, f"Bill: {bill['bill_number']}")
    c.drawString(width/2, y, f"Date: {bill['date']}")
    y -= 20

    c.drawString(x, y, f"Shop: {bill['shop'].get('name', '')}")
    c.drawString(width/2, y, f"GSTIN: {bill['shop'].get('gstin', '')}")
    y -= 20

    c.drawString(x, y, f"Supplier: {bill['supplier'].get('name', '')}")
    c.drawString(width/2, y, f"State: {bill['supplier'].get('state', '')}")
    y -= 30

    # Table Header
    c.setFont("Helvetica-Bold", 9)
    headers = ["Sr", "Description", "HSN", "Qty", "Rate", "GST%", "Taxable", "Total"]
    positions = [x, x+25, x+200, x+260, x+300, x+350, x+390, x+460]

    for header, pos in zip(headers, positions):
        c.drawString(pos, y, header)
    y -= 20

    # Table Items
    c.setFont("Helvetica", 9)
    for item in bill['items']:
        c.drawString(positions[0], y, str(item['sr']))
        c.drawString(positions[1], y, str(item['description'])[:32])
        c.drawString(positions[2], y, str(item['hsn']))
        c.drawString(positions[3], y, f"{item['qty']:g}")
        c.drawString(positions[4], y, f"{item['unit_price']:.2f}")
        c.drawString(positions[5], y, f"{item['gst_rate']:g}")
        c.drawString(positions[6], y, f"{item['taxable']:.2f}")
        c.drawString(positions[7], y, f"{item['line_total']:.2f}")
        y -= 15

        # Page break if needed
        if y < 160:
            c.showPage()
            y = height - 40
            c.setFont("Helvetica", 9)

    # Summary
    totals, gst = bill['totals'], bill['gst']
    summary = [
        ("Subtotal:", totals['subtotal']),
        ("Bill Discount:", totals['bill_discount']),
        ("Taxable Value:", gst['taxable_subtotal']),
    ]
    if bill['is_inter_state']:
        summary.append(("IGST:", gst['igst']))
    else:
        summary += [("CGST:", gst['cgst']), ("SGST:", gst['sgst'])]
    summary += [("Round Off:", totals['round_off_amount']), ("Grand Total:", totals['final_amount'])]

    y -= 10
    for label, value in summary:
        c.setFont("Helvetica-Bold" if label == "Grand Total:" else "Helvetica", 10)
        c.drawString(positions[5], y, label)
        c.drawString(positions[7], y, f"{value:.2f}")
        y -= 15

    c.showPage()
    c.save()
    buffer.seek(0)
    logger.info("Rendered PDF for bill %s (%d items)", bill['bill_number'], len(bill['items']))
    return buffer.read()


def generate_bill_xlsx_bytes(bill):
    df = pd.DataFrame(bill['items'])
    buffer = BytesIO()

    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name="Items")
        totals_df = pd.DataFrame([{**bill['totals'], **bill['gst']}])
        totals_df.to_excel(writer, index=False, sheet_name="Totals")

    buffer.seek(0)
    return buffer.getvalue()


def generate_bill_csv_bytes(bill):
    df = pd.DataFrame(bill['items'])
    buffer = BytesIO()
    buffer.write(df.to_csv(index=False).encode('utf-8'))
    buffer.seek(0)
    return buffer.getvalue()
