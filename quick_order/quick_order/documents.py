from __future__ import annotations

from typing import Dict, List

from fpdf import FPDF

from .models import OrderRecord

VAT_RATE = 0.15


def order_summary(subtotal: float, vat_rate: float = VAT_RATE) -> Dict[str, float]:
    vat = subtotal * vat_rate
    return {"subtotal": subtotal, "vat": vat, "total": subtotal + vat}


def order_to_dict(record: OrderRecord, vat_rate: float = VAT_RATE) -> dict:
    return {
        "order_number": record.order_number,
        "supplier_id": record.supplier_id,
        "supplier_name": record.supplier_name,
        "notes": record.notes,
        "is_draft": record.is_draft,
        "created_at": record.created_at.isoformat(),
        "supersedes": record.supersedes,
        "items": [vars(item) for item in record.items],
        "total": record.total,
        "summary": order_summary(record.total, vat_rate),
    }


def orders_to_dict(records: List[OrderRecord], vat_rate: float = VAT_RATE) -> dict:
    return {
        "orders": [order_to_dict(r, vat_rate) for r in records],
        "grand_total": sum(r.total for r in records),
    }


def _latin(text: str) -> str:
    # core PDF fonts only cover latin-1
    return str(text).encode("latin-1", "replace").decode("latin-1")


def order_pdf_bytes(record: OrderRecord, vat_rate: float = VAT_RATE) -> bytes:
    pdf = FPDF(orientation="P", unit="mm", format="A4")
    pdf.add_page()
    pdf.set_font("Helvetica", "B", 16)
    title = "Draft Order" if record.is_draft else "Purchase Order"
    pdf.cell(0, 10, _latin(f"{title} - {record.supplier_name}"), ln=1)
    pdf.set_font("Helvetica", "", 12)
    pdf.cell(0, 8, _latin(f"Order number: {record.order_number}"), ln=1)
    pdf.cell(0, 8, _latin(f"Supplier ID: {record.supplier_id or '-'}"), ln=1)
    pdf.cell(0, 8, f"Date: {record.created_at.strftime('%Y-%m-%d %H:%M')}", ln=1)
    if record.notes:
        pdf.multi_cell(0, 6, _latin(f"Notes: {record.notes}"))
    pdf.ln(4)
    pdf.set_font("Helvetica", "B", 12)
    pdf.cell(45, 8, "Part number", border=1)
    pdf.cell(65, 8, "Name", border=1)
    pdf.cell(20, 8, "Qty", border=1)
    pdf.cell(30, 8, "Unit price", border=1)
    pdf.cell(30, 8, "Line total", border=1, ln=1)
    pdf.set_font("Helvetica", "", 11)
    for item in record.items:
        pdf.cell(45, 8, _latin(item.part_number), border=1)
        pdf.cell(65, 8, _latin(item.name[:32]), border=1)
        pdf.cell(20, 8, str(item.quantity), border=1)
        pdf.cell(30, 8, f"{item.unit_price:.2f}", border=1)
        pdf.cell(30, 8, f"{item.total:.2f}", border=1, ln=1)
    summary = order_summary(record.total, vat_rate)
    pdf.set_font("Helvetica", "B", 11)
    for label, key in (("Subtotal", "subtotal"), (f"VAT {vat_rate:.0%}", "vat"), ("Total", "total")):
        pdf.cell(160, 8, label, border=1)
        pdf.cell(30, 8, f"{summary[key]:.2f}", border=1, ln=1)
    out = pdf.output(dest="S")
    if isinstance(out, (bytes, bytearray)):
        return bytes(out)
    return str(out).encode("latin1")
