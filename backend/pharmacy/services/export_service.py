"""CSV exports of sales and purchases with a fixed column order."""
import csv
import io
from typing import Iterable

from fastapi.responses import StreamingResponse

SALES_COLUMNS = [
    "InvoiceNumber", "Date", "Customer", "Product", "Quantity",
    "Price", "Discount", "Total", "PaymentType", "Cashier",
]
PURCHASE_COLUMNS = [
    "OrderNumber", "Date", "Supplier", "Medicine", "Quantity", "TotalCost", "Status",
]


def _fmt_date(value) -> str:
    return value.strftime("%Y-%m-%d %H:%M:%S") if value else ""


def sales_csv(sales: Iterable) -> str:
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(SALES_COLUMNS)
    for s in sales:
        writer.writerow([
            s.invoice_number,
            _fmt_date(s.date),
            s.customer,
            s.product,
            s.quantity,
            s.price,
            s.discount,
            s.total,
            s.payment_type,
            s.cashier,
        ])
    return output.getvalue()


def purchases_csv(purchases: Iterable) -> str:
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(PURCHASE_COLUMNS)
    for p in purchases:
        writer.writerow([
            p.order_number,
            _fmt_date(p.date),
            p.supplier,
            p.medicine,
            p.quantity,
            p.total_cost,
            p.status,
        ])
    return output.getvalue()


def csv_response(content: str, filename: str) -> StreamingResponse:
    return StreamingResponse(
        iter([content]),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
