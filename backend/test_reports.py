from datetime import date, datetime
from decimal import Decimal
from types import SimpleNamespace

from pharmacy.services.report_service import (
    UNCATEGORIZED,
    monthly_totals,
    sales_by_category,
    summary,
    top_products,
    yearly_totals,
)


def sale(product, quantity, total, when, medicine_id=None):
    return SimpleNamespace(
        product=product,
        quantity=quantity,
        total=Decimal(total),
        date=when,
        medicine_id=medicine_id,
    )


SALES = [
    sale("Paracetamol", 3, "6.00", datetime(2024, 12, 30, 10), medicine_id=1),
    sale("Ibuprofen", 1, "4.50", datetime(2025, 1, 2, 9), medicine_id=2),
    sale("Paracetamol", 2, "4.00", datetime(2025, 1, 14, 18), medicine_id=1),
    sale("Cetirizine", 5, "10.00", datetime(2025, 2, 1, 12)),
]


def test_monthly_totals_sorted_and_sum_to_grand_total():
    result = monthly_totals(reversed(SALES))

    assert [(r["year"], r["month"]) for r in result] == [(2024, 12), (2025, 1), (2025, 2)]
    assert result[1]["total"] == Decimal("8.50")
    assert sum(r["total"] for r in result) == sum(s.total for s in SALES)


def test_yearly_totals():
    assert yearly_totals(SALES) == [
        {"year": 2024, "total": Decimal("6.00")},
        {"year": 2025, "total": Decimal("18.50")},
    ]


def test_totals_over_purchases_use_total_cost():
    purchases = [
        SimpleNamespace(date=datetime(2025, 3, 1), total_cost=Decimal("100")),
        SimpleNamespace(date=datetime(2025, 3, 20), total_cost=None),
    ]

    assert monthly_totals(purchases, "date", "total_cost") == [
        {"year": 2025, "month": 3, "total": Decimal("100")},
    ]


def test_top_products_ranks_by_units_with_stable_ties():
    result = top_products(SALES, 5)

    assert [r["product"] for r in result] == ["Paracetamol", "Cetirizine", "Ibuprofen"]
    assert result[0]["totalQuantity"] == 5
    assert result[0]["totalRevenue"] == Decimal("10.00")
    # Paracetamol and Cetirizine tie on 5 units; first appearance decides
    assert top_products(SALES, 1) == [result[0]]
    assert top_products([], 5) == []


def test_sales_by_category_falls_back_to_name_then_uncategorized():
    medicines = [
        SimpleNamespace(id=1, name="Paracetamol", category="Analgesic"),
        SimpleNamespace(id=2, name="Ibuprofen", category="NSAID"),
    ]
    sales = SALES + [sale("Ibuprofen", 1, "4.50", datetime(2025, 2, 2))]

    result = sales_by_category(sales, medicines)

    assert result == [
        {"category": "Analgesic", "total": Decimal("10.00")},
        {"category": UNCATEGORIZED, "total": Decimal("10.00")},
        {"category": "NSAID", "total": Decimal("9.00")},
    ]


def test_summary_for_fixed_day():
    purchases = [SimpleNamespace(total_cost=Decimal("40.00")), SimpleNamespace(total_cost=Decimal("2.50"))]

    result = summary(SALES, purchases, today=date(2025, 1, 14))

    assert result["todaySalesCount"] == 1
    assert result["todaySalesAmount"] == Decimal("4.00")
    assert result["monthSalesAmount"] == Decimal("8.50")
    assert result["totalSalesCount"] == 4
    assert result["totalPurchasesAmount"] == Decimal("42.50")
