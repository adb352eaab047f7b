"""
Reporting aggregates for the dashboard charts.

All functions are pure projections over the rows they are given (ORM objects
or anything with the named attributes). Totals are Decimals; FastAPI encodes
them as JSON numbers.
"""
from collections import OrderedDict
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List

UNCATEGORIZED = "Uncategorized"


def _amount(record, field: str) -> Decimal:
    value = getattr(record, field)
    if value is None:
        return Decimal("0")
    return value if isinstance(value, Decimal) else Decimal(str(value))


def monthly_totals(records: Iterable, date_field: str = "date", amount_field: str = "total") -> List[Dict]:
    """[{year, month, total}] ascending by (year, month)."""
    groups: Dict[tuple, Decimal] = {}
    for record in records:
        moment = getattr(record, date_field)
        key = (moment.year, moment.month)
        groups[key] = groups.get(key, Decimal("0")) + _amount(record, amount_field)
    return [
        {"year": year, "month": month, "total": total}
        for (year, month), total in sorted(groups.items())
    ]


def yearly_totals(records: Iterable, date_field: str = "date", amount_field: str = "total") -> List[Dict]:
    """[{year, total}] ascending by year."""
    groups: Dict[int, Decimal] = {}
    for record in records:
        year = getattr(record, date_field).year
        groups[year] = groups.get(year, Decimal("0")) + _amount(record, amount_field)
    return [{"year": year, "total": total} for year, total in sorted(groups.items())]


def top_products(sales: Iterable, n: int = 5) -> List[Dict]:
    """
    Best sellers by units sold. Ties keep the order in which products first
    appear in `sales` (sorted() is stable).
    """
    groups: "OrderedDict[str, Dict]" = OrderedDict()
    for sale in sales:
        entry = groups.setdefault(
            sale.product,
            {"product": sale.product, "totalQuantity": 0, "totalRevenue": Decimal("0")},
        )
        entry["totalQuantity"] += sale.quantity
        entry["totalRevenue"] += _amount(sale, "total")

    ranked = sorted(groups.values(), key=lambda e: e["totalQuantity"], reverse=True)
    return ranked[:max(n, 0)]


def sales_by_category(sales: Iterable, medicines: Iterable) -> List[Dict]:
    """Revenue per catalog category, highest first."""
    medicines = sorted(medicines, key=lambda m: m.id)
    by_id = {m.id: m.category for m in medicines}
    by_name: Dict[str, str] = {}
    for m in medicines:
        by_name.setdefault(m.name, m.category)

    totals: "OrderedDict[str, Decimal]" = OrderedDict()
    for sale in sales:
        category = by_id.get(sale.medicine_id) or by_name.get(sale.product) or UNCATEGORIZED
        totals[category] = totals.get(category, Decimal("0")) + _amount(sale, "total")

    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return [{"category": category, "total": total} for category, total in ranked]


def summary(sales: Iterable, purchases: Iterable, today: date) -> Dict:
    """Headline numbers for the admin dashboard cards."""
    today_count = 0
    today_amount = Decimal("0")
    month_amount = Decimal("0")
    total_count = 0
    for sale in sales:
        total_count += 1
        amount = _amount(sale, "total")
        sale_day = sale.date.date() if hasattr(sale.date, "date") else sale.date
        if sale_day == today:
            today_count += 1
            today_amount += amount
        if (sale_day.year, sale_day.month) == (today.year, today.month):
            month_amount += amount

    purchases_amount = sum((_amount(p, "total_cost") for p in purchases), Decimal("0"))
    return {
        "todaySalesCount": today_count,
        "todaySalesAmount": today_amount,
        "monthSalesAmount": month_amount,
        "totalSalesCount": total_count,
        "totalOrdersCount": total_count,
        "totalPurchasesAmount": purchases_amount,
    }
