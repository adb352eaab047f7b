"""
Reports API: aggregates for the admin dashboard charts.

- Monthly / yearly sales and purchase totals
- Summary cards (today, month to date, lifetime)
- Top products and revenue per category
"""
from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from pharmacy.api.deps import get_db
from pharmacy.core.permissions import admin_only
from pharmacy.models.medicine import Medicine
from pharmacy.models.purchase import Purchase
from pharmacy.models.sale import Sale
from pharmacy.models.user import User
from pharmacy.services import report_service

router = APIRouter()


def _sales(db: Session):
    return db.query(Sale).order_by(Sale.id).all()


def _purchases(db: Session):
    return db.query(Purchase).order_by(Purchase.id).all()


@router.get("/monthly-sales")
def monthly_sales(db: Session = Depends(get_db), current_user: User = Depends(admin_only)):
    """[{year, month, total}] ascending."""
    return report_service.monthly_totals(_sales(db), "date", "total")


@router.get("/yearly-sales")
def yearly_sales(db: Session = Depends(get_db), current_user: User = Depends(admin_only)):
    return report_service.yearly_totals(_sales(db), "date", "total")


@router.get("/monthly-purchases")
def monthly_purchases(db: Session = Depends(get_db), current_user: User = Depends(admin_only)):
    return report_service.monthly_totals(_purchases(db), "date", "total_cost")


@router.get("/yearly-purchases")
def yearly_purchases(db: Session = Depends(get_db), current_user: User = Depends(admin_only)):
    return report_service.yearly_totals(_purchases(db), "date", "total_cost")


@router.get("/summary")
def get_summary(db: Session = Depends(get_db), current_user: User = Depends(admin_only)):
    return report_service.summary(_sales(db), _purchases(db), date.today())


@router.get("/top-products")
def get_top_products(
    limit: int = Query(5, ge=1, le=100, description="Number of top products to return"),
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_only),
):
    """Best sellers by units: [{product, totalQuantity, totalRevenue}]."""
    return report_service.top_products(_sales(db), limit)


@router.get("/sales-by-category")
def get_sales_by_category(db: Session = Depends(get_db), current_user: User = Depends(admin_only)):
    return report_service.sales_by_category(_sales(db), db.query(Medicine).all())
