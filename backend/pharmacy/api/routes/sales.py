"""Sales: record at the counter, browse, export."""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from pharmacy.api.deps import get_db
from pharmacy.core.permissions import admin_only, staff
from pharmacy.models.sale import Sale
from pharmacy.models.user import User
from pharmacy.schemas.sale import SaleCreate, SaleResponse
from pharmacy.services import export_service, report_service, sales_service

router = APIRouter()


@router.post("", response_model=SaleResponse, status_code=201)
def create_sale(data: SaleCreate, db: Session = Depends(get_db), current_user: User = Depends(staff)):
    """Record a sale; the cashier is the authenticated user."""
    return sales_service.record_sale(db, data, cashier=current_user.email)


@router.get("", response_model=List[SaleResponse])
def list_sales(
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    search: Optional[str] = Query(None),
    cashier: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(staff),
):
    return sales_service.list_sales(db, start_date=start_date, end_date=end_date, search=search, cashier=cashier)


@router.get("/export")
def export_sales(
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    cashier: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_only),
):
    """Sales as a CSV download."""
    sales = sales_service.list_sales(db, start_date=start_date, end_date=end_date, cashier=cashier)
    return export_service.csv_response(export_service.sales_csv(sales), "sales-report.csv")


@router.get("/top-medicines")
def top_medicines(
    limit: int = Query(5, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(staff),
):
    sales = db.query(Sale).order_by(Sale.id).all()
    return report_service.top_products(sales, limit)


@router.get("/{sale_id}", response_model=SaleResponse)
def get_sale(sale_id: int, db: Session = Depends(get_db), current_user: User = Depends(staff)):
    return sales_service.get_sale(db, sale_id)
