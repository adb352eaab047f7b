"""Purchase orders: create, receive into stock, cancel, export."""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from pharmacy.api.deps import get_db
from pharmacy.core.permissions import admin_only, staff
from pharmacy.models.user import User
from pharmacy.schemas.purchase import PurchaseCreate, PurchaseResponse, PurchaseStatusUpdate
from pharmacy.services import export_service, purchase_service

router = APIRouter()


@router.post("", response_model=PurchaseResponse, status_code=201)
def create_purchase(data: PurchaseCreate, db: Session = Depends(get_db), current_user: User = Depends(staff)):
    return purchase_service.create_purchase(db, data)


@router.get("", response_model=List[PurchaseResponse])
def list_purchases(
    search: Optional[str] = Query(None),
    supplier: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
    current_user: User = Depends(staff),
):
    return purchase_service.list_purchases(
        db, search=search, supplier=supplier, start_date=start_date, end_date=end_date, status=status
    )


@router.get("/export")
def export_purchases(
    supplier: Optional[str] = Query(None),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_only),
):
    """Purchases as a CSV download."""
    purchases = purchase_service.list_purchases(db, supplier=supplier, start_date=start_date, end_date=end_date)
    return export_service.csv_response(export_service.purchases_csv(purchases), "purchase-report.csv")


@router.get("/{purchase_id}", response_model=PurchaseResponse)
def get_purchase(purchase_id: int, db: Session = Depends(get_db), current_user: User = Depends(staff)):
    return purchase_service.get_purchase(db, purchase_id)


@router.put("/{purchase_id}/receive", response_model=PurchaseResponse)
def receive_purchase(purchase_id: int, db: Session = Depends(get_db), current_user: User = Depends(staff)):
    """Pending -> Received; adds the quantity to stock once."""
    return purchase_service.receive_purchase(db, purchase_id)


@router.put("/{purchase_id}/cancel", response_model=PurchaseResponse)
def cancel_purchase(purchase_id: int, db: Session = Depends(get_db), current_user: User = Depends(staff)):
    return purchase_service.cancel_purchase(db, purchase_id)


@router.put("/{purchase_id}/status", response_model=PurchaseResponse)
def update_purchase_status(
    purchase_id: int,
    data: PurchaseStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_only),
):
    return purchase_service.update_purchase_status(db, purchase_id, data.status)
