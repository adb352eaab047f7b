"""Inventory screen: stock snapshot, quick corrections, alerts and counters."""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from pharmacy.api.deps import get_db
from pharmacy.core.permissions import staff
from pharmacy.models.medicine import Medicine
from pharmacy.models.user import User
from pharmacy.schemas.medicine import InventoryUpdate, MedicineResponse
from pharmacy.services import alert_service, inventory_service

router = APIRouter()


@router.get("", response_model=List[MedicineResponse])
def list_inventory(
    search: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(staff),
):
    return inventory_service.list_medicines(db, search=search)


@router.get("/alerts")
def get_alerts(db: Session = Depends(get_db), current_user: User = Depends(staff)):
    """Expired, near-expiry and low-stock medicines, one tag each."""
    return alert_service.build_alerts(db.query(Medicine).all(), date.today())


@router.get("/stats")
def get_stats(db: Session = Depends(get_db), current_user: User = Depends(staff)):
    return alert_service.inventory_stats(db.query(Medicine).all(), date.today())


@router.put("/{medicine_id}", response_model=MedicineResponse)
def update_inventory_item(
    medicine_id: int,
    data: InventoryUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(staff),
):
    """Correct counted quantity, price or expiry of an existing medicine."""
    return inventory_service.update_medicine(db, medicine_id, data)
