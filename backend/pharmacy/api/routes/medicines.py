"""Medicine catalog CRUD. Reads for all staff, writes for Admin."""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from pharmacy.api.deps import get_db
from pharmacy.core.permissions import admin_only, staff
from pharmacy.models.user import User
from pharmacy.schemas.medicine import MedicineCreate, MedicineResponse, MedicineUpdate
from pharmacy.services import inventory_service

router = APIRouter()


@router.get("", response_model=List[MedicineResponse])
def list_medicines(
    search: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    low_stock: bool = Query(False, alias="lowStock"),
    db: Session = Depends(get_db),
    current_user: User = Depends(staff),
):
    return inventory_service.list_medicines(db, search=search, category=category, low_stock=low_stock)


@router.get("/{medicine_id}", response_model=MedicineResponse)
def get_medicine(medicine_id: int, db: Session = Depends(get_db), current_user: User = Depends(staff)):
    return inventory_service.get_medicine(db, medicine_id)


@router.post("", response_model=MedicineResponse, status_code=201)
def create_medicine(data: MedicineCreate, db: Session = Depends(get_db), current_user: User = Depends(admin_only)):
    return inventory_service.create_medicine(db, data)


@router.put("/{medicine_id}", response_model=MedicineResponse)
def update_medicine(
    medicine_id: int,
    data: MedicineUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_only),
):
    return inventory_service.update_medicine(db, medicine_id, data)


@router.delete("/{medicine_id}")
def delete_medicine(medicine_id: int, db: Session = Depends(get_db), current_user: User = Depends(admin_only)):
    name = inventory_service.delete_medicine(db, medicine_id)
    return {"message": f"Deleted {name}", "id": medicine_id}
