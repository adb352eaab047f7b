from datetime import date, datetime
from typing import Optional

from pharmacy.schemas.base import CamelModel


class MedicineCreate(CamelModel):
    name: str
    brand: str = ""
    category: str = "General"
    price: float = 0
    quantity: int = 0
    expiry_date: date


class MedicineUpdate(CamelModel):
    name: Optional[str] = None
    brand: Optional[str] = None
    category: Optional[str] = None
    price: Optional[float] = None
    quantity: Optional[int] = None
    expiry_date: Optional[date] = None


class InventoryUpdate(CamelModel):
    """Fields a pharmacist may correct from the inventory screen."""
    quantity: Optional[int] = None
    price: Optional[float] = None
    expiry_date: Optional[date] = None


class MedicineResponse(CamelModel):
    id: int
    name: str
    brand: str
    category: str
    price: float
    quantity: int
    expiry_date: date
    updated_at: Optional[datetime] = None
