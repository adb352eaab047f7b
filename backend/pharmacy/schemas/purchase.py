from datetime import datetime
from typing import Optional

from pharmacy.schemas.base import CamelModel


class PurchaseCreate(CamelModel):
    supplier: str = ""
    medicine: str
    quantity: int
    total_cost: float = 0
    status: str = "Pending"
    date: Optional[datetime] = None


class PurchaseStatusUpdate(CamelModel):
    status: str


class PurchaseResponse(CamelModel):
    id: int
    order_number: str
    date: datetime
    supplier: str
    medicine: str
    medicine_id: Optional[int] = None
    quantity: int
    total_cost: float
    status: str
