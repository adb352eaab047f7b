from datetime import datetime
from typing import Optional

from pharmacy.schemas.base import CamelModel


class SaleCreate(CamelModel):
    product_id: int
    quantity: int
    price: Optional[float] = None  # unit price; catalog price when omitted
    discount: float = 0
    payment_type: str = "Cash"
    customer: str = ""


class SaleResponse(CamelModel):
    id: int
    invoice_number: str
    date: datetime
    customer: str
    product: str
    medicine_id: Optional[int] = None
    quantity: int
    price: float
    discount: float
    total: float
    payment_type: str
    cashier: str
