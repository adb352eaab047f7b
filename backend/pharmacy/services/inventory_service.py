"""Catalog reads/writes and the stock adjuster used by sales and purchases."""
import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from pharmacy.core.config import settings
from pharmacy.core.exceptions import (
    ConflictError,
    InsufficientStockError,
    InvalidRequestError,
    NotFoundError,
)
from pharmacy.models.medicine import Medicine
from pharmacy.models.purchase import Purchase
from pharmacy.models.sale import Sale
from pharmacy.schemas.medicine import InventoryUpdate, MedicineCreate, MedicineUpdate

logger = logging.getLogger(__name__)


# ==============================================================================
# CATALOG
# ==============================================================================

def get_medicine(db: Session, medicine_id: int) -> Medicine:
    medicine = db.query(Medicine).filter(Medicine.id == medicine_id).first()
    if not medicine:
        raise NotFoundError(f"Medicine {medicine_id} not found")
    return medicine


def find_medicine_by_name(db: Session, name: str) -> Optional[Medicine]:
    """Exact name match; with duplicate names the oldest row (lowest id) wins."""
    return (
        db.query(Medicine)
        .filter(Medicine.name == name.strip())
        .order_by(Medicine.id)
        .first()
    )


def list_medicines(
    db: Session,
    search: Optional[str] = None,
    category: Optional[str] = None,
    low_stock: bool = False,
) -> List[Medicine]:
    q = db.query(Medicine)
    if search:
        q = q.filter(Medicine.name.ilike(f"%{search}%") | Medicine.brand.ilike(f"%{search}%"))
    if category:
        q = q.filter(Medicine.category == category)
    if low_stock:
        q = q.filter(Medicine.quantity <= settings.LOW_STOCK_THRESHOLD)
    return q.order_by(Medicine.name, Medicine.id).all()


def _validate_fields(name=None, price=None, quantity=None):
    if name is not None and not name.strip():
        raise InvalidRequestError("Medicine name cannot be empty")
    if price is not None and price < 0:
        raise InvalidRequestError("Price cannot be negative")
    if quantity is not None and quantity < 0:
        raise InvalidRequestError("Quantity cannot be negative")


def _ensure_unique_name(db: Session, name: str, exclude_id: Optional[int] = None):
    q = db.query(Medicine).filter(Medicine.name == name)
    if exclude_id is not None:
        q = q.filter(Medicine.id != exclude_id)
    if q.first():
        raise ConflictError(f"Medicine '{name}' already exists")


def create_medicine(db: Session, data: MedicineCreate) -> Medicine:
    _validate_fields(data.name, data.price, data.quantity)
    name = data.name.strip()
    _ensure_unique_name(db, name)

    medicine = Medicine(
        name=name,
        brand=data.brand.strip(),
        category=data.category.strip() or settings.DEFAULT_CATEGORY,
        price=Decimal(str(data.price)),
        quantity=data.quantity,
        expiry_date=data.expiry_date,
        updated_at=datetime.now(),
    )
    db.add(medicine)
    db.commit()
    db.refresh(medicine)
    logger.info(f"Added medicine {medicine.id} '{medicine.name}' qty={medicine.quantity}")
    return medicine


def update_medicine(db: Session, medicine_id: int, updates: MedicineUpdate | InventoryUpdate) -> Medicine:
    """Partial update; only fields present in `updates` change."""
    medicine = get_medicine(db, medicine_id)
    fields = updates.model_dump(exclude_unset=True, exclude_none=True)
    _validate_fields(fields.get("name"), fields.get("price"), fields.get("quantity"))

    if "name" in fields:
        fields["name"] = fields["name"].strip()
        _ensure_unique_name(db, fields["name"], exclude_id=medicine.id)
    if "price" in fields:
        fields["price"] = Decimal(str(fields["price"]))

    for key, value in fields.items():
        setattr(medicine, key, value)
    medicine.updated_at = datetime.now()

    db.commit()
    db.refresh(medicine)
    logger.info(f"Updated medicine {medicine.id}: {sorted(fields)}")
    return medicine


def delete_medicine(db: Session, medicine_id: int) -> str:
    """Delete a medicine. Past sales and purchases keep their name text; their id link is cleared."""
    medicine = get_medicine(db, medicine_id)
    name = medicine.name
    # SQLite may hand the freed id to the next medicine
    for model in (Sale, Purchase):
        db.query(model).filter(model.medicine_id == medicine.id).update(
            {model.medicine_id: None}, synchronize_session=False
        )
    db.delete(medicine)
    db.commit()
    logger.info(f"Deleted medicine {medicine_id} '{name}'")
    return name


# ==============================================================================
# STOCK ADJUSTER
# ==============================================================================

def _finish(db: Session, commit: bool):
    if commit:
        db.commit()
    else:
        db.flush()


def adjust_stock(
    db: Session,
    medicine_id: int,
    delta: int,
    now: Optional[datetime] = None,
    commit: bool = True,
) -> Medicine:
    """
    Apply a signed quantity delta to one medicine.

    The check and the write are a single conditional UPDATE
    (quantity = quantity + delta WHERE quantity + delta >= 0), so stock can
    never go negative even with concurrent sales. With commit=False the write
    is only flushed and the caller owns the transaction.
    """
    if delta == 0:
        raise InvalidRequestError("Stock adjustment must be non-zero")
    medicine = get_medicine(db, medicine_id)
    now = now or datetime.now()

    updated = (
        db.query(Medicine)
        .filter(Medicine.id == medicine.id, Medicine.quantity + delta >= 0)
        .update(
            {Medicine.quantity: Medicine.quantity + delta, Medicine.updated_at: now},
            synchronize_session=False,
        )
    )
    if not updated:
        logger.warning(
            f"Insufficient stock for medicine {medicine.id} '{medicine.name}': "
            f"have {medicine.quantity}, delta {delta}"
        )
        raise InsufficientStockError(
            f"Insufficient stock for {medicine.name}: available {medicine.quantity}"
        )

    _finish(db, commit)
    db.refresh(medicine)
    logger.info(f"Stock adjusted for medicine {medicine.id}: delta={delta}, now={medicine.quantity}")
    return medicine


def adjust_stock_by_name(
    db: Session,
    name: str,
    delta: int,
    now: Optional[datetime] = None,
    commit: bool = True,
) -> Medicine:
    """
    Purchase-path variant resolving the medicine by exact name.

    An unknown name with a positive delta creates the medicine with default
    category and an expiry DEFAULT_EXPIRY_DAYS out; with a negative delta it
    is NotFound.
    """
    if delta == 0:
        raise InvalidRequestError("Stock adjustment must be non-zero")
    medicine = find_medicine_by_name(db, name)
    if medicine is not None:
        return adjust_stock(db, medicine.id, delta, now=now, commit=commit)

    if delta < 0:
        raise NotFoundError(f"Medicine '{name}' not found")
    if not name.strip():
        raise InvalidRequestError("Medicine name cannot be empty")

    now = now or datetime.now()
    medicine = Medicine(
        name=name.strip(),
        brand="",
        category=settings.DEFAULT_CATEGORY,
        price=Decimal("0"),
        quantity=delta,
        expiry_date=now.date() + timedelta(days=settings.DEFAULT_EXPIRY_DAYS),
        updated_at=now,
    )
    db.add(medicine)
    _finish(db, commit)
    db.refresh(medicine)
    logger.info(f"Created medicine {medicine.id} '{medicine.name}' from stock receipt, qty={delta}")
    return medicine
