"""
Purchase orders and their receipt into stock.

Status flow: Pending -> Received (stock += quantity, exactly once)
             Pending -> Cancelled (no stock effect)
Received and Cancelled are terminal.
"""
import logging
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from pharmacy.core.exceptions import (
    ConflictError,
    InvalidRequestError,
    InvalidTransitionError,
    NotFoundError,
    PharmacyError,
)
from pharmacy.models.purchase import Purchase, PurchaseStatus
from pharmacy.schemas.purchase import PurchaseCreate
from pharmacy.services.inventory_service import adjust_stock_by_name
from pharmacy.services.numbering import next_document_number

logger = logging.getLogger(__name__)


def parse_status(value: str) -> PurchaseStatus:
    """Case-insensitive lookup of a status name."""
    for status in PurchaseStatus:
        if status.value.lower() == str(value).strip().lower():
            return status
    raise InvalidRequestError(
        f"Unknown status '{value}'. Expected one of: {', '.join(s.value for s in PurchaseStatus)}"
    )


def get_purchase(db: Session, purchase_id: int) -> Purchase:
    purchase = db.query(Purchase).filter(Purchase.id == purchase_id).first()
    if not purchase:
        raise NotFoundError(f"Purchase {purchase_id} not found")
    return purchase


def list_purchases(
    db: Session,
    search: Optional[str] = None,
    supplier: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    status: Optional[str] = None,
) -> List[Purchase]:
    q = db.query(Purchase)
    if start_date:
        q = q.filter(Purchase.date >= datetime.combine(start_date, datetime.min.time()))
    if end_date:
        q = q.filter(Purchase.date < datetime.combine(end_date + timedelta(days=1), datetime.min.time()))
    if search:
        q = q.filter(Purchase.medicine.ilike(f"%{search}%") | Purchase.order_number.ilike(f"%{search}%"))
    if supplier:
        q = q.filter(Purchase.supplier.ilike(f"%{supplier}%"))
    if status:
        q = q.filter(Purchase.status == parse_status(status).value)
    return q.order_by(Purchase.date.desc(), Purchase.id.desc()).all()


def create_purchase(db: Session, data: PurchaseCreate, now: Optional[datetime] = None) -> Purchase:
    """
    Persist a purchase order with the caller-supplied status. A purchase
    created directly as Received increments stock (by medicine name) in the
    same transaction; Pending and Cancelled leave stock alone.
    """
    if data.quantity <= 0:
        raise InvalidRequestError("Quantity must be positive")
    if data.total_cost < 0:
        raise InvalidRequestError("Total cost cannot be negative")
    if not data.medicine.strip():
        raise InvalidRequestError("Medicine name cannot be empty")
    status = parse_status(data.status)

    now = now or datetime.now()
    order_number = next_document_number(db, Purchase.order_number, "PO", now)
    purchase = Purchase(
        order_number=order_number,
        date=data.date or now,
        supplier=data.supplier.strip(),
        medicine=data.medicine.strip(),
        quantity=data.quantity,
        total_cost=Decimal(str(data.total_cost)),
        status=status.value,
    )
    db.add(purchase)
    try:
        db.flush()
        if status == PurchaseStatus.RECEIVED:
            medicine = adjust_stock_by_name(db, purchase.medicine, purchase.quantity, now=now, commit=False)
            purchase.medicine_id = medicine.id
        db.commit()
    except PharmacyError:
        db.rollback()
        raise
    except IntegrityError:
        db.rollback()
        logger.warning(f"Order number {order_number} taken by a concurrent purchase")
        raise ConflictError(f"Order number {order_number} already exists, retry the purchase")

    db.refresh(purchase)
    logger.info(
        f"Purchase {purchase.order_number} created: {purchase.quantity} x {purchase.medicine} "
        f"from {purchase.supplier or '-'} [{purchase.status}]"
    )
    return purchase


def receive_purchase(db: Session, purchase_id: int, now: Optional[datetime] = None) -> Purchase:
    """
    Mark a pending purchase Received and add its quantity to stock.

    Idempotent: receiving an already-received purchase changes nothing. The
    status flip is a conditional UPDATE on status = Pending, so of two
    concurrent receipts only one increments stock.
    """
    purchase = get_purchase(db, purchase_id)
    if purchase.status == PurchaseStatus.RECEIVED.value:
        logger.info(f"Purchase {purchase.order_number} already received, nothing to do")
        return purchase
    if purchase.status == PurchaseStatus.CANCELLED.value:
        logger.warning(f"Refusing to receive cancelled purchase {purchase.order_number}")
        raise InvalidTransitionError(f"Purchase {purchase.order_number} is cancelled")

    try:
        flipped = (
            db.query(Purchase)
            .filter(Purchase.id == purchase.id, Purchase.status == PurchaseStatus.PENDING.value)
            .update({Purchase.status: PurchaseStatus.RECEIVED.value}, synchronize_session=False)
        )
        if not flipped:
            # Another request got here first
            db.rollback()
            db.refresh(purchase)
            if purchase.status == PurchaseStatus.CANCELLED.value:
                raise InvalidTransitionError(f"Purchase {purchase.order_number} is cancelled")
            return purchase

        medicine = adjust_stock_by_name(db, purchase.medicine, purchase.quantity, now=now, commit=False)
        purchase.medicine_id = medicine.id
        db.commit()
    except PharmacyError:
        db.rollback()
        raise

    db.refresh(purchase)
    logger.info(f"Purchase {purchase.order_number} received: +{purchase.quantity} {purchase.medicine}")
    return purchase


def cancel_purchase(db: Session, purchase_id: int) -> Purchase:
    """Pending -> Cancelled. Cancelling twice is a no-op; a received order cannot be cancelled."""
    purchase = get_purchase(db, purchase_id)
    if purchase.status == PurchaseStatus.CANCELLED.value:
        return purchase
    if purchase.status == PurchaseStatus.RECEIVED.value:
        logger.warning(f"Refusing to cancel received purchase {purchase.order_number}")
        raise InvalidTransitionError(f"Purchase {purchase.order_number} is already received")

    flipped = (
        db.query(Purchase)
        .filter(Purchase.id == purchase.id, Purchase.status == PurchaseStatus.PENDING.value)
        .update({Purchase.status: PurchaseStatus.CANCELLED.value}, synchronize_session=False)
    )
    db.commit()
    db.refresh(purchase)
    if not flipped and purchase.status == PurchaseStatus.RECEIVED.value:
        raise InvalidTransitionError(f"Purchase {purchase.order_number} is already received")
    logger.info(f"Purchase {purchase.order_number} cancelled")
    return purchase


def update_purchase_status(
    db: Session, purchase_id: int, status: str, now: Optional[datetime] = None
) -> Purchase:
    target = parse_status(status)
    if target == PurchaseStatus.RECEIVED:
        return receive_purchase(db, purchase_id, now=now)
    if target == PurchaseStatus.CANCELLED:
        return cancel_purchase(db, purchase_id)

    purchase = get_purchase(db, purchase_id)
    if purchase.status != PurchaseStatus.PENDING.value:
        raise InvalidTransitionError(
            f"Purchase {purchase.order_number} is {purchase.status} and cannot return to Pending"
        )
    return purchase
