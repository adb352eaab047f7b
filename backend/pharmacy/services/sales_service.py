"""Sale recording. Each sale decrements stock in the same transaction."""
import logging
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from pharmacy.core.exceptions import (
    ConflictError,
    InsufficientStockError,
    InvalidRequestError,
    NotFoundError,
    PharmacyError,
    ProductNotFoundError,
)
from pharmacy.models.medicine import Medicine
from pharmacy.models.sale import Sale
from pharmacy.schemas.sale import SaleCreate
from pharmacy.services.inventory_service import adjust_stock
from pharmacy.services.numbering import next_document_number

logger = logging.getLogger(__name__)


def calculate_total(unit_price: Decimal, quantity: int, discount: Decimal) -> Decimal:
    """Gross minus discount. Not floored: a discount above gross gives a negative total."""
    return unit_price * quantity - discount


def record_sale(db: Session, data: SaleCreate, cashier: str, now: Optional[datetime] = None) -> Sale:
    """
    Validate against current stock, persist the Sale and decrement stock.

    Both writes commit together; if the decrement fails (e.g. another sale
    took the stock in between) the sale row is rolled back too.

    Raises:
        InvalidRequestError: non-positive quantity, negative price or discount
        ProductNotFoundError: unknown product id
        InsufficientStockError: stock below the requested quantity
    """
    if data.quantity <= 0:
        raise InvalidRequestError("Quantity must be positive")
    if data.discount < 0:
        raise InvalidRequestError("Discount cannot be negative")
    if data.price is not None and data.price < 0:
        raise InvalidRequestError("Price cannot be negative")

    medicine = db.query(Medicine).filter(Medicine.id == data.product_id).first()
    if not medicine:
        logger.warning(f"Sale rejected: product {data.product_id} not found")
        raise ProductNotFoundError(f"Product {data.product_id} not found")
    if medicine.quantity < data.quantity:
        logger.warning(
            f"Sale rejected: {medicine.name} has {medicine.quantity}, requested {data.quantity}"
        )
        raise InsufficientStockError(
            f"Insufficient stock for {medicine.name}: available {medicine.quantity}"
        )

    now = now or datetime.now()
    unit_price = Decimal(str(data.price)) if data.price is not None else Decimal(str(medicine.price))
    discount = Decimal(str(data.discount))

    invoice_number = next_document_number(db, Sale.invoice_number, "INV", now)
    sale = Sale(
        invoice_number=invoice_number,
        date=now,
        customer=data.customer.strip(),
        medicine_id=medicine.id,
        product=medicine.name,
        quantity=data.quantity,
        price=unit_price,
        discount=discount,
        total=calculate_total(unit_price, data.quantity, discount),
        payment_type=data.payment_type,
        cashier=cashier,
    )
    db.add(sale)
    try:
        db.flush()
        adjust_stock(db, medicine.id, -data.quantity, now=now, commit=False)
        db.commit()
    except PharmacyError:
        db.rollback()
        raise
    except IntegrityError:
        db.rollback()
        logger.warning(f"Invoice number {invoice_number} taken by a concurrent sale")
        raise ConflictError(f"Invoice number {invoice_number} already exists, retry the sale")

    db.refresh(sale)
    logger.info(
        f"Sale {sale.invoice_number}: {sale.quantity} x {sale.product} = {sale.total} by {cashier}"
    )
    return sale


def get_sale(db: Session, sale_id: int) -> Sale:
    sale = db.query(Sale).filter(Sale.id == sale_id).first()
    if not sale:
        raise NotFoundError(f"Sale {sale_id} not found")
    return sale


def list_sales(
    db: Session,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    search: Optional[str] = None,
    cashier: Optional[str] = None,
) -> List[Sale]:
    """Newest first. Both date bounds are inclusive whole days."""
    q = db.query(Sale)
    if start_date:
        q = q.filter(Sale.date >= datetime.combine(start_date, datetime.min.time()))
    if end_date:
        q = q.filter(Sale.date < datetime.combine(end_date + timedelta(days=1), datetime.min.time()))
    if search:
        q = q.filter(Sale.product.ilike(f"%{search}%") | Sale.invoice_number.ilike(f"%{search}%"))
    if cashier:
        q = q.filter(Sale.cashier == cashier)
    return q.order_by(Sale.date.desc(), Sale.id.desc()).all()
