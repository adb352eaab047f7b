from datetime import datetime

from sqlalchemy import Column, Date, DateTime, Integer, Numeric, String, CheckConstraint

from pharmacy.db.base import Base


class Medicine(Base):
    """
    Catalog entry and its current stock.

    Sales and purchases refer to medicines by name, so two rows with the same
    name cannot be told apart by name lookups; the lowest id wins.
    """
    __tablename__ = "medicines"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    brand = Column(String(255), nullable=False, default="")
    category = Column(String(128), nullable=False, default="General")
    price = Column(Numeric(10, 2), nullable=False, default=0)
    quantity = Column(Integer, nullable=False, default=0)
    expiry_date = Column(Date, nullable=False)
    updated_at = Column(DateTime, nullable=False, default=datetime.now)

    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_medicines_quantity_non_negative"),
    )
