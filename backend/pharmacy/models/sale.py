from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from pharmacy.db.base import Base


class Sale(Base):
    """Immutable record of one sale. `product` keeps the medicine name at sale time."""
    __tablename__ = "sales"

    id = Column(Integer, primary_key=True, index=True)
    invoice_number = Column(String(64), unique=True, nullable=False, index=True)
    date = Column(DateTime, nullable=False, index=True)
    customer = Column(String(255), nullable=False, default="")
    medicine_id = Column(Integer, ForeignKey("medicines.id", ondelete="SET NULL"), nullable=True)
    product = Column(String(255), nullable=False)
    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)  # unit price at sale time
    discount = Column(Numeric(10, 2), nullable=False, default=0)
    total = Column(Numeric(12, 2), nullable=False)
    payment_type = Column(String(32), nullable=False, default="Cash")
    cashier = Column(String(255), nullable=False)

    medicine = relationship("Medicine")
