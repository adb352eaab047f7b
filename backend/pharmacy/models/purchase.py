import enum

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from pharmacy.db.base import Base


class PurchaseStatus(str, enum.Enum):
    PENDING = "Pending"
    RECEIVED = "Received"
    CANCELLED = "Cancelled"


class Purchase(Base):
    """
    Supplier order. Status flow: Pending -> Received | Cancelled (both terminal).
    Stock is incremented once, on the transition to Received.
    """
    __tablename__ = "purchases"

    id = Column(Integer, primary_key=True, index=True)
    order_number = Column(String(64), unique=True, nullable=False, index=True)
    date = Column(DateTime, nullable=False, index=True)
    supplier = Column(String(255), nullable=False, default="")
    medicine = Column(String(255), nullable=False)  # name, resolved on receipt
    medicine_id = Column(Integer, ForeignKey("medicines.id", ondelete="SET NULL"), nullable=True)
    quantity = Column(Integer, nullable=False)
    total_cost = Column(Numeric(12, 2), nullable=False, default=0)
    status = Column(String(32), nullable=False, default=PurchaseStatus.PENDING.value)

    received_medicine = relationship("Medicine")
