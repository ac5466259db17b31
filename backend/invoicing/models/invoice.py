from enum import Enum

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, Numeric, String, func
from sqlalchemy.orm import relationship

from invoicing.core.database import Base


class InvoiceStatus(str, Enum):
    PENDING = "Pending"
    PAID = "Paid"
    CANCELLED = "Cancelled"


class DiscountType(str, Enum):
    DIRECT = "Direct"
    PERCENTAGE = "Percentage"


class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # Filled with "<prefix><id>" after the first flush when the caller gives none
    invoice_number = Column(String(50), unique=True, index=True, nullable=True)
    shop_id = Column(Integer, ForeignKey("shops.id", ondelete="RESTRICT"), nullable=False, index=True)
    customer_id = Column(
        Integer, ForeignKey("customers.id", ondelete="RESTRICT"), nullable=False, index=True
    )

    # Amounts (fixed-point, 2 decimal places)
    amount = Column(Numeric(10, 2), nullable=False)
    discount = Column(Numeric(10, 2), nullable=True)
    discount_type = Column(String(20), nullable=True)
    tax_amount = Column(Numeric(10, 2), nullable=True)
    total_amount = Column(Numeric(10, 2), nullable=False)

    payment_mode = Column(String(50), nullable=False)
    status = Column(String(20), nullable=False, default=InvoiceStatus.PENDING.value, index=True)

    invoice_date = Column(DateTime(timezone=True), server_default=func.now())
    due_date = Column(Date, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    shop = relationship("Shop", lazy="joined")
    customer = relationship("Customer", lazy="joined")

    @property
    def shop_name(self) -> str | None:
        return self.shop.name if self.shop is not None else None

    @property
    def customer_name(self) -> str | None:
        return self.customer.name if self.customer is not None else None
