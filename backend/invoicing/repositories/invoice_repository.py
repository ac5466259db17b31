from decimal import Decimal
from typing import Any

from sqlalchemy.orm import Session

from invoicing.core.config import settings
from invoicing.core.sorting import apply_order_by
from invoicing.models.invoice import Invoice, InvoiceStatus
from invoicing.schemas.invoice import InvoiceCreate, InvoicePatch, InvoiceReplace


def page_offset(limit: int, page_number: int) -> int:
    """Translate a 1-based page number into a row offset."""
    return (limit * page_number) - limit


class InvoiceRepository:
    def __init__(self, db: Session):
        self.db = db

    def _generate_invoice_number(self, invoice_id: int) -> str:
        return f"{settings.INVOICE_NUMBER_PREFIX}{invoice_id}"

    def get_all(
        self,
        skip: int = 0,
        limit: int = 10,
        customer_id: int | None = None,
        order_by: str | None = None,
    ) -> list[Invoice]:
        query = self.db.query(Invoice)
        if customer_id is not None:
            query = query.filter(Invoice.customer_id == customer_id)
        query = apply_order_by(query, Invoice, order_by)
        return query.offset(skip).limit(limit).all()

    def count(self, customer_id: int | None = None) -> int:
        query = self.db.query(Invoice)
        if customer_id is not None:
            query = query.filter(Invoice.customer_id == customer_id)
        return query.count()

    def filter_by_status(self, status: str, order_by: str | None = None) -> list[Invoice]:
        query = self.db.query(Invoice).filter(Invoice.status == status)
        return apply_order_by(query, Invoice, order_by).all()

    def get_by_id(self, invoice_id: int) -> Invoice | None:
        return self.db.query(Invoice).filter(Invoice.id == invoice_id).first()

    def create(self, data: InvoiceCreate, total_amount: Decimal) -> Invoice:
        invoice = Invoice(
            invoice_number=data.invoice_number,
            shop_id=data.shop_id,
            customer_id=data.customer_id,
            amount=data.amount,
            discount=data.discount,
            discount_type=data.discount_type.value if data.discount_type else None,
            tax_amount=data.tax_amount,
            total_amount=total_amount,
            payment_mode=data.payment_mode,
            status=InvoiceStatus.PENDING.value,
            due_date=data.due_date,
        )
        self.db.add(invoice)
        # Flush first so the generated id can seed the default invoice number
        self.db.flush()
        if not invoice.invoice_number:
            invoice.invoice_number = self._generate_invoice_number(invoice.id)  # type: ignore[assignment]
        self.db.commit()
        self.db.refresh(invoice)
        return invoice

    def replace(self, invoice_id: int, data: InvoiceReplace) -> Invoice | None:
        invoice = self.get_by_id(invoice_id)
        if not invoice:
            return None
        return self._assign(invoice, data.model_dump())

    def patch(self, data: InvoicePatch) -> Invoice | None:
        invoice = self.get_by_id(data.id)
        if not invoice:
            return None
        return self._assign(invoice, data.model_dump(exclude_unset=True, exclude={"id"}))

    def _assign(self, invoice: Invoice, update_data: dict[str, Any]) -> Invoice:
        # Convert discount type enum to string value
        if update_data.get("discount_type") is not None:
            update_data["discount_type"] = update_data["discount_type"].value

        for key, value in update_data.items():
            setattr(invoice, key, value)

        self.db.commit()
        self.db.refresh(invoice)
        return invoice

    def delete(self, invoice_id: int) -> bool:
        invoice = self.get_by_id(invoice_id)
        if not invoice:
            return False
        self.db.delete(invoice)
        self.db.commit()
        return True
