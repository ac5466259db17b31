"""Invoice service: creation with discount/tax computation plus lifecycle operations."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from invoicing.core.exceptions import DatabaseOperationError, InputValidationError, NotFoundError
from invoicing.models.invoice import DiscountType, Invoice
from invoicing.repositories.invoice_repository import InvoiceRepository, page_offset
from invoicing.schemas.invoice import (
    MAX_PERCENTAGE_DISCOUNT,
    InvoiceCreate,
    InvoiceCreatedResponse,
    InvoicePatch,
    InvoiceReplace,
)
from invoicing.services.display_resolver import DisplayResolver

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0.00")
# Largest value a Numeric(10, 2) column holds
MAX_MONEY = Decimal("99999999.99")


def quantize_money(value: Decimal) -> Decimal:
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def apply_discount(
    amount: Decimal,
    discount_type: DiscountType | str | None,
    discount_value: Decimal | None,
) -> Decimal:
    """Compute the discount amount for a discount type and value.

    ``Direct`` returns the value itself, ``Percentage`` returns
    ``amount * value / 100``. A missing value or a missing/unknown type
    gives no discount. The result is rounded half-up to 2 decimal places.
    """
    if discount_value is None or discount_type is None:
        return ZERO

    kind = discount_type.value if isinstance(discount_type, DiscountType) else str(discount_type)
    value = Decimal(str(discount_value))

    if kind == DiscountType.DIRECT.value:
        return quantize_money(value)
    if kind == DiscountType.PERCENTAGE.value:
        return quantize_money(Decimal(str(amount)) * value / Decimal(100))
    return ZERO


class InvoiceService:
    """Service for invoice pricing and persistence."""

    def __init__(self, db: Session):
        self.db = db
        self.invoice_repo = InvoiceRepository(db)
        self.display_resolver = DisplayResolver(db)

    @contextmanager
    def _store_operation(self, action: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Failed to %s: %s", action, e)
            raise DatabaseOperationError(e) from e

    def create_invoice(self, data: InvoiceCreate) -> InvoiceCreatedResponse:
        """Persist a new invoice with its discount applied.

        The base total is ``amount + tax_amount``; the discount computed from
        ``(amount, discount_type, discount)`` is subtracted and the adjusted
        total is stored with the invoice. A discount larger than the base
        total is rejected before anything is written.

        Raises:
            InputValidationError: If the discount would make the total negative
                or the base total does not fit the money columns.
            DatabaseOperationError: If the store rejects the write (for
                example an unknown shop or customer).
        """
        base_total = quantize_money(data.amount + (data.tax_amount or ZERO))
        if base_total > MAX_MONEY:
            raise InputValidationError(
                "Invoice total is too large.",
                details=[
                    {
                        "field": "tax_amount",
                        "message": f"amount + tax_amount must not exceed {MAX_MONEY}",
                        "type": "value_error",
                    }
                ],
            )
        discount_amount = apply_discount(data.amount, data.discount_type, data.discount)

        if discount_amount > base_total:
            logger.warning(
                "Rejected invoice for shop %s: discount %s exceeds total %s",
                data.shop_id,
                discount_amount,
                base_total,
            )
            raise InputValidationError(
                "Discount cannot exceed the invoice total.",
                details=[
                    {
                        "field": "discount",
                        "message": f"Discount {discount_amount} exceeds total {base_total}",
                        "type": "value_error",
                    }
                ],
            )

        total_amount = base_total - discount_amount
        with self._store_operation("create invoice"):
            invoice = self.invoice_repo.create(data, total_amount)

        logger.info(
            "Created invoice %s (id=%s) total=%s discount=%s",
            invoice.invoice_number,
            invoice.id,
            invoice.total_amount,
            discount_amount,
        )

        shop_name = self.display_resolver.resolve_shop_display_name(data.shop_id)
        customer = self.display_resolver.resolve_customer_display(data.customer_id)

        return InvoiceCreatedResponse(
            id=invoice.id,  # type: ignore[arg-type]
            invoice_number=invoice.invoice_number,  # type: ignore[arg-type]
            amount=invoice.amount,  # type: ignore[arg-type]
            payment_mode=invoice.payment_mode,  # type: ignore[arg-type]
            invoice_date=invoice.invoice_date,  # type: ignore[arg-type]
            shop_id=invoice.shop_id,  # type: ignore[arg-type]
            shop_name=shop_name,
            customer_id=invoice.customer_id,  # type: ignore[arg-type]
            customer_name=customer.name,
            customer_mobile=customer.mobile,
            due_date=invoice.due_date,  # type: ignore[arg-type]
            discount=invoice.discount,  # type: ignore[arg-type]
            discount_type=invoice.discount_type,  # type: ignore[arg-type]
            discount_amount=discount_amount,
            tax_amount=invoice.tax_amount,  # type: ignore[arg-type]
            total_amount=invoice.total_amount,  # type: ignore[arg-type]
            invoice_status=invoice.status,  # type: ignore[arg-type]
            created_at=invoice.created_at,  # type: ignore[arg-type]
            updated_at=invoice.updated_at,  # type: ignore[arg-type]
        )

    def get_invoice(self, invoice_id: int) -> Invoice:
        invoice = self.invoice_repo.get_by_id(invoice_id)
        if not invoice:
            raise NotFoundError("Invoice")
        return invoice

    def list_invoices(
        self,
        limit: int,
        page_number: int,
        customer_id: int | None = None,
        order_by: str | None = None,
    ) -> tuple[list[Invoice], int]:
        """Return one page of invoices and the total count."""
        invoices = self.invoice_repo.get_all(
            skip=page_offset(limit, page_number),
            limit=limit,
            customer_id=customer_id,
            order_by=order_by,
        )
        return invoices, self.invoice_repo.count(customer_id)

    def filter_invoices(self, status: str, order_by: str | None = None) -> list[Invoice]:
        status = status.strip()
        if not status:
            raise InputValidationError("Invalid or missing status parameter")
        return self.invoice_repo.filter_by_status(status, order_by)

    def replace_invoice(self, invoice_id: int, data: InvoiceReplace) -> Invoice:
        with self._store_operation("update invoice"):
            invoice = self.invoice_repo.replace(invoice_id, data)
        if not invoice:
            raise NotFoundError("Invoice")
        logger.info("Updated invoice %s", invoice_id)
        return invoice

    def patch_invoice(self, data: InvoicePatch) -> Invoice:
        current = self.get_invoice(data.id)
        self._check_patched_discount(current, data)
        with self._store_operation("patch invoice"):
            invoice = self.invoice_repo.patch(data)
        if not invoice:
            raise NotFoundError("Invoice")
        logger.info("Patched invoice %s", data.id)
        return invoice

    @staticmethod
    def _check_patched_discount(invoice: Invoice, data: InvoicePatch) -> None:
        """Reject a patch whose discount, merged with the stored one, exceeds 100%."""
        fields = data.model_fields_set
        discount = data.discount if "discount" in fields else invoice.discount
        discount_type = data.discount_type if "discount_type" in fields else invoice.discount_type
        if discount_type is None or discount is None:
            return
        if DiscountType(discount_type) is not DiscountType.PERCENTAGE:
            return
        if Decimal(str(discount)) > MAX_PERCENTAGE_DISCOUNT:
            raise InputValidationError(
                "Percentage discount cannot exceed 100",
                details=[
                    {
                        "field": "discount",
                        "message": f"Percentage discount {discount} exceeds 100",
                        "type": "value_error",
                    }
                ],
            )

    def delete_invoice(self, invoice_id: int) -> None:
        with self._store_operation("delete invoice"):
            deleted = self.invoice_repo.delete(invoice_id)
        if not deleted:
            raise NotFoundError("Invoice")
        logger.info("Deleted invoice %s", invoice_id)
