from datetime import date, datetime
from decimal import Decimal
from typing import Literal, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from invoicing.models.invoice import DiscountType, InvoiceStatus

MAX_PERCENTAGE_DISCOUNT = Decimal("100")

# Request bodies accept camelCase ("paymentMode") as well as field names
REQUEST_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)

# Columns that cannot be set to null once the invoice exists
_NON_NULLABLE_FIELDS = ("amount", "payment_mode", "shop_id", "customer_id", "total_amount", "status")


def _strip_required(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be blank")
    return value


def _check_percentage(discount: Decimal | None, discount_type: DiscountType | None) -> None:
    if (
        discount_type == DiscountType.PERCENTAGE
        and discount is not None
        and discount > MAX_PERCENTAGE_DISCOUNT
    ):
        raise ValueError("Percentage discount cannot exceed 100")


class InvoiceCreate(BaseModel):
    model_config = REQUEST_CONFIG

    amount: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    payment_mode: str = Field(..., min_length=1, max_length=50)
    shop_id: int = Field(..., gt=0)
    customer_id: int = Field(..., gt=0)
    invoice_number: str | None = Field(default=None, min_length=1, max_length=50)
    discount: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    discount_type: DiscountType | None = None
    tax_amount: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    due_date: date | None = None

    strip_payment_mode = field_validator("payment_mode")(_strip_required)

    @model_validator(mode="after")
    def check_discount(self) -> Self:
        _check_percentage(self.discount, self.discount_type)
        return self


class InvoiceReplace(BaseModel):
    """Full replacement of an invoice's mutable fields (PUT)."""

    model_config = REQUEST_CONFIG

    amount: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    payment_mode: str = Field(..., min_length=1, max_length=50)
    shop_id: int = Field(..., gt=0)
    customer_id: int = Field(..., gt=0)
    total_amount: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    status: str = Field(default=InvoiceStatus.PENDING.value, min_length=1, max_length=20)
    discount: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    discount_type: DiscountType | None = None
    tax_amount: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    due_date: date | None = None

    strip_required_text = field_validator("payment_mode", "status")(_strip_required)

    @model_validator(mode="after")
    def check_discount(self) -> Self:
        _check_percentage(self.discount, self.discount_type)
        return self


class InvoicePatch(BaseModel):
    """Partial update (PATCH); the invoice id travels in the body."""

    model_config = REQUEST_CONFIG

    id: int = Field(..., gt=0)
    amount: Decimal | None = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    payment_mode: str | None = Field(default=None, min_length=1, max_length=50)
    shop_id: int | None = Field(default=None, gt=0)
    customer_id: int | None = Field(default=None, gt=0)
    total_amount: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    status: str | None = Field(default=None, min_length=1, max_length=20)
    discount: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    discount_type: DiscountType | None = None
    tax_amount: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    due_date: date | None = None

    @model_validator(mode="after")
    def check_fields(self) -> Self:
        for name in _NON_NULLABLE_FIELDS:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        for name in ("payment_mode", "status"):
            value = getattr(self, name)
            if value is not None and not value.strip():
                raise ValueError(f"{name} must not be blank")
        _check_percentage(self.discount, self.discount_type)
        return self


class InvoiceResponse(BaseModel):
    id: int
    invoice_number: str | None
    shop_id: int
    shop_name: str | None = None
    customer_id: int
    customer_name: str | None = None
    amount: Decimal
    payment_mode: str
    discount: Decimal | None
    discount_type: str | None
    tax_amount: Decimal | None
    total_amount: Decimal
    status: str
    invoice_date: datetime | None
    due_date: date | None
    created_at: datetime | None
    updated_at: datetime | None

    model_config = {"from_attributes": True}


class InvoiceCreatedResponse(BaseModel):
    """Creation result with the discount applied and display fields resolved.

    ``status`` is the outcome of the creation request; the invoice's own
    lifecycle state is reported as ``invoice_status``.
    """

    id: int
    invoice_number: str
    amount: Decimal
    payment_mode: str
    invoice_date: datetime | None
    shop_id: int
    shop_name: str
    customer_id: int
    customer_name: str
    customer_mobile: str | None
    due_date: date | None
    discount: Decimal | None
    discount_type: str | None
    discount_amount: Decimal
    tax_amount: Decimal | None
    total_amount: Decimal
    invoice_status: str
    status: Literal["success"] = "success"
    created_at: datetime | None
    updated_at: datetime | None
