from invoicing.schemas.common import Envelope
from invoicing.schemas.customer import CustomerCreate
from invoicing.schemas.invoice import (
    InvoiceCreate,
    InvoiceCreatedResponse,
    InvoicePatch,
    InvoiceReplace,
    InvoiceResponse,
)
from invoicing.schemas.shop import ShopCreate

__all__ = [
    "CustomerCreate",
    "Envelope",
    "InvoiceCreate",
    "InvoiceCreatedResponse",
    "InvoicePatch",
    "InvoiceReplace",
    "InvoiceResponse",
    "ShopCreate",
]
