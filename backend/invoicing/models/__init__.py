from invoicing.models.customer import Customer
from invoicing.models.invoice import DiscountType, Invoice, InvoiceStatus
from invoicing.models.shop import Shop

__all__ = [
    "Customer",
    "DiscountType",
    "Invoice",
    "InvoiceStatus",
    "Shop",
]
