from invoicing.repositories.customer_repository import CustomerRepository
from invoicing.repositories.invoice_repository import InvoiceRepository
from invoicing.repositories.shop_repository import ShopRepository

__all__ = [
    "CustomerRepository",
    "InvoiceRepository",
    "ShopRepository",
]
