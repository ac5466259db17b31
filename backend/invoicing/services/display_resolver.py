"""Denormalized shop and customer display fields for invoice responses."""

from dataclasses import dataclass

from sqlalchemy.orm import Session

from invoicing.core.exceptions import NotFoundError
from invoicing.repositories.customer_repository import CustomerRepository
from invoicing.repositories.shop_repository import ShopRepository


@dataclass
class CustomerDisplay:
    name: str
    mobile: str | None


class DisplayResolver:
    """Looks up the human-readable fields copied into invoice responses."""

    def __init__(self, db: Session):
        self.shop_repo = ShopRepository(db)
        self.customer_repo = CustomerRepository(db)

    def resolve_shop_display_name(self, shop_id: int) -> str:
        shop = self.shop_repo.get_by_id(shop_id)
        if not shop:
            raise NotFoundError("Shop", shop_id)
        return str(shop.name)

    def resolve_customer_display(self, customer_id: int) -> CustomerDisplay:
        customer = self.customer_repo.get_by_id(customer_id)
        if not customer:
            raise NotFoundError("Customer", customer_id)
        return CustomerDisplay(
            name=str(customer.name),
            mobile=customer.mobile,  # type: ignore[arg-type]
        )
