"""Create the invoicing tables and optionally seed a demo shop and customer.

Usage:
    python -m scripts.init_db [--seed]
"""

import argparse
import logging

from invoicing.core import database
from invoicing.core.logging_config import configure_logging
from invoicing.models.customer import Customer
from invoicing.models.shop import Shop
from invoicing.repositories.customer_repository import CustomerRepository
from invoicing.repositories.shop_repository import ShopRepository
from invoicing.schemas.customer import CustomerCreate
from invoicing.schemas.shop import ShopCreate

logger = logging.getLogger(__name__)


def seed_demo_data() -> tuple[Shop, Customer]:
    """Insert one shop and one customer to invoice against."""
    db = database.SessionLocal()
    try:
        shop = ShopRepository(db).create(
            ShopCreate(name="Demo Shop", owner_name="Demo Owner", city="Pune", zip_code="411001")
        )
        customer = CustomerRepository(db).create(
            CustomerCreate(name="Demo Customer", mobile="9000000000")
        )
        logger.info("Seeded shop %s and customer %s", shop.id, customer.id)
        return shop, customer
    finally:
        db.close()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Create the invoicing tables.")
    parser.add_argument("--seed", action="store_true", help="insert a demo shop and customer")
    args = parser.parse_args(argv)

    configure_logging()
    database.init_db()
    logger.info("Database schema created")
    if args.seed:
        seed_demo_data()


if __name__ == "__main__":
    main()
