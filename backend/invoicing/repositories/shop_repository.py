from sqlalchemy.orm import Session

from invoicing.models.shop import Shop
from invoicing.schemas.shop import ShopCreate


class ShopRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, shop_id: int) -> Shop | None:
        return self.db.query(Shop).filter(Shop.id == shop_id).first()

    def create(self, data: ShopCreate) -> Shop:
        shop = Shop(**data.model_dump())
        self.db.add(shop)
        self.db.commit()
        self.db.refresh(shop)
        return shop
