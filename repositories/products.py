import time
from typing import List

import config
from models import Product, ProductCategory, ProductCreate, ProductUpdate

from .base import BaseRepository, check_positive, check_rating, new_id


class ProductRepository(BaseRepository):
    table = config.PRODUCTS_COLLECTION
    entity_name = "Product"
    model = Product

    def create_product(self, data: ProductCreate) -> Product:
        check_positive("price", data.price)
        check_rating(data.rating)
        return self.create({
            "id": new_id(),
            "name": data.name,
            "price": data.price,
            "category": data.category,
            "image": data.image or f"https://picsum.photos/300/300?random={int(time.time() * 1000)}",
            "description": data.description,
            "rating": data.rating if data.rating is not None else 0,
        })

    def update_product(self, id: str, data: ProductUpdate) -> Product:
        check_positive("price", data.price)
        return self.update(id, data.model_dump(exclude_unset=True))

    def get_by_category(self, category: ProductCategory) -> List[Product]:
        return self.scan({"category": category})

    def get_top_rated(self, limit: int = 10) -> List[Product]:
        return sorted(self.get_all(), key=lambda p: p.rating, reverse=True)[:limit]

    def search_by_name(self, term: str) -> List[Product]:
        # Full scan; fine for a catalog this size
        needle = term.lower()
        return [
            p for p in self.get_all()
            if needle in p.name.lower() or needle in p.description.lower()
        ]
