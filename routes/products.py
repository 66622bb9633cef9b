# routes/products.py

from fastapi import APIRouter, Depends
from typing import Optional

from database import get_store
from models import ProductCategory, ProductCreate, ProductUpdate
from repositories import ProductRepository

router = APIRouter(prefix="/products", tags=["Products"])


def get_product_repository(store=Depends(get_store)) -> ProductRepository:
    return ProductRepository(store)


@router.get("")
def list_products(
    category: Optional[ProductCategory] = None,
    search: Optional[str] = None,
    repo: ProductRepository = Depends(get_product_repository),
):
    if search:
        products = repo.search_by_name(search)
        if category:
            products = [p for p in products if p.category == category]
    elif category:
        products = repo.get_by_category(category)
    else:
        products = repo.get_all()
    return {"products": products, "count": len(products)}

@router.get("/top-rated")
def top_rated_products(limit: int = 10, repo: ProductRepository = Depends(get_product_repository)):
    products = repo.get_top_rated(limit)
    return {"products": products, "count": len(products)}

@router.get("/{product_id}")
def get_product(product_id: str, repo: ProductRepository = Depends(get_product_repository)):
    return repo.get_by_id_or_raise(product_id)

@router.post("", status_code=201)
def create_product(payload: ProductCreate, repo: ProductRepository = Depends(get_product_repository)):
    return repo.create_product(payload)

@router.put("/{product_id}")
def update_product(product_id: str, payload: ProductUpdate, repo: ProductRepository = Depends(get_product_repository)):
    return repo.update_product(product_id, payload)

@router.delete("/{product_id}")
def delete_product(product_id: str, repo: ProductRepository = Depends(get_product_repository)):
    repo.delete(product_id)
    return {"message": "Product deleted"}
