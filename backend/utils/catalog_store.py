# backend/utils/catalog_store.py
from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from models.product import Product


def fetch_all_products(db: Session) -> List[Product]:
    """Every product with its variants loaded, ordered by id."""
    return (
        db.query(Product)
        .options(selectinload(Product.variants))
        .order_by(Product.id)
        .all()
    )


def get_product(db: Session, product_id: int) -> Optional[Product]:
    return (
        db.query(Product)
        .options(selectinload(Product.variants))
        .filter(Product.id == product_id)
        .first()
    )
