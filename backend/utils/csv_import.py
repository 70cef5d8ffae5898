# backend/utils/csv_import.py
"""Bulk product import from a CSV export.

One CSV row describes one variant. Products are matched by name and
variants by (product, unit_size); matches are updated in place, anything
else is created. The whole file is applied in a single transaction.
"""
import io
import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Optional

import pandas as pd
from sqlalchemy.orm import Session

from models.product import Product, ProductVariant

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("name", "company", "category", "brand", "unit_size", "price", "stock_quantity")


class CSVImportError(ValueError):
    pass


def _optional_text(value: str) -> Optional[str]:
    value = (value or "").strip()
    return value or None


def _parse_price(value: str, line: int) -> Decimal:
    try:
        price = Decimal((value or "").strip())
    except InvalidOperation:
        raise CSVImportError(f"Line {line}: invalid price '{value}'")
    # Decimal accepts "NaN" and "Infinity"
    if not price.is_finite():
        raise CSVImportError(f"Line {line}: invalid price '{value}'")
    if price < 0:
        raise CSVImportError(f"Line {line}: price must be >= 0")
    return price


def _parse_stock(value: str, line: int) -> Optional[int]:
    # Blank stock means the variant is not stock-tracked
    value = (value or "").strip()
    if not value:
        return None
    try:
        stock = int(float(value))
    except (ValueError, OverflowError):
        raise CSVImportError(f"Line {line}: invalid stock_quantity '{value}'")
    if stock < 0:
        raise CSVImportError(f"Line {line}: stock_quantity must be >= 0")
    return stock


def read_products_csv(content: bytes) -> pd.DataFrame:
    try:
        df = pd.read_csv(io.BytesIO(content), dtype=str, keep_default_na=False)
    except (pd.errors.EmptyDataError, pd.errors.ParserError, UnicodeDecodeError) as e:
        raise CSVImportError(f"Failed to process CSV file: {e}")

    df.columns = [c.strip() for c in df.columns]
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise CSVImportError(
            f"Missing required fields: {', '.join(missing)}. "
            f"CSV columns found: {', '.join(df.columns)}"
        )
    return df


def import_products(db: Session, content: bytes) -> Dict[str, int]:
    """Upsert every row of the CSV. Rolls back and raises CSVImportError on any bad row."""
    df = read_products_csv(content)
    stats = {"rows": 0, "products_created": 0, "variants_created": 0, "variants_updated": 0}
    products: Dict[str, Product] = {}

    try:
        # Header is line 1
        for line, row in enumerate(df.to_dict(orient="records"), start=2):
            name = _optional_text(row["name"])
            unit_size = _optional_text(row["unit_size"])
            if not name or not unit_size:
                raise CSVImportError(f"Line {line}: name and unit_size are required")

            price = _parse_price(row["price"], line)
            stock = _parse_stock(row["stock_quantity"], line)

            product = products.get(name) or db.query(Product).filter(Product.name == name).first()
            if product is None:
                product = Product(name=name)
                db.add(product)
                stats["products_created"] += 1
            products[name] = product

            product.company = _optional_text(row["company"])
            product.category = _optional_text(row["category"])
            product.brand = _optional_text(row["brand"])

            variant = next((v for v in product.variants if v.unit_size == unit_size), None)
            if variant is None:
                product.variants.append(ProductVariant(unit_size=unit_size, price=price, stock_quantity=stock))
                stats["variants_created"] += 1
            else:
                variant.price = price
                variant.stock_quantity = stock
                stats["variants_updated"] += 1
            stats["rows"] += 1

        db.commit()
    except Exception:
        db.rollback()
        logger.exception("CSV import rolled back")
        raise

    logger.info("CSV import finished: %s", stats)
    return stats
