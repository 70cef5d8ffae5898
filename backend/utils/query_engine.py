# backend/utils/query_engine.py
"""Catalog query engine: filter -> count -> sort -> paginate over a product collection.

Every function here is pure. The product collection (ORM objects or any
objects exposing the same attributes) is read, never modified; each stage
returns a new list built from the previous stage's output.
"""
import logging
from typing import Callable, Dict, List, Optional, Sequence

from schemas.catalog import (
    CatalogRow,
    FacetSelection,
    ProductQuery,
    QueryResult,
)
from utils.facets import resolve_facets
from utils.stock import StockStatus, parse_unit_size, stock_status

logger = logging.getLogger(__name__)


def flatten(products: Sequence) -> List[CatalogRow]:
    """One row per variant, in collection order."""
    return [CatalogRow(p, v) for p in products for v in p.variants]


# ---- FILTER STAGES ----

def _match_search(rows: List[CatalogRow], search: str) -> List[CatalogRow]:
    needle = search.lower()
    return [
        r for r in rows
        if needle in (r.product.name or "").lower()
        or needle in (r.product.company or "").lower()
    ]


def _match_product_field(rows: List[CatalogRow], field: str, value: str) -> List[CatalogRow]:
    return [r for r in rows if getattr(r.product, field) == value]


def _match_size(rows: List[CatalogRow], size: str) -> List[CatalogRow]:
    # Compared as written: "200g" does not match "0.2kg"
    return [r for r in rows if r.variant.unit_size == size]


def _match_in_stock(rows: List[CatalogRow]) -> List[CatalogRow]:
    return [
        r for r in rows
        if r.variant.stock_quantity is not None and r.variant.stock_quantity > 0
    ]


def filter_rows(rows: Sequence[CatalogRow], query: ProductQuery) -> List[CatalogRow]:
    """Apply every active predicate of the query; absent filters are skipped."""
    result = list(rows)
    if query.search:
        result = _match_search(result, query.search)
    if query.company:
        result = _match_product_field(result, "company", query.company)
    if query.category:
        result = _match_product_field(result, "category", query.category)
    if query.brand:
        result = _match_product_field(result, "brand", query.brand)
    if query.size:
        result = _match_size(result, query.size)
    if query.in_stock_only:
        result = _match_in_stock(result)
    return result


# ---- SORTING ----

def _text_key(field: str) -> Callable[[CatalogRow], str]:
    return lambda r: (getattr(r.product, field) or "").lower()


SORT_KEYS: Dict[str, Callable[[CatalogRow], object]] = {
    "name": _text_key("name"),
    "company": _text_key("company"),
    "category": _text_key("category"),
    "brand": _text_key("brand"),
    "unitSize": lambda r: parse_unit_size(r.variant.unit_size),
    "price": lambda r: r.variant.price if r.variant.price is not None else 0,
    "stockQuantity": lambda r: r.variant.stock_quantity or 0,
    "status": lambda r: int(stock_status(r.variant.stock_quantity)),
}


def sort_rows(
    rows: Sequence[CatalogRow],
    column: Optional[str],
    direction: Optional[str],
) -> List[CatalogRow]:
    """Stable sort by one column. Without both column and direction, order is kept."""
    key = SORT_KEYS.get(column) if column else None
    if key is None or direction not in ("asc", "desc"):
        return list(rows)
    # sorted() keeps equal keys in their prior order for reverse=True as well
    return sorted(rows, key=key, reverse=(direction == "desc"))


# ---- PAGINATION ----

def paginate(rows: Sequence[CatalogRow], page: int, limit: int) -> List[CatalogRow]:
    """Slice one page; a page past the end is empty, not an error."""
    page = max(1, page)
    start = (page - 1) * limit
    return list(rows[start:start + limit])


# ---- ENTRY POINTS ----

def run_query(products: Sequence, query: Optional[ProductQuery] = None) -> QueryResult:
    """Run a catalog query against a product collection.

    Returns the requested page, the number of matches before pagination
    and the cascading facet options for the query's company/category/brand.
    """
    query = query or ProductQuery()

    matches = filter_rows(flatten(products), query)
    total_count = len(matches)
    ordered = sort_rows(matches, query.sort_column, query.sort_direction)
    page_rows = paginate(ordered, query.page, query.limit)

    facets = resolve_facets(
        products,
        FacetSelection(company=query.company, category=query.category, brand=query.brand),
    )

    logger.debug(
        "Catalog query matched %d rows (page %d, limit %d, returned %d)",
        total_count, query.page, query.limit, len(page_rows),
    )
    return QueryResult(
        items=page_rows,
        total_count=total_count,
        facet_options=facets,
        page=query.page,
        limit=query.limit,
    )


def filter_by_stock_status(products: Sequence, status: Optional[StockStatus]) -> List[dict]:
    """Group products with only their variants in the given stock status.

    Products left without a matching variant are dropped. ``None`` keeps
    every product with all of its variants.
    """
    grouped = []
    for product in products:
        variants = [
            v for v in product.variants
            if status is None or stock_status(v.stock_quantity) == status
        ]
        if variants:
            grouped.append({"product": product, "variants": variants})
    return grouped
