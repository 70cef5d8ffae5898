# backend/routes/products.py
from typing import Optional, List
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from database import get_db
from schemas.catalog import (
    FacetSelection,
    ProductQuery,
    ProductQueryResponse,
    ProductWithVariantsOut,
    VariantOut,
)
from utils.catalog_store import fetch_all_products, get_product
from utils.facets import unique_brands, unique_categories, unique_companies, unique_sizes
from utils.query_engine import run_query, filter_by_stock_status
from utils.stock import parse_stock_filter

router = APIRouter(prefix="/products", tags=["Products"])


# ---- HELPERS ----
def get_catalog(request: Request, db: Session = Depends(get_db)) -> list:
    """Product collection for this request, served from the app's snapshot cache."""
    cache = getattr(request.app.state, "catalog_cache", None)
    if cache is None:
        return fetch_all_products(db)
    return cache.get(db)


def product_query_params(
    search: Optional[str] = Query(None, description="Search by name or company"),
    company: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    brand: Optional[str] = Query(None),
    size: Optional[str] = Query(None),
    in_stock_only: Optional[str] = Query(None, alias="inStockOnly"),
    sort_column: Optional[str] = Query(None, alias="sortColumn"),
    sort_direction: Optional[str] = Query(None, alias="sortDirection"),
    # Raw strings: malformed paging values fall back to defaults instead of 422
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
) -> ProductQuery:
    return ProductQuery(
        search=search,
        company=company,
        category=category,
        brand=brand,
        size=size,
        inStockOnly=in_stock_only,
        sortColumn=sort_column,
        sortDirection=sort_direction,
        page=page,
        limit=limit,
    )


# =========================
# PRODUCT LIST (query engine)
# =========================
@router.get("", response_model=ProductQueryResponse)
def list_products(
    query: ProductQuery = Depends(product_query_params),
    products: list = Depends(get_catalog),
):
    result = run_query(products, query)
    return ProductQueryResponse.from_result(result)


# =========================
# FACET OPTIONS
# =========================
@router.get("/companies", response_model=List[str])
def get_companies(products: list = Depends(get_catalog)):
    return unique_companies(products)

@router.get("/categories", response_model=List[str])
def get_categories(
    company: Optional[str] = Query(None),
    products: list = Depends(get_catalog),
):
    selection = FacetSelection(company=company)
    return unique_categories(products, selection.company)

@router.get("/brands", response_model=List[str])
def get_brands(
    company: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    products: list = Depends(get_catalog),
):
    selection = FacetSelection(company=company, category=category)
    return unique_brands(products, selection.company, selection.category)

@router.get("/sizes", response_model=List[str])
def get_sizes(
    company: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    brand: Optional[str] = Query(None),
    products: list = Depends(get_catalog),
):
    selection = FacetSelection(company=company, category=category, brand=brand)
    return unique_sizes(products, selection.company, selection.category, selection.brand)


# =========================
# STOCK STATUS
# =========================
@router.get("/stock-status", response_model=List[ProductWithVariantsOut])
def get_products_by_stock_status(
    status: Optional[str] = Query(None, description="in | low | out"),
    products: list = Depends(get_catalog),
):
    grouped = filter_by_stock_status(products, parse_stock_filter(status))
    return [
        ProductWithVariantsOut(
            id=g["product"].id,
            name=g["product"].name,
            company=g["product"].company,
            category=g["product"].category,
            brand=g["product"].brand,
            image_url=g["product"].image_url,
            variants=[VariantOut.model_validate(v) for v in g["variants"]],
        )
        for g in grouped
    ]


# =========================
# SINGLE PRODUCT
# =========================
@router.get("/{product_id}", response_model=ProductWithVariantsOut)
def get_product_by_id(product_id: int, db: Session = Depends(get_db)):
    product = get_product(db, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return ProductWithVariantsOut.model_validate(product)
