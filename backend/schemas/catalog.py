# backend/schemas/catalog.py
from typing import Any, List, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10

SORTABLE_COLUMNS = (
    "name", "company", "category", "brand",
    "unitSize", "price", "stockQuantity", "status",
)

# snake_case spellings accepted for the camelCase sort columns
_SORT_COLUMN_ALIASES = {
    "unit_size": "unitSize",
    "stock_quantity": "stockQuantity",
    "stock_status": "status",
}

_TRUTHY = {"true", "1", "yes", "on"}


def _blank_to_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        value = str(value)
    return value if value.strip() else None


def _to_int(value: Any, default: int) -> int:
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


# A single catalog line: one product paired with one of its variants
class CatalogRow(NamedTuple):
    product: Any
    variant: Any


class ProductQuery(BaseModel):
    """Immutable catalog query built from loosely typed query-string input.

    Malformed values never raise: unknown sort columns and directions are
    dropped, and non-numeric page/limit fall back to 1 and 10.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    search: Optional[str] = None
    company: Optional[str] = None
    category: Optional[str] = None
    brand: Optional[str] = None
    size: Optional[str] = None
    in_stock_only: bool = Field(False, alias="inStockOnly")
    sort_column: Optional[str] = Field(None, alias="sortColumn")
    sort_direction: Optional[str] = Field(None, alias="sortDirection")
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @field_validator("search", "company", "category", "brand", "size", mode="before")
    @classmethod
    def clean_text(cls, value):
        return _blank_to_none(value)

    @field_validator("in_stock_only", mode="before")
    @classmethod
    def clean_flag(cls, value):
        if isinstance(value, bool):
            return value
        if value is None:
            return False
        return str(value).strip().lower() in _TRUTHY

    @field_validator("sort_column", mode="before")
    @classmethod
    def clean_sort_column(cls, value):
        value = _blank_to_none(value)
        if value is None:
            return None
        value = _SORT_COLUMN_ALIASES.get(value, value)
        return value if value in SORTABLE_COLUMNS else None

    @field_validator("sort_direction", mode="before")
    @classmethod
    def clean_sort_direction(cls, value):
        value = _blank_to_none(value)
        if value is None:
            return None
        value = value.strip().lower()
        return value if value in ("asc", "desc") else None

    @field_validator("page", mode="before")
    @classmethod
    def clean_page(cls, value):
        return max(1, _to_int(value, DEFAULT_PAGE))

    @field_validator("limit", mode="before")
    @classmethod
    def clean_limit(cls, value):
        limit = _to_int(value, DEFAULT_LIMIT)
        return limit if limit >= 1 else DEFAULT_LIMIT


# Coarse facet selection driving the cascading option lists
class FacetSelection(BaseModel):
    model_config = ConfigDict(frozen=True)

    company: Optional[str] = None
    category: Optional[str] = None
    brand: Optional[str] = None

    @field_validator("company", "category", "brand", mode="before")
    @classmethod
    def clean_text(cls, value):
        return _blank_to_none(value)


class FacetOptions(BaseModel):
    companies: List[str] = []
    categories: List[str] = []
    brands: List[str] = []
    sizes: List[str] = []


class QueryResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    items: List[CatalogRow]
    total_count: int
    facet_options: FacetOptions
    page: int
    limit: int


# ---- HTTP response bodies (camelCase keys) ----

class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class VariantOut(CamelModel):
    id: Optional[int] = None
    product_id: Optional[int] = None
    unit_size: str
    price: float
    stock_quantity: Optional[int] = None
    is_available: bool
    stock_status: int


class CatalogItemOut(CamelModel):
    id: Optional[int] = None
    name: str
    company: Optional[str] = None
    category: Optional[str] = None
    brand: Optional[str] = None
    image_url: Optional[str] = None
    variant: VariantOut

    @classmethod
    def from_row(cls, row: CatalogRow) -> "CatalogItemOut":
        product, variant = row
        return cls(
            id=product.id,
            name=product.name,
            company=product.company,
            category=product.category,
            brand=product.brand,
            image_url=getattr(product, "image_url", None),
            variant=VariantOut.model_validate(variant),
        )


class ProductWithVariantsOut(CamelModel):
    id: Optional[int] = None
    name: str
    company: Optional[str] = None
    category: Optional[str] = None
    brand: Optional[str] = None
    image_url: Optional[str] = None
    variants: List[VariantOut]


class ProductQueryResponse(CamelModel):
    data: List[CatalogItemOut]
    total_count: int
    companies: List[str]
    categories: List[str]
    brands: List[str]
    sizes: List[str]

    @classmethod
    def from_result(cls, result: QueryResult) -> "ProductQueryResponse":
        facets = result.facet_options
        return cls(
            data=[CatalogItemOut.from_row(row) for row in result.items],
            total_count=result.total_count,
            companies=facets.companies,
            categories=facets.categories,
            brands=facets.brands,
            sizes=facets.sizes,
        )
