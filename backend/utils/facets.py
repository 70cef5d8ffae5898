# backend/utils/facets.py
"""Cascading facet options for the catalog filters.

The hierarchy is company > category > brand > size. The options offered
for one level are computed from the products that match only the coarser
selections, so picking a company narrows the categories but picking a
category never narrows the companies.
"""
from typing import Iterable, List, Optional, Sequence

from schemas.catalog import FacetOptions, FacetSelection


def _narrow(products: Sequence, field: str, value: Optional[str]) -> List:
    # One pipeline stage: a new list, the input is left untouched
    if not value:
        return list(products)
    return [p for p in products if getattr(p, field, None) == value]


def _distinct_sorted(values: Iterable[Optional[str]]) -> List[str]:
    return sorted({v for v in values if v})


def unique_companies(products: Sequence) -> List[str]:
    return _distinct_sorted(p.company for p in products)


def unique_categories(products: Sequence, company: Optional[str] = None) -> List[str]:
    scoped = _narrow(products, "company", company)
    return _distinct_sorted(p.category for p in scoped)


def unique_brands(
    products: Sequence,
    company: Optional[str] = None,
    category: Optional[str] = None,
) -> List[str]:
    scoped = _narrow(_narrow(products, "company", company), "category", category)
    return _distinct_sorted(p.brand for p in scoped)


def unique_sizes(
    products: Sequence,
    company: Optional[str] = None,
    category: Optional[str] = None,
    brand: Optional[str] = None,
) -> List[str]:
    scoped = _narrow(products, "company", company)
    scoped = _narrow(scoped, "category", category)
    scoped = _narrow(scoped, "brand", brand)
    return _distinct_sorted(v.unit_size for p in scoped for v in p.variants)


def resolve_facets(products: Sequence, selection: Optional[FacetSelection] = None) -> FacetOptions:
    """Option lists for every facet level given the current coarse selection."""
    selection = selection or FacetSelection()
    return FacetOptions(
        companies=unique_companies(products),
        categories=unique_categories(products, selection.company),
        brands=unique_brands(products, selection.company, selection.category),
        sizes=unique_sizes(products, selection.company, selection.category, selection.brand),
    )
