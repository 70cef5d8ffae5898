# backend/utils/stock.py
"""Stock status and unit size helpers shared by the catalog query engine.

Both derived values are computed on read and never stored.
"""
import enum
import re
from typing import Optional

# Fixed business rule: up to this many units counts as "low stock"
LOW_STOCK_THRESHOLD = 10

_UNIT_SIZE_RE = re.compile(r"^(\d+(\.\d+)?)(.*)", re.ASCII)


class StockStatus(enum.IntEnum):
    OUT = 0
    LOW = 1
    IN = 2


# Query-string spelling used by the /products/stock-status endpoint
_STOCK_FILTERS = {
    "out": StockStatus.OUT,
    "low": StockStatus.LOW,
    "in": StockStatus.IN,
}


def is_available(quantity: Optional[int]) -> bool:
    return quantity is not None and quantity > 0


def stock_status(quantity: Optional[int]) -> StockStatus:
    """Classify a stock quantity.

    Untracked stock (None) and zero stock both report OUT.
    """
    if not quantity or quantity <= 0:
        return StockStatus.OUT
    if quantity <= LOW_STOCK_THRESHOLD:
        return StockStatus.LOW
    return StockStatus.IN


def parse_stock_filter(value: Optional[str]) -> Optional[StockStatus]:
    if not value:
        return None
    return _STOCK_FILTERS.get(value.strip().lower())


def parse_unit_size(value: Optional[str]) -> float:
    """Turn a free-form size such as "200g" or "1.5kg" into a sortable number.

    "kg" is scaled to grams. Every other suffix ("g", "ml", "pcs", none)
    keeps the bare number, so "500ml" sorts as 500. Strings without a
    leading number parse as 0.
    """
    if not value:
        return 0
    match = _UNIT_SIZE_RE.match(value)
    if not match:
        return 0

    number = float(match.group(1))
    unit = match.group(3).lower()
    if unit == "kg":
        return number * 1000
    return number
