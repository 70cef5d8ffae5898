"""ProductQuery turns loose query-string values into a well-formed query."""

import pytest
from pydantic import ValidationError

from schemas.catalog import DEFAULT_LIMIT, ProductQuery


class TestDefaults:
    def test_empty_query(self):
        query = ProductQuery()
        assert query.page == 1
        assert query.limit == DEFAULT_LIMIT == 10
        assert query.in_stock_only is False
        assert query.sort_column is None
        assert query.sort_direction is None

    def test_accepts_camel_and_snake_names(self):
        assert ProductQuery(inStockOnly=True).in_stock_only is True
        assert ProductQuery(in_stock_only=True).in_stock_only is True
        assert ProductQuery(sortColumn="price").sort_column == "price"
        assert ProductQuery(sort_column="price").sort_column == "price"


class TestCoercion:
    @pytest.mark.parametrize("raw", ["abc", None, "", "0", "-2", 0, "2.5", "3abc"])
    def test_bad_page_falls_back_to_first(self, raw):
        assert ProductQuery(page=raw).page == 1

    @pytest.mark.parametrize("raw", ["abc", None, "", "0", "-5", 0, "2.5", "25abc"])
    def test_bad_limit_falls_back_to_default(self, raw):
        assert ProductQuery(limit=raw).limit == 10

    def test_numeric_strings(self):
        query = ProductQuery(page="3", limit="25")
        assert (query.page, query.limit) == (3, 25)

    @pytest.mark.parametrize("raw,expected", [
        ("true", True), ("TRUE", True), ("1", True), ("yes", True),
        ("false", False), ("0", False), ("", False), (None, False),
    ])
    def test_in_stock_flag(self, raw, expected):
        assert ProductQuery(inStockOnly=raw).in_stock_only is expected

    def test_blank_filters_are_absent(self):
        query = ProductQuery(search="   ", company="", category=None, brand=" ", size="")
        assert query.search is None
        assert query.company is None
        assert query.brand is None
        assert query.size is None

    def test_unknown_sort_column_is_dropped(self):
        assert ProductQuery(sortColumn="id").sort_column is None

    def test_snake_case_sort_columns(self):
        assert ProductQuery(sortColumn="unit_size").sort_column == "unitSize"
        assert ProductQuery(sortColumn="stock_quantity").sort_column == "stockQuantity"

    def test_sort_direction_is_normalised(self):
        assert ProductQuery(sortDirection="DESC").sort_direction == "desc"
        assert ProductQuery(sortDirection="sideways").sort_direction is None


def test_query_is_immutable():
    query = ProductQuery(company="A")
    with pytest.raises(ValidationError):
        query.company = "B"
