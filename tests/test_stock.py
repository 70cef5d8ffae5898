"""Tests for unit size parsing and stock status derivation."""

import pytest

from utils.stock import (
    LOW_STOCK_THRESHOLD,
    StockStatus,
    is_available,
    parse_stock_filter,
    parse_unit_size,
    stock_status,
)


class TestParseUnitSize:
    """parse_unit_size turns free-form sizes into sortable magnitudes."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("1kg", 1000),
            ("200g", 200),
            ("1.5kg", 1500),
            ("2KG", 2000),
            ("250", 250),
            ("0.5g", 0.5),
        ],
    )
    def test_known_units(self, value, expected):
        assert parse_unit_size(value) == expected

    def test_unknown_suffix_keeps_bare_number(self):
        """Non-gram units are not converted: 500ml sorts as 500."""
        assert parse_unit_size("500ml") == 500
        assert parse_unit_size("12pcs") == 12

    def test_suffix_with_space_is_not_kilograms(self):
        assert parse_unit_size("1 kg") == 1

    @pytest.mark.parametrize("value", ["invalid", "", None, "kg5", " 5kg"])
    def test_unparseable_is_zero(self, value):
        assert parse_unit_size(value) == 0

    @pytest.mark.parametrize("value", ["١kg", "５00g", "٢٥٠"])
    def test_non_ascii_digits_are_unparseable(self, value):
        assert parse_unit_size(value) == 0


class TestStockStatus:
    """Three-tier stock classification."""

    def test_thresholds(self):
        assert stock_status(0) == StockStatus.OUT
        assert stock_status(1) == StockStatus.LOW
        assert stock_status(10) == StockStatus.LOW
        assert stock_status(11) == StockStatus.IN

    def test_untracked_stock_is_out(self):
        assert stock_status(None) == StockStatus.OUT

    def test_ordinals(self):
        assert [int(s) for s in (StockStatus.OUT, StockStatus.LOW, StockStatus.IN)] == [0, 1, 2]

    def test_threshold_constant(self):
        assert LOW_STOCK_THRESHOLD == 10

    def test_is_available(self):
        assert is_available(3) is True
        assert is_available(0) is False
        assert is_available(None) is False


class TestParseStockFilter:
    def test_known_values(self):
        assert parse_stock_filter("in") == StockStatus.IN
        assert parse_stock_filter("LOW") == StockStatus.LOW
        assert parse_stock_filter(" out ") == StockStatus.OUT

    @pytest.mark.parametrize("value", [None, "", "all", "2"])
    def test_anything_else_means_no_filter(self, value):
        assert parse_stock_filter(value) is None
