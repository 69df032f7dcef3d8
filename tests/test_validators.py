"""
Tests for input validation and normalization
"""

import pytest

from models import CustomerTier, ProductCategory, TransportMode
from validators import InputValidator


def _params(**overrides):
    params = {
        "width": 50,
        "length": 40,
        "height": 30,
        "weight": 12,
        "productType": "general",
        "shippingMethod": "land",
    }
    params.update(overrides)
    return params


class TestValidate:
    """Test cases for InputValidator.validate"""

    def test_valid_params(self):
        result = InputValidator.validate(_params())

        assert result.ok
        assert result.problems == []
        assert result.request.width == 50.0
        assert result.request.product_type is ProductCategory.GENERAL
        assert result.request.shipping_method is TransportMode.LAND
        assert result.request.cumulative_amount == 0.0
        assert result.request.rank is None

    def test_accumulates_all_problems_in_order(self):
        params = _params(width=0, length="abc", height=-5, productType="furniture", shippingMethod="")
        del params["weight"]

        result = InputValidator.validate(params)

        assert not result.ok
        assert result.request is None
        assert result.problems[:4] == [
            "Width is required",
            "Length must be a number",
            "Height must be greater than 0 cm",
            "Weight is required",
        ]
        assert result.problems[4].startswith("Invalid product type 'furniture'")
        assert "general, type1-2, special" in result.problems[4]
        assert result.problems[5].startswith("Shipping method is required")

    def test_maximum_dimension_enforced_when_strict(self):
        result = InputValidator.validate(_params(height=1000.5), {"strict_validation": True})
        assert result.problems == ["Height exceeds maximum of 1000 cm"]

    def test_maximum_dimension_is_inclusive(self):
        config = {"strict_validation": True, "max_dimension_cm": 1000.0}
        result = InputValidator.validate(_params(height=1000), config)
        assert result.ok
        assert result.request.height == 1000.0

    def test_maximum_dimension_ignored_when_not_strict(self):
        result = InputValidator.validate(_params(height=1500), {"strict_validation": False})
        assert result.ok

    def test_maximum_weight_from_config(self):
        config = {"max_weight_kg": 500.0}
        assert InputValidator.validate(_params(weight=500), config).ok
        result = InputValidator.validate(_params(weight=500.5), config)
        assert result.problems == ["Weight exceeds maximum of 500 kg"]

    def test_numeric_strings_with_units(self):
        result = InputValidator.validate(_params(width="50 cm", weight="12kg"))
        assert result.ok
        assert result.request.width == 50.0
        assert result.request.weight == 12.0

    @pytest.mark.parametrize("value", [True, [1], float("inf"), "nan"])
    def test_non_numeric_values_rejected(self, value):
        result = InputValidator.validate(_params(weight=value))
        assert result.problems == ["Weight must be a number"]

    def test_huge_integers_rejected_not_raised(self):
        """Test ints beyond float range are reported as problems"""
        result = InputValidator.validate(_params(weight=10**400, cumulativeAmount=10**400))

        assert not result.ok
        assert result.problems == [
            "Weight must be a number",
            "Cumulative amount must be a number",
        ]

    def test_negative_cumulative_amount_rejected(self):
        result = InputValidator.validate(_params(cumulativeAmount=-1))
        assert result.problems == ["Cumulative amount cannot be negative"]

    def test_invalid_rank_rejected(self):
        result = InputValidator.validate(_params(rank="gold"))
        assert len(result.problems) == 1
        assert "SILVER, DIAMOND, STAR" in result.problems[0]


class TestNormalization:
    """Test cases for free-text enum normalization"""

    @pytest.mark.parametrize("raw, expected", [
        ("General", ProductCategory.GENERAL),
        ("ทั่วไป", ProductCategory.GENERAL),
        ("  TYPE 1,2 ", ProductCategory.TYPE_1_2),
        ("ประเภท 1,2", ProductCategory.TYPE_1_2),
        ("type1-2", ProductCategory.TYPE_1_2),
        ("Special", ProductCategory.SPECIAL),
        (ProductCategory.SPECIAL, ProductCategory.SPECIAL),
    ])
    def test_product_type(self, raw, expected):
        valid, normalized, error = InputValidator.normalize_product_type(raw)
        assert valid
        assert normalized is expected
        assert error is None

    @pytest.mark.parametrize("raw, expected", [
        ("LAND", TransportMode.LAND),
        ("รถ", TransportMode.LAND),
        ("truck", TransportMode.LAND),
        ("Sea", TransportMode.SEA),
        ("เรือ", TransportMode.SEA),
    ])
    def test_shipping_method(self, raw, expected):
        valid, normalized, _ = InputValidator.normalize_shipping_method(raw)
        assert valid
        assert normalized is expected

    @pytest.mark.parametrize("raw, expected", [
        ("silver", CustomerTier.SILVER),
        ("Silver Rabbit", CustomerTier.SILVER),
        ("DIAMOND", CustomerTier.DIAMOND),
        ("star  rabbit", CustomerTier.STAR),
    ])
    def test_rank(self, raw, expected):
        valid, normalized, _ = InputValidator.normalize_rank(raw)
        assert valid
        assert normalized is expected

    def test_non_string_choice_rejected(self):
        valid, normalized, error = InputValidator.normalize_shipping_method(42)
        assert not valid
        assert normalized is None
        assert error == "Shipping method must be a string. Valid options: land, sea"
