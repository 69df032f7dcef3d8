"""
validators.py - Input Validation and Normalization
"""

import logging
import math
from typing import Any, Dict, Optional, Tuple

from models import (
    CalculationRequest,
    CustomerTier,
    ProductCategory,
    TransportMode,
    ValidationResult,
)

logger = logging.getLogger(__name__)


def _canonical(text: str) -> str:
    return " ".join(text.strip().lower().split())


class InputValidator:
    """Validates and normalizes calculation parameters"""

    # Checked in this order; problems are reported in the same order
    DIMENSION_FIELDS = [("width", "Width"), ("length", "Length"), ("height", "Height")]

    DEFAULT_MAX_DIMENSION_CM = 1000.0
    DEFAULT_MAX_WEIGHT_KG = 10000.0

    PRODUCT_TYPE_ALIASES = {
        "general": ProductCategory.GENERAL,
        "ทั่วไป": ProductCategory.GENERAL,
        "type1-2": ProductCategory.TYPE_1_2,
        "type 1-2": ProductCategory.TYPE_1_2,
        "type1,2": ProductCategory.TYPE_1_2,
        "type 1,2": ProductCategory.TYPE_1_2,
        "ประเภท 1,2": ProductCategory.TYPE_1_2,
        "ประเภท1,2": ProductCategory.TYPE_1_2,
        "special": ProductCategory.SPECIAL,
        "พิเศษ": ProductCategory.SPECIAL,
    }

    SHIPPING_METHOD_ALIASES = {
        "land": TransportMode.LAND,
        "car": TransportMode.LAND,
        "truck": TransportMode.LAND,
        "รถ": TransportMode.LAND,
        "sea": TransportMode.SEA,
        "ship": TransportMode.SEA,
        "boat": TransportMode.SEA,
        "เรือ": TransportMode.SEA,
    }

    @staticmethod
    def _parse_number(value: Any, unit: str) -> Optional[float]:
        """Parse an int, float or numeric string (optionally suffixed with its unit)"""
        if isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            try:
                number = float(value)
            except OverflowError:
                return None
        elif isinstance(value, str):
            text = value.strip().lower()
            if text.endswith(unit):
                text = text[:-len(unit)].strip()
            try:
                number = float(text)
            except ValueError:
                return None
        else:
            return None
        return number if math.isfinite(number) else None

    @staticmethod
    def validate_measurement(
        value: Any,
        label: str,
        unit: str,
        maximum: Optional[float] = None
    ) -> Tuple[bool, Optional[float], Optional[str]]:
        """
        Validate a dimension or weight value

        Checks presence, numeric type, sign and upper bound, stopping at
        the first failure for this value.

        Args:
            value: Raw input value
            label: Human-readable field name for messages
            unit: Unit suffix accepted on string input ("cm" or "kg")
            maximum: Inclusive upper bound, or None for no bound

        Returns:
            Tuple of (is_valid, normalized_value, error_message)
        """
        if value is None or (isinstance(value, str) and not value.strip()):
            return False, None, f"{label} is required"

        number = InputValidator._parse_number(value, unit)
        if number is None:
            return False, None, f"{label} must be a number"

        if number == 0:
            return False, None, f"{label} is required"

        if number < 0:
            return False, None, f"{label} must be greater than 0 {unit}"

        if maximum is not None and number > maximum:
            return False, None, f"{label} exceeds maximum of {maximum:g} {unit}"

        return True, number, None

    @staticmethod
    def validate_cumulative_amount(value: Any) -> Tuple[bool, Optional[float], Optional[str]]:
        """
        Validate cumulative spend; missing means 0

        Returns:
            Tuple of (is_valid, normalized_value, error_message)
        """
        if value is None or (isinstance(value, str) and not value.strip()):
            return True, 0.0, None

        number = InputValidator._parse_number(value, "thb")
        if number is None:
            return False, None, "Cumulative amount must be a number"

        if number < 0:
            return False, None, "Cumulative amount cannot be negative"

        return True, number, None

    @staticmethod
    def _normalize_choice(value: Any, label: str, enum_cls, aliases: Dict) -> Tuple[bool, Any, Optional[str]]:
        valid_options = ", ".join(member.value for member in enum_cls)

        if isinstance(value, enum_cls):
            return True, value, None

        if not value:
            return False, None, f"{label} is required. Valid options: {valid_options}"

        if not isinstance(value, str):
            return False, None, f"{label} must be a string. Valid options: {valid_options}"

        key = _canonical(value)
        normalized = aliases.get(key)
        if normalized is None:
            return False, None, f"Invalid {label.lower()} '{value.strip()}'. Valid options: {valid_options}"

        logger.debug(f"{label} normalized: '{value}' -> '{normalized.value}'")
        return True, normalized, None

    @staticmethod
    def normalize_product_type(value: Any) -> Tuple[bool, Optional[ProductCategory], Optional[str]]:
        """
        Map free-text product type to ProductCategory

        Returns:
            Tuple of (is_valid, normalized_value, error_message)
        """
        return InputValidator._normalize_choice(
            value, "Product type", ProductCategory, InputValidator.PRODUCT_TYPE_ALIASES
        )

    @staticmethod
    def normalize_shipping_method(value: Any) -> Tuple[bool, Optional[TransportMode], Optional[str]]:
        """
        Map free-text shipping method to TransportMode

        Returns:
            Tuple of (is_valid, normalized_value, error_message)
        """
        return InputValidator._normalize_choice(
            value, "Shipping method", TransportMode, InputValidator.SHIPPING_METHOD_ALIASES
        )

    @staticmethod
    def normalize_rank(value: Any) -> Tuple[bool, Optional[CustomerTier], Optional[str]]:
        """
        Map free-text rank ("Silver", "silver rabbit", ...) to CustomerTier

        Returns:
            Tuple of (is_valid, normalized_value, error_message)
        """
        aliases = {}
        for tier in CustomerTier:
            aliases[tier.value.lower()] = tier
            aliases[f"{tier.value.lower()} rabbit"] = tier
        return InputValidator._normalize_choice(value, "Rank", CustomerTier, aliases)

    @staticmethod
    def validate(params: Dict[str, Any], config: Optional[Dict] = None) -> ValidationResult:
        """
        Validate a raw parameter bag, accumulating every problem

        Args:
            params: Keys width, length, height, weight, productType,
                shippingMethod, and optionally cumulativeAmount and rank
            config: Engine configuration (maxima and strictness)

        Returns:
            ValidationResult; ``request`` is set only when ``ok`` is True
        """
        config = config or {}
        strict = config.get("strict_validation", True)
        max_dimension = config.get("max_dimension_cm", InputValidator.DEFAULT_MAX_DIMENSION_CM)
        max_weight = config.get("max_weight_kg", InputValidator.DEFAULT_MAX_WEIGHT_KG)

        problems = []
        values = {}

        for key, label in InputValidator.DIMENSION_FIELDS:
            valid, number, error = InputValidator.validate_measurement(
                params.get(key), label, "cm", max_dimension if strict else None
            )
            if valid:
                values[key] = number
            else:
                problems.append(error)

        valid, number, error = InputValidator.validate_measurement(
            params.get("weight"), "Weight", "kg", max_weight
        )
        if valid:
            values["weight"] = number
        else:
            problems.append(error)

        valid, category, error = InputValidator.normalize_product_type(params.get("productType"))
        if not valid:
            problems.append(error)

        valid, mode, error = InputValidator.normalize_shipping_method(params.get("shippingMethod"))
        if not valid:
            problems.append(error)

        valid, amount, error = InputValidator.validate_cumulative_amount(params.get("cumulativeAmount"))
        if not valid:
            problems.append(error)

        rank = None
        if params.get("rank"):
            valid, rank, error = InputValidator.normalize_rank(params.get("rank"))
            if not valid:
                problems.append(error)

        if problems:
            logger.debug(f"Validation failed with {len(problems)} problem(s): {problems}")
            return ValidationResult(ok=False, problems=problems)

        request = CalculationRequest(
            width=values["width"],
            length=values["length"],
            height=values["height"],
            weight=values["weight"],
            product_type=category,
            shipping_method=mode,
            cumulative_amount=amount,
            rank=rank
        )
        return ValidationResult(ok=True, request=request)
