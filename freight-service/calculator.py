"""
calculator.py - Freight Fee Calculations
"""

import logging
import math
from numbers import Real
from typing import Dict, Optional, Union

import rates
from exceptions import InvalidRateError
from models import (
    BillingMethod,
    CalculationResult,
    CustomerTier,
    FeeResult,
    RateEntry,
    ValidationFailure,
)
from validators import InputValidator

logger = logging.getLogger(__name__)


class FreightCalculator:
    """Stateless freight fee engine: volume, rank, rate lookup and billing decision"""

    # cm^3 -> m^3; defines the CBM unit the rate table is priced in
    CM3_PER_CBM = 1_000_000

    # (exclusive lower bound, tier), highest first
    RANK_THRESHOLDS = (
        (2_000_000, CustomerTier.STAR),
        (500_000, CustomerTier.DIAMOND),
    )

    @staticmethod
    def volume(width: float, length: float, height: float) -> float:
        """
        Volume in CBM from dimensions in centimeters

        Args:
            width: Width in cm
            length: Length in cm
            height: Height in cm

        Returns:
            Volume in cubic meters
        """
        return width * length * height / FreightCalculator.CM3_PER_CBM

    @staticmethod
    def classify_rank(cumulative_amount: float) -> CustomerTier:
        """
        Map cumulative spend (THB) to a customer tier

        Both breakpoints are strict: exactly 500,000 is SILVER and exactly
        2,000,000 is DIAMOND.
        """
        for threshold, tier in FreightCalculator.RANK_THRESHOLDS:
            if cumulative_amount > threshold:
                return tier
        return CustomerTier.SILVER

    @staticmethod
    def _is_positive_number(value) -> bool:
        return (
            isinstance(value, Real)
            and not isinstance(value, bool)
            and math.isfinite(value)
            and value > 0
        )

    @staticmethod
    def resolve_fee(weight: float, volume: float, rate: Optional[RateEntry]) -> FeeResult:
        """
        Bill the larger of weight-based and volume-based cost

        Ties go to WEIGHT.

        Args:
            weight: Chargeable weight in kg
            volume: Volume in CBM
            rate: Rate entry for the shipment

        Returns:
            FeeResult with the billed fee and method

        Raises:
            InvalidRateError: if rate is missing or has non-positive fields
        """
        if rate is None:
            logger.error("Fee resolution attempted without a rate entry")
            raise InvalidRateError("Rate entry is missing")

        if not (FreightCalculator._is_positive_number(rate.per_kg)
                and FreightCalculator._is_positive_number(rate.per_cbm)):
            logger.error(f"Invalid rate entry: {rate}")
            raise InvalidRateError(f"Rate entry fields must be positive numbers: {rate}")

        weight_fee = weight * rate.per_kg
        volume_fee = volume * rate.per_cbm

        if volume_fee > weight_fee:
            method = BillingMethod.VOLUME
            fee = volume_fee
        else:
            method = BillingMethod.WEIGHT
            fee = weight_fee

        logger.debug(
            f"Fee resolution: weight_fee={weight_fee}, volume_fee={volume_fee}, "
            f"method={method.value}"
        )

        return FeeResult(fee=fee, method=method, weight_fee=weight_fee, volume_fee=volume_fee)

    @staticmethod
    def calculate(
        params: Dict,
        config: Optional[Dict] = None
    ) -> Union[CalculationResult, ValidationFailure]:
        """
        Validate parameters and compute the shipping fee

        Args:
            params: Raw parameter bag (see InputValidator.validate)
            config: Engine configuration (maxima and strictness)

        Returns:
            CalculationResult on success, ValidationFailure for bad input

        Raises:
            ConfigurationDefect: if the rate data is broken
        """
        validation = InputValidator.validate(params, config)
        if not validation.ok:
            return ValidationFailure(problems=list(validation.problems))

        request = validation.request

        cbm = FreightCalculator.volume(request.width, request.length, request.height)

        if request.rank is not None:
            tier = request.rank
        else:
            tier = FreightCalculator.classify_rank(request.cumulative_amount)

        rate = rates.lookup(tier, request.shipping_method, request.product_type)
        fee = FreightCalculator.resolve_fee(request.weight, cbm, rate)

        logger.info(
            f"Fee calculated: tier={tier.value}, mode={request.shipping_method.value}, "
            f"category={request.product_type.value}, cbm={cbm}, fee={fee.fee} ({fee.method.value})"
        )

        return CalculationResult(
            fee=fee.fee,
            method=fee.method,
            tier=tier,
            volume=cbm,
            weight=request.weight,
            product_type=request.product_type,
            shipping_method=request.shipping_method,
            rate=rate,
            weight_fee=fee.weight_fee,
            volume_fee=fee.volume_fee
        )
