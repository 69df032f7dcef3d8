"""
models.py - Data Models and Enums
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class ErrorCode(Enum):
    """Error codes for API responses"""
    INVALID_INPUT = "INVALID_INPUT"
    CONFIG_ERROR = "CONFIG_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class CustomerTier(Enum):
    """Customer loyalty tier, derived from cumulative spend"""
    SILVER = "SILVER"
    DIAMOND = "DIAMOND"
    STAR = "STAR"


class ProductCategory(Enum):
    GENERAL = "general"
    TYPE_1_2 = "type1-2"
    SPECIAL = "special"


class TransportMode(Enum):
    LAND = "land"
    SEA = "sea"


class BillingMethod(Enum):
    """Which side of the weight-vs-volume comparison was billed"""
    WEIGHT = "WEIGHT"
    VOLUME = "VOLUME"


@dataclass(frozen=True)
class RateEntry:
    """Unit prices in THB for one (tier, mode, category) cell"""
    per_kg: float
    per_cbm: float

    def to_dict(self) -> dict:
        return {"per_kg": self.per_kg, "per_cbm": self.per_cbm}


@dataclass(frozen=True)
class FeeResult:
    fee: float
    method: BillingMethod
    weight_fee: float
    volume_fee: float


@dataclass(frozen=True)
class CalculationRequest:
    """Validated and normalized calculation parameters"""
    width: float
    length: float
    height: float
    weight: float
    product_type: ProductCategory
    shipping_method: TransportMode
    cumulative_amount: float = 0.0
    rank: Optional[CustomerTier] = None


@dataclass
class ValidationResult:
    """Outcome of validating a raw parameter bag"""
    ok: bool
    problems: List[str] = field(default_factory=list)
    request: Optional[CalculationRequest] = None


@dataclass(frozen=True)
class ValidationFailure:
    problems: List[str]

    def to_dict(self) -> dict:
        """Convert to dictionary for API response"""
        return {
            "error": "Invalid input: " + "; ".join(self.problems),
            "error_code": ErrorCode.INVALID_INPUT.value,
            "problems": list(self.problems)
        }


@dataclass(frozen=True)
class CalculationResult:
    """Shipping fee calculation result"""
    fee: float
    method: BillingMethod
    tier: CustomerTier
    volume: float
    weight: float
    product_type: ProductCategory
    shipping_method: TransportMode
    rate: RateEntry
    weight_fee: float
    volume_fee: float

    @property
    def note(self) -> str:
        basis = "volume (CBM)" if self.method is BillingMethod.VOLUME else "weight (kg)"
        return (
            f"Billed by {basis}: {self.fee:,.2f} THB "
            f"(weight {self.weight_fee:,.2f} vs volume {self.volume_fee:,.2f})"
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for API response"""
        return {
            "fee": self.fee,
            "method": self.method.value,
            "tier": self.tier.value,
            "volume": self.volume,
            "weight": self.weight,
            "product_type": self.product_type.value,
            "shipping_method": self.shipping_method.value,
            "rate": self.rate.to_dict(),
            "weight_fee": self.weight_fee,
            "volume_fee": self.volume_fee,
            "note": self.note
        }
