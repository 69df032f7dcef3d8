from fastmcp import FastMCP
from datetime import datetime
from typing import Optional, Union
import pytz
import logging
import time

# Import our modules
import rates
from models import ErrorCode, CalculationResult, CustomerTier
from config import ConfigCache
from validators import InputValidator
from calculator import FreightCalculator
from exceptions import ConfigurationDefect
from sheetCredential import CalculationRecorder, build_record

# LOGGING CONFIGURATION

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# INITIALIZE MCP SERVER

mcp = FastMCP("Freight Fee Service")

recorder = CalculationRecorder()

Number = Union[float, str]


def _persist_calculation(request_id: str, user_id: Optional[str], params: dict,
                         result: CalculationResult, config: dict):
    """Hand the calculation to the recorder without waiting for the write"""
    if not config.get("sheet_id"):
        logger.debug(f"[{request_id}] Persistence disabled (no SHEET_ID)")
        return
    try:
        row = build_record(user_id, params, result, config["timezone"])
        recorder.record(row)
    except Exception as e:
        logger.error(f"[{request_id}] Could not queue calculation record: {str(e)}")


# MCP TOOLS

def shipping_fee_estimate(
    width: Optional[Number] = None,
    length: Optional[Number] = None,
    height: Optional[Number] = None,
    weight: Optional[Number] = None,
    product_type: Optional[str] = None,
    shipping_method: Optional[str] = None,
    cumulative_amount: Optional[Number] = 0,
    rank: Optional[str] = None,
    user_id: Optional[str] = None
) -> dict:
    """
    Calculate the China-to-Thailand shipping fee for one shipment.

    Dimensions are in cm, weight in kg. The fee is billed by weight or by
    volume (CBM), whichever is higher. The customer rank is derived from
    cumulative_amount unless rank is given explicitly.

    Returns:
        Dictionary with fee, billing method, tier and volume, or error information
    """
    request_id = f"{int(time.time() * 1000)}"
    logger.info(
        f"[{request_id}] Fee request: {width}x{length}x{height} cm, {weight} kg, "
        f"type={product_type}, method={shipping_method}, user={user_id}"
    )

    params = {
        "width": width,
        "length": length,
        "height": height,
        "weight": weight,
        "productType": product_type,
        "shippingMethod": shipping_method,
        "cumulativeAmount": cumulative_amount,
        "rank": rank,
    }

    try:
        config = ConfigCache.get_config()

        outcome = FreightCalculator.calculate(params, config)
        if not isinstance(outcome, CalculationResult):
            logger.warning(f"[{request_id}] Invalid input: {outcome.problems}")
            return outcome.to_dict()

        _persist_calculation(request_id, user_id, params, outcome, config)

        logger.info(f"[{request_id}] Fee request completed: {outcome.fee:.2f} ({outcome.method.value})")
        return outcome.to_dict()

    except ConfigurationDefect:
        logger.exception(f"[{request_id}] Rate configuration defect")
        return {
            "error": "Service temporarily unavailable. Please try again later.",
            "error_code": ErrorCode.CONFIG_ERROR.value
        }
    except Exception:
        logger.exception(f"[{request_id}] Unexpected error in shipping_fee_estimate")
        return {
            "error": "An unexpected error occurred",
            "error_code": ErrorCode.INTERNAL_ERROR.value
        }


def shipping_rates(rank: str = "SILVER", shipping_method: str = "land") -> dict:
    """
    List per-kg and per-CBM rates for a rank and shipping method

    Returns:
        Dictionary with rates per product type
    """
    problems = []
    rank_valid, tier, rank_error = InputValidator.normalize_rank(rank)
    if not rank_valid:
        problems.append(rank_error)
    mode_valid, mode, mode_error = InputValidator.normalize_shipping_method(shipping_method)
    if not mode_valid:
        problems.append(mode_error)

    if problems:
        return {
            "error": "; ".join(problems),
            "error_code": ErrorCode.INVALID_INPUT.value,
            "problems": problems
        }

    return {
        "status": "success",
        "rank": tier.value,
        "shipping_method": mode.value,
        "rates": {
            category.value: entry.to_dict()
            for category, entry in rates.rates_for(tier, mode).items()
        },
        "note": "Fee is billed by actual weight or by CBM, whichever is higher"
    }


def rank_info() -> dict:
    """
    Describe customer ranks and the cumulative spend that qualifies for each

    Returns:
        Dictionary with rank thresholds in THB
    """
    lower_bounds = {tier: threshold for threshold, tier in FreightCalculator.RANK_THRESHOLDS}
    ranks = []
    for tier in CustomerTier:
        ranks.append({
            "rank": tier.value,
            "above_amount": lower_bounds.get(tier, 0)
        })
    return {
        "status": "success",
        "ranks": ranks,
        "note": "Higher ranks get lower shipping rates"
    }


def health_check() -> dict:
    """
    Health check endpoint for monitoring

    Returns:
        Dictionary with service health status
    """
    try:
        config = ConfigCache.get_config()
        config_status = "ok" if config else "error"

        try:
            rates.check_completeness(rates.RATE_TABLE)
            rates_status = "ok"
        except ConfigurationDefect:
            rates_status = "error"

        overall_status = "healthy" if (config_status == "ok" and rates_status == "ok") else "unhealthy"

        return {
            "status": overall_status,
            "timestamp": datetime.now(pytz.UTC).isoformat(),
            "checks": {
                "configuration": config_status,
                "rate_table": rates_status,
                "persistence": "enabled" if config.get("sheet_id") else "disabled"
            }
        }
    except Exception as e:
        logger.error(f"Health check failed: {str(e)}")
        return {
            "status": "unhealthy",
            "timestamp": datetime.now(pytz.UTC).isoformat(),
            "error": str(e)
        }


mcp.tool()(shipping_fee_estimate)
mcp.tool()(shipping_rates)
mcp.tool()(rank_info)
mcp.tool()(health_check)


# ============================================
# RUN SERVER
# ============================================

if __name__ == "__main__":
    logger.info("Starting Freight Fee Service")
    logger.info(f"Server will run on http://localhost:8080")

    try:
        config = ConfigCache.get_config()
        logger.info(
            f"Configuration loaded: max dimension {config['max_dimension_cm']:g} cm, "
            f"max weight {config['max_weight_kg']:g} kg, {len(rates.RATE_TABLE)} rate entries"
        )

        mcp.run(transport="http", port=8080)

    except Exception as e:
        logger.critical(f"Failed to start server: {str(e)}")
        raise
