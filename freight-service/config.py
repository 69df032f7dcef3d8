import logging
import math
import os
import time
import pytz
import threading
from typing import Dict, Optional
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    "max_dimension_cm": 1000.0,
    "max_weight_kg": 10000.0,
    "strict_validation": True,
    "timezone": "Asia/Bangkok",
    "sheet_id": None,
}

_TRUE_VALUES = {"1", "true", "yes", "on"}


def load_from_env() -> Dict:
    """
    Read engine settings from environment variables (and .env if present)

    Returns:
        Configuration dictionary, defaults filled in for unset keys
    """
    load_dotenv()

    config = dict(DEFAULT_CONFIG)

    max_dimension = os.getenv("FREIGHT_MAX_DIMENSION_CM")
    if max_dimension:
        config["max_dimension_cm"] = float(max_dimension)

    max_weight = os.getenv("FREIGHT_MAX_WEIGHT_KG")
    if max_weight:
        config["max_weight_kg"] = float(max_weight)

    strict = os.getenv("FREIGHT_STRICT_VALIDATION")
    if strict:
        config["strict_validation"] = strict.strip().lower() in _TRUE_VALUES

    timezone = os.getenv("FREIGHT_TIMEZONE")
    if timezone:
        config["timezone"] = timezone.strip()

    config["sheet_id"] = os.getenv("SHEET_ID") or None

    return config


class ConfigCache:
    """
    Thread-safe configuration cache with TTL

    Holds validation limits and service settings only. Rates are static
    (see rates.py) and never come from here.
    """

    _cache: Optional[Dict] = None
    _cache_time: Optional[float] = None
    _cache_ttl: int = 600  # 10 minutes in seconds
    _lock = threading.Lock()

    @classmethod
    def get_config(cls, force_refresh: bool = False) -> Dict:
        """
        Get cached configuration or reload it if expired

        Args:
            force_refresh: If True, bypass cache and reload

        Returns:
            Configuration dictionary. Falls back to the stale cache, then to
            defaults, when the environment holds invalid values.
        """
        with cls._lock:
            current_time = time.time()

            if (not force_refresh and
                cls._cache is not None and
                cls._cache_time is not None and
                (current_time - cls._cache_time) < cls._cache_ttl):
                logger.debug("Using cached configuration")
                return cls._cache

            try:
                config = load_from_env()
            except ValueError as e:
                logger.error(f"Error reading configuration from environment: {str(e)}")
                config = None

            if config is None or not cls._validate_config(config):
                if cls._cache is not None:
                    logger.warning("Using stale configuration due to invalid settings")
                    return cls._cache
                logger.error("Invalid configuration, falling back to defaults")
                config = dict(DEFAULT_CONFIG)

            cls._cache = config
            cls._cache_time = current_time
            logger.info("Configuration cache updated successfully")
            return config

    @classmethod
    def _validate_config(cls, config: Dict) -> bool:
        """
        Validate configuration values

        Args:
            config: Configuration dictionary to validate

        Returns:
            True if valid, False otherwise
        """
        required_keys = ["max_dimension_cm", "max_weight_kg", "strict_validation", "timezone"]

        if not all(key in config for key in required_keys):
            logger.error(f"Missing required config keys. Required: {required_keys}")
            return False

        for key in ("max_dimension_cm", "max_weight_kg"):
            if not math.isfinite(config[key]) or config[key] <= 0:
                logger.error(f"Invalid {key}: {config[key]} (must be a positive finite number)")
                return False

        try:
            pytz.timezone(config["timezone"])
        except pytz.exceptions.UnknownTimeZoneError:
            logger.error(f"Invalid timezone: {config.get('timezone')}")
            return False

        logger.debug("Configuration validation passed")
        return True

    @classmethod
    def clear_cache(cls):
        """Clear the configuration cache (useful for testing)"""
        with cls._lock:
            cls._cache = None
            cls._cache_time = None
            logger.info("Configuration cache cleared")

    @classmethod
    def set_cache_ttl(cls, ttl_seconds: int):
        """
        Set the cache TTL

        Args:
            ttl_seconds: Time to live in seconds
        """
        if ttl_seconds < 0:
            logger.warning(f"Invalid TTL value: {ttl_seconds}, using default")
            return

        with cls._lock:
            cls._cache_ttl = ttl_seconds
            logger.info(f"Cache TTL set to {ttl_seconds} seconds")

    @classmethod
    def get_cache_info(cls) -> Dict:
        """
        Get information about the current cache state

        Returns:
            Dictionary with cache information
        """
        with cls._lock:
            if cls._cache is None:
                return {
                    "cached": False,
                    "cache_age_seconds": None,
                    "ttl_seconds": cls._cache_ttl
                }

            cache_age = time.time() - cls._cache_time

            return {
                "cached": True,
                "cache_age_seconds": cache_age,
                "ttl_seconds": cls._cache_ttl,
                "is_stale": cache_age > cls._cache_ttl,
                "strict_validation": cls._cache["strict_validation"]
            }
