"""
Shipping Types Loader

Loads shipping method definitions from country-specific JSON files.
Similar to localization (l10n), supports different delivery options per country.

Usage:
    from utils.shipping_types_loader import load_shipping_types

    shipping_types = load_shipping_types("mu")  # Load Mauritius delivery methods
"""

import json
import logging
from functools import lru_cache
from pathlib import Path


@lru_cache(maxsize=8)
def load_shipping_types(country_code: str = "mu") -> dict:
    """
    Load shipping types from country-specific JSON file.

    Args:
        country_code: ISO country code (e.g., "mu")

    Returns:
        dict: Shipping types configuration keyed by method id

    Raises:
        FileNotFoundError: If shipping types file doesn't exist
        json.JSONDecodeError: If JSON is malformed

    Example:
        >>> types = load_shipping_types("mu")
        >>> types["express"]["base_cost"]
        15.0
    """
    project_root = Path(__file__).parent.parent
    shipping_types_path = project_root / "shipping_types" / f"{country_code.lower()}.json"

    if not shipping_types_path.exists():
        raise FileNotFoundError(
            f"Shipping types file not found: {shipping_types_path}\n"
            f"Please create shipping_types/{country_code.lower()}.json"
        )

    try:
        with open(shipping_types_path, "r", encoding="utf-8") as f:
            shipping_types = json.load(f)

        logging.info(f"Loaded {len(shipping_types)} shipping types from {country_code.lower()}.json")
        return shipping_types

    except json.JSONDecodeError as e:
        logging.error(f"Failed to parse {shipping_types_path}: {e}")
        raise


def get_shipping_type(shipping_types: dict, type_key: str) -> dict | None:
    """
    Get a specific shipping type by key.

    Example:
        >>> types = load_shipping_types("mu")
        >>> get_shipping_type(types, "sameday")["name"]
        'Same Day Delivery'
    """
    return shipping_types.get(type_key)
