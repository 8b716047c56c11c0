"""
Configuration Validation Module

Validates critical configuration values at startup to fail-fast
with clear error messages instead of runtime failures.
"""

import sys
from decimal import Decimal, InvalidOperation
from typing import Optional

from utils.shipping_types_loader import load_shipping_types


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""
    pass


def validate_tax_rate(tax_rate: str) -> None:
    """
    Validate the VAT rate applied at checkout.

    Args:
        tax_rate: The TAX_RATE value from config, a decimal fraction (0.15 = 15 %)

    Raises:
        ConfigValidationError: If the rate is not a number in [0, 1)
    """
    try:
        rate = Decimal(str(tax_rate))
    except InvalidOperation:
        raise ConfigValidationError(
            f"TAX_RATE must be a decimal fraction (got: {tax_rate})\n"
            "Add to .env: TAX_RATE=0.15"
        )
    if not rate.is_finite() or rate < 0 or rate >= 1:
        raise ConfigValidationError(
            f"TAX_RATE must be between 0 and 1 (got: {tax_rate})\n"
            "Example: TAX_RATE=0.15 for 15% VAT"
        )


def validate_shipping_country(country_code: str) -> None:
    """
    Validate that shipping_types/<country>.json exists and is readable.

    Raises:
        ConfigValidationError: If the file is missing or malformed
    """
    try:
        shipping_types = load_shipping_types(country_code)
    except (FileNotFoundError, ValueError) as e:
        raise ConfigValidationError(
            f"SHIPPING_COUNTRY={country_code} has no usable shipping table: {e}\n"
            f"Expected file: shipping_types/{country_code}.json"
        )
    if not shipping_types:
        raise ConfigValidationError(f"shipping_types/{country_code}.json defines no shipping methods")


def validate_email_config(host: Optional[str], port: int, admin_email: Optional[str]) -> None:
    """
    Validate SMTP settings. An empty EMAIL_HOST disables delivery and is accepted.

    Raises:
        ConfigValidationError: If the port is out of range or ADMIN_EMAIL is missing with SMTP on
    """
    if not host:
        return
    if not 0 < port < 65536:
        raise ConfigValidationError(f"EMAIL_PORT must be between 1 and 65535 (got: {port})")
    validate_required_config(admin_email, "ADMIN_EMAIL", "orders@example.mu")


def validate_required_config(value: Optional[str], name: str, example: str = "") -> None:
    """
    Validate that a required config value is set.

    Args:
        value: The config value to check
        name: Name of the config variable
        example: Optional example value to show in error message

    Raises:
        ConfigValidationError: If value is missing
    """
    if not value:
        error_msg = f"{name} is required but not set!"
        if example:
            error_msg += f"\nAdd to .env: {name}={example}"
        raise ConfigValidationError(error_msg)


def validate_startup_config(config_module) -> None:
    """
    Validate all critical configuration at startup.

    Args:
        config_module: The config module to validate

    Raises:
        ConfigValidationError: If any validation fails
    """
    validate_tax_rate(config_module.TAX_RATE)
    validate_shipping_country(config_module.SHIPPING_COUNTRY)
    validate_email_config(
        getattr(config_module, 'EMAIL_HOST', None),
        getattr(config_module, 'EMAIL_PORT', 587),
        getattr(config_module, 'ADMIN_EMAIL', None),
    )
    validate_required_config(config_module.DB_URL, 'DB_URL', 'sqlite+aiosqlite:///data/storefront.db')

    if config_module.CART_TTL_HOURS <= 0:
        raise ConfigValidationError(f"CART_TTL_HOURS must be positive (got: {config_module.CART_TTL_HOURS})")
    if config_module.SEARCH_DEBOUNCE_MS < 0:
        raise ConfigValidationError(f"SEARCH_DEBOUNCE_MS must not be negative (got: {config_module.SEARCH_DEBOUNCE_MS})")


def validate_or_exit(config_module) -> None:
    """
    Validate configuration and exit with error code 1 if validation fails.

    This is the main entry point for startup validation.

    Args:
        config_module: The config module to validate
    """
    try:
        validate_startup_config(config_module)
    except ConfigValidationError as e:
        print(f"\n ERROR: Configuration Validation Failed\n", file=sys.stderr)
        print(str(e), file=sys.stderr)
        print("\nServer startup aborted. Please fix configuration and try again.\n", file=sys.stderr)
        sys.exit(1)
