"""
Tests for startup configuration validation.
"""

from types import SimpleNamespace

import pytest

from utils.config_validator import (
    ConfigValidationError,
    validate_email_config,
    validate_or_exit,
    validate_shipping_country,
    validate_startup_config,
    validate_tax_rate,
)


def valid_config(**overrides):
    values = {
        "TAX_RATE": "0.15",
        "SHIPPING_COUNTRY": "mu",
        "EMAIL_HOST": "",
        "EMAIL_PORT": 587,
        "ADMIN_EMAIL": "",
        "DB_URL": "sqlite+aiosqlite:///:memory:",
        "CART_TTL_HOURS": 72,
        "SEARCH_DEBOUNCE_MS": 500,
    }
    values.update(overrides)
    return SimpleNamespace(**values)


class TestTaxRate:

    @pytest.mark.parametrize("rate", ["0", "0.15", "0.999"])
    def test_accepts_fractions(self, rate):
        validate_tax_rate(rate)

    @pytest.mark.parametrize("rate", ["15", "1", "-0.1", "vat", "NaN"])
    def test_rejects_out_of_range(self, rate):
        with pytest.raises(ConfigValidationError):
            validate_tax_rate(rate)


class TestShippingCountry:

    def test_bundled_country(self):
        validate_shipping_country("mu")

    def test_missing_country_file(self):
        with pytest.raises(ConfigValidationError, match="xx"):
            validate_shipping_country("xx")


class TestEmailConfig:

    def test_disabled_delivery_needs_nothing(self):
        validate_email_config("", 0, None)

    def test_port_range(self):
        with pytest.raises(ConfigValidationError, match="EMAIL_PORT"):
            validate_email_config("smtp.example.mu", 70000, "admin@example.mu")

    def test_admin_email_required_with_smtp(self):
        with pytest.raises(ConfigValidationError, match="ADMIN_EMAIL"):
            validate_email_config("smtp.example.mu", 587, "")


class TestStartupConfig:

    def test_valid_config_passes(self):
        validate_startup_config(valid_config())

    @pytest.mark.parametrize("overrides,match", [
        ({"CART_TTL_HOURS": 0}, "CART_TTL_HOURS"),
        ({"SEARCH_DEBOUNCE_MS": -1}, "SEARCH_DEBOUNCE_MS"),
        ({"DB_URL": ""}, "DB_URL"),
    ])
    def test_invalid_values(self, overrides, match):
        with pytest.raises(ConfigValidationError, match=match):
            validate_startup_config(valid_config(**overrides))

    def test_validate_or_exit_exits(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            validate_or_exit(valid_config(TAX_RATE="2"))

        assert exc_info.value.code == 1
        assert "TAX_RATE" in capsys.readouterr().err
