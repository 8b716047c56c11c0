import os
import sys

from dotenv import load_dotenv

from enums.currency import Currency
from enums.runtime_environment import RuntimeEnvironment

# Load .env but don't override existing environment variables
# This allows test runs to set RUNTIME_ENVIRONMENT=test before import
load_dotenv(".env", override=False)

# Parse RUNTIME_ENVIRONMENT with clear error message on misconfiguration
try:
    _runtime_env_str = os.environ.get("RUNTIME_ENVIRONMENT")
    if not _runtime_env_str:
        raise ValueError("RUNTIME_ENVIRONMENT environment variable is not set")
    RUNTIME_ENVIRONMENT = RuntimeEnvironment(_runtime_env_str)
except ValueError as e:
    valid_values = [env.value for env in RuntimeEnvironment]
    print(f"\n ERROR: Invalid RUNTIME_ENVIRONMENT configuration\n", file=sys.stderr)
    print(f"Reason: {e}", file=sys.stderr)
    print(f"Valid values: {', '.join(valid_values)}", file=sys.stderr)
    print(f"Current value: {os.environ.get('RUNTIME_ENVIRONMENT', '(not set)')}", file=sys.stderr)
    print(f"\nAdd to .env: RUNTIME_ENVIRONMENT={valid_values[0]}\n", file=sys.stderr)
    sys.exit(1)

# Parse CURRENCY with error handling
try:
    _currency_str = os.environ.get("CURRENCY")
    if not _currency_str:
        raise ValueError("CURRENCY environment variable is not set")
    CURRENCY = Currency(_currency_str)
except ValueError as e:
    valid_currencies = [c.value for c in Currency]
    print(f"\n ERROR: Invalid CURRENCY configuration\n", file=sys.stderr)
    print(f"Reason: {e}", file=sys.stderr)
    print(f"Valid values: {', '.join(valid_currencies)}", file=sys.stderr)
    print(f"Current value: {os.environ.get('CURRENCY', '(not set)')}", file=sys.stderr)
    print(f"\nAdd to .env: CURRENCY={valid_currencies[0]}\n", file=sys.stderr)
    sys.exit(1)

# Web server
WEBAPP_HOST = os.environ.get("WEBAPP_HOST", "0.0.0.0")
WEBAPP_PORT = int(os.environ.get("WEBAPP_PORT", "8000"))
STOREFRONT_URL = os.environ.get("STOREFRONT_URL", "http://localhost:3000")  # Used for links in e-mails

# Database / Redis
DB_NAME = os.environ.get("DB_NAME", "storefront.db")
DB_URL = os.environ.get("DB_URL", f"sqlite+aiosqlite:///data/{DB_NAME}")
REDIS_HOST = os.environ.get("REDIS_HOST", "localhost")
REDIS_PASSWORD = os.environ.get("REDIS_PASSWORD")

# Parse CATALOG_PAGE_SIZE with error handling
try:
    _page_size_str = os.environ.get("CATALOG_PAGE_SIZE", "20")
    CATALOG_PAGE_SIZE = int(_page_size_str)
    if CATALOG_PAGE_SIZE <= 0:
        raise ValueError(f"CATALOG_PAGE_SIZE must be positive (got: {CATALOG_PAGE_SIZE})")
except ValueError as e:
    print(f"\n ERROR: Invalid CATALOG_PAGE_SIZE configuration\n", file=sys.stderr)
    print(f"Reason: {e}", file=sys.stderr)
    print(f"Expected: Positive integer (e.g., 12, 20, 50)", file=sys.stderr)
    print(f"Current value: {os.environ.get('CATALOG_PAGE_SIZE', '(not set)')}\n", file=sys.stderr)
    sys.exit(1)

# Catalog client (storefront side)
CATALOG_API_URL = os.environ.get("CATALOG_API_URL", f"http://localhost:{WEBAPP_PORT}")
SEARCH_DEBOUNCE_MS = int(os.environ.get("SEARCH_DEBOUNCE_MS", "500"))  # Quiet period before a text search fires

# Checkout
TAX_RATE = os.environ.get("TAX_RATE", "0.15")  # VAT, kept as string and parsed to Decimal by PricingService
SHIPPING_COUNTRY = os.environ.get("SHIPPING_COUNTRY", "mu")
DEFAULT_DELIVERY_DAYS = int(os.environ.get("DEFAULT_DELIVERY_DAYS", "5"))
STORE_LANGUAGE = os.environ.get("STORE_LANGUAGE", "en")

# Cart session storage
CART_TTL_HOURS = int(os.environ.get("CART_TTL_HOURS", "72"))

# Rate Limiting Configuration
MAX_ORDERS_PER_USER_PER_HOUR = int(os.environ.get("MAX_ORDERS_PER_USER_PER_HOUR", "5"))  # Prevent order spam
MAX_PARTNER_APPLICATIONS_PER_HOUR = int(os.environ.get("MAX_PARTNER_APPLICATIONS_PER_HOUR", "3"))
MAX_QUOTE_REQUESTS_PER_HOUR = int(os.environ.get("MAX_QUOTE_REQUESTS_PER_HOUR", "5"))

# Days a staff quote stays valid when no validUntil is given
QUOTE_VALIDITY_DAYS = int(os.environ.get("QUOTE_VALIDITY_DAYS", "7"))

# Transactional e-mail (delivery skipped when EMAIL_HOST is empty)
EMAIL_HOST = os.environ.get("EMAIL_HOST", "")
EMAIL_PORT = int(os.environ.get("EMAIL_PORT", "587"))
EMAIL_USER = os.environ.get("EMAIL_USER", "")
EMAIL_PASS = os.environ.get("EMAIL_PASS", "")
EMAIL_USE_TLS = os.environ.get("EMAIL_USE_TLS", "true") == "true"
EMAIL_FROM_NAME = os.environ.get("EMAIL_FROM_NAME", "Auto Parts Mauritius")
ADMIN_EMAIL = os.environ.get("ADMIN_EMAIL", "")

# Logging Configuration
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")  # DEBUG, INFO, WARNING, ERROR, CRITICAL
LOG_MASK_SECRETS = os.environ.get("LOG_MASK_SECRETS", "true") == "true"  # Mask sensitive data in logs

# Log Retention: Environment-specific defaults
# Dev keeps a month for debugging, prod keeps 5 days
if RUNTIME_ENVIRONMENT == RuntimeEnvironment.DEV:
    LOG_RETENTION_DAYS = int(os.environ.get("LOG_RETENTION_DAYS", "30"))
else:
    LOG_RETENTION_DAYS = int(os.environ.get("LOG_RETENTION_DAYS", "5"))

# HTTP Security Configuration
SECURITY_HEADERS_ENABLED = os.environ.get("SECURITY_HEADERS_ENABLED", "true") == "true"
CSP_ENABLED = os.environ.get("CSP_ENABLED", "false") == "true"
HSTS_ENABLED = os.environ.get("HSTS_ENABLED", "false") == "true"  # Only for HTTPS deployments
CORS_ALLOWED_ORIGINS = os.environ.get("CORS_ALLOWED_ORIGINS", "").split(",") if os.environ.get("CORS_ALLOWED_ORIGINS") else []
