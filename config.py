import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./invoices.db")
    MIGRATION_DB_URI = data.get("MIGRATION_DB_URI", "sqlite:///./invoices.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    API_RELOAD = bool(data.get("API_RELOAD", True))
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))
    ENABLE_SENTRY = data.get("ENABLE_SENTRY", 0)
    DSN_SENTRY = data.get("DSN_SENTRY", "")
    SENTRY_ENVIRONMENT = data.get("SENTRY_ENVIRONMENT", "dev")

    # Customer directory
    CUSTOMER_SERVICE_URL = data.get("CUSTOMER_SERVICE_URL", None)
    CUSTOMER_SERVICE_TIMEOUT = data.get("CUSTOMER_SERVICE_TIMEOUT", 5.0)  # Seconds
    CUSTOMER_SERVICE_API_KEY = data.get("CUSTOMER_SERVICE_API_KEY", None)
    KNOWN_CUSTOMER_IDS = data.get("KNOWN_CUSTOMER_IDS", [])  # Used when no URL is set

    # Invoicing
    DEFAULT_PAYMENT_TERMS_DAYS = data.get("DEFAULT_PAYMENT_TERMS_DAYS", 30)
    REJECT_DISCOUNT_OVER_SUBTOTAL = bool(data.get("REJECT_DISCOUNT_OVER_SUBTOTAL", False))
    PAYMENT_MAX_RETRIES = data.get("PAYMENT_MAX_RETRIES", 3)  # Attempts on version conflict

    # Pagination
    DEFAULT_PAGE_SIZE = data.get("DEFAULT_PAGE_SIZE", 10)
    MAX_PAGE_SIZE = data.get("MAX_PAGE_SIZE", 100)
