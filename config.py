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
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./ledger.db")
    AUTO_CREATE_TABLES = bool(data.get("AUTO_CREATE_TABLES", True))
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))

    # Per-operation caps (None = unlimited)
    SALE_MAX_PER_TRANSACTION = data.get("SALE_MAX_PER_TRANSACTION", 100)
    CARD_MAX_PER_TRANSACTION = data.get("CARD_MAX_PER_TRANSACTION", 100)
    ALLOCATION_MAX_PER_TRANSACTION = data.get("ALLOCATION_MAX_PER_TRANSACTION", None)

    # Transaction PIN lockout
    PIN_MAX_FAILED_ATTEMPTS = data.get("PIN_MAX_FAILED_ATTEMPTS", 5)
    PIN_LOCK_MINUTES = data.get("PIN_LOCK_MINUTES", 60)
    PIN_BCRYPT_ROUNDS = data.get("PIN_BCRYPT_ROUNDS", 12)

    # Optimistic concurrency retries
    CONFLICT_MAX_ATTEMPTS = data.get("CONFLICT_MAX_ATTEMPTS", 3)
    CONFLICT_BACKOFF_SECONDS = data.get("CONFLICT_BACKOFF_SECONDS", 0.05)

    # Balance reconciliation audit
    RECONCILIATION_ENABLED = bool(data.get("RECONCILIATION_ENABLED", True))
    RECONCILIATION_INTERVAL_SECONDS = data.get("RECONCILIATION_INTERVAL_SECONDS", 86400)  # Daily
    RECONCILIATION_NOTIFICATION_WEBHOOK = data.get("RECONCILIATION_NOTIFICATION_WEBHOOK", None)
