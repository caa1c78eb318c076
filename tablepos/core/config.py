import os
from dotenv import load_dotenv

# Loads .env from the project root
load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./tablepos.db")
ENV = os.getenv("ENV", "dev")
ENV_NORMALIZED = ENV.lower()
IS_DEV = ENV_NORMALIZED in {"dev", "development", "local"}
IS_PROD = ENV_NORMALIZED in {"prod", "production"}

SEED_DEFAULTS = _env_flag("SEED_DEFAULTS", "1")

# Reports are bucketed by calendar month in this zone
REPORT_TIMEZONE = os.getenv("REPORT_TIMEZONE", "UTC").strip() or "UTC"

# Upper bound for waiting on a device position before the geofence gives up
GEOLOCATION_TIMEOUT_SECONDS = float(os.getenv("GEOLOCATION_TIMEOUT_SECONDS", "10"))

# Customer ordering page encoded in table QR codes
PUBLIC_ORDER_URL = os.getenv("PUBLIC_ORDER_URL", "http://localhost:5173/").strip()

JOIN_CODE_MAX_ATTEMPTS = int(os.getenv("JOIN_CODE_MAX_ATTEMPTS", "20"))

# CORS
_cors_env = os.getenv("CORS_ORIGINS", "")
CORS_ORIGINS = [origin.strip() for origin in _cors_env.split(",") if origin.strip() and origin.strip() != "*"]

if not CORS_ORIGINS and IS_DEV:
    CORS_ORIGINS = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]
