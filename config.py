import os

from errors import ConfigurationError

APP_ENVIRONMENTS = ("development", "production", "test")


def _int_env(name, default):
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer", {"value": raw})


def _float_env(name, default):
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number", {"value": raw})


APP_ENV = os.getenv("APP_ENV", "development")
if APP_ENV not in APP_ENVIRONMENTS:
    raise ConfigurationError("Invalid APP_ENV", {"value": APP_ENV, "allowed": list(APP_ENVIRONMENTS)})

MONGO_URL = os.getenv("MONGO_URL", "mongodb://localhost:27017")
DATABASE_NAME = os.getenv("DATABASE_NAME", "fixit")
DB_TIMEOUT_SECONDS = _float_env("DB_TIMEOUT_SECONDS", 5.0)

PRODUCTS_COLLECTION = os.getenv("PRODUCTS_COLLECTION", "products")
SERVICE_PROFILES_COLLECTION = os.getenv("SERVICE_PROFILES_COLLECTION", "service_profiles")
SERVICE_REQUESTS_COLLECTION = os.getenv("SERVICE_REQUESTS_COLLECTION", "service_requests")
CHAT_COLLECTION = os.getenv("CHAT_COLLECTION", "chat_messages")
USERS_COLLECTION = os.getenv("USERS_COLLECTION", "users")
COUNTERS_COLLECTION = os.getenv("COUNTERS_COLLECTION", "counters")

# First issued customer id is CUSTOMER_ID_START + 1
CUSTOMER_ID_START = _int_env("CUSTOMER_ID_START", 10000000)

AUTH_JWT_SECRET = os.getenv("AUTH_JWT_SECRET")
AUTH_JWT_ALGORITHM = os.getenv("AUTH_JWT_ALGORITHM", "HS256")

GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
PORT = _int_env("PORT", 8000)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def is_production():
    return APP_ENV == "production"
