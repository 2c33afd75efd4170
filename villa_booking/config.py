import os

from dotenv import load_dotenv

load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DEBUG = LOG_LEVEL == "DEBUG"

DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL:
    raise ValueError("DATABASE_URL must be set in the environment")

DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "10"))
DB_MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "20"))

SCHEMA = "villa"

ALLOWED_ORIGINS_RAW = os.getenv("ALLOWED_ORIGINS")
if not ALLOWED_ORIGINS_RAW:
    raise ValueError("ALLOWED_ORIGINS must be set in the environment")

ALLOWED_ORIGINS: list[str] = [
    origin.strip() for origin in ALLOWED_ORIGINS_RAW.split(",")
]

# Booking
PROPERTY_TIMEZONE = os.getenv("PROPERTY_TIMEZONE", "Asia/Jerusalem")
HOLD_TTL_MINUTES = int(os.getenv("HOLD_TTL_MINUTES", "15"))
CURRENCY = os.getenv("CURRENCY", "ILS")

# Identity provider
AUTH_JWT_SECRET = os.getenv("AUTH_JWT_SECRET")
AUTH_JWT_ALGORITHM = os.getenv("AUTH_JWT_ALGORITHM", "HS256")
AUTH_JWT_AUDIENCE = os.getenv("AUTH_JWT_AUDIENCE") or None
ADMIN_ROLE = os.getenv("ADMIN_ROLE", "admin")

# Quote hold tokens are signed with their own secret, or the identity secret
HOLD_TOKEN_SECRET = os.getenv("HOLD_TOKEN_SECRET") or AUTH_JWT_SECRET

# Notifications
NOTIFICATION_WEBHOOK_URL = os.getenv("NOTIFICATION_WEBHOOK_URL") or None
NOTIFICATION_TIMEOUT_SECONDS = float(os.getenv("NOTIFICATION_TIMEOUT_SECONDS", "10"))
