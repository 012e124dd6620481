# storeadmin/config.py
import os

# Use DATABASE_URL env var when available (makes containerized runs configurable)
# Fallback to a sensible default pointing to the compose Postgres service.
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    "postgresql+asyncpg://postgres:postgres@db:5432/storeadmin_db",
)
SQL_ECHO = os.getenv("SQL_ECHO", "0") == "1"

SECRET_KEY = os.getenv("JWT_SECRET", "supersecretkey")
ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))
TOKEN_COOKIE = "vf_token"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.getenv("LOG_FORMAT", "json")

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# Dashboard groups keep first-seen order unless this is enabled
DASHBOARD_SORT_BY_NAME = os.getenv("DASHBOARD_SORT_BY_NAME", "0") == "1"
