import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./marketplace.db")

# Security - CRITICAL: No default secret key in production
SECRET_KEY = os.getenv("SECRET_KEY")
if not SECRET_KEY:
    import warnings

    warnings.warn(
        "SECRET_KEY not set! Using insecure default - DO NOT USE IN PRODUCTION", RuntimeWarning, stacklevel=2
    )
    SECRET_KEY = "INSECURE-DEV-KEY-CHANGE-IN-PRODUCTION"  # noqa: S105 - Dev fallback only

# API bearer tokens
JWT_ALGORITHM = "HS256"
JWT_TTL_SECONDS = int(os.getenv("JWT_TTL_SECONDS", "3600"))
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

# Frontend base URL for confirmation links
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")

# Mercure hub
# MERCURE_URL is the hub address used by the backend to publish,
# MERCURE_PUBLIC_URL is the one handed to browsers for EventSource
MERCURE_ENABLED = os.getenv("MERCURE_ENABLED", "true").lower() == "true"
MERCURE_URL = os.getenv("MERCURE_URL", "http://localhost:3000/.well-known/mercure")
MERCURE_PUBLIC_URL = os.getenv("MERCURE_PUBLIC_URL", MERCURE_URL)
MERCURE_PUBLISHER_JWT_SECRET = os.getenv("MERCURE_PUBLISHER_JWT_SECRET", SECRET_KEY)
MERCURE_SUBSCRIBER_JWT_SECRET = os.getenv("MERCURE_SUBSCRIBER_JWT_SECRET", MERCURE_PUBLISHER_JWT_SECRET)
MERCURE_SUBSCRIBE_TTL_SECONDS = int(os.getenv("MERCURE_SUBSCRIBE_TTL_SECONDS", "3600"))

# Resend Email Configuration
RESEND_API_KEY = os.getenv("RESEND_API_KEY")
EMAIL_FROM_ADDRESS = os.getenv("EMAIL_FROM_ADDRESS", "Masters <noreply@masters.tj>")
SITE_NAME = os.getenv("SITE_NAME", "Masters")
ACCOUNT_CONFIRMATION_TTL_HOURS = int(os.getenv("ACCOUNT_CONFIRMATION_TTL_HOURS", "24"))

# Presence: users whose last heartbeat is older than this are swept offline
PRESENCE_OFFLINE_THRESHOLD_MINUTES = int(os.getenv("PRESENCE_OFFLINE_THRESHOLD_MINUTES", "5"))

# Rate limiting (login / registration)
RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"

# Background jobs (arq). When disabled, work is done inline in the request
BACKGROUND_JOBS_ENABLED = os.getenv("BACKGROUND_JOBS_ENABLED", "true").lower() == "true"

# CORS / security headers
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", f"{FRONTEND_URL},http://localhost:3000").split(",")
SECURITY_HEADERS_ENABLED = os.getenv("SECURITY_HEADERS_ENABLED", "true").lower() == "true"
IS_PRODUCTION = os.getenv("ENVIRONMENT", "development").lower() == "production"
