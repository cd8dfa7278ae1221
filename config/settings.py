"""
SpareLink - Centralized Configuration
======================================
All environment variables and constants are loaded here.
No other module should call os.getenv() directly.
"""

import os
import sys
from dotenv import load_dotenv

load_dotenv()


# ==========================================
# Database
# ==========================================
DB_USER = os.getenv("DB_USER")
DB_PASSWORD = os.getenv("DB_PASSWORD")
DB_HOST = os.getenv("DB_HOST", "localhost")
DB_PORT = os.getenv("DB_PORT", "5432")
DB_NAME = os.getenv("DB_NAME")

DATABASE_URL = os.getenv("DATABASE_URL")

if not DATABASE_URL:
    if not all([DB_USER, DB_PASSWORD, DB_HOST, DB_NAME]):
        print("[ERROR] Critical: Database config missing in .env (DATABASE_URL or DB_USER, DB_PASSWORD, DB_HOST, DB_NAME)")
        sys.exit(1)
    DATABASE_URL = f"postgresql://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}"


# ==========================================
# Identity Provider
# ==========================================
IDENTITY_SECRET_KEY = os.getenv("IDENTITY_SECRET_KEY")

if not IDENTITY_SECRET_KEY:
    print("[ERROR] Critical: IDENTITY_SECRET_KEY missing in .env")
    sys.exit(1)

IDENTITY_ALGORITHM = os.getenv("IDENTITY_ALGORITHM", "HS256")
IDENTITY_ISSUER = os.getenv("IDENTITY_ISSUER", "")
IDENTITY_TOKEN_EXPIRE_MINUTES = 60 * 24  # 1 day, tokens minted locally (dev/seed)

AUTH_COOKIE_NAME = os.getenv("AUTH_COOKIE_NAME", "__session")


# ==========================================
# Transactional Email
# ==========================================
EMAIL_API_URL = os.getenv("EMAIL_API_URL", "https://api.resend.com/emails")
EMAIL_API_KEY = os.getenv("EMAIL_API_KEY", "")
EMAIL_FROM = os.getenv("EMAIL_FROM", "SpareLink <orders@sparelink.local>")
EMAIL_TIMEOUT = int(os.getenv("EMAIL_TIMEOUT") or "5")


# ==========================================
# App
# ==========================================
DEBUG = os.getenv("DEBUG", "false").lower() == "true"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Admin order search: idle window before a typed filter triggers a fetch
SEARCH_DEBOUNCE_MS = int(os.getenv("SEARCH_DEBOUNCE_MS") or "500")

BASE_URL = os.getenv("BASE_URL", "http://127.0.0.1:8000")
