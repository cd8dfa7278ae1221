"""
SpareLink - Shared Helpers
===========================
Pure utility functions with NO database or module dependencies.
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Optional

# Largest value a 32-bit INTEGER column holds
MAX_INT = 2_147_483_647


def now_utc() -> datetime:
    """Returns current UTC datetime (timezone-aware)."""
    return datetime.now(timezone.utc)


def new_id() -> str:
    """Primary key factory: 32-char hex UUID (searchable as text)."""
    return uuid.uuid4().hex


def safe_int(value) -> Optional[int]:
    """Safely convert a string to int. Returns None on failure."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    try:
        return int(str(value).strip())
    except (ValueError, TypeError):
        return None


def safe_decimal(value, default: Optional[Decimal] = None) -> Optional[Decimal]:
    """Convert str/int/float to a finite Decimal. Returns `default` on failure."""
    if value is None or isinstance(value, bool):
        return default
    try:
        d = Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError):
        return default
    if not d.is_finite():
        return default
    return d


def like_escape(text: str, escape: str = "\\") -> str:
    """Escape LIKE wildcards so `text` matches literally. Use with `escape=`."""
    return (
        text.replace(escape, escape * 2)
        .replace("%", f"{escape}%")
        .replace("_", f"{escape}_")
    )


def format_price(value) -> str:
    """Format a price with comma separators and two decimals."""
    if value is None:
        return "0.00"
    try:
        return "{:,.2f}".format(Decimal(str(value)))
    except (InvalidOperation, ValueError, TypeError):
        return str(value)


def format_date(value, fmt: str = "%Y-%m-%d %H:%M") -> str:
    """Render a datetime for templates; empty string for None."""
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.strftime(fmt)
    return str(value)


def get_real_ip(request) -> str:
    """Extract real client IP from request (handles X-Forwarded-For proxy header)."""
    x_forwarded = request.headers.get("X-Forwarded-For")
    if x_forwarded:
        return x_forwarded.split(",")[0].strip()
    return request.client.host if request.client else ""
