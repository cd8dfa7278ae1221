"""
SpareLink - Template Configuration
====================================
Jinja2 templates setup with custom filters and global values.
"""

from fastapi.templating import Jinja2Templates

from config.settings import SEARCH_DEBOUNCE_MS
from common.helpers import format_price, format_date

# Initialize templates
TEMPLATE_DIR = "templates"
templates = Jinja2Templates(directory=TEMPLATE_DIR)


# ==========================================
# Register Filters & Globals
# ==========================================

# Filters (usage in template: {{ value | price }})
templates.env.filters["price"] = format_price
templates.env.filters["date"] = format_date

# Display labels for enum values used in dropdowns/badges
_STATUS_LABELS = {
    "PENDING": "Pending",
    "READY_FOR_PICKUP": "Ready for pickup",
    "PAID": "Paid",
    "CANCELLED": "Cancelled",
    "BUYER": "Buyer",
    "SELLER": "Seller",
    "ADMIN": "Admin",
}
templates.env.filters["label"] = lambda v: _STATUS_LABELS.get(str(v), str(v)) if v else "—"

# Static asset version for cache busting (bump when CSS/JS changes)
STATIC_VERSION = "1.0"
templates.env.globals["STATIC_VER"] = STATIC_VERSION

# Admin order search idle window, handed to the page script
templates.env.globals["SEARCH_DEBOUNCE_MS"] = SEARCH_DEBOUNCE_MS
