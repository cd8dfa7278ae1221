"""
Admin Module - Order Search Controller
=========================================
State machine behind the /admin/orders page, driven over the JSON API with
an httpx.AsyncClient (static/js/admin_orders.js is the browser twin,
scripts/admin_orders.py the command-line one).

State:
    location_id, order_id, email — current filters
    orders                       — last applied result set
    updating                     — ids of rows with a status call in flight
    error                        — last error message (prior results are kept)

Triggers:
    set_location(...)            — fetch immediately
    set_order_id / set_email     — fetch after the debounce window
    search()                     — fetch immediately
    reset()                      — clear filters, fetch unfiltered
"""

import logging
from typing import List, Optional, Set

import httpx

from config.settings import SEARCH_DEBOUNCE_MS
from common.debounce import Debouncer, RequestSequencer

logger = logging.getLogger("sparelink.admin")

ORDERS_URL = "/api/admin/orders"


def _error_message(resp: httpx.Response, fallback: str) -> str:
    try:
        return resp.json().get("error") or fallback
    except ValueError:
        return fallback


class AdminOrderSearch:

    def __init__(self, client: httpx.AsyncClient, debounce_ms: int = SEARCH_DEBOUNCE_MS):
        self.client = client
        self.debouncer = Debouncer(debounce_ms)
        self.sequencer = RequestSequencer()

        self.location_id: str = ""
        self.order_id: str = ""
        self.email: str = ""

        self.orders: List[dict] = []
        self.updating: Set[str] = set()
        self.error: Optional[str] = None
        self.fetch_count = 0

    # ==========================================
    # Filters
    # ==========================================

    def params(self) -> dict:
        """Only non-empty filters are sent."""
        params = {}
        if self.location_id:
            params["pickupLocationId"] = self.location_id
        if self.order_id.strip():
            params["orderId"] = self.order_id.strip()
        if self.email.strip():
            params["email"] = self.email.strip()
        return params

    async def set_location(self, location_id: str) -> bool:
        self.location_id = location_id or ""
        self.debouncer.cancel()
        return await self.fetch()

    def set_order_id(self, text: str):
        self.order_id = text or ""
        self.debouncer.schedule(self.fetch)

    def set_email(self, text: str):
        self.email = text or ""
        self.debouncer.schedule(self.fetch)

    async def search(self) -> bool:
        self.debouncer.cancel()
        return await self.fetch()

    async def reset(self) -> bool:
        self.location_id = ""
        self.order_id = ""
        self.email = ""
        self.debouncer.cancel()
        return await self.fetch()

    async def wait_idle(self):
        """Let a pending debounced fetch run to completion."""
        await self.debouncer.wait()

    # ==========================================
    # Fetch
    # ==========================================

    async def fetch(self) -> bool:
        """
        Load orders for the current filters.

        Returns True when the response was applied. A response that arrives
        after a newer fetch started is dropped, as is a failed one (the
        previous results stay on screen).
        """
        ticket = self.sequencer.next_ticket()
        params = self.params()
        self.fetch_count += 1

        try:
            resp = await self.client.get(ORDERS_URL, params=params)
        except httpx.HTTPError as e:
            if self.sequencer.is_current(ticket):
                self.error = "Failed to fetch orders"
            logger.error(f"Order search failed ({params}): {e}")
            return False

        if not self.sequencer.is_current(ticket):
            logger.debug(f"Dropping stale order search response (ticket {ticket})")
            return False

        if resp.status_code != 200:
            self.error = _error_message(resp, "Failed to fetch orders")
            logger.warning(f"Order search rejected: {resp.status_code} {self.error}")
            return False

        self.orders = resp.json()
        self.error = None
        return True

    # ==========================================
    # Status
    # ==========================================

    async def update_status(self, order_id: str, status: str) -> bool:
        """PATCH one order's status. Ignored while that row is already updating."""
        if order_id in self.updating:
            return False
        self.updating.add(order_id)
        try:
            resp = await self.client.patch(f"{ORDERS_URL}/{order_id}", json={"status": status})
            if resp.status_code != 200:
                self.error = _error_message(resp, "Failed to update status")
                return False
            new_status = resp.json().get("status", status)
            for order in self.orders:
                if order.get("id") == order_id:
                    order["status"] = new_status
            self.error = None
            return True
        except httpx.HTTPError as e:
            self.error = "Failed to update status"
            logger.error(f"Status update failed for order {order_id}: {e}")
            return False
        finally:
            self.updating.discard(order_id)
