"""
SpareLink - Admin Order Search (command line)
===============================================
Searches orders and changes their status through the admin API, the same
way the /admin/orders page does.

Usage:
    python scripts/admin_orders.py                            # all orders, newest first
    python scripts/admin_orders.py --email jane --location <id> --order <text>
    python scripts/admin_orders.py --order 3f2a --set <order_id> READY_FOR_PICKUP

Options:
    --location ID      exact pickup location
    --order TEXT       order id contains TEXT
    --email TEXT       buyer email contains TEXT
    --set ID STATUS    set an order's status (READY_FOR_PICKUP, PAID, CANCELLED)
    --url URL          API base (default: SPARELINK_URL or BASE_URL)
    --token TOKEN      admin identity token (default: SPARELINK_TOKEN)
"""

import asyncio
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import httpx

from config.settings import BASE_URL
from common.helpers import format_price
from modules.admin.order_search import AdminOrderSearch

_VALUE_FLAGS = ("--location", "--order", "--email", "--url", "--token")


def parse_args(argv) -> dict:
    opts = {
        "location": "",
        "order": "",
        "email": "",
        "url": os.getenv("SPARELINK_URL", BASE_URL),
        "token": os.getenv("SPARELINK_TOKEN", ""),
        "set": None,
    }
    args = list(argv)
    while args:
        flag = args.pop(0)
        if flag in _VALUE_FLAGS and args:
            opts[flag[2:]] = args.pop(0)
        elif flag == "--set" and len(args) >= 2:
            opts["set"] = (args.pop(0), args.pop(0))
        else:
            raise SystemExit(__doc__)
    return opts


async def run(client: httpx.AsyncClient, opts: dict) -> AdminOrderSearch:
    """Fetch with all filters at once, then apply the status change if asked."""
    search = AdminOrderSearch(client, debounce_ms=0)
    search.order_id = opts.get("order") or ""
    search.email = opts.get("email") or ""
    await search.set_location(opts.get("location") or "")

    if opts.get("set"):
        order_id, status = opts["set"]
        if await search.update_status(order_id, status):
            print(f"Order {order_id} -> {status}")
    return search


def print_orders(search: AdminOrderSearch):
    print(f"{len(search.orders)} order(s)")
    for o in search.orders:
        buyer = o.get("buyer") or {}
        location = o.get("pickupLocation") or {}
        print(
            f"  {o['id']}  {o['status']:<17} {format_price(o['totalAmount']):>14}"
            f"  {buyer.get('email') or '-'}  @ {location.get('name') or '-'}"
        )
    if search.error:
        print(f"Error: {search.error}")


def main(argv=None):
    opts = parse_args(sys.argv[1:] if argv is None else argv)
    if not opts["token"]:
        print("Admin identity token required (--token or SPARELINK_TOKEN)")
        sys.exit(1)

    async def _session():
        async with httpx.AsyncClient(
            base_url=opts["url"],
            headers={"Authorization": f"Bearer {opts['token']}"},
            timeout=10,
        ) as client:
            return await run(client, opts)

    search = asyncio.run(_session())
    print_orders(search)
    if search.error:
        sys.exit(1)


if __name__ == "__main__":
    main()
