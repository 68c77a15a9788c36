"""
Analytics aggregation over stored orders.

Every function here is a pure reduction: it reads an order sequence (and,
for name lookups, the client list) and returns fresh rows. Nothing is
cached; the data volume is small enough to recompute on every request, and
recomputing means results can never lag behind a mutation.

Orders are read with their materialized totals. The pricing engine is not
involved.

Series:
    daily_series   - per calendar day within one month (orders, revenue, jobs)
    monthly_series - per short month name (revenue, profit, orders)
    client_series  - per client (revenue, orders)

Known limitation: monthly_series groups by short month name only, so
January 2024 and January 2025 land in the same "Jan" row.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Sequence

from models.client import Client
from models.numbers import ZERO, to_number
from models.order import Order
from logging_config import get_logger


logger = get_logger(__name__)


UNKNOWN_CLIENT = "Unknown"
"""Display name for an order whose client record no longer exists."""

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


@dataclass
class DailyPoint:
    date: str
    orders: int = 0
    revenue: Decimal = ZERO
    jobs: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "orders": self.orders,
            "revenue": to_number(self.revenue),
            "jobs": self.jobs,
        }


@dataclass
class MonthlyPoint:
    month: str
    revenue: Decimal = ZERO
    profit: Decimal = ZERO
    orders: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "month": self.month,
            "revenue": to_number(self.revenue),
            "profit": to_number(self.profit),
            "orders": self.orders,
        }


@dataclass
class ClientPoint:
    client: str
    client_id: Optional[str]
    """None for the bucket collecting orders of deleted clients."""

    revenue: Decimal = ZERO
    orders: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "client": self.client,
            "clientId": self.client_id,
            "revenue": to_number(self.revenue),
            "orders": self.orders,
        }


def client_names(clients: Iterable[Client]) -> Dict[str, str]:
    return {client.id: client.name for client in clients}


def client_display_name(client_id: str, names: Dict[str, str]) -> str:
    """Client name for display, or the Unknown placeholder for a dangling reference."""
    return names.get(client_id, UNKNOWN_CLIENT)


def filter_by_month(orders: Iterable[Order], month: str) -> List[Order]:
    """Orders whose date starts with month (YYYY-MM), in their original order."""
    return [order for order in orders if order.in_month(month)]


def daily_series(orders: Iterable[Order], month: str) -> List[DailyPoint]:
    """
    Group one month's orders by calendar day.

    Args:
        orders: All orders (filtered here by the year-month prefix)
        month: Selected month as YYYY-MM

    Returns:
        One DailyPoint per day that has orders, ascending by date
    """
    points: Dict[str, DailyPoint] = {}
    for order in filter_by_month(orders, month):
        point = points.setdefault(order.day, DailyPoint(date=order.day))
        point.orders += 1
        point.revenue += order.total_amount
        point.jobs += len(order.jobs)
    return sorted(points.values(), key=lambda point: point.date)


def monthly_series(orders: Iterable[Order]) -> List[MonthlyPoint]:
    """
    Group orders by short month name ("Jan", "Feb", ...).

    Rows appear in the order their month is first seen. The year is not part
    of the key (see module docstring). Orders whose date cannot be parsed
    are left out.
    """
    points: Dict[str, MonthlyPoint] = {}
    for order in orders:
        timestamp = order.timestamp
        if timestamp is None:
            logger.warning(f"Skipping order {order.id} with unreadable date {order.date!r}")
            continue
        month = timestamp.strftime("%b")
        point = points.setdefault(month, MonthlyPoint(month=month))
        point.revenue += order.total_amount
        point.profit += order.profit
        point.orders += 1
    return list(points.values())


def client_series(orders: Iterable[Order], clients: Iterable[Client]) -> List[ClientPoint]:
    """
    Group orders by client.

    Orders referencing a deleted client are collected into a single
    "Unknown" row (client_id None) instead of being dropped.
    """
    names = client_names(clients)
    points: Dict[Optional[str], ClientPoint] = {}
    for order in orders:
        key = order.client_id if order.client_id in names else None
        point = points.get(key)
        if point is None:
            name = names[key] if key is not None else UNKNOWN_CLIENT
            point = points[key] = ClientPoint(client=name, client_id=key)
        point.revenue += order.total_amount
        point.orders += 1
    return list(points.values())


def dashboard_stats(orders: Sequence[Order], clients: Sequence[Client], month: str) -> Dict[str, Any]:
    """Headline numbers for the selected month."""
    monthly = filter_by_month(orders, month)
    return {
        "month": month,
        "totalOrders": len(monthly),
        "totalClients": len(clients),
        "totalRevenue": to_number(sum((order.total_amount for order in monthly), ZERO)),
        "totalProfit": to_number(sum((order.profit for order in monthly), ZERO)),
    }


def order_history(orders: Iterable[Order], clients: Iterable[Client]) -> List[Dict[str, Any]]:
    """
    All orders, newest first, each with its client's display name.

    Orders with an unreadable date are listed last.
    """
    names = client_names(clients)
    ordered = sorted(orders, key=lambda order: order.timestamp or _OLDEST, reverse=True)
    return [
        {**order.to_dict(), "clientName": client_display_name(order.client_id, names)}
        for order in ordered
    ]


def recent_orders(
    orders: Iterable[Order],
    clients: Iterable[Client],
    month: str,
    limit: int = 5,
) -> List[Dict[str, Any]]:
    """The newest orders of the selected month, for the dashboard table."""
    return order_history(filter_by_month(orders, month), clients)[:limit]
