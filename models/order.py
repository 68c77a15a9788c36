"""
Order data models.

An Order is one client's request for one or more print jobs. Its totals
(total_amount and cost) are computed once, when the order is built, and
stored with it. They are never re-derived from live rates, so later rate or
cost changes do not alter historical orders.

Lifecycle:
    1. Built by OrderAggregator at submission (totals materialized)
    2. Persisted through the document store (store assigns the id)
    3. Optionally replaced as a whole, or deleted
    An order is never patched field by field.

Stored format:
    {
        "clientId": "...",
        "date": "2024-01-15T10:30:00.000Z",
        "jobs": [{"id": "...", "paperSize": "A4", "paperThickness": 300, "quantity": 50}],
        "totalAmount": 500,
        "cost": 790
    }
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Optional, Tuple

from .numbers import ZERO, to_decimal, to_number, to_optional_decimal


def format_timestamp(moment: datetime) -> str:
    """Render a timestamp the way orders store it (UTC, milliseconds, Z suffix)."""
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    """Parse a stored order date. Accepts a trailing Z and date-only strings."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    moment = datetime.fromisoformat(value)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


@dataclass(frozen=True)
class Job:
    """
    A single line item within an order.

    paper_size and paper_thickness may be unset while an order is still
    being entered; such jobs price as Unpriced.
    """

    id: str = ""
    paper_size: str = ""
    paper_thickness: Optional[Decimal] = None
    quantity: int = 0

    def with_id(self, job_id: str) -> "Job":
        return replace(self, id=job_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "paperSize": self.paper_size,
            "paperThickness": to_number(self.paper_thickness),
            "quantity": self.quantity,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Job":
        raw_quantity = data.get("quantity", 0)
        try:
            quantity = int(raw_quantity or 0)
        except (TypeError, ValueError):
            quantity = 0
        return cls(
            id=str(data.get("id", "") or ""),
            paper_size=str(data.get("paperSize", "") or ""),
            paper_thickness=to_optional_decimal(data.get("paperThickness")),
            quantity=quantity,
        )


@dataclass(frozen=True)
class Order:
    """
    A client order with materialized totals.

    client_id is a weak reference: the client may have been deleted since,
    in which case display code falls back to a placeholder name.
    """

    id: str
    client_id: str
    date: str
    """ISO-8601 UTC timestamp of creation."""

    jobs: Tuple[Job, ...] = field(default_factory=tuple)
    total_amount: Decimal = ZERO
    """Sum of job prices at creation time."""

    cost: Decimal = ZERO
    """Sum of job production costs at creation time."""

    @property
    def profit(self) -> Decimal:
        return self.total_amount - self.cost

    @property
    def day(self) -> str:
        """Date-only part of the timestamp (YYYY-MM-DD)."""
        return self.date.split("T")[0]

    @property
    def timestamp(self) -> Optional[datetime]:
        """Parsed date, or None when the stored date is empty or malformed."""
        try:
            return parse_timestamp(self.date)
        except ValueError:
            return None

    def in_month(self, month: str) -> bool:
        """True when the order date starts with the given YYYY-MM."""
        return self.date.startswith(month)

    def with_id(self, order_id: str) -> "Order":
        return replace(self, id=order_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "clientId": self.client_id,
            "date": self.date,
            "jobs": [job.to_dict() for job in self.jobs],
            "totalAmount": to_number(self.total_amount),
            "cost": to_number(self.cost),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Order":
        return cls(
            id=str(data.get("id", "")),
            client_id=str(data.get("clientId", "")),
            date=str(data.get("date", "")),
            jobs=tuple(Job.from_dict(job) for job in data.get("jobs", []) or []),
            total_amount=to_decimal(data.get("totalAmount")),
            cost=to_decimal(data.get("cost")),
        )
