"""
Order aggregation service.

Turns a client and a list of requested jobs into an Order with its totals
materialized:

    total_amount = sum of price_job over all jobs
    cost         = sum of cost_job over all jobs

Totals are computed here, once, and stored with the order. Nothing
recomputes them later from live rates, so historical orders keep the
price/cost basis that was in effect when they were created.

Usage:
    aggregator = OrderAggregator(PricingEngine())

    # Preview while the form is being filled in
    quote = aggregator.quote_order(client, jobs, cost_catalog)
    for warning in quote.warnings:
        ...

    # Build the order to persist from that same quote
    order = aggregator.order_from_quote(client.id, quote)

    # Or both steps at once
    order = aggregator.build_order(client.id, client, jobs, cost_catalog)
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence, Tuple

from models.catalog import CostCatalog
from models.client import Client
from models.numbers import ZERO, to_number
from models.order import Job, Order, format_timestamp
from models.price_result import PriceResult
from modules.pricing import PricingEngine
from logging_config import get_logger


logger = get_logger(__name__)


def new_job_id() -> str:
    return uuid.uuid4().hex[:12]


def new_order_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class JobQuote:
    """Price and cost of one job."""

    job: Job
    price: PriceResult
    cost: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "job": self.job.to_dict(),
            "price": self.price.to_dict(),
            "cost": to_number(self.cost),
        }


@dataclass(frozen=True)
class OrderQuote:
    """Per-job results plus order totals, before anything is persisted."""

    lines: Tuple[JobQuote, ...] = field(default_factory=tuple)

    @property
    def total_amount(self) -> Decimal:
        return sum((line.price.amount for line in self.lines), ZERO)

    @property
    def cost(self) -> Decimal:
        return sum((line.cost for line in self.lines), ZERO)

    @property
    def unpriced_jobs(self) -> List[JobQuote]:
        return [line for line in self.lines if not line.price.is_priced]

    @property
    def warnings(self) -> List[str]:
        messages = []
        for index, line in enumerate(self.lines, start=1):
            if not line.price.is_priced:
                messages.append(f"Job {index} is unpriced ({line.price.reason.value})")
        return messages

    def to_dict(self) -> Dict[str, Any]:
        return {
            "jobs": [line.to_dict() for line in self.lines],
            "totalAmount": to_number(self.total_amount),
            "cost": to_number(self.cost),
            "warnings": self.warnings,
        }


class OrderAggregator:
    """Sums job-level prices and costs into order totals."""

    def __init__(self, engine: PricingEngine):
        self.engine = engine

    def quote_order(
        self,
        client: Optional[Client],
        jobs: Sequence[Job],
        cost_catalog: CostCatalog,
    ) -> OrderQuote:
        """
        Price and cost every job without building an order.

        Jobs without an id get a fresh one here, so an order built from
        the quote carries the same jobs.

        Args:
            client: Client whose rates apply (None prices every job as Unpriced)
            jobs: Requested jobs, in order
            cost_catalog: Shop-wide additional costs

        Returns:
            OrderQuote with one line per job
        """
        jobs = tuple(job if job.id else job.with_id(new_job_id()) for job in jobs)
        lines = tuple(
            JobQuote(
                job=job,
                price=self.engine.price_job(client, job),
                cost=self.engine.cost_job(job, cost_catalog),
            )
            for job in jobs
        )
        return OrderQuote(lines=lines)

    def build_order(
        self,
        client_id: str,
        client: Optional[Client],
        jobs: Sequence[Job],
        cost_catalog: CostCatalog,
        now: Optional[datetime] = None,
    ) -> Order:
        """
        Build a new order with materialized totals.

        Args:
            client_id: Id the order references (kept even if client is None)
            client: Resolved client record for pricing
            jobs: Requested jobs
            cost_catalog: Shop-wide additional costs at this moment
            now: Creation time (defaults to the current UTC time)

        Returns:
            Order whose total_amount and cost never change afterwards
        """
        return self.order_from_quote(client_id, self.quote_order(client, jobs, cost_catalog), now)

    def order_from_quote(
        self,
        client_id: str,
        quote: OrderQuote,
        now: Optional[datetime] = None,
    ) -> Order:
        """
        Turn a quote into a new order.

        Assigns a new unique id and stamps the current UTC time as the order
        date. Totals are taken from the quote as they are, so the warnings a
        caller acted on and the stored totals come from the same pricing.
        """
        jobs = tuple(line.job for line in quote.lines)
        order = Order(
            id=new_order_id(),
            client_id=client_id,
            date=format_timestamp(now or datetime.now(timezone.utc)),
            jobs=jobs,
            total_amount=quote.total_amount,
            cost=quote.cost,
        )

        logger.info(
            f"Built order {order.id[:8]} for client {client_id}: "
            f"{len(jobs)} job(s), total={order.total_amount}, cost={order.cost}"
        )
        for warning in quote.warnings:
            logger.warning(f"Order {order.id[:8]}: {warning}")

        return order
