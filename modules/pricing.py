"""Order pricing engine: quantity-break price lookup and job cost formula."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from config import Config
from models.catalog import CostCatalog
from models.client import Client, PriceRate, QuantityBreak, find_rate
from models.order import Job
from models.price_result import PriceResult, Priced, Unpriced, UnpricedReason
from models.numbers import to_decimal
from logging_config import get_logger


logger = get_logger(__name__)


def select_break(rate: PriceRate, quantity: int) -> Optional[QuantityBreak]:
    """
    Pick the quantity break that applies to an ordered quantity.

    The break with the largest min_quantity that is <= quantity wins. When
    two breaks share that threshold, the one listed first wins (stable sort).

    Returns:
        The applicable QuantityBreak, or None if quantity is below every
        threshold (or the rate has no breaks)
    """
    ordered = sorted(rate.quantity_breaks, key=lambda qb: qb.min_quantity, reverse=True)
    for quantity_break in ordered:
        if quantity >= quantity_break.min_quantity:
            return quantity_break
    return None


def unit_price(rate: PriceRate, quantity_break: Optional[QuantityBreak]) -> Decimal:
    """Per-unit price under the selected break: the break's price, else the base price."""
    if quantity_break is None:
        return rate.price_per_unit
    return quantity_break.price


class PricingEngine:
    """
    Prices and costs individual jobs.

    Pricing never raises on incomplete input: a job that cannot be priced
    comes back as Unpriced with a reason, so an entry form is never blocked.
    """

    @classmethod
    def _get_plate_charge(cls) -> Decimal:
        """Get the per-job plate charge from config (allows .env override)."""
        return to_decimal(Config.PLATE_CHARGE)

    def __init__(self, plate_charge: Optional[Decimal] = None) -> None:
        self.plate_charge = (
            to_decimal(plate_charge) if plate_charge is not None else self._get_plate_charge()
        )

    def price_job(self, client: Optional[Client], job: Job) -> PriceResult:
        """
        Compute the sale price of one job for one client.

        Steps:
            1. No client, or size/thickness unset -> Unpriced
            2. No exact rate for (size, thickness) -> Unpriced(NO_RATE)
            3. Quantity of zero -> Unpriced(ZERO_QUANTITY)
            4. Unit price from the applicable quantity break, else the base
            5. Amount = unit price x quantity

        Args:
            client: Client whose rate catalog applies (may be None)
            job: Job to price

        Returns:
            Priced(amount, unit_price, min_quantity) or Unpriced(reason)
        """
        if client is None:
            return Unpriced(UnpricedReason.NO_CLIENT)
        if not job.paper_size or job.paper_thickness is None:
            return Unpriced(UnpricedReason.INCOMPLETE_SELECTION)

        rate = find_rate(client, job.paper_size, job.paper_thickness)
        if rate is None:
            logger.debug(
                f"No rate for {job.paper_size}/{job.paper_thickness} on client {client.id}"
            )
            return Unpriced(UnpricedReason.NO_RATE)

        if job.quantity <= 0:
            return Unpriced(UnpricedReason.ZERO_QUANTITY)

        quantity_break = select_break(rate, job.quantity)
        price = unit_price(rate, quantity_break)
        threshold = quantity_break.min_quantity if quantity_break is not None else None

        return Priced(amount=price * job.quantity, unit_price=price, min_quantity=threshold)

    def cost_job(self, job: Job, cost_catalog: CostCatalog) -> Decimal:
        """
        Compute the production cost of one job.

        cost = quantity x (sum of every additional cost per unit) + plate charge

        The plate charge is paid once per job regardless of quantity, so an
        empty job still costs the plate charge.
        """
        return job.quantity * cost_catalog.per_unit_total + self.plate_charge
