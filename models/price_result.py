"""
Price result data models.

price_job() never raises on incomplete input. Instead it returns either:
    Priced(amount)     - a rate matched and quantity > 0
    Unpriced(reason)   - nothing to charge, with the reason why

Both expose .amount (Unpriced is always 0) so totals can be summed without
branching, while callers that care (order submission) can check .is_priced
and warn before persisting a silently-zero price.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional, Union

from .numbers import ZERO, to_number


class UnpricedReason(Enum):
    """Why a job has no price."""

    NO_CLIENT = "no_client"
    """No client selected, or the client record does not exist."""

    INCOMPLETE_SELECTION = "incomplete_selection"
    """Paper size or thickness not chosen yet."""

    NO_RATE = "no_rate"
    """The client has no rate for this size and thickness."""

    ZERO_QUANTITY = "zero_quantity"
    """Rate found, but nothing ordered."""


@dataclass(frozen=True)
class Priced:
    amount: Decimal
    unit_price: Decimal
    min_quantity: Optional[int] = None
    """Threshold of the quantity break applied (None for the base price)."""

    is_priced = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": "priced",
            "amount": to_number(self.amount),
            "unitPrice": to_number(self.unit_price),
            "minQuantity": self.min_quantity,
        }


@dataclass(frozen=True)
class Unpriced:
    reason: UnpricedReason

    is_priced = False

    @property
    def amount(self) -> Decimal:
        return ZERO

    def to_dict(self) -> Dict[str, Any]:
        return {"status": "unpriced", "amount": 0, "reason": self.reason.value}


PriceResult = Union[Priced, Unpriced]
