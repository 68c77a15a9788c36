"""
Client and rate catalog models.

A Client owns its Rate Catalog: an ordered list of PriceRate entries, each
keyed by (paper size, paper thickness) and carrying a base unit price plus
quantity breaks. Rates are never shared between clients.

Stored format (camelCase, round-trips through the document store):
    {
        "name": "Acme", "email": "...", "phone": "...",
        "priceRates": [
            {"paperSize": "A4", "paperThickness": 300, "pricePerUnit": 12,
             "quantityBreaks": [{"minQuantity": 100, "price": 8}]}
        ]
    }
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .numbers import ZERO, to_decimal, to_number, to_optional_decimal
from logging_config import get_logger


logger = get_logger(__name__)

RateKey = Tuple[str, Decimal]


def rate_key(paper_size: str, paper_thickness: Any) -> Optional[RateKey]:
    """
    Build the catalog key for a size/thickness pair.

    Thickness compares numerically, so 300, 300.0 and "300" share a key.
    Returns None when either part is unset.
    """
    thickness = to_optional_decimal(paper_thickness)
    if not paper_size or thickness is None:
        return None
    return (paper_size, thickness)


@dataclass(frozen=True)
class QuantityBreak:
    """Per-unit price that applies once quantity reaches min_quantity."""

    min_quantity: int
    price: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {"minQuantity": self.min_quantity, "price": to_number(self.price)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "QuantityBreak":
        return cls(
            min_quantity=int(data.get("minQuantity", 0) or 0),
            price=to_decimal(data.get("price")),
        )


@dataclass(frozen=True)
class PriceRate:
    """
    How to price jobs on one paper size + thickness.

    quantity_breaks keeps its stored order; selection does not depend on it.
    """

    paper_size: str
    paper_thickness: Decimal
    price_per_unit: Decimal = ZERO
    quantity_breaks: Tuple[QuantityBreak, ...] = ()

    @property
    def key(self) -> Optional[RateKey]:
        return rate_key(self.paper_size, self.paper_thickness)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "paperSize": self.paper_size,
            "paperThickness": to_number(self.paper_thickness),
            "pricePerUnit": to_number(self.price_per_unit),
            "quantityBreaks": [qb.to_dict() for qb in self.quantity_breaks],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PriceRate":
        return cls(
            paper_size=str(data.get("paperSize", "")),
            paper_thickness=to_decimal(data.get("paperThickness")),
            price_per_unit=to_decimal(data.get("pricePerUnit")),
            quantity_breaks=tuple(
                QuantityBreak.from_dict(qb) for qb in data.get("quantityBreaks", []) or []
            ),
        )


class RateCatalog:
    """
    A client's rates as a mapping keyed by (paper size, paper thickness).

    Built from the stored ordered list. When the list holds two rates for
    the same key, the first one wins and the later one is ignored (with a
    warning), so lookups stay deterministic.
    """

    def __init__(self, rates: Optional[List[PriceRate]] = None, owner: str = ""):
        self._rates: Dict[RateKey, PriceRate] = {}
        for rate in rates or []:
            key = rate.key
            if key is None:
                logger.warning(f"Ignoring rate with no paper size for client {owner or '?'}")
                continue
            if key in self._rates:
                logger.warning(
                    f"Duplicate rate {rate.paper_size}/{to_number(rate.paper_thickness)} "
                    f"for client {owner or '?'}; keeping the first"
                )
                continue
            self._rates[key] = rate

    def find(self, paper_size: str, paper_thickness: Any) -> Optional[PriceRate]:
        """Exact match on size and thickness, or None."""
        key = rate_key(paper_size, paper_thickness)
        if key is None:
            return None
        return self._rates.get(key)

    def paper_sizes(self) -> List[str]:
        """Distinct sizes, in catalog order (for selection lists)."""
        seen: List[str] = []
        for size, _ in self._rates:
            if size not in seen:
                seen.append(size)
        return seen

    def thicknesses_for(self, paper_size: str) -> List[Decimal]:
        return [thickness for size, thickness in self._rates if size == paper_size]

    def __len__(self) -> int:
        return len(self._rates)

    def __iter__(self) -> Iterator[PriceRate]:
        return iter(self._rates.values())

    def __contains__(self, key: RateKey) -> bool:
        return key in self._rates


@dataclass(frozen=True)
class Client:
    """
    A print shop client.

    price_rates is the stored ordered list; use rate_catalog for lookups.
    """

    id: str
    name: str
    email: str = ""
    phone: str = ""
    price_rates: Tuple[PriceRate, ...] = field(default_factory=tuple)

    @property
    def rate_catalog(self) -> RateCatalog:
        return RateCatalog(list(self.price_rates), owner=self.id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "priceRates": [rate.to_dict() for rate in self.price_rates],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Client":
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name", ""),
            email=data.get("email", ""),
            phone=data.get("phone", ""),
            price_rates=tuple(PriceRate.from_dict(r) for r in data.get("priceRates", []) or []),
        )


def find_rate(client: Optional[Client], paper_size: str, paper_thickness: Any) -> Optional[PriceRate]:
    """
    Look up the rate a client charges for a paper size and thickness.

    Exact match on both parts; no fuzzy or partial matching.

    Args:
        client: Client record (None gives None)
        paper_size: Paper size label, e.g. "A4"
        paper_thickness: Paper thickness in gsm

    Returns:
        Matching PriceRate, or None
    """
    if client is None:
        return None
    return client.rate_catalog.find(paper_size, paper_thickness)
