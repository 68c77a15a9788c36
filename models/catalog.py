"""
Shop-wide catalog models: paper stock and additional costs.

Neither belongs to a client. AdditionalCost entries feed the job cost
formula; Paper entries only populate selection choices and are not summed
into job cost.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Iterable, Optional, Tuple

from .numbers import ZERO, to_decimal, to_number


@dataclass(frozen=True)
class Paper:
    """A paper stock entry (size, thickness in gsm, cost per sheet)."""

    size: str
    thickness: Decimal
    cost_per_unit: Decimal = ZERO
    id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "size": self.size,
            "thickness": to_number(self.thickness),
            "costPerUnit": to_number(self.cost_per_unit),
        }
        if self.id:
            data["id"] = self.id
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Paper":
        return cls(
            id=data.get("id"),
            size=str(data.get("size", "")),
            thickness=to_decimal(data.get("thickness")),
            cost_per_unit=to_decimal(data.get("costPerUnit")),
        )


@dataclass(frozen=True)
class AdditionalCost:
    """A variable per-unit production cost (ink, chemicals, ...)."""

    name: str
    cost_per_unit: Decimal = ZERO
    id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {"name": self.name, "costPerUnit": to_number(self.cost_per_unit)}
        if self.id:
            data["id"] = self.id
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AdditionalCost":
        return cls(
            id=data.get("id"),
            name=data.get("name", ""),
            cost_per_unit=to_decimal(data.get("costPerUnit")),
        )


@dataclass(frozen=True)
class CostCatalog:
    """
    Immutable snapshot of the shop's additional costs.

    Every entry applies to every job, regardless of client or paper.
    """

    costs: Tuple[AdditionalCost, ...] = ()

    @classmethod
    def of(cls, costs: Iterable[AdditionalCost]) -> "CostCatalog":
        return cls(tuple(costs))

    @property
    def per_unit_total(self) -> Decimal:
        """Sum of cost_per_unit over every entry."""
        return sum((cost.cost_per_unit for cost in self.costs), ZERO)

    def __len__(self) -> int:
        return len(self.costs)
