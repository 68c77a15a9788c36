"""
Data models for the print shop dashboard.

This module contains immutable dataclasses for:
- Client, PriceRate, QuantityBreak: a client and its rate catalog
- Paper, AdditionalCost, CostCatalog: shop-wide catalogs
- Job, Order: orders with materialized totals
- Priced, Unpriced: tagged pricing results

All records round-trip through the document store via to_dict()/from_dict()
using the stored camelCase field names. Records are frozen; changes are
made by building a new record and replacing the stored one.
"""

from .client import Client, PriceRate, QuantityBreak, RateCatalog, find_rate, rate_key
from .catalog import Paper, AdditionalCost, CostCatalog
from .order import Job, Order, format_timestamp, parse_timestamp
from .price_result import Priced, Unpriced, UnpricedReason, PriceResult

__all__ = [
    # Client models
    "Client",
    "PriceRate",
    "QuantityBreak",
    "RateCatalog",
    "find_rate",
    "rate_key",
    # Catalog models
    "Paper",
    "AdditionalCost",
    "CostCatalog",
    # Order models
    "Job",
    "Order",
    "format_timestamp",
    "parse_timestamp",
    # Pricing results
    "Priced",
    "Unpriced",
    "UnpricedReason",
    "PriceResult",
]
