"""
Request payload parsing and validation.

Turns JSON bodies posted by the dashboard into domain records. Free-text
fields are stripped of markup with bleach; numeric fields are checked for
type and sign. Anything malformed raises ValidationError (HTTP 400).

Jobs are deliberately permissive about paper selection: a job with no size
or thickness is accepted and simply prices as Unpriced.
"""

from __future__ import annotations

import re
from decimal import Decimal
from typing import Any, Dict, List, Optional

import bleach

from core.exceptions import ValidationError
from models.catalog import AdditionalCost, Paper
from models.client import Client, PriceRate, QuantityBreak
from models.numbers import to_optional_decimal
from models.order import Job


MAX_NAME_LENGTH = 200
MAX_CONTACT_LENGTH = 100

MONTH_PATTERN = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


def sanitize_text(text: Any, max_length: Optional[int] = None) -> str:
    """Strip markup and surrounding whitespace from user input."""
    if not text:
        return ""
    text = str(text).strip()
    text = bleach.clean(text, tags=[], strip=True)
    if max_length and len(text) > max_length:
        text = text[:max_length]
    return text


def require_object(payload: Any) -> Dict[str, Any]:
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def parse_month(value: Any) -> str:
    """Validate a YYYY-MM month string."""
    if not isinstance(value, str) or not MONTH_PATTERN.match(value):
        raise ValidationError("Month must be formatted as YYYY-MM", field="month")
    return value


def _amount(data: Dict[str, Any], key: str, required: bool = True) -> Decimal:
    raw = data.get(key)
    if raw is None or raw == "":
        if required:
            raise ValidationError(f"{key} is required", field=key)
        return Decimal("0")
    if isinstance(raw, bool):
        raise ValidationError(f"{key} must be a number", field=key)
    value = to_optional_decimal(raw)
    if value is None or not value.is_finite():
        raise ValidationError(f"{key} must be a number", field=key)
    if value < 0:
        raise ValidationError(f"{key} must not be negative", field=key)
    return value


def _count(data: Dict[str, Any], key: str, default: int = 0) -> int:
    raw = data.get(key, default)
    if raw is None or raw == "":
        return default
    if isinstance(raw, bool):
        raise ValidationError(f"{key} must be a whole number", field=key)
    try:
        value = int(raw)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f"{key} must be a whole number", field=key)
    if value != Decimal(str(raw)):
        raise ValidationError(f"{key} must be a whole number", field=key)
    if value < 0:
        raise ValidationError(f"{key} must not be negative", field=key)
    return value


def _required_text(data: Dict[str, Any], key: str, max_length: int) -> str:
    value = sanitize_text(data.get(key), max_length=max_length)
    if not value:
        raise ValidationError(f"{key} is required", field=key)
    return value


def parse_quantity_break(data: Any) -> QuantityBreak:
    data = require_object(data)
    return QuantityBreak(
        min_quantity=_count(data, "minQuantity"),
        price=_amount(data, "price"),
    )


def parse_price_rate(data: Any) -> PriceRate:
    data = require_object(data)
    breaks = data.get("quantityBreaks") or []
    if not isinstance(breaks, list):
        raise ValidationError("quantityBreaks must be a list", field="quantityBreaks")
    return PriceRate(
        paper_size=_required_text(data, "paperSize", MAX_CONTACT_LENGTH),
        paper_thickness=_amount(data, "paperThickness"),
        price_per_unit=_amount(data, "pricePerUnit"),
        quantity_breaks=tuple(parse_quantity_break(qb) for qb in breaks),
    )


def parse_client(payload: Any, client_id: str = "") -> Client:
    """
    Build a Client from a form payload.

    Duplicate (size, thickness) rates are accepted as sent; lookups use the
    first one.
    """
    data = require_object(payload)
    rates = data.get("priceRates") or []
    if not isinstance(rates, list):
        raise ValidationError("priceRates must be a list", field="priceRates")

    return Client(
        id=client_id,
        name=_required_text(data, "name", MAX_NAME_LENGTH),
        email=sanitize_text(data.get("email"), max_length=MAX_CONTACT_LENGTH),
        phone=sanitize_text(data.get("phone"), max_length=MAX_CONTACT_LENGTH),
        price_rates=tuple(parse_price_rate(rate) for rate in rates),
    )


def parse_job(data: Any) -> Job:
    data = require_object(data)
    thickness = data.get("paperThickness")
    return Job(
        id=sanitize_text(data.get("id"), max_length=MAX_CONTACT_LENGTH),
        paper_size=sanitize_text(data.get("paperSize"), max_length=MAX_CONTACT_LENGTH),
        paper_thickness=(
            None if thickness is None or thickness == "" else _amount(data, "paperThickness")
        ),
        quantity=_count(data, "quantity"),
    )


def parse_order_request(payload: Any) -> tuple:
    """
    Parse an order submission.

    Returns:
        (client_id, jobs)
    """
    data = require_object(payload)
    client_id = sanitize_text(data.get("clientId"), max_length=MAX_NAME_LENGTH)
    if not client_id:
        raise ValidationError("clientId is required", field="clientId")

    jobs = data.get("jobs")
    if not isinstance(jobs, list) or not jobs:
        raise ValidationError("An order needs at least one job", field="jobs")

    parsed: List[Job] = [parse_job(job) for job in jobs]
    return client_id, parsed


def parse_paper(payload: Any) -> Paper:
    data = require_object(payload)
    return Paper(
        size=_required_text(data, "size", MAX_CONTACT_LENGTH),
        thickness=_amount(data, "thickness"),
        cost_per_unit=_amount(data, "costPerUnit"),
    )


def parse_additional_cost(payload: Any, cost_id: Optional[str] = None) -> AdditionalCost:
    data = require_object(payload)
    return AdditionalCost(
        id=cost_id,
        name=_required_text(data, "name", MAX_NAME_LENGTH),
        cost_per_unit=_amount(data, "costPerUnit"),
    )
