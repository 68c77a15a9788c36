"""
Application state: local mirror of the document store plus mutation commands.

AppState is the single object the route layer talks to. It holds an
in-memory mirror of the four collections and funnels every mutation through
a command method that:

    1. Calls the document store (one request, no retry)
    2. On success, applies the change to the local mirror and notifies success
    3. On RemoteOperationFailure, logs it, notifies an error, and leaves the
       mirror exactly as it was

Because the mirror is only touched after the store call succeeds, the two
cannot diverge on failure. Concurrent edits of the same record from two
browsers are not reconciled: the last write wins.

Thread Safety:
    Flask may run requests on several threads. The mirror is replaced under
    a threading.Lock; readers get immutable snapshots (tuples of frozen
    dataclasses).

Usage:
    state = AppState(store, FlashNotifier(), OrderAggregator(PricingEngine()))
    state.refresh()

    result = state.submit_order(client_id, jobs)
    if result.ok:
        order = result.record
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, Generic, List, Optional, Sequence, Tuple, TypeVar

from core.document_store import DocumentStore
from core.exceptions import RemoteOperationFailure
from core.notifications import Notifier
from models.catalog import AdditionalCost, CostCatalog, Paper
from models.client import Client
from models.order import Job, Order
from services.order_service import OrderAggregator, OrderQuote
from logging_config import get_logger


logger = get_logger(__name__)

T = TypeVar("T")


@dataclass
class CommandResult(Generic[T]):
    """Outcome of one state-changing command."""

    ok: bool
    message: str
    record: Optional[T] = None
    warnings: List[str] = field(default_factory=list)


class _Mirror(Generic[T]):
    """Insertion-ordered id -> record map for one collection."""

    def __init__(self, collection: str, label: str, from_dict: Callable[[dict], T]):
        self.collection = collection
        self.label = label
        self.from_dict = from_dict
        self.records: Dict[str, T] = {}


class AppState:
    """
    Explicit application state for the dashboard.

    Attributes:
        store: Document store collaborator
        notifier: User notification sink
        aggregator: Order aggregator (owns the pricing engine)
        require_priced_jobs: Reject submissions that contain unpriced jobs
    """

    def __init__(
        self,
        store: DocumentStore,
        notifier: Notifier,
        aggregator: OrderAggregator,
        require_priced_jobs: bool = False,
    ):
        self.store = store
        self.notifier = notifier
        self.aggregator = aggregator
        self.require_priced_jobs = require_priced_jobs

        self._lock = threading.Lock()
        self._clients: _Mirror[Client] = _Mirror("clients", "client", Client.from_dict)
        self._orders: _Mirror[Order] = _Mirror("orders", "order", Order.from_dict)
        self._papers: _Mirror[Paper] = _Mirror("papers", "paper", Paper.from_dict)
        self._costs: _Mirror[AdditionalCost] = _Mirror(
            "additionalCosts", "additional cost", AdditionalCost.from_dict
        )

    # =========================================================================
    # READ ACCESS (snapshots)
    # =========================================================================

    @property
    def clients(self) -> Tuple[Client, ...]:
        with self._lock:
            return tuple(self._clients.records.values())

    @property
    def orders(self) -> Tuple[Order, ...]:
        with self._lock:
            return tuple(self._orders.records.values())

    @property
    def papers(self) -> Tuple[Paper, ...]:
        with self._lock:
            return tuple(self._papers.records.values())

    @property
    def additional_costs(self) -> Tuple[AdditionalCost, ...]:
        with self._lock:
            return tuple(self._costs.records.values())

    def cost_catalog(self) -> CostCatalog:
        return CostCatalog.of(self.additional_costs)

    def get_client(self, client_id: str) -> Optional[Client]:
        with self._lock:
            return self._clients.records.get(client_id)

    def get_order(self, order_id: str) -> Optional[Order]:
        with self._lock:
            return self._orders.records.get(order_id)

    # =========================================================================
    # FETCHING
    # =========================================================================

    def refresh(self) -> bool:
        """
        Reload every collection from the store.

        Returns:
            True if all four collections loaded
        """
        results = [
            self._fetch(self._clients),
            self.fetch_orders(),
            self._fetch(self._papers),
            self._fetch(self._costs),
        ]
        return all(results)

    def fetch_orders(self) -> bool:
        return self._fetch(self._orders)

    def _fetch(self, mirror: _Mirror) -> bool:
        try:
            rows = self.store.collection(mirror.collection).list()
        except RemoteOperationFailure as e:
            logger.error(f"Error fetching {mirror.collection}: {e}", exc_info=True)
            self.notifier.error(f"Failed to fetch {_plural(mirror.label)}")
            return False

        records = {}
        for row in rows:
            record = mirror.from_dict(row)
            records[record.id] = record

        with self._lock:
            mirror.records = records
        logger.info(f"Loaded {len(records)} {mirror.collection}")
        return True

    # =========================================================================
    # CLIENTS
    # =========================================================================

    def add_client(self, client: Client) -> CommandResult[Client]:
        return self._create(self._clients, client)

    def update_client(self, client: Client) -> CommandResult[Client]:
        return self._replace(self._clients, client)

    def delete_client(self, client_id: str) -> CommandResult[Client]:
        # Orders keep their clientId; display falls back to "Unknown".
        return self._remove(self._clients, client_id)

    # =========================================================================
    # ORDERS
    # =========================================================================

    def quote_order(self, client_id: str, jobs: Sequence[Job]) -> OrderQuote:
        """Price the jobs against the current catalogs without saving anything."""
        return self.aggregator.quote_order(self.get_client(client_id), jobs, self.cost_catalog())

    def submit_order(self, client_id: str, jobs: Sequence[Job]) -> CommandResult[Order]:
        """
        Build an order from the current rate and cost catalogs and persist it.

        Unpriced jobs produce warnings on the result. With
        require_priced_jobs set, they reject the submission instead and
        nothing is written.
        """
        quote = self.quote_order(client_id, jobs)
        rejected = self._reject_unpriced(quote)
        if rejected is not None:
            return rejected

        order = self.aggregator.order_from_quote(client_id, quote)
        result = self._create(self._orders, order)
        result.warnings = quote.warnings
        return result

    def reprice_order(self, order_id: str, client_id: str, jobs: Sequence[Job]) -> CommandResult[Order]:
        """
        Replace an order's client and jobs, pricing them against today's catalogs.

        The order keeps its id and original date. Unpriced jobs are handled
        the same way as on submission.
        """
        existing = self.get_order(order_id)
        if existing is None:
            message = "Failed to update order"
            self.notifier.error(message)
            return CommandResult(ok=False, message=message)

        quote = self.quote_order(client_id, jobs)
        rejected = self._reject_unpriced(quote)
        if rejected is not None:
            return rejected

        rebuilt = self.aggregator.order_from_quote(client_id, quote)
        order = replace(rebuilt, id=existing.id, date=existing.date)
        result = self._replace(self._orders, order)
        result.warnings = quote.warnings
        return result

    def _reject_unpriced(self, quote: OrderQuote) -> Optional[CommandResult[Order]]:
        """A rejection result when unpriced jobs are not allowed, else None."""
        if not (quote.unpriced_jobs and self.require_priced_jobs):
            return None
        message = "Order has unpriced jobs; fix the client's rates first"
        logger.warning(f"{message}: {quote.warnings}")
        self.notifier.error(message)
        return CommandResult(ok=False, message=message, warnings=quote.warnings)

    def delete_order(self, order_id: str) -> CommandResult[Order]:
        return self._remove(self._orders, order_id)

    # =========================================================================
    # PAPERS AND ADDITIONAL COSTS
    # =========================================================================

    def add_paper(self, paper: Paper) -> CommandResult[Paper]:
        return self._create(self._papers, paper)

    def delete_paper(self, paper_id: str) -> CommandResult[Paper]:
        return self._remove(self._papers, paper_id)

    def add_additional_cost(self, cost: AdditionalCost) -> CommandResult[AdditionalCost]:
        return self._create(self._costs, cost)

    def update_additional_cost(self, cost: AdditionalCost) -> CommandResult[AdditionalCost]:
        return self._replace(self._costs, cost)

    def delete_additional_cost(self, cost_id: str) -> CommandResult[AdditionalCost]:
        return self._remove(self._costs, cost_id)

    # =========================================================================
    # GENERIC COMMANDS
    # =========================================================================

    def _create(self, mirror: _Mirror[T], record: T) -> CommandResult[T]:
        label = mirror.label
        try:
            record_id = self.store.collection(mirror.collection).create(record.to_dict())
        except RemoteOperationFailure as e:
            logger.error(f"Error adding {label}: {e}", exc_info=True)
            message = f"Failed to add {label}"
            self.notifier.error(message)
            return CommandResult(ok=False, message=message)

        # The store assigns the id; merge it into the local copy.
        stored = replace(record, id=record_id)
        with self._lock:
            mirror.records[record_id] = stored

        message = f"{label.capitalize()} added successfully"
        logger.info(f"{message} ({mirror.collection}/{record_id})")
        self.notifier.success(message)
        return CommandResult(ok=True, message=message, record=stored)

    def _replace(self, mirror: _Mirror[T], record: T) -> CommandResult[T]:
        label = mirror.label
        try:
            self.store.collection(mirror.collection).replace(record.id, record.to_dict())
        except RemoteOperationFailure as e:
            logger.error(f"Error updating {label}: {e}", exc_info=True)
            message = f"Failed to update {label}"
            self.notifier.error(message)
            return CommandResult(ok=False, message=message)

        with self._lock:
            mirror.records[record.id] = record

        message = f"{label.capitalize()} updated successfully"
        logger.info(f"{message} ({mirror.collection}/{record.id})")
        self.notifier.success(message)
        return CommandResult(ok=True, message=message, record=record)

    def _remove(self, mirror: _Mirror[T], record_id: str) -> CommandResult[T]:
        label = mirror.label
        try:
            self.store.collection(mirror.collection).remove(record_id)
        except RemoteOperationFailure as e:
            logger.error(f"Error deleting {label}: {e}", exc_info=True)
            message = f"Failed to delete {label}"
            self.notifier.error(message)
            return CommandResult(ok=False, message=message)

        with self._lock:
            removed = mirror.records.pop(record_id, None)

        message = f"{label.capitalize()} deleted successfully"
        logger.info(f"{message} ({mirror.collection}/{record_id})")
        self.notifier.success(message)
        return CommandResult(ok=True, message=message, record=removed)


def _plural(label: str) -> str:
    return f"{label}s"
