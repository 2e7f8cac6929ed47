"""Box office session: owns the ledger, the summary, and their persistence.

One session per logical user of the sales page. Every mutation runs to
completion in order: ledger change, summary update, save request. A
failed save is logged and reported through ``storage_ok``; the in-memory
state is kept so the user can keep selling.
"""

from __future__ import annotations

import logging

from ticketbooth.config import TicketboothConfig
from ticketbooth.errors import StorageError
from ticketbooth.ledger import Sale, SaleLedger, Summary
from ticketbooth.persistence import PersistenceAdapter
from ticketbooth.pricing import DEFAULT_PRICE_LIST, PriceList
from ticketbooth.stores import build_store
from ticketbooth.validation import validate_sale_form

logger = logging.getLogger(__name__)


class BoxOfficeSession:
    """Single-threaded sales session over an injected persistence adapter."""

    def __init__(
        self,
        persistence: PersistenceAdapter,
        prices: PriceList = DEFAULT_PRICE_LIST,
    ) -> None:
        self._persistence = persistence
        self._prices = prices
        self._ledger = SaleLedger()
        self._summary = Summary()
        self._storage_ok = True

    # -- read-only views ------------------------------------------------------

    @property
    def prices(self) -> PriceList:
        return self._prices

    @property
    def summary(self) -> Summary:
        return self._summary

    @property
    def storage_ok(self) -> bool:
        """False when the most recent load/save/clear failed."""
        return self._storage_ok

    def sales(self) -> tuple[Sale, ...]:
        return self._ledger.all()

    def get_sale(self, sale_id: int) -> Sale | None:
        return self._ledger.get(sale_id)

    # -- lifecycle ------------------------------------------------------------

    def close(self) -> None:
        """Release the persistence backend. In-memory state stays readable."""
        self._persistence.close()

    def __enter__(self) -> BoxOfficeSession:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def restore(self) -> bool:
        """Load prior state. Returns True if a stored record was applied.

        The summary is always rebuilt from the loaded sales; a stored
        summary that disagrees is logged and ignored.
        """
        try:
            state = self._persistence.load()
        except StorageError:
            logger.warning("Starting with an empty ledger; stored sales unavailable.")
            self._storage_ok = False
            return False

        self._storage_ok = True
        if state is None:
            return False

        self._ledger = SaleLedger(state.sales)
        self._summary = Summary.recompute_from_scratch(self._ledger)
        if state.summary != self._summary:
            logger.warning(
                "Stored summary disagrees with %d stored sale(s); using the rebuilt one.",
                len(self._ledger),
            )
        logger.info(
            "Restored %d sale(s) from %s (saved %s).",
            len(self._ledger), self._persistence.key, state.timestamp,
        )
        return True

    def _persist(self) -> bool:
        try:
            self._persistence.save(self._ledger.all(), self._summary)
        except StorageError:
            self._storage_ok = False
            return False
        self._storage_ok = True
        return True

    # -- mutations ------------------------------------------------------------

    def add_sale(self, sale: Sale) -> None:
        """Append an already-built sale. Raises DuplicateSaleIdError."""
        self._ledger.append(sale)
        self._summary.on_append(sale)
        self._persist()

    def record_sale(self, name: str, category: str, quantity: str) -> Sale:
        """Validate raw form input, price it, and record the sale.

        Raises:
            ValidationError: If any field is invalid (nothing is recorded).
        """
        form = validate_sale_form(name, category, quantity, self._prices)
        sale = Sale.create(
            sale_id=self._ledger.next_id(),
            customer_name=form.name,
            category=form.category,
            quantity=form.quantity,
            prices=self._prices,
        )
        self.add_sale(sale)
        logger.info(
            "Recorded sale %s: %s x%d = %s.",
            sale.id, sale.category.value, sale.quantity, sale.total,
        )
        return sale

    def delete_sale(self, sale_id: int) -> Sale:
        """Remove a sale. Raises SaleNotFoundError if absent."""
        sale = self._ledger.remove(sale_id)
        self._summary.on_remove(sale)
        self._persist()
        logger.info("Deleted sale %s.", sale_id)
        return sale

    def reset(self) -> None:
        """Drop every sale and the stored record."""
        self._ledger.clear()
        self._summary.reset()
        try:
            self._persistence.clear()
        except StorageError:
            self._storage_ok = False
        else:
            self._storage_ok = True
        logger.info("Cleared all sales.")


def open_session(
    config: TicketboothConfig | None = None,
    prices: PriceList = DEFAULT_PRICE_LIST,
) -> BoxOfficeSession:
    """Build a session from config and restore any stored state.

    The caller owns the session and should ``close()`` it (or use it as a
    context manager) to release a remote store's connections.
    """
    config = config or TicketboothConfig()
    persistence = PersistenceAdapter(build_store(config), key=config.storage_key)
    session = BoxOfficeSession(persistence, prices=prices)
    try:
        session.restore()
    except BaseException:
        session.close()
        raise
    return session
