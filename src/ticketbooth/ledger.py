"""Sale ledger and derived per-category summary.

Pure data model, no I/O. The ledger is the single source of truth; the
summary is a derived view kept in step with every append/remove and can
always be rebuilt by folding over the ledger.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Iterable, Iterator

from ticketbooth.constants import GRAND_TOTAL_KEY, Category
from ticketbooth.errors import (
    DuplicateSaleIdError,
    SaleNotFoundError,
    SummaryConsistencyError,
)
from ticketbooth.pricing import (
    DEFAULT_PRICE_LIST,
    PriceList,
    add_money,
    line_total,
    money_context,
    parse_category,
    subtract_money,
    to_money,
)

logger = logging.getLogger(__name__)

_ZERO = Decimal("0.00")


# ---------------------------------------------------------------------------
# Sale
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Sale:
    """One recorded ticket transaction.

    ``total`` is fixed at creation from the ``unit_price`` snapshot and is
    never recomputed from the live price list.
    """

    id: int
    customer_name: str
    category: Category
    quantity: int
    unit_price: Decimal
    total: Decimal
    created_at: str = ""  # ISO datetime

    def __post_init__(self) -> None:
        if not self.customer_name.strip():
            raise ValueError("Sale customer name cannot be blank")
        if isinstance(self.quantity, bool) or self.quantity <= 0:
            raise ValueError("Sale quantity must be positive")
        if self.unit_price < 0:
            raise ValueError("Sale unit price cannot be negative")
        if self.total != line_total(self.unit_price, self.quantity):
            raise ValueError(
                f"Sale total {self.total} != {self.quantity} x {self.unit_price}"
            )

    @classmethod
    def create(
        cls,
        sale_id: int,
        customer_name: str,
        category: Category,
        quantity: int,
        prices: PriceList = DEFAULT_PRICE_LIST,
        created_at: str | None = None,
    ) -> Sale:
        """Price a sale from ``prices``, snapshotting the unit price."""
        return cls(
            id=sale_id,
            customer_name=customer_name,
            category=category,
            quantity=quantity,
            unit_price=prices.price_of(category),
            total=prices.compute_total(category, quantity),
            created_at=created_at or datetime.now(timezone.utc).isoformat(),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "nombre": self.customer_name,
            "categoria": self.category.value,
            "cantidad": self.quantity,
            "precio": str(self.unit_price),
            "total": str(self.total),
            "fecha": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Sale:
        """Parse a stored sale. Raises ValueError/KeyError/TypeError on bad data.

        Records written before the unit-price snapshot existed carry no
        ``precio``; it is derived from ``total / cantidad``.
        """
        quantity = data["cantidad"]
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise TypeError(f"cantidad must be an integer, got {quantity!r}")
        total = to_money(data["total"])
        if "precio" in data:
            unit_price = to_money(data["precio"])
        else:
            if quantity <= 0:
                raise ValueError("cantidad must be positive")
            unit_price = to_money(
                money_context(total, quantity).divide(total, Decimal(quantity))
            )
        return cls(
            id=int(data["id"]),
            customer_name=str(data["nombre"]),
            category=parse_category(data["categoria"]),
            quantity=quantity,
            unit_price=unit_price,
            total=total,
            created_at=str(data.get("fecha", "")),
        )


# ---------------------------------------------------------------------------
# CategoryTotals / Summary
# ---------------------------------------------------------------------------


@dataclass
class CategoryTotals:
    """Ticket count and revenue for one bucket."""

    count: int = 0
    revenue: Decimal = _ZERO

    def to_dict(self) -> dict[str, Any]:
        return {"cantidad": self.count, "total": str(self.revenue)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CategoryTotals:
        return cls(
            count=int(data.get("cantidad", 0)),
            revenue=to_money(data.get("total", 0)),
        )


def _empty_buckets() -> dict[Category, CategoryTotals]:
    return {category: CategoryTotals() for category in Category}


@dataclass
class Summary:
    """Per-category and grand totals derived from the ledger."""

    buckets: dict[Category, CategoryTotals] = field(default_factory=_empty_buckets)
    grand_total: CategoryTotals = field(default_factory=CategoryTotals)

    def bucket(self, category: Category | str) -> CategoryTotals:
        resolved = parse_category(category)
        return self.buckets.setdefault(resolved, CategoryTotals())

    # -- incremental updates --------------------------------------------------

    def on_append(self, sale: Sale) -> None:
        for totals in (self.bucket(sale.category), self.grand_total):
            totals.count += sale.quantity
            totals.revenue = add_money(totals.revenue, sale.total)

    def on_remove(self, sale: Sale) -> None:
        """Subtract ``sale``. Raises SummaryConsistencyError rather than going negative."""
        targets = (self.bucket(sale.category), self.grand_total)
        for totals in targets:
            if totals.count < sale.quantity or totals.revenue < sale.total:
                logger.error(
                    "Summary underflow removing sale %s (%s x%d): bucket has %d / %s.",
                    sale.id, sale.category.value, sale.quantity,
                    totals.count, totals.revenue,
                )
                raise SummaryConsistencyError(
                    f"Removing sale {sale.id} would drive the summary negative"
                )
        for totals in targets:
            totals.count -= sale.quantity
            totals.revenue = subtract_money(totals.revenue, sale.total)

    def reset(self) -> None:
        self.buckets = _empty_buckets()
        self.grand_total = CategoryTotals()

    @classmethod
    def recompute_from_scratch(cls, sales: Iterable[Sale]) -> Summary:
        """Fold over ``sales`` to build a fresh summary."""
        summary = cls()
        for sale in sales:
            summary.on_append(sale)
        return summary

    # -- serialization --------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        data = {
            category.value: totals.to_dict()
            for category, totals in self.buckets.items()
        }
        data[GRAND_TOTAL_KEY] = self.grand_total.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Summary:
        """Parse a stored summary. Missing buckets default to zero."""
        summary = cls()
        for category in Category:
            raw = data.get(category.value)
            if isinstance(raw, dict):
                summary.buckets[category] = CategoryTotals.from_dict(raw)
        raw_grand = data.get(GRAND_TOTAL_KEY)
        if isinstance(raw_grand, dict):
            summary.grand_total = CategoryTotals.from_dict(raw_grand)
        return summary


# ---------------------------------------------------------------------------
# SaleLedger
# ---------------------------------------------------------------------------


class SaleLedger:
    """Insertion-ordered sales, addressable by id."""

    def __init__(self, sales: Iterable[Sale] = ()) -> None:
        self._sales: dict[int, Sale] = {}
        self._last_id = 0
        for sale in sales:
            self.append(sale)

    def __len__(self) -> int:
        return len(self._sales)

    def __iter__(self) -> Iterator[Sale]:
        return iter(tuple(self._sales.values()))

    def __contains__(self, sale_id: object) -> bool:
        return sale_id in self._sales

    def next_id(self) -> int:
        """Wall-clock milliseconds, bumped past the last id handed out."""
        candidate = time.time_ns() // 1_000_000
        return max(candidate, self._last_id + 1)

    def append(self, sale: Sale) -> None:
        if sale.id in self._sales:
            raise DuplicateSaleIdError(sale.id)
        self._sales[sale.id] = sale
        self._last_id = max(self._last_id, sale.id)

    def remove(self, sale_id: int) -> Sale:
        try:
            return self._sales.pop(sale_id)
        except KeyError:
            raise SaleNotFoundError(sale_id) from None

    def get(self, sale_id: int) -> Sale | None:
        return self._sales.get(sale_id)

    def clear(self) -> None:
        self._sales.clear()

    def all(self) -> tuple[Sale, ...]:
        """Read-only snapshot in insertion order."""
        return tuple(self._sales.values())
