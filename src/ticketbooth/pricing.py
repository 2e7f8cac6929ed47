"""Static price table and sale pricing.

Unit prices are ``Decimal`` amounts quantized to cents. A ``PriceList``
is immutable once built; sales snapshot the unit price at creation so
later price changes never touch recorded history.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Context, Decimal, ROUND_HALF_EVEN
from types import MappingProxyType
from typing import Mapping

from ticketbooth.constants import Category
from ticketbooth.errors import InvalidQuantityError, UnknownCategoryError

CENT = Decimal("0.01")
_MIN_PRECISION = 28


def _digits(value: Decimal) -> int:
    """Digits needed to hold ``value`` exactly with two decimals."""
    return max(len(value.as_tuple().digits), value.adjusted() + 1) + 2


def money_context(*operands: Decimal | int) -> Context:
    """A context wide enough that sums and products of ``operands`` stay exact.

    Quantities have no upper bound, so the default 28-digit context can
    round (or refuse to quantize) a large total.
    """
    needed = sum(_digits(Decimal(op)) for op in operands) + 2
    return Context(prec=max(_MIN_PRECISION, needed), rounding=ROUND_HALF_EVEN)


def to_money(value: object) -> Decimal:
    """Coerce an int/str/float/Decimal to a cent-quantized ``Decimal``.

    Floats go through ``str`` first so ``0.1`` stays ``0.10``.
    """
    if isinstance(value, bool):
        raise TypeError("bool is not a money amount")
    if isinstance(value, float):
        value = str(value)
    amount = Decimal(value)
    return amount.quantize(CENT, context=money_context(amount))


def add_money(a: Decimal, b: Decimal) -> Decimal:
    return money_context(a, b).add(a, b)


def subtract_money(a: Decimal, b: Decimal) -> Decimal:
    return money_context(a, b).subtract(a, b)


def line_total(unit_price: Decimal, quantity: int) -> Decimal:
    """Exact ``unit_price * quantity``, quantized to cents."""
    context = money_context(unit_price, quantity)
    return context.multiply(unit_price, Decimal(quantity)).quantize(CENT, context=context)


def parse_category(raw: object) -> Category:
    """Resolve a raw key (or ``Category``) to a ``Category``.

    Raises UnknownCategoryError for anything else.
    """
    if isinstance(raw, Category):
        return raw
    try:
        return Category(raw)
    except ValueError:
        raise UnknownCategoryError(raw) from None


@dataclass(frozen=True)
class PriceList:
    """Immutable mapping from ``Category`` to unit price."""

    prices: Mapping[Category, Decimal] = field(default_factory=dict)

    def __post_init__(self) -> None:
        normalized: dict[Category, Decimal] = {}
        for key, amount in self.prices.items():
            try:
                category = parse_category(key)
            except UnknownCategoryError:
                raise ValueError(f"Price list key {key!r} is not a category") from None
            price = to_money(amount)
            if price < 0:
                raise ValueError(f"Unit price for {category.value} cannot be negative")
            normalized[category] = price
        object.__setattr__(self, "prices", MappingProxyType(normalized))

    def __contains__(self, key: object) -> bool:
        try:
            return parse_category(key) in self.prices
        except UnknownCategoryError:
            return False

    def categories(self) -> tuple[Category, ...]:
        return tuple(self.prices)

    def price_of(self, category: Category | str) -> Decimal:
        """Unit price for ``category``. Raises UnknownCategoryError if absent."""
        resolved = parse_category(category)
        try:
            return self.prices[resolved]
        except KeyError:
            raise UnknownCategoryError(category) from None

    def compute_total(self, category: Category | str, quantity: int) -> Decimal:
        """``price_of(category) * quantity``. Raises InvalidQuantityError if quantity <= 0."""
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise InvalidQuantityError(quantity)
        return line_total(self.price_of(category), quantity)


DEFAULT_PRICE_LIST = PriceList({
    Category.VIP: Decimal("50.00"),
    Category.ORCHESTRA: Decimal("30.00"),
    Category.GENERAL: Decimal("15.00"),
})
