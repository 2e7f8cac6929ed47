"""Field validation for the sale form.

The whole-value predicates (``is_valid_name``, ``is_valid_quantity``,
``is_valid_category``) are the authoritative gate before a sale is
recorded. The per-keystroke helpers and live filters are advisory: a UI
may call them while the user types, but nothing downstream relies on
them having run.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import NamedTuple

from ticketbooth.constants import Category
from ticketbooth.errors import ValidationError
from ticketbooth.pricing import DEFAULT_PRICE_LIST, PriceList, parse_category

_NAME_CHARS = r"a-zA-ZáéíóúÁÉÍÓÚñÑ\s"
_NAME_RE = re.compile(rf"[{_NAME_CHARS}]{{2,}}")
_NAME_CHAR_RE = re.compile(rf"[{_NAME_CHARS}]")
_NAME_STRIP_RE = re.compile(rf"[^{_NAME_CHARS}]")
_QUANTITY_RE = re.compile(r"[0-9]+")
_NON_DIGIT_RE = re.compile(r"[^0-9]")

CONTROL_KEYS = frozenset({
    "Backspace", "Delete", "ArrowLeft", "ArrowRight", "Tab", "Enter",
})

NAME_FIELD = "nombre"
CATEGORY_FIELD = "categoria"
QUANTITY_FIELD = "cantidad"

NAME_ERROR = "El nombre solo puede contener letras y espacios (mínimo 2 caracteres)"
CATEGORY_ERROR = "Por favor seleccione una categoría de boletos"
QUANTITY_ERROR = "La cantidad debe ser un número entero mayor a 0"
FORM_ERROR = "Por favor corrija los errores en el formulario"
NAME_CHAR_HINT = "Solo se permiten letras y espacios"
QUANTITY_CHAR_HINT = "Solo se permiten números"


# -- whole-value predicates ----------------------------------------------------


def is_valid_name(raw: str) -> bool:
    """Letters (accented vowels and ñ included) and spaces, at least 2 after trimming."""
    if not isinstance(raw, str):
        return False
    return _NAME_RE.fullmatch(raw.strip()) is not None


def is_valid_quantity(raw: str) -> bool:
    """ASCII digits only, integer value > 0. Leading zeros are fine."""
    if not isinstance(raw, str) or _QUANTITY_RE.fullmatch(raw) is None:
        return False
    return raw.lstrip("0") != ""


def is_valid_category(raw: object, prices: PriceList = DEFAULT_PRICE_LIST) -> bool:
    return raw in prices


# -- per-keystroke filtering ---------------------------------------------------


def accepts_name_char(char: str) -> bool:
    return len(char) == 1 and _NAME_CHAR_RE.fullmatch(char) is not None


def accepts_quantity_key(key: str) -> bool:
    """A single digit, or a control key that inserts nothing."""
    if key in CONTROL_KEYS:
        return True
    return len(key) == 1 and "0" <= key <= "9"


class FilteredInput(NamedTuple):
    """Result of a live filter. ``hint`` is set only when something was stripped."""

    value: str
    changed: bool
    hint: str | None = None


def _filtered(value: str, cleaned: str, hint: str) -> FilteredInput:
    if cleaned == value:
        return FilteredInput(cleaned, False)
    return FilteredInput(cleaned, True, hint)


def filter_name_input(value: str) -> FilteredInput:
    """Strip characters the name field does not accept."""
    return _filtered(value, _NAME_STRIP_RE.sub("", value), NAME_CHAR_HINT)


def filter_quantity_input(value: str) -> FilteredInput:
    """Strip non-digits from the quantity field."""
    return _filtered(value, _NON_DIGIT_RE.sub("", value), QUANTITY_CHAR_HINT)


# -- whole form ----------------------------------------------------------------


@dataclass(frozen=True)
class SaleForm:
    """A sale form that passed validation, with values already parsed."""

    name: str
    category: Category
    quantity: int


def validate_sale_form(
    name: str,
    category: str,
    quantity: str,
    prices: PriceList = DEFAULT_PRICE_LIST,
) -> SaleForm:
    """Validate every field and return the parsed form.

    Raises:
        ValidationError: with one entry per failing field.
    """
    field_errors: dict[str, str] = {}
    if not is_valid_name(name):
        field_errors[NAME_FIELD] = NAME_ERROR
    if not is_valid_category(category, prices):
        field_errors[CATEGORY_FIELD] = CATEGORY_ERROR
    parsed_quantity = 0
    if is_valid_quantity(quantity):
        try:
            parsed_quantity = int(quantity)
        except ValueError:
            # past the interpreter's int-conversion digit limit
            field_errors[QUANTITY_FIELD] = QUANTITY_ERROR
    else:
        field_errors[QUANTITY_FIELD] = QUANTITY_ERROR
    if field_errors:
        raise ValidationError(field_errors, FORM_ERROR)

    return SaleForm(
        name=name.strip(),
        category=parse_category(category),
        quantity=parsed_quantity,
    )
