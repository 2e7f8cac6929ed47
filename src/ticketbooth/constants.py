"""Constants for the ticket sales ledger."""

from enum import Enum


DEFAULT_STORAGE_KEY = "eventosPanamaData"  # record key used by the original page


class Category(str, Enum):
    """Ticket tiers. Values are the keys used in persisted records."""

    VIP = "vip"
    ORCHESTRA = "butacas"
    GENERAL = "generales"


CATEGORY_LABELS: dict[Category, str] = {
    Category.VIP: "Puestos VIP",
    Category.ORCHESTRA: "Puestos Butacas",
    Category.GENERAL: "Puestos Generales",
}

GRAND_TOTAL_KEY = "totalGeneral"


def category_label(key: str) -> str:
    """Human-readable label for a category key; unknown keys echo back."""
    try:
        return CATEGORY_LABELS[Category(key)]
    except ValueError:
        return str(key)
