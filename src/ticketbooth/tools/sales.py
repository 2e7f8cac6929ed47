"""Sales page tools: record_sale, delete_sale, clear_all, summary, sales_table.

Each tool returns a plain dict a UI can render directly. Form and ledger
misuse come back as ``success=False`` with a user-facing message; state is
left untouched in that case. A failed save still reports success (the sale
is held in memory) but adds a ``warning``.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any

from ticketbooth.constants import Category, category_label
from ticketbooth.errors import (
    DuplicateSaleIdError,
    SaleNotFoundError,
    ValidationError,
)
from ticketbooth.ledger import CategoryTotals, Sale
from ticketbooth.session import BoxOfficeSession

logger = logging.getLogger(__name__)

STORAGE_WARNING = "Los datos no pudieron guardarse; podrían perderse al recargar"
EMPTY_TABLE_MESSAGE = "No hay ventas registradas"
CLEAR_CONFIRM_PROMPT = (
    "¿Está seguro de que desea eliminar todos los datos? "
    "Esta acción no se puede deshacer."
)


def format_money(amount: Decimal) -> str:
    return f"${amount:.2f}"


def _with_storage_warning(session: BoxOfficeSession, result: dict[str, Any]) -> dict[str, Any]:
    if not session.storage_ok:
        result["warning"] = STORAGE_WARNING
    return result


def _totals_view(totals: CategoryTotals) -> dict[str, Any]:
    return {
        "count": totals.count,
        "revenue": str(totals.revenue),
        "tickets_text": f"{totals.count} boletos",
        "revenue_text": format_money(totals.revenue),
    }


def _sale_row(sale: Sale) -> dict[str, Any]:
    return {
        "id": sale.id,
        "customer_name": sale.customer_name,
        "category": sale.category.value,
        "category_label": category_label(sale.category.value),
        "quantity": sale.quantity,
        "total": str(sale.total),
        "total_text": format_money(sale.total),
        "created_at": sale.created_at,
    }


# ---------------------------------------------------------------------------
# Mutating tools
# ---------------------------------------------------------------------------


def record_sale_tool(
    session: BoxOfficeSession,
    nombre: str,
    categoria: str,
    cantidad: str,
) -> dict[str, Any]:
    """Validate the sale form and record the sale.

    Returns dict with:
        success: True if the sale was recorded.
        sale: The recorded row (see ``sales_table_tool``).
        message: Confirmation text for a notification.
        field_errors: Per-field messages when validation failed.
        warning: Present when the sale could not be saved.
    """
    try:
        sale = session.record_sale(nombre, categoria, cantidad)
    except ValidationError as e:
        return {
            "success": False,
            "error": e.message,
            "field_errors": e.field_errors,
        }
    except DuplicateSaleIdError as e:
        logger.warning("Rejected sale with duplicate id %s.", e.sale_id)
        return {"success": False, "error": f"Error: {e.message}"}

    return _with_storage_warning(session, {
        "success": True,
        "sale": _sale_row(sale),
        "message": f"Venta registrada exitosamente para {sale.customer_name}",
    })


def delete_sale_tool(session: BoxOfficeSession, sale_id: int) -> dict[str, Any]:
    """Remove one sale by id. Safe to call twice; the second call reports not-found."""
    try:
        sale = session.delete_sale(sale_id)
    except SaleNotFoundError:
        return {
            "success": False,
            "error": "Error: No se encontró la venta a eliminar",
        }

    return _with_storage_warning(session, {
        "success": True,
        "sale": _sale_row(sale),
        "message": "Venta eliminada exitosamente",
    })


def clear_all_tool(session: BoxOfficeSession, confirm: bool = False) -> dict[str, Any]:
    """Delete every sale and the stored record. Requires ``confirm=True``."""
    if not confirm:
        return {
            "success": False,
            "error": CLEAR_CONFIRM_PROMPT,
            "requires_confirmation": True,
        }

    session.reset()
    return _with_storage_warning(session, {
        "success": True,
        "message": "Todos los datos han sido eliminados",
    })


# ---------------------------------------------------------------------------
# Read-only tools
# ---------------------------------------------------------------------------


def summary_tool(session: BoxOfficeSession) -> dict[str, Any]:
    """Per-category and grand totals, ready to display. No side effects."""
    summary = session.summary
    categories = {
        category.value: {
            "label": category_label(category.value),
            "unit_price": str(session.prices.price_of(category))
            if category in session.prices else None,
            **_totals_view(summary.bucket(category)),
        }
        for category in Category
    }
    return {
        "success": True,
        "categories": categories,
        "grand_total": _totals_view(summary.grand_total),
    }


def sales_table_tool(session: BoxOfficeSession) -> dict[str, Any]:
    """All sales in insertion order, one display row each."""
    rows = [_sale_row(sale) for sale in session.sales()]
    result: dict[str, Any] = {"success": True, "rows": rows}
    if not rows:
        result["message"] = EMPTY_TABLE_MESSAGE
    return result
