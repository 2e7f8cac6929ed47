"""Ticketbooth: single-page ticket sales ledger.

Prices each sale, keeps an ordered ledger, and maintains running totals
per ticket category.
"""

__version__ = "0.1.0"

from ticketbooth.config import TicketboothConfig
from ticketbooth.constants import Category, CATEGORY_LABELS, DEFAULT_STORAGE_KEY, category_label
from ticketbooth.errors import (
    DuplicateSaleIdError,
    ErrorCode,
    InvalidQuantityError,
    SaleNotFoundError,
    StorageError,
    SummaryConsistencyError,
    TicketboothError,
    UnknownCategoryError,
    ValidationError,
)
from ticketbooth.ledger import CategoryTotals, Sale, SaleLedger, Summary
from ticketbooth.persistence import PersistenceAdapter, StoredState
from ticketbooth.pricing import DEFAULT_PRICE_LIST, PriceList
from ticketbooth.session import BoxOfficeSession, open_session
from ticketbooth.store_backend import StoreBackend
from ticketbooth.stores import FileStore, HttpStore, MemoryStore

__all__ = [
    "TicketboothConfig",
    "Category",
    "CATEGORY_LABELS",
    "DEFAULT_STORAGE_KEY",
    "category_label",
    "DuplicateSaleIdError",
    "ErrorCode",
    "InvalidQuantityError",
    "SaleNotFoundError",
    "StorageError",
    "SummaryConsistencyError",
    "TicketboothError",
    "UnknownCategoryError",
    "ValidationError",
    "CategoryTotals",
    "Sale",
    "SaleLedger",
    "Summary",
    "PersistenceAdapter",
    "StoredState",
    "DEFAULT_PRICE_LIST",
    "PriceList",
    "BoxOfficeSession",
    "open_session",
    "StoreBackend",
    "FileStore",
    "HttpStore",
    "MemoryStore",
]
