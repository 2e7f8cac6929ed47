"""Ticketbooth configuration: plain frozen dataclass, no pydantic.

The host application builds this from its own settings (env vars, CLI
flags, etc.) and passes it to ``open_session``.
"""

from dataclasses import dataclass

from ticketbooth.constants import DEFAULT_STORAGE_KEY
from ticketbooth.store_backend import check_storage_key


@dataclass(frozen=True)
class TicketboothConfig:
    storage_key: str = DEFAULT_STORAGE_KEY
    store_dir: str | None = None
    store_url: str | None = None
    store_api_key: str | None = None
    store_namespace: str = "ticketbooth"
    store_timeout_secs: float = 10.0

    def __post_init__(self) -> None:
        check_storage_key(self.storage_key)
