"""
Storage layer for ship records.

Backends implement ShipStorage; the factory picks one from configuration so
the ship service never depends on a concrete database.
"""

from cosmoport.storage.base import Page, PageRequest, ShipStorage, SortDirection
from cosmoport.storage.factory import (
    close_storage,
    create_storage,
    get_storage,
    initialize_storage,
    set_storage,
)

__all__ = [
    "Page",
    "PageRequest",
    "ShipStorage",
    "SortDirection",
    "close_storage",
    "create_storage",
    "get_storage",
    "initialize_storage",
    "set_storage",
]
