"""
Abstract base class for ship storage backends.

This module defines the interface the ship service consumes, together with
the pagination descriptor it forwards untouched and the page it gets back.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from cosmoport.models import Ship, ShipOrder
from cosmoport.services.filters import Specification


class SortDirection(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


@dataclass(frozen=True)
class PageRequest:
    """Page index (zero based), page size and ordering for a list query."""

    page_number: int = 0
    page_size: int = 3
    order: ShipOrder = ShipOrder.ID
    direction: SortDirection = SortDirection.ASC

    @property
    def offset(self) -> int:
        return self.page_number * self.page_size


@dataclass
class Page:
    """One page of ships plus the number of ships matching overall."""

    items: List[Ship]
    total: int
    page_number: int
    page_size: int

    @property
    def total_pages(self) -> int:
        if self.page_size <= 0:
            return 0
        return -(-self.total // self.page_size)


class ShipStorage(ABC):
    """
    Abstract base class for ship storage backends.

    Each mutating call is applied atomically by the backend; the ship service
    issues one call per operation and never locks on its own.
    """

    @abstractmethod
    async def initialize(self) -> None:
        """
        Prepare the backend (open connections, create tables).

        Raises:
            Exception: If initialization fails
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release the backend's resources."""
        pass

    @abstractmethod
    async def find_by_id(self, ship_id: int) -> Optional[Ship]:
        """Return the ship with the given id, or None."""
        pass

    @abstractmethod
    async def save(self, ship: Ship) -> Ship:
        """
        Insert or update a ship.

        New ships (id is None) get an id assigned by the backend.

        Returns:
            The stored ship, with its id set
        """
        pass

    @abstractmethod
    async def delete(self, ship: Ship) -> None:
        """Remove a stored ship."""
        pass

    @abstractmethod
    async def find_all(self, spec: Specification, page: PageRequest) -> Page:
        """Return the requested page of ships matching the specification."""
        pass

    @abstractmethod
    async def count(self, spec: Specification) -> int:
        """Count the ships matching the specification."""
        pass
