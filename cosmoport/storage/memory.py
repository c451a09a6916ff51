"""
In-memory storage backend.

Ships live in a dict keyed by id and every query is a full scan evaluating
the specification's conditions in Python. Storage keeps its own copies, so a
caller mutating a ship it holds does not change storage until it saves.
"""

import logging
from typing import Dict, List, Optional

from cosmoport.models import Ship
from cosmoport.services.filters import Specification
from cosmoport.storage.base import Page, PageRequest, ShipStorage, SortDirection

logger = logging.getLogger(__name__)


def _copy(ship: Ship) -> Ship:
    return Ship(**ship.model_dump())


class MemoryStorage(ShipStorage):
    """Dict-backed ship storage."""

    def __init__(self, ships: Optional[List[Ship]] = None):
        self._ships: Dict[int, Ship] = {}
        self._next_id = 1
        for ship in ships or []:
            self._insert(ship)

    async def initialize(self) -> None:
        logger.info(f"Memory storage ready with {len(self._ships)} ships")

    async def close(self) -> None:
        self._ships.clear()
        logger.info("Memory storage cleared")

    def _insert(self, ship: Ship) -> Ship:
        if ship.id is None:
            ship.id = self._next_id
        self._next_id = max(self._next_id, ship.id) + 1
        self._ships[ship.id] = _copy(ship)
        return ship

    async def find_by_id(self, ship_id: int) -> Optional[Ship]:
        stored = self._ships.get(ship_id)
        return _copy(stored) if stored else None

    async def save(self, ship: Ship) -> Ship:
        if ship.id is None or ship.id not in self._ships:
            return self._insert(ship)
        self._ships[ship.id] = _copy(ship)
        return ship

    async def delete(self, ship: Ship) -> None:
        self._ships.pop(ship.id, None)

    def _matching(self, spec: Specification) -> List[Ship]:
        return [ship for ship in self._ships.values() if spec.matches(ship)]

    async def find_all(self, spec: Specification, page: PageRequest) -> Page:
        matches = self._matching(spec)
        matches.sort(
            key=lambda ship: (getattr(ship, page.order.field_name), ship.id),
            reverse=page.direction is SortDirection.DESC,
        )
        start = page.offset
        return Page(
            items=[_copy(ship) for ship in matches[start:start + page.page_size]],
            total=len(matches),
            page_number=page.page_number,
            page_size=page.page_size,
        )

    async def count(self, spec: Specification) -> int:
        return len(self._matching(spec))
