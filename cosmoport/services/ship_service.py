"""
Ship service module.

This module provides the ShipService class, the single place where ship
records are created, changed and removed. All input is validated before the
storage backend is touched, and the derived rating is recomputed on every
mutation.
"""

import logging
from typing import Any, Optional

from cosmoport.errors import InvalidFieldError, ShipNotFoundError
from cosmoport.models import Ship, ShipCreateRequest, ShipUpdateRequest
from cosmoport.services.filters import ShipFilterParams, build_specification
from cosmoport.services.validation import (
    FIELD_VALIDATORS,
    compute_rating,
    production_year,
    validate_id,
)
from cosmoport.storage import Page, PageRequest, ShipStorage, get_storage
from cosmoport.utils import round_half_up, to_utc_naive

logger = logging.getLogger(__name__)


def _normalize(field: str, value: Any) -> Any:
    """Bring a validated value into its stored form."""
    if field == "speed":
        return round_half_up(value)
    if field == "prod_date":
        return to_utc_naive(value)
    return value


class ShipService:
    """Service for managing ship records."""

    def __init__(self, storage: Optional[ShipStorage] = None):
        # None means the globally initialized backend, resolved on each call
        self._storage = storage

    @property
    def storage(self) -> ShipStorage:
        return self._storage if self._storage is not None else get_storage()

    async def create_ship(self, request: ShipCreateRequest) -> Ship:
        """Validate a candidate ship, compute its rating and store it."""
        try:
            for field, validator in FIELD_VALIDATORS.items():
                validator(getattr(request, field))
        except InvalidFieldError as e:
            logger.warning(f"Rejected ship creation: {e}")
            raise

        ship = Ship(
            name=request.name,
            planet=request.planet,
            ship_type=request.ship_type,
            prod_date=_normalize("prod_date", request.prod_date),
            is_used=bool(request.is_used),
            speed=_normalize("speed", request.speed),
            crew_size=request.crew_size,
        )
        self._refresh_rating(ship)

        ship = await self.storage.save(ship)
        logger.info(f"Created ship {ship.id} ({ship.name}) with rating {ship.rating}")
        return ship

    async def get_ship(self, ship_id: Optional[int]) -> Ship:
        """Get a ship by id."""
        validate_id(ship_id)
        ship = await self.storage.find_by_id(ship_id)
        if ship is None:
            raise ShipNotFoundError(ship_id)
        return ship

    async def update_ship(self, ship_id: Optional[int], request: ShipUpdateRequest) -> Ship:
        """
        Apply a partial update to a ship.

        Every provided field is validated before any of them is applied, so
        a rejected update leaves the stored ship untouched. The rating is
        recomputed afterwards whether or not its inputs changed.
        """
        ship = await self.get_ship(ship_id)
        changes = request.changes()

        try:
            for field, value in changes.items():
                validator = FIELD_VALIDATORS.get(field)
                if validator:
                    validator(value)
        except InvalidFieldError as e:
            logger.warning(f"Rejected update of ship {ship_id}: {e}")
            raise

        for field, value in changes.items():
            setattr(ship, field, _normalize(field, value))
        self._refresh_rating(ship)

        ship = await self.storage.save(ship)
        logger.info(f"Updated ship {ship.id}: {sorted(changes)}")
        return ship

    async def delete_ship(self, ship_id: Optional[int]) -> None:
        """Delete a ship by id."""
        ship = await self.get_ship(ship_id)
        await self.storage.delete(ship)
        logger.info(f"Deleted ship {ship.id}")

    async def list_ships(
        self,
        filters: Optional[ShipFilterParams] = None,
        page: Optional[PageRequest] = None,
    ) -> Page:
        """Get one page of ships matching the filters."""
        spec = build_specification(filters)
        return await self.storage.find_all(spec, page or PageRequest())

    async def count_ships(self, filters: Optional[ShipFilterParams] = None) -> int:
        """Count ships matching the filters."""
        return await self.storage.count(build_specification(filters))

    @staticmethod
    def _refresh_rating(ship: Ship) -> None:
        ship.rating = compute_rating(
            production_year(ship.prod_date), ship.speed, ship.is_used
        )


ship_service = ShipService()
