"""
Domain errors raised by the ship service.

Routes translate these into HTTP responses; nothing in the core catches them.
"""

from typing import Any


class CosmoportError(Exception):
    """Base class for all ship registry errors."""


class InvalidFieldError(CosmoportError):
    """A supplied value violates a field's range, format or non-null rule."""

    def __init__(self, field: str, reason: str, value: Any = None):
        self.field = field
        self.reason = reason
        self.value = value
        super().__init__(f"Invalid {field}: {reason}")


class InvalidIdError(CosmoportError):
    """A ship id is missing or not positive."""

    def __init__(self, ship_id: Any):
        self.ship_id = ship_id
        super().__init__(f"Ship id is invalid: {ship_id!r}")


class ShipNotFoundError(CosmoportError):
    """Storage has no ship with the requested id."""

    def __init__(self, ship_id: int):
        self.ship_id = ship_id
        super().__init__(f"Ship not found: {ship_id}")
