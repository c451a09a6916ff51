"""
Field validation and rating computation for ships.

Every check is a pure function over an already-parsed value: it returns None
when the value is acceptable and raises InvalidFieldError (or InvalidIdError)
otherwise. Parsing and coercion happen before these are called.
"""

from datetime import datetime
from typing import Any, Optional

from cosmoport.errors import InvalidFieldError, InvalidIdError
from cosmoport.models import (
    MAX_CREW_SIZE,
    MAX_NAME_LENGTH,
    MAX_PROD_YEAR,
    MAX_SPEED,
    MIN_CREW_SIZE,
    MIN_PROD_YEAR,
    MIN_SPEED,
    ShipType,
)
from cosmoport.utils import round_half_up, to_utc_naive

RATING_FACTOR = 80
USED_SHIP_FACTOR = 0.5
# The rating divisor is counted from the year after the newest allowed one
CURRENT_YEAR = MAX_PROD_YEAR


def _validate_label(field: str, value: Optional[str]) -> None:
    if value is None:
        raise InvalidFieldError(field, "is required")
    if not value:
        raise InvalidFieldError(field, "must not be empty", value)
    if len(value) > MAX_NAME_LENGTH:
        raise InvalidFieldError(
            field, f"must be at most {MAX_NAME_LENGTH} characters", value
        )


def validate_name(name: Optional[str]) -> None:
    _validate_label("name", name)


def validate_planet(planet: Optional[str]) -> None:
    _validate_label("planet", planet)


def validate_ship_type(ship_type: Any) -> None:
    if not isinstance(ship_type, ShipType):
        raise InvalidFieldError("shipType", "is not a known ship type", ship_type)


def production_year(prod_date: datetime) -> int:
    """Calendar year of a production date, read in UTC."""
    return to_utc_naive(prod_date).year


def validate_prod_date(prod_date: Optional[datetime]) -> None:
    if prod_date is None:
        raise InvalidFieldError("prodDate", "is required")
    year = production_year(prod_date)
    if year < MIN_PROD_YEAR or year > MAX_PROD_YEAR:
        raise InvalidFieldError(
            "prodDate",
            f"year must be between {MIN_PROD_YEAR} and {MAX_PROD_YEAR}",
            prod_date,
        )


def validate_speed(speed: Optional[float]) -> None:
    if speed is None:
        raise InvalidFieldError("speed", "is required")
    # Written as a chained comparison so NaN falls outside the range
    if not (MIN_SPEED <= speed <= MAX_SPEED):
        raise InvalidFieldError(
            "speed", f"must be between {MIN_SPEED} and {MAX_SPEED}", speed
        )


def validate_crew_size(crew_size: Optional[int]) -> None:
    if crew_size is None:
        raise InvalidFieldError("crewSize", "is required")
    if crew_size < MIN_CREW_SIZE or crew_size > MAX_CREW_SIZE:
        raise InvalidFieldError(
            "crewSize",
            f"must be between {MIN_CREW_SIZE} and {MAX_CREW_SIZE}",
            crew_size,
        )


def validate_id(ship_id: Optional[int]) -> None:
    if ship_id is None or ship_id <= 0:
        raise InvalidIdError(ship_id)


def compute_rating(prod_year: int, speed: float, is_used: bool) -> float:
    """
    Compute a ship's rating.

    rating = 80 * speed * k / (3019 - prod_year + 1), with k = 0.5 for used
    ships and 1 otherwise, rounded half-up to two decimals.

    prod_year must already have passed validate_prod_date; the divisor is
    zero for 3020.

    Examples:
        >>> compute_rating(3019, 0.5, False)
        40.0
        >>> compute_rating(3000, 0.99, True)
        1.98
    """
    coefficient = USED_SHIP_FACTOR if is_used else 1.0
    raw = RATING_FACTOR * speed * coefficient / (CURRENT_YEAR - prod_year + 1)
    return round_half_up(raw)


# Validators keyed by the attribute name they guard
FIELD_VALIDATORS = {
    "name": validate_name,
    "planet": validate_planet,
    "ship_type": validate_ship_type,
    "prod_date": validate_prod_date,
    "speed": validate_speed,
    "crew_size": validate_crew_size,
}
