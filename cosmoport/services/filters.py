"""
Filter specification builder for ship queries.

Each filter dimension is turned into at most one Condition by its own builder
function. Conditions are immutable comparison nodes that can be evaluated
against a ship in memory or translated to a SQLAlchemy clause, so the same
Specification drives both storage backends. A dimension with no parameters
yields None, which means "no constraint" rather than "match nothing".
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, Optional, Tuple

from sqlalchemy import and_, true
from sqlalchemy.sql.elements import ColumnElement

from cosmoport.models import Ship, ShipType
from cosmoport.utils import to_utc_naive


class Operator(str, Enum):
    CONTAINS = "contains"
    EQUALS = "eq"
    AT_LEAST = "ge"
    AT_MOST = "le"
    BETWEEN = "between"


@dataclass(frozen=True)
class Condition:
    """A single comparison between a ship attribute and captured bounds."""

    attribute: str
    operator: Operator
    value: Any
    upper: Any = None

    def matches(self, ship: Ship) -> bool:
        actual = getattr(ship, self.attribute)
        if self.operator is Operator.CONTAINS:
            return self.value in actual
        if self.operator is Operator.EQUALS:
            return actual == self.value
        if self.operator is Operator.AT_LEAST:
            return actual >= self.value
        if self.operator is Operator.AT_MOST:
            return actual <= self.value
        return self.value <= actual <= self.upper

    def to_clause(self) -> ColumnElement:
        column = getattr(Ship, self.attribute)
        if self.operator is Operator.CONTAINS:
            return column.contains(self.value, autoescape=True)
        if self.operator is Operator.EQUALS:
            return column == self.value
        if self.operator is Operator.AT_LEAST:
            return column >= self.value
        if self.operator is Operator.AT_MOST:
            return column <= self.value
        return column.between(self.value, self.upper)


@dataclass(frozen=True)
class Specification:
    """Conjunction of conditions; an empty one matches every ship."""

    conditions: Tuple[Condition, ...] = ()

    def matches(self, ship: Ship) -> bool:
        return all(condition.matches(ship) for condition in self.conditions)

    def to_clause(self) -> ColumnElement:
        if not self.conditions:
            return true()
        return and_(*(condition.to_clause() for condition in self.conditions))

    def __and__(self, other: "Specification") -> "Specification":
        return Specification(self.conditions + other.conditions)

    def __bool__(self) -> bool:
        return bool(self.conditions)


def where(*fragments: Optional[Condition]) -> Specification:
    """Combine fragments with AND, skipping the ones that are absent."""
    return Specification(tuple(f for f in fragments if f is not None))


def _substring(field_name: str, value: Optional[str]) -> Optional[Condition]:
    if value is None:
        return None
    return Condition(field_name, Operator.CONTAINS, value)


def _range(field_name: str, lower: Any, upper: Any) -> Optional[Condition]:
    if lower is None and upper is None:
        return None
    if lower is None:
        return Condition(field_name, Operator.AT_MOST, upper)
    if upper is None:
        return Condition(field_name, Operator.AT_LEAST, lower)
    return Condition(field_name, Operator.BETWEEN, lower, upper)


def filter_by_name(name: Optional[str]) -> Optional[Condition]:
    return _substring("name", name)


def filter_by_planet(planet: Optional[str]) -> Optional[Condition]:
    return _substring("planet", planet)


def filter_by_ship_type(ship_type: Optional[ShipType]) -> Optional[Condition]:
    if ship_type is None:
        return None
    return Condition("ship_type", Operator.EQUALS, ship_type)


def filter_by_prod_date(
    after: Optional[datetime], before: Optional[datetime]
) -> Optional[Condition]:
    # Stored dates are naive UTC, so the bounds are normalized the same way
    if after is not None:
        after = to_utc_naive(after)
    if before is not None:
        before = to_utc_naive(before)
    return _range("prod_date", after, before)


def filter_by_usage(is_used: Optional[bool]) -> Optional[Condition]:
    if is_used is None:
        return None
    return Condition("is_used", Operator.EQUALS, bool(is_used))


def filter_by_speed(
    min_speed: Optional[float], max_speed: Optional[float]
) -> Optional[Condition]:
    return _range("speed", min_speed, max_speed)


def filter_by_crew_size(
    min_crew_size: Optional[int], max_crew_size: Optional[int]
) -> Optional[Condition]:
    return _range("crew_size", min_crew_size, max_crew_size)


def filter_by_rating(
    min_rating: Optional[float], max_rating: Optional[float]
) -> Optional[Condition]:
    return _range("rating", min_rating, max_rating)


@dataclass(frozen=True)
class ShipFilterParams:
    """Parsed, optional filter parameters; None means the dimension is unset."""

    name: Optional[str] = None
    planet: Optional[str] = None
    ship_type: Optional[ShipType] = None
    after: Optional[datetime] = None
    before: Optional[datetime] = None
    is_used: Optional[bool] = None
    min_speed: Optional[float] = None
    max_speed: Optional[float] = None
    min_crew_size: Optional[int] = None
    max_crew_size: Optional[int] = None
    min_rating: Optional[float] = None
    max_rating: Optional[float] = None

    def fragments(self) -> Iterable[Optional[Condition]]:
        return (
            filter_by_name(self.name),
            filter_by_planet(self.planet),
            filter_by_ship_type(self.ship_type),
            filter_by_prod_date(self.after, self.before),
            filter_by_usage(self.is_used),
            filter_by_speed(self.min_speed, self.max_speed),
            filter_by_crew_size(self.min_crew_size, self.max_crew_size),
            filter_by_rating(self.min_rating, self.max_rating),
        )


def build_specification(params: Optional[ShipFilterParams] = None) -> Specification:
    """Build the combined specification for a set of filter parameters."""
    if params is None:
        return Specification()
    return where(*params.fragments())
