from sqlmodel import SQLModel, Field
from sqlalchemy import DateTime
from pydantic import BaseModel, ConfigDict, field_serializer
from pydantic.alias_generators import to_camel
from typing import Optional, Dict, Any, List
from datetime import datetime
from enum import Enum

from cosmoport.utils import to_epoch_millis


class ShipType(str, Enum):
    """Ship type variants"""
    TRANSPORT = "TRANSPORT"
    MILITARY = "MILITARY"
    MERCHANT = "MERCHANT"


class ShipOrder(str, Enum):
    """Sort keys accepted by the list endpoint"""
    ID = "ID"
    SPEED = "SPEED"
    DATE = "DATE"
    RATING = "RATING"

    @property
    def field_name(self) -> str:
        return _ORDER_FIELDS[self]


_ORDER_FIELDS = {
    ShipOrder.ID: "id",
    ShipOrder.SPEED: "speed",
    ShipOrder.DATE: "prod_date",
    ShipOrder.RATING: "rating",
}


# Field limits
MAX_NAME_LENGTH = 50
MIN_PROD_YEAR = 2800
MAX_PROD_YEAR = 3019
MIN_SPEED = 0.01
MAX_SPEED = 0.99
MIN_CREW_SIZE = 1
MAX_CREW_SIZE = 9999


# Database Models
class ShipBase(SQLModel):
    name: str = Field(max_length=MAX_NAME_LENGTH, description="Ship name")
    planet: str = Field(max_length=MAX_NAME_LENGTH, description="Planet the ship stays on")
    ship_type: ShipType = Field(description="Ship type")
    prod_date: datetime = Field(
        sa_type=DateTime(timezone=False), description="Production date, naive UTC"
    )
    is_used: bool = Field(default=False, description="Whether the ship is second-hand")
    speed: float = Field(description="Maximum speed, rounded to 2 decimals")
    crew_size: int = Field(description="Number of crew members")
    rating: float = Field(default=0.0, description="Computed rating, rounded to 2 decimals")


class Ship(ShipBase, table=True):
    __tablename__ = "ships"  # type: ignore

    id: Optional[int] = Field(default=None, primary_key=True)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ship):
            return NotImplemented
        return self.model_dump() == other.model_dump()

    # id is assigned by storage after construction, so ships are unhashable
    __hash__ = None  # type: ignore[assignment]


# API Request/Response Models
_camel_config = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    # id and rating are server-owned; clients sending them are ignored
    extra="ignore",
)


class ShipCreateRequest(BaseModel):
    """
    Payload for creating a ship.

    Every field is optional at the parsing level so that a missing value is
    reported by the validation engine as an invalid field, not as a schema
    error.
    """

    model_config = _camel_config

    name: Optional[str] = None
    planet: Optional[str] = None
    ship_type: Optional[ShipType] = None
    prod_date: Optional[datetime] = Field(None, description="Epoch milliseconds or ISO 8601")
    is_used: Optional[bool] = None
    speed: Optional[float] = None
    crew_size: Optional[int] = None


class ShipUpdateRequest(ShipCreateRequest):
    """Partial update: only the fields present in the payload are applied."""

    def changes(self) -> Dict[str, Any]:
        """Fields the client provided with a non-null value"""
        return {
            name: getattr(self, name)
            for name in self.model_fields_set
            if getattr(self, name) is not None
        }


class ShipResponse(BaseModel):
    model_config = ConfigDict(
        from_attributes=True, alias_generator=to_camel, populate_by_name=True
    )

    id: int
    name: str
    planet: str
    ship_type: ShipType
    prod_date: datetime
    is_used: bool
    speed: float
    crew_size: int
    rating: float

    @field_serializer("prod_date")
    def serialize_prod_date(self, prod_date: datetime) -> int:
        return to_epoch_millis(prod_date)


class ErrorResponse(BaseModel):
    detail: str


def to_responses(ships: List[Ship]) -> List[ShipResponse]:
    return [ShipResponse.model_validate(ship) for ship in ships]
