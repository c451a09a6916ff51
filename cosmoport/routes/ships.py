import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from cosmoport.config import settings
from cosmoport.errors import (
    CosmoportError,
    InvalidFieldError,
    InvalidIdError,
    ShipNotFoundError,
)
from cosmoport.models import (
    ErrorResponse,
    ShipCreateRequest,
    ShipOrder,
    ShipResponse,
    ShipType,
    ShipUpdateRequest,
    to_responses,
)
from cosmoport.services.filters import ShipFilterParams
from cosmoport.services.ship_service import ship_service
from cosmoport.storage import PageRequest, SortDirection
from cosmoport.utils import from_epoch_millis

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/rest")

_ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
}


def _to_http_error(error: CosmoportError) -> HTTPException:
    """Map a domain error onto an HTTP status"""
    if isinstance(error, ShipNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    if isinstance(error, (InvalidFieldError, InvalidIdError)):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(error)
    )


def _parse_epoch_bound(name: str, millis: Optional[int]):
    """Convert an epoch-millisecond bound, rejecting values out of datetime range"""
    if millis is None:
        return None
    try:
        return from_epoch_millis(millis)
    except OverflowError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {name}: out of range",
        )


def get_filter_params(
    name: Optional[str] = Query(None, description="Substring of the ship name"),
    planet: Optional[str] = Query(None, description="Substring of the planet"),
    ship_type: Optional[ShipType] = Query(None, alias="shipType"),
    after: Optional[int] = Query(None, description="Earliest prodDate, epoch ms"),
    before: Optional[int] = Query(None, description="Latest prodDate, epoch ms"),
    is_used: Optional[bool] = Query(None, alias="isUsed"),
    min_speed: Optional[float] = Query(None, alias="minSpeed"),
    max_speed: Optional[float] = Query(None, alias="maxSpeed"),
    min_crew_size: Optional[int] = Query(None, alias="minCrewSize"),
    max_crew_size: Optional[int] = Query(None, alias="maxCrewSize"),
    min_rating: Optional[float] = Query(None, alias="minRating"),
    max_rating: Optional[float] = Query(None, alias="maxRating"),
) -> ShipFilterParams:
    """Collect the optional filter query parameters"""
    return ShipFilterParams(
        name=name,
        planet=planet,
        ship_type=ship_type,
        after=_parse_epoch_bound("after", after),
        before=_parse_epoch_bound("before", before),
        is_used=is_used,
        min_speed=min_speed,
        max_speed=max_speed,
        min_crew_size=min_crew_size,
        max_crew_size=max_crew_size,
        min_rating=min_rating,
        max_rating=max_rating,
    )


def get_page_request(
    order: ShipOrder = Query(ShipOrder.ID, description="Sort key"),
    direction: SortDirection = Query(SortDirection.ASC),
    page_number: int = Query(0, alias="pageNumber", ge=0),
    page_size: int = Query(
        settings.default_page_size, alias="pageSize", ge=1, le=settings.max_page_size
    ),
) -> PageRequest:
    """Collect the pagination query parameters"""
    return PageRequest(
        page_number=page_number,
        page_size=page_size,
        order=order,
        direction=direction,
    )


@router.get("/ships", response_model=list[ShipResponse])
async def list_ships(
    filters: ShipFilterParams = Depends(get_filter_params),
    page: PageRequest = Depends(get_page_request),
):
    """Get one page of ships matching the filters"""
    result = await ship_service.list_ships(filters, page)
    return to_responses(result.items)


@router.get("/ships/count", response_model=int)
async def count_ships(filters: ShipFilterParams = Depends(get_filter_params)):
    """Count ships matching the filters"""
    return await ship_service.count_ships(filters)


@router.post("/ships", response_model=ShipResponse, responses=_ERROR_RESPONSES)
async def create_ship(request: ShipCreateRequest):
    """Create a new ship"""
    try:
        ship = await ship_service.create_ship(request)
    except CosmoportError as e:
        raise _to_http_error(e)
    return ShipResponse.model_validate(ship)


@router.get("/ships/{ship_id}", response_model=ShipResponse, responses=_ERROR_RESPONSES)
async def get_ship(ship_id: int):
    """Get ship information"""
    try:
        ship = await ship_service.get_ship(ship_id)
    except CosmoportError as e:
        raise _to_http_error(e)
    return ShipResponse.model_validate(ship)


@router.post("/ships/{ship_id}", response_model=ShipResponse, responses=_ERROR_RESPONSES)
async def update_ship(ship_id: int, request: ShipUpdateRequest):
    """Update the fields present in the request body"""
    try:
        ship = await ship_service.update_ship(ship_id, request)
    except CosmoportError as e:
        raise _to_http_error(e)
    return ShipResponse.model_validate(ship)


@router.delete("/ships/{ship_id}", responses=_ERROR_RESPONSES)
async def delete_ship(ship_id: int):
    """Delete a ship"""
    try:
        await ship_service.delete_ship(ship_id)
    except CosmoportError as e:
        raise _to_http_error(e)
    return Response(status_code=status.HTTP_200_OK)
