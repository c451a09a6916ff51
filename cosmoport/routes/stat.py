"""Statistics and version information endpoints"""

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Dict
import tomli
from pathlib import Path
from cosmoport.models import ShipType
from cosmoport.services.filters import ShipFilterParams
from cosmoport.services.ship_service import ship_service

router = APIRouter()


def get_version() -> str:
    """Get version from pyproject.toml"""
    try:
        pyproject_path = Path(__file__).parent.parent.parent / "pyproject.toml"
        with open(pyproject_path, "rb") as f:
            data = tomli.load(f)
        return data.get("project", {}).get("version", "unknown")
    except (OSError, tomli.TOMLDecodeError):
        return "unknown"


class ShipStats(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total: int
    used: int
    by_type: Dict[ShipType, int]


class OverviewResponse(BaseModel):
    service: str
    version: str
    status: str
    ships: ShipStats


@router.get("/stat")
async def get_stat():
    """Get service statistics and version information"""
    return {
        "service": "cosmoport",
        "version": get_version(),
        "status": "running",
    }


@router.get("/stat/overview", response_model=OverviewResponse)
async def get_overview():
    """Get ship counts for the dashboard"""
    by_type = {
        ship_type: await ship_service.count_ships(ShipFilterParams(ship_type=ship_type))
        for ship_type in ShipType
    }
    return OverviewResponse(
        service="cosmoport",
        version=get_version(),
        status="running",
        ships=ShipStats(
            total=await ship_service.count_ships(),
            used=await ship_service.count_ships(ShipFilterParams(is_used=True)),
            by_type=by_type,
        ),
    )
