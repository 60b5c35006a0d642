import logging
from typing import List
from fastapi import APIRouter, HTTPException, Depends, Query, Request
from features.common.models.geo_types import GeoPoint
from features.common.exceptions.provider_exceptions import ProviderError
from features.weather.models.weather_types import CityResult, DayDetail, UnitSystem
from features.weather.services.day_detail import build_day_detail
from features.weather.services.open_meteo_client import OpenMeteoClient
from core.config import settings

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/weather",
    tags=["Weather"]
)

def get_client(request: Request) -> OpenMeteoClient:
    """Dependency to get the OpenMeteoClient instance."""
    return request.app.state.weather_client

@router.get(
    "/cities",
    response_model=List[CityResult],
    summary="Search cities by name",
    description="Returns up to five matching places; queries shorter than three characters return no results"
)
async def search_cities(
    query: str = Query(..., description="Place name"),
    client: OpenMeteoClient = Depends(get_client)
) -> List[CityResult]:
    try:
        return await client.search_cities(query)
    except ProviderError as e:
        logger.error(f"City search failed for {query!r}: {str(e)}")
        raise HTTPException(status_code=502, detail=str(e))

@router.get(
    "/day",
    response_model=DayDetail,
    summary="Get the detailed forecast for one day",
    description="Returns temperatures, UV, sun times and, for today, current wind, pressure and humidity"
)
async def get_day_detail(
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    day: int = Query(0, ge=0, description="Day offset, 0 is today"),
    units: UnitSystem = Query(UnitSystem(settings.default_units)),
    client: OpenMeteoClient = Depends(get_client)
) -> DayDetail:
    try:
        snapshot = await client.fetch_forecast(GeoPoint(latitude=lat, longitude=lon), units)
    except ProviderError as e:
        raise HTTPException(status_code=502, detail=str(e))

    try:
        return build_day_detail(snapshot, day)
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e))
