from fastapi import APIRouter, HTTPException, Depends, Query, Request
from features.common.models.geo_types import GeoPoint
from features.common.exceptions.provider_exceptions import DegenerateQueryError, WeatherUnavailableError
from features.conditions.models.conditions_types import AggregateResult, SortOrder
from features.conditions.services.conditions_service import ConditionsService, sort_result
from features.weather.models.weather_types import UnitSystem
from core.config import settings

router = APIRouter(
    prefix="/conditions",
    tags=["Conditions"]
)

def get_service(request: Request) -> ConditionsService:
    """Dependency to get the ConditionsService instance."""
    return request.app.state.conditions_service

@router.get(
    "",
    response_model=AggregateResult,
    summary="Get weather, tides and gauges for a location",
    description="Returns the forecast for a point together with today's tide predictions and the latest gauge readings for stations within the radius"
)
async def get_conditions(
    lat: float = Query(..., ge=-90, le=90, description="Latitude"),
    lon: float = Query(..., ge=-180, le=180, description="Longitude"),
    radius: float = Query(settings.default_radius_miles, ge=0, le=settings.max_radius_miles, description="Search radius in miles"),
    units: UnitSystem = Query(UnitSystem(settings.default_units)),
    sort: SortOrder = Query(SortOrder.DISTANCE),
    service: ConditionsService = Depends(get_service)
) -> AggregateResult:
    """Get aggregated conditions for a location."""
    point = GeoPoint(latitude=lat, longitude=lon)
    try:
        result = await service.get_conditions(point, radius, units)
    except DegenerateQueryError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except WeatherUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return sort_result(result, point, sort)
