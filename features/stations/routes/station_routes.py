from typing import Dict, List
from fastapi import APIRouter, HTTPException, Depends, Query, Request
from geojson_pydantic import FeatureCollection
from features.common.models.geo_types import GeoPoint
from features.common.models.station_types import StationRecord, StationTag
from features.stations.services.station_service import StationService
from core.config import settings

router = APIRouter(
    prefix="/stations",
    tags=["Stations"]
)

def get_service(request: Request) -> StationService:
    """Dependency to get the StationService instance."""
    return request.app.state.station_service

@router.get(
    "/{tag}/nearby",
    response_model=List[StationRecord],
    summary="Get cached stations near a location",
    description="Returns tide stations or river gauges within the radius, nearest first"
)
async def get_nearby_stations(
    tag: StationTag,
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    radius: float = Query(settings.default_radius_miles, ge=0, le=settings.max_radius_miles),
    service: StationService = Depends(get_service)
) -> List[StationRecord]:
    return await service.find_nearby_cached(tag, GeoPoint(latitude=lat, longitude=lon), radius)

@router.get(
    "/{tag}/geojson",
    summary="Get cached stations in GeoJSON format",
    description="Returns every cached station of the type as a GeoJSON FeatureCollection for mapping"
)
async def get_stations_geojson(
    tag: StationTag,
    service: StationService = Depends(get_service)
) -> FeatureCollection:
    return await service.get_stations_geojson(tag)

@router.post(
    "/{tag}/refresh",
    summary="Refresh a station catalog",
    description="Re-fetches the full catalog from the provider and replaces the cached stations"
)
async def refresh_stations(
    tag: StationTag,
    service: StationService = Depends(get_service)
) -> Dict:
    if not await service.refresh(tag):
        raise HTTPException(status_code=502, detail=f"Failed to refresh {tag.value} station catalog")
    return {"tag": tag.value, "count": await service.store.count(tag)}
