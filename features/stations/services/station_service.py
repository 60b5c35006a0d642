import logging
from typing import List

from geojson_pydantic import Feature, FeatureCollection, Point

from features.common.models.geo_types import GeoPoint
from features.common.models.station_types import StationRecord, StationTag
from features.common.utils.geo import bounding_box, sort_by_distance, within_radius
from features.stations.services.station_store import StationStore
from features.stations.services.station_cache_refresher import StationCacheRefresher

logger = logging.getLogger(__name__)

class StationService:
    """Lookups over the cached tide and gauge registries."""

    def __init__(self, store: StationStore, refresher: StationCacheRefresher):
        self.store = store
        self.refresher = refresher

    async def find_nearby(
        self,
        tag: StationTag,
        point: GeoPoint,
        radius_miles: float
    ) -> List[StationRecord]:
        """Cached stations within radius_miles of point, nearest first.

        The bounding box narrows the candidates; the Haversine check drops
        the box corners that lie outside the radius.

        Raises:
            DegenerateQueryError: radius is negative, NaN or infinite
        """
        box = bounding_box(point, radius_miles)
        candidates = await self.store.query_in_bounds(tag, box)
        nearby = [
            station for station in candidates
            if within_radius(point, station.coordinates, radius_miles)
        ]
        logger.debug(
            f"{len(candidates)} {tag.value} stations in box, {len(nearby)} within {radius_miles} mi"
        )
        return sort_by_distance(nearby, point, key=lambda station: station.coordinates)

    async def find_nearby_cached(
        self,
        tag: StationTag,
        point: GeoPoint,
        radius_miles: float
    ) -> List[StationRecord]:
        """Like find_nearby, populating the tag's cache first if empty."""
        await self.refresher.ensure_populated(tag)
        return await self.find_nearby(tag, point, radius_miles)

    async def get_stations_geojson(self, tag: StationTag) -> FeatureCollection:
        """Get cached stations of a tag in GeoJSON format."""
        await self.refresher.ensure_populated(tag)
        stations = await self.store.all_stations(tag)
        return FeatureCollection(
            type="FeatureCollection",
            features=[
                Feature(
                    type="Feature",
                    geometry=Point(
                        type="Point",
                        coordinates=(station.coordinates.longitude, station.coordinates.latitude)
                    ),
                    properties={
                        "id": station.id,
                        "name": station.name,
                        "type": station.tag.value
                    }
                )
                for station in stations
            ]
        )

    async def refresh(self, tag: StationTag) -> bool:
        return await self.refresher.refresh(tag)
