import asyncio
import logging
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from features.common.models.geo_types import GeoPoint
from features.common.models.station_types import StationRecord, StationTag
from features.common.services.providers import StationDetailProvider, WeatherProvider
from features.common.exceptions.provider_exceptions import WeatherUnavailableError
from features.common.utils.geo import bounding_box, sort_by_distance
from features.conditions.models.conditions_types import AggregateResult, SortOrder, StationDetail
from features.gauges.models.gauge_types import GaugeResult
from features.stations.services.station_service import StationService
from features.tides.models.tide_types import TideResult
from features.weather.models.weather_types import UnitSystem
from core.config import settings

logger = logging.getLogger(__name__)

class ConditionsService:
    """Combines weather, nearby tides and nearby gauges for a point.

    The weather forecast is required: if it fails the whole request fails.
    Tide and gauge lookups are best effort; a station whose fetch fails,
    times out or has no data is left out of the result.
    """

    def __init__(
        self,
        weather_provider: WeatherProvider,
        detail_providers: Iterable[StationDetailProvider],
        station_service: StationService,
        call_timeout: Optional[float] = None
    ):
        self.weather_provider = weather_provider
        self.detail_providers: Dict[StationTag, StationDetailProvider] = {
            provider.tag: provider for provider in detail_providers
        }
        self.station_service = station_service
        self.call_timeout = call_timeout or settings.provider_call_timeout

    async def get_conditions(
        self,
        point: GeoPoint,
        radius_miles: float,
        unit_system: UnitSystem
    ) -> AggregateResult:
        """Get weather plus tide and gauge readings within radius_miles of point.

        Raises:
            DegenerateQueryError: radius is negative, NaN or infinite
            WeatherUnavailableError: the forecast fetch failed or timed out
        """
        start_time = datetime.now(timezone.utc)
        # Reject a bad radius before any I/O
        bounding_box(point, radius_miles)
        await self.station_service.refresher.ensure_all()

        stations: List[StationRecord] = []
        for tag in self.detail_providers:
            stations.extend(await self.station_service.find_nearby(tag, point, radius_miles))

        logger.info(
            f"Fetching conditions for ({point.latitude}, {point.longitude}) "
            f"with {len(stations)} stations within {radius_miles} mi"
        )

        weather, *details = await asyncio.gather(
            asyncio.wait_for(
                self.weather_provider.fetch_forecast(point, unit_system),
                timeout=self.call_timeout
            ),
            *(self._fetch_detail_safely(station) for station in stations),
            return_exceptions=True
        )

        if isinstance(weather, Exception):
            logger.error(f"❌ Weather unavailable for ({point.latitude}, {point.longitude}): {weather!r}")
            raise WeatherUnavailableError(f"Weather forecast unavailable: {str(weather) or type(weather).__name__}") from weather
        if isinstance(weather, BaseException):
            raise weather

        result = self._assemble(weather, details)
        duration = (datetime.now(timezone.utc) - start_time).total_seconds()
        logger.info(
            f"✅ Conditions ready in {duration:.2f}s: "
            f"{len(result.tides)} tide and {len(result.gauges)} gauge stations "
            f"({len(stations) - len(result.tides) - len(result.gauges)} dropped)"
        )
        return result

    async def _fetch_detail_safely(self, station: StationRecord) -> Optional[StationDetail]:
        """Fetch one station's reading; failures are logged and become None."""
        provider = self.detail_providers[station.tag]
        try:
            return await asyncio.wait_for(provider.fetch_detail(station), timeout=self.call_timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Timed out fetching {station.tag.value} station {station.id}")
        except Exception as e:
            logger.warning(f"Dropping {station.tag.value} station {station.id}: {str(e)}")
        return None

    @staticmethod
    def _assemble(weather, details: List[Optional[StationDetail]]) -> AggregateResult:
        tides: List[TideResult] = []
        gauges: List[GaugeResult] = []
        for detail in details:
            if isinstance(detail, TideResult):
                tides.append(detail)
            elif isinstance(detail, GaugeResult):
                gauges.append(detail)
        return AggregateResult(weather=weather, tides=tides, gauges=gauges)

def sort_result(result: AggregateResult, origin: GeoPoint, order: SortOrder) -> AggregateResult:
    """Order the tide and gauge entries for presentation."""
    if order == SortOrder.DISTANCE:
        tides = sort_by_distance(result.tides, origin, key=lambda tide: tide.coordinates)
        gauges = sort_by_distance(result.gauges, origin, key=lambda gauge: gauge.coordinates)
    elif order == SortOrder.NAME:
        tides = sorted(result.tides, key=lambda tide: tide.station_name)
        gauges = sorted(result.gauges, key=lambda gauge: gauge.site_name)
    else:
        return result
    return result.model_copy(update={"tides": tides, "gauges": gauges})
