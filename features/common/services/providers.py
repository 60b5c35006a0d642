from abc import ABC, abstractmethod
from typing import List, Optional

from features.common.models.geo_types import GeoPoint
from features.common.models.station_types import StationRecord, StationTag
from features.conditions.models.conditions_types import StationDetail
from features.weather.models.weather_types import UnitSystem, WeatherResult

class WeatherProvider(ABC):
    """Source of point forecasts."""

    @abstractmethod
    async def fetch_forecast(self, point: GeoPoint, unit_system: UnitSystem) -> WeatherResult:
        """Fetch the forecast for a point.

        Raises:
            ProviderError: on transport or parse failure
        """

class StationCatalogProvider(ABC):
    """Source of the full station registry for one tag."""
    tag: StationTag

    @abstractmethod
    async def fetch_all_stations(self) -> List[StationRecord]:
        """Fetch every station in the catalog.

        Raises:
            ProviderError: on transport or parse failure
        """

class StationDetailProvider(ABC):
    """Source of live per-station data for one tag."""
    tag: StationTag

    @abstractmethod
    async def fetch_detail(self, station: StationRecord) -> Optional[StationDetail]:
        """Fetch the current reading for a station, or None if it has none.

        Raises:
            ProviderError: on transport or parse failure
        """
