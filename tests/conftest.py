import asyncio
from typing import Dict, List, Optional

import pytest

from features.common.models.geo_types import GeoPoint
from features.common.models.station_types import StationRecord, StationTag
from features.common.services.providers import (
    StationCatalogProvider,
    StationDetailProvider,
    WeatherProvider
)
from features.common.exceptions.provider_exceptions import NetworkError
from features.gauges.models.gauge_types import GaugeResult
from features.tides.models.tide_types import TidePrediction, TideResult, TideType
from features.weather.models.weather_types import UnitSystem, WeatherResult
from features.weather.services.open_meteo_client import parse_forecast

HOURS = [f"2025-06-01T{hour:02d}:00" for hour in range(24)]

OPEN_METEO_PAYLOAD = {
    "latitude": 40.71,
    "longitude": -74.01,
    "timezone": "America/New_York",
    "current": {
        "time": "2025-06-01T14:15",
        "interval": 900,
        "temperature_2m": 22.4,
        "weather_code": 3,
        "pressure_msl": 1014.2,
        "wind_speed_10m": 12.6,
        "wind_direction_10m": 200.0,
        "wind_gusts_10m": 25.9
    },
    "hourly": {
        "time": HOURS,
        "relative_humidity_2m": [60 + hour for hour in range(24)],
        "precipitation_probability": [hour * 2 for hour in range(24)],
        "cloud_cover": [hour * 4 for hour in range(24)]
    },
    "daily": {
        "time": ["2025-06-01", "2025-06-02", "2025-06-03"],
        "weather_code": [3, 61, 95],
        "temperature_2m_max": [24.1, 19.8, 27.3],
        "temperature_2m_min": [15.2, 14.0, 18.9],
        "sunrise": ["2025-06-01T05:26", "2025-06-02T05:25", "2025-06-03T05:25"],
        "sunset": ["2025-06-01T20:22", "2025-06-02T20:23", "2025-06-03T20:24"],
        "daylight_duration": [53760.0, 53880.0, 53940.0],
        "uv_index_max": [7.2, 2.1, 11.4]
    }
}

@pytest.fixture
def weather_result() -> WeatherResult:
    return parse_forecast(OPEN_METEO_PAYLOAD, UnitSystem.METRIC)

def make_station(
    station_id: str,
    latitude: float,
    longitude: float,
    tag: StationTag = StationTag.TIDE,
    name: Optional[str] = None
) -> StationRecord:
    return StationRecord(
        id=station_id,
        name=name or f"Station {station_id}",
        coordinates=GeoPoint(latitude=latitude, longitude=longitude),
        tag=tag
    )

def tide_result_for(station: StationRecord) -> TideResult:
    return TideResult(
        station_id=station.id,
        station_name=station.name,
        coordinates=station.coordinates,
        predictions=[
            TidePrediction(time="2025-06-01T04:12:00", type=TideType.HIGH, height=4.6),
            TidePrediction(time="2025-06-01T10:31:00", type=TideType.LOW, height=0.2)
        ]
    )

def gauge_result_for(station: StationRecord) -> GaugeResult:
    return GaugeResult(
        site_id=station.id,
        site_name=station.name,
        coordinates=station.coordinates,
        variable_name="Gage height, ft",
        value=3.45,
        unit="ft"
    )

class FakeWeatherProvider(WeatherProvider):
    def __init__(self, result: Optional[WeatherResult] = None, error: Optional[Exception] = None, delay: float = 0):
        self.result = result
        self.error = error
        self.delay = delay
        self.calls = 0

    async def fetch_forecast(self, point: GeoPoint, unit_system: UnitSystem) -> WeatherResult:
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return self.result

class FakeCatalog(StationCatalogProvider):
    def __init__(self, tag: StationTag, stations: List[StationRecord], error: Optional[Exception] = None):
        self.tag = tag
        self.stations = stations
        self.error = error
        self.calls = 0
        self.gate: Optional[asyncio.Event] = None

    async def fetch_all_stations(self) -> List[StationRecord]:
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.error:
            raise self.error
        return list(self.stations)

class FakeDetailProvider(StationDetailProvider):
    """Returns canned details per station id; ids in `failures` raise, ids in `slow` hang."""

    def __init__(
        self,
        tag: StationTag,
        failures: Optional[Dict[str, Exception]] = None,
        absent: Optional[List[str]] = None,
        slow: Optional[List[str]] = None
    ):
        self.tag = tag
        self.failures = failures or {}
        self.absent = absent or []
        self.slow = slow or []
        self.requested: List[str] = []
        self.cancelled: List[str] = []

    async def fetch_detail(self, station: StationRecord):
        self.requested.append(station.id)
        try:
            if station.id in self.slow:
                await asyncio.sleep(10)
            else:
                await asyncio.sleep(0)
        except asyncio.CancelledError:
            self.cancelled.append(station.id)
            raise
        if station.id in self.failures:
            raise self.failures[station.id]
        if station.id in self.absent:
            return None
        if self.tag == StationTag.TIDE:
            return tide_result_for(station)
        return gauge_result_for(station)

@pytest.fixture
def network_error() -> NetworkError:
    return NetworkError("Timed out requesting https://example.invalid")
