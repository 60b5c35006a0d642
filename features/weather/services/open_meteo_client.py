import logging
from typing import Any, Dict, List, Optional
from aiocache import cached, SimpleMemoryCache

from features.common.models.geo_types import GeoPoint
from features.common.services.http_client import HttpProviderClient
from features.common.services.providers import WeatherProvider
from features.common.exceptions.provider_exceptions import ParseError
from features.weather.models.weather_types import (
    CityResult,
    CurrentConditions,
    DailyForecast,
    HourlySlice,
    SolarDay,
    UnitSystem,
    WeatherResult
)
from core.config import settings

logger = logging.getLogger(__name__)

MIN_CITY_QUERY_LENGTH = 3

def city_search_key_builder(func, *args, **kwargs) -> str:
    """Cache key for geocoding lookups, case-insensitive on the query."""
    query = kwargs.get("query")
    if query is None and args:
        # Bound methods receive self first
        query = args[-1]
    return f"{func.__name__}:{str(query).strip().lower()}"

def _column(section: Dict[str, Any], key: str, length: int) -> List[Any]:
    """Get a column from an Open-Meteo section, padded with None."""
    values = section.get(key) or []
    return list(values[:length]) + [None] * (length - len(values))

def parse_forecast(payload: Dict[str, Any], unit_system: UnitSystem) -> WeatherResult:
    """Normalize an Open-Meteo forecast response."""
    try:
        current = payload["current"]
        daily = payload["daily"]
        hourly = payload.get("hourly") or {}

        current_conditions = CurrentConditions(
            time=current["time"],
            temperature=current["temperature_2m"],
            weather_code=current["weather_code"],
            pressure_msl=current.get("pressure_msl"),
            wind_speed=current.get("wind_speed_10m"),
            wind_direction=current.get("wind_direction_10m"),
            wind_gusts=current.get("wind_gusts_10m")
        )

        days = daily["time"]
        forecasts = []
        for day, code, t_max, t_min in zip(
            days,
            _column(daily, "weather_code", len(days)),
            _column(daily, "temperature_2m_max", len(days)),
            _column(daily, "temperature_2m_min", len(days))
        ):
            if code is None or t_max is None or t_min is None:
                logger.debug(f"Skipping incomplete forecast day {day}")
                continue
            forecasts.append(DailyForecast(
                date=day,
                weather_code=code,
                temperature_max=t_max,
                temperature_min=t_min
            ))

        solar = [
            SolarDay(
                date=day,
                sunrise=sunrise,
                sunset=sunset,
                daylight_duration=daylight,
                uv_index_max=uv
            )
            for day, sunrise, sunset, daylight, uv in zip(
                days,
                _column(daily, "sunrise", len(days)),
                _column(daily, "sunset", len(days)),
                _column(daily, "daylight_duration", len(days)),
                _column(daily, "uv_index_max", len(days))
            )
        ]

        hours = hourly.get("time") or []
        hourly_slices = [
            HourlySlice(
                time=hour,
                relative_humidity=humidity,
                precipitation_probability=precipitation,
                cloud_cover=cloud
            )
            for hour, humidity, precipitation, cloud in zip(
                hours,
                _column(hourly, "relative_humidity_2m", len(hours)),
                _column(hourly, "precipitation_probability", len(hours)),
                _column(hourly, "cloud_cover", len(hours))
            )
        ]

        return WeatherResult(
            units=unit_system,
            timezone=payload.get("timezone"),
            current=current_conditions,
            daily=forecasts,
            hourly=hourly_slices,
            solar=solar
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ParseError(f"Unexpected Open-Meteo forecast response: {str(e)}") from e

def parse_cities(payload: Dict[str, Any]) -> List[CityResult]:
    """Normalize an Open-Meteo geocoding response; no results is an empty list."""
    try:
        return [
            CityResult(
                name=result["name"],
                state=result.get("admin1"),
                country=result.get("country"),
                latitude=result["latitude"],
                longitude=result["longitude"]
            )
            for result in payload.get("results") or []
        ]
    except (KeyError, TypeError, ValueError) as e:
        raise ParseError(f"Unexpected Open-Meteo geocoding response: {str(e)}") from e

class OpenMeteoClient(HttpProviderClient, WeatherProvider):
    """Client for the Open-Meteo forecast and geocoding APIs."""

    def __init__(self, session=None, timeout: Optional[float] = None):
        super().__init__(session=session, timeout=timeout)
        self.forecast_url = settings.open_meteo_forecast_url
        self.geocoding_url = settings.open_meteo_geocoding_url

    def _forecast_params(self, point: GeoPoint, unit_system: UnitSystem) -> Dict[str, str]:
        return {
            "latitude": f"{point.latitude}",
            "longitude": f"{point.longitude}",
            "current": ",".join(settings.current_fields),
            "hourly": ",".join(settings.hourly_fields),
            "daily": ",".join(settings.daily_fields),
            "temperature_unit": unit_system.temperature_unit,
            "wind_speed_unit": unit_system.wind_speed_unit,
            "precipitation_unit": "mm",
            "timezone": "auto",
            "forecast_days": str(settings.forecast_days)
        }

    async def fetch_forecast(self, point: GeoPoint, unit_system: UnitSystem) -> WeatherResult:
        """Get the multi-day forecast for a point."""
        logger.info(f"🌤️ Fetching forecast for ({point.latitude}, {point.longitude}) in {unit_system.value} units")
        payload = await self._get_json(self.forecast_url, self._forecast_params(point, unit_system))
        if isinstance(payload, dict) and payload.get("error"):
            raise ParseError(f"Open-Meteo rejected forecast request: {payload.get('reason', 'unknown reason')}")
        return parse_forecast(payload, unit_system)

    @cached(
        ttl=settings.geocode_cache_ttl,
        key_builder=city_search_key_builder,
        namespace="city_search",
        cache=SimpleMemoryCache,
        noself=True
    )
    async def search_cities(self, query: str) -> List[CityResult]:
        """Look up places by name."""
        query = query.strip()
        if len(query) < MIN_CITY_QUERY_LENGTH:
            return []

        payload = await self._get_json(self.geocoding_url, {
            "name": query,
            "count": str(settings.geocode_result_count),
            "language": "en",
            "format": "json"
        })
        return parse_cities(payload)
