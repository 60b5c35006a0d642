from datetime import datetime
from typing import Optional

from features.weather.models.weather_types import DayDetail, HourlySlice, WeatherResult
from features.weather.models.weather_categories import UvRisk, WeatherCondition, compass_direction

def _hourly_slice_at(snapshot: WeatherResult, when: datetime) -> Optional[HourlySlice]:
    hour = when.replace(minute=0, second=0, microsecond=0, tzinfo=None)
    return next(
        (slice_ for slice_ in snapshot.hourly if slice_.time.replace(tzinfo=None) == hour),
        None
    )

def build_day_detail(
    snapshot: WeatherResult,
    day_index: int,
    now: Optional[datetime] = None
) -> DayDetail:
    """Derive the detailed view of one forecast day from a forecast snapshot.

    Day 0 also carries the current pressure and wind plus the hourly
    humidity, precipitation chance and cloud cover for the hour of ``now``
    (location-local; defaults to the snapshot's current-conditions time).

    Raises:
        IndexError: day_index is outside the forecast
    """
    if day_index < 0 or day_index >= len(snapshot.daily):
        raise IndexError(f"Forecast has no day {day_index}")

    day = snapshot.daily[day_index]
    solar = next((s for s in snapshot.solar if s.date == day.date), None)
    units = snapshot.units

    detail = DayDetail(
        date=day.date,
        temperature_max=day.temperature_max,
        temperature_min=day.temperature_min,
        temperature_unit=units.temperature_symbol,
        weather_description=WeatherCondition.describe(day.weather_code)
    )

    if solar is not None:
        detail.sunrise = solar.sunrise
        detail.sunset = solar.sunset
        if solar.daylight_duration is not None:
            detail.daylight_hours = round(solar.daylight_duration / 3600, 1)
        if solar.uv_index_max is not None:
            detail.uv_index = solar.uv_index_max
            detail.uv_risk = UvRisk.from_index(solar.uv_index_max).label

    if day_index == 0:
        current = snapshot.current
        detail.pressure_msl = current.pressure_msl
        detail.wind_speed = current.wind_speed
        detail.wind_gusts = current.wind_gusts
        detail.wind_speed_unit = units.wind_speed_symbol
        if current.wind_direction is not None:
            detail.wind_direction = compass_direction(current.wind_direction)

        hourly = _hourly_slice_at(snapshot, now or current.time)
        if hourly is not None:
            detail.humidity = hourly.relative_humidity
            detail.precipitation_probability = hourly.precipitation_probability
            detail.cloud_cover = hourly.cloud_cover

    return detail
