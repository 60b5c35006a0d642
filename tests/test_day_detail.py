from datetime import date, datetime

import pytest

from features.weather.models.weather_categories import UvRisk, WeatherCondition, compass_direction
from features.weather.models.weather_types import UnitSystem
from features.weather.services.day_detail import build_day_detail
from features.weather.services.open_meteo_client import parse_forecast

from conftest import OPEN_METEO_PAYLOAD

def test_today_includes_current_and_hourly_conditions(weather_result):
    detail = build_day_detail(weather_result, 0)

    assert detail.date == date(2025, 6, 1)
    assert detail.weather_description == "Cloudy"
    assert detail.temperature_unit == "°C"
    assert detail.uv_index == 7.2
    assert detail.uv_risk == "High"
    assert detail.daylight_hours == 14.9
    assert detail.sunrise == datetime(2025, 6, 1, 5, 26)
    assert detail.pressure_msl == 1014.2
    assert detail.wind_direction == "SSW"
    assert detail.wind_gusts == 25.9
    assert detail.wind_speed_unit == "km/h"
    # Hourly values for 14:00, the hour of the current-conditions reading
    assert (detail.humidity, detail.precipitation_probability, detail.cloud_cover) == (74, 28, 56)

def test_today_uses_supplied_local_time_for_hourly_values(weather_result):
    detail = build_day_detail(weather_result, 0, now=datetime(2025, 6, 1, 6, 40))
    assert detail.humidity == 66

def test_later_days_carry_no_current_conditions(weather_result):
    detail = build_day_detail(weather_result, 2)

    assert detail.weather_description == "Thunderstorm"
    assert detail.uv_risk == "Extreme"
    assert detail.pressure_msl is None
    assert detail.wind_direction is None
    assert detail.humidity is None

def test_imperial_snapshot_reports_imperial_units():
    snapshot = parse_forecast(OPEN_METEO_PAYLOAD, UnitSystem.IMPERIAL)
    detail = build_day_detail(snapshot, 0)

    assert detail.temperature_unit == "°F"
    assert detail.wind_speed_unit == "mph"

@pytest.mark.parametrize("day_index", [-1, 3])
def test_day_outside_forecast_raises(weather_result, day_index):
    with pytest.raises(IndexError):
        build_day_detail(weather_result, day_index)

@pytest.mark.parametrize("code, description", [
    (0, "Clear sky"),
    (2, "Cloudy"),
    (48, "Fog"),
    (63, "Rain"),
    (81, "Rain showers"),
    (95, "Thunderstorm"),
    (77, "Unknown")
])
def test_weather_code_descriptions(code, description):
    assert WeatherCondition.describe(code) == description

@pytest.mark.parametrize("uv, risk", [
    (0, UvRisk.LOW),
    (2.9, UvRisk.LOW),
    (3, UvRisk.MODERATE),
    (6, UvRisk.HIGH),
    (10.9, UvRisk.VERY_HIGH),
    (11, UvRisk.EXTREME)
])
def test_uv_risk_bands(uv, risk):
    assert UvRisk.from_index(uv) is risk

@pytest.mark.parametrize("degrees, direction", [
    (0, "N"),
    (11.24, "N"),
    (11.25, "NNE"),
    (90, "E"),
    (200, "SSW"),
    (348.75, "N"),
    (359.9, "N")
])
def test_compass_direction(degrees, direction):
    assert compass_direction(degrees) == direction
