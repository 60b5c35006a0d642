from datetime import date, datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field

class UnitSystem(str, Enum):
    METRIC = "metric"
    IMPERIAL = "imperial"

    @property
    def temperature_unit(self) -> str:
        """Open-Meteo temperature_unit parameter."""
        return "fahrenheit" if self is UnitSystem.IMPERIAL else "celsius"

    @property
    def wind_speed_unit(self) -> str:
        """Open-Meteo wind_speed_unit parameter."""
        return "mph" if self is UnitSystem.IMPERIAL else "kmh"

    @property
    def temperature_symbol(self) -> str:
        return "°F" if self is UnitSystem.IMPERIAL else "°C"

    @property
    def wind_speed_symbol(self) -> str:
        return "mph" if self is UnitSystem.IMPERIAL else "km/h"

class CurrentConditions(BaseModel):
    """Current-condition snapshot."""
    time: datetime
    temperature: float
    weather_code: int
    pressure_msl: Optional[float] = None  # hPa
    wind_speed: Optional[float] = None
    wind_direction: Optional[float] = None  # degrees clockwise from true N
    wind_gusts: Optional[float] = None

class DailyForecast(BaseModel):
    """One day of the multi-day forecast."""
    date: date
    weather_code: int
    temperature_max: float
    temperature_min: float

class HourlySlice(BaseModel):
    time: datetime
    relative_humidity: Optional[int] = None  # %
    precipitation_probability: Optional[int] = None  # %
    cloud_cover: Optional[int] = None  # %

class SolarDay(BaseModel):
    date: date
    sunrise: Optional[datetime] = None
    sunset: Optional[datetime] = None
    daylight_duration: Optional[float] = None  # seconds
    uv_index_max: Optional[float] = None

class WeatherResult(BaseModel):
    """Forecast for a point, in the unit system it was requested in."""
    units: UnitSystem
    timezone: Optional[str] = None
    current: CurrentConditions
    daily: List[DailyForecast] = Field(default_factory=list)
    hourly: List[HourlySlice] = Field(default_factory=list)
    solar: List[SolarDay] = Field(default_factory=list)

    class Config:
        frozen = True

class DayDetail(BaseModel):
    """Detailed view of a single forecast day."""
    date: date
    temperature_max: float
    temperature_min: float
    temperature_unit: str
    weather_description: str
    uv_index: Optional[float] = None
    uv_risk: Optional[str] = None
    sunrise: Optional[datetime] = None
    sunset: Optional[datetime] = None
    daylight_hours: Optional[float] = None
    # Only populated for today
    pressure_msl: Optional[float] = None
    humidity: Optional[int] = None
    precipitation_probability: Optional[int] = None
    cloud_cover: Optional[int] = None
    wind_speed: Optional[float] = None
    wind_direction: Optional[str] = None
    wind_gusts: Optional[float] = None
    wind_speed_unit: Optional[str] = None

class CityResult(BaseModel):
    """A geocoding match."""
    name: str
    state: Optional[str] = Field(None, description="First-level admin area, e.g. state or province")
    country: Optional[str] = None
    latitude: float
    longitude: float
