from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Dict, List, Optional

class Settings(BaseSettings):
    """Application settings."""

    # Open-Meteo forecast and geocoding
    open_meteo_forecast_url: str = "https://api.open-meteo.com/v1/forecast"
    open_meteo_geocoding_url: str = "https://geocoding-api.open-meteo.com/v1/search"
    forecast_days: int = 10
    current_fields: List[str] = [
        "temperature_2m",
        "weather_code",
        "pressure_msl",
        "wind_speed_10m",
        "wind_direction_10m",
        "wind_gusts_10m"
    ]
    hourly_fields: List[str] = [
        "relative_humidity_2m",
        "precipitation_probability",
        "cloud_cover"
    ]
    daily_fields: List[str] = [
        "weather_code",
        "temperature_2m_max",
        "temperature_2m_min",
        "sunrise",
        "sunset",
        "daylight_duration",
        "uv_index_max"
    ]
    geocode_result_count: int = 5

    # NOAA CO-OPS tide stations and predictions
    coops_metadata_url: str = "https://api.tidesandcurrents.noaa.gov/mdapi/prod/webapi/stations.json"
    coops_base_url: str = "https://api.tidesandcurrents.noaa.gov/api/prod/datagetter"
    coops_params: Dict[str, str] = {
        "date": "today",
        "product": "predictions",
        "datum": "MLLW",
        "time_zone": "lst_ldt",
        "interval": "hilo",
        "units": "english",
        "format": "json"
    }
    # Bundled catalog; when unset the catalog is fetched from the metadata API
    tide_stations_file: Optional[str] = None

    # USGS instantaneous values
    usgs_base_url: str = "https://waterservices.usgs.gov/nwis/iv/"
    usgs_parameter_code: str = "00065"  # Gage height, feet
    usgs_concurrency: int = 5
    usgs_state_codes: List[str] = [
        "al", "ak", "az", "ar", "ca", "co", "ct", "de", "dc", "fl",
        "ga", "hi", "id", "il", "in", "ia", "ks", "ky", "la", "me",
        "md", "ma", "mi", "mn", "ms", "mo", "mt", "ne", "nv", "nh",
        "nj", "nm", "ny", "nc", "nd", "oh", "ok", "or", "pa", "ri",
        "sc", "sd", "tn", "tx", "ut", "vt", "va", "wa", "wv", "wi",
        "wy", "pr"
    ]

    # Station cache; in-memory only when no file is configured
    station_cache_file: Optional[str] = None
    catalog_refresh_hours: int = 24 * 7
    warm_station_cache_on_startup: bool = True

    # Query defaults
    default_radius_miles: float = 25.0
    max_radius_miles: float = 250.0
    default_units: str = "metric"

    # Timeouts in seconds
    request_timeout: float = 30
    catalog_request_timeout: float = 120
    provider_call_timeout: float = 45

    geocode_cache_ttl: int = 86400  # 24 hours

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="coastal_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

settings = Settings()
