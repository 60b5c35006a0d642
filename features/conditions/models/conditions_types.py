from enum import Enum
from typing import Annotated, List, Union
from pydantic import BaseModel, Field

from features.weather.models.weather_types import WeatherResult
from features.tides.models.tide_types import TideResult
from features.gauges.models.gauge_types import GaugeResult

StationDetail = Annotated[Union[TideResult, GaugeResult], Field(discriminator="kind")]

class SortOrder(str, Enum):
    DISTANCE = "distance"
    NAME = "name"
    NONE = "none"

class AggregateResult(BaseModel):
    """Weather plus nearby tide and gauge readings for one point."""
    weather: WeatherResult
    tides: List[TideResult] = Field(default_factory=list)
    gauges: List[GaugeResult] = Field(default_factory=list)
