import math
from enum import Enum

class WeatherCondition(Enum):
    """WMO weather interpretation codes grouped into descriptions."""
    CLEAR = ((0,), "Clear sky")
    CLOUDY = ((1, 2, 3), "Cloudy")
    FOG = ((45, 48), "Fog")
    DRIZZLE = ((51, 53, 55), "Drizzle")
    RAIN = ((61, 63, 65), "Rain")
    RAIN_SHOWERS = ((80, 81, 82), "Rain showers")
    THUNDERSTORM = ((95,), "Thunderstorm")

    @property
    def description(self) -> str:
        return self.value[1]

    @classmethod
    def describe(cls, code: int) -> str:
        """Get the description for a WMO weather code."""
        for condition in cls:
            codes, description = condition.value
            if code in codes:
                return description
        return "Unknown"

class UvRisk(Enum):
    """UV index risk bands."""
    LOW = ((0, 3), "Low")
    MODERATE = ((3, 6), "Moderate")
    HIGH = ((6, 8), "High")
    VERY_HIGH = ((8, 11), "Very High")
    EXTREME = ((11, float('inf')), "Extreme")

    @classmethod
    def from_index(cls, uv: float) -> "UvRisk":
        for risk in cls:
            (low, high), _ = risk.value
            if uv < high:
                return risk
        return cls.EXTREME

    @property
    def label(self) -> str:
        return self.value[1]

COMPASS_POINTS = [
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW"
]

def compass_direction(degrees: float) -> str:
    """16-point compass label for a bearing in degrees."""
    return COMPASS_POINTS[math.floor((degrees + 11.25) / 22.5) % 16]
