from enum import Enum
from pydantic import BaseModel, Field

from features.common.models.geo_types import GeoPoint

class StationTag(str, Enum):
    """Which external catalog a cached station belongs to."""
    TIDE = "tide"
    GAUGE = "gauge"

class StationRecord(BaseModel):
    """Cached registry entry for a tide station or river gauge."""
    id: str = Field(..., description="Station identifier, unique within its tag")
    name: str
    coordinates: GeoPoint
    tag: StationTag

    class Config:
        frozen = True
