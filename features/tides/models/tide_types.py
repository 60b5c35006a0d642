from datetime import datetime
from enum import Enum
from typing import List, Literal
from pydantic import BaseModel, Field

from features.common.models.geo_types import GeoPoint

class TideType(str, Enum):
    HIGH = "H"
    LOW = "L"

class TidePrediction(BaseModel):
    """Individual high or low tide prediction"""
    time: datetime = Field(..., description="Station local time of the tide")
    type: TideType = Field(..., description="High or low tide")
    height: float = Field(..., description="Height of tide in feet above MLLW")

class TideResult(BaseModel):
    """Today's tide predictions for one station"""
    kind: Literal["tide"] = "tide"
    station_id: str = Field(..., description="Station identifier")
    station_name: str = Field(..., description="Station name")
    coordinates: GeoPoint = Field(..., description="Station location")
    predictions: List[TidePrediction] = Field(..., description="Predictions in time order")
