from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, Field

from features.common.models.geo_types import GeoPoint

class GaugeResult(BaseModel):
    """Latest instantaneous reading from a river or lake gauge."""
    kind: Literal["gauge"] = "gauge"
    site_id: str
    site_name: str
    coordinates: GeoPoint
    variable_name: str = Field(..., description="e.g. 'Gage height, ft'")
    value: float
    unit: str = Field(..., description="USGS unit code, e.g. 'ft'")
    observed_at: Optional[datetime] = None
