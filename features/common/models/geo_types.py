from pydantic import BaseModel, Field, model_validator

class GeoPoint(BaseModel):
    """A latitude/longitude pair in decimal degrees."""
    latitude: float = Field(..., ge=-90, le=90, allow_inf_nan=False)
    longitude: float = Field(..., ge=-180, le=180, allow_inf_nan=False)

    class Config:
        frozen = True

class BoundingBox(BaseModel):
    """Axis-aligned latitude/longitude rectangle, bounds inclusive."""
    min_lat: float = Field(..., ge=-90, le=90)
    max_lat: float = Field(..., ge=-90, le=90)
    min_lon: float = Field(..., ge=-180, le=180)
    max_lon: float = Field(..., ge=-180, le=180)

    class Config:
        frozen = True

    @model_validator(mode="after")
    def check_ordering(self) -> "BoundingBox":
        if self.min_lat > self.max_lat:
            raise ValueError(f"min_lat {self.min_lat} is greater than max_lat {self.max_lat}")
        if self.min_lon > self.max_lon:
            raise ValueError(f"min_lon {self.min_lon} is greater than max_lon {self.max_lon}")
        return self

    @property
    def spans_all_longitudes(self) -> bool:
        return self.min_lon <= -180 and self.max_lon >= 180

    def contains(self, point: GeoPoint) -> bool:
        return (
            self.min_lat <= point.latitude <= self.max_lat
            and self.min_lon <= point.longitude <= self.max_lon
        )

WHOLE_WORLD = BoundingBox(min_lat=-90, max_lat=90, min_lon=-180, max_lon=180)
