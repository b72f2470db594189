# models/restaurant.py
from pydantic import EmailStr, Field, field_validator
from typing import List, Literal, Optional
from models.base import CamelModel

HOUR_PATTERN = r"^([01]?[0-9]|2[0-3]):[0-5][0-9]$"

class GeoPoint(CamelModel):
    """GeoJSON point, coordinates are [longitude, latitude]."""
    type: Literal["Point"] = "Point"
    coordinates: List[float]

    @field_validator("coordinates")
    @classmethod
    def check_coordinates(cls, v: List[float]) -> List[float]:
        if len(v) != 2:
            raise ValueError("Les coordonnées doivent être au format [longitude, latitude]")
        lng, lat = v
        if not -180 <= lng <= 180 or not -90 <= lat <= 90:
            raise ValueError("Les coordonnées doivent être au format [longitude, latitude]")
        return v

class OpeningHours(CamelModel):
    open: Optional[str] = Field(None, pattern=HOUR_PATTERN)
    close: Optional[str] = Field(None, pattern=HOUR_PATTERN)

class WeeklyOpeningHours(CamelModel):
    monday: OpeningHours = Field(default_factory=OpeningHours)
    tuesday: OpeningHours = Field(default_factory=OpeningHours)
    wednesday: OpeningHours = Field(default_factory=OpeningHours)
    thursday: OpeningHours = Field(default_factory=OpeningHours)
    friday: OpeningHours = Field(default_factory=OpeningHours)
    saturday: OpeningHours = Field(default_factory=OpeningHours)
    sunday: OpeningHours = Field(default_factory=OpeningHours)

class RestaurantCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    address: str = Field(..., min_length=1)
    location: GeoPoint
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    cuisine: List[str] = Field(default_factory=list)
    opening_hours: WeeklyOpeningHours = Field(default_factory=WeeklyOpeningHours)

class RestaurantUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    address: Optional[str] = Field(None, min_length=1)
    location: Optional[GeoPoint] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    cuisine: Optional[List[str]] = None
    opening_hours: Optional[WeeklyOpeningHours] = None
