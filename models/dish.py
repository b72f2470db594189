from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field, StrictInt, field_validator

from models.base import CamelModel, OBJECT_ID_PATTERN


class DietaryOption(str, Enum):
    VEGETARIAN = "vegetarian"
    VEGAN = "vegan"
    GLUTEN_FREE = "gluten-free"
    DAIRY_FREE = "dairy-free"
    NUT_FREE = "nut-free"
    HALAL = "halal"
    KOSHER = "kosher"


DIETARY_OPTIONS = tuple(option.value for option in DietaryOption)


class ScheduleEntry(CamelModel):
    day_of_week: StrictInt = Field(..., ge=0, le=6)
    is_available: bool = True

    @field_validator("is_available", mode="before")
    @classmethod
    def default_when_not_boolean(cls, v):
        # anything that is not a real boolean counts as available
        return v if isinstance(v, bool) else True


class DishCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    price: float = Field(..., ge=0)
    restaurant: str = Field(..., pattern=OBJECT_ID_PATTERN)
    available_date: Optional[datetime] = None
    dietary_options: List[DietaryOption] = Field(default_factory=list)
    ingredients: List[str] = Field(default_factory=list)
    image: Optional[str] = None
    is_available: bool = True
    weekly_schedule: List[ScheduleEntry] = Field(default_factory=list)


class DishUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    price: Optional[float] = Field(None, ge=0)
    available_date: Optional[datetime] = None
    dietary_options: Optional[List[DietaryOption]] = None
    ingredients: Optional[List[str]] = None
    image: Optional[str] = None
    is_available: Optional[bool] = None
    weekly_schedule: Optional[List[ScheduleEntry]] = None
