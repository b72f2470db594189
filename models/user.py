from pydantic import AfterValidator, ConfigDict, EmailStr, Field
from typing import Annotated, List, Literal, Optional
from models.base import CamelModel, OBJECT_ID_PATTERN

Role = Literal["user", "owner", "admin"]
PHONE_PATTERN = r"^\+?[0-9]{10,15}$"
RestaurantId = Annotated[str, Field(pattern=OBJECT_ID_PATTERN)]

def normalize_email(value: str) -> str:
    return value.strip().lower()

# stored, unique-indexed and looked up in this form only
Email = Annotated[EmailStr, AfterValidator(normalize_email)]
LoginEmail = Annotated[str, AfterValidator(normalize_email)]

class UserRegister(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=False)
    name: str = Field(..., min_length=1, max_length=50)
    email: Email
    password: str = Field(..., min_length=6)

class UserLogin(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=False)
    # checked by hand so a missing field gets the login-specific message
    email: Optional[LoginEmail] = None
    password: Optional[str] = None

class UserCreate(UserRegister):
    role: Role = "user"
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    address: Optional[str] = None
    favorites: List[RestaurantId] = Field(default_factory=list)

class UserUpdate(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=False)
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    email: Optional[Email] = None
    password: Optional[str] = Field(None, min_length=6)
    role: Optional[Role] = None
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    address: Optional[str] = None
    favorites: Optional[List[RestaurantId]] = None

class UpdateDetails(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    email: Optional[Email] = None
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    address: Optional[str] = None

class UpdatePassword(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=False)
    current_password: str
    new_password: str = Field(..., min_length=6)
