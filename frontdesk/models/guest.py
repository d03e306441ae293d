from pydantic import BaseModel, Field
from typing import Optional
from enum import Enum


class IdType(str, Enum):
    PASSPORT = "Passport"
    DRIVER_LICENSE = "Driver License"
    NATIONAL_ID = "National ID"
    OTHER = "Other"


class GuestBase(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    phone: str = Field(..., min_length=1)
    id_type: IdType
    id_number: str = Field(..., min_length=1)

    class Config:
        str_strip_whitespace = True
        use_enum_values = True


class GuestSnapshot(GuestBase):
    """Guest details captured on the booking itself"""
    pass


class GuestCreate(GuestBase):
    notes: Optional[str] = Field(None, max_length=1000)


class GuestUpdate(BaseModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=50)
    last_name: Optional[str] = Field(None, min_length=1, max_length=50)
    phone: Optional[str] = None
    id_type: Optional[IdType] = None
    id_number: Optional[str] = None
    notes: Optional[str] = Field(None, max_length=1000)

    class Config:
        str_strip_whitespace = True
        use_enum_values = True
