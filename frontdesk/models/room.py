from pydantic import BaseModel, Field
from typing import Optional
from enum import Enum


class RoomStatus(str, Enum):
    AVAILABLE = "Available"
    OCCUPIED = "Occupied"
    MAINTENANCE = "Maintenance"
    OUT_OF_ORDER = "Out of Order"


class RoomBase(BaseModel):
    room_number: str = Field(..., min_length=1, description="Room number (e.g. '101')")
    room_type_id: str = Field(..., description="ID of the room type")
    floor: int = Field(..., description="Floor number")
    status: RoomStatus = RoomStatus.AVAILABLE.value
    description: Optional[str] = Field(None, max_length=500)
    telephone: Optional[str] = Field(None, max_length=20)
    is_active: bool = True

    class Config:
        str_strip_whitespace = True
        use_enum_values = True


class RoomCreate(RoomBase):
    pass


class RoomUpdate(BaseModel):
    room_number: Optional[str] = None
    room_type_id: Optional[str] = None
    floor: Optional[int] = None
    status: Optional[RoomStatus] = None
    description: Optional[str] = Field(None, max_length=500)
    telephone: Optional[str] = Field(None, max_length=20)
    is_active: Optional[bool] = None

    class Config:
        use_enum_values = True


class RoomStatusUpdate(BaseModel):
    status: RoomStatus

    class Config:
        use_enum_values = True
