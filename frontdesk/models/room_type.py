from pydantic import BaseModel, Field
from typing import Optional


class RoomTypePricing(BaseModel):
    """Price per stay length"""
    hourly3: float = Field(..., ge=0, description="3-hour price")
    hourly8: float = Field(..., ge=0, description="8-hour price")
    hourly12: float = Field(..., ge=0, description="12-hour price")
    daily: float = Field(..., ge=0, description="24-hour price")


class RoomTypeBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    description: Optional[str] = Field(None, max_length=500)
    base_capacity: int = Field(..., ge=1, le=20)
    pricing: RoomTypePricing
    penalty: float = Field(0, ge=0)
    is_active: bool = True


class RoomTypeCreate(RoomTypeBase):
    pass


class RoomTypeUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    description: Optional[str] = Field(None, max_length=500)
    base_capacity: Optional[int] = Field(None, ge=1, le=20)
    pricing: Optional[RoomTypePricing] = None
    penalty: Optional[float] = Field(None, ge=0)
    is_active: Optional[bool] = None
