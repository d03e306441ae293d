"""
Pydantic models for room bookings
"""
from pydantic import BaseModel, Field
from typing import Optional, List, Literal
from datetime import datetime
from enum import Enum

from frontdesk.models.guest import GuestSnapshot, IdType


# ─── Enums ────────────────────────────────────────────────────────────────────

class BookingStatus(str, Enum):
    CONFIRMED = "Confirmed"
    CHECKED_IN = "Checked In"
    CHECKED_OUT = "Checked Out"
    CANCELLED = "Cancelled"
    NO_SHOW = "No Show"


TERMINAL_STATUSES = {BookingStatus.CHECKED_OUT, BookingStatus.CANCELLED, BookingStatus.NO_SHOW}
# Statuses that hold a room for their [check_in_date, check_out_date] window
ACTIVE_STATUSES = [BookingStatus.CONFIRMED.value, BookingStatus.CHECKED_IN.value]


class PaymentStatus(str, Enum):
    PENDING = "Pending"
    PARTIAL = "Partial"
    PAID = "Paid"
    REFUNDED = "Refunded"


class PaymentMethod(str, Enum):
    CASH = "Cash"
    CREDIT_CARD = "Credit Card"
    DEBIT_CARD = "Debit Card"
    BANK_TRANSFER = "Bank Transfer"
    ONLINE_PAYMENT = "Online Payment"


ALLOWED_DURATIONS = (3, 8, 12, 24)


# ─── Line items ───────────────────────────────────────────────────────────────

class AdditionalService(BaseModel):
    service: str
    amount: float = 0
    description: Optional[str] = None


class DiscountLine(BaseModel):
    type: str
    amount: float = 0
    description: Optional[str] = None


# ─── Requests ─────────────────────────────────────────────────────────────────

class BookingCreate(BaseModel):
    booking_number: Optional[str] = None
    guest: GuestSnapshot
    room_id: str = Field(..., description="Room ID")
    check_in_date: datetime
    duration: int = Field(..., description="Stay length in hours: 3, 8, 12 or 24")
    guest_count: int = Field(1, ge=1)
    total_amount: Optional[float] = None
    paid_amount: float = Field(0, ge=0)
    payment_method: Optional[PaymentMethod] = None
    booking_status: Literal["Confirmed", "Checked In"] = "Confirmed"
    special_requests: Optional[str] = Field(None, max_length=500)
    additional_services: List[AdditionalService] = []
    discounts: List[DiscountLine] = []
    notes: Optional[str] = Field(None, max_length=1000)

    class Config:
        use_enum_values = True


class GuestSnapshotUpdate(BaseModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=50)
    last_name: Optional[str] = Field(None, min_length=1, max_length=50)
    phone: Optional[str] = None
    id_type: Optional[IdType] = None
    id_number: Optional[str] = None

    class Config:
        str_strip_whitespace = True
        use_enum_values = True


class BookingUpdate(BaseModel):
    """Generic booking patch. A changed booking_status is routed through the
    matching status transition; every other field is a plain patch."""
    guest: Optional[GuestSnapshotUpdate] = None
    check_in_date: Optional[datetime] = None
    duration: Optional[int] = None
    guest_count: Optional[int] = Field(None, ge=1)
    total_amount: Optional[float] = None
    paid_amount: Optional[float] = None
    payment_method: Optional[PaymentMethod] = None
    special_requests: Optional[str] = Field(None, max_length=500)
    additional_services: Optional[List[AdditionalService]] = None
    discounts: Optional[List[DiscountLine]] = None
    notes: Optional[str] = Field(None, max_length=1000)
    booking_status: Optional[BookingStatus] = None
    cancellation_reason: Optional[str] = None

    class Config:
        use_enum_values = True


class CancelRequest(BaseModel):
    reason: Optional[str] = None


class NoShowRequest(BaseModel):
    notes: Optional[str] = Field(None, max_length=1000)


class PaymentCreate(BaseModel):
    amount: float
    payment_method: Optional[PaymentMethod] = None

    class Config:
        use_enum_values = True
