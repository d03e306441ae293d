"""
Commands accepted by BookingEngine.execute().

Only the state-machine commands (CheckIn, CheckOut, CancelBooking,
MarkNoShow, ChangeStatus, UpdateBooking) run transition guards and room/guest side
effects. PatchBooking never changes booking_status.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class CreateBooking:
    data: Dict[str, Any]
    created_by: str


@dataclass
class CheckIn:
    booking_id: str


@dataclass
class CheckOut:
    booking_id: str


@dataclass
class CancelBooking:
    booking_id: str
    reason: Optional[str] = None
    # Soft delete uses its own guard messages and default reason
    soft_delete: bool = False


@dataclass
class MarkNoShow:
    booking_id: str
    notes: Optional[str] = None


@dataclass
class ChangeStatus:
    """Status change requested through the generic update"""
    booking_id: str
    status: str
    reason: Optional[str] = None
    notes: Optional[str] = None


@dataclass
class PatchBooking:
    booking_id: str
    fields: Dict[str, Any] = field(default_factory=dict)


@dataclass
class RecordPayment:
    booking_id: str
    amount: float
    payment_method: Optional[str] = None


@dataclass
class UpdateBooking:
    """Generic update: a field patch and an optional status change, checked
    together before either is written"""
    booking_id: str
    fields: Dict[str, Any] = field(default_factory=dict)
    status: Optional[str] = None
    reason: Optional[str] = None
