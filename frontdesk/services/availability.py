"""
Double-booking prevention.

Two windows overlap when existing.check_in <= new.check_out and
existing.check_out >= new.check_in. Boundaries are inclusive, so a stay
ending at 14:00 blocks another starting at 14:00 in the same room.
"""
from datetime import datetime
from typing import Dict, Optional

from frontdesk.database.db_operations import to_object_id
from frontdesk.models.booking import ACTIVE_STATUSES
from frontdesk.models.room import RoomStatus
from frontdesk.services.errors import RoomUnavailable

ROOM_NOT_AVAILABLE = "Room is not available"
ROOM_ALREADY_BOOKED = "Room is already booked for the selected dates"


def overlap_filter(check_in: datetime, check_out: datetime) -> Dict:
    """Active bookings whose window touches [check_in, check_out]"""
    return {
        "booking_status": {"$in": ACTIVE_STATUSES},
        "check_in_date": {"$lte": check_out},
        "check_out_date": {"$gte": check_in},
    }


def conflict_filter(room_id: str, check_in: datetime, check_out: datetime,
                    exclude_booking_id: Optional[str] = None) -> Dict:
    filter_query = {"room_id": room_id, **overlap_filter(check_in, check_out)}
    if exclude_booking_id:
        filter_query["_id"] = {"$ne": to_object_id(exclude_booking_id)}
    return filter_query


def windows_overlap(a_in: datetime, a_out: datetime, b_in: datetime, b_out: datetime) -> bool:
    return a_in <= b_out and a_out >= b_in


async def find_conflict(bookings, room_id: str, check_in: datetime, check_out: datetime,
                        exclude_booking_id: Optional[str] = None) -> Optional[Dict]:
    """First other active booking on room_id overlapping the window, if any"""
    return await bookings.find_one(conflict_filter(room_id, check_in, check_out, exclude_booking_id))


async def ensure_room_bookable(bookings, room: Dict, check_in: datetime, check_out: datetime,
                               exclude_booking_id: Optional[str] = None) -> None:
    if room.get("status") != RoomStatus.AVAILABLE.value:
        raise RoomUnavailable(ROOM_NOT_AVAILABLE)
    conflict = await find_conflict(bookings, str(room["_id"]), check_in, check_out, exclude_booking_id)
    if conflict:
        raise RoomUnavailable(ROOM_ALREADY_BOOKED)
