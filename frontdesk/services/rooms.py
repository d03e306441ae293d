"""
Room services - direct status changes, availability search and quotes
"""
from datetime import datetime
from typing import Dict, List, Optional

from frontdesk.config.database import Collections
from frontdesk.database.db_operations import db_ops, to_object_id
from frontdesk.models.booking import BookingStatus
from frontdesk.models.room import RoomStatus
from frontdesk.services.availability import overlap_filter
from frontdesk.services.booking_fields import compute_check_out
from frontdesk.services.errors import NotFound, PermissionDenied, ValidationFailure
from frontdesk.services.pricing import resolve_price, validate_duration
from frontdesk.services.room_locks import RoomLocks
from frontdesk.utils.helpers import to_utc_naive


async def get_room(room_id: str) -> Dict:
    room = await db_ops.get_by_id(Collections.ROOMS, room_id)
    if not room:
        raise NotFound(f"Room not found with id of {room_id}")
    return room


async def change_room_status(room_id: str, status: str, is_admin: bool, locks: RoomLocks) -> Dict:
    """Admins may set any status; other staff may only release a room from Maintenance"""
    room = await get_room(room_id)
    async with locks.hold(str(room["_id"])):
        room = await get_room(room_id)
        if not is_admin:
            if room.get("status") != RoomStatus.MAINTENANCE.value or status != RoomStatus.AVAILABLE.value:
                raise PermissionDenied("Users can only change room status from Maintenance to Available")
        return await db_ops.update(Collections.ROOMS, room_id, {"status": status})


async def attach_current_bookings(rooms: List[Dict]) -> List[Dict]:
    """Add a current_booking summary to rooms with a checked-in guest"""
    room_ids = [str(room["_id"]) for room in rooms]
    if not room_ids:
        return rooms
    current = await db_ops.get_all(
        Collections.BOOKINGS,
        {"booking_status": BookingStatus.CHECKED_IN.value, "room_id": {"$in": room_ids}},
        limit=len(room_ids),
    )
    by_room = {
        booking["room_id"]: {
            "booking_id": str(booking["_id"]),
            "booking_number": booking.get("booking_number"),
            "check_in_date": booking.get("check_in_date"),
            "check_out_date": booking.get("check_out_date"),
            "duration": booking.get("duration"),
            "guest": booking.get("guest"),
            "booking_status": booking.get("booking_status"),
        }
        for booking in current
    }
    for room in rooms:
        summary = by_room.get(str(room["_id"]))
        if summary:
            room["current_booking"] = summary
    return rooms


async def find_available_rooms(
    check_in: Optional[datetime] = None,
    check_out: Optional[datetime] = None,
    duration: Optional[int] = None,
) -> List[Dict]:
    """Active rooms marked Available, minus those with an overlapping active booking"""
    filter_query: Dict = {"status": RoomStatus.AVAILABLE.value, "is_active": True}

    check_in = to_utc_naive(check_in)
    check_out = to_utc_naive(check_out)
    if check_in and not check_out and duration:
        check_out = compute_check_out(check_in, validate_duration(duration))
    if check_in and check_out:
        if check_out < check_in:
            raise ValidationFailure("Check-out must be after check-in")
        conflicts = await db_ops.get_all(
            Collections.BOOKINGS, overlap_filter(check_in, check_out), limit=None
        )
        busy = [to_object_id(b["room_id"]) for b in conflicts]
        filter_query["_id"] = {"$nin": [oid for oid in busy if oid is not None]}

    return await db_ops.get_all(Collections.ROOMS, filter_query, limit=None, sort=[("room_number", 1)])


async def quote_room(room_id: str, duration: int) -> Dict:
    room = await get_room(room_id)
    room_type = await db_ops.get_by_id(Collections.ROOM_TYPES, room.get("room_type_id"))
    if not room_type:
        raise NotFound("Room type not found")
    return {
        "room_id": str(room["_id"]),
        "room_number": room.get("room_number"),
        "room_type": room_type.get("name"),
        "duration": duration,
        "total_amount": resolve_price(room_type.get("pricing"), duration),
    }
