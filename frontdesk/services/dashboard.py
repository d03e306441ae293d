"""
Dashboard statistics - read-only counts over rooms, guests and bookings
"""
from datetime import datetime, timedelta
from typing import Dict, Optional, Tuple

from frontdesk.config.database import Collections
from frontdesk.database.db_operations import db_ops
from frontdesk.models.booking import ACTIVE_STATUSES
from frontdesk.models.room import RoomStatus
from frontdesk.utils.helpers import DISPLAY_TZ, to_display_tz, to_utc_naive


def today_bounds(now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """Start and end of the current display-timezone day, as naive UTC"""
    local = to_display_tz(now or datetime.utcnow())
    start = DISPLAY_TZ.localize(datetime(local.year, local.month, local.day))
    end = DISPLAY_TZ.localize(datetime(local.year, local.month, local.day) + timedelta(days=1))
    return to_utc_naive(start), to_utc_naive(end)


async def get_dashboard_stats(now: Optional[datetime] = None) -> Dict:
    start, end = today_bounds(now)
    today = {"$gte": start, "$lt": end}

    total_rooms = await db_ops.count(Collections.ROOMS, {"is_active": True})
    room_counts = {}
    for status in (RoomStatus.AVAILABLE, RoomStatus.OCCUPIED, RoomStatus.MAINTENANCE):
        room_counts[status.value] = await db_ops.count(
            Collections.ROOMS, {"is_active": True, "status": status.value}
        )
    occupied = room_counts[RoomStatus.OCCUPIED.value]

    recent = await db_ops.get_all(Collections.BOOKINGS, {}, limit=5, sort=[("created_at", -1)])

    return {
        "rooms": {
            "total": total_rooms,
            "available": room_counts[RoomStatus.AVAILABLE.value],
            "occupied": occupied,
            "maintenance": room_counts[RoomStatus.MAINTENANCE.value],
            "occupancy_rate": round(occupied / total_rooms * 100, 1) if total_rooms else 0,
        },
        "guests": {
            "total": await db_ops.count(Collections.GUESTS),
        },
        "bookings": {
            "today": await db_ops.count(Collections.BOOKINGS, {"check_in_date": today}),
            "check_ins_today": await db_ops.count(Collections.BOOKINGS, {"actual_check_in": today}),
            "check_outs_today": await db_ops.count(Collections.BOOKINGS, {"actual_check_out": today}),
            "active": await db_ops.count(Collections.BOOKINGS, {"booking_status": {"$in": ACTIVE_STATUSES}}),
        },
        "recent_bookings": recent,
    }
