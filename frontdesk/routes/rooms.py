from fastapi import APIRouter, Depends, HTTPException, status, Query
from typing import Optional
from datetime import datetime
from pymongo.errors import DuplicateKeyError
from frontdesk.config.database import Collections
from frontdesk.config.settings import settings
from frontdesk.utils.auth import get_current_user, require_admin, is_admin
from frontdesk.utils.dependencies import get_booking_engine
from frontdesk.database.db_operations import db_ops
from frontdesk.utils.helpers import serialize_doc, serialize_docs, parse_sort, build_pagination
from frontdesk.models.room import RoomCreate, RoomUpdate, RoomStatusUpdate
from frontdesk.services import rooms as room_service
from frontdesk.services.booking_engine import BookingEngine

router = APIRouter(prefix="/rooms", tags=["Rooms"])

@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_room(
    room: RoomCreate,
    current_user: dict = Depends(require_admin)
):
    """Create a room of an existing room type"""
    room_type = await db_ops.get_by_id(Collections.ROOM_TYPES, room.room_type_id)
    if not room_type:
        raise HTTPException(status_code=404, detail="Room type not found")

    try:
        created = await db_ops.create(Collections.ROOMS, room.model_dump())
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail=f"Room number {room.room_number} already exists")
    return {"success": True, "data": serialize_doc(created)}

@router.get("/")
async def get_rooms(
    room_status: Optional[str] = Query(None, alias="status"),
    floor: Optional[int] = None,
    room_type_id: Optional[str] = None,
    is_active: Optional[bool] = None,
    sort: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    current_user: dict = Depends(get_current_user)
):
    """List rooms; occupied rooms carry their checked-in booking"""
    filter_query = {}
    if room_status:
        filter_query["status"] = room_status
    if floor is not None:
        filter_query["floor"] = floor
    if room_type_id:
        filter_query["room_type_id"] = room_type_id
    if is_active is not None:
        filter_query["is_active"] = is_active

    total = await db_ops.count(Collections.ROOMS, filter_query)
    rooms = await db_ops.get_all(
        Collections.ROOMS, filter_query,
        skip=(page - 1) * limit, limit=limit, sort=parse_sort(sort, default="room_number"),
    )
    rooms = await room_service.attach_current_bookings(rooms)
    return {
        "success": True,
        "count": len(rooms),
        "total": total,
        "pagination": build_pagination(page, limit, total),
        "data": serialize_docs(rooms),
    }

@router.get("/available")
async def get_available_rooms(
    check_in: Optional[datetime] = None,
    check_out: Optional[datetime] = None,
    duration: Optional[int] = None,
    current_user: dict = Depends(get_current_user)
):
    """Rooms free for the given window (or simply marked Available)"""
    rooms = await room_service.find_available_rooms(check_in, check_out, duration)
    return {"success": True, "count": len(rooms), "data": serialize_docs(rooms)}

@router.get("/{room_id}")
async def get_room(
    room_id: str,
    current_user: dict = Depends(get_current_user)
):
    room = await room_service.get_room(room_id)
    return {"success": True, "data": serialize_doc(room)}

@router.get("/{room_id}/quote")
async def quote_room(
    room_id: str,
    duration: int,
    current_user: dict = Depends(get_current_user)
):
    """Price of a stay of the given duration in this room"""
    return {"success": True, "data": await room_service.quote_room(room_id, duration)}

@router.put("/{room_id}")
async def update_room(
    room_id: str,
    room_update: RoomUpdate,
    current_user: dict = Depends(require_admin),
    engine: BookingEngine = Depends(get_booking_engine),
):
    """Update room details (admin override, status included)"""
    update_data = room_update.model_dump(exclude_unset=True)
    if not update_data:
        raise HTTPException(status_code=400, detail="No fields to update")

    if update_data.get("room_type_id"):
        room_type = await db_ops.get_by_id(Collections.ROOM_TYPES, update_data["room_type_id"])
        if not room_type:
            raise HTTPException(status_code=404, detail="Room type not found")

    room = await room_service.get_room(room_id)
    async with engine.locks.hold(str(room["_id"])):
        try:
            updated = await db_ops.update(Collections.ROOMS, room_id, update_data)
        except DuplicateKeyError:
            raise HTTPException(status_code=400, detail="Room number already exists")
    if not updated:
        raise HTTPException(status_code=404, detail=f"Room not found with id of {room_id}")
    return {"success": True, "data": serialize_doc(updated)}

@router.put("/{room_id}/status")
async def update_room_status(
    room_id: str,
    status_update: RoomStatusUpdate,
    current_user: dict = Depends(get_current_user),
    engine: BookingEngine = Depends(get_booking_engine),
):
    """Staff may release a room from Maintenance; admins may set any status"""
    updated = await room_service.change_room_status(
        room_id, status_update.status, is_admin(current_user), engine.locks
    )
    return {"success": True, "data": serialize_doc(updated)}

@router.delete("/{room_id}")
async def delete_room(
    room_id: str,
    current_user: dict = Depends(require_admin)
):
    """Deactivate a room; rooms are never removed"""
    updated = await db_ops.update(Collections.ROOMS, room_id, {"is_active": False})
    if not updated:
        raise HTTPException(status_code=404, detail=f"Room not found with id of {room_id}")
    return {"success": True, "data": {}}
