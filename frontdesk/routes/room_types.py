from fastapi import APIRouter, Depends, HTTPException, status
from pymongo.errors import DuplicateKeyError
from frontdesk.config.database import Collections
from frontdesk.utils.auth import get_current_user, require_admin
from frontdesk.database.db_operations import db_ops
from frontdesk.utils.helpers import serialize_doc, serialize_docs
from frontdesk.models.room_type import RoomTypeCreate, RoomTypeUpdate

router = APIRouter(prefix="/room-types", tags=["Room Types"])

@router.get("/")
async def get_room_types(current_user: dict = Depends(get_current_user)):
    """Active room types with their pricing tables"""
    room_types = await db_ops.get_all(
        Collections.ROOM_TYPES, {"is_active": True}, limit=None, sort=[("name", 1)]
    )
    return {"success": True, "count": len(room_types), "data": serialize_docs(room_types)}

@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_room_type(
    room_type: RoomTypeCreate,
    current_user: dict = Depends(require_admin)
):
    try:
        created = await db_ops.create(Collections.ROOM_TYPES, room_type.model_dump())
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail=f"Room type {room_type.name} already exists")
    return {"success": True, "data": serialize_doc(created)}

@router.put("/{room_type_id}")
async def update_room_type(
    room_type_id: str,
    room_type_update: RoomTypeUpdate,
    current_user: dict = Depends(require_admin)
):
    update_data = room_type_update.model_dump(exclude_unset=True)
    if not update_data:
        raise HTTPException(status_code=400, detail="No fields to update")
    updated = await db_ops.update(Collections.ROOM_TYPES, room_type_id, update_data)
    if not updated:
        raise HTTPException(status_code=404, detail=f"Room type not found with id of {room_type_id}")
    return {"success": True, "data": serialize_doc(updated)}

@router.delete("/{room_type_id}")
async def delete_room_type(
    room_type_id: str,
    current_user: dict = Depends(require_admin)
):
    """Soft delete"""
    updated = await db_ops.update(Collections.ROOM_TYPES, room_type_id, {"is_active": False})
    if not updated:
        raise HTTPException(status_code=404, detail=f"Room type not found with id of {room_type_id}")
    return {"success": True, "data": {}}
