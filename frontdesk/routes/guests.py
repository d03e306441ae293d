"""
Guest directory routes. Bookings also write here: every new booking ensures
its guest exists and no-shows append a note.
"""
import re
from fastapi import APIRouter, Depends, HTTPException, status, Query
from typing import Optional
from pymongo.errors import DuplicateKeyError
from frontdesk.config.database import Collections
from frontdesk.config.settings import settings
from frontdesk.utils.auth import get_current_user
from frontdesk.database.db_operations import db_ops
from frontdesk.utils.helpers import serialize_doc, serialize_docs, parse_sort, build_pagination
from frontdesk.models.guest import GuestCreate, GuestUpdate

router = APIRouter(prefix="/guests", tags=["Guests"])

SEARCH_LIMIT = 20

@router.get("/search")
async def search_guests(
    q: Optional[str] = None,
    current_user: dict = Depends(get_current_user)
):
    """Case-insensitive match on name, phone or ID number"""
    if not q:
        raise HTTPException(status_code=400, detail="Please provide search query")
    pattern = {"$regex": re.escape(q), "$options": "i"}
    guests = await db_ops.get_all(Collections.GUESTS, {
        "$or": [
            {"first_name": pattern},
            {"last_name": pattern},
            {"phone": pattern},
            {"id_number": pattern},
        ]
    }, limit=SEARCH_LIMIT)
    return {"success": True, "count": len(guests), "data": serialize_docs(guests)}

@router.get("/")
async def get_guests(
    sort: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    current_user: dict = Depends(get_current_user)
):
    total = await db_ops.count(Collections.GUESTS)
    guests = await db_ops.get_all(
        Collections.GUESTS, {}, skip=(page - 1) * limit, limit=limit, sort=parse_sort(sort)
    )
    return {
        "success": True,
        "count": len(guests),
        "total": total,
        "pagination": build_pagination(page, limit, total),
        "data": serialize_docs(guests),
    }

@router.get("/{guest_id}")
async def get_guest(
    guest_id: str,
    current_user: dict = Depends(get_current_user)
):
    guest = await db_ops.get_by_id(Collections.GUESTS, guest_id)
    if not guest:
        raise HTTPException(status_code=404, detail=f"Guest not found with id of {guest_id}")
    return {"success": True, "data": serialize_doc(guest)}

@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_guest(
    guest: GuestCreate,
    current_user: dict = Depends(get_current_user)
):
    try:
        created = await db_ops.create(Collections.GUESTS, guest.model_dump())
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail="A guest with this name and ID number already exists")
    return {"success": True, "data": serialize_doc(created)}

@router.put("/{guest_id}")
async def update_guest(
    guest_id: str,
    guest_update: GuestUpdate,
    current_user: dict = Depends(get_current_user)
):
    update_data = guest_update.model_dump(exclude_unset=True)
    if not update_data:
        raise HTTPException(status_code=400, detail="No fields to update")
    try:
        updated = await db_ops.update(Collections.GUESTS, guest_id, update_data)
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail="A guest with this name and ID number already exists")
    if not updated:
        raise HTTPException(status_code=404, detail=f"Guest not found with id of {guest_id}")
    return {"success": True, "data": serialize_doc(updated)}

@router.delete("/{guest_id}")
async def delete_guest(
    guest_id: str,
    current_user: dict = Depends(get_current_user)
):
    deleted = await db_ops.delete(Collections.GUESTS, guest_id)
    if not deleted:
        raise HTTPException(status_code=404, detail=f"Guest not found with id of {guest_id}")
    return {"success": True, "data": {}}
