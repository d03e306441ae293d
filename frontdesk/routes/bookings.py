from fastapi import APIRouter, Depends, HTTPException, status, Query
from typing import Optional
from datetime import datetime
from frontdesk.config.settings import settings
from frontdesk.utils.auth import get_current_user
from frontdesk.utils.dependencies import get_booking_engine
from frontdesk.utils.helpers import serialize_doc, serialize_docs, parse_sort, build_pagination, to_utc_naive
from frontdesk.models.booking import (
    BookingCreate,
    BookingUpdate,
    CancelRequest,
    NoShowRequest,
    PaymentCreate,
)
from frontdesk.services import commands
from frontdesk.services.booking_engine import BookingEngine

router = APIRouter(prefix="/bookings", tags=["Bookings"])


def _ok(booking: dict) -> dict:
    return {"success": True, "data": serialize_doc(booking)}


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking: BookingCreate,
    current_user: dict = Depends(get_current_user),
    engine: BookingEngine = Depends(get_booking_engine),
):
    """Create a booking; the room must be free for the whole stay"""
    created = await engine.execute(
        commands.CreateBooking(data=booking.model_dump(), created_by=current_user["sub"])
    )
    return _ok(created)


@router.get("/")
async def get_bookings(
    booking_status: Optional[str] = None,
    payment_status: Optional[str] = None,
    room_id: Optional[str] = None,
    booking_number: Optional[str] = None,
    guest_name: Optional[str] = None,
    check_in_from: Optional[datetime] = None,
    check_in_to: Optional[datetime] = None,
    sort: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    current_user: dict = Depends(get_current_user),
    engine: BookingEngine = Depends(get_booking_engine),
):
    """List bookings with filters, newest first unless sort is given"""
    filter_query = {}
    if booking_status:
        filter_query["booking_status"] = booking_status
    if payment_status:
        filter_query["payment_status"] = payment_status
    if room_id:
        filter_query["room_id"] = room_id
    if booking_number:
        filter_query["booking_number"] = booking_number
    if guest_name:
        filter_query["$or"] = [
            {"guest.first_name": {"$regex": guest_name, "$options": "i"}},
            {"guest.last_name": {"$regex": guest_name, "$options": "i"}},
        ]
    if check_in_from or check_in_to:
        window = {}
        if check_in_from:
            window["$gte"] = to_utc_naive(check_in_from)
        if check_in_to:
            window["$lte"] = to_utc_naive(check_in_to)
        filter_query["check_in_date"] = window

    total = await engine.bookings.count(filter_query)
    bookings = await engine.bookings.find(
        filter_query, skip=(page - 1) * limit, limit=limit, sort=parse_sort(sort)
    )
    return {
        "success": True,
        "count": len(bookings),
        "total": total,
        "pagination": build_pagination(page, limit, total),
        "data": serialize_docs(bookings),
    }


@router.get("/{booking_id}")
async def get_booking(
    booking_id: str,
    current_user: dict = Depends(get_current_user),
    engine: BookingEngine = Depends(get_booking_engine),
):
    return _ok(await engine.get_booking(booking_id))


@router.put("/{booking_id}")
async def update_booking(
    booking_id: str,
    booking_update: BookingUpdate,
    current_user: dict = Depends(get_current_user),
    engine: BookingEngine = Depends(get_booking_engine),
):
    """Update booking fields; a new booking_status runs the matching transition.
    Nothing is written unless both the fields and the transition are accepted."""
    update_data = booking_update.model_dump(exclude_unset=True)
    new_status = update_data.pop("booking_status", None)
    reason = update_data.pop("cancellation_reason", None)
    if not update_data and new_status is None and reason is None:
        raise HTTPException(status_code=400, detail="No fields to update")
    if reason is not None and new_status is None:
        raise HTTPException(status_code=400, detail="cancellation_reason requires booking_status Cancelled")

    booking = await engine.execute(commands.UpdateBooking(
        booking_id=booking_id,
        fields=update_data,
        status=new_status,
        reason=reason,
    ))
    return _ok(booking)


@router.delete("/{booking_id}")
async def delete_booking(
    booking_id: str,
    request: Optional[CancelRequest] = None,
    current_user: dict = Depends(get_current_user),
    engine: BookingEngine = Depends(get_booking_engine),
):
    """Soft delete: the booking is cancelled, never removed"""
    reason = request.reason if request else None
    cancelled = await engine.execute(
        commands.CancelBooking(booking_id=booking_id, reason=reason, soft_delete=True)
    )
    return _ok(cancelled)


@router.put("/{booking_id}/checkin")
async def check_in(
    booking_id: str,
    current_user: dict = Depends(get_current_user),
    engine: BookingEngine = Depends(get_booking_engine),
):
    return _ok(await engine.execute(commands.CheckIn(booking_id)))


@router.put("/{booking_id}/checkout")
async def check_out(
    booking_id: str,
    current_user: dict = Depends(get_current_user),
    engine: BookingEngine = Depends(get_booking_engine),
):
    return _ok(await engine.execute(commands.CheckOut(booking_id)))


@router.put("/{booking_id}/cancel")
async def cancel_booking(
    booking_id: str,
    request: Optional[CancelRequest] = None,
    current_user: dict = Depends(get_current_user),
    engine: BookingEngine = Depends(get_booking_engine),
):
    reason = request.reason if request else None
    return _ok(await engine.execute(commands.CancelBooking(booking_id, reason=reason)))


@router.put("/{booking_id}/noshow")
async def mark_no_show(
    booking_id: str,
    request: Optional[NoShowRequest] = None,
    current_user: dict = Depends(get_current_user),
    engine: BookingEngine = Depends(get_booking_engine),
):
    notes = request.notes if request else None
    return _ok(await engine.execute(commands.MarkNoShow(booking_id, notes=notes)))


@router.post("/{booking_id}/payments")
async def record_payment(
    booking_id: str,
    payment: PaymentCreate,
    current_user: dict = Depends(get_current_user),
    engine: BookingEngine = Depends(get_booking_engine),
):
    return _ok(await engine.execute(commands.RecordPayment(
        booking_id=booking_id,
        amount=payment.amount,
        payment_method=payment.payment_method,
    )))
