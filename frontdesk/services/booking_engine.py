"""
Booking Engine - booking creation, the status state machine and the room /
guest synchronization that follows every transition.

    Confirmed ──check-in──▶ Checked In ──check-out──▶ Checked Out
        │                       │
        ├──cancel───────────────┴──▶ Cancelled
        └──no-show──▶ No Show

Checked Out, Cancelled and No Show are terminal. Room status follows:
Confirmed/Checked In → Occupied, Checked Out → Maintenance,
Cancelled/No Show → Available. Deleting a booking cancels it from any state but
Checked Out or Cancelled; a deleted No Show leaves its room alone.
"""
import logging
import random
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Callable, Dict, Optional

from frontdesk.models.booking import BookingStatus
from frontdesk.models.room import RoomStatus
from frontdesk.services import commands
from frontdesk.services.availability import ensure_room_bookable, find_conflict
from frontdesk.services.booking_fields import (
    compute_check_out,
    derive_booking_fields,
    generate_booking_number,
)
from frontdesk.services.errors import (
    InvalidTransition,
    NotFound,
    RoomUnavailable,
    ValidationFailure,
)
from frontdesk.services.pricing import resolve_price, validate_duration
from frontdesk.services.room_locks import RoomLocks
from frontdesk.utils.helpers import to_display_tz, to_utc_naive

logger = logging.getLogger(__name__)

CONFIRMED = BookingStatus.CONFIRMED.value
CHECKED_IN = BookingStatus.CHECKED_IN.value
CHECKED_OUT = BookingStatus.CHECKED_OUT.value
CANCELLED = BookingStatus.CANCELLED.value
NO_SHOW = BookingStatus.NO_SHOW.value

INITIAL_STATUSES = (CONFIRMED, CHECKED_IN)

# Fields a generic patch may write; everything else is owned by the engine
PATCHABLE_FIELDS = {
    "guest",
    "guest_count",
    "total_amount",
    "paid_amount",
    "payment_method",
    "special_requests",
    "additional_services",
    "discounts",
    "notes",
    "check_in_date",
    "duration",
}

PRICE_TOLERANCE = 0.005

# Target status -> (statuses it may be reached from, rejection message)
TRANSITION_GUARDS = {
    CHECKED_IN: ((CONFIRMED,), "Booking must be confirmed to check in"),
    CHECKED_OUT: ((CHECKED_IN,), "Guest must be checked in to check out"),
    CANCELLED: (INITIAL_STATUSES, "Cannot cancel this booking"),
    NO_SHOW: ((CONFIRMED,), "Cannot mark this booking as no show"),
}


def no_show_note(booking: Dict, notes: Optional[str] = None) -> str:
    check_in = to_display_tz(booking["check_in_date"])
    note = (
        f"No-show for booking {booking['booking_number']} on "
        f"{check_in.month}/{check_in.day}/{check_in.year}."
    )
    if notes:
        note += f" Additional notes: {notes}"
    return note


class BookingEngine:

    def __init__(
        self,
        bookings,
        rooms,
        guests,
        locks: Optional[RoomLocks] = None,
        enforce_pricing: bool = False,
        booking_number_attempts: int = 5,
        clock: Callable[[], datetime] = datetime.utcnow,
        rng: Optional[random.Random] = None,
    ):
        self.bookings = bookings
        self.rooms = rooms
        self.guests = guests
        self.locks = locks or RoomLocks()
        self.enforce_pricing = enforce_pricing
        self.booking_number_attempts = max(1, booking_number_attempts)
        self._clock = clock
        self._rng = rng
        self._handlers = {
            commands.CreateBooking: self.create,
            commands.CheckIn: self.check_in,
            commands.CheckOut: self.check_out,
            commands.CancelBooking: self.cancel,
            commands.MarkNoShow: self.mark_no_show,
            commands.ChangeStatus: self.change_status,
            commands.PatchBooking: self.patch,
            commands.UpdateBooking: self.update_booking,
            commands.RecordPayment: self.record_payment,
        }

    async def execute(self, command) -> Dict:
        handler = self._handlers.get(type(command))
        if handler is None:
            raise TypeError(f"Unsupported booking command: {type(command).__name__}")
        return await handler(command)

    async def get_booking(self, booking_id: str) -> Dict:
        booking = await self.bookings.get(booking_id)
        if not booking:
            raise NotFound(f"Booking not found with id of {booking_id}")
        return booking

    @asynccontextmanager
    async def _locked(self, booking_id: str):
        """Hold the booking's room lock and yield a fresh copy of the booking"""
        booking = await self.get_booking(booking_id)
        async with self.locks.hold(booking["room_id"]):
            yield await self.get_booking(booking_id)

    # ─── creation ────────────────────────────────────────────────────────────

    async def create(self, command: commands.CreateBooking) -> Dict:
        data = dict(command.data)
        if not command.created_by:
            raise ValidationFailure("Please add user who created booking")

        room_id = data.get("room_id")
        duration = validate_duration(data.get("duration"))
        check_in = to_utc_naive(data.get("check_in_date"))
        if check_in is None:
            raise ValidationFailure("Please add check-in date")
        check_out = compute_check_out(check_in, duration)

        status = data.get("booking_status") or CONFIRMED
        if status not in INITIAL_STATUSES:
            raise ValidationFailure("A new booking must be Confirmed or Checked In")

        room = await self.rooms.get(room_id)
        if not room:
            raise NotFound("Room not found")

        async with self.locks.hold(str(room["_id"])):
            room = await self.rooms.get(room_id)
            if not room:
                raise NotFound("Room not found")
            if room.get("status") != RoomStatus.AVAILABLE.value:
                raise RoomUnavailable("Room is not available")

            total = data.get("total_amount")
            if not total or total <= 0:
                raise ValidationFailure("Invalid total amount")
            if self.enforce_pricing:
                await self._check_price(room, duration, total)

            await ensure_room_bookable(self.bookings, room, check_in, check_out)

            now = self._clock()
            document = {
                **data,
                "room_id": str(room["_id"]),
                "check_in_date": check_in,
                "check_out_date": check_out,
                "duration": duration,
                "booking_status": status,
                "actual_check_in": now if status == CHECKED_IN else None,
                "actual_check_out": None,
                "cancellation_reason": None,
                "cancellation_date": None,
                "created_by": command.created_by,
            }
            if not document.get("booking_number"):
                document["booking_number"] = await self._new_booking_number(now)
            booking = await self.bookings.insert(derive_booking_fields(document))
            await self.rooms.set_status(room_id, RoomStatus.OCCUPIED.value)

        logger.info(
            "Booking %s created for room %s (%s)",
            booking["booking_number"], room.get("room_number"), status,
        )
        await self._ensure_guest(booking)
        return booking

    async def _new_booking_number(self, now: datetime) -> str:
        number_date = to_display_tz(now)
        candidate = None
        for _ in range(self.booking_number_attempts):
            candidate = generate_booking_number(number_date, self._rng)
            if not await self.bookings.number_exists(candidate):
                return candidate
        logger.warning("Booking number %s is already in use, keeping it as a display label", candidate)
        return candidate

    async def _check_price(self, room: Dict, duration: int, total: float) -> None:
        room_type = await self.rooms.get_room_type(room.get("room_type_id"))
        if not room_type:
            raise NotFound("Room type not found")
        expected = resolve_price(room_type.get("pricing"), duration)
        if abs(expected - total) > PRICE_TOLERANCE:
            raise ValidationFailure("Total amount does not match room pricing")

    # ─── state machine ───────────────────────────────────────────────────────

    @staticmethod
    def _check_transition(booking: Dict, to_status: str) -> None:
        allowed, message = TRANSITION_GUARDS[to_status]
        if booking["booking_status"] not in allowed:
            raise InvalidTransition(message)

    @staticmethod
    def _check_soft_delete(booking: Dict) -> None:
        status = booking["booking_status"]
        if status == CHECKED_OUT:
            raise InvalidTransition("Cannot cancel a checked out booking")
        if status == CANCELLED:
            raise InvalidTransition("Booking is already cancelled")

    @staticmethod
    def _resolve_status(status: str) -> str:
        try:
            return BookingStatus(status).value
        except ValueError:
            raise ValidationFailure(f"Unknown booking status: {status}")

    async def _transition(self, booking: Dict, to_status: str, room_status: Optional[str], updates: Dict) -> Dict:
        """Persist booking_status change if nobody moved the booking meanwhile, then sync the room"""
        from_status = booking["booking_status"]
        updated = await self.bookings.update_if_status(
            str(booking["_id"]), from_status, {"booking_status": to_status, **updates}
        )
        if updated is None:
            raise InvalidTransition("Booking was modified by another request, reload and retry")
        if room_status:
            await self.rooms.set_status(booking["room_id"], room_status)
        logger.info(
            "Booking %s: %s -> %s, room %s -> %s",
            booking.get("booking_number"), from_status, to_status, booking["room_id"], room_status or "unchanged",
        )
        return updated

    async def _apply_transition(self, booking: Dict, to_status: str,
                                reason: Optional[str] = None, notes: Optional[str] = None) -> Dict:
        """Write an already guarded transition with its timestamps and room status"""
        updates = {}
        if to_status == CHECKED_IN:
            room_status = RoomStatus.OCCUPIED.value
            if not booking.get("actual_check_in"):
                updates["actual_check_in"] = self._clock()
        elif to_status == CHECKED_OUT:
            # Room goes to housekeeping, staff release it to Available
            room_status = RoomStatus.MAINTENANCE.value
            if not booking.get("actual_check_out"):
                updates["actual_check_out"] = self._clock()
        elif to_status == CANCELLED:
            # A no-show already gave its room back, which may be let again since
            room_status = None if booking["booking_status"] == NO_SHOW else RoomStatus.AVAILABLE.value
            updates["cancellation_date"] = self._clock()
            updates["cancellation_reason"] = reason or "No reason provided"
        else:
            room_status = RoomStatus.AVAILABLE.value
            if notes:
                updates["notes"] = notes
        return await self._transition(booking, to_status, room_status, updates)

    async def check_in(self, command: commands.CheckIn) -> Dict:
        async with self._locked(command.booking_id) as booking:
            self._check_transition(booking, CHECKED_IN)
            return await self._apply_transition(booking, CHECKED_IN)

    async def check_out(self, command: commands.CheckOut) -> Dict:
        async with self._locked(command.booking_id) as booking:
            self._check_transition(booking, CHECKED_OUT)
            return await self._apply_transition(booking, CHECKED_OUT)

    async def cancel(self, command: commands.CancelBooking) -> Dict:
        async with self._locked(command.booking_id) as booking:
            if command.soft_delete:
                self._check_soft_delete(booking)
                return await self._apply_transition(
                    booking, CANCELLED, reason=command.reason or "Booking deleted by user"
                )
            self._check_transition(booking, CANCELLED)
            return await self._apply_transition(booking, CANCELLED, reason=command.reason)

    async def mark_no_show(self, command: commands.MarkNoShow) -> Dict:
        async with self._locked(command.booking_id) as booking:
            self._check_transition(booking, NO_SHOW)
            updated = await self._apply_transition(booking, NO_SHOW, notes=command.notes)

        await self._record_no_show(updated, command.notes)
        return updated

    async def change_status(self, command: commands.ChangeStatus) -> Dict:
        return await self._update(
            command.booking_id, {}, command.status, reason=command.reason, notes=command.notes
        )

    async def update_booking(self, command: commands.UpdateBooking) -> Dict:
        return await self._update(
            command.booking_id, command.fields, command.status,
            reason=command.reason, notes=command.fields.get("notes"),
        )

    async def _update(self, booking_id: str, fields: Dict, status: Optional[str],
                      reason: Optional[str] = None, notes: Optional[str] = None) -> Dict:
        """Field patch plus optional status change; every check runs before the first write"""
        target = self._resolve_status(status) if status is not None else None
        if not fields and target is None:
            raise ValidationFailure("No fields to update")
        self._check_patch_fields(fields)

        async with self._locked(booking_id) as booking:
            current = booking["booking_status"]
            if target == current:
                target = None
            if reason and target != CANCELLED:
                raise ValidationFailure("A cancellation reason can only be given when cancelling")
            if target == CONFIRMED:
                raise InvalidTransition(f"Cannot move a booking from {current} back to Confirmed")
            if target is not None:
                self._check_transition(booking, target)

            if fields:
                updates = await self._patch_updates(booking, fields)
                booking = await self.bookings.update(str(booking["_id"]), updates)
                if booking is None:
                    raise NotFound(f"Booking not found with id of {booking_id}")
            if target is None:
                return booking
            updated = await self._apply_transition(booking, target, reason=reason, notes=notes)

        if target == NO_SHOW:
            await self._record_no_show(updated, notes)
        return updated

    # ─── plain field updates ─────────────────────────────────────────────────

    @staticmethod
    def _check_patch_fields(fields: Dict) -> None:
        rejected = sorted(set(fields) - PATCHABLE_FIELDS)
        if rejected:
            raise ValidationFailure(f"Fields cannot be updated directly: {', '.join(rejected)}")

    async def patch(self, command: commands.PatchBooking) -> Dict:
        fields = dict(command.fields)
        if not fields:
            raise ValidationFailure("No fields to update")
        self._check_patch_fields(fields)

        async with self._locked(command.booking_id) as booking:
            updates = await self._patch_updates(booking, fields)
            updated = await self.bookings.update(str(booking["_id"]), updates)

        if updated is None:
            raise NotFound(f"Booking not found with id of {command.booking_id}")
        return updated

    async def _patch_updates(self, booking: Dict, fields: Dict) -> Dict:
        """Validate a patch against the current booking and return the $set document"""
        updates = {
            key: value for key, value in fields.items()
            if key not in ("guest", "check_in_date", "duration", "total_amount", "paid_amount")
        }

        if fields.get("guest"):
            changes = {k: v for k, v in fields["guest"].items() if v is not None}
            updates["guest"] = {**booking["guest"], **changes}

        duration = booking["duration"]
        if "check_in_date" in fields or "duration" in fields:
            updates.update(await self._reschedule(booking, fields))
            duration = updates["duration"]

        total = booking.get("total_amount")
        if "total_amount" in fields:
            total = fields["total_amount"]
            if not total or total <= 0:
                raise ValidationFailure("Invalid total amount")
            updates["total_amount"] = total
        if self.enforce_pricing and ("total_amount" in fields or "duration" in fields):
            room = await self.rooms.get(booking["room_id"])
            if not room:
                raise NotFound("Room not found")
            await self._check_price(room, duration, total)

        if "paid_amount" in fields:
            paid = fields["paid_amount"]
            if paid is None or paid < 0:
                raise ValidationFailure("Invalid paid amount")
            updates["paid_amount"] = paid

        derived = derive_booking_fields({**booking, **updates})
        updates["balance"] = derived["balance"]
        updates["payment_status"] = derived["payment_status"]
        return updates

    async def _reschedule(self, booking: Dict, fields: Dict) -> Dict:
        if booking["booking_status"] != CONFIRMED:
            raise InvalidTransition("Only confirmed bookings can be rescheduled")
        duration = validate_duration(fields.get("duration") or booking["duration"])
        check_in = to_utc_naive(fields.get("check_in_date") or booking["check_in_date"])
        check_out = compute_check_out(check_in, duration)
        conflict = await find_conflict(
            self.bookings, booking["room_id"], check_in, check_out,
            exclude_booking_id=str(booking["_id"]),
        )
        if conflict:
            raise RoomUnavailable("Date change causes overlap with another booking")
        return {"check_in_date": check_in, "check_out_date": check_out, "duration": duration}

    async def record_payment(self, command: commands.RecordPayment) -> Dict:
        if command.amount is None or command.amount <= 0:
            raise ValidationFailure("Payment amount must be greater than zero")

        async with self._locked(command.booking_id) as booking:
            if booking["booking_status"] in (CANCELLED, NO_SHOW):
                raise InvalidTransition("Cannot take payment for a cancelled or no-show booking")
            paid = (booking.get("paid_amount") or 0) + command.amount
            derived = derive_booking_fields({**booking, "paid_amount": paid})
            updates = {
                "paid_amount": paid,
                "balance": derived["balance"],
                "payment_status": derived["payment_status"],
            }
            if command.payment_method:
                updates["payment_method"] = command.payment_method
            updated = await self.bookings.update(str(booking["_id"]), updates)

        logger.info("Payment of %.2f recorded on booking %s", command.amount, booking.get("booking_number"))
        return updated

    # ─── guest directory side effects ────────────────────────────────────────
    # Best effort: the booking stands even if the guest directory write fails.

    async def _ensure_guest(self, booking: Dict) -> None:
        try:
            await self.guests.ensure_guest(booking["guest"])
        except Exception:
            logger.exception("Guest directory update failed for booking %s", booking.get("booking_number"))

    async def _record_no_show(self, booking: Dict, notes: Optional[str]) -> None:
        try:
            await self.guests.record_no_show(booking["guest"], no_show_note(booking, notes))
        except Exception:
            logger.exception("No-show note failed for booking %s", booking.get("booking_number"))


def build_booking_engine() -> BookingEngine:
    """Wire the engine to the Mongo-backed stores; called once at startup"""
    from frontdesk.config.settings import settings
    from frontdesk.services.registry import BookingStore, GuestDirectory, RoomRegistry

    return BookingEngine(
        bookings=BookingStore(),
        rooms=RoomRegistry(),
        guests=GuestDirectory(),
        locks=RoomLocks(),
        enforce_pricing=settings.ENFORCE_PRICING,
        booking_number_attempts=settings.BOOKING_NUMBER_ATTEMPTS,
    )
