"""
Mongo-backed stores the booking engine writes through: bookings, the room
registry and the guest directory.
"""
import logging
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from frontdesk.config.database import db_config, Collections
from frontdesk.database.db_operations import db_ops, to_object_id

logger = logging.getLogger(__name__)

GUEST_KEY_FIELDS = ("first_name", "last_name", "id_number")
NOTE_APPEND_ATTEMPTS = 3


class BookingStore:

    async def get(self, booking_id: str) -> Optional[Dict]:
        return await db_ops.get_by_id(Collections.BOOKINGS, booking_id)

    async def insert(self, document: Dict) -> Dict:
        return await db_ops.create(Collections.BOOKINGS, document)

    async def update(self, booking_id: str, data: Dict) -> Optional[Dict]:
        return await db_ops.update(Collections.BOOKINGS, booking_id, data)

    async def update_if_status(self, booking_id: str, expected_status: str, data: Dict) -> Optional[Dict]:
        """Write only if the booking is still in expected_status"""
        oid = to_object_id(booking_id)
        if oid is None:
            return None
        return await db_ops.update_where(
            Collections.BOOKINGS,
            {"_id": oid, "booking_status": expected_status},
            data,
        )

    async def find_one(self, filter_query: Dict) -> Optional[Dict]:
        return await db_ops.get_one(Collections.BOOKINGS, filter_query)

    async def find(self, filter_query: Dict, skip: int = 0, limit: int = 100,
                   sort: Optional[List[Tuple[str, int]]] = None) -> List[Dict]:
        return await db_ops.get_all(Collections.BOOKINGS, filter_query, skip=skip, limit=limit, sort=sort)

    async def count(self, filter_query: Dict = None) -> int:
        return await db_ops.count(Collections.BOOKINGS, filter_query)

    async def number_exists(self, booking_number: str) -> bool:
        return await self.count({"booking_number": booking_number}) > 0


class RoomRegistry:

    async def get(self, room_id: str) -> Optional[Dict]:
        return await db_ops.get_by_id(Collections.ROOMS, room_id)

    async def get_room_type(self, room_type_id: str) -> Optional[Dict]:
        return await db_ops.get_by_id(Collections.ROOM_TYPES, room_type_id)

    async def set_status(self, room_id: str, status: str) -> Optional[Dict]:
        updated = await db_ops.update(Collections.ROOMS, room_id, {"status": status})
        if updated is None:
            logger.warning("Room %s not found while setting status %s", room_id, status)
        return updated


class GuestDirectory:
    """Guests keyed by (first_name, last_name, id_number)"""

    @staticmethod
    def _key(snapshot: Dict) -> Dict:
        return {field: snapshot.get(field) for field in GUEST_KEY_FIELDS}

    @staticmethod
    def _insert_fields(snapshot: Dict, notes: Optional[str]) -> Dict:
        now = datetime.utcnow()
        fields = {
            "phone": snapshot.get("phone"),
            "id_type": snapshot.get("id_type"),
            "notes": notes,
            "created_at": now,
            "updated_at": now,
        }
        return fields

    async def find(self, snapshot: Dict) -> Optional[Dict]:
        return await db_ops.get_one(Collections.GUESTS, self._key(snapshot))

    async def ensure_guest(self, snapshot: Dict) -> bool:
        """Insert the guest unless one with the same key exists. True if inserted."""
        collection = db_config.get_collection(Collections.GUESTS)
        try:
            result = await collection.update_one(
                self._key(snapshot),
                {"$setOnInsert": self._insert_fields(snapshot, None)},
                upsert=True,
            )
        except DuplicateKeyError:
            # A concurrent upsert inserted the same key first
            return False
        return result.upserted_id is not None

    async def record_no_show(self, snapshot: Dict, note: str) -> Dict:
        """Insert the guest with note, or append note to the existing guest's notes"""
        collection = db_config.get_collection(Collections.GUESTS)
        key = self._key(snapshot)
        try:
            existing = await collection.find_one_and_update(
                key,
                {"$setOnInsert": self._insert_fields(snapshot, note)},
                upsert=True,
                return_document=ReturnDocument.BEFORE,
            )
        except DuplicateKeyError:
            existing = await collection.find_one(key)
        if existing is None:
            return await collection.find_one(key)

        for _ in range(NOTE_APPEND_ATTEMPTS):
            current = existing.get("notes")
            notes = f"{current}\n\n{note}" if current else note
            updated = await collection.find_one_and_update(
                {"_id": existing["_id"], "notes": current},
                {"$set": {"notes": notes, "updated_at": datetime.utcnow()}},
                return_document=ReturnDocument.AFTER,
            )
            if updated is not None:
                return updated
            existing = await collection.find_one({"_id": existing["_id"]})
            if existing is None:
                break
        raise RuntimeError(f"Could not append no-show note for guest {key}")
