"""
Seed room types and rooms for a fresh front desk database
"""
import asyncio

from frontdesk.config.database import db_config, Collections, ensure_indexes
from frontdesk.database.db_operations import db_ops

ROOM_TYPES = [
    {
        "name": "Standard",
        "description": "Basic room with essential amenities",
        "base_capacity": 2,
        "pricing": {"hourly3": 150, "hourly8": 400, "hourly12": 600, "daily": 1200},
        "penalty": 200,
    },
    {
        "name": "Deluxe",
        "description": "Spacious room with premium amenities",
        "base_capacity": 3,
        "pricing": {"hourly3": 225, "hourly8": 600, "hourly12": 900, "daily": 1800},
        "penalty": 300,
    },
    {
        "name": "Suite",
        "description": "Luxury suite with separate living area",
        "base_capacity": 4,
        "pricing": {"hourly3": 360, "hourly8": 960, "hourly12": 1440, "daily": 2880},
        "penalty": 500,
    },
    {
        "name": "Presidential",
        "description": "Top-tier suite with all premium amenities",
        "base_capacity": 6,
        "pricing": {"hourly3": 600, "hourly8": 1600, "hourly12": 2400, "daily": 4800},
        "penalty": 1000,
    },
]

# (room number, room type, floor, status, description)
ROOMS = [
    ("101", "Standard", 1, "Available", "Comfortable standard room with basic amenities"),
    ("102", "Standard", 1, "Available", "Comfortable standard room with basic amenities"),
    ("103", "Standard", 1, "Available", "Single occupancy standard room"),
    ("201", "Deluxe", 2, "Available", "Spacious deluxe room with premium amenities"),
    ("202", "Deluxe", 2, "Available", "Deluxe room with balcony and city view"),
    ("203", "Deluxe", 2, "Maintenance", "Deluxe room currently under maintenance"),
    ("301", "Suite", 3, "Available", "Luxury suite with jacuzzi and premium amenities"),
    ("302", "Suite", 3, "Available", "Executive suite with kitchenette"),
    ("303", "Suite", 3, "Available", "Junior suite with balcony"),
    ("401", "Presidential", 4, "Available", "Presidential suite with all premium amenities"),
]


async def seed_data():
    print("🌱 Starting database seeding...")

    try:
        await db_config.connect_db()
        await ensure_indexes()

        type_ids = {}
        for room_type in ROOM_TYPES:
            existing = await db_ops.get_one(Collections.ROOM_TYPES, {"name": room_type["name"]})
            if existing:
                type_ids[room_type["name"]] = str(existing["_id"])
                print(f"⚠️ Room type already exists: {room_type['name']}")
                continue
            created = await db_ops.create(Collections.ROOM_TYPES, {**room_type, "is_active": True})
            type_ids[room_type["name"]] = str(created["_id"])
            print(f"✅ Created room type: {room_type['name']}")

        for number, type_name, floor, status, description in ROOMS:
            if await db_ops.get_one(Collections.ROOMS, {"room_number": number}):
                print(f"⚠️ Room already exists: {number}")
                continue
            await db_ops.create(Collections.ROOMS, {
                "room_number": number,
                "room_type_id": type_ids[type_name],
                "floor": floor,
                "status": status,
                "description": description,
                "telephone": number,
                "is_active": True,
            })
            print(f"✅ Created room {number} ({type_name})")

        print("🎉 Seeding complete")
    finally:
        await db_config.close_db()


if __name__ == "__main__":
    asyncio.run(seed_data())
