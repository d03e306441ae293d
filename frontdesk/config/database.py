"""
Database configuration and connection management for MongoDB
"""
from motor.motor_asyncio import AsyncIOMotorClient
from typing import Optional
import os
from dotenv import load_dotenv

load_dotenv()

class DatabaseConfig:
    """MongoDB database configuration"""

    def __init__(self):
        self.MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")
        self.DATABASE_NAME = os.getenv("DATABASE_NAME", "frontdesk_db")
        self.client: Optional[AsyncIOMotorClient] = None
        self.database = None

    async def connect_db(self):
        """Connect to MongoDB"""
        try:
            self.client = AsyncIOMotorClient(self.MONGO_URI)
            self.database = self.client[self.DATABASE_NAME]
            # Test connection
            await self.client.admin.command('ping')
            print(f"✅ Connected to MongoDB: {self.DATABASE_NAME}")
        except Exception as e:
            print(f"❌ Error connecting to MongoDB: {e}")
            raise

    async def close_db(self):
        """Close MongoDB connection"""
        if self.client:
            self.client.close()
            print("✅ MongoDB connection closed")

    def use_client(self, client, database_name: Optional[str] = None):
        """Attach an already constructed client (seed scripts, tests)"""
        self.client = client
        self.database = client[database_name or self.DATABASE_NAME]

    def get_collection(self, collection_name: str):
        """Get a specific collection"""
        if self.database is None:
            raise Exception("Database not connected")
        return self.database[collection_name]

# Global database instance
db_config = DatabaseConfig()

# Collection names
class Collections:
    ROOM_TYPES = "room_types"
    ROOMS = "rooms"
    GUESTS = "guests"
    BOOKINGS = "bookings"


async def ensure_indexes():
    """Create the indexes the booking engine relies on"""
    rooms = db_config.get_collection(Collections.ROOMS)
    await rooms.create_index("room_number", unique=True)

    room_types = db_config.get_collection(Collections.ROOM_TYPES)
    await room_types.create_index("name", unique=True)

    bookings = db_config.get_collection(Collections.BOOKINGS)
    await bookings.create_index(
        [("room_id", 1), ("booking_status", 1), ("check_in_date", 1), ("check_out_date", 1)]
    )
    # Display label only, collisions are tolerated
    await bookings.create_index("booking_number")

    guests = db_config.get_collection(Collections.GUESTS)
    await guests.create_index(
        [("first_name", 1), ("last_name", 1), ("id_number", 1)], unique=True
    )
