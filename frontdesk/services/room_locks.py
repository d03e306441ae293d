"""
Per-room locks serializing every operation that reads and then writes a
room's bookings or status within this process.

Callers look the room up before taking its lock, so only ids of rooms that
exist ever get an entry. Deployments running several workers need a shared
lock instead.
"""
import asyncio
from collections import defaultdict
from contextlib import asynccontextmanager


class RoomLocks:

    def __init__(self):
        self._locks = defaultdict(asyncio.Lock)

    def __len__(self):
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, room_id: str):
        lock = self._locks[str(room_id)]
        async with lock:
            yield
