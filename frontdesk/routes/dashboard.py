from fastapi import APIRouter, Depends
from frontdesk.utils.auth import get_current_user
from frontdesk.utils.helpers import serialize_docs
from frontdesk.services.dashboard import get_dashboard_stats

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])

@router.get("/stats")
async def dashboard_stats(current_user: dict = Depends(get_current_user)):
    stats = await get_dashboard_stats()
    stats["recent_bookings"] = serialize_docs(stats["recent_bookings"])
    return {"success": True, "data": stats}
