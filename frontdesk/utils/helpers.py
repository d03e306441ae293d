"""
Helper utility functions
"""
from bson import ObjectId
from typing import Any, Dict, List, Optional, Tuple
from datetime import datetime, date
import pytz

from frontdesk.config.settings import settings

DISPLAY_TZ = pytz.timezone(settings.DISPLAY_TIMEZONE)

def serialize_doc(doc: Dict) -> Dict:
    """Convert MongoDB document to JSON-serializable format"""
    if doc is None:
        return None

    if "_id" in doc and isinstance(doc["_id"], ObjectId):
        doc["_id"] = str(doc["_id"])

    # Convert any nested ObjectIds or datetimes
    for key, value in doc.items():
        if isinstance(value, ObjectId):
            doc[key] = str(value)
        elif isinstance(value, datetime):
            doc[key] = to_display_tz(value).isoformat()
        elif isinstance(value, list):
            doc[key] = [serialize_doc(item) if isinstance(item, dict) else item for item in value]
        elif isinstance(value, dict):
            doc[key] = serialize_doc(value)

    return doc

def serialize_docs(docs: List[Dict]) -> List[Dict]:
    """Convert list of MongoDB documents to JSON-serializable format"""
    return [serialize_doc(doc) for doc in docs]

def to_utc_naive(value: Any) -> Any:
    """Normalize a datetime to naive UTC, the form BSON dates are stored in.

    Naive inputs are taken to be UTC already. Plain dates become midnight UTC.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(pytz.utc).replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    return value

def to_display_tz(value: datetime) -> datetime:
    """Stored naive-UTC datetime as an aware datetime in the display timezone"""
    if value.tzinfo is None:
        value = pytz.utc.localize(value)
    return value.astimezone(DISPLAY_TZ)

def parse_sort(sort: Optional[str], default: str = "-created_at") -> List[Tuple[str, int]]:
    """Turn 'field,-other' into a pymongo sort list"""
    order = []
    for field in (sort or default).split(","):
        field = field.strip()
        if not field:
            continue
        if field.startswith("-"):
            order.append((field[1:], -1))
        else:
            order.append((field, 1))
    return order

def build_pagination(page: int, limit: int, total: int) -> Dict:
    """next/prev page pointers for list responses"""
    pagination = {}
    start_index = (page - 1) * limit
    if page * limit < total:
        pagination["next"] = {"page": page + 1, "limit": limit}
    if start_index > 0:
        pagination["prev"] = {"page": page - 1, "limit": limit}
    return pagination
