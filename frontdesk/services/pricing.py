"""
Room type price lookup by stay duration
"""
from typing import Dict

from frontdesk.models.booking import ALLOWED_DURATIONS
from frontdesk.services.errors import ValidationFailure

PRICING_KEYS = {
    3: "hourly3",
    8: "hourly8",
    12: "hourly12",
    24: "daily",
}


def validate_duration(duration) -> int:
    if duration not in ALLOWED_DURATIONS:
        raise ValidationFailure("Duration must be one of 3, 8, 12 or 24 hours")
    return duration


def resolve_price(pricing: Dict, duration: int) -> float:
    validate_duration(duration)
    key = PRICING_KEYS[duration]
    if not pricing or pricing.get(key) is None:
        raise ValidationFailure(f"Room type has no price configured for {duration} hours")
    return float(pricing[key])
