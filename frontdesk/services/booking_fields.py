"""
Derived booking fields.

Every path that writes a booking runs derive_booking_fields() on the
document before saving it.
"""
import random
from datetime import datetime, timedelta
from typing import Dict, Optional

from frontdesk.models.booking import PaymentStatus


def compute_check_out(check_in: datetime, duration: int) -> datetime:
    return check_in + timedelta(hours=duration)


def generate_booking_number(now: datetime, rng: Optional[random.Random] = None) -> str:
    """BK-YYYYMMDD-NNN, NNN being a random 000-999 suffix"""
    suffix = (rng or random).randint(0, 999)
    return f"BK-{now:%Y%m%d}-{suffix:03d}"


def payment_status_for(total_amount: float, paid_amount: float) -> str:
    if paid_amount == 0:
        return PaymentStatus.PENDING.value
    if paid_amount < total_amount:
        return PaymentStatus.PARTIAL.value
    return PaymentStatus.PAID.value


def derive_booking_fields(booking: Dict) -> Dict:
    """Return a copy of booking with balance and payment_status recomputed"""
    derived = dict(booking)
    total = derived.get("total_amount") or 0
    paid = derived.get("paid_amount") or 0
    derived["paid_amount"] = paid
    derived["balance"] = total - paid
    # Refunds are set explicitly and survive re-derivation
    if derived.get("payment_status") != PaymentStatus.REFUNDED.value:
        derived["payment_status"] = payment_status_for(total, paid)
    return derived
