"""
FastAPI dependencies resolving objects built once at startup
"""
from fastapi import Request

from frontdesk.services.booking_engine import BookingEngine


def get_booking_engine(request: Request) -> BookingEngine:
    return request.app.state.booking_engine
