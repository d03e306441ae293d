"""
Application settings and configuration
"""
import os
from dotenv import load_dotenv

load_dotenv()

class Settings:
    # Application
    APP_NAME = "Front Desk"
    VERSION = "1.0.0"
    DEBUG = os.getenv("DEBUG", "True") == "True"
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Security
    SECRET_KEY = os.getenv("SECRET_KEY", "your-secret-key-change-in-production")
    ALGORITHM = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES = 60 * 12  # one front-desk shift

    # CORS
    ALLOWED_ORIGINS = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
    ]

    # Pagination
    DEFAULT_PAGE_SIZE = 25
    MAX_PAGE_SIZE = 100

    # Dates in responses and booking numbers are rendered in this zone
    DISPLAY_TIMEZONE = os.getenv("DISPLAY_TIMEZONE", "UTC")

    # Bookings
    ENFORCE_PRICING = os.getenv("ENFORCE_PRICING", "False") == "True"
    BOOKING_NUMBER_ATTEMPTS = int(os.getenv("BOOKING_NUMBER_ATTEMPTS", "5"))

settings = Settings()
