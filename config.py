"""
Runtime settings for the StayVista API.

Values come from the process environment; a local .env file is loaded
first when present.
"""

import os

from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL")
DATABASE_NAME = os.getenv("DATABASE_NAME", "stayvista")

ACCESS_TOKEN_SECRET = os.getenv("ACCESS_TOKEN_SECRET")
TOKEN_TTL_DAYS = 365

ENVIRONMENT = os.getenv("NODE_ENV") or os.getenv("APP_ENV", "development")
IS_PRODUCTION = ENVIRONMENT == "production"

STRIPE_SECRET = os.getenv("STRIPE_SECRET")
STRIPE_API_BASE = os.getenv("STRIPE_API_BASE", "https://api.stripe.com/v1")
PAYMENT_CURRENCY = os.getenv("PAYMENT_CURRENCY", "usd")

FRONTEND_URLS = [
    url.strip()
    for url in os.getenv("FRONTEND_URLS", "http://localhost:5173,http://localhost:5174").split(",")
    if url.strip()
]

PORT = int(os.getenv("PORT", 8000))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
