# API module exports
from app.api import health, offers
from app.api.base import api_router

__all__ = ["health", "offers", "api_router"]
