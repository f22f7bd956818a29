from fastapi import APIRouter
from app.api import health, offers

api_router = APIRouter()

# Include all sub-routers
api_router.include_router(health.router)
api_router.include_router(offers.router)
