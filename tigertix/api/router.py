"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter

from tigertix.api.routes import admin, assistant, auth, bookings, events

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(auth.router)
api_router.include_router(events.router)
api_router.include_router(bookings.router)
api_router.include_router(admin.router)
api_router.include_router(assistant.router)
