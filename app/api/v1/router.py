"""Main API router that includes all endpoint routers."""

from fastapi import APIRouter

from app.api.v1 import bookings, checkout, hotels, negotiations, rooms

api_router = APIRouter()

# Rooms
api_router.include_router(rooms.router, prefix="/rooms", tags=["Rooms"])

# Bookings
api_router.include_router(bookings.router, prefix="/bookings", tags=["Bookings"])

# Checkout
api_router.include_router(checkout.router, prefix="/checkout", tags=["Checkout"])

# Negotiations
api_router.include_router(negotiations.router, prefix="/negotiations", tags=["Negotiations"])

# Hotels
api_router.include_router(hotels.router, prefix="/hotels", tags=["Hotels"])
