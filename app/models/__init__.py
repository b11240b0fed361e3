"""Database models."""

from app.models.booking import Booking
from app.models.hotel import Hotel, HotelManager, Room, RoomType, RoomTypeAssignment
from app.models.negotiation import Negotiation
from app.models.user import User

__all__ = [
    # User
    "User",
    # Hotel
    "Hotel",
    "HotelManager",
    "Room",
    "RoomType",
    "RoomTypeAssignment",
    # Booking
    "Booking",
    # Negotiation
    "Negotiation",
]
