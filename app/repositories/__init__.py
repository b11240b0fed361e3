"""Repository implementations."""

from app.repositories.base import StayRepository
from app.repositories.memory import InMemoryRepository
from app.repositories.sql import SqlAlchemyRepository

__all__ = [
    "StayRepository",
    "InMemoryRepository",
    "SqlAlchemyRepository",
]
