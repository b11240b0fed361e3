"""Capability-based authorization.

Decisions are made from the caller's identity and its hotel management
relations. Role labels are carried for display only and never grant access.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol
from uuid import UUID


class UserRole(str, Enum):
    """User role labels."""

    GUEST = "guest"
    MANAGER = "manager"
    ADMIN = "admin"


@dataclass(frozen=True)
class Identity:
    """Already-authenticated caller."""

    user_id: UUID
    role: UserRole = UserRole.GUEST
    managed_hotel_ids: frozenset[UUID] = field(default_factory=frozenset)


class OwnedResource(Protocol):
    user_id: UUID


def can_manage_hotel(identity: Identity, hotel_id: UUID) -> bool:
    """Check whether the caller manages the given hotel."""
    return hotel_id in identity.managed_hotel_ids


def is_owner(identity: Identity, resource: OwnedResource) -> bool:
    """Check whether the caller is the guest who owns the resource."""
    return resource.user_id == identity.user_id
