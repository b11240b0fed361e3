"""Negotiation state machine.

States: pending → accepted | rejected | countered | cancelled
        countered → accepted | rejected | countered | cancelled
accepted, rejected and cancelled are terminal.

Each action is bound to the party allowed to perform it (the guest who
opened the negotiation, or a manager of the hotel owning the room) and to
the statuses it may start from.
"""

from dataclasses import dataclass
from enum import Enum

from app.core.exceptions import InvalidStateError, ValidationError


class NegotiationStatus(str, Enum):
    """Negotiation lifecycle status."""

    PENDING = "pending"
    COUNTERED = "countered"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    CANCELLED = "cancelled"

    @classmethod
    def parse(cls, value: "str | NegotiationStatus") -> "NegotiationStatus":
        """Normalize a raw status string.

        Accepts any case and the legacy ``counter`` spelling.
        """
        if isinstance(value, cls):
            return value
        raw = str(value).strip().lower()
        if raw == "counter":
            return cls.COUNTERED
        try:
            return cls(raw)
        except ValueError:
            raise ValidationError(f"Unknown negotiation status: {value}")


class Party(str, Enum):
    """Who may trigger a negotiation action."""

    GUEST = "guest"
    MANAGER = "manager"


class NegotiationAction(str, Enum):
    """Actions applicable to a negotiation."""

    ACCEPT = "accept"
    REJECT = "reject"
    COUNTER = "counter"
    ACCEPT_COUNTER = "accept_counter"
    CANCEL = "cancel"


NEGOTIATION_TRANSITIONS: dict[NegotiationStatus, set[NegotiationStatus]] = {
    NegotiationStatus.PENDING: {
        NegotiationStatus.ACCEPTED,
        NegotiationStatus.REJECTED,
        NegotiationStatus.COUNTERED,
        NegotiationStatus.CANCELLED,
    },
    NegotiationStatus.COUNTERED: {
        NegotiationStatus.ACCEPTED,
        NegotiationStatus.REJECTED,
        NegotiationStatus.COUNTERED,
        NegotiationStatus.CANCELLED,
    },
    NegotiationStatus.ACCEPTED: set(),
    NegotiationStatus.REJECTED: set(),
    NegotiationStatus.CANCELLED: set(),
}

ACTIVE_NEGOTIATION_STATUSES = frozenset(
    {NegotiationStatus.PENDING, NegotiationStatus.COUNTERED}
)


@dataclass(frozen=True)
class ActionRule:
    party: Party
    sources: frozenset[NegotiationStatus]
    target: NegotiationStatus


ACTION_RULES: dict[NegotiationAction, ActionRule] = {
    NegotiationAction.ACCEPT: ActionRule(
        Party.MANAGER, ACTIVE_NEGOTIATION_STATUSES, NegotiationStatus.ACCEPTED
    ),
    NegotiationAction.REJECT: ActionRule(
        Party.MANAGER, ACTIVE_NEGOTIATION_STATUSES, NegotiationStatus.REJECTED
    ),
    NegotiationAction.COUNTER: ActionRule(
        Party.MANAGER, ACTIVE_NEGOTIATION_STATUSES, NegotiationStatus.COUNTERED
    ),
    NegotiationAction.ACCEPT_COUNTER: ActionRule(
        Party.GUEST, frozenset({NegotiationStatus.COUNTERED}), NegotiationStatus.ACCEPTED
    ),
    NegotiationAction.CANCEL: ActionRule(
        Party.GUEST, ACTIVE_NEGOTIATION_STATUSES, NegotiationStatus.CANCELLED
    ),
}


def assert_negotiation_transition(current: NegotiationStatus, target: NegotiationStatus) -> None:
    allowed = NEGOTIATION_TRANSITIONS.get(current, set())
    if target not in allowed:
        raise InvalidStateError(
            f"Invalid negotiation transition: {current.value} → {target.value}"
        )


def resolve_action(action: NegotiationAction, current: NegotiationStatus) -> NegotiationStatus:
    """Return the status an action leads to from ``current``.

    Raises:
        InvalidStateError: if the action cannot start from ``current``
    """
    rule = ACTION_RULES[action]
    if current not in rule.sources:
        if action == NegotiationAction.ACCEPT_COUNTER:
            raise InvalidStateError("This negotiation has no counter-offer to accept")
        if current == NegotiationStatus.ACCEPTED and action == NegotiationAction.CANCEL:
            raise InvalidStateError("An accepted negotiation cannot be cancelled")
        raise InvalidStateError(f"This negotiation is no longer active ({current.value})")
    assert_negotiation_transition(current, rule.target)
    return rule.target


def required_party(action: NegotiationAction) -> Party:
    return ACTION_RULES[action].party
