"""TicketTransitionPolicy: the allowed status graph.

Every status may re-enter itself, so replaying a transition is accepted.
Failed, cancelled and refunded are terminal.
"""

from __future__ import annotations

from repshield.domain.errors import IllegalTransitionError
from repshield.domain.value_objects.enums import TicketStatus

S = TicketStatus

ALLOWED_TRANSITIONS: dict[TicketStatus, frozenset[TicketStatus]] = {
    S.PENDING: frozenset({S.QUOTED, S.CANCELLED, S.FAILED}),
    S.QUOTED: frozenset({S.APPROVED, S.PENDING, S.CANCELLED, S.FAILED}),
    S.APPROVED: frozenset({S.IN_PROGRESS, S.CANCELLED, S.FAILED, S.REFUNDED}),
    S.IN_PROGRESS: frozenset({S.COMPLETED, S.FAILED, S.CANCELLED, S.REFUNDED}),
    S.COMPLETED: frozenset({S.REFUNDED}),
    S.FAILED: frozenset(),
    S.CANCELLED: frozenset(),
    S.REFUNDED: frozenset(),
}


def is_allowed(current: TicketStatus, new: TicketStatus) -> bool:
    return current == new or new in ALLOWED_TRANSITIONS[current]


def check_transition(ticket_id: int, current: TicketStatus, new: TicketStatus) -> None:
    """Raise IllegalTransitionError if *current* → *new* is not in the graph."""
    if not is_allowed(current, new):
        raise IllegalTransitionError(ticket_id, current.value, new.value)
