"""Tests for the ticket status graph."""

import pytest

from repshield.domain.errors import IllegalTransitionError
from repshield.domain.policies.ticket_transitions import (
    ALLOWED_TRANSITIONS,
    check_transition,
    is_allowed,
)
from repshield.domain.value_objects.enums import TicketStatus as S


def test_happy_path_is_allowed():
    path = [S.PENDING, S.QUOTED, S.APPROVED, S.IN_PROGRESS, S.COMPLETED]
    for current, new in zip(path, path[1:]):
        assert is_allowed(current, new)


def test_every_status_may_reenter_itself():
    for status in S:
        assert is_allowed(status, status)


def test_skipping_ahead_is_rejected():
    assert not is_allowed(S.PENDING, S.COMPLETED)
    assert not is_allowed(S.PENDING, S.IN_PROGRESS)


def test_completed_can_only_be_refunded():
    assert is_allowed(S.COMPLETED, S.REFUNDED)
    assert not is_allowed(S.COMPLETED, S.PENDING)


def test_terminal_statuses():
    assert {s for s in S if not ALLOWED_TRANSITIONS[s]} == {S.FAILED, S.CANCELLED, S.REFUNDED}


def test_graph_covers_every_status():
    assert set(ALLOWED_TRANSITIONS) == set(S)


def test_check_transition_raises_with_context():
    with pytest.raises(IllegalTransitionError) as exc_info:
        check_transition(7, S.CANCELLED, S.QUOTED)
    assert exc_info.value.ticket_id == 7
    assert exc_info.value.from_status == "cancelled"
    assert exc_info.value.to_status == "quoted"


def test_check_transition_passes_for_allowed():
    check_transition(1, S.QUOTED, S.PENDING)
