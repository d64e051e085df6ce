"""Tests for the ORM row → domain mappers."""

import logging

from repshield.adapters.persistence.models import TicketModel
from repshield.adapters.persistence.repositories import _ticket_to_domain
from repshield.domain.value_objects.enums import TicketPriority, TicketStatus, TicketType
from repshield.domain.value_objects.request_data import GeneralRequestData, RemovalRequestData


def _row(**overrides):
    data = dict(
        id=5,
        user_id="client_acme_io",
        type="removal",
        status="quoted",
        priority="urgent",
        title="Remove thread",
        progress=0,
        request_data={"kind": "removal", "redditUrl": "https://reddit.com/r/x/1", "email": "c@acme.io"},
    )
    data.update(overrides)
    return TicketModel(**data)


def test_ticket_row_maps_to_domain():
    ticket = _ticket_to_domain(_row())
    assert ticket.status == TicketStatus.QUOTED
    assert ticket.type == TicketType.REMOVAL
    assert ticket.priority == TicketPriority.URGENT
    assert ticket.request_data == RemovalRequestData(reddit_url="https://reddit.com/r/x/1", email="c@acme.io")


def test_unknown_enum_values_are_logged_not_raised(caplog):
    with caplog.at_level(logging.WARNING):
        ticket = _ticket_to_domain(_row(status="archived", type="legacy", priority="vip"))
    assert ticket.status == TicketStatus.PENDING
    assert ticket.type == TicketType.GENERAL
    assert ticket.priority == TicketPriority.STANDARD
    assert "unknown TicketStatus 'archived'" in caplog.text


def test_malformed_request_data_falls_back_to_general():
    ticket = _ticket_to_domain(_row(request_data={"kind": "removal", "email": "c@acme.io"}))
    assert ticket.request_data == GeneralRequestData(user_email="c@acme.io")
    assert ticket.client_email == "c@acme.io"
