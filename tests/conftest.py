"""Pytest configuration and shared fixtures."""

import pytest

from fakes import (
    FakeChatbot,
    FakeEmail,
    FakeFunnelRepo,
    FakeTelegram,
    FakeTicketRepo,
    FakeTransactionRepo,
    FakeUserRepo,
    RecordingChannel,
)
from repshield.application.services.funnel_tracker import FunnelTracker
from repshield.application.services.notification_broadcaster import NotificationBroadcaster
from repshield.application.services.side_effects import SideEffectLog, SideEffectRunner
from repshield.application.use_cases.create_ticket import CreateTicketUseCase


@pytest.fixture
def ticket_repo():
    return FakeTicketRepo()


@pytest.fixture
def user_repo():
    return FakeUserRepo()


@pytest.fixture
def transaction_repo():
    return FakeTransactionRepo()


@pytest.fixture
def funnel_repo():
    return FakeFunnelRepo()


@pytest.fixture
def funnel(funnel_repo):
    return FunnelTracker(funnel_repo)


@pytest.fixture
def email():
    return FakeEmail()


@pytest.fixture
def telegram():
    return FakeTelegram()


@pytest.fixture
def chatbot():
    return FakeChatbot()


@pytest.fixture
def side_effect_log():
    return SideEffectLog(maxlen=50)


@pytest.fixture
def runner(side_effect_log):
    return SideEffectRunner(side_effect_log)


@pytest.fixture
def channel():
    return RecordingChannel()


@pytest.fixture
def broadcaster(channel):
    b = NotificationBroadcaster()
    b.add_client("admin", channel)
    return b


@pytest.fixture
def create_ticket_uc(ticket_repo, user_repo, funnel):
    return CreateTicketUseCase(tickets=ticket_repo, users=user_repo, funnel=funnel)
