import pytest
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

from src.adapter.services.clock import ManualClock
from src.adapter.services.ephemeral_store import InMemoryEphemeralStore
from src.app.services.credential_store import CredentialStore
from src.app.services.token_manager import BearerTokenManager


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    # Mock repositories
    uow.users = MagicMock()
    uow.users.get_by_id = AsyncMock()
    uow.users.get_by_username = AsyncMock()
    uow.users.get_by_email = AsyncMock()
    uow.users.update = AsyncMock()

    uow.tasks = MagicMock()
    uow.tasks.get_by_id = AsyncMock()

    uow.reminders = MagicMock()
    uow.reminders.get_by_task_id = AsyncMock()
    uow.reminders.save = AsyncMock(side_effect=lambda reminder: reminder)
    uow.reminders.list_by_user = AsyncMock(return_value=[])
    return uow


@pytest.fixture
def clock():
    return ManualClock(datetime(2024, 1, 1, 9, 0, 0))


@pytest.fixture
def credentials(clock):
    return CredentialStore(InMemoryEphemeralStore(clock), clock)


@pytest.fixture
def tokens(clock):
    return BearerTokenManager("unit-test-secret", clock, deny_list=InMemoryEphemeralStore(clock))
