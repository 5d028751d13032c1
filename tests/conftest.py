from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from streamify.dependencies.services import (
    get_chat_service,
    get_friend_request_ledger,
    get_user_directory,
)
from streamify.main import app
from tests.fakes import InMemoryFriendRequestLedger, InMemoryUserDirectory


@pytest.fixture
def directory():
    return InMemoryUserDirectory()


@pytest.fixture
def ledger(directory):
    return InMemoryFriendRequestLedger(directory)


@pytest.fixture
def chat():
    service = MagicMock()
    service.sync_user = AsyncMock(return_value=True)
    service.create_token.return_value = "stream-token"
    return service


@pytest.fixture
def client(directory, ledger, chat):
    app.dependency_overrides[get_user_directory] = lambda: directory
    app.dependency_overrides[get_friend_request_ledger] = lambda: ledger
    app.dependency_overrides[get_chat_service] = lambda: chat
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()

