from unittest.mock import AsyncMock, MagicMock

import pytest

from streamify.core.errors import InternalError
from streamify.schemas.user import User
from streamify.services.chat import ChatService


@pytest.fixture
def stream_client():
    return MagicMock()


@pytest.fixture
def service(stream_client):
    service = ChatService(api_key="key", api_secret="secret")
    service._client = stream_client
    return service


@pytest.fixture
def user():
    return User(id="64b7f0c2a1b2c3d4e5f60718", fullName="Alice", email="alice@streamify.com",
                profilePic="a.png")


class TestChatService:

    @pytest.mark.asyncio
    async def test_sync_user_upserts_display_fields(self, service, stream_client, user):
        stream_client.upsert_user = AsyncMock()

        assert await service.sync_user(user) is True

        stream_client.upsert_user.assert_awaited_once_with(
            {"id": user.id, "name": "Alice", "image": "a.png"}
        )

    @pytest.mark.asyncio
    async def test_sync_user_swallows_provider_errors(self, service, stream_client, user):
        stream_client.upsert_user = AsyncMock(side_effect=ConnectionError("stream down"))

        assert await service.sync_user(user) is False

    def test_create_token(self, service, stream_client):
        stream_client.create_token.return_value = "token"

        assert service.create_token("abc") == "token"
        stream_client.create_token.assert_called_once_with("abc")

    def test_create_token_failure(self, service, stream_client):
        stream_client.create_token.side_effect = ValueError("bad secret")

        with pytest.raises(InternalError):
            service.create_token("abc")

    @pytest.mark.asyncio
    async def test_close(self, service, stream_client):
        stream_client.close = AsyncMock()

        await service.close()

        stream_client.close.assert_awaited_once()
        assert service._client is None
