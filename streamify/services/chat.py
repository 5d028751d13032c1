"""Stream chat/video identities and tokens."""

import logging
from typing import Optional

from stream_chat import StreamChatAsync

from streamify.core.config import settings
from streamify.core.errors import InternalError
from streamify.schemas.user import User

logger = logging.getLogger(__name__)


class ChatService:
    def __init__(self, api_key: str = None, api_secret: str = None):
        self.api_key = api_key if api_key is not None else settings.STREAM_API_KEY
        self.api_secret = api_secret if api_secret is not None else settings.STREAM_API_SECRET
        self._client: Optional[StreamChatAsync] = None
        if not self.api_key or not self.api_secret:
            logger.warning("Stream API key or secret is missing")

    @property
    def client(self) -> StreamChatAsync:
        if self._client is None:
            self._client = StreamChatAsync(api_key=self.api_key, api_secret=self.api_secret)
        return self._client

    async def sync_user(self, user: User) -> bool:
        """Create or update the user's Stream identity.

        Best effort: failures are logged and reported as ``False`` so the
        signup or onboarding that triggered the sync still succeeds.
        """
        try:
            await self.client.upsert_user({
                "id": user.id,
                "name": user.fullName,
                "image": user.profilePic or "",
            })
        except Exception as e:
            logger.warning(f"Error upserting Stream user {user.id}: {e}")
            return False
        logger.info(f"Stream user synced for {user.fullName} ({user.id})")
        return True

    def create_token(self, user_id: str) -> str:
        try:
            return self.client.create_token(str(user_id))
        except Exception as e:
            logger.error(f"Error generating Stream token for {user_id}: {e}")
            raise InternalError("Could not generate chat token")

    async def close(self):
        if self._client is not None:
            await self._client.close()
            self._client = None


chat_service = ChatService()
