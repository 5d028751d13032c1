"""Capabilities the social graph needs from its stores.

Both the Mongo-backed classes in this package and the in-memory fakes used
by the test-suite satisfy these protocols.
"""

from typing import Iterable, List, Optional, Protocol

from streamify.schemas.friend_request import FriendRequest, FriendRequestDetail, FriendRequestStatus
from streamify.schemas.user import User, UserSummary


class UserStore(Protocol):
    async def find_by_id(self, user_id: str) -> Optional[User]: ...

    async def find_by_email(self, email: str) -> Optional[User]: ...

    async def create(self, profile: dict) -> User: ...

    async def update(self, user_id: str, fields: dict) -> Optional[User]: ...

    async def add_friend(self, user_id: str, friend_id: str) -> Optional[User]: ...

    async def query_recommendable(self, exclude_id: str, exclude_ids: Iterable[str]) -> List[User]: ...

    async def list_friends(self, user_id: str) -> Optional[List[UserSummary]]: ...


class FriendRequestStore(Protocol):
    async def find_existing_request(self, user_a: str, user_b: str) -> Optional[FriendRequest]: ...

    async def create_request(self, sender: str, recipient: str) -> FriendRequest: ...

    async def find_by_id(self, request_id: str) -> Optional[FriendRequest]: ...

    async def list_incoming_pending(self, user_id: str) -> List[FriendRequestDetail]: ...

    async def list_outgoing_pending(self, user_id: str) -> List[FriendRequestDetail]: ...

    async def list_outgoing_accepted(self, user_id: str) -> List[FriendRequestDetail]: ...

    async def update_status(
        self, request_id: str, status: FriendRequestStatus
    ) -> Optional[FriendRequest]: ...
