"""Friend requests and the friendship relation.

Friendship is stored on both user documents (each holds the other's id in
``friends``). :class:`SocialGraphPolicy` is the only writer of that field and
always updates both sides after a request is accepted.

There is no multi-document transaction. Accepting is therefore retry-safe
instead: the status write and both ``$addToSet`` writes are idempotent, so
accepting an already accepted request again re-applies the friendship and
repairs a run that stopped part way.
"""

import logging
from typing import List, Tuple

from streamify.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from streamify.crud.base import FriendRequestStore, UserStore
from streamify.schemas.friend_request import FriendRequest, FriendRequestDetail, FriendRequestStatus
from streamify.schemas.user import User

logger = logging.getLogger(__name__)


class SocialGraphPolicy:
    def __init__(self, directory: UserStore, ledger: FriendRequestStore):
        self.directory = directory
        self.ledger = ledger

    async def send_friend_request(self, requester_id: str, recipient_id: str) -> FriendRequest:
        if str(requester_id) == str(recipient_id):
            raise ValidationError("You can't send friend request to yourself")

        recipient = await self.directory.find_by_id(recipient_id)
        if not recipient:
            raise NotFoundError("Recipient not found")

        # friendship is symmetric, the recipient's side is enough
        if str(requester_id) in recipient.friends:
            raise ConflictError("You are already friends with this user")

        # any earlier request blocks a new one, including a rejected one
        existing = await self.ledger.find_existing_request(requester_id, recipient_id)
        if existing:
            raise ConflictError("A friend request already exists between you and this user")

        request = await self.ledger.create_request(requester_id, recipient_id)
        logger.info(f"Friend request {request.id} sent from {requester_id} to {recipient_id}")
        return request

    async def accept_friend_request(self, request_id: str, accepter_id: str) -> FriendRequest:
        request = await self.ledger.find_by_id(request_id)
        if not request:
            raise NotFoundError("Friend request not found")

        if request.recipient != str(accepter_id):
            raise ForbiddenError("You are not authorized to accept this request")

        if request.status == FriendRequestStatus.REJECTED:
            raise ConflictError("This friend request was already rejected")

        if request.status == FriendRequestStatus.PENDING:
            updated = await self.ledger.update_status(request.id, FriendRequestStatus.ACCEPTED)
            if not updated:
                raise NotFoundError("Friend request not found")
            request = updated
        else:
            logger.info(f"Friend request {request.id} already accepted, re-applying friendship")

        await self._add_friendship(request.sender, request.recipient)
        logger.info(f"Friend request {request.id} accepted by {accepter_id}")
        return request

    async def _add_friendship(self, user_a: str, user_b: str):
        # both writes always run; a missing side is reported after the fact
        a = await self.directory.add_friend(user_a, user_b)
        b = await self.directory.add_friend(user_b, user_a)
        if a is None or b is None:
            missing = user_a if a is None else user_b
            logger.error(f"Friendship between {user_a} and {user_b} is one-sided: user {missing} not found")
            raise NotFoundError("User not found")

    async def list_requests_for_user(
        self, user_id: str
    ) -> Tuple[List[FriendRequestDetail], List[FriendRequestDetail]]:
        """Return (incoming pending, outgoing accepted) requests for ``user_id``."""
        incoming = await self.ledger.list_incoming_pending(user_id)
        accepted = await self.ledger.list_outgoing_accepted(user_id)
        return incoming, accepted

    async def list_outgoing(self, user_id: str) -> List[FriendRequestDetail]:
        return await self.ledger.list_outgoing_pending(user_id)


class RecommendationSelector:
    """People the caller may want to meet: onboarded, not the caller, not already a friend."""

    def __init__(self, directory: UserStore):
        self.directory = directory

    async def recommend(self, user_id: str) -> List[User]:
        # re-read the friend list, the caller's copy may be stale
        user = await self.directory.find_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return await self.directory.query_recommendable(user.id, user.friends)
