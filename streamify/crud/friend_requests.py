import logging
from datetime import datetime, timezone
from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from streamify.db.ids import to_object_id
from streamify.schemas.friend_request import (
    FriendRequest,
    FriendRequestDetail,
    FriendRequestStatus,
)
from streamify.schemas.user import UserSummary

logger = logging.getLogger(__name__)

FULL_PROFILE = ("fullName", "profilePic", "nativeLanguage", "learningLanguage")
NAME_AND_PICTURE = ("fullName", "profilePic")


class FriendRequestLedger:
    """Friend requests and their status, stored in ``friend_requests``.

    The ledger does not enforce the pairwise rules (no self requests, one
    request per pair); :class:`~streamify.services.social_graph.SocialGraphPolicy`
    checks those before calling :meth:`create_request`.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db["friend_requests"]

    async def find_existing_request(self, user_a: str, user_b: str) -> Optional[FriendRequest]:
        logger.debug(f"Checking for existing friend request between {user_a} and {user_b}")
        a, b = to_object_id(user_a, "user ID"), to_object_id(user_b, "user ID")
        try:
            doc = await self.collection.find_one({
                "$or": [
                    {"sender": a, "recipient": b},
                    {"sender": b, "recipient": a},
                ]
            })
        except PyMongoError as e:
            logger.error(f"Error finding existing friend request between {user_a} and {user_b}: {e}")
            raise
        return FriendRequest.from_mongo(doc) if doc else None

    async def create_request(self, sender: str, recipient: str) -> FriendRequest:
        logger.info(f"Creating new friend request from {sender} to {recipient}")
        now = datetime.now(timezone.utc)
        doc = {
            "sender": to_object_id(sender, "user ID"),
            "recipient": to_object_id(recipient, "user ID"),
            "status": FriendRequestStatus.PENDING.value,
            "createdAt": now,
            "updatedAt": now,
        }
        try:
            result = await self.collection.insert_one(doc)
        except PyMongoError as e:
            logger.error(f"Error creating friend request from {sender} to {recipient}: {e}")
            raise
        doc["_id"] = result.inserted_id
        return FriendRequest.from_mongo(doc)

    async def find_by_id(self, request_id: str) -> Optional[FriendRequest]:
        logger.debug(f"Finding friend request by ID: {request_id}")
        try:
            doc = await self.collection.find_one({"_id": to_object_id(request_id, "request ID")})
        except PyMongoError as e:
            logger.error(f"Error finding friend request by ID {request_id}: {e}")
            raise
        return FriendRequest.from_mongo(doc) if doc else None

    async def list_incoming_pending(self, user_id: str) -> List[FriendRequestDetail]:
        logger.debug(f"Fetching incoming pending friend requests for user {user_id}")
        return await self._list_with_party(
            {"recipient": to_object_id(user_id, "user ID"), "status": FriendRequestStatus.PENDING.value},
            party="sender",
            fields=FULL_PROFILE,
        )

    async def list_outgoing_pending(self, user_id: str) -> List[FriendRequestDetail]:
        logger.debug(f"Fetching outgoing pending friend requests from user {user_id}")
        return await self._list_with_party(
            {"sender": to_object_id(user_id, "user ID"), "status": FriendRequestStatus.PENDING.value},
            party="recipient",
            fields=FULL_PROFILE,
        )

    async def list_outgoing_accepted(self, user_id: str) -> List[FriendRequestDetail]:
        logger.debug(f"Fetching accepted outgoing friend requests from user {user_id}")
        return await self._list_with_party(
            {"sender": to_object_id(user_id, "user ID"), "status": FriendRequestStatus.ACCEPTED.value},
            party="recipient",
            fields=NAME_AND_PICTURE,
        )

    async def update_status(
        self, request_id: str, status: FriendRequestStatus
    ) -> Optional[FriendRequest]:
        status = FriendRequestStatus(status)
        logger.info(f"Updating status of friend request {request_id} to {status.value}")
        try:
            doc = await self.collection.find_one_and_update(
                {"_id": to_object_id(request_id, "request ID")},
                {"$set": {"status": status.value, "updatedAt": datetime.now(timezone.utc)}},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error(f"Error updating status for friend request {request_id}: {e}")
            raise

        if not doc:
            logger.warning(f"Friend request with ID {request_id} not found for status update.")
            return None
        return FriendRequest.from_mongo(doc)

    async def _list_with_party(self, match: dict, party: str, fields) -> List[FriendRequestDetail]:
        projection = {f: 1 for f in fields}
        pipeline = [
            {"$match": match},
            {"$sort": {"createdAt": 1, "_id": 1}},
            {"$lookup": {
                "from": "users",
                "localField": party,
                "foreignField": "_id",
                "pipeline": [{"$project": projection}],
                "as": "party",
            }},
            {"$unwind": "$party"},
        ]
        try:
            docs = await self.collection.aggregate(pipeline).to_list(length=None)
        except PyMongoError as e:
            logger.error(f"Error listing friend requests matching {match}: {e}")
            raise

        items = []
        for doc in docs:
            user = doc["party"]
            summary = UserSummary(
                id=str(user["_id"]),
                fullName=user.get("fullName", ""),
                profilePic=user.get("profilePic", ""),
                nativeLanguage=user.get("nativeLanguage") if "nativeLanguage" in fields else None,
                learningLanguage=user.get("learningLanguage") if "learningLanguage" in fields else None,
            )
            request = FriendRequest.from_mongo(doc)
            items.append(FriendRequestDetail(
                id=request.id,
                sender=summary if party == "sender" else request.sender,
                recipient=summary if party == "recipient" else request.recipient,
                status=request.status,
                createdAt=request.createdAt,
                updatedAt=request.updatedAt,
            ))
        return items
