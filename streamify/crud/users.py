import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from streamify.core.errors import ConflictError, ErrorCode, ValidationError
from streamify.db.ids import to_object_id
from streamify.schemas.user import User, UserSummary

logger = logging.getLogger(__name__)

FRIEND_FIELDS = {"fullName": 1, "profilePic": 1, "nativeLanguage": 1, "learningLanguage": 1}

# only the social graph writes these
PROTECTED_FIELDS = {"_id", "id", "email", "password", "friends", "createdAt"}


class UserDirectory:
    """User profiles and the per-user ``friends`` set, stored in ``users``."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db["users"]

    async def find_by_id(self, user_id: str) -> Optional[User]:
        logger.debug(f"Finding user by ID: {user_id}")
        try:
            doc = await self.collection.find_one({"_id": to_object_id(user_id, "user ID")})
        except PyMongoError as e:
            logger.error(f"Error finding user by ID {user_id}: {e}")
            raise
        return User.from_mongo(doc) if doc else None

    async def find_by_email(self, email: str) -> Optional[User]:
        logger.debug(f"Finding user by email: {email}")
        try:
            doc = await self.collection.find_one({"email": email.lower()})
        except PyMongoError as e:
            logger.error(f"Error finding user by email {email}: {e}")
            raise
        return User.from_mongo(doc) if doc else None

    async def create(self, profile: dict) -> User:
        email = profile["email"].lower()
        logger.info(f"Creating new user with email: {email}")

        if await self.find_by_email(email):
            raise ConflictError(
                "Email already exists, please use a different one",
                error_code=ErrorCode.EMAIL_EXISTS,
            )

        now = datetime.now(timezone.utc)
        doc = {
            "fullName": profile["fullName"],
            "email": email,
            "password": profile["password"],
            "bio": profile.get("bio", ""),
            "profilePic": profile.get("profilePic", ""),
            "nativeLanguage": profile.get("nativeLanguage", ""),
            "learningLanguage": profile.get("learningLanguage", ""),
            "location": profile.get("location", ""),
            "isOnboarded": profile.get("isOnboarded", False),
            "friends": [],
            "createdAt": now,
            "updatedAt": now,
        }
        try:
            result = await self.collection.insert_one(doc)
        except DuplicateKeyError:
            # lost a race with a concurrent signup for the same email
            raise ConflictError(
                "Email already exists, please use a different one",
                error_code=ErrorCode.EMAIL_EXISTS,
            )
        except PyMongoError as e:
            logger.error(f"Error creating user with email {email}: {e}")
            raise

        doc["_id"] = result.inserted_id
        logger.debug(f"New user created with ID: {result.inserted_id}")
        return User.from_mongo(doc)

    async def update(self, user_id: str, fields: dict) -> Optional[User]:
        updates = {k: v for k, v in fields.items() if k not in PROTECTED_FIELDS}
        updates["updatedAt"] = datetime.now(timezone.utc)

        logger.debug(f"Updating user with ID: {user_id}")
        try:
            doc = await self.collection.find_one_and_update(
                {"_id": to_object_id(user_id, "user ID")},
                {"$set": updates},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error(f"Error updating user with ID {user_id}: {e}")
            raise

        if not doc:
            logger.warning(f"User with ID {user_id} not found for update.")
            return None
        return User.from_mongo(doc)

    async def add_friend(self, user_id: str, friend_id: str) -> Optional[User]:
        if str(user_id) == str(friend_id):
            raise ValidationError("A user cannot be their own friend")

        logger.debug(f"Adding friend {friend_id} to user {user_id}")
        try:
            doc = await self.collection.find_one_and_update(
                {"_id": to_object_id(user_id, "user ID")},
                {
                    "$addToSet": {"friends": to_object_id(friend_id, "friend ID")},
                    "$set": {"updatedAt": datetime.now(timezone.utc)},
                },
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error(f"Error adding friend {friend_id} to user {user_id}: {e}")
            raise

        if not doc:
            logger.warning(f"User with ID {user_id} not found while adding friend {friend_id}.")
            return None
        return User.from_mongo(doc)

    async def query_recommendable(self, exclude_id: str, exclude_ids: Iterable[str]) -> List[User]:
        excluded = [to_object_id(exclude_id, "user ID")]
        excluded.extend(to_object_id(i, "friend ID") for i in exclude_ids)

        logger.debug(f"Fetching recommended users for {exclude_id}")
        try:
            cursor = self.collection.find(
                {"_id": {"$nin": excluded}, "isOnboarded": True},
                {"password": 0},
            ).sort("_id", 1)
            docs = await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.error(f"Error fetching recommended users for {exclude_id}: {e}")
            raise

        logger.debug(f"Found {len(docs)} recommended users.")
        return [User.from_mongo(d) for d in docs]

    async def list_friends(self, user_id: str) -> Optional[List[UserSummary]]:
        user = await self.find_by_id(user_id)
        if not user:
            return None
        if not user.friends:
            return []

        logger.debug(f"Fetching friends for user {user_id}")
        try:
            cursor = self.collection.find(
                {"_id": {"$in": [to_object_id(f) for f in user.friends]}},
                FRIEND_FIELDS,
            ).sort("_id", 1)
            docs = await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.error(f"Error fetching friends for user {user_id}: {e}")
            raise

        return [
            UserSummary(
                id=str(d["_id"]),
                fullName=d.get("fullName", ""),
                profilePic=d.get("profilePic", ""),
                nativeLanguage=d.get("nativeLanguage"),
                learningLanguage=d.get("learningLanguage"),
            )
            for d in docs
        ]
