"""
Tests for the Mongo-backed FriendRequestLedger.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from pymongo.errors import AutoReconnect

from streamify.crud.friend_requests import FriendRequestLedger
from streamify.schemas.friend_request import FriendRequestStatus


@pytest.fixture
def collection():
    return MagicMock()


@pytest.fixture
def ledger(collection):
    db = MagicMock()
    db.__getitem__.return_value = collection
    return FriendRequestLedger(db)


def request_doc(sender, recipient, status="pending"):
    now = datetime.now(timezone.utc)
    return {
        "_id": ObjectId(),
        "sender": sender,
        "recipient": recipient,
        "status": status,
        "createdAt": now,
        "updatedAt": now,
    }


class TestFriendRequestLedger:

    @pytest.mark.asyncio
    async def test_find_existing_checks_both_directions(self, ledger, collection):
        a, b = ObjectId(), ObjectId()
        collection.find_one = AsyncMock(return_value=request_doc(b, a, "rejected"))

        existing = await ledger.find_existing_request(str(a), str(b))

        assert existing.sender == str(b)
        assert existing.status == FriendRequestStatus.REJECTED
        query = collection.find_one.call_args[0][0]
        assert query == {"$or": [
            {"sender": a, "recipient": b},
            {"sender": b, "recipient": a},
        ]}

    @pytest.mark.asyncio
    async def test_find_existing_miss(self, ledger, collection):
        collection.find_one = AsyncMock(return_value=None)
        assert await ledger.find_existing_request(str(ObjectId()), str(ObjectId())) is None

    @pytest.mark.asyncio
    async def test_create_request_is_pending(self, ledger, collection):
        inserted = ObjectId()
        collection.insert_one = AsyncMock(return_value=MagicMock(inserted_id=inserted))
        sender, recipient = ObjectId(), ObjectId()

        request = await ledger.create_request(str(sender), str(recipient))

        assert request.id == str(inserted)
        assert request.status == FriendRequestStatus.PENDING
        doc = collection.insert_one.call_args[0][0]
        assert doc["sender"] == sender
        assert doc["recipient"] == recipient
        assert doc["status"] == "pending"

    @pytest.mark.asyncio
    async def test_update_status(self, ledger, collection):
        doc = request_doc(ObjectId(), ObjectId(), "accepted")
        collection.find_one_and_update = AsyncMock(return_value=doc)

        request = await ledger.update_status(str(doc["_id"]), FriendRequestStatus.ACCEPTED)

        assert request.status == FriendRequestStatus.ACCEPTED
        update = collection.find_one_and_update.call_args[0][1]
        assert update["$set"]["status"] == "accepted"

    @pytest.mark.asyncio
    async def test_update_status_missing_returns_none(self, ledger, collection):
        collection.find_one_and_update = AsyncMock(return_value=None)
        assert await ledger.update_status(str(ObjectId()), "accepted") is None

    @pytest.mark.asyncio
    async def test_update_status_storage_failure_raises(self, ledger, collection):
        collection.find_one_and_update = AsyncMock(side_effect=AutoReconnect("gone"))

        with pytest.raises(AutoReconnect):
            await ledger.update_status(str(ObjectId()), "accepted")

    @pytest.mark.asyncio
    async def test_incoming_pending_joins_sender(self, ledger, collection):
        me, sender = ObjectId(), ObjectId()
        doc = request_doc(sender, me)
        doc["party"] = {
            "_id": sender, "fullName": "Carol", "profilePic": "c.png",
            "nativeLanguage": "french", "learningLanguage": "english",
        }
        collection.aggregate.return_value.to_list = AsyncMock(return_value=[doc])

        requests = await ledger.list_incoming_pending(str(me))

        assert requests[0].sender.fullName == "Carol"
        assert requests[0].sender.nativeLanguage == "french"
        assert requests[0].recipient == str(me)
        pipeline = collection.aggregate.call_args[0][0]
        assert pipeline[0] == {"$match": {"recipient": me, "status": "pending"}}
        assert pipeline[2]["$lookup"]["localField"] == "sender"

    @pytest.mark.asyncio
    async def test_outgoing_accepted_only_name_and_picture(self, ledger, collection):
        me, recipient = ObjectId(), ObjectId()
        doc = request_doc(me, recipient, "accepted")
        doc["party"] = {"_id": recipient, "fullName": "Bob", "profilePic": "b.png"}
        collection.aggregate.return_value.to_list = AsyncMock(return_value=[doc])

        requests = await ledger.list_outgoing_accepted(str(me))

        assert requests[0].recipient.fullName == "Bob"
        assert requests[0].recipient.nativeLanguage is None
        pipeline = collection.aggregate.call_args[0][0]
        assert pipeline[0] == {"$match": {"sender": me, "status": "accepted"}}
        assert pipeline[2]["$lookup"]["pipeline"] == [{"$project": {"fullName": 1, "profilePic": 1}}]

    @pytest.mark.asyncio
    async def test_outgoing_pending(self, ledger, collection):
        me = ObjectId()
        collection.aggregate.return_value.to_list = AsyncMock(return_value=[])

        assert await ledger.list_outgoing_pending(str(me)) == []
        pipeline = collection.aggregate.call_args[0][0]
        assert pipeline[0] == {"$match": {"sender": me, "status": "pending"}}
        assert pipeline[2]["$lookup"]["localField"] == "recipient"
