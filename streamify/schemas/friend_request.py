from datetime import datetime
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel

from streamify.schemas.user import UserSummary


class FriendRequestStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class FriendRequest(BaseModel):
    id: str
    sender: str
    recipient: str
    status: FriendRequestStatus = FriendRequestStatus.PENDING
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    @classmethod
    def from_mongo(cls, doc: dict) -> "FriendRequest":
        return cls(
            id=str(doc["_id"]),
            sender=str(doc["sender"]),
            recipient=str(doc["recipient"]),
            status=doc.get("status", FriendRequestStatus.PENDING),
            createdAt=doc.get("createdAt"),
            updatedAt=doc.get("updatedAt"),
        )


class FriendRequestDetail(BaseModel):
    """A friend request with the other party's display fields filled in."""

    id: str
    sender: Union[UserSummary, str]
    recipient: Union[UserSummary, str]
    status: FriendRequestStatus
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


class FriendRequestLists(BaseModel):
    incomingReqs: List[FriendRequestDetail]
    acceptedReqs: List[FriendRequestDetail]
