from fastapi import Depends

from streamify.crud.friend_requests import FriendRequestLedger
from streamify.crud.users import UserDirectory
from streamify.db.database import get_db
from streamify.services.chat import ChatService, chat_service
from streamify.services.social_graph import RecommendationSelector, SocialGraphPolicy


def get_user_directory(db=Depends(get_db)) -> UserDirectory:
    return UserDirectory(db)


def get_friend_request_ledger(db=Depends(get_db)) -> FriendRequestLedger:
    return FriendRequestLedger(db)


def get_social_graph(
    directory: UserDirectory = Depends(get_user_directory),
    ledger: FriendRequestLedger = Depends(get_friend_request_ledger),
) -> SocialGraphPolicy:
    return SocialGraphPolicy(directory, ledger)


def get_recommendations(
    directory: UserDirectory = Depends(get_user_directory),
) -> RecommendationSelector:
    return RecommendationSelector(directory)


def get_chat_service() -> ChatService:
    return chat_service
