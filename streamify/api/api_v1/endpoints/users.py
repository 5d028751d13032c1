from fastapi import APIRouter, Depends, Path, status

from streamify.core.errors import NotFoundError
from streamify.crud.users import UserDirectory
from streamify.dependencies.auth import get_current_user
from streamify.dependencies.services import get_recommendations, get_social_graph, get_user_directory
from streamify.schemas.friend_request import FriendRequestLists
from streamify.schemas.response import send_response
from streamify.schemas.user import User
from streamify.services.social_graph import RecommendationSelector, SocialGraphPolicy

router = APIRouter()

OBJECT_ID_PATTERN = "^[0-9a-fA-F]{24}$"


@router.get("/")
async def get_recommended_users(
    current_user: User = Depends(get_current_user),
    selector: RecommendationSelector = Depends(get_recommendations),
):
    users = await selector.recommend(current_user.id)
    return send_response(data=users)


@router.get("/friends")
async def get_my_friends(
    current_user: User = Depends(get_current_user),
    directory: UserDirectory = Depends(get_user_directory),
):
    friends = await directory.list_friends(current_user.id)
    if friends is None:
        raise NotFoundError("User not found!")
    return send_response(data=friends)


@router.post("/friend-request/{id}")
async def send_friend_request(
    id: str = Path(..., pattern=OBJECT_ID_PATTERN),
    current_user: User = Depends(get_current_user),
    graph: SocialGraphPolicy = Depends(get_social_graph),
):
    request = await graph.send_friend_request(current_user.id, id)
    return send_response(data=request, status_code=status.HTTP_201_CREATED)


@router.put("/friend-request/{id}/accept")
async def accept_friend_request(
    id: str = Path(..., pattern=OBJECT_ID_PATTERN),
    current_user: User = Depends(get_current_user),
    graph: SocialGraphPolicy = Depends(get_social_graph),
):
    request = await graph.accept_friend_request(id, current_user.id)
    return send_response(data=request, message="Friend request accepted")


@router.get("/friend-requests")
async def get_friend_requests(
    current_user: User = Depends(get_current_user),
    graph: SocialGraphPolicy = Depends(get_social_graph),
):
    incoming, accepted = await graph.list_requests_for_user(current_user.id)
    return send_response(data=FriendRequestLists(incomingReqs=incoming, acceptedReqs=accepted))


@router.get("/outgoing-friend-requests")
async def get_outgoing_friend_requests(
    current_user: User = Depends(get_current_user),
    graph: SocialGraphPolicy = Depends(get_social_graph),
):
    return send_response(data=await graph.list_outgoing(current_user.id))
