from fastapi import APIRouter, Depends

from streamify.dependencies.auth import get_current_user
from streamify.dependencies.services import get_chat_service
from streamify.schemas.response import send_response
from streamify.schemas.user import User
from streamify.services.chat import ChatService

router = APIRouter()


@router.get("/token")
async def get_stream_token(
    current_user: User = Depends(get_current_user),
    chat: ChatService = Depends(get_chat_service),
):
    return send_response(data=chat.create_token(current_user.id))
