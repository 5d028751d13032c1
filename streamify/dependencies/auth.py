import logging
from typing import Optional

from fastapi import Cookie, Depends, Header

from streamify.auth.jwthandler import decode_access_token
from streamify.core.errors import UnauthorizedError
from streamify.crud.users import UserDirectory
from streamify.db.ids import is_object_id
from streamify.dependencies.services import get_user_directory
from streamify.schemas.user import User

logger = logging.getLogger(__name__)

AUTH_COOKIE = "jwt"


def _extract_token(authorization: Optional[str], cookie_token: Optional[str]) -> str:
    if authorization:
        parts = authorization.split()
        if len(parts) != 2 or parts[0].lower() != "bearer":
            raise UnauthorizedError("Invalid token scheme")
        return parts[1]
    if cookie_token:
        return cookie_token
    raise UnauthorizedError("Unauthorized - No token provided")


async def get_current_user(
    authorization: Optional[str] = Header(None),
    jwt_cookie: Optional[str] = Cookie(None, alias=AUTH_COOKIE),
    directory: UserDirectory = Depends(get_user_directory),
) -> User:
    token = _extract_token(authorization, jwt_cookie)
    user_id = decode_access_token(token)
    if not is_object_id(user_id):
        raise UnauthorizedError("Unauthorized - Invalid token")

    user = await directory.find_by_id(user_id)
    if not user:
        logger.info(f"Token for unknown user {user_id} rejected")
        raise UnauthorizedError("Unauthorized - User not found")
    return user
