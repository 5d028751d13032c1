from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from streamify.core.config import settings
from streamify.core.errors import ErrorCode, UnauthorizedError

TOKEN_AUDIENCE = "user"


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire, "aud": TOKEN_AUDIENCE})
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> str:
    """Return the user id carried by ``token``."""
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            audience=TOKEN_AUDIENCE,
        )
    except jwt.PyJWTError:
        raise UnauthorizedError("Unauthorized - Invalid token", error_code=ErrorCode.AUTH_INVALID_TOKEN)

    user_id = payload.get("sub")
    if not user_id:
        raise UnauthorizedError("Unauthorized - Invalid token", error_code=ErrorCode.AUTH_INVALID_TOKEN)
    return user_id
