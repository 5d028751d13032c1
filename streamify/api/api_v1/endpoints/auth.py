import logging
import random

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from streamify.auth.jwthandler import create_access_token
from streamify.auth.passwords import hash_password, verify_password
from streamify.core.config import settings
from streamify.core.errors import ErrorCode, NotFoundError, ValidationError
from streamify.crud.users import UserDirectory
from streamify.dependencies.auth import AUTH_COOKIE, get_current_user
from streamify.dependencies.services import get_chat_service, get_user_directory
from streamify.schemas.response import send_response
from streamify.schemas.user import LoginRequest, OnboardRequest, SignupRequest, User
from streamify.services.chat import ChatService

logger = logging.getLogger(__name__)

router = APIRouter()

AVATAR_URL = "https://avatar.iran.liara.run/public/{}.png"


def random_avatar() -> str:
    return AVATAR_URL.format(random.randint(1, 100))


def _set_auth_cookie(response: JSONResponse, user: User):
    token = create_access_token({"sub": user.id})
    response.set_cookie(
        AUTH_COOKIE,
        token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        samesite="none" if settings.is_production else "strict",
        secure=settings.is_production,
        path="/",
    )


@router.post("/signup")
async def signup(
    payload: SignupRequest,
    directory: UserDirectory = Depends(get_user_directory),
    chat: ChatService = Depends(get_chat_service),
):
    domain = settings.SIGNUP_EMAIL_DOMAIN
    if domain and not payload.email.lower().endswith(f"@{domain}"):
        raise ValidationError(f"Email must end with @{domain}")

    # ConflictError if the email is taken
    user = await directory.create({
        "email": payload.email,
        "fullName": payload.fullName,
        "password": hash_password(payload.password),
        "profilePic": random_avatar(),
    })

    await chat.sync_user(user)

    response = send_response(data=user, status_code=status.HTTP_201_CREATED)
    _set_auth_cookie(response, user)
    return response


@router.post("/login")
async def login(payload: LoginRequest, directory: UserDirectory = Depends(get_user_directory)):
    user = await directory.find_by_email(payload.email)
    if not user or not verify_password(payload.password, user.password):
        raise ValidationError("Invalid email or password")

    response = send_response(data=user)
    _set_auth_cookie(response, user)
    return response


@router.post("/logout")
async def logout():
    response = send_response(message="Logout successful")
    response.delete_cookie(
        AUTH_COOKIE,
        httponly=True,
        samesite="none" if settings.is_production else "strict",
        secure=settings.is_production,
        path="/",
    )
    return response


@router.post("/onboarding")
async def onboard(
    payload: OnboardRequest,
    current_user: User = Depends(get_current_user),
    directory: UserDirectory = Depends(get_user_directory),
    chat: ChatService = Depends(get_chat_service),
):
    missing = payload.missing_fields()
    if missing:
        raise ValidationError(
            "All fields are required",
            error_code=ErrorCode.MISSING_FIELDS,
            details={"missingFields": missing},
        )

    fields = payload.model_dump(exclude_none=True)
    fields["isOnboarded"] = True
    user = await directory.update(current_user.id, fields)
    if not user:
        raise NotFoundError("User not found")

    # a failed sync must not fail onboarding
    await chat.sync_user(user)

    return send_response(data=user)


@router.get("/me")
async def me(current_user: User = Depends(get_current_user)):
    return send_response(data=current_user)
