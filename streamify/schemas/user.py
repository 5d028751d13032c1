from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field

ONBOARDING_FIELDS = ("fullName", "bio", "nativeLanguage", "learningLanguage", "location")


class SignupRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    fullName: str = Field(..., min_length=1)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)


class OnboardRequest(BaseModel):
    # presence is checked in the endpoint so the error can list every missing field
    fullName: Optional[str] = None
    bio: Optional[str] = None
    nativeLanguage: Optional[str] = None
    learningLanguage: Optional[str] = None
    location: Optional[str] = None
    profilePic: Optional[str] = None

    def missing_fields(self) -> List[str]:
        return [name for name in ONBOARDING_FIELDS if not (getattr(self, name) or "").strip()]


class UserSummary(BaseModel):
    id: str
    fullName: str
    profilePic: str = ""
    nativeLanguage: Optional[str] = None
    learningLanguage: Optional[str] = None


class User(BaseModel):
    id: str
    fullName: str
    email: str
    password: Optional[str] = Field(default=None, exclude=True)  # bcrypt hash
    bio: str = ""
    profilePic: str = ""
    nativeLanguage: str = ""
    learningLanguage: str = ""
    location: str = ""
    isOnboarded: bool = False
    friends: List[str] = []
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    @classmethod
    def from_mongo(cls, doc: dict) -> "User":
        data = dict(doc)
        data["id"] = str(data.pop("_id"))
        data["friends"] = [str(f) for f in data.get("friends", [])]
        return cls(**data)

    def summary(self, full: bool = True) -> UserSummary:
        if not full:
            return UserSummary(id=self.id, fullName=self.fullName, profilePic=self.profilePic)
        return UserSummary(
            id=self.id,
            fullName=self.fullName,
            profilePic=self.profilePic,
            nativeLanguage=self.nativeLanguage,
            learningLanguage=self.learningLanguage,
        )
