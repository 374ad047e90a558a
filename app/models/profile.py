from datetime import date, datetime, timezone
from enum import Enum
from typing import Any

from pydantic import Field

from app.models.base import CamelModel
from app.models.questionnaire import CategoryWithAnswers


class UserStatus(str, Enum):
    ACTIVE = "ACTIVE"
    DELETED = "DELETED"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserProfile(CamelModel):
    """
    Stored profile document, one per user.

    ``questionnaire_answers`` is the source of truth for the questionnaire;
    the completion percentages are a snapshot written alongside it.
    """

    user_id: str
    date_of_birth: date | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    geohash: str | None = None
    gender: str | None = None
    profession: str | None = None
    company: str | None = None
    bio: str | None = None
    phone_number: str | None = None
    status: UserStatus = UserStatus.ACTIVE
    questionnaire_answers: dict[str, Any] = Field(default_factory=dict)
    category_completion_percentages: dict[str, float] = Field(default_factory=dict)
    overall_profile_completion_percentage: float = 0.0
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def is_deleted(self) -> bool:
        return self.status == UserStatus.DELETED

    @property
    def has_location(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class UserProfileRequest(CamelModel):
    date_of_birth: date | None = None
    address: str | None = Field(default=None, max_length=500)
    city: str | None = Field(default=None, max_length=100)
    state: str | None = Field(default=None, max_length=100)
    zip_code: str | None = Field(default=None, max_length=20)
    country: str | None = Field(default=None, max_length=100)
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    gender: str | None = Field(default=None, max_length=50)
    profession: str | None = Field(default=None, max_length=100)
    company: str | None = Field(default=None, max_length=100)
    bio: str | None = Field(default=None, max_length=1000)
    phone_number: str | None = Field(default=None, max_length=20)


class UserProfileResponse(CamelModel):
    user_id: str
    date_of_birth: date | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    gender: str | None = None
    profession: str | None = None
    company: str | None = None
    bio: str | None = None
    phone_number: str | None = None
    status: UserStatus
    questionnaire_by_category: list[CategoryWithAnswers] = Field(default_factory=list)
    category_completion_percentages: dict[str, float] = Field(default_factory=dict)
    overall_profile_completion_percentage: float = 0.0
    created_at: datetime
    updated_at: datetime


class UserStatusUpdateRequest(CamelModel):
    status: UserStatus
    reason: str | None = Field(default=None, max_length=500)


class UserStatusUpdateResponse(CamelModel):
    user_id: str
    status: UserStatus
    previous_status: UserStatus
    updated_at: datetime
