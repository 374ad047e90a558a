from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from uuid import uuid4

from pydantic import Field

from app.core.constants import DEFAULT_CURRENCY
from app.models.base import CamelModel
from app.models.profile import utcnow


class ExperienceType(str, Enum):
    SOCIAL = "SOCIAL"
    ADVENTURE = "ADVENTURE"
    CULTURAL = "CULTURAL"
    FOOD = "FOOD"
    WELLNESS = "WELLNESS"
    LEARNING = "LEARNING"
    OTHER = "OTHER"


class ExperienceStatus(str, Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"
    DELETED = "DELETED"


class Experience(CamelModel):
    experience_id: str = Field(default_factory=lambda: str(uuid4()))
    created_by: str
    title: str
    description: str | None = None
    type: ExperienceType = ExperienceType.OTHER
    status: ExperienceStatus = ExperienceStatus.DRAFT
    location: str | None = None
    address: str | None = None
    city: str | None = None
    country: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    geohash: str | None = None
    experience_date: date | None = None
    start_time: time | None = None
    end_time: time | None = None
    price_per_person: Decimal | None = None
    currency: str = DEFAULT_CURRENCY
    max_capacity: int | None = None
    current_bookings: int = 0
    tags: list[str] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def is_deleted(self) -> bool:
        return self.status == ExperienceStatus.DELETED

    @property
    def has_location(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @property
    def remaining_capacity(self) -> int | None:
        if self.max_capacity is None:
            return None
        return max(0, self.max_capacity - self.current_bookings)

    @property
    def has_available_spots(self) -> bool:
        remaining = self.remaining_capacity
        return remaining is None or remaining > 0


class ExperienceRequest(CamelModel):
    """Fields a client may set. ``None`` means "leave unchanged" on update."""

    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    type: ExperienceType | None = None
    status: ExperienceStatus | None = None
    location: str | None = Field(default=None, max_length=200)
    address: str | None = Field(default=None, max_length=500)
    city: str | None = Field(default=None, max_length=100)
    country: str | None = Field(default=None, max_length=100)
    latitude: float | None = None
    longitude: float | None = None
    experience_date: date | None = None
    start_time: time | None = None
    end_time: time | None = None
    price_per_person: Decimal | None = Field(default=None, decimal_places=2, max_digits=12)
    currency: str | None = Field(default=None, max_length=3)
    max_capacity: int | None = Field(default=None, le=10000)
    tags: list[str] | None = Field(default=None, max_length=20)
    images: list[str] | None = Field(default=None, max_length=10)


class ExperienceResponse(CamelModel):
    experience_id: str
    created_by: str
    title: str
    description: str | None = None
    type: ExperienceType
    status: ExperienceStatus
    location: str | None = None
    address: str | None = None
    city: str | None = None
    country: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    geohash: str | None = None
    experience_date: date | None = None
    start_time: time | None = None
    end_time: time | None = None
    price_per_person: Decimal | None = None
    currency: str
    max_capacity: int | None = None
    current_bookings: int = 0
    remaining_capacity: int | None = None
    has_available_spots: bool = True
    tags: list[str] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list)
    interested: bool | None = None
    distance_km: float | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_experience(cls, experience: Experience, **extra) -> "ExperienceResponse":
        return cls(
            **experience.model_dump(),
            remaining_capacity=experience.remaining_capacity,
            has_available_spots=experience.has_available_spots,
            **extra,
        )


class InterestRequest(CamelModel):
    interested: bool = True


class InterestResponse(CamelModel):
    experience_id: str
    interested: bool
