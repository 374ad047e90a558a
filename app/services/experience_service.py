from datetime import date

from loguru import logger

from app.core.constants import DEFAULT_CURRENCY
from app.core.errors import BadRequest, ExperienceNotFound, PermissionDenied
from app.core.security import redact_token
from app.models.experience import (
    Experience,
    ExperienceRequest,
    ExperienceResponse,
    ExperienceStatus,
)
from app.models.profile import utcnow
from app.services.experience_store import ExperienceStore
from app.services.proximity import ProximityIndex


class ExperienceService:
    def __init__(self, store: ExperienceStore, proximity: ProximityIndex):
        self.store = store
        self.proximity = proximity

    @staticmethod
    def _validate_request(request: ExperienceRequest, existing: Experience | None = None) -> None:
        if request.experience_date is not None and request.experience_date < date.today():
            raise BadRequest("Experience date must be in the future")

        start = request.start_time or (existing.start_time if existing else None)
        end = request.end_time or (existing.end_time if existing else None)
        if start is not None and end is not None and start > end:
            raise BadRequest("Start time must be before end time")

        if request.max_capacity is not None and request.max_capacity <= 0:
            raise BadRequest("Maximum capacity must be positive")

        if request.price_per_person is not None and request.price_per_person < 0:
            raise BadRequest("Price cannot be negative")

        if (request.latitude is None) != (request.longitude is None):
            raise BadRequest("Latitude and longitude must be provided together")

    def _apply(self, experience: Experience, request: ExperienceRequest) -> Experience:
        changes = request.model_dump(exclude_none=True)
        if request.latitude is not None and request.longitude is not None:
            changes["geohash"] = self.proximity.cell_for(request.latitude, request.longitude)
        changes["updated_at"] = utcnow()
        return experience.model_copy(update=changes)

    async def _require(self, experience_id: str) -> Experience:
        experience = await self.store.get(experience_id)
        if experience is None or experience.is_deleted:
            raise ExperienceNotFound(experience_id)
        return experience

    async def create(self, request: ExperienceRequest, created_by: str) -> ExperienceResponse:
        logger.debug(f"Creating new experience for user: {redact_token(created_by)}")
        if not request.title:
            raise BadRequest("Title is required")
        if request.type is None:
            raise BadRequest("Experience type is required")
        self._validate_request(request)

        experience = self._apply(
            Experience(
                created_by=created_by,
                title=request.title,
                type=request.type,
                status=ExperienceStatus.DRAFT,
                currency=DEFAULT_CURRENCY,
            ),
            request,
        )
        await self.store.save(experience)
        logger.info(f"Created experience {experience.experience_id} for user {redact_token(created_by)}")
        return ExperienceResponse.from_experience(experience)

    async def get(self, experience_id: str) -> ExperienceResponse:
        logger.debug(f"Getting experience: {experience_id}")
        return ExperienceResponse.from_experience(await self._require(experience_id))

    async def update(self, experience_id: str, request: ExperienceRequest, user_id: str) -> ExperienceResponse:
        logger.debug(f"Updating experience {experience_id} by user {redact_token(user_id)}")

        def apply(current: Experience | None) -> Experience:
            if current is None or current.is_deleted:
                raise ExperienceNotFound(experience_id)
            if current.created_by != user_id:
                raise PermissionDenied("You don't have permission to edit this experience")
            self._validate_request(request, current)
            return self._apply(current, request)

        updated = await self.store.update(experience_id, apply)
        logger.info(f"Updated experience {experience_id} by user {redact_token(user_id)}")
        return ExperienceResponse.from_experience(updated)

    async def delete(self, experience_id: str, user_id: str) -> ExperienceResponse:
        """Soft delete: the document stays, but it leaves the listing and the geo index."""
        return await self.update(experience_id, ExperienceRequest(status=ExperienceStatus.DELETED), user_id)

    async def list_all(self, city: str | None = None) -> list[ExperienceResponse]:
        experiences = await self.store.get_many(await self.store.list_ids())
        experiences = [e for e in experiences if not e.is_deleted]
        if city:
            experiences = [e for e in experiences if e.city == city]
        experiences.sort(key=lambda e: e.created_at, reverse=True)
        logger.info(f"Found {len(experiences)} experiences{f' in {city}' if city else ''}")
        return [ExperienceResponse.from_experience(e) for e in experiences]

    async def nearby(self, latitude: float, longitude: float, radius_km: float) -> list[ExperienceResponse]:
        """
        Experiences within ``radius_km`` of the point, nearest first.

        Candidates come from the 3x3 geohash grid around the point and are then
        filtered by exact distance, so the effective search area is bounded by
        the grid as well as by the radius.
        """
        if radius_km <= 0:
            raise BadRequest("Radius must be positive")
        cells = self.proximity.neighbor_cells(latitude, longitude)
        candidate_ids = await self.store.ids_in_cells(cells)
        candidates = await self.store.get_many(candidate_ids)

        ranked: list[tuple[float, Experience]] = []
        for experience in candidates:
            if experience.is_deleted or not experience.has_location:
                continue
            distance = self.proximity.distance_km(latitude, longitude, experience.latitude, experience.longitude)
            if distance <= radius_km:
                ranked.append((distance, experience))
        ranked.sort(key=lambda pair: (pair[0], pair[1].experience_id))

        logger.info(
            f"Nearby search at ({latitude:.4f}, {longitude:.4f}) r={radius_km}km: "
            f"{len(candidates)} candidates in {len(cells)} cells, {len(ranked)} within radius"
        )
        return [ExperienceResponse.from_experience(e, distance_km=round(d, 3)) for d, e in ranked]

    async def mark_interested(self, user_id: str, experience_id: str, interested: bool) -> None:
        if interested:
            await self._require(experience_id)
        await self.store.set_interest(user_id, experience_id, interested)
        logger.info(
            f"[{redact_token(user_id)}] {'Marked' if interested else 'Unmarked'} interest in experience {experience_id}"
        )

    async def list_interested(self, user_id: str) -> list[ExperienceResponse]:
        experiences = await self.store.get_many(await self.store.interested_ids(user_id))
        experiences = [e for e in experiences if not e.is_deleted]
        experiences.sort(key=lambda e: (e.experience_date or date.max, e.created_at))
        return [ExperienceResponse.from_experience(e, interested=True) for e in experiences]
