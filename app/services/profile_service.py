from collections.abc import Mapping
from typing import Any

from loguru import logger

from app.core.errors import BadRequest, ProfileNotFound
from app.core.security import redact_token
from app.models.profile import (
    UserProfile,
    UserProfileRequest,
    UserProfileResponse,
    UserStatus,
    UserStatusUpdateResponse,
    utcnow,
)
from app.models.questionnaire import (
    AnswerMap,
    CategoryAnswersResponse,
    CategoryWithAnswers,
    ProgressReport,
    QuestionWithAnswer,
)
from app.services.profile_store import ProfileStore
from app.services.proximity import ProximityIndex
from app.services.questionnaire import AnswerMerger, Catalog, ProgressCalculator

PROFILE_FIELDS = tuple(UserProfileRequest.model_fields)


class ProfileService:
    """
    Profile and questionnaire operations for a single, already-identified user.

    The caller passes the user id resolved by the identity layer; this class
    never looks it up itself.
    """

    def __init__(
        self,
        catalog: Catalog,
        store: ProfileStore,
        proximity: ProximityIndex,
        validate_options: bool = False,
    ):
        self.catalog = catalog
        self.store = store
        self.proximity = proximity
        self.merger = AnswerMerger(catalog, validate_options=validate_options)
        self.calculator = ProgressCalculator(catalog)

    # Profile

    async def get_profile(self, user_id: str) -> UserProfileResponse:
        logger.debug(f"[{redact_token(user_id)}] Fetching profile")
        profile = await self.store.get(user_id)
        if profile is None or profile.is_deleted:
            raise ProfileNotFound(user_id)
        return self.to_response(profile)

    async def get_stored_profile(self, user_id: str) -> UserProfile | None:
        profile = await self.store.get(user_id)
        if profile is None or profile.is_deleted:
            return None
        return profile

    async def create_or_update_profile(self, user_id: str, request: UserProfileRequest) -> UserProfileResponse:
        logger.info(f"[{redact_token(user_id)}] Creating or updating profile")
        changes = request.model_dump(exclude_none=True)
        if ("latitude" in changes) != ("longitude" in changes):
            raise BadRequest("Latitude and longitude must be provided together")
        # Compute before touching the store so a bad coordinate rejects the call
        geohash = self.proximity.cell_for(changes["latitude"], changes["longitude"]) if "latitude" in changes else None

        def apply(current: UserProfile | None) -> UserProfile:
            profile = current or UserProfile(user_id=user_id)
            if profile.is_deleted:
                raise ProfileNotFound(user_id)
            values = {**changes, "updated_at": utcnow()}
            if geohash is not None:
                values["geohash"] = geohash
            return profile.model_copy(update=values)

        saved = await self.store.update(user_id, apply)
        logger.info(f"[{redact_token(user_id)}] Profile saved")
        return self.to_response(saved)

    async def update_status(
        self, user_id: str, status: UserStatus, reason: str | None = None
    ) -> UserStatusUpdateResponse:
        logger.info(f"[{redact_token(user_id)}] Updating status to {status.value} ({reason or 'no reason'})")
        previous: dict[str, UserStatus] = {}

        def apply(current: UserProfile | None) -> UserProfile:
            if current is None:
                raise ProfileNotFound(user_id)
            if current.status == status:
                raise BadRequest(f"User is already in {status.value} status")
            previous["status"] = current.status
            return current.model_copy(update={"status": status, "updated_at": utcnow()})

        saved = await self.store.update(user_id, apply)
        logger.info(
            f"[{redact_token(user_id)}] Status updated from {previous['status'].value} to {saved.status.value}"
        )
        return UserStatusUpdateResponse(
            user_id=user_id,
            status=saved.status,
            previous_status=previous["status"],
            updated_at=saved.updated_at,
        )

    async def soft_delete(self, user_id: str) -> UserStatusUpdateResponse:
        return await self.update_status(user_id, UserStatus.DELETED, "User soft delete")

    async def reactivate(self, user_id: str) -> UserStatusUpdateResponse:
        return await self.update_status(user_id, UserStatus.ACTIVE, "User reactivation")

    # Questionnaire

    async def save_answers(self, user_id: str, answers: Mapping[str, Any]) -> UserProfileResponse:
        """
        Merge a partial answer submission into the stored profile.

        Validation happens inside the optimistic transaction before anything is
        written, so a rejected submission leaves the stored answers untouched.
        """
        logger.info(f"[{redact_token(user_id)}] Saving {len(answers)} questionnaire answer(s)")

        def apply(current: UserProfile | None) -> UserProfile:
            profile = current or UserProfile(user_id=user_id)
            if profile.is_deleted:
                raise ProfileNotFound(user_id)
            merged = self.merger.merge(self.merger.load(profile.questionnaire_answers), answers)
            progress = self.calculator.compute(merged)
            return profile.model_copy(
                update={
                    "questionnaire_answers": merged.to_raw(),
                    "category_completion_percentages": progress.category_percentages(),
                    "overall_profile_completion_percentage": progress.total_percentage,
                    "updated_at": utcnow(),
                }
            )

        saved = await self.store.update(user_id, apply)
        logger.info(
            f"[{redact_token(user_id)}] Questionnaire saved, "
            f"overall completion {saved.overall_profile_completion_percentage:.1f}%"
        )
        return self.to_response(saved)

    async def get_answers(self, user_id: str) -> AnswerMap:
        profile = await self.get_stored_profile(user_id)
        if profile is None:
            return AnswerMap()
        return self.merger.load(profile.questionnaire_answers)

    async def get_progress(self, user_id: str) -> ProgressReport:
        return self.calculator.compute(await self.get_answers(user_id))

    async def get_category_with_answers(self, user_id: str, category_id: str) -> CategoryAnswersResponse:
        category = self.catalog.get_category(category_id)
        answers = await self.get_answers(user_id)
        category_answers = {q.id: answers.get(q.id).raw() for q in category.questions if q.id in answers}
        return CategoryAnswersResponse(category=category, answers=category_answers)

    # Rendering

    def questionnaire_by_category(self, answers: AnswerMap) -> list[CategoryWithAnswers]:
        """Current catalog with each question's stored answer, or null when unanswered."""
        result = []
        for category in self.catalog.list_categories():
            questions = []
            for question in category.questions:
                answer = answers.get(question.id)
                questions.append(
                    QuestionWithAnswer(
                        id=question.id,
                        title=question.title,
                        description=question.description,
                        type=question.type,
                        options=list(question.options) if question.options is not None else None,
                        category_id=question.category_id,
                        category_name=question.category_name,
                        weight=question.weight,
                        answer=answer.raw() if answer is not None else None,
                    )
                )
            result.append(
                CategoryWithAnswers(
                    id=category.id,
                    name=category.name,
                    description=category.description,
                    weight=category.weight,
                    image_url=category.image_url,
                    questions=questions,
                )
            )
        return result

    def to_response(self, profile: UserProfile) -> UserProfileResponse:
        answers = self.merger.load(profile.questionnaire_answers)
        return UserProfileResponse(
            **profile.model_dump(include=set(PROFILE_FIELDS)),
            user_id=profile.user_id,
            status=profile.status,
            questionnaire_by_category=self.questionnaire_by_category(answers),
            category_completion_percentages=profile.category_completion_percentages,
            overall_profile_completion_percentage=profile.overall_profile_completion_percentage,
            created_at=profile.created_at,
            updated_at=profile.updated_at,
        )
