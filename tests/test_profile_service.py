import json

import pytest

from app.core.config import settings
from app.core.errors import (
    BadRequest,
    CategoryNotFound,
    ConcurrentUpdateError,
    InvalidAnswerShape,
    InvalidCoordinate,
    ProfileNotFound,
    UnknownQuestion,
)
from app.models.profile import UserProfile, UserProfileRequest, UserStatus
from app.services.profile_service import ProfileService
from tests.factories import MUMBAI, TEST_USER_ID


def _profile_key(user_id: str) -> str:
    return f"{settings.REDIS_PROFILE_KEY}{user_id}"


class TestProfile:
    async def test_create_then_get(self, profile_service):
        created = await profile_service.create_or_update_profile(
            TEST_USER_ID, UserProfileRequest(city="Mumbai", profession="Engineer")
        )
        fetched = await profile_service.get_profile(TEST_USER_ID)

        assert created.city == fetched.city == "Mumbai"
        assert fetched.status == UserStatus.ACTIVE
        assert fetched.overall_profile_completion_percentage == 0.0
        assert [c.id for c in fetched.questionnaire_by_category][0] == "background"

    async def test_partial_update_keeps_other_fields(self, profile_service):
        await profile_service.create_or_update_profile(TEST_USER_ID, UserProfileRequest(city="Mumbai", bio="Hi"))
        updated = await profile_service.create_or_update_profile(TEST_USER_ID, UserProfileRequest(bio="Hello"))
        assert updated.city == "Mumbai"
        assert updated.bio == "Hello"

    async def test_location_sets_geohash(self, profile_service, profile_store, proximity):
        await profile_service.create_or_update_profile(
            TEST_USER_ID, UserProfileRequest(latitude=MUMBAI[0], longitude=MUMBAI[1])
        )
        stored = await profile_store.get(TEST_USER_ID)
        assert stored.geohash == proximity.cell_for(*MUMBAI)
        assert stored.has_location

    async def test_latitude_without_longitude(self, profile_service, profile_store):
        with pytest.raises(BadRequest):
            await profile_service.create_or_update_profile(TEST_USER_ID, UserProfileRequest(latitude=19.0))
        assert await profile_store.get(TEST_USER_ID) is None

    async def test_missing_profile(self, profile_service):
        with pytest.raises(ProfileNotFound):
            await profile_service.get_profile("nobody")

    async def test_stored_form_uses_camel_case(self, profile_service, fake_redis):
        await profile_service.create_or_update_profile(TEST_USER_ID, UserProfileRequest(zip_code="400001"))
        stored = json.loads(await fake_redis.get(_profile_key(TEST_USER_ID)))
        assert stored["userId"] == TEST_USER_ID
        assert stored["zipCode"] == "400001"


class TestStatus:
    async def test_soft_delete_hides_profile(self, profile_service):
        await profile_service.create_or_update_profile(TEST_USER_ID, UserProfileRequest(city="Mumbai"))
        result = await profile_service.soft_delete(TEST_USER_ID)

        assert result.previous_status == UserStatus.ACTIVE
        assert result.status == UserStatus.DELETED
        with pytest.raises(ProfileNotFound):
            await profile_service.get_profile(TEST_USER_ID)
        with pytest.raises(ProfileNotFound):
            await profile_service.save_answers(TEST_USER_ID, {"home_town": "Mumbai"})

    async def test_reactivate(self, profile_service):
        await profile_service.create_or_update_profile(TEST_USER_ID, UserProfileRequest(city="Mumbai"))
        await profile_service.soft_delete(TEST_USER_ID)
        result = await profile_service.reactivate(TEST_USER_ID)

        assert result.status == UserStatus.ACTIVE
        assert (await profile_service.get_profile(TEST_USER_ID)).city == "Mumbai"

    async def test_same_status_is_rejected(self, profile_service):
        await profile_service.create_or_update_profile(TEST_USER_ID, UserProfileRequest(city="Mumbai"))
        with pytest.raises(BadRequest):
            await profile_service.reactivate(TEST_USER_ID)

    async def test_status_of_missing_profile(self, profile_service):
        with pytest.raises(ProfileNotFound):
            await profile_service.soft_delete("nobody")


class TestQuestionnaire:
    async def test_answers_accumulate_across_calls(self, profile_service):
        await profile_service.save_answers(TEST_USER_ID, {"home_town": "Mumbai"})
        await profile_service.save_answers(TEST_USER_ID, {"sibling_order": "Older"})

        answers = await profile_service.get_answers(TEST_USER_ID)
        assert answers.to_raw() == {"home_town": "Mumbai", "sibling_order": "Older"}

    async def test_percentages_are_persisted(self, profile_service, profile_store):
        response = await profile_service.save_answers(
            TEST_USER_ID, {"home_town": "Mumbai", "sibling_order": "Older", "fluent_languages": ["Hindi"]}
        )
        stored = await profile_store.get(TEST_USER_ID)

        assert stored.category_completion_percentages["background"] == 60.0
        assert stored.overall_profile_completion_percentage == pytest.approx(4 * 60.0 / 9)
        assert response.overall_profile_completion_percentage == stored.overall_profile_completion_percentage

    async def test_progress_matches_stored_snapshot(self, profile_service, profile_store):
        await profile_service.save_answers(TEST_USER_ID, {"hobbies": ["Reading"], "psychedelics": "2"})
        progress = await profile_service.get_progress(TEST_USER_ID)
        stored = await profile_store.get(TEST_USER_ID)
        assert progress.total_percentage == stored.overall_profile_completion_percentage
        assert progress.category_percentages() == stored.category_completion_percentages

    async def test_rejected_submission_leaves_answers_untouched(self, profile_service):
        await profile_service.save_answers(TEST_USER_ID, {"home_town": "Mumbai"})
        with pytest.raises(UnknownQuestion):
            await profile_service.save_answers(TEST_USER_ID, {"home_town": "Pune", "favourite_colour": "Blue"})
        with pytest.raises(InvalidAnswerShape):
            await profile_service.save_answers(TEST_USER_ID, {"home_town": "Pune", "fluent_languages": "Hindi"})

        answers = await profile_service.get_answers(TEST_USER_ID)
        assert answers.to_raw() == {"home_town": "Mumbai"}

    async def test_answers_without_profile_create_one(self, profile_service):
        response = await profile_service.save_answers(TEST_USER_ID, {"home_town": "Mumbai"})
        assert response.user_id == TEST_USER_ID
        assert response.status == UserStatus.ACTIVE

    async def test_questionnaire_by_category_shows_null_for_unanswered(self, profile_service):
        response = await profile_service.save_answers(TEST_USER_ID, {"home_town": "Mumbai"})
        background = response.questionnaire_by_category[0]
        by_id = {q.id: q.answer for q in background.questions}
        assert by_id["home_town"] == "Mumbai"
        assert by_id["sibling_order"] is None

    async def test_category_with_answers(self, profile_service):
        await profile_service.save_answers(TEST_USER_ID, {"home_town": "Mumbai", "hobbies": ["Reading"]})
        result = await profile_service.get_category_with_answers(TEST_USER_ID, "background")
        assert result.category.id == "background"
        assert result.answers == {"home_town": "Mumbai"}

    async def test_category_with_answers_unknown_category(self, profile_service):
        with pytest.raises(CategoryNotFound):
            await profile_service.get_category_with_answers(TEST_USER_ID, "nope")

    async def test_no_profile_means_no_answers(self, profile_service):
        assert len(await profile_service.get_answers("nobody")) == 0
        assert (await profile_service.get_progress("nobody")).total_percentage == 0.0

    async def test_option_validation_switch(self, catalog, profile_store, proximity):
        service = ProfileService(catalog, profile_store, proximity, validate_options=True)
        with pytest.raises(InvalidAnswerShape):
            await service.save_answers(TEST_USER_ID, {"sibling_order": "Twin"})


class TestConcurrentUpdates:
    async def test_retries_when_profile_changes_mid_update(self, profile_store, sync_redis):
        await profile_store.save(UserProfile(user_id=TEST_USER_ID, city="Mumbai"))
        calls = []

        def mutate(current):
            calls.append(current.bio)
            if len(calls) == 1:
                # Another writer lands between our read and our write
                racing = current.model_copy(update={"bio": "from elsewhere"})
                sync_redis.set(_profile_key(TEST_USER_ID), racing.model_dump_json(by_alias=True))
            return current.model_copy(update={"profession": "Engineer"})

        updated = await profile_store.update(TEST_USER_ID, mutate)

        assert calls == [None, "from elsewhere"]
        assert updated.bio == "from elsewhere"
        assert updated.profession == "Engineer"

    async def test_gives_up_after_max_retries(self, profile_store, sync_redis):
        await profile_store.save(UserProfile(user_id=TEST_USER_ID))
        attempts = []

        def mutate(current):
            attempts.append(1)
            sync_redis.set(_profile_key(TEST_USER_ID), current.model_dump_json(by_alias=True))
            return current

        with pytest.raises(ConcurrentUpdateError) as exc_info:
            await profile_store.update(TEST_USER_ID, mutate, max_retries=3)
        assert len(attempts) == 3
        assert exc_info.value.status_code == 409

    async def test_mutate_error_writes_nothing(self, profile_store):
        await profile_store.save(UserProfile(user_id=TEST_USER_ID, city="Mumbai"))

        def mutate(current):
            raise BadRequest("nope")

        with pytest.raises(BadRequest):
            await profile_store.update(TEST_USER_ID, mutate)
        assert (await profile_store.get(TEST_USER_ID)).city == "Mumbai"


class TestValidationAtTheEdges:
    def test_out_of_range_coordinates_rejected_by_request_model(self):
        with pytest.raises(ValueError):
            UserProfileRequest(latitude=200.0, longitude=0.0)

    async def test_invalid_coordinate_from_proximity(self, profile_service):
        # Bypasses request validation to reach the geohash check
        request = UserProfileRequest.model_construct(latitude=float("nan"), longitude=1.0)
        with pytest.raises(InvalidCoordinate):
            await profile_service.create_or_update_profile(TEST_USER_ID, request)
