from fastapi import APIRouter, Depends

from app.api.deps import get_current_user_id, get_profile_service
from app.models.profile import (
    UserProfileRequest,
    UserProfileResponse,
    UserStatusUpdateRequest,
    UserStatusUpdateResponse,
)
from app.models.questionnaire import (
    CategoryAnswersResponse,
    ProgressReport,
    QuestionnaireAnswersRequest,
    QuestionnaireAnswersResponse,
)
from app.services.profile_service import ProfileService

router = APIRouter(prefix="/v1/user", tags=["profile"])


@router.post("/profile", response_model=UserProfileResponse)
async def create_or_update_profile(
    payload: UserProfileRequest,
    user_id: str = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service),
):
    return await service.create_or_update_profile(user_id, payload)


@router.get("/profile", response_model=UserProfileResponse)
async def get_profile(
    user_id: str = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service),
):
    return await service.get_profile(user_id)


@router.patch("/profile/status", response_model=UserStatusUpdateResponse)
async def update_status(
    payload: UserStatusUpdateRequest,
    user_id: str = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service),
):
    return await service.update_status(user_id, payload.status, payload.reason)


@router.patch("/profile/delete", response_model=UserStatusUpdateResponse)
async def soft_delete_profile(
    user_id: str = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service),
):
    return await service.soft_delete(user_id)


@router.patch("/profile/reactivate", response_model=UserStatusUpdateResponse)
async def reactivate_profile(
    user_id: str = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service),
):
    return await service.reactivate(user_id)


@router.get("/profile/{profile_user_id}", response_model=UserProfileResponse)
async def get_profile_by_id(
    profile_user_id: str,
    _: str = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service),
):
    return await service.get_profile(profile_user_id)


@router.post("/questionnaire", response_model=UserProfileResponse)
async def submit_questionnaire(
    payload: QuestionnaireAnswersRequest,
    user_id: str = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service),
):
    """
    Merge answers into the caller's questionnaire.

    Only the submitted question ids change; everything else already answered
    is kept. Example body: ``{"answers": {"home_town": "Mumbai"}}``.
    """
    return await service.save_answers(user_id, payload.answers)


@router.get("/questionnaire", response_model=QuestionnaireAnswersResponse)
async def get_questionnaire_answers(
    user_id: str = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service),
):
    answers = await service.get_answers(user_id)
    return QuestionnaireAnswersResponse(user_id=user_id, answers=answers.to_raw())


@router.get("/questionnaire/progress", response_model=ProgressReport)
async def get_questionnaire_progress(
    user_id: str = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service),
):
    return await service.get_progress(user_id)


@router.get("/questionnaire/category/{category_id}", response_model=CategoryAnswersResponse)
async def get_category_with_answers(
    category_id: str,
    user_id: str = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service),
):
    return await service.get_category_with_answers(user_id, category_id)
