from fastapi import APIRouter, Depends, Query, status

from app.api.deps import get_current_user_id, get_experience_service, get_profile_service
from app.core.config import settings
from app.core.errors import BadRequest
from app.models.experience import ExperienceRequest, ExperienceResponse, InterestRequest, InterestResponse
from app.services.experience_service import ExperienceService
from app.services.profile_service import ProfileService

router = APIRouter(prefix="/v1", tags=["experiences"])


@router.post("/experience", response_model=ExperienceResponse, status_code=status.HTTP_201_CREATED)
async def create_experience(
    payload: ExperienceRequest,
    user_id: str = Depends(get_current_user_id),
    service: ExperienceService = Depends(get_experience_service),
):
    return await service.create(payload, user_id)


@router.get("/experience/{experience_id}", response_model=ExperienceResponse)
async def get_experience(experience_id: str, service: ExperienceService = Depends(get_experience_service)):
    return await service.get(experience_id)


@router.patch("/experience/{experience_id}", response_model=ExperienceResponse)
async def update_experience(
    experience_id: str,
    payload: ExperienceRequest,
    user_id: str = Depends(get_current_user_id),
    service: ExperienceService = Depends(get_experience_service),
):
    return await service.update(experience_id, payload, user_id)


@router.delete("/experience/{experience_id}", response_model=ExperienceResponse)
async def delete_experience(
    experience_id: str,
    user_id: str = Depends(get_current_user_id),
    service: ExperienceService = Depends(get_experience_service),
):
    return await service.delete(experience_id, user_id)


@router.get("/experiences/all", response_model=list[ExperienceResponse])
async def list_experiences(
    city: str | None = Query(default=None, description="Exact, case-sensitive city match"),
    service: ExperienceService = Depends(get_experience_service),
):
    return await service.list_all(city.strip() if city and city.strip() else None)


@router.get("/experiences/nearby", response_model=list[ExperienceResponse])
async def nearby_experiences(
    lat: float | None = Query(default=None),
    lon: float | None = Query(default=None),
    radius_km: float = Query(default=settings.NEARBY_DEFAULT_RADIUS_KM, alias="radiusKm", gt=0),
    user_id: str = Depends(get_current_user_id),
    service: ExperienceService = Depends(get_experience_service),
    profiles: ProfileService = Depends(get_profile_service),
):
    """Experiences near the given point, or near the caller's saved location when no point is given."""
    if (lat is None) != (lon is None):
        raise BadRequest("lat and lon must be provided together")
    if lat is None:
        profile = await profiles.get_stored_profile(user_id)
        if profile is None or not profile.has_location:
            raise BadRequest("No coordinates supplied and no location saved on the profile")
        lat, lon = profile.latitude, profile.longitude
    return await service.nearby(lat, lon, radius_km)


@router.put("/experiences/{experience_id}/interest", response_model=InterestResponse)
async def mark_interest(
    experience_id: str,
    payload: InterestRequest | None = None,
    user_id: str = Depends(get_current_user_id),
    service: ExperienceService = Depends(get_experience_service),
):
    interested = payload.interested if payload is not None else True
    await service.mark_interested(user_id, experience_id, interested)
    return InterestResponse(experience_id=experience_id, interested=interested)


@router.get("/user/interested-experiences", response_model=list[ExperienceResponse])
async def interested_experiences(
    user_id: str = Depends(get_current_user_id),
    service: ExperienceService = Depends(get_experience_service),
):
    return await service.list_interested(user_id)
