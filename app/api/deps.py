from fastapi import Request

from app.core.config import settings
from app.core.errors import Unauthenticated
from app.services.experience_service import ExperienceService
from app.services.experience_store import experience_store
from app.services.profile_service import ProfileService
from app.services.profile_store import profile_store
from app.services.proximity import ProximityIndex
from app.services.questionnaire import Catalog


def get_catalog(request: Request) -> Catalog:
    return request.app.state.catalog


def get_proximity(request: Request) -> ProximityIndex:
    return request.app.state.proximity


def get_current_user_id(request: Request) -> str:
    """Trusted user id forwarded by the gateway; the gateway has already authenticated the caller."""
    user_id = (request.headers.get(settings.USER_ID_HEADER) or "").strip()
    if not user_id:
        raise Unauthenticated("No authenticated user found in request")
    return user_id


def get_profile_service(request: Request) -> ProfileService:
    return ProfileService(
        catalog=get_catalog(request),
        store=profile_store,
        proximity=get_proximity(request),
        validate_options=settings.ANSWER_OPTION_VALIDATION,
    )


def get_experience_service(request: Request) -> ExperienceService:
    return ExperienceService(store=experience_store, proximity=get_proximity(request))
