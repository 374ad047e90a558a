from fastapi import APIRouter

from .endpoints.experiences import router as experiences_router
from .endpoints.health import router as health_router
from .endpoints.profile import router as profile_router
from .endpoints.questions import router as questions_router

api_router = APIRouter()


@api_router.get("/")
async def root():
    return {"message": "Afterspace API is running"}


api_router.include_router(health_router)
api_router.include_router(questions_router)
api_router.include_router(profile_router)
api_router.include_router(experiences_router)
