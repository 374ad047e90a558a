import fakeredis
import fakeredis.aioredis
import pytest
from fastapi.testclient import TestClient

from app.core.app import app
from app.services.experience_service import ExperienceService
from app.services.experience_store import ExperienceStore
from app.services.profile_service import ProfileService
from app.services.profile_store import ProfileStore
from app.services.proximity import ProximityIndex
from app.services.questionnaire import Catalog
from app.services.redis_service import RedisService, redis_service
from tests.factories import TEST_USER_ID, single_category_catalog

# --- Fixtures ---


@pytest.fixture
def catalog() -> Catalog:
    return Catalog.default()


@pytest.fixture
def small_catalog() -> Catalog:
    return single_category_catalog()


@pytest.fixture
def proximity() -> ProximityIndex:
    return ProximityIndex(6)


@pytest.fixture
def fake_server():
    return fakeredis.FakeServer()


@pytest.fixture
def fake_redis(fake_server):
    return fakeredis.aioredis.FakeRedis(server=fake_server, decode_responses=True)


@pytest.fixture
def sync_redis(fake_server):
    """Second client on the same fake server, used to simulate a writer racing the one under test."""
    return fakeredis.FakeRedis(server=fake_server, decode_responses=True)


@pytest.fixture
def redis_svc(fake_redis) -> RedisService:
    svc = RedisService()
    svc.use_client(fake_redis)
    return svc


@pytest.fixture
def profile_store(redis_svc) -> ProfileStore:
    return ProfileStore(redis_svc)


@pytest.fixture
def experience_store(redis_svc) -> ExperienceStore:
    return ExperienceStore(redis_svc)


@pytest.fixture
def profile_service(catalog, profile_store, proximity) -> ProfileService:
    return ProfileService(catalog=catalog, store=profile_store, proximity=proximity)


@pytest.fixture
def experience_service(experience_store, proximity) -> ExperienceService:
    return ExperienceService(store=experience_store, proximity=proximity)


@pytest.fixture
def client(fake_redis):
    """TestClient for the FastAPI app, backed by an in-memory Redis."""
    redis_service.use_client(fake_redis)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"X-User-Id": TEST_USER_ID}
