from collections.abc import Callable, Iterable

from loguru import logger
from pydantic import ValidationError
from redis.exceptions import WatchError

from app.core.config import settings
from app.core.errors import ConcurrentUpdateError
from app.models.experience import Experience
from app.services.redis_service import RedisService, redis_service


class ExperienceStore:
    """
    Redis layout:

    - ``{REDIS_EXPERIENCE_KEY}{id}``   experience JSON document
    - ``{REDIS_EXPERIENCE_LIST_KEY}``  set of ids of every non-deleted experience
    - ``{REDIS_GEO_INDEX_KEY}{cell}``  set of ids located in a geohash cell
    - ``{REDIS_INTEREST_KEY}{user}``   set of ids a user is interested in
    """

    def __init__(self, redis_svc: RedisService) -> None:
        self._redis = redis_svc

    @staticmethod
    def _doc_key(experience_id: str) -> str:
        return f"{settings.REDIS_EXPERIENCE_KEY}{experience_id}"

    @staticmethod
    def _cell_key(cell: str) -> str:
        return f"{settings.REDIS_GEO_INDEX_KEY}{cell}"

    @staticmethod
    def _interest_key(user_id: str) -> str:
        return f"{settings.REDIS_INTEREST_KEY}{user_id}"

    @staticmethod
    def _decode(raw: str | None) -> Experience | None:
        if not raw:
            return None
        try:
            return Experience.model_validate_json(raw)
        except ValidationError as exc:
            logger.warning(f"Skipping unreadable experience record: {exc}")
            return None

    def _queue_write(self, pipe, experience: Experience, previous_cell: str | None) -> None:
        """Queue the document write plus the listing and geo index changes that go with it."""
        experience_id = experience.experience_id
        listed = not experience.is_deleted

        pipe.set(self._doc_key(experience_id), experience.model_dump_json(by_alias=True))
        if listed:
            pipe.sadd(settings.REDIS_EXPERIENCE_LIST_KEY, experience_id)
        else:
            pipe.srem(settings.REDIS_EXPERIENCE_LIST_KEY, experience_id)
        if previous_cell and (previous_cell != experience.geohash or not listed):
            pipe.srem(self._cell_key(previous_cell), experience_id)
        if experience.geohash and listed:
            pipe.sadd(self._cell_key(experience.geohash), experience_id)

    async def save(self, experience: Experience) -> Experience:
        """Write a new experience."""
        client = await self._redis.get_client()
        async with client.pipeline(transaction=True) as pipe:
            self._queue_write(pipe, experience, None)
            await pipe.execute()
        return experience

    async def update(
        self,
        experience_id: str,
        mutate: Callable[[Experience | None], Experience],
        max_retries: int | None = None,
    ) -> Experience:
        """
        Optimistic read-modify-write of one experience.

        The document key is WATCHed, so the geo cell removed from the index is
        always the one stored at EXEC time. A concurrent write aborts the
        transaction and ``mutate`` runs again on fresh data.
        """
        attempts = max_retries or settings.EXPERIENCE_UPDATE_MAX_RETRIES
        key = self._doc_key(experience_id)
        client = await self._redis.get_client()

        async with client.pipeline(transaction=True) as pipe:
            for attempt in range(1, attempts + 1):
                try:
                    await pipe.watch(key)
                    current = self._decode(await pipe.get(key))
                    updated = mutate(current)
                    pipe.multi()
                    self._queue_write(pipe, updated, current.geohash if current else None)
                    await pipe.execute()
                    return updated
                except WatchError:
                    logger.debug(f"Experience {experience_id} changed during update (attempt {attempt})")
                    continue

        logger.warning(f"Giving up update of experience {experience_id} after {attempts} attempts")
        raise ConcurrentUpdateError("Experience was modified concurrently, please retry")

    async def get(self, experience_id: str) -> Experience | None:
        client = await self._redis.get_client()
        return self._decode(await client.get(self._doc_key(experience_id)))

    async def get_many(self, experience_ids: Iterable[str]) -> list[Experience]:
        ids = sorted(set(experience_ids))
        if not ids:
            return []
        client = await self._redis.get_client()
        raws = await client.mget([self._doc_key(i) for i in ids])
        experiences = []
        for experience_id, raw in zip(ids, raws):
            experience = self._decode(raw)
            if experience is None:
                logger.debug(f"Experience not found for experienceId: {experience_id}")
                continue
            experiences.append(experience)
        return experiences

    async def list_ids(self) -> set[str]:
        client = await self._redis.get_client()
        return set(await client.smembers(settings.REDIS_EXPERIENCE_LIST_KEY))

    async def ids_in_cells(self, cells: Iterable[str]) -> set[str]:
        keys = [self._cell_key(c) for c in cells]
        if not keys:
            return set()
        client = await self._redis.get_client()
        return set(await client.sunion(keys))

    async def set_interest(self, user_id: str, experience_id: str, interested: bool) -> None:
        client = await self._redis.get_client()
        if interested:
            await client.sadd(self._interest_key(user_id), experience_id)
        else:
            await client.srem(self._interest_key(user_id), experience_id)

    async def interested_ids(self, user_id: str) -> set[str]:
        client = await self._redis.get_client()
        return set(await client.smembers(self._interest_key(user_id)))


experience_store = ExperienceStore(redis_service)
