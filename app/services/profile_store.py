from collections.abc import Callable

from loguru import logger
from pydantic import ValidationError
from redis.exceptions import WatchError

from app.core.config import settings
from app.core.errors import ConcurrentUpdateError
from app.core.security import redact_token
from app.models.profile import UserProfile
from app.services.redis_service import RedisService, redis_service


class ProfileStore:
    """Redis-backed store for user profile documents (one JSON value per user)."""

    KEY_PREFIX = settings.REDIS_PROFILE_KEY

    def __init__(self, redis_svc: RedisService) -> None:
        self._redis = redis_svc

    def _format_key(self, user_id: str) -> str:
        return f"{self.KEY_PREFIX}{user_id}"

    @staticmethod
    def _decode(user_id: str, raw: str | None) -> UserProfile | None:
        if not raw:
            return None
        try:
            return UserProfile.model_validate_json(raw)
        except ValidationError as exc:
            logger.error(f"[{redact_token(user_id)}] Stored profile is unreadable: {exc}")
            raise ValueError(f"Corrupt profile record for {redact_token(user_id)}") from exc

    @staticmethod
    def _encode(profile: UserProfile) -> str:
        return profile.model_dump_json(by_alias=True)

    async def get(self, user_id: str) -> UserProfile | None:
        logger.debug(f"[REDIS] Fetching profile for {redact_token(user_id)}")
        client = await self._redis.get_client()
        raw = await client.get(self._format_key(user_id))
        return self._decode(user_id, raw)

    async def save(self, profile: UserProfile) -> UserProfile:
        client = await self._redis.get_client()
        await client.set(self._format_key(profile.user_id), self._encode(profile))
        return profile

    async def update(
        self,
        user_id: str,
        mutate: Callable[[UserProfile | None], UserProfile],
        max_retries: int | None = None,
    ) -> UserProfile:
        """
        Optimistic read-modify-write of one profile.

        ``mutate`` receives the stored profile (or None) and returns the new
        one. The key is WATCHed, so a concurrent write between our read and
        EXEC aborts the transaction and ``mutate`` runs again on fresh data.
        Exceptions raised by ``mutate`` abort without writing anything.
        """
        attempts = max_retries or settings.PROFILE_UPDATE_MAX_RETRIES
        key = self._format_key(user_id)
        client = await self._redis.get_client()

        async with client.pipeline(transaction=True) as pipe:
            for attempt in range(1, attempts + 1):
                try:
                    await pipe.watch(key)
                    current = self._decode(user_id, await pipe.get(key))
                    updated = mutate(current)
                    pipe.multi()
                    pipe.set(key, self._encode(updated))
                    await pipe.execute()
                    return updated
                except WatchError:
                    logger.debug(f"[{redact_token(user_id)}] Profile changed during update (attempt {attempt})")
                    continue

        logger.warning(f"[{redact_token(user_id)}] Giving up profile update after {attempts} attempts")
        raise ConcurrentUpdateError("Profile was modified concurrently, please retry")


profile_store = ProfileStore(redis_service)
