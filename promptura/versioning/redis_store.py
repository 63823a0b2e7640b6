"""Redis-backed version store"""

import logging
import uuid
from datetime import datetime
from typing import List, Optional

import redis.asyncio as redis
from redis.asyncio.lock import Lock

from promptura.config import Settings
from promptura.models.prompt_version import PromptComparison, PromptVersion, SavedPromptSnapshot
from promptura.versioning.store import VersionStore

logger = logging.getLogger(__name__)

MAX_COMPARISONS_PER_USER = 100
LOCK_TIMEOUT_SECONDS = 10
LOCK_BLOCKING_TIMEOUT_SECONDS = 5


class RedisVersionStore(VersionStore):
    """
    Version rows in Redis

    Layout:
    - ``prompt_version:{id}``: version JSON
    - ``prompt_versions:{prompt_id}``: sorted set of version ids scored by version_number
    - ``saved_prompt:{prompt_id}``: denormalized snapshot JSON
    - ``prompt_comparisons:{user_id}``: newest-first list of comparison JSON
    - ``prompt_lock:{prompt_id}``: advisory lock shared by all processes
    """

    def __init__(self, settings: Optional[Settings] = None):
        settings = settings or Settings.from_env()
        self.host = settings.redis_host
        self.port = settings.redis_port
        self.password = settings.redis_password
        self.db = settings.redis_db
        self.redis_client: Optional[redis.Redis] = None

    async def connect(self):
        """Connect to Redis"""
        try:
            self.redis_client = redis.from_url(
                f"redis://{self.host}:{self.port}/{self.db}",
                password=self.password,
                decode_responses=True,
            )
            await self.redis_client.ping()
        except redis.RedisError as e:
            logger.error(f"Redis connection failed: {e}")
            self.redis_client = None
            raise

    async def disconnect(self):
        """Disconnect"""
        if self.redis_client:
            await self.redis_client.aclose()
            self.redis_client = None

    @staticmethod
    def version_key(version_id: str) -> str:
        return f"prompt_version:{version_id}"

    @staticmethod
    def index_key(prompt_id: str) -> str:
        return f"prompt_versions:{prompt_id}"

    @staticmethod
    def snapshot_key(prompt_id: str) -> str:
        return f"saved_prompt:{prompt_id}"

    @staticmethod
    def comparisons_key(user_id: Optional[str]) -> str:
        return f"prompt_comparisons:{user_id or 'anonymous'}"

    def _client(self) -> redis.Redis:
        if self.redis_client is None:
            raise RuntimeError("Redis version store is not connected")
        return self.redis_client

    async def insert_version(self, row: PromptVersion) -> str:
        client = self._client()
        version_id = row.id or str(uuid.uuid4())
        row = row.model_copy(update={"id": version_id})

        async with client.pipeline(transaction=True) as pipe:
            pipe.set(self.version_key(version_id), row.model_dump_json())
            pipe.zadd(self.index_key(row.prompt_id), {version_id: row.version_number})
            await pipe.execute()
        return version_id

    async def get_version(self, version_id: str) -> Optional[PromptVersion]:
        data = await self._client().get(self.version_key(version_id))
        return PromptVersion.model_validate_json(data) if data else None

    async def update_version_current_flag(self, version_id: str, is_current: bool):
        version = await self.get_version(version_id)
        if version is None:
            logger.warning(f"Cannot update current flag: version {version_id} not found")
            return
        version = version.model_copy(update={"is_current": is_current, "updated_at": datetime.now()})
        await self._client().set(self.version_key(version_id), version.model_dump_json())

    async def delete_version(self, version_id: str):
        version = await self.get_version(version_id)
        if version is None:
            return

        async with self._client().pipeline(transaction=True) as pipe:
            pipe.delete(self.version_key(version_id))
            pipe.zrem(self.index_key(version.prompt_id), version_id)
            await pipe.execute()

    async def query_versions(self, prompt_id: str) -> List[PromptVersion]:
        client = self._client()
        version_ids = await client.zrevrange(self.index_key(prompt_id), 0, -1)
        if not version_ids:
            return []

        rows = await client.mget([self.version_key(version_id) for version_id in version_ids])
        return [PromptVersion.model_validate_json(data) for data in rows if data]

    async def update_owning_prompt_snapshot(
        self,
        prompt_id: str,
        title: str,
        content: str,
        highest_version_number: Optional[int] = None,
    ):
        if highest_version_number is None:
            previous = await self.get_prompt_snapshot(prompt_id)
            highest_version_number = previous.highest_version_number if previous else 0
        snapshot = SavedPromptSnapshot(
            prompt_id=prompt_id,
            title=title,
            content=content,
            highest_version_number=highest_version_number,
        )
        await self._client().set(self.snapshot_key(prompt_id), snapshot.model_dump_json())

    async def get_prompt_snapshot(self, prompt_id: str) -> Optional[SavedPromptSnapshot]:
        data = await self._client().get(self.snapshot_key(prompt_id))
        return SavedPromptSnapshot.model_validate_json(data) if data else None

    async def insert_comparison(self, row: PromptComparison) -> str:
        client = self._client()
        comparison_id = row.id or str(uuid.uuid4())
        row = row.model_copy(update={"id": comparison_id})
        key = self.comparisons_key(row.user_id)

        await client.lpush(key, row.model_dump_json())
        await client.ltrim(key, 0, MAX_COMPARISONS_PER_USER - 1)
        return comparison_id

    async def query_comparisons(self, user_id: Optional[str], limit: int = 20) -> List[PromptComparison]:
        rows = await self._client().lrange(self.comparisons_key(user_id), 0, limit - 1)
        return [PromptComparison.model_validate_json(data) for data in rows]

    def lock(self, prompt_id: str) -> Lock:
        return self._client().lock(
            f"prompt_lock:{prompt_id}",
            timeout=LOCK_TIMEOUT_SECONDS,
            blocking_timeout=LOCK_BLOCKING_TIMEOUT_SECONDS,
        )
