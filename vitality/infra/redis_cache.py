from typing import Optional

from ..settings import settings
from .redis_client import get_redis


class RedisArtifactStore:
    """Artifact store backed by Redis. Keys carry no TTL: entries live as long as the session."""

    def __init__(self, namespace: str, prefix: Optional[str] = None):
        self.namespace = namespace
        self.prefix = prefix or settings.cache_key_prefix

    def key_for(self, key: str) -> str:
        return f"{self.prefix}:{self.namespace}:{key}"

    async def get(self, key: str) -> Optional[str]:
        r = await get_redis()
        return await r.get(self.key_for(key))

    async def set(self, key: str, locator: str) -> None:
        r = await get_redis()
        await r.set(self.key_for(key), locator)
