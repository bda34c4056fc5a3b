"""
Workflow definition caches.

The template store reads definitions through the WorkflowCache protocol:

- InMemoryWorkflowCache: process-local, TTL + size bounded (cachetools)
- RedisWorkflowCache: the shared Redis hash the publisher writes to

Usage:
    cache = create_workflow_cache(get_settings())
    store = WorkflowTemplateStore(cache)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol

from cachetools import TTLCache
from pydantic import ValidationError

from .schemas import WorkflowDefinition

if TYPE_CHECKING:
    from genstep.config import CompilerSettings

logger = logging.getLogger(__name__)


class WorkflowCache(Protocol):
    """Protocol for workflow definition caching."""

    async def get(self, key: str) -> WorkflowDefinition | None:
        """Get a definition by key, None if absent."""
        ...

    async def set(self, key: str, definition: WorkflowDefinition) -> None:
        """Store a definition."""
        ...


class InMemoryWorkflowCache:
    """
    In-memory cache with TTL and size limits.

    Configuration:
        - maxsize: Maximum number of entries (default 256)
        - ttl: Entry lifetime in seconds (default 0, never expires)
    """

    def __init__(self, maxsize: int = 256, ttl: int = 0):
        self._maxsize = maxsize
        self._ttl = ttl
        # A zero TTL means entries never expire
        self._cache: TTLCache[str, WorkflowDefinition] = TTLCache(
            maxsize=maxsize, ttl=ttl if ttl > 0 else float("inf")
        )
        logger.debug(f"[workflow_cache] Using TTLCache (maxsize={maxsize}, ttl={ttl}s)")

    async def get(self, key: str) -> WorkflowDefinition | None:
        return self._cache.get(key)

    async def set(self, key: str, definition: WorkflowDefinition) -> None:
        self._cache[key] = definition

    def clear(self) -> None:
        """Clear all cached entries."""
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)


class RedisWorkflowCache:
    """
    Redis-backed workflow cache.

    Storage Format:
        - Key: hash ``generation:workflows`` (configurable)
        - Field: workflow key
        - Value: JSON serialized WorkflowDefinition

    Example:
        cache = RedisWorkflowCache(redis_url="redis://localhost:6379")
        definition = await cache.get("txt2img-hires")
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379",
        hash_key: str = "generation:workflows",
        client: Any = None,
    ) -> None:
        """
        Initialize Redis cache.

        Args:
            redis_url: Redis connection URL
            hash_key: Hash holding all workflow definitions
            client: Pre-built redis.asyncio client (skips connection setup)
        """
        self._redis_url = redis_url
        self._hash_key = hash_key
        self._client: Any = client  # redis.asyncio.Redis

    async def _get_client(self) -> Any:
        """Get or create Redis client."""
        if self._client is None:
            try:
                import redis.asyncio as aioredis

                self._client = aioredis.from_url(
                    self._redis_url,
                    encoding="utf-8",
                    decode_responses=True,
                )
            except ImportError:
                raise ImportError(
                    "redis package required for RedisWorkflowCache. "
                    "Install with: pip install genstep[redis]"
                )
        return self._client

    async def get(self, key: str) -> WorkflowDefinition | None:
        client = await self._get_client()
        data = await client.hget(self._hash_key, key)
        if data is None:
            return None

        try:
            return WorkflowDefinition.from_json(data)
        except ValidationError as e:
            logger.error(f"[workflow_cache:redis] Corrupt definition for {key}: {e}")
            return None

    async def set(self, key: str, definition: WorkflowDefinition) -> None:
        client = await self._get_client()
        await client.hset(self._hash_key, key, definition.to_json())
        logger.debug(f"[workflow_cache:redis] Stored definition {key}")

    async def close(self) -> None:
        """Close the Redis connection."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None


def create_workflow_cache(settings: CompilerSettings) -> WorkflowCache:
    """
    Create a workflow cache from settings.

    Raises:
        ValueError: Unknown backend
    """
    backend = settings.workflow_cache_backend
    if backend == "memory":
        return InMemoryWorkflowCache(
            maxsize=settings.workflow_cache_size,
            ttl=settings.workflow_cache_ttl,
        )
    elif backend == "redis":
        return RedisWorkflowCache(
            redis_url=settings.redis_url,
            hash_key=settings.workflows_hash_key,
        )
    else:
        raise ValueError(f"Unknown workflow cache backend: {backend}")


__all__ = [
    "WorkflowCache",
    "InMemoryWorkflowCache",
    "RedisWorkflowCache",
    "create_workflow_cache",
]
