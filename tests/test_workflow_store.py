"""
Tests for the workflow template store and caches.
"""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from genstep.config import CompilerSettings
from genstep.errors import ErrorCategory, WorkflowCompilationError, WorkflowNotFoundError
from genstep.workflows import (
    InMemoryWorkflowCache,
    RedisWorkflowCache,
    WorkflowDefinition,
    WorkflowTemplateStore,
    create_workflow_cache,
)


def make_definition(key: str = "txt2img-hires", template: str = '{"1": {"inputs": {}}}'):
    return WorkflowDefinition(key=key, type="txt2img", name="Hires fix", template=template)


class TestWorkflowTemplateStore:
    """Tests for WorkflowTemplateStore."""

    @pytest.mark.asyncio
    async def test_get_from_cache(self):
        definition = make_definition()
        cache = AsyncMock()
        cache.get.return_value = definition
        store = WorkflowTemplateStore(cache)

        assert await store.get("txt2img-hires") is definition
        cache.get.assert_awaited_once_with("txt2img-hires")

    @pytest.mark.asyncio
    async def test_get_missing_raises(self):
        cache = AsyncMock()
        cache.get.return_value = None
        store = WorkflowTemplateStore(cache)

        with pytest.raises(WorkflowNotFoundError) as exc_info:
            await store.get("nope")
        assert exc_info.value.category == ErrorCategory.CONFIGURATION
        assert exc_info.value.details == {"key": "nope"}

    @pytest.mark.asyncio
    async def test_set_delegates(self):
        cache = AsyncMock()
        store = WorkflowTemplateStore(cache)
        definition = make_definition()

        await store.set("txt2img-hires", definition)
        cache.set.assert_awaited_once_with("txt2img-hires", definition)

    @pytest.mark.asyncio
    async def test_compile(self):
        store = WorkflowTemplateStore()
        await store.set(
            "k", make_definition("k", '{"1": {"inputs": {"text": "{{prompt}}"}}}')
        )
        graph = await store.compile("k", {"prompt": "hello"})
        assert graph == {"1": {"inputs": {"text": "hello"}}}

    @pytest.mark.asyncio
    async def test_compile_error_carries_key(self):
        store = WorkflowTemplateStore()
        await store.set("broken", make_definition("broken", '{"1": '))

        with pytest.raises(WorkflowCompilationError) as exc_info:
            await store.compile("broken", {})
        assert exc_info.value.details["key"] == "broken"

    @pytest.mark.asyncio
    async def test_compiled_graphs_are_independent(self):
        store = WorkflowTemplateStore()
        await store.set("k", make_definition("k", '{"1": {"inputs": {"a": 1}}}'))

        first = await store.compile("k", {})
        first["1"]["inputs"]["a"] = 2
        second = await store.compile("k", {})
        assert second["1"]["inputs"]["a"] == 1


class TestInMemoryWorkflowCache:
    """Tests for InMemoryWorkflowCache."""

    @pytest.mark.asyncio
    async def test_set_get(self):
        cache = InMemoryWorkflowCache(maxsize=4, ttl=60)
        definition = make_definition()
        await cache.set("a", definition)
        assert await cache.get("a") == definition
        assert await cache.get("b") is None
        assert len(cache) == 1

    @pytest.mark.asyncio
    async def test_maxsize_evicts(self):
        cache = InMemoryWorkflowCache(maxsize=2, ttl=0)
        for key in ("a", "b", "c"):
            await cache.set(key, make_definition(key))
        assert len(cache) == 2

    @pytest.mark.asyncio
    async def test_clear(self):
        cache = InMemoryWorkflowCache()
        await cache.set("a", make_definition("a"))
        cache.clear()
        assert len(cache) == 0


class TestRedisWorkflowCache:
    """Tests for RedisWorkflowCache with a mocked client."""

    @pytest.mark.asyncio
    async def test_get_parses_definition(self):
        client = MagicMock()
        client.hget = AsyncMock(return_value=make_definition().to_json())
        cache = RedisWorkflowCache(hash_key="generation:workflows", client=client)

        definition = await cache.get("txt2img-hires")
        assert definition.name == "Hires fix"
        client.hget.assert_awaited_once_with("generation:workflows", "txt2img-hires")

    @pytest.mark.asyncio
    async def test_get_missing(self):
        client = MagicMock()
        client.hget = AsyncMock(return_value=None)
        cache = RedisWorkflowCache(client=client)
        assert await cache.get("nope") is None

    @pytest.mark.asyncio
    async def test_get_corrupt_returns_none(self):
        client = MagicMock()
        client.hget = AsyncMock(return_value=json.dumps({"key": "x"}))
        cache = RedisWorkflowCache(client=client)
        assert await cache.get("x") is None

    @pytest.mark.asyncio
    async def test_set_writes_json(self):
        client = MagicMock()
        client.hset = AsyncMock()
        cache = RedisWorkflowCache(hash_key="h", client=client)
        definition = make_definition()

        await cache.set("txt2img-hires", definition)
        client.hset.assert_awaited_once_with("h", "txt2img-hires", definition.to_json())


class TestCreateWorkflowCache:
    """Tests for the settings-driven cache factory."""

    def test_memory_backend(self):
        cache = create_workflow_cache(CompilerSettings(workflow_cache_backend="memory"))
        assert isinstance(cache, InMemoryWorkflowCache)

    def test_redis_backend(self):
        cache = create_workflow_cache(CompilerSettings(workflow_cache_backend="redis"))
        assert isinstance(cache, RedisWorkflowCache)

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            create_workflow_cache(CompilerSettings(workflow_cache_backend="disk"))
