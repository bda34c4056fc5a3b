"""
Workflow Template Store.

Thin async facade over a WorkflowCache: fetches definitions by key and
compiles them with request parameters. Fetching is the only suspending step
of a compilation.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from genstep.config import get_settings
from genstep.errors import WorkflowCompilationError, WorkflowNotFoundError

from .cache import InMemoryWorkflowCache, WorkflowCache, create_workflow_cache
from .schemas import WorkflowDefinition
from .template import compile_template

logger = logging.getLogger(__name__)


class WorkflowTemplateStore:
    """
    Read-mostly store of comfy workflow templates.

    Example:
        store = WorkflowTemplateStore(RedisWorkflowCache())
        graph = await store.compile("txt2img-hires", {"prompt": "a cat", ...})
    """

    def __init__(self, cache: WorkflowCache | None = None):
        self._cache = cache if cache is not None else InMemoryWorkflowCache()

    @property
    def cache(self) -> WorkflowCache:
        return self._cache

    async def get(self, key: str) -> WorkflowDefinition:
        """
        Get a workflow definition.

        Raises:
            WorkflowNotFoundError: Key absent from the cache
        """
        definition = await self._cache.get(key)
        if definition is None:
            logger.error(f"[workflow_store] Workflow definition not found: {key}")
            raise WorkflowNotFoundError(key)
        return definition

    async def set(self, key: str, definition: WorkflowDefinition) -> None:
        await self._cache.set(key, definition)
        logger.info(f"[workflow_store] Stored workflow definition {key} ({definition.name})")

    async def compile(self, key: str, params: Mapping[str, Any]) -> dict[str, Any]:
        """
        Fetch a template and substitute params.

        Raises:
            WorkflowNotFoundError: Key absent from the cache
            WorkflowCompilationError: Template and params do not produce valid JSON
        """
        definition = await self.get(key)
        try:
            return compile_template(definition.template, params)
        except WorkflowCompilationError as e:
            logger.error(f"[workflow_store] Failed to compile {key}: {e}")
            e.details.setdefault("key", key)
            raise


# Global store instance
_global_store: WorkflowTemplateStore | None = None


def get_workflow_store() -> WorkflowTemplateStore:
    """
    Get the process-wide template store.

    Built on first use from get_settings(); publishers and compilers share it.
    """
    global _global_store
    if _global_store is None:
        _global_store = WorkflowTemplateStore(create_workflow_cache(get_settings()))
    return _global_store


def set_workflow_store(store: WorkflowTemplateStore) -> None:
    """Set the process-wide template store (for testing)."""
    global _global_store
    _global_store = store


def reset_workflow_store() -> None:
    global _global_store
    _global_store = None


__all__ = [
    "WorkflowTemplateStore",
    "get_workflow_store",
    "set_workflow_store",
    "reset_workflow_store",
]
