"""
Workflow Template Store

Named comfy workflow templates, their caches, and the placeholder compiler.
"""

from .cache import InMemoryWorkflowCache, RedisWorkflowCache, WorkflowCache, create_workflow_cache
from .schemas import WorkflowDefinition
from .store import (
    WorkflowTemplateStore,
    get_workflow_store,
    reset_workflow_store,
    set_workflow_store,
)
from .template import compile_template

__all__ = [
    "WorkflowDefinition",
    "WorkflowCache",
    "InMemoryWorkflowCache",
    "RedisWorkflowCache",
    "create_workflow_cache",
    "WorkflowTemplateStore",
    "get_workflow_store",
    "set_workflow_store",
    "reset_workflow_store",
    "compile_template",
]
