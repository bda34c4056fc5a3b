"""Comfy step builder: template + params + resources -> comfy StepTemplate."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from genstep.constants import to_comfy_sampler
from genstep.steps import StepTemplate, StepType, remove_empty
from genstep.workflows import WorkflowTemplateStore

from .graph import ResourceToApply, apply_resources

logger = logging.getLogger(__name__)


async def create_comfy_input(
    store: WorkflowTemplateStore,
    *,
    key: str,
    params: Mapping[str, Any],
    resources: Sequence[ResourceToApply] = (),
    quantity: int = 1,
) -> StepTemplate:
    """
    Build a comfy step from a stored workflow template.

    A ``sampler`` param holding a UI sampler name is converted to the comfy
    ``sampler``/``scheduler`` pair before compilation. ``imageMetadata``
    records the params as the caller supplied them.

    Raises:
        WorkflowNotFoundError: Unknown template key
        WorkflowCompilationError: Template and params do not produce valid JSON
    """
    workflow_params = dict(params)
    if "sampler" in workflow_params:
        comfy_sampler = to_comfy_sampler(workflow_params["sampler"])
        workflow_params["sampler"] = comfy_sampler.sampler
        workflow_params["scheduler"] = comfy_sampler.scheduler

    graph = await store.compile(key, workflow_params)
    apply_resources(graph, resources)

    logger.debug(f"[comfy] Built {key} workflow with {len(graph)} nodes")
    return StepTemplate(
        type=StepType.COMFY,
        input={
            "quantity": quantity,
            "comfyWorkflow": graph,
            "imageMetadata": json.dumps(remove_empty(dict(params))),
        },
    )


__all__ = ["create_comfy_input"]
