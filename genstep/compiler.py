"""
Step compiler: generation context -> StepTemplate.

Dispatch is two-level. The workflow switch routes standalone workflows
(frame interpolation, upscaling, background removal) to fixed builders;
every other workflow falls through to the ecosystem registry, where the
handler's table must list the requested base model and workflow.

Usage:
    step = await compile_step({
        "ecosystem": "Flux2Klein",
        "baseModel": "Flux2Klein_9B",
        "workflow": "txt2img",
        "prompt": "a lighthouse at dusk",
        "aspectRatio": {"width": 1024, "height": 1024},
    })
    payload = step.to_dict()
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .comfy import create_comfy_input
from .config import CompilerSettings, get_settings
from .context import (
    BackgroundRemovalContext,
    GenerationContext,
    ImageUpscaleContext,
    VideoInterpolationContext,
    VideoUpscaleContext,
    parse_context,
)
from .ecosystems import AirLookup, EcosystemRegistry, HandlerContext, get_registry
from .errors import UnsupportedWorkflowError
from .routing import RoutingDecision, Switch, record_decision
from .steps import StepTemplate, StepType
from .workflows import WorkflowTemplateStore, get_workflow_store

logger = logging.getLogger(__name__)


# =============================================================================
# Standalone workflow builders
# =============================================================================


def build_video_interpolation(data: VideoInterpolationContext, ctx: HandlerContext) -> StepTemplate:
    return StepTemplate.create(
        StepType.VIDEO_INTERPOLATION,
        {"video": data.video.url, "interpolationFactor": data.interpolation_factor},
    )


def build_video_upscale(data: VideoUpscaleContext, ctx: HandlerContext) -> StepTemplate:
    return StepTemplate.create(
        StepType.VIDEO_UPSCALER,
        {"video": data.video.url, "scaleFactor": data.scale_factor},
    )


async def build_image_upscale(data: ImageUpscaleContext, ctx: HandlerContext) -> StepTemplate:
    source = data.source
    return await create_comfy_input(
        ctx.workflows,
        key="img2img-upscale",
        params={
            "image": source.url,
            "width": source.width,
            "height": source.height,
            "upscale": data.scale_factor,
        },
        quantity=data.quantity,
    )


async def build_background_removal(
    data: BackgroundRemovalContext, ctx: HandlerContext
) -> StepTemplate:
    source = data.source
    return await create_comfy_input(
        ctx.workflows,
        key="img2img-background-removal",
        params={"image": source.url, "width": source.width, "height": source.height},
        quantity=data.quantity,
    )


STANDALONE_BUILDERS = {
    "vid2vid:interpolate": build_video_interpolation,
    "vid2vid:upscale": build_video_upscale,
    "img2img:upscale": build_image_upscale,
    "img2img:remove-background": build_background_removal,
}


# =============================================================================
# Compiler
# =============================================================================


class StepCompiler:
    """
    Compiles generation contexts against one registry and template store.

    Example:
        compiler = StepCompiler(workflows=WorkflowTemplateStore(cache))
        step = await compiler.compile(ctx)
    """

    def __init__(
        self,
        *,
        registry: EcosystemRegistry | None = None,
        workflows: WorkflowTemplateStore | None = None,
        settings: CompilerSettings | None = None,
    ):
        self.settings = settings if settings is not None else get_settings()
        self.registry = registry if registry is not None else get_registry()
        self.workflows = workflows if workflows is not None else get_workflow_store()
        self._router = Switch(
            key=lambda data: data.workflow,
            cases=dict(STANDALONE_BUILDERS),
            default=self._compile_ecosystem,
            key_name="workflow",
        )

    async def compile(
        self,
        data: Mapping[str, Any] | GenerationContext,
        *,
        airs: AirLookup | None = None,
        decisions: list[RoutingDecision] | None = None,
    ) -> StepTemplate:
        """
        Compile one request.

        Raises:
            InvalidContextError: The request does not validate
            UnsupportedWorkflowError: No handler serves the request
            WorkflowNotFoundError: A comfy template is missing from the cache
            WorkflowCompilationError: A comfy template fails to compile
        """
        context = parse_context(data)
        handler_ctx = HandlerContext(
            airs=airs if airs is not None else AirLookup.from_context(context),
            workflows=self.workflows,
            settings=self.settings,
            routing_decisions=decisions if decisions is not None else [],
        )
        step = await self._router.route(context, handler_ctx, decisions=handler_ctx.routing_decisions)
        logger.debug(f"[compiler] {context.workflow} -> {step.type.value}")
        return step

    async def _compile_ecosystem(self, data: Any, ctx: HandlerContext) -> StepTemplate:
        handler = self.registry.get(data.ecosystem)
        if handler is None or not handler.supports(data.base_model, data.workflow):
            logger.error(
                f"[router] Unsupported workflow {data.workflow} "
                f"for {data.ecosystem}/{data.base_model}"
            )
            raise UnsupportedWorkflowError(
                f"Workflow '{data.workflow}' is not supported for "
                f"{data.ecosystem}/{data.base_model}",
                workflow=data.workflow,
                ecosystem=data.ecosystem,
                base_model=data.base_model,
            )

        record_decision(
            ctx.routing_decisions,
            "Registry(ecosystem)",
            handler.name,
            condition=f"ecosystem = '{data.ecosystem}', baseModel = '{data.base_model}'",
            metadata={"step_type": handler.step_type(data.workflow).value},
        )
        return await handler(data, ctx)


async def compile_step(
    ctx: Mapping[str, Any] | GenerationContext,
    *,
    registry: EcosystemRegistry | None = None,
    workflows: WorkflowTemplateStore | None = None,
    airs: AirLookup | None = None,
    settings: CompilerSettings | None = None,
    decisions: list[RoutingDecision] | None = None,
) -> StepTemplate:
    """Compile a generation context into its orchestrator step."""
    compiler = StepCompiler(registry=registry, workflows=workflows, settings=settings)
    return await compiler.compile(ctx, airs=airs, decisions=decisions)


__all__ = [
    "STANDALONE_BUILDERS",
    "StepCompiler",
    "compile_step",
    "build_video_interpolation",
    "build_video_upscale",
    "build_image_upscale",
    "build_background_removal",
]
