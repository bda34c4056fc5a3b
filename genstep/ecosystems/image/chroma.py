"""Chroma (textToImage)."""

from __future__ import annotations

from genstep.context import ChromaContext, Ecosystem
from genstep.steps import StepTemplate, StepType

from ..base import HandlerContext, ecosystem_handler, model_air, text_to_image_step

DEFAULT_STEPS = 26
DEFAULT_CFG_SCALE = 4.0


@ecosystem_handler(
    Ecosystem.CHROMA,
    base_models=("Chroma",),
    workflows={"txt2img": StepType.TEXT_TO_IMAGE},
)
def create_chroma_input(data: ChromaContext, ctx: HandlerContext) -> StepTemplate:
    return text_to_image_step(
        data,
        ctx,
        model=model_air(data, ctx, "Chroma"),
        resources=data.resources,
        sampler=data.sampler,
        steps=data.steps or DEFAULT_STEPS,
        cfg_scale=data.cfg_scale if data.cfg_scale is not None else DEFAULT_CFG_SCALE,
    )
