"""Pony V7 (textToImage, AuraFlow based)."""

from __future__ import annotations

from genstep.context import Ecosystem, PonyV7Context
from genstep.steps import StepTemplate, StepType

from ..base import HandlerContext, ecosystem_handler, model_air, text_to_image_step

DEFAULT_STEPS = 40
DEFAULT_CFG_SCALE = 3.5


@ecosystem_handler(
    Ecosystem.PONY_V7,
    base_models=("PonyV7",),
    workflows={"txt2img": StepType.TEXT_TO_IMAGE},
)
def create_pony_v7_input(data: PonyV7Context, ctx: HandlerContext) -> StepTemplate:
    return text_to_image_step(
        data,
        ctx,
        model=model_air(data, ctx, "PonyV7"),
        resources=data.resources,
        sampler=data.sampler,
        steps=data.steps or DEFAULT_STEPS,
        cfg_scale=data.cfg_scale if data.cfg_scale is not None else DEFAULT_CFG_SCALE,
    )
