"""Mochi (videoGen, text to video only)."""

from __future__ import annotations

from genstep.context import Ecosystem, MochiContext
from genstep.steps import StepTemplate, StepType

from ..base import HandlerContext, ecosystem_handler


@ecosystem_handler(
    Ecosystem.MOCHI,
    base_models=("Mochi",),
    workflows={"txt2vid": StepType.VIDEO_GEN},
)
def create_mochi_input(data: MochiContext, ctx: HandlerContext) -> StepTemplate:
    return StepTemplate.create(
        StepType.VIDEO_GEN,
        {
            "engine": "mochi",
            "operation": "text-to-video",
            "prompt": data.prompt,
            "enablePromptEnhancer": data.enhance_prompt,
            "seed": data.seed,
        },
    )
