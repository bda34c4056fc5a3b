"""
HiDream (textToImage).

The three variants are distilled to different degrees and each runs with
fixed sampling; caller steps/cfgScale are ignored.
"""

from __future__ import annotations

from genstep.context import Ecosystem, HiDreamContext
from genstep.steps import StepTemplate, StepType

from ..base import HandlerContext, ecosystem_handler, model_air, text_to_image_step

# variant -> (sampler, steps, cfgScale)
HIDREAM_VARIANTS: dict[str, tuple[str, int, float]] = {
    "fast": ("LCM", 16, 1.0),
    "dev": ("LCM", 28, 1.0),
    "full": ("UniPC", 50, 5.0),
}


@ecosystem_handler(
    Ecosystem.HIDREAM,
    base_models=("HiDream",),
    workflows={"txt2img": StepType.TEXT_TO_IMAGE},
)
def create_hidream_input(data: HiDreamContext, ctx: HandlerContext) -> StepTemplate:
    sampler, steps, cfg_scale = HIDREAM_VARIANTS[data.variant]
    return text_to_image_step(
        data,
        ctx,
        model=model_air(data, ctx, "HiDream"),
        resources=data.resources,
        sampler=sampler,
        steps=steps,
        cfg_scale=cfg_scale,
    )
