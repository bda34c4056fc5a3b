"""
Z-Image (imageGen): ZImageTurbo and ZImageBase.

Turbo is distilled and always runs at 9 steps with cfgScale 1.
"""

from __future__ import annotations

from genstep.context import Ecosystem, ZImageContext
from genstep.steps import StepTemplate, StepType

from ..base import HandlerContext, ecosystem_handler, lora_list

TURBO_STEPS = 9
TURBO_CFG_SCALE = 1.0
BASE_STEPS = 30
BASE_CFG_SCALE = 4.0


@ecosystem_handler(
    Ecosystem.Z_IMAGE,
    base_models=("ZImageTurbo", "ZImageBase"),
    workflows={"txt2img": StepType.IMAGE_GEN},
)
async def create_z_image_input(data: ZImageContext, ctx: HandlerContext) -> StepTemplate:
    if data.base_model == "ZImageTurbo":
        model, steps, cfg_scale = "turbo", TURBO_STEPS, TURBO_CFG_SCALE
    else:
        model = "base"
        steps = data.steps or BASE_STEPS
        cfg_scale = data.cfg_scale if data.cfg_scale is not None else BASE_CFG_SCALE

    return StepTemplate.create(
        StepType.IMAGE_GEN,
        {
            "engine": "z-image",
            "model": model,
            "operation": "createImage",
            "prompt": data.prompt,
            "negativePrompt": data.negative_prompt,
            "width": data.aspect_ratio.width if data.aspect_ratio else None,
            "height": data.aspect_ratio.height if data.aspect_ratio else None,
            "steps": steps,
            "cfgScale": cfg_scale,
            "loras": lora_list(data.resources, ctx.airs),
            "seed": data.seed,
            "quantity": data.quantity,
        },
    )
