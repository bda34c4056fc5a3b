"""Qwen-Image (imageGen): text to image and instruction editing."""

from __future__ import annotations

from genstep.context import Ecosystem, QwenContext
from genstep.steps import StepTemplate, StepType

from ..base import (
    HandlerContext,
    check_image_count,
    ecosystem_handler,
    image_operation,
    image_urls,
    lora_map,
)

DEFAULT_STEPS = 20
DEFAULT_CFG_SCALE = 2.5


@ecosystem_handler(
    Ecosystem.QWEN,
    base_models=("Qwen",),
    workflows={"txt2img": StepType.IMAGE_GEN, "img2img:edit": StepType.IMAGE_GEN},
)
def create_qwen_input(data: QwenContext, ctx: HandlerContext) -> StepTemplate:
    check_image_count(data, data.base_model)
    return StepTemplate.create(
        StepType.IMAGE_GEN,
        {
            "engine": "qwen",
            "model": "20b",
            "operation": image_operation(data),
            "prompt": data.prompt,
            "negativePrompt": data.negative_prompt,
            "width": data.aspect_ratio.width if data.aspect_ratio else None,
            "height": data.aspect_ratio.height if data.aspect_ratio else None,
            "cfgScale": data.cfg_scale if data.cfg_scale is not None else DEFAULT_CFG_SCALE,
            "steps": data.steps or DEFAULT_STEPS,
            "images": image_urls(data),
            "loras": lora_map(data.resources, ctx.airs),
            "seed": data.seed,
            "quantity": data.quantity,
        },
    )
