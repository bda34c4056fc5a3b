"""Hunyuan Video (videoGen)."""

from __future__ import annotations

from genstep.context import Ecosystem, HunyuanContext
from genstep.steps import StepTemplate, StepType

from ..base import (
    HandlerContext,
    aspect_ratio_value,
    check_image_count,
    ecosystem_handler,
    image_urls,
    lora_list,
    video_operation,
)


@ecosystem_handler(
    Ecosystem.HUNYUAN,
    base_models=("HyV1",),
    workflows={"txt2vid": StepType.VIDEO_GEN, "img2vid": StepType.VIDEO_GEN},
)
def create_hunyuan_input(data: HunyuanContext, ctx: HandlerContext) -> StepTemplate:
    check_image_count(data, data.base_model)
    return StepTemplate.create(
        StepType.VIDEO_GEN,
        {
            "engine": "hunyuan",
            "operation": video_operation(data),
            "prompt": data.prompt,
            "negativePrompt": data.negative_prompt,
            "aspectRatio": aspect_ratio_value(data),
            "duration": data.duration,
            "cfgScale": data.cfg_scale,
            "steps": data.steps,
            "images": image_urls(data),
            "loras": lora_list(data.resources, ctx.airs),
            "seed": data.seed,
        },
    )
