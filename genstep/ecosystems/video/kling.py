"""Kling (videoGen)."""

from __future__ import annotations

from genstep.context import Ecosystem, KlingContext
from genstep.steps import StepTemplate, StepType

from ..base import (
    HandlerContext,
    aspect_ratio_value,
    check_image_count,
    ecosystem_handler,
    image_urls,
    video_operation,
)

# Model versions only offered in professional mode
PROFESSIONAL_ONLY = frozenset({"v2_5_turbo"})


@ecosystem_handler(
    Ecosystem.KLING,
    base_models=("Kling",),
    workflows={"txt2vid": StepType.VIDEO_GEN, "img2vid": StepType.VIDEO_GEN},
)
def create_kling_input(data: KlingContext, ctx: HandlerContext) -> StepTemplate:
    check_image_count(data, data.base_model)
    mode = "professional" if data.model_version in PROFESSIONAL_ONLY else data.mode
    return StepTemplate.create(
        StepType.VIDEO_GEN,
        {
            "engine": "kling",
            "model": data.model_version,
            "mode": mode,
            "operation": video_operation(data),
            "prompt": data.prompt,
            "negativePrompt": data.negative_prompt,
            "cfgScale": data.cfg_scale,
            "aspectRatio": aspect_ratio_value(data),
            "duration": data.duration,
            "images": image_urls(data),
            "seed": data.seed,
        },
    )
