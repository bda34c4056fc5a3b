"""OpenAI Sora 2 (videoGen)."""

from __future__ import annotations

from genstep.context import Ecosystem, SoraContext
from genstep.steps import StepTemplate, StepType

from ..base import (
    HandlerContext,
    aspect_ratio_value,
    check_image_count,
    ecosystem_handler,
    image_urls,
    video_operation,
)


@ecosystem_handler(
    Ecosystem.SORA,
    base_models=("Sora2",),
    workflows={"txt2vid": StepType.VIDEO_GEN, "img2vid": StepType.VIDEO_GEN},
)
def create_sora_input(data: SoraContext, ctx: HandlerContext) -> StepTemplate:
    check_image_count(data, data.base_model)
    return StepTemplate.create(
        StepType.VIDEO_GEN,
        {
            "engine": "sora",
            "model": "sora-2-pro" if data.use_pro else "sora-2",
            "operation": video_operation(data),
            "prompt": data.prompt,
            "aspectRatio": aspect_ratio_value(data),
            "resolution": data.resolution,
            "duration": data.duration,
            "images": image_urls(data),
        },
    )
