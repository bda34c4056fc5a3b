"""Google Veo 3 (videoGen)."""

from __future__ import annotations

from genstep.context import Ecosystem, Veo3Context
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
    Ecosystem.VEO3,
    base_models=("Veo3",),
    workflows={"txt2vid": StepType.VIDEO_GEN, "img2vid": StepType.VIDEO_GEN},
)
def create_veo3_input(data: Veo3Context, ctx: HandlerContext) -> StepTemplate:
    check_image_count(data, data.base_model)
    return StepTemplate.create(
        StepType.VIDEO_GEN,
        {
            "engine": "veo3",
            "model": "veo-3-fast" if data.fast_mode else "veo-3",
            "operation": video_operation(data),
            "prompt": data.prompt,
            "negativePrompt": data.negative_prompt,
            "aspectRatio": aspect_ratio_value(data),
            "duration": data.duration,
            "generateAudio": data.generate_audio,
            "enablePromptEnhancer": data.enhance_prompt,
            "images": image_urls(data),
            "seed": data.seed,
        },
    )
