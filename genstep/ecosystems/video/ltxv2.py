"""Lightricks LTX Video 2 (videoGen)."""

from __future__ import annotations

from genstep.context import Ecosystem, LTXV2Context
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
    Ecosystem.LTXV2,
    base_models=("LTXV2",),
    workflows={"txt2vid": StepType.VIDEO_GEN, "img2vid": StepType.VIDEO_GEN},
)
def create_ltxv2_input(data: LTXV2Context, ctx: HandlerContext) -> StepTemplate:
    check_image_count(data, data.base_model)
    return StepTemplate.create(
        StepType.VIDEO_GEN,
        {
            "engine": "lightricks",
            "model": "ltx2",
            "operation": video_operation(data),
            "prompt": data.prompt,
            "negativePrompt": data.negative_prompt,
            "aspectRatio": aspect_ratio_value(data),
            "resolution": data.resolution,
            "duration": data.duration,
            "cfgScale": data.cfg_scale,
            "steps": data.steps,
            "generateAudio": data.generate_audio,
            "images": image_urls(data),
            "seed": data.seed,
        },
    )
