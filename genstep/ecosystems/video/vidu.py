"""
Vidu (videoGen).

Besides plain text/image to video, Vidu animates between a first and last
frame and generates from reference images.
"""

from __future__ import annotations

from genstep.context import Ecosystem, ViduContext
from genstep.steps import StepTemplate, StepType

from ..base import (
    HandlerContext,
    aspect_ratio_value,
    check_image_count,
    ecosystem_handler,
    image_urls,
    video_operation,
)

VIDU_WORKFLOWS = ("txt2vid", "img2vid", "img2vid:first-last-frame", "img2vid:ref2vid")


def vidu_operation(data: ViduContext) -> str:
    if data.workflow == "img2vid:first-last-frame":
        return "first-last-frame-to-video"
    if data.workflow == "img2vid:ref2vid":
        return "reference-to-video"
    return video_operation(data)


@ecosystem_handler(
    Ecosystem.VIDU,
    base_models=("Vidu",),
    workflows={workflow: StepType.VIDEO_GEN for workflow in VIDU_WORKFLOWS},
)
def create_vidu_input(data: ViduContext, ctx: HandlerContext) -> StepTemplate:
    check_image_count(data, data.base_model)
    return StepTemplate.create(
        StepType.VIDEO_GEN,
        {
            "engine": "vidu",
            "model": "q1",
            "operation": vidu_operation(data),
            "prompt": data.prompt,
            "style": data.style,
            "movementAmplitude": data.movement_amplitude,
            "aspectRatio": aspect_ratio_value(data),
            "duration": data.duration,
            "enablePromptEnhancer": data.enhance_prompt,
            "images": image_urls(data),
            "seed": data.seed,
        },
    )
