"""
Wan video family (videoGen).

Ten base models spread over three engine versions. Each base model serves
text-to-video, image-to-video, or both; the table below drives both the
registry narrowing and the payload.
"""

from __future__ import annotations

from dataclasses import dataclass

from genstep.context import Ecosystem, WanContext
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

TXT2VID = "txt2vid"
IMG2VID = "img2vid"


@dataclass(frozen=True)
class WanVariant:
    version: str
    model: str | None
    workflows: tuple[str, ...]
    resolution: str | None = None
    supports_loras: bool = True


WAN_VARIANTS: dict[str, WanVariant] = {
    "WanVideo": WanVariant("v2.1", "14b", (TXT2VID, IMG2VID)),
    "WanVideo1_3B_T2V": WanVariant("v2.1", "1.3b", (TXT2VID,)),
    "WanVideo14B_T2V": WanVariant("v2.1", "14b", (TXT2VID,)),
    "WanVideo14B_I2V_480p": WanVariant("v2.1", "14b", (IMG2VID,), resolution="480p"),
    "WanVideo14B_I2V_720p": WanVariant("v2.1", "14b", (IMG2VID,), resolution="720p"),
    "WanVideo-22-TI2V-5B": WanVariant("v2.2", "5b", (TXT2VID, IMG2VID)),
    "WanVideo-22-I2V-A14B": WanVariant("v2.2", "a14b", (IMG2VID,)),
    "WanVideo-22-T2V-A14B": WanVariant("v2.2", "a14b", (TXT2VID,)),
    "WanVideo-25-T2V": WanVariant("v2.5", None, (TXT2VID,), supports_loras=False),
    "WanVideo-25-I2V": WanVariant("v2.5", None, (IMG2VID,), supports_loras=False),
}


@ecosystem_handler(
    Ecosystem.WAN,
    base_models=tuple(WAN_VARIANTS),
    workflows={TXT2VID: StepType.VIDEO_GEN, IMG2VID: StepType.VIDEO_GEN},
    base_model_workflows={name: variant.workflows for name, variant in WAN_VARIANTS.items()},
)
async def create_wan_input(data: WanContext, ctx: HandlerContext) -> StepTemplate:
    check_image_count(data, data.base_model)
    variant = WAN_VARIANTS[data.base_model]
    resources = data.resources if variant.supports_loras else ()

    return StepTemplate.create(
        StepType.VIDEO_GEN,
        {
            "engine": "wan",
            "version": variant.version,
            "model": variant.model,
            "operation": video_operation(data),
            "prompt": data.prompt,
            "negativePrompt": data.negative_prompt,
            "aspectRatio": aspect_ratio_value(data),
            "resolution": data.resolution or variant.resolution,
            "duration": data.duration,
            "cfgScale": data.cfg_scale,
            "steps": data.steps,
            "shift": data.shift,
            "enablePromptExpansion": data.enhance_prompt,
            "images": image_urls(data),
            "loras": lora_list(resources, ctx.airs),
            "seed": data.seed,
        },
    )
