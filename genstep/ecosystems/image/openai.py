"""OpenAI gpt-image-1 (imageGen)."""

from __future__ import annotations

from genstep.context import Ecosystem, OpenAIContext
from genstep.steps import StepTemplate, StepType

from ..base import HandlerContext, check_image_count, ecosystem_handler, image_operation, image_urls


@ecosystem_handler(
    Ecosystem.OPENAI,
    base_models=("OpenAI",),
    workflows={"txt2img": StepType.IMAGE_GEN, "img2img:edit": StepType.IMAGE_GEN},
)
def create_openai_input(data: OpenAIContext, ctx: HandlerContext) -> StepTemplate:
    check_image_count(data, data.base_model)
    size = f"{data.aspect_ratio.width}x{data.aspect_ratio.height}" if data.aspect_ratio else None
    return StepTemplate.create(
        StepType.IMAGE_GEN,
        {
            "engine": "openai",
            "model": "gpt-image-1",
            "operation": image_operation(data),
            "prompt": data.prompt,
            "size": size,
            "quality": data.quality,
            "background": data.background,
            "images": image_urls(data),
            "quantity": data.quantity,
        },
    )
