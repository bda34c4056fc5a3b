"""Google Nano Banana (imageGen)."""

from __future__ import annotations

from genstep.context import Ecosystem, NanoBananaContext
from genstep.steps import StepTemplate, StepType

from ..base import HandlerContext, check_image_count, ecosystem_handler, image_operation, image_urls


@ecosystem_handler(
    Ecosystem.NANO_BANANA,
    base_models=("NanoBanana",),
    workflows={"txt2img": StepType.IMAGE_GEN, "img2img:edit": StepType.IMAGE_GEN},
)
def create_nano_banana_input(data: NanoBananaContext, ctx: HandlerContext) -> StepTemplate:
    check_image_count(data, data.base_model)
    return StepTemplate.create(
        StepType.IMAGE_GEN,
        {
            "engine": "google",
            "model": "nano-banana",
            "operation": image_operation(data),
            "prompt": data.prompt,
            "images": image_urls(data),
            "seed": data.seed,
            "quantity": data.quantity,
        },
    )
