"""Google Imagen 4 (imageGen, text to image only)."""

from __future__ import annotations

from genstep.context import Ecosystem, Imagen4Context
from genstep.steps import StepTemplate, StepType

from ..base import HandlerContext, ecosystem_handler


@ecosystem_handler(
    Ecosystem.IMAGEN4,
    base_models=("Imagen4",),
    workflows={"txt2img": StepType.IMAGE_GEN},
)
def create_imagen4_input(data: Imagen4Context, ctx: HandlerContext) -> StepTemplate:
    return StepTemplate.create(
        StepType.IMAGE_GEN,
        {
            "engine": "google",
            "model": "imagen4",
            "operation": "createImage",
            "prompt": data.prompt,
            "negativePrompt": data.negative_prompt,
            "aspectRatio": data.aspect_ratio.value if data.aspect_ratio else None,
            "seed": data.seed,
            "quantity": data.quantity,
        },
    )
