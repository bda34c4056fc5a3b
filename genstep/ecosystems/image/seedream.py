"""Seedream (imageGen). The model version id selects the engine version."""

from __future__ import annotations

from genstep.context import Ecosystem, SeedreamContext
from genstep.steps import StepTemplate, StepType

from ..base import HandlerContext, check_image_count, ecosystem_handler, image_operation, image_urls

# Seedream version id -> engine version
SEEDREAM_VERSIONS: dict[int, str] = {
    2208278: "v4",
}
DEFAULT_SEEDREAM_VERSION = "v4"


@ecosystem_handler(
    Ecosystem.SEEDREAM,
    base_models=("Seedream",),
    workflows={"txt2img": StepType.IMAGE_GEN, "img2img:edit": StepType.IMAGE_GEN},
)
def create_seedream_input(data: SeedreamContext, ctx: HandlerContext) -> StepTemplate:
    check_image_count(data, data.base_model)
    version = (
        SEEDREAM_VERSIONS.get(data.model.id, DEFAULT_SEEDREAM_VERSION)
        if data.model is not None
        else DEFAULT_SEEDREAM_VERSION
    )
    return StepTemplate.create(
        StepType.IMAGE_GEN,
        {
            "engine": "seedream",
            "version": version,
            "operation": image_operation(data),
            "prompt": data.prompt,
            "width": data.aspect_ratio.width if data.aspect_ratio else None,
            "height": data.aspect_ratio.height if data.aspect_ratio else None,
            "guidanceScale": data.guidance_scale,
            "images": image_urls(data),
            "seed": data.seed,
            "quantity": data.quantity,
        },
    )
