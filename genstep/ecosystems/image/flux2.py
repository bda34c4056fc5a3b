"""
Flux.2 and Flux.2 Klein (imageGen).

Klein ships distilled (9B, 4B) and base variants. Distilled variants run
with pinned sampling and ignore caller steps/cfgScale; base variants only
default them.
"""

from __future__ import annotations

from dataclasses import dataclass

from genstep.context import Ecosystem, Flux2Context, Flux2KleinContext
from genstep.steps import StepTemplate, StepType

from ..base import (
    HandlerContext,
    check_image_count,
    ecosystem_handler,
    image_operation,
    image_urls,
    lora_list,
)

IMAGE_WORKFLOWS = {"txt2img": StepType.IMAGE_GEN, "img2img:edit": StepType.IMAGE_GEN}

# Flux.2 models accepting LoRAs
FLUX2_LORA_MODELS = frozenset({"dev"})


@ecosystem_handler(Ecosystem.FLUX2, base_models=("Flux2",), workflows=IMAGE_WORKFLOWS)
def create_flux2_input(data: Flux2Context, ctx: HandlerContext) -> StepTemplate:
    check_image_count(data, data.base_model)
    resources = data.resources if data.model_version in FLUX2_LORA_MODELS else ()
    return StepTemplate.create(
        StepType.IMAGE_GEN,
        {
            "engine": "flux2",
            "model": data.model_version,
            "operation": image_operation(data),
            "prompt": data.prompt,
            "width": data.aspect_ratio.width if data.aspect_ratio else None,
            "height": data.aspect_ratio.height if data.aspect_ratio else None,
            "cfgScale": data.cfg_scale,
            "steps": data.steps,
            "images": image_urls(data),
            "loras": lora_list(resources, ctx.airs),
            "seed": data.seed,
            "quantity": data.quantity,
        },
    )


@dataclass(frozen=True)
class KleinVariant:
    model_version: str
    distilled: bool
    steps: int
    cfg_scale: float


KLEIN_VARIANTS: dict[str, KleinVariant] = {
    "Flux2Klein_9B": KleinVariant("9b", distilled=True, steps=12, cfg_scale=1),
    "Flux2Klein_9B_base": KleinVariant("9b-base", distilled=False, steps=28, cfg_scale=4),
    "Flux2Klein_4B": KleinVariant("4b", distilled=True, steps=12, cfg_scale=1),
    "Flux2Klein_4B_base": KleinVariant("4b-base", distilled=False, steps=28, cfg_scale=4),
}

DEFAULT_SAMPLE_METHOD = "euler"
DEFAULT_SCHEDULE = "simple"


@ecosystem_handler(
    Ecosystem.FLUX2_KLEIN,
    base_models=tuple(KLEIN_VARIANTS),
    workflows=IMAGE_WORKFLOWS,
)
def create_flux2_klein_input(data: Flux2KleinContext, ctx: HandlerContext) -> StepTemplate:
    check_image_count(data, data.base_model)
    variant = KLEIN_VARIANTS[data.base_model]

    if variant.distilled:
        steps, cfg_scale = variant.steps, variant.cfg_scale
    else:
        steps = data.steps or variant.steps
        cfg_scale = data.cfg_scale if data.cfg_scale is not None else variant.cfg_scale

    return StepTemplate.create(
        StepType.IMAGE_GEN,
        {
            "engine": "flux2",
            "model": "klein",
            "modelVersion": variant.model_version,
            "operation": image_operation(data),
            "prompt": data.prompt,
            "negativePrompt": data.negative_prompt,
            "width": data.aspect_ratio.width if data.aspect_ratio else None,
            "height": data.aspect_ratio.height if data.aspect_ratio else None,
            "cfgScale": cfg_scale,
            "steps": steps,
            "sampleMethod": data.sample_method or DEFAULT_SAMPLE_METHOD,
            "schedule": data.schedule or DEFAULT_SCHEDULE,
            "images": image_urls(data),
            "loras": lora_list(data.resources, ctx.airs),
            "seed": data.seed,
            "quantity": data.quantity,
        },
    )
