"""
Flux.1 (Flux1, FluxKrea) and Flux.1 Kontext.

Flux.1 modes are selected by the checkpoint version id (see FLUX_MODES);
the draft workflow forces the draft mode. Kontext is an imageGen engine.
"""

from __future__ import annotations

from genstep.air import AIR
from genstep.constants import (
    DEFAULT_FLUX_MODE,
    FLUX_MODE_VERSIONS,
    FLUX_MODEL_ID,
    FLUX_MODES,
)
from genstep.context import Ecosystem, FluxContext, FluxKontextContext
from genstep.steps import StepTemplate, StepType

from ..base import (
    HandlerContext,
    check_image_count,
    ecosystem_handler,
    image_operation,
    image_urls,
    text_to_image_step,
)

# mode -> (steps, cfgScale) pinned regardless of caller values
PINNED_SAMPLING: dict[str, tuple[int, float]] = {
    "draft": (4, 1.0),
}
DEFAULT_STEPS = 28
DEFAULT_CFG_SCALE = 3.5

# Modes that accept additional networks
LORA_MODES = frozenset({"standard", "krea"})


def flux_mode(data: FluxContext) -> str:
    """Mode from the checkpoint version id, the workflow, or the base model."""
    if data.workflow == "txt2img:draft":
        return "draft"
    if data.model is not None:
        return FLUX_MODES.get(data.model.id, DEFAULT_FLUX_MODE)
    return "krea" if data.base_model == "FluxKrea" else DEFAULT_FLUX_MODE


def flux_mode_air(mode: str) -> str:
    return str(
        AIR(
            ecosystem="flux1",
            resource_type="checkpoint",
            model_id=FLUX_MODEL_ID,
            version_id=FLUX_MODE_VERSIONS[mode],
        )
    )


@ecosystem_handler(
    Ecosystem.FLUX1,
    base_models=("Flux1", "FluxKrea"),
    workflows={"txt2img": StepType.TEXT_TO_IMAGE, "txt2img:draft": StepType.TEXT_TO_IMAGE},
)
def create_flux_input(data: FluxContext, ctx: HandlerContext) -> StepTemplate:
    mode = flux_mode(data)
    if data.model is not None and data.model.id not in FLUX_MODES and mode != "draft":
        # Fine-tuned Flux checkpoint
        model = ctx.airs.get_or_throw(data.model.id)
    else:
        model = flux_mode_air(mode)

    steps, cfg_scale = PINNED_SAMPLING.get(
        mode,
        (
            data.steps or DEFAULT_STEPS,
            data.cfg_scale if data.cfg_scale is not None else DEFAULT_CFG_SCALE,
        ),
    )
    resources = data.resources if mode in LORA_MODES else ()
    ultra = mode == "ultra"

    return text_to_image_step(
        data,
        ctx,
        model=model,
        resources=resources,
        sampler=data.sampler,
        steps=None if ultra else steps,
        cfg_scale=None if ultra else cfg_scale,
        fluxMode=flux_mode_air(mode),
        fluxUltraRaw=data.flux_ultra_raw if ultra else None,
    )


# Kontext version id -> model
KONTEXT_MODELS: dict[int, str] = {
    1892509: "pro",
}
DEFAULT_KONTEXT_MODEL = "pro"


@ecosystem_handler(
    Ecosystem.FLUX1_KONTEXT,
    base_models=("Flux1Kontext",),
    workflows={"txt2img": StepType.IMAGE_GEN, "img2img:edit": StepType.IMAGE_GEN},
)
def create_flux_kontext_input(data: FluxKontextContext, ctx: HandlerContext) -> StepTemplate:
    check_image_count(data, data.base_model)
    model = (
        KONTEXT_MODELS.get(data.model.id, DEFAULT_KONTEXT_MODEL)
        if data.model is not None
        else DEFAULT_KONTEXT_MODEL
    )
    return StepTemplate.create(
        StepType.IMAGE_GEN,
        {
            "engine": "flux1-kontext",
            "model": model,
            "operation": image_operation(data),
            "prompt": data.prompt,
            "aspectRatio": data.aspect_ratio.value if data.aspect_ratio else None,
            "guidanceScale": data.cfg_scale,
            "steps": data.steps,
            "images": image_urls(data),
            "seed": data.seed,
            "quantity": data.quantity,
        },
    )
