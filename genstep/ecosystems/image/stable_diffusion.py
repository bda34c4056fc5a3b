"""
Stable Diffusion family (SD1, SD2, SDXL, Pony, Illustrious, NoobAI).

txt2img and the draft workflow compile to a textToImage step. img2img and
the face-fix / hires-fix variants run as comfy workflows, with the checkpoint,
LoRAs and VAE spliced into the stored template.
"""

from __future__ import annotations

import logging

from genstep.comfy import create_comfy_input
from genstep.constants import DRAFT_RESOURCES
from genstep.context import Ecosystem, ResourceData, ResourceModel, StableDiffusionContext
from genstep.steps import StepTemplate, StepType

from ..base import (
    HandlerContext,
    check_image_count,
    comfy_resources,
    ecosystem_handler,
    image_urls,
    require_model,
    require_size,
    resolve_seed,
    text_to_image_step,
)

logger = logging.getLogger(__name__)

DEFAULT_SAMPLER = "Euler"
DEFAULT_STEPS = 25
DEFAULT_CFG_SCALE = 7.0
DEFAULT_IMG2IMG_DENOISE = 0.75
DEFAULT_FIX_DENOISE = 0.4

# workflow -> stored comfy template key
COMFY_WORKFLOW_KEYS: dict[str, str] = {
    "img2img": "img2img",
    "txt2img:face-fix": "txt2img-facefix",
    "txt2img:hires-fix": "txt2img-hires",
    "img2img:face-fix": "img2img-facefix",
    "img2img:hires-fix": "img2img-hires",
}

SD_WORKFLOWS: dict[str, StepType] = {
    "txt2img": StepType.TEXT_TO_IMAGE,
    "txt2img:draft": StepType.TEXT_TO_IMAGE,
    **{workflow: StepType.COMFY for workflow in COMFY_WORKFLOW_KEYS},
}

SD_BASE_MODELS = ("SD1", "SD2", "SDXL", "Pony", "Illustrious", "NoobAI")


def _draft_resource(base_model: str) -> ResourceData:
    draft = DRAFT_RESOURCES[base_model]
    return ResourceData(
        id=draft.version_id,
        base_model=draft.base_model,
        model=ResourceModel(id=draft.model_id, type="LORA"),
    )


def _text_to_image(data: StableDiffusionContext, ctx: HandlerContext) -> StepTemplate:
    model = require_model(data, "for Stable Diffusion generation")
    require_size(data, "for Stable Diffusion generation")

    resources = list(data.resources)
    sampler = data.sampler or DEFAULT_SAMPLER
    steps = data.steps or DEFAULT_STEPS
    cfg_scale = data.cfg_scale if data.cfg_scale is not None else DEFAULT_CFG_SCALE

    if data.workflow == "txt2img:draft":
        draft = DRAFT_RESOURCES[data.base_model]
        draft_resource = _draft_resource(data.base_model)
        ctx.airs.add(draft_resource)
        resources.append(draft_resource)
        sampler, steps, cfg_scale = draft.sampler, draft.steps, draft.cfg_scale

    if data.vae is not None:
        resources.append(data.vae)

    return text_to_image_step(
        data,
        ctx,
        model=ctx.airs.get_or_throw(model.id),
        resources=resources,
        sampler=sampler,
        steps=steps,
        cfg_scale=cfg_scale,
        clipSkip=data.clip_skip,
    )


async def _comfy(data: StableDiffusionContext, ctx: HandlerContext) -> StepTemplate:
    model = require_model(data, "for comfy workflows")
    width, height = require_size(data, "for comfy workflows")
    check_image_count(data, data.base_model)

    params: dict[str, object] = {
        "prompt": data.prompt,
        "negativePrompt": data.negative_prompt,
        "seed": resolve_seed(data),
        "steps": data.steps or DEFAULT_STEPS,
        "cfgScale": data.cfg_scale if data.cfg_scale is not None else DEFAULT_CFG_SCALE,
        "sampler": data.sampler or DEFAULT_SAMPLER,
        "outputFormat": ctx.settings.default_output_format,
    }
    if data.workflow.startswith("img2img"):
        params["image"] = image_urls(data)[0]
        params["denoise"] = data.denoise if data.denoise is not None else DEFAULT_IMG2IMG_DENOISE
    else:
        params["width"] = width
        params["height"] = height
        params["denoise"] = data.denoise if data.denoise is not None else DEFAULT_FIX_DENOISE

    if data.workflow.endswith("hires-fix"):
        factor = ctx.settings.hires_upscale_factor
        params["upscaleWidth"] = round(width * factor)
        params["upscaleHeight"] = round(height * factor)

    return await create_comfy_input(
        ctx.workflows,
        key=COMFY_WORKFLOW_KEYS[data.workflow],
        params=params,
        resources=comfy_resources([model, *data.resources, data.vae], ctx.airs),
        quantity=data.quantity,
    )


@ecosystem_handler(
    Ecosystem.STABLE_DIFFUSION,
    base_models=SD_BASE_MODELS,
    workflows=SD_WORKFLOWS,
    # No draft LoRA exists for SD2
    base_model_workflows={"SD2": [w for w in SD_WORKFLOWS if w != "txt2img:draft"]},
)
async def create_stable_diffusion_input(
    data: StableDiffusionContext, ctx: HandlerContext
) -> StepTemplate:
    if data.workflow in COMFY_WORKFLOW_KEYS:
        logger.debug(f"[sd] {data.base_model} {data.workflow} -> comfy")
        return await _comfy(data, ctx)
    return _text_to_image(data, ctx)
