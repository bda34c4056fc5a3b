"""
Generation context schemas.

The generation context is the normalized "generate an image/video" request.
It is a tagged union:

- Ecosystem variants, discriminated on ``ecosystem`` and narrowed on
  ``baseModel`` with Literal types. Each variant only declares the fields
  its backend understands.
- Standalone workflow variants (upscale, background removal, video
  interpolation) discriminated on ``workflow``. These bypass the ecosystem
  registry entirely.

Field names are snake_case in Python and camelCase on the wire.

Example:
    ctx = parse_context({
        "ecosystem": "Flux2Klein",
        "baseModel": "Flux2Klein_9B",
        "prompt": "a cat",
        "aspectRatio": {"width": 1024, "height": 1024},
    })
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

from .errors import InvalidContextError, UnsupportedWorkflowError

logger = logging.getLogger(__name__)


class Ecosystem(str, Enum):
    """Registry keys, one handler each."""

    STABLE_DIFFUSION = "StableDiffusion"
    FLUX1 = "Flux1"
    FLUX2 = "Flux2"
    FLUX2_KLEIN = "Flux2Klein"
    FLUX1_KONTEXT = "Flux1Kontext"
    QWEN = "Qwen"
    SEEDREAM = "Seedream"
    IMAGEN4 = "Imagen4"
    OPENAI = "OpenAI"
    NANO_BANANA = "NanoBanana"
    CHROMA = "Chroma"
    Z_IMAGE = "ZImage"
    HIDREAM = "HiDream"
    PONY_V7 = "PonyV7"
    WAN = "Wan"
    VIDU = "Vidu"
    KLING = "Kling"
    HUNYUAN = "HyV1"
    LTXV2 = "LTXV2"
    MOCHI = "Mochi"
    SORA = "Sora2"
    VEO3 = "Veo3"


class ContextModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
        protected_namespaces=(),
    )


# =============================================================================
# Shared value types
# =============================================================================


class ResourceModel(ContextModel):
    id: int
    type: str = Field(..., description="Resource kind, e.g. Checkpoint, LORA, TextualInversion")


class ResourceData(ContextModel):
    """A requested model resource. ``id`` is the version id."""

    id: int
    base_model: str
    model: ResourceModel
    strength: float | None = None
    epoch_number: int | None = None
    trigger_word: str | None = Field(None, description="Embedding trigger word")

    @property
    def effective_strength(self) -> float:
        return 1.0 if self.strength is None else self.strength

    @property
    def kind(self) -> str:
        return self.model.type.lower()


class AspectRatio(ContextModel):
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)
    value: str | None = Field(None, description="Display ratio, e.g. '16:9'")


class SourceImage(ContextModel):
    url: str
    width: int | None = None
    height: int | None = None


class SourceVideo(ContextModel):
    url: str
    width: int | None = None
    height: int | None = None
    fps: float | None = None
    duration: float | None = None


# =============================================================================
# Common fields
# =============================================================================


class GenerationBase(ContextModel):
    """Fields every ecosystem variant carries."""

    workflow: str = "txt2img"
    prompt: str = ""
    negative_prompt: str | None = None
    seed: int | None = Field(None, ge=0)
    quantity: int = Field(1, ge=1)
    aspect_ratio: AspectRatio | None = None
    model: ResourceData | None = None
    resources: tuple[ResourceData, ...] = ()
    images: tuple[SourceImage, ...] = ()


class SamplingFields(ContextModel):
    cfg_scale: float | None = None
    steps: int | None = Field(None, ge=1)
    sampler: str | None = None


class VideoFields(ContextModel):
    duration: int | None = Field(None, ge=1, description="Seconds")
    resolution: str | None = Field(None, description="e.g. 480p, 720p, 1080p")
    enhance_prompt: bool | None = None


# =============================================================================
# Image ecosystems
# =============================================================================


class StableDiffusionContext(GenerationBase, SamplingFields):
    ecosystem: Literal["StableDiffusion"]
    base_model: Literal["SD1", "SD2", "SDXL", "Pony", "Illustrious", "NoobAI"]
    clip_skip: int | None = None
    denoise: float | None = Field(None, ge=0, le=1)
    vae: ResourceData | None = None


class FluxContext(GenerationBase, SamplingFields):
    ecosystem: Literal["Flux1"]
    base_model: Literal["Flux1", "FluxKrea"]
    flux_ultra_raw: bool | None = None


class Flux2Context(GenerationBase, SamplingFields):
    ecosystem: Literal["Flux2"]
    base_model: Literal["Flux2"]
    model_version: Literal["dev", "pro", "flex"] = "dev"


class Flux2KleinContext(GenerationBase, SamplingFields):
    ecosystem: Literal["Flux2Klein"]
    base_model: Literal["Flux2Klein_9B", "Flux2Klein_9B_base", "Flux2Klein_4B", "Flux2Klein_4B_base"]
    sample_method: str | None = None
    schedule: str | None = None


class FluxKontextContext(GenerationBase, SamplingFields):
    ecosystem: Literal["Flux1Kontext"]
    base_model: Literal["Flux1Kontext"]


class QwenContext(GenerationBase, SamplingFields):
    ecosystem: Literal["Qwen"]
    base_model: Literal["Qwen"]


class SeedreamContext(GenerationBase):
    ecosystem: Literal["Seedream"]
    base_model: Literal["Seedream"]
    guidance_scale: float | None = None


class Imagen4Context(GenerationBase):
    ecosystem: Literal["Imagen4"]
    base_model: Literal["Imagen4"]


class OpenAIContext(GenerationBase):
    ecosystem: Literal["OpenAI"]
    base_model: Literal["OpenAI"]
    quality: Literal["auto", "low", "medium", "high"] | None = None
    background: Literal["auto", "transparent", "opaque"] | None = None


class NanoBananaContext(GenerationBase):
    ecosystem: Literal["NanoBanana"]
    base_model: Literal["NanoBanana"]


class ChromaContext(GenerationBase, SamplingFields):
    ecosystem: Literal["Chroma"]
    base_model: Literal["Chroma"]


class ZImageContext(GenerationBase, SamplingFields):
    ecosystem: Literal["ZImage"]
    base_model: Literal["ZImageTurbo", "ZImageBase"]


class HiDreamContext(GenerationBase, SamplingFields):
    ecosystem: Literal["HiDream"]
    base_model: Literal["HiDream"]
    variant: Literal["fast", "dev", "full"] = "dev"


class PonyV7Context(GenerationBase, SamplingFields):
    ecosystem: Literal["PonyV7"]
    base_model: Literal["PonyV7"]


# =============================================================================
# Video ecosystems
# =============================================================================

WanBaseModel = Literal[
    "WanVideo",
    "WanVideo1_3B_T2V",
    "WanVideo14B_T2V",
    "WanVideo14B_I2V_480p",
    "WanVideo14B_I2V_720p",
    "WanVideo-22-TI2V-5B",
    "WanVideo-22-I2V-A14B",
    "WanVideo-22-T2V-A14B",
    "WanVideo-25-T2V",
    "WanVideo-25-I2V",
]


class WanContext(GenerationBase, SamplingFields, VideoFields):
    ecosystem: Literal["Wan"]
    base_model: WanBaseModel
    shift: float | None = None


class ViduContext(GenerationBase, VideoFields):
    ecosystem: Literal["Vidu"]
    base_model: Literal["Vidu"]
    style: Literal["general", "anime"] | None = None
    movement_amplitude: Literal["auto", "small", "medium", "large"] | None = None


class KlingContext(GenerationBase, SamplingFields, VideoFields):
    ecosystem: Literal["Kling"]
    base_model: Literal["Kling"]
    mode: Literal["standard", "professional"] = "standard"
    model_version: Literal["v1_6", "v2", "v2_1", "v2_5_turbo"] = "v2_1"


class HunyuanContext(GenerationBase, SamplingFields, VideoFields):
    ecosystem: Literal["HyV1"]
    base_model: Literal["HyV1"]


class LTXV2Context(GenerationBase, SamplingFields, VideoFields):
    ecosystem: Literal["LTXV2"]
    base_model: Literal["LTXV2"]
    generate_audio: bool | None = None


class MochiContext(GenerationBase, VideoFields):
    ecosystem: Literal["Mochi"]
    base_model: Literal["Mochi"]


class SoraContext(GenerationBase, VideoFields):
    ecosystem: Literal["Sora2"]
    base_model: Literal["Sora2"]
    use_pro: bool = False


class Veo3Context(GenerationBase, VideoFields):
    ecosystem: Literal["Veo3"]
    base_model: Literal["Veo3"]
    fast_mode: bool = False
    generate_audio: bool | None = None


EcosystemContext = Annotated[
    Union[
        StableDiffusionContext,
        FluxContext,
        Flux2Context,
        Flux2KleinContext,
        FluxKontextContext,
        QwenContext,
        SeedreamContext,
        Imagen4Context,
        OpenAIContext,
        NanoBananaContext,
        ChromaContext,
        ZImageContext,
        HiDreamContext,
        PonyV7Context,
        WanContext,
        ViduContext,
        KlingContext,
        HunyuanContext,
        LTXV2Context,
        MochiContext,
        SoraContext,
        Veo3Context,
    ],
    Field(discriminator="ecosystem"),
]


# =============================================================================
# Standalone workflows
# =============================================================================


class VideoInterpolationContext(ContextModel):
    workflow: Literal["vid2vid:interpolate"]
    video: SourceVideo
    interpolation_factor: int = Field(2, ge=2, le=8)


class VideoUpscaleContext(ContextModel):
    workflow: Literal["vid2vid:upscale"]
    video: SourceVideo
    scale_factor: float = Field(2, gt=1, le=4)


class ImageUpscaleContext(ContextModel):
    workflow: Literal["img2img:upscale"]
    images: tuple[SourceImage, ...] = Field(min_length=1)
    scale_factor: float = Field(2, gt=1, le=4)
    quantity: int = Field(1, ge=1)

    @property
    def source(self) -> SourceImage:
        return self.images[0]


class BackgroundRemovalContext(ContextModel):
    workflow: Literal["img2img:remove-background"]
    images: tuple[SourceImage, ...] = Field(min_length=1)
    quantity: int = Field(1, ge=1)

    @property
    def source(self) -> SourceImage:
        return self.images[0]


StandaloneContext = Annotated[
    Union[
        VideoInterpolationContext,
        VideoUpscaleContext,
        ImageUpscaleContext,
        BackgroundRemovalContext,
    ],
    Field(discriminator="workflow"),
]

STANDALONE_WORKFLOWS: frozenset[str] = frozenset(
    {"vid2vid:interpolate", "vid2vid:upscale", "img2img:upscale", "img2img:remove-background"}
)

GenerationContext = Union[
    StableDiffusionContext,
    FluxContext,
    Flux2Context,
    Flux2KleinContext,
    FluxKontextContext,
    QwenContext,
    SeedreamContext,
    Imagen4Context,
    OpenAIContext,
    NanoBananaContext,
    ChromaContext,
    ZImageContext,
    HiDreamContext,
    PonyV7Context,
    WanContext,
    ViduContext,
    KlingContext,
    HunyuanContext,
    LTXV2Context,
    MochiContext,
    SoraContext,
    Veo3Context,
    VideoInterpolationContext,
    VideoUpscaleContext,
    ImageUpscaleContext,
    BackgroundRemovalContext,
]

_ecosystem_adapter: TypeAdapter[Any] = TypeAdapter(EcosystemContext)
_standalone_adapter: TypeAdapter[Any] = TypeAdapter(StandaloneContext)


def _raise_for_unknown_route(data: Mapping[str, Any], error: ValidationError) -> None:
    """
    An ecosystem tag or base model outside the registry table is a routing
    failure, not a schema failure.
    """
    for err in error.errors():
        loc = err["loc"]
        unknown_ecosystem = err["type"] == "union_tag_invalid" and not loc
        unknown_base_model = (
            err["type"] == "literal_error" and len(loc) == 2 and loc[1] in ("baseModel", "base_model")
        )
        if unknown_ecosystem or unknown_base_model:
            workflow = data.get("workflow", "txt2img")
            ecosystem = data.get("ecosystem")
            base_model = data.get("baseModel", data.get("base_model"))
            logger.error(f"[context] No handler for {ecosystem}/{base_model}/{workflow}")
            raise UnsupportedWorkflowError(
                f"Unsupported generation: ecosystem={ecosystem} baseModel={base_model} "
                f"workflow={workflow}",
                workflow=str(workflow) if workflow is not None else None,
                ecosystem=str(ecosystem) if ecosystem is not None else None,
                base_model=str(base_model) if base_model is not None else None,
            ) from error


def parse_context(data: Mapping[str, Any] | BaseModel) -> GenerationContext:
    """
    Validate a raw request into a generation context variant.

    Standalone workflows are selected by ``workflow``; everything else by
    ``ecosystem``.

    Raises:
        UnsupportedWorkflowError: Unknown ecosystem, or base model outside it
        InvalidContextError: Schema validation failed
    """
    if isinstance(data, ContextModel):
        return data  # type: ignore[return-value]
    if isinstance(data, BaseModel):
        data = data.model_dump(by_alias=True)
    if not isinstance(data, Mapping):
        raise InvalidContextError(f"Generation context must be a mapping, got {type(data).__name__}")

    workflow = data.get("workflow")
    standalone = isinstance(workflow, str) and workflow in STANDALONE_WORKFLOWS
    adapter = _standalone_adapter if standalone else _ecosystem_adapter
    try:
        return adapter.validate_python(dict(data))
    except ValidationError as e:
        if not standalone:
            _raise_for_unknown_route(data, e)
        errors = [
            {"loc": ".".join(str(part) for part in err["loc"]), "msg": err["msg"], "type": err["type"]}
            for err in e.errors()
        ]
        summary = "; ".join(f"{err['loc']}: {err['msg']}" for err in errors[:5])
        raise InvalidContextError(f"Invalid generation context: {summary}", errors=errors) from e


def is_standalone(ctx: GenerationContext) -> bool:
    return ctx.workflow in STANDALONE_WORKFLOWS


__all__ = [
    "Ecosystem",
    "ContextModel",
    "ResourceModel",
    "ResourceData",
    "AspectRatio",
    "SourceImage",
    "SourceVideo",
    "GenerationBase",
    "StableDiffusionContext",
    "FluxContext",
    "Flux2Context",
    "Flux2KleinContext",
    "FluxKontextContext",
    "QwenContext",
    "SeedreamContext",
    "Imagen4Context",
    "OpenAIContext",
    "NanoBananaContext",
    "ChromaContext",
    "ZImageContext",
    "HiDreamContext",
    "PonyV7Context",
    "WanBaseModel",
    "WanContext",
    "ViduContext",
    "KlingContext",
    "HunyuanContext",
    "LTXV2Context",
    "MochiContext",
    "SoraContext",
    "Veo3Context",
    "EcosystemContext",
    "VideoInterpolationContext",
    "VideoUpscaleContext",
    "ImageUpscaleContext",
    "BackgroundRemovalContext",
    "StandaloneContext",
    "STANDALONE_WORKFLOWS",
    "GenerationContext",
    "parse_context",
    "is_standalone",
]
