"""
Static tables shared by the compiler.

- BASE_MODELS: base model name -> group/ecosystem (drives the AIR ecosystem segment)
- SAMPLER_SCHEDULERS: UI sampler name -> orchestrator scheduler (textToImage)
- COMFY_SAMPLERS: UI sampler name -> comfy sampler/scheduler pair (comfy steps)
- DRAFT_RESOURCES: draft LoRAs injected by the txt2img:draft workflow
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

MediaType = Literal["image", "video"]


@dataclass(frozen=True)
class BaseModelConfig:
    """One entry of the base model table."""

    name: str
    group: str
    type: MediaType = "image"
    ecosystem: str | None = None
    engine: str | None = None

    @property
    def air_ecosystem(self) -> str:
        """Ecosystem segment used in AIR strings."""
        return self.ecosystem or self.group.lower()


BASE_MODELS: tuple[BaseModelConfig, ...] = (
    BaseModelConfig("AuraFlow", "AuraFlow"),
    BaseModelConfig("Chroma", "Chroma"),
    BaseModelConfig("Flux.1 S", "Flux1"),
    BaseModelConfig("Flux.1 D", "Flux1"),
    BaseModelConfig("Flux.1 Krea", "FluxKrea"),
    BaseModelConfig("Flux.1 Kontext", "Flux1Kontext"),
    BaseModelConfig("Flux.2 D", "Flux2"),
    BaseModelConfig("Flux.2 Klein 9B", "Flux2Klein_9B", ecosystem="flux2klein"),
    BaseModelConfig("Flux.2 Klein 9B-base", "Flux2Klein_9B_base", ecosystem="flux2klein"),
    BaseModelConfig("Flux.2 Klein 4B", "Flux2Klein_4B", ecosystem="flux2klein"),
    BaseModelConfig("Flux.2 Klein 4B-base", "Flux2Klein_4B_base", ecosystem="flux2klein"),
    BaseModelConfig("HiDream", "HiDream"),
    BaseModelConfig("Hunyuan 1", "HyDit1"),
    BaseModelConfig("Hunyuan Video", "HyV1", type="video", engine="hunyuan"),
    BaseModelConfig("Illustrious", "Illustrious", ecosystem="sdxl"),
    BaseModelConfig("Imagen4", "Imagen4"),
    BaseModelConfig("Kling", "Kling", type="video", engine="kling"),
    BaseModelConfig("LTXV", "LTXV", type="video", engine="lightricks"),
    BaseModelConfig("LTXV2", "LTXV2", type="video", engine="lightricks"),
    BaseModelConfig("Mochi", "Mochi", type="video", engine="mochi"),
    BaseModelConfig("Nano Banana", "NanoBanana"),
    BaseModelConfig("NoobAI", "NoobAI", ecosystem="sdxl"),
    BaseModelConfig("OpenAI", "OpenAI"),
    BaseModelConfig("Other", "Other"),
    BaseModelConfig("Pony", "Pony", ecosystem="sdxl"),
    BaseModelConfig("Pony V7", "PonyV7", ecosystem="auraflow"),
    BaseModelConfig("Qwen", "Qwen", ecosystem="qwen"),
    BaseModelConfig("SD 1.4", "SD1"),
    BaseModelConfig("SD 1.5", "SD1"),
    BaseModelConfig("SD 1.5 LCM", "SD1"),
    BaseModelConfig("SD 1.5 Hyper", "SD1"),
    BaseModelConfig("SD 2.0", "SD2"),
    BaseModelConfig("SD 2.1", "SD2"),
    BaseModelConfig("SD 3", "SD3"),
    BaseModelConfig("SD 3.5", "SD3"),
    BaseModelConfig("SD 3.5 Medium", "SD3_5M", ecosystem="sd3"),
    BaseModelConfig("SDXL 0.9", "SDXL"),
    BaseModelConfig("SDXL 1.0", "SDXL"),
    BaseModelConfig("SDXL 1.0 LCM", "SDXL"),
    BaseModelConfig("SDXL Lightning", "SDXL"),
    BaseModelConfig("SDXL Hyper", "SDXL"),
    BaseModelConfig("SDXL Turbo", "SDXL"),
    BaseModelConfig("Seedream", "Seedream"),
    BaseModelConfig("Sora 2", "Sora2", type="video", engine="sora"),
    BaseModelConfig("Veo 3", "Veo3", type="video", engine="veo3"),
    BaseModelConfig("Vidu Q1", "Vidu", type="video", engine="vidu"),
    BaseModelConfig("Wan Video", "WanVideo", type="video", engine="wan"),
    BaseModelConfig("Wan Video 1.3B t2v", "WanVideo1_3B_T2V", type="video", engine="wan"),
    BaseModelConfig("Wan Video 14B t2v", "WanVideo14B_T2V", type="video", engine="wan"),
    BaseModelConfig("Wan Video 14B i2v 480p", "WanVideo14B_I2V_480p", type="video", engine="wan"),
    BaseModelConfig("Wan Video 14B i2v 720p", "WanVideo14B_I2V_720p", type="video", engine="wan"),
    BaseModelConfig("Wan Video 2.2 TI2V-5B", "WanVideo-22-TI2V-5B", type="video", engine="wan"),
    BaseModelConfig("Wan Video 2.2 I2V-A14B", "WanVideo-22-I2V-A14B", type="video", engine="wan"),
    BaseModelConfig("Wan Video 2.2 T2V-A14B", "WanVideo-22-T2V-A14B", type="video", engine="wan"),
    BaseModelConfig("Wan Video 2.5 T2V", "WanVideo-25-T2V", type="video", engine="wan"),
    BaseModelConfig("Wan Video 2.5 I2V", "WanVideo-25-I2V", type="video", engine="wan"),
    BaseModelConfig("ZImageTurbo", "ZImageTurbo", ecosystem="zimage"),
    BaseModelConfig("ZImageBase", "ZImageBase", ecosystem="zimage"),
)

# Lookup by base model name first, then by group name (generation contexts
# carry group names such as "SDXL" or "Flux2Klein_9B").
_BY_NAME: dict[str, BaseModelConfig] = {config.name: config for config in BASE_MODELS}
_BY_GROUP: dict[str, BaseModelConfig] = {}
for _config in BASE_MODELS:
    _BY_GROUP.setdefault(_config.group, _config)


def get_base_model_config(base_model: str) -> BaseModelConfig | None:
    """Find the table entry for a base model name or group."""
    return _BY_NAME.get(base_model) or _BY_GROUP.get(base_model)


# =============================================================================
# Samplers
# =============================================================================

DEFAULT_SAMPLER = "DPM++ 2M Karras"

# Exclusive upper bound for seeds drawn when a comfy request carries none
MAX_RANDOM_SEED = 2147483647

SAMPLER_SCHEDULERS: dict[str, str] = {
    "Euler a": "EulerA",
    "Euler": "Euler",
    "LMS": "LMS",
    "Heun": "Heun",
    "DPM2": "DPM2",
    "DPM2 a": "DPM2A",
    "DPM++ 2S a": "DPM2SA",
    "DPM++ 2M": "DPM2M",
    "DPM++ SDE": "DPMSDE",
    "DPM fast": "DPMFast",
    "DPM adaptive": "DPMAdaptive",
    "LMS Karras": "LMSKarras",
    "DPM2 Karras": "DPM2Karras",
    "DPM2 a Karras": "DPM2AKarras",
    "DPM++ 2S a Karras": "DPM2SAKarras",
    "DPM++ 2M Karras": "DPM2MKarras",
    "DPM++ SDE Karras": "DPMSDEKarras",
    "DPM++ 3M SDE": "DPM3MSDE",
    "DDIM": "DDIM",
    "PLMS": "PLMS",
    "UniPC": "UniPC",
    "LCM": "LCM",
}


@dataclass(frozen=True)
class ComfySampler:
    sampler: str
    scheduler: Literal["normal", "karras", "exponential"]


COMFY_SAMPLERS: dict[str, ComfySampler] = {
    "Euler a": ComfySampler("euler_ancestral", "normal"),
    "Euler": ComfySampler("euler", "normal"),
    "LMS": ComfySampler("lms", "normal"),
    "Heun": ComfySampler("heun", "normal"),
    "DPM2": ComfySampler("dpmpp_2", "normal"),
    "DPM2 a": ComfySampler("dpmpp_2_ancestral", "normal"),
    "DPM++ 2S a": ComfySampler("dpmpp_2s_ancestral", "normal"),
    "DPM++ 2M": ComfySampler("dpmpp_2m", "normal"),
    "DPM++ 2M SDE": ComfySampler("dpmpp_2m_sde", "normal"),
    "DPM++ SDE": ComfySampler("dpmpp_sde", "normal"),
    "DPM fast": ComfySampler("dpm_fast", "normal"),
    "DPM adaptive": ComfySampler("dpm_adaptive", "normal"),
    "LMS Karras": ComfySampler("lms", "karras"),
    "DPM2 Karras": ComfySampler("dpm_2", "karras"),
    "DPM2 a Karras": ComfySampler("dpm_2_ancestral", "karras"),
    "DPM++ 2S a Karras": ComfySampler("dpmpp_2s_ancestral", "karras"),
    "DPM++ 2M Karras": ComfySampler("dpmpp_2m", "karras"),
    "DPM++ 2M SDE Karras": ComfySampler("dpmpp_2m_sde", "karras"),
    "DPM++ SDE Karras": ComfySampler("dpmpp_sde", "karras"),
    "DPM++ 3M SDE": ComfySampler("dpmpp_3m_sde", "normal"),
    "DPM++ 3M SDE Karras": ComfySampler("dpmpp_3m_sde", "karras"),
    "DPM++ 3M SDE Exponential": ComfySampler("dpmpp_3m_sde", "exponential"),
    "DDIM": ComfySampler("ddim", "normal"),
    "PLMS": ComfySampler("plms", "normal"),
    "UniPC": ComfySampler("uni_pc", "normal"),
    "LCM": ComfySampler("lcm", "normal"),
}


def to_scheduler(sampler: str | None) -> str:
    """Map a UI sampler name to the textToImage scheduler enum."""
    return SAMPLER_SCHEDULERS.get(sampler or DEFAULT_SAMPLER, SAMPLER_SCHEDULERS[DEFAULT_SAMPLER])


def to_comfy_sampler(sampler: str | None) -> ComfySampler:
    """Map a UI sampler name to comfy sampler/scheduler; unknown maps like the default."""
    return COMFY_SAMPLERS.get(sampler or DEFAULT_SAMPLER, COMFY_SAMPLERS[DEFAULT_SAMPLER])


# =============================================================================
# Draft resources
# =============================================================================


@dataclass(frozen=True)
class DraftResource:
    """A LoRA injected by the draft workflow, plus the settings it pins."""

    version_id: int
    model_id: int
    base_model: str
    steps: int
    cfg_scale: float
    sampler: str


SD1_DRAFT = DraftResource(
    version_id=424706, model_id=424706, base_model="SD 1.5", steps=6, cfg_scale=1, sampler="LCM"
)
SDXL_DRAFT = DraftResource(
    version_id=391999, model_id=391999, base_model="SDXL 1.0", steps=8, cfg_scale=1, sampler="Euler"
)

DRAFT_RESOURCES: dict[str, DraftResource] = {
    "SD1": SD1_DRAFT,
    "SDXL": SDXL_DRAFT,
    "Pony": SDXL_DRAFT,
    "Illustrious": SDXL_DRAFT,
    "NoobAI": SDXL_DRAFT,
}


# =============================================================================
# Default checkpoints and version-id modes
# =============================================================================


@dataclass(frozen=True)
class DefaultCheckpoint:
    """Checkpoint used when a request carries no model."""

    version_id: int
    model_id: int
    base_model: str


DEFAULT_CHECKPOINTS: dict[str, DefaultCheckpoint] = {
    "SD1": DefaultCheckpoint(128713, 4384, "SD 1.5"),
    "SDXL": DefaultCheckpoint(128078, 101055, "SDXL 1.0"),
    "Pony": DefaultCheckpoint(290640, 257749, "Pony"),
    "PonyV7": DefaultCheckpoint(2152373, 1901521, "Pony V7"),
    "Illustrious": DefaultCheckpoint(889818, 795765, "Illustrious"),
    "NoobAI": DefaultCheckpoint(1190596, 833294, "NoobAI"),
    "Chroma": DefaultCheckpoint(2164239, 1330309, "Chroma"),
    "Flux1": DefaultCheckpoint(691639, 618692, "Flux.1 D"),
    "FluxKrea": DefaultCheckpoint(2068000, 618692, "Flux.1 Krea"),
    "Flux1Kontext": DefaultCheckpoint(1892509, 1672021, "Flux.1 Kontext"),
    "HiDream": DefaultCheckpoint(1771369, 1562709, "HiDream"),
    "Qwen": DefaultCheckpoint(2113658, 1864281, "Qwen"),
    "Seedream": DefaultCheckpoint(2208278, 1951069, "Seedream"),
    "OpenAI": DefaultCheckpoint(1733399, 1532032, "OpenAI"),
    "Imagen4": DefaultCheckpoint(1889632, 1669468, "Imagen4"),
    "NanoBanana": DefaultCheckpoint(2154472, 1903424, "Nano Banana"),
}

FLUX_MODEL_ID = 618692

# Flux.1 version id -> mode
FLUX_MODES: dict[int, str] = {
    699279: "draft",
    691639: "standard",
    2068000: "krea",
    922358: "pro",
    1088507: "ultra",
}
FLUX_MODE_VERSIONS: dict[str, int] = {mode: version for version, mode in FLUX_MODES.items()}
DEFAULT_FLUX_MODE = "standard"


__all__ = [
    "BaseModelConfig",
    "BASE_MODELS",
    "MAX_RANDOM_SEED",
    "get_base_model_config",
    "DEFAULT_SAMPLER",
    "SAMPLER_SCHEDULERS",
    "COMFY_SAMPLERS",
    "ComfySampler",
    "to_scheduler",
    "to_comfy_sampler",
    "DraftResource",
    "DRAFT_RESOURCES",
    "SD1_DRAFT",
    "SDXL_DRAFT",
    "DefaultCheckpoint",
    "DEFAULT_CHECKPOINTS",
    "FLUX_MODEL_ID",
    "FLUX_MODES",
    "FLUX_MODE_VERSIONS",
    "DEFAULT_FLUX_MODE",
]
