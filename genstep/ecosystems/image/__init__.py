"""Image ecosystem handlers."""

from .chroma import create_chroma_input
from .flux import create_flux_input, create_flux_kontext_input
from .flux2 import create_flux2_input, create_flux2_klein_input
from .hidream import create_hidream_input
from .imagen import create_imagen4_input
from .nano_banana import create_nano_banana_input
from .openai import create_openai_input
from .pony_v7 import create_pony_v7_input
from .qwen import create_qwen_input
from .seedream import create_seedream_input
from .stable_diffusion import create_stable_diffusion_input
from .z_image import create_z_image_input

IMAGE_HANDLERS = (
    create_stable_diffusion_input,
    create_flux_input,
    create_flux2_input,
    create_flux2_klein_input,
    create_flux_kontext_input,
    create_qwen_input,
    create_seedream_input,
    create_imagen4_input,
    create_openai_input,
    create_nano_banana_input,
    create_chroma_input,
    create_z_image_input,
    create_hidream_input,
    create_pony_v7_input,
)

__all__ = [
    "IMAGE_HANDLERS",
    "create_stable_diffusion_input",
    "create_flux_input",
    "create_flux2_input",
    "create_flux2_klein_input",
    "create_flux_kontext_input",
    "create_qwen_input",
    "create_seedream_input",
    "create_imagen4_input",
    "create_openai_input",
    "create_nano_banana_input",
    "create_chroma_input",
    "create_z_image_input",
    "create_hidream_input",
    "create_pony_v7_input",
]
