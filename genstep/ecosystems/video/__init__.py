"""Video ecosystem handlers."""

from .hunyuan import create_hunyuan_input
from .kling import create_kling_input
from .ltxv2 import create_ltxv2_input
from .mochi import create_mochi_input
from .sora import create_sora_input
from .veo3 import create_veo3_input
from .vidu import create_vidu_input
from .wan import create_wan_input

VIDEO_HANDLERS = (
    create_wan_input,
    create_vidu_input,
    create_kling_input,
    create_hunyuan_input,
    create_ltxv2_input,
    create_mochi_input,
    create_sora_input,
    create_veo3_input,
)

__all__ = [
    "VIDEO_HANDLERS",
    "create_wan_input",
    "create_vidu_input",
    "create_kling_input",
    "create_hunyuan_input",
    "create_ltxv2_input",
    "create_mochi_input",
    "create_sora_input",
    "create_veo3_input",
]
