"""
Ecosystem handlers

One handler per generation ecosystem, each translating its context variant
into a step payload, plus the registry that dispatches on ``ecosystem``.
"""

from .base import (
    AirLookup,
    EcosystemHandler,
    HandlerContext,
    ecosystem_handler,
    lora_list,
    lora_map,
    network_map,
)
from .image import IMAGE_HANDLERS
from .registry import (
    EcosystemRegistry,
    create_default_registry,
    get_registry,
    reset_registry,
    set_registry,
)
from .video import VIDEO_HANDLERS

__all__ = [
    "AirLookup",
    "EcosystemHandler",
    "HandlerContext",
    "ecosystem_handler",
    "network_map",
    "lora_list",
    "lora_map",
    "IMAGE_HANDLERS",
    "VIDEO_HANDLERS",
    "EcosystemRegistry",
    "create_default_registry",
    "get_registry",
    "set_registry",
    "reset_registry",
]
