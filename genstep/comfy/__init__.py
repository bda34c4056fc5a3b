"""
Comfy workflow support

Resource graph rewriting and the comfy step builder.
"""

from .graph import ResourceToApply, apply_resources, build_child_index
from .input import create_comfy_input

__all__ = [
    "ResourceToApply",
    "apply_resources",
    "build_child_index",
    "create_comfy_input",
]
