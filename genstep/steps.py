"""
Step templates: the compiled payloads handed to the orchestrator.

A StepTemplate is a ``$type`` discriminator plus the backend-specific input.
Inputs are always tidied with ``remove_empty`` so that optional-but-absent
fields are omitted instead of sent as null.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class StepType(str, Enum):
    """Orchestrator step kinds."""

    TEXT_TO_IMAGE = "textToImage"
    IMAGE_GEN = "imageGen"
    VIDEO_GEN = "videoGen"
    COMFY = "comfy"
    VIDEO_INTERPOLATION = "videoInterpolation"
    VIDEO_UPSCALER = "videoUpscaler"


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, list, tuple, dict, set, frozenset)) and len(value) == 0:
        return True
    return False


def remove_empty(value: Any) -> Any:
    """
    Recursively drop None and empty containers/strings from dicts and lists.

    Zero and False are kept.
    """
    if isinstance(value, dict):
        result = {}
        for key, item in value.items():
            cleaned = remove_empty(item)
            if not _is_empty(cleaned):
                result[key] = cleaned
        return result
    if isinstance(value, (list, tuple)):
        return [cleaned for cleaned in (remove_empty(item) for item in value) if not _is_empty(cleaned)]
    return value


@dataclass(frozen=True)
class StepTemplate:
    """A ready-to-submit orchestrator step."""

    type: StepType
    input: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(cls, step_type: StepType, input: dict[str, Any]) -> StepTemplate:
        """Build a step with a tidied input."""
        return cls(type=step_type, input=remove_empty(input))

    def to_dict(self) -> dict[str, Any]:
        return {"$type": self.type.value, "input": self.input}


__all__ = ["StepType", "StepTemplate", "remove_empty"]
