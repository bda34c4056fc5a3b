"""
Workflow definition schema.

Definitions are published into the shared cache by an external process and
are immutable once published; a template changes only by publishing a new
definition under the same key.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class WorkflowDefinition(BaseModel):
    """
    A named comfy workflow template.

    Stored as JSON in the shared workflow cache, keyed by ``key``.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    key: str = Field(..., description="Unique workflow key, e.g. txt2img-hires")
    type: str = Field(..., description="Workflow family, e.g. txt2img, img2img")
    name: str = Field(..., description="Human-readable name")
    description: str = Field("", description="Human-readable description")
    features: list[str] = Field(default_factory=list, description="Feature flags")
    template: str = Field(..., description="JSON text with {{placeholder}} tokens")

    def to_json(self) -> str:
        return self.model_dump_json()

    @classmethod
    def from_json(cls, data: str | bytes) -> WorkflowDefinition:
        return cls.model_validate_json(data)
