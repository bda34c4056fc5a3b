"""
Resource Identity (AIR).

An AIR (Asset Identity Reference) is the canonical string id of a versioned
model resource:

    urn:air:<ecosystem>:<type>:<source>:<modelId>@<versionId>

The string form is the key used everywhere else (workflow graphs, lookup
maps). The ecosystem segment is derived from the resource's base model via
the table in genstep.constants.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from .constants import get_base_model_config
from .errors import MalformedAirError

if TYPE_CHECKING:
    from .context import ResourceData

DEFAULT_SOURCE = "civitai"

AIR_PATTERN = re.compile(
    r"^urn:air:(?P<ecosystem>[a-z0-9_.\-]+):(?P<type>[a-z0-9_]+):(?P<source>[a-z0-9_]+)"
    r":(?P<model_id>[^:@]+)@(?P<version_id>[^:@]+)$"
)


def _segment(value: str, invalid: re.Pattern[str]) -> str:
    """Lower-case a free-form name into a valid AIR segment."""
    return invalid.sub("_", value.strip().lower()).strip("_") or "unknown"


_INVALID_ECOSYSTEM_CHARS = re.compile(r"[^a-z0-9_.\-]+")
_INVALID_TYPE_CHARS = re.compile(r"[^a-z0-9_]+")


@dataclass(frozen=True)
class AIR:
    """Immutable resource identity. Equality is field-wise."""

    ecosystem: str
    resource_type: str
    model_id: int
    version_id: int
    source: str = DEFAULT_SOURCE

    def __str__(self) -> str:
        return (
            f"urn:air:{self.ecosystem}:{self.resource_type}:{self.source}"
            f":{self.model_id}@{self.version_id}"
        )

    @classmethod
    def parse(cls, value: str) -> AIR:
        return parse_air_strict(value)

    def with_version(self, version_id: int) -> AIR:
        """Same model, different version."""
        return replace(self, version_id=version_id)


def ecosystem_for_base_model(base_model: str, strict: bool = True) -> str | None:
    """
    Look up the AIR ecosystem segment for a base model.

    Raises:
        MalformedAirError: Unknown base model in strict mode
    """
    config = get_base_model_config(base_model)
    if config is None:
        if strict:
            raise MalformedAirError(f"Unknown base model: {base_model!r}", base_model=base_model)
        return None
    return config.air_ecosystem


def air_for_resource(resource: ResourceData, strict: bool = True) -> AIR | None:
    """Build the AIR value of a resource; None for unknown base models in safe mode."""
    ecosystem = ecosystem_for_base_model(resource.base_model, strict=strict)
    if ecosystem is None:
        return None
    return AIR(
        ecosystem=ecosystem,
        resource_type=_segment(resource.model.type, _INVALID_TYPE_CHARS),
        model_id=resource.model.id,
        version_id=resource.id,
    )


def to_air(resource: ResourceData) -> str:
    """
    Format the AIR string of a resource.

    Total: a base model missing from the table falls back to its lower-cased
    name as the ecosystem segment, with characters an AIR cannot carry
    replaced by underscores.
    """
    ecosystem = ecosystem_for_base_model(resource.base_model, strict=False)
    if ecosystem is None:
        ecosystem = _segment(resource.base_model, _INVALID_ECOSYSTEM_CHARS)
    return str(
        AIR(
            ecosystem=ecosystem,
            resource_type=_segment(resource.model.type, _INVALID_TYPE_CHARS),
            model_id=resource.model.id,
            version_id=resource.id,
        )
    )


def parse_air_strict(value: str) -> AIR:
    """
    Parse an AIR string.

    Raises:
        MalformedAirError: Not the 5-segment grammar, or non-numeric ids
    """
    if not isinstance(value, str):
        raise MalformedAirError(f"AIR must be a string, got {type(value).__name__}")

    match = AIR_PATTERN.match(value)
    if match is None:
        raise MalformedAirError(f"Malformed AIR: {value!r}", air=value)

    model_id, version_id = match["model_id"], match["version_id"]
    if not (model_id.isdigit() and version_id.isdigit()):
        raise MalformedAirError(f"AIR ids must be numeric: {value!r}", air=value)

    return AIR(
        ecosystem=match["ecosystem"],
        resource_type=match["type"],
        source=match["source"],
        model_id=int(model_id),
        version_id=int(version_id),
    )


def parse_air_safe(value: str) -> AIR | None:
    """Parse an AIR string, returning None instead of raising."""
    try:
        return parse_air_strict(value)
    except MalformedAirError:
        return None


__all__ = [
    "AIR",
    "DEFAULT_SOURCE",
    "ecosystem_for_base_model",
    "air_for_resource",
    "to_air",
    "parse_air_strict",
    "parse_air_safe",
]
