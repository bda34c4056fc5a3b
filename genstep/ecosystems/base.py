"""
Ecosystem handler base.

Every ecosystem handler is a plain function ``(data, ctx) -> StepTemplate``
(sync or async) wrapped by @ecosystem_handler, which records which
ecosystem, base models and workflows it serves:

    @ecosystem_handler(
        Ecosystem.QWEN,
        base_models=("Qwen",),
        workflows={"txt2img": StepType.IMAGE_GEN, "img2img:edit": StepType.IMAGE_GEN},
    )
    def create_qwen_input(data: QwenContext, ctx: HandlerContext) -> StepTemplate:
        ...

Handlers only read their own context variant, resolve resources through
``ctx.airs`` and return tidied step inputs.
"""

from __future__ import annotations

import inspect
import logging
import random
from collections.abc import Awaitable, Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Union

from genstep.air import AIR, ecosystem_for_base_model, to_air
from genstep.comfy import ResourceToApply
from genstep.constants import DEFAULT_CHECKPOINTS, MAX_RANDOM_SEED, to_scheduler
from genstep.context import Ecosystem, GenerationBase, ResourceData
from genstep.errors import InvalidContextError, MissingContextFieldError, ResourceNotResolvedError
from genstep.steps import StepTemplate, StepType

if TYPE_CHECKING:
    from genstep.config import CompilerSettings
    from genstep.routing import RoutingDecision
    from genstep.workflows import WorkflowTemplateStore

logger = logging.getLogger(__name__)


# =============================================================================
# Handler context
# =============================================================================


class AirLookup:
    """
    Resource id -> AIR string.

    Filled before dispatch with every resource on the request. A miss means a
    resource reached a handler without being resolved upstream.
    """

    def __init__(self, airs: Mapping[int, str] | None = None):
        self._airs: dict[int, str] = dict(airs or {})

    @classmethod
    def from_resources(cls, resources: Iterable[ResourceData | None]) -> AirLookup:
        lookup = cls()
        for resource in resources:
            if resource is not None:
                lookup.add(resource)
        return lookup

    @classmethod
    def from_context(cls, data: Any) -> AirLookup:
        """Pre-compute AIRs for the model, resources and vae of a context."""
        resources: list[ResourceData | None] = [getattr(data, "model", None)]
        resources.extend(getattr(data, "resources", ()))
        resources.append(getattr(data, "vae", None))
        return cls.from_resources(resources)

    def add(self, resource: ResourceData) -> str:
        air = to_air(resource)
        self._airs[resource.id] = air
        return air

    def get(self, resource_id: int) -> str | None:
        return self._airs.get(resource_id)

    def get_or_throw(self, resource_id: int) -> str:
        """
        Raises:
            ResourceNotResolvedError: Unknown resource id
        """
        air = self._airs.get(resource_id)
        if air is None:
            raise ResourceNotResolvedError(resource_id)
        return air

    def __contains__(self, resource_id: object) -> bool:
        return resource_id in self._airs

    def __len__(self) -> int:
        return len(self._airs)


@dataclass(frozen=True)
class HandlerContext:
    """What every handler receives besides its context variant."""

    airs: AirLookup
    workflows: WorkflowTemplateStore
    settings: CompilerSettings
    routing_decisions: list[RoutingDecision] = field(default_factory=list)


# =============================================================================
# Handler registration
# =============================================================================

HandlerResult = Union[StepTemplate, Awaitable[StepTemplate]]
HandlerFunc = Callable[[Any, HandlerContext], HandlerResult]


@dataclass(frozen=True)
class EcosystemHandler:
    """
    A registered handler plus its static routing table.

    ``workflows`` maps each supported workflow to the step kind it produces.
    ``base_model_workflows`` optionally narrows the workflows per base model.
    """

    ecosystem: Ecosystem
    base_models: tuple[str, ...]
    workflows: Mapping[str, StepType]
    func: HandlerFunc
    base_model_workflows: Mapping[str, frozenset[str]] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.func.__name__

    def workflows_for(self, base_model: str) -> frozenset[str]:
        if base_model not in self.base_models:
            return frozenset()
        return self.base_model_workflows.get(base_model, frozenset(self.workflows))

    def supports(self, base_model: str, workflow: str) -> bool:
        return workflow in self.workflows_for(base_model)

    def step_type(self, workflow: str) -> StepType:
        return self.workflows[workflow]

    def routes(self) -> Iterator[tuple[str, str, StepType]]:
        """Yield every ``(workflow, base_model, step_type)`` this handler serves."""
        for base_model in self.base_models:
            for workflow in sorted(self.workflows_for(base_model)):
                yield workflow, base_model, self.workflows[workflow]

    async def __call__(self, data: Any, ctx: HandlerContext) -> StepTemplate:
        result = self.func(data, ctx)
        if inspect.isawaitable(result):
            result = await result
        return result


def ecosystem_handler(
    ecosystem: Ecosystem,
    *,
    base_models: Iterable[str],
    workflows: Mapping[str, StepType],
    base_model_workflows: Mapping[str, Iterable[str]] | None = None,
) -> Callable[[HandlerFunc], EcosystemHandler]:
    """Decorator registering a function as the handler of one ecosystem."""
    base_models = tuple(base_models)
    narrowed = {
        base_model: frozenset(names) for base_model, names in (base_model_workflows or {}).items()
    }
    for base_model, names in narrowed.items():
        unknown = names - set(workflows)
        if base_model not in base_models or unknown:
            raise ValueError(
                f"Invalid workflow narrowing for {ecosystem.value}/{base_model}: {sorted(unknown)}"
            )

    def decorator(func: HandlerFunc) -> EcosystemHandler:
        return EcosystemHandler(
            ecosystem=ecosystem,
            base_models=base_models,
            workflows=dict(workflows),
            func=func,
            base_model_workflows=narrowed,
        )

    return decorator


# =============================================================================
# Shared helpers
# =============================================================================


def network_map(resources: Iterable[ResourceData], airs: AirLookup) -> dict[str, dict[str, Any]]:
    """textToImage ``additionalNetworks``: ``{air: {strength, type}}``."""
    return {
        airs.get_or_throw(resource.id): {
            "strength": resource.effective_strength,
            "type": resource.model.type,
        }
        for resource in resources
    }


def lora_list(resources: Iterable[ResourceData], airs: AirLookup) -> list[dict[str, Any]]:
    """``[{air, strength}]``."""
    return [
        {"air": airs.get_or_throw(resource.id), "strength": resource.effective_strength}
        for resource in resources
    ]


def lora_map(resources: Iterable[ResourceData], airs: AirLookup) -> dict[str, float]:
    """``{air: strength}``."""
    return {airs.get_or_throw(resource.id): resource.effective_strength for resource in resources}


def comfy_resources(resources: Iterable[ResourceData | None], airs: AirLookup) -> list[ResourceToApply]:
    """Resources in graph chain order; None entries are skipped."""
    return [
        ResourceToApply(
            air=airs.get_or_throw(resource.id),
            trigger_word=resource.trigger_word,
            strength=resource.strength,
        )
        for resource in resources
        if resource is not None
    ]


def default_checkpoint_air(group: str) -> str | None:
    """AIR of the checkpoint used when a request carries no model."""
    checkpoint = DEFAULT_CHECKPOINTS.get(group)
    if checkpoint is None:
        return None
    return str(
        AIR(
            ecosystem=ecosystem_for_base_model(checkpoint.base_model),
            resource_type="checkpoint",
            model_id=checkpoint.model_id,
            version_id=checkpoint.version_id,
        )
    )


def model_air(data: GenerationBase, ctx: HandlerContext, group: str | None = None) -> str | None:
    """AIR of the requested model, else the group's default checkpoint."""
    if data.model is not None:
        return ctx.airs.get_or_throw(data.model.id)
    return default_checkpoint_air(group) if group else None


def require_model(data: GenerationBase, reason: str) -> ResourceData:
    if data.model is None:
        raise MissingContextFieldError("model", reason)
    return data.model


def require_size(data: GenerationBase, reason: str) -> tuple[int, int]:
    if data.aspect_ratio is None:
        raise MissingContextFieldError("aspectRatio", reason)
    return data.aspect_ratio.width, data.aspect_ratio.height


def image_urls(data: GenerationBase) -> list[str]:
    return [image.url for image in data.images]


def aspect_ratio_value(data: GenerationBase) -> str | None:
    return data.aspect_ratio.value if data.aspect_ratio else None


def resolve_seed(data: GenerationBase) -> int:
    """The request seed, or a fresh random one for backends that need a value."""
    if data.seed is not None:
        return data.seed
    seed = random.randrange(MAX_RANDOM_SEED)
    logger.debug(f"[handler] No seed for {data.workflow}, drew {seed}")
    return seed


def image_operation(data: GenerationBase) -> str:
    return "editImage" if data.images else "createImage"


def video_operation(data: GenerationBase) -> str:
    return "image-to-video" if data.images else "text-to-video"


def text_to_image_step(
    data: GenerationBase,
    ctx: HandlerContext,
    *,
    model: str | None,
    resources: Iterable[ResourceData] = (),
    sampler: str | None = None,
    steps: int | None = None,
    cfg_scale: float | None = None,
    **params: Any,
) -> StepTemplate:
    """
    Build a textToImage step.

    Extra keyword params land in ``params`` as given (camelCase wire names).
    """
    return StepTemplate.create(
        StepType.TEXT_TO_IMAGE,
        {
            "model": model,
            "additionalNetworks": network_map(resources, ctx.airs),
            "params": {
                "prompt": data.prompt,
                "negativePrompt": data.negative_prompt,
                "scheduler": to_scheduler(sampler or ctx.settings.default_sampler),
                "steps": steps,
                "cfgScale": cfg_scale,
                "seed": data.seed,
                "width": data.aspect_ratio.width if data.aspect_ratio else None,
                "height": data.aspect_ratio.height if data.aspect_ratio else None,
                **params,
            },
            "quantity": data.quantity,
            "batchSize": 1,
        },
    )


# Source image limits per workflow: (min, max)
IMAGE_LIMITS: dict[str, tuple[int, int]] = {
    "img2img": (1, 1),
    "img2img:face-fix": (1, 1),
    "img2img:hires-fix": (1, 1),
    "img2img:edit": (1, 7),
    "img2vid": (1, 1),
    "img2vid:first-last-frame": (2, 2),
    "img2vid:ref2vid": (1, 7),
}

# Base models accepting fewer edit images than the workflow default
IMAGE_MAX_OVERRIDES: dict[tuple[str, str], int] = {
    ("img2img:edit", "Qwen"): 1,
    ("img2img:edit", "Flux1Kontext"): 1,
}


def check_image_count(data: GenerationBase, base_model: str) -> None:
    """
    Enforce the source-image limits of the workflow.

    Raises:
        InvalidContextError: Too few or too many images
    """
    limits = IMAGE_LIMITS.get(data.workflow)
    count = len(data.images)
    if limits is None:
        if count:
            logger.debug(f"[handler] Ignoring {count} images for {data.workflow}")
        return

    minimum, maximum = limits
    maximum = IMAGE_MAX_OVERRIDES.get((data.workflow, base_model), maximum)
    if not minimum <= count <= maximum:
        raise InvalidContextError(
            f"{data.workflow} for {base_model} takes {minimum}-{maximum} images, got {count}"
        )


__all__ = [
    "AirLookup",
    "HandlerContext",
    "EcosystemHandler",
    "ecosystem_handler",
    "network_map",
    "lora_list",
    "lora_map",
    "comfy_resources",
    "default_checkpoint_air",
    "model_air",
    "require_model",
    "require_size",
    "image_urls",
    "aspect_ratio_value",
    "resolve_seed",
    "image_operation",
    "text_to_image_step",
    "video_operation",
    "IMAGE_LIMITS",
    "check_image_count",
]
