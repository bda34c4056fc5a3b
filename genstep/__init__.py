"""
genstep - compile generation requests into orchestrator step payloads.

A generation request (the *generation context*) names an ecosystem, a base
model and a workflow. genstep validates it, resolves its resources to AIR
identifiers and produces the exact step the orchestrator expects:

- **Ecosystem handlers**: one per backend family, each emitting a
  textToImage, imageGen, videoGen or comfy step
- **Comfy workflows**: stored JSON templates compiled with request params,
  with checkpoint, LoRA and embedding resources spliced into the graph
- **Standalone workflows**: interpolation, upscaling, background removal

Quick Start:
    >>> from genstep import compile_step
    >>> step = await compile_step({
    ...     "ecosystem": "Qwen",
    ...     "baseModel": "Qwen",
    ...     "workflow": "txt2img",
    ...     "prompt": "a red fox in snow",
    ... })
    >>> step.to_dict()["$type"]
    'imageGen'
"""

__version__ = "0.1.0"

from genstep.air import AIR, parse_air_safe, parse_air_strict, to_air
from genstep.compiler import StepCompiler, compile_step
from genstep.config import CompilerSettings, get_settings
from genstep.context import Ecosystem, parse_context
from genstep.ecosystems import (
    AirLookup,
    EcosystemRegistry,
    HandlerContext,
    create_default_registry,
    ecosystem_handler,
    get_registry,
)
from genstep.errors import (
    ErrorCategory,
    GenStepError,
    InvalidContextError,
    MalformedAirError,
    MissingContextFieldError,
    ResourceNotResolvedError,
    UnsupportedWorkflowError,
    WorkflowCompilationError,
    WorkflowNotFoundError,
)
from genstep.steps import StepTemplate, StepType, remove_empty
from genstep.workflows import (
    WorkflowDefinition,
    WorkflowTemplateStore,
    get_workflow_store,
    reset_workflow_store,
    set_workflow_store,
)

__all__ = [
    "__version__",
    # Entry point
    "compile_step",
    "StepCompiler",
    # Steps
    "StepTemplate",
    "StepType",
    "remove_empty",
    # Resources
    "AIR",
    "to_air",
    "parse_air_strict",
    "parse_air_safe",
    # Context
    "Ecosystem",
    "parse_context",
    # Handlers
    "AirLookup",
    "HandlerContext",
    "EcosystemRegistry",
    "ecosystem_handler",
    "create_default_registry",
    "get_registry",
    # Workflows
    "WorkflowDefinition",
    "WorkflowTemplateStore",
    "get_workflow_store",
    "set_workflow_store",
    "reset_workflow_store",
    # Config
    "CompilerSettings",
    "get_settings",
    # Errors
    "ErrorCategory",
    "GenStepError",
    "MalformedAirError",
    "InvalidContextError",
    "MissingContextFieldError",
    "WorkflowNotFoundError",
    "WorkflowCompilationError",
    "UnsupportedWorkflowError",
    "ResourceNotResolvedError",
]
