"""
Error taxonomy for genstep.

Every failure raised while compiling a generation request is a GenStepError
carrying a category that tells the caller how to treat it:

- MALFORMED_INPUT: bad AIR strings, invalid or incomplete generation context.
  Surfaced to the caller as-is.
- CONFIGURATION: unknown workflow key, unknown ecosystem/workflow pair,
  template that compiles to invalid JSON. Indicates a template/registry
  mismatch rather than bad user input.
- INTERNAL: invariant violations (a resource reached a handler without being
  resolved upstream). Should crash the request loudly.

Nothing in the compiler is retried; there are no partial results.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Classification of compilation errors for handling decisions."""

    MALFORMED_INPUT = "malformed_input"
    CONFIGURATION = "configuration"
    INTERNAL = "internal"


class GenStepError(Exception):
    """Base class for all compilation errors."""

    category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(self, message: str, **details: Any):
        self.message = message
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": type(self).__name__,
            "category": self.category.value,
            "message": self.message,
            "details": self.details,
        }


# =============================================================================
# Malformed input
# =============================================================================


class MalformedAirError(GenStepError, ValueError):
    """Raised when an AIR string or its base model cannot be interpreted."""

    category = ErrorCategory.MALFORMED_INPUT


class InvalidContextError(GenStepError, ValueError):
    """Raised when a raw generation context fails schema validation."""

    category = ErrorCategory.MALFORMED_INPUT

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        super().__init__(message, errors=errors or [])
        self.errors = errors or []


class MissingContextFieldError(GenStepError, ValueError):
    """Raised when a field optional in the schema is required by a handler."""

    category = ErrorCategory.MALFORMED_INPUT

    def __init__(self, field_name: str, reason: str):
        self.field_name = field_name
        super().__init__(f"{field_name} is required {reason}", field=field_name)


# =============================================================================
# Configuration
# =============================================================================


class WorkflowNotFoundError(GenStepError, LookupError):
    """Raised when a workflow definition key is absent from the cache."""

    category = ErrorCategory.CONFIGURATION

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Workflow definition not found: {key}", key=key)


class WorkflowCompilationError(GenStepError):
    """
    Raised when a template plus its params do not produce valid JSON.

    Deterministic: a missing param or a value that cannot be serialized
    will fail the same way every time.
    """

    category = ErrorCategory.CONFIGURATION


class UnsupportedWorkflowError(GenStepError):
    """Raised when no handler matches the workflow/ecosystem/baseModel triple."""

    category = ErrorCategory.CONFIGURATION

    def __init__(
        self,
        message: str,
        *,
        workflow: str | None = None,
        ecosystem: str | None = None,
        base_model: str | None = None,
    ):
        self.workflow = workflow
        self.ecosystem = ecosystem
        self.base_model = base_model
        super().__init__(
            message,
            workflow=workflow,
            ecosystem=ecosystem,
            base_model=base_model,
        )


# =============================================================================
# Internal
# =============================================================================


class ResourceNotResolvedError(GenStepError, KeyError):
    """Raised when a handler asks for the AIR of a resource nobody resolved."""

    category = ErrorCategory.INTERNAL

    def __init__(self, resource_id: int):
        self.resource_id = resource_id
        super().__init__(f"No AIR resolved for resource {resource_id}", resource_id=resource_id)

    def __str__(self) -> str:
        return self.message


__all__ = [
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
