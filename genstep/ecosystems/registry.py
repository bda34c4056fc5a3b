"""
Ecosystem handler registry.

Handlers are registered once at startup, keyed by ecosystem. The default
registry holds one handler for every ``Ecosystem`` member:

    registry = create_default_registry()
    handler = registry.get_required(Ecosystem.QWEN)
    step = await handler(data, ctx)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from genstep.context import Ecosystem
from genstep.steps import StepType

from .base import EcosystemHandler
from .image import IMAGE_HANDLERS
from .video import VIDEO_HANDLERS

logger = logging.getLogger(__name__)


class EcosystemRegistry:
    """Registry of ecosystem handlers."""

    def __init__(self, handlers: Iterable[EcosystemHandler] = ()) -> None:
        self._handlers: dict[Ecosystem, EcosystemHandler] = {}
        for handler in handlers:
            self.register(handler)

    def register(self, handler: EcosystemHandler, *, replace: bool = False) -> None:
        """
        Register a handler for its ecosystem.

        Raises:
            ValueError: Ecosystem already has a handler and replace is False
        """
        existing = self._handlers.get(handler.ecosystem)
        if existing is not None and not replace:
            raise ValueError(
                f"Ecosystem '{handler.ecosystem.value}' already handled by {existing.name}"
            )
        self._handlers[handler.ecosystem] = handler
        logger.debug(f"[ecosystem_registry] Registered {handler.name} for {handler.ecosystem.value}")

    def unregister(self, ecosystem: Ecosystem | str) -> bool:
        """Returns True if a handler was removed."""
        removed = self._handlers.pop(Ecosystem(ecosystem), None)
        if removed is not None:
            logger.debug(f"[ecosystem_registry] Unregistered {removed.name}")
        return removed is not None

    def get(self, ecosystem: Ecosystem | str) -> EcosystemHandler | None:
        try:
            return self._handlers.get(Ecosystem(ecosystem))
        except ValueError:
            return None

    def get_required(self, ecosystem: Ecosystem | str) -> EcosystemHandler:
        """
        Raises:
            KeyError: No handler registered for the ecosystem
        """
        handler = self.get(ecosystem)
        if handler is None:
            raise KeyError(f"No handler registered for ecosystem '{ecosystem}'")
        return handler

    def list_handlers(self) -> list[EcosystemHandler]:
        return list(self._handlers.values())

    def list_ecosystems(self) -> list[Ecosystem]:
        return list(self._handlers)

    def routes(self) -> Iterator[tuple[Ecosystem, str, str, StepType]]:
        """Yield every ``(ecosystem, base_model, workflow, step_type)`` served."""
        for ecosystem, handler in self._handlers.items():
            for workflow, base_model, step_type in handler.routes():
                yield ecosystem, base_model, workflow, step_type

    def missing(self) -> list[Ecosystem]:
        return [ecosystem for ecosystem in Ecosystem if ecosystem not in self._handlers]

    def validate_coverage(self) -> None:
        """
        Check every ecosystem has a handler.

        Raises:
            ValueError: Listing the ecosystems without a handler
        """
        missing = self.missing()
        if missing:
            names = ", ".join(ecosystem.value for ecosystem in missing)
            logger.error(f"[ecosystem_registry] No handler for: {names}")
            raise ValueError(f"Ecosystems without a handler: {names}")

    def __contains__(self, ecosystem: object) -> bool:
        return self.get(ecosystem) is not None  # type: ignore[arg-type]

    def __len__(self) -> int:
        return len(self._handlers)

    def __repr__(self) -> str:
        return f"EcosystemRegistry({len(self)} handlers)"


def create_default_registry() -> EcosystemRegistry:
    """Registry with the built-in handler of every ecosystem."""
    registry = EcosystemRegistry((*IMAGE_HANDLERS, *VIDEO_HANDLERS))
    registry.validate_coverage()
    return registry


# Global registry instance
_global_registry: EcosystemRegistry | None = None


def get_registry() -> EcosystemRegistry:
    """Get the global ecosystem registry, building the default on first use."""
    global _global_registry
    if _global_registry is None:
        _global_registry = create_default_registry()
    return _global_registry


def set_registry(registry: EcosystemRegistry) -> None:
    """Set the global ecosystem registry (for testing)."""
    global _global_registry
    _global_registry = registry


def reset_registry() -> None:
    global _global_registry
    _global_registry = None


__all__ = [
    "EcosystemRegistry",
    "create_default_registry",
    "get_registry",
    "set_registry",
    "reset_registry",
]
