"""
Routing primitives for step compilation.

A Switch extracts a string key from the request and hands it to the
matching branch, or to its default. Every choice is recorded as a
RoutingDecision and logged at debug so a compiled step can be traced back
to the branch that produced it.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from .errors import UnsupportedWorkflowError

logger = logging.getLogger(__name__)


# =============================================================================
# Exceptions
# =============================================================================


class RoutingError(UnsupportedWorkflowError):
    """Raised when a router has no branch for a key."""

    def __init__(self, router_name: str, message: str, **kwargs: Any):
        self.router_name = router_name
        super().__init__(f"[{router_name}] {message}", **kwargs)


# =============================================================================
# Routing Decision Tracking
# =============================================================================


@dataclass(frozen=True)
class RoutingDecision:
    """One routing choice, kept for debugging and audit."""

    timestamp: datetime
    router_name: str
    selected_branch: str
    evaluated_condition: str | None = None
    all_branches: tuple[str, ...] = ()
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "router_name": self.router_name,
            "selected_branch": self.selected_branch,
            "evaluated_condition": self.evaluated_condition,
            "all_branches": list(self.all_branches),
            "metadata": self.metadata,
        }


def record_decision(
    decisions: list[RoutingDecision] | None,
    router_name: str,
    selected_branch: str,
    *,
    condition: str | None = None,
    all_branches: Sequence[str] = (),
    metadata: dict[str, Any] | None = None,
) -> RoutingDecision:
    """Build a decision, append it to ``decisions`` when given, and log it."""
    decision = RoutingDecision(
        timestamp=datetime.now(timezone.utc),
        router_name=router_name,
        selected_branch=selected_branch,
        evaluated_condition=condition,
        all_branches=tuple(all_branches),
        metadata=metadata or {},
    )
    if decisions is not None:
        decisions.append(decision)

    logger.debug(f"[router] {router_name} -> {selected_branch} ({condition})")
    return decision


# =============================================================================
# Switch Router (Multi-way Branching)
# =============================================================================

# Branch: (subject, *args) -> result, sync or async
Branch = Callable[..., Any]
KeyExtractor = Callable[[Any], str]


async def call_branch(branch: Branch, subject: Any, *args: Any) -> Any:
    """Call a branch, awaiting its result when it is awaitable."""
    result = branch(subject, *args)
    if inspect.isawaitable(result):
        return await result
    return result


@dataclass
class Switch:
    """
    Multi-way branching based on a key.

    Example:
        router = Switch(
            key=lambda ctx: ctx.workflow,
            cases={
                "vid2vid:interpolate": build_interpolation,
                "vid2vid:upscale": build_video_upscale,
            },
            default=dispatch_ecosystem,
            key_name="workflow",
        )
        step = await router.route(ctx, handler_ctx)

    Args:
        key: Function that extracts a string key from the subject
        cases: Mapping from key values to branches
        default: Optional fallback when the key matches no case
        key_name: Name used in logs and decisions
    """

    key: KeyExtractor
    cases: dict[str, Branch]
    default: Branch | None = None
    key_name: str = "key"

    @property
    def name(self) -> str:
        return f"Switch({self.key_name})"

    def select(
        self, subject: Any, decisions: list[RoutingDecision] | None = None
    ) -> Branch:
        """
        Pick the branch for a subject.

        Raises:
            RoutingError: No case for the key and no default
        """
        key_value = self.key(subject)
        selected = key_value if key_value in self.cases else "default"
        record_decision(
            decisions,
            self.name,
            selected,
            condition=f"{self.key_name} = '{key_value}'",
            all_branches=tuple(self.cases) + (("default",) if self.default else ()),
        )

        branch = self.cases.get(key_value)
        if branch is not None:
            return branch
        if self.default is not None:
            return self.default

        logger.error(f"[router] {self.name} has no case for '{key_value}'")
        raise RoutingError(
            router_name=self.name,
            message=f"No case for {self.key_name} '{key_value}' and no default provided",
        )

    async def route(
        self,
        subject: Any,
        *args: Any,
        decisions: list[RoutingDecision] | None = None,
    ) -> Any:
        branch = self.select(subject, decisions)
        return await call_branch(branch, subject, *args)


__all__ = [
    "RoutingError",
    "RoutingDecision",
    "record_decision",
    "Branch",
    "call_branch",
    "Switch",
]
