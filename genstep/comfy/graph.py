"""
Resource graph rewriter.

A comfy workflow graph maps node ids to nodes::

    {"4": {"class_type": "CheckpointLoaderSimple", "inputs": {"ckpt_name": "..."}},
     "3": {"class_type": "KSampler", "inputs": {"model": ["4", 0], ...}}}

Edges live inside ``inputs`` as ``[node_id, output_slot]`` pairs.

apply_resources() splices requested resources into such a graph:

1. A child index (node id -> consumers) is built once, local to the call.
2. Resources are synthesized into a loader stack: the checkpoint becomes the
   head (``resource-stack``), each LoRA is chained onto the current tail
   (``resource-stack-1``, ``resource-stack-2``, ...). Embeddings are textual
   substitutions on string inputs; upscalers set the upscale-model loaders.
3. Every consumer reachable from an original checkpoint loader is
   retargeted. Pass-through loaders (LoraLoader) on the way are dropped and
   their consumers followed; ``vae`` inputs bind to the head, everything
   else binds to the tail.
4. Replaced loaders are deleted.

The graph is mutated in place. Templates without a checkpoint loader do not
support checkpoint/LoRA injection; those resources are skipped.
"""

from __future__ import annotations

import logging
import re
from collections import deque
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from genstep.air import parse_air_safe

logger = logging.getLogger(__name__)

WorkflowGraph = dict[str, dict[str, Any]]
ChildIndex = dict[str, list[tuple[str, str]]]

CHECKPOINT_LOADERS = frozenset({"CheckpointLoaderSimple"})
UPSCALE_MODEL_LOADERS = frozenset({"UpscaleModelLoader"})
PASS_THROUGH_LOADERS = frozenset({"LoraLoader"})

LORA_TYPES = frozenset({"lora", "dora", "lycoris", "locon"})
EMBEDDING_TYPES = frozenset({"embedding", "textualinversion"})

STACK_HEAD_ID = "resource-stack"


@dataclass(frozen=True)
class ResourceToApply:
    """A resource to splice into a workflow graph, in chain order."""

    air: str
    trigger_word: str | None = None
    strength: float | None = None

    @property
    def resource_type(self) -> str | None:
        parsed = parse_air_safe(self.air)
        return parsed.resource_type if parsed is not None else None


def is_edge(value: Any) -> bool:
    """True for ``[node_id, slot]`` input references."""
    return (
        isinstance(value, (list, tuple))
        and len(value) == 2
        and isinstance(value[0], str)
        and isinstance(value[1], int)
        and not isinstance(value[1], bool)
    )


def build_child_index(graph: WorkflowGraph) -> ChildIndex:
    """Map each referenced node id to the ``(consumer_id, input_key)`` pairs using it."""
    index: ChildIndex = {}
    for node_id, node in graph.items():
        for input_key, value in node.get("inputs", {}).items():
            if is_edge(value) and value[0] in graph:
                index.setdefault(value[0], []).append((node_id, input_key))
    return index


def _stack_id(position: int) -> str:
    return STACK_HEAD_ID if position == 0 else f"{STACK_HEAD_ID}-{position}"


def _apply_embedding(graph: WorkflowGraph, resource: ResourceToApply) -> None:
    if not resource.trigger_word:
        logger.warning(f"[graph] Skipping embedding without trigger word: {resource.air}")
        return

    pattern = re.compile(rf"\b{re.escape(resource.trigger_word)}\b", re.IGNORECASE)
    replacement = f"embedding:{resource.air}"
    for node in graph.values():
        inputs = node.get("inputs", {})
        for input_key, value in inputs.items():
            if isinstance(value, str) and pattern.search(value):
                inputs[input_key] = pattern.sub(lambda _: replacement, value)


def apply_resources(graph: WorkflowGraph, resources: Sequence[ResourceToApply]) -> None:
    """
    Splice resources into a compiled workflow graph, in place.

    Args:
        graph: Compiled workflow graph, owned by the caller's request
        resources: Resources in chain order
    """
    children = build_child_index(graph)
    checkpoint_loaders = [
        node_id for node_id, node in graph.items() if node.get("class_type") in CHECKPOINT_LOADERS
    ]
    upscale_loaders = [
        node_id for node_id, node in graph.items() if node.get("class_type") in UPSCALE_MODEL_LOADERS
    ]
    needs_resources = bool(checkpoint_loaders)

    checkpoint: ResourceToApply | None = None
    loras: list[ResourceToApply] = []

    for resource in resources:
        resource_type = resource.resource_type
        if resource_type == "checkpoint" or resource_type in LORA_TYPES:
            if not needs_resources:
                logger.warning(
                    f"[graph] Workflow has no checkpoint loader, skipping {resource.air}"
                )
            elif resource_type == "checkpoint":
                checkpoint = resource
            else:
                loras.append(resource)
        elif resource_type in EMBEDDING_TYPES:
            _apply_embedding(graph, resource)
        elif resource_type == "upscaler":
            for node_id in upscale_loaders:
                graph[node_id]["inputs"]["model_name"] = resource.air
        else:
            logger.warning(f"[graph] Unsupported resource type {resource_type!r}: {resource.air}")

    if checkpoint is None and not loras:
        return

    # Build the loader stack. Without a checkpoint resource the first
    # original loader stays in the graph as the head.
    synthesized: WorkflowGraph = {}
    if checkpoint is not None:
        head = STACK_HEAD_ID
        synthesized[head] = {
            "class_type": "CheckpointLoaderSimple",
            "inputs": {"ckpt_name": checkpoint.air},
        }
    else:
        head = checkpoint_loaders[0]

    tail = head
    for position, lora in enumerate(loras, start=1):
        node_id = _stack_id(position)
        synthesized[node_id] = {
            "class_type": "LoraLoader",
            "inputs": {
                "lora_name": lora.air,
                "strength_model": lora.strength if lora.strength is not None else 1,
                "strength_clip": 1,
                "model": [tail, 0],
                "clip": [tail, 1],
            },
        }
        tail = node_id

    removed = {node_id for node_id in checkpoint_loaders if node_id != head}

    for loader_id in checkpoint_loaders:
        queue = deque(children.get(loader_id, ()))
        seen: set[tuple[str, str]] = set()
        while queue:
            edge = queue.popleft()
            if edge in seen:
                continue
            seen.add(edge)

            child_id, input_key = edge
            child = graph[child_id]
            if child.get("class_type") in PASS_THROUGH_LOADERS:
                removed.add(child_id)
                queue.extend(children.get(child_id, ()))
                continue

            slot = child["inputs"][input_key][1]
            target = head if input_key == "vae" else tail
            child["inputs"][input_key] = [target, slot]
            logger.debug(f"[graph] Retargeted {child_id}.{input_key} -> {target}")

    for node_id in removed:
        del graph[node_id]
    graph.update(synthesized)

    logger.debug(
        f"[graph] Applied {len(synthesized)} loader nodes, removed {len(removed)} "
        f"(head={head}, tail={tail})"
    )


__all__ = [
    "WorkflowGraph",
    "ResourceToApply",
    "CHECKPOINT_LOADERS",
    "UPSCALE_MODEL_LOADERS",
    "PASS_THROUGH_LOADERS",
    "is_edge",
    "build_child_index",
    "apply_resources",
]
