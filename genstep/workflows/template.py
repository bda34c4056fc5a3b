"""
Workflow template compiler.

Templates are JSON text with two placeholder grammars:

    "{{name}}"      text substitution inside a string literal
                    (brace spacing is tolerated: { { name } })
    "{{{name}}}"    raw substitution: the whole string literal is replaced
                    by the JSON value of params[name]

Bare ``{{name}}`` tokens outside string literals are treated as raw
substitutions as well, so that templates like ``"seed": {{seed}}`` keep
working.

Compilation parses first and substitutes on the parsed tree, so a value
containing quotes or braces can never corrupt the document.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping
from typing import Any

from genstep.errors import WorkflowCompilationError

logger = logging.getLogger(__name__)

_BARE_TOKEN = re.compile(r"\{\s*\{\s*(\w+)\s*\}\s*\}")
_RAW_LEAF = re.compile(r"\{\{\{(\w+)\}\}\}")
_INLINE_TOKEN = re.compile(r"\{\{\{(\w+)\}\}\}|\{\s*\{\s*(\w+)\s*\}\s*\}")


def _raw_sentinel(name: str) -> str:
    return "{{{" + name + "}}}"


def quote_bare_tokens(text: str) -> str:
    """Rewrite placeholder tokens found outside JSON strings to raw sentinels."""
    out: list[str] = []
    in_string = False
    i = 0
    n = len(text)

    while i < n:
        ch = text[i]
        if in_string:
            out.append(ch)
            if ch == "\\" and i + 1 < n:
                out.append(text[i + 1])
                i += 2
                continue
            if ch == '"':
                in_string = False
            i += 1
            continue

        if ch == '"':
            in_string = True
        elif ch == "{":
            match = _BARE_TOKEN.match(text, i)
            if match is not None:
                out.append(json.dumps(_raw_sentinel(match.group(1))))
                i = match.end()
                continue
        out.append(ch)
        i += 1

    return "".join(out)


def _json_copy(name: str, value: Any) -> Any:
    try:
        return json.loads(json.dumps(value))
    except (TypeError, ValueError) as e:
        raise WorkflowCompilationError(
            f"Parameter '{name}' is not JSON-serializable: {e}", param=name
        ) from e


def _as_text(name: str, value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    try:
        return json.dumps(value)
    except (TypeError, ValueError) as e:
        raise WorkflowCompilationError(
            f"Parameter '{name}' is not JSON-serializable: {e}", param=name
        ) from e


def _substitute_string(value: str, params: Mapping[str, Any]) -> Any:
    raw = _RAW_LEAF.fullmatch(value)
    if raw is not None:
        name = raw.group(1)
        if name not in params:
            raise WorkflowCompilationError(f"Missing template parameter: {name}", param=name)
        return _json_copy(name, params[name])

    def replace(match: re.Match[str]) -> str:
        name = match.group(1) or match.group(2)
        return _as_text(name, params.get(name))

    return _INLINE_TOKEN.sub(replace, value)


def _substitute(node: Any, params: Mapping[str, Any]) -> Any:
    if isinstance(node, dict):
        return {key: _substitute(item, params) for key, item in node.items()}
    if isinstance(node, list):
        return [_substitute(item, params) for item in node]
    if isinstance(node, str):
        return _substitute_string(node, params)
    return node


def compile_template(template: str | Mapping[str, Any], params: Mapping[str, Any]) -> dict[str, Any]:
    """
    Instantiate a workflow template.

    Args:
        template: JSON text (or an already parsed document)
        params: Placeholder values

    Returns:
        The concrete workflow graph

    Raises:
        WorkflowCompilationError: Invalid JSON, missing raw parameter, or a
            value that cannot be serialized
    """
    if isinstance(template, str):
        try:
            document = json.loads(quote_bare_tokens(template))
        except json.JSONDecodeError as e:
            raise WorkflowCompilationError(f"Template is not valid JSON: {e}") from e
    else:
        document = template

    if not isinstance(document, dict):
        raise WorkflowCompilationError(
            f"Template must be a JSON object, got {type(document).__name__}"
        )

    compiled = _substitute(document, params)
    logger.debug(f"[template] Compiled template with {len(compiled)} nodes")
    return compiled


__all__ = ["compile_template", "quote_bare_tokens"]
