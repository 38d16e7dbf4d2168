"""Rendering resolved configurations as YAML or JSON."""

from __future__ import annotations

import json
from collections.abc import Mapping, Set
from typing import Any

import yaml

from avalanche.core.modules import Configuration, ConfigView


def to_plain(value: Any) -> Any:
    """Convert resolved values into data YAML and JSON can represent."""
    if isinstance(value, ConfigView):
        value = value.to_dict()
    if isinstance(value, Configuration):
        return f"<configuration {value.name}>"
    if isinstance(value, Mapping):
        return {str(k): to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    if isinstance(value, Set):
        return sorted((to_plain(v) for v in value), key=repr)
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return repr(value)


def render(data: Any, output_format: str) -> str:
    """Serialize `data` in the given format (yaml or json)."""
    plain = to_plain(data)
    if output_format == "json":
        return json.dumps(plain, indent=2)
    return yaml.safe_dump(plain, sort_keys=False, default_flow_style=False).rstrip("\n")
