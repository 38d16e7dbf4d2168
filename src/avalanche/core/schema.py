"""Pydantic schema for inventory definitions."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import replace
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from avalanche.core.fragments import as_fragment


def _coerce_fragment(value: Any, name: str | None = None) -> Any:
    try:
        fragment = as_fragment(value, name=name)
    except TypeError as e:
        # pydantic only reports ValueError as a validation failure
        raise ValueError(str(e)) from e
    if name is not None and fragment.name is None:
        fragment = replace(fragment, name=name)
    return fragment


class InventorySpec(BaseModel):
    """
    Arguments of `mk_inventory`.

    Host and group values are fragments: a mapping, or a function of the
    special arguments returning one. Both are stored as `Static` or
    `Computed` fragments.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True, extra="forbid")

    hosts: dict[str, Any] = Field(default_factory=dict)
    groups: dict[str, Any] = Field(default_factory=dict)
    default_modules: list[Any] = Field(default_factory=list)
    extra_args: dict[str, Any] = Field(default_factory=dict)
    overlays: list[Any] = Field(default_factory=list)

    @field_validator("hosts", "groups", mode="before")
    @classmethod
    def coerce_named_fragments(cls, v: Any) -> dict[str, Any]:
        """Turn every value into a fragment named after its key."""
        if not isinstance(v, Mapping):
            raise ValueError(f"expected a mapping of name to fragment, got {type(v).__name__}")
        return {key: _coerce_fragment(fragment, name=str(key)) for key, fragment in v.items()}

    @field_validator("default_modules", mode="before")
    @classmethod
    def coerce_fragments(cls, v: Any) -> list[Any]:
        if isinstance(v, (str, bytes, Mapping)) or callable(v):
            raise ValueError("default_modules must be a list of fragments")
        return [_coerce_fragment(fragment) for fragment in v]
