"""Group names, the `groups` option and group membership."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Iterable, Iterator

from avalanche.core.errors import UnknownGroup
from avalanche.core.modules import Configuration, mk_option

# Declares the `groups` option. It has no config of its own; the inventory
# reads it to decide which group fragments to apply.
GROUP_MODULE: dict[str, Any] = {
    "options": {
        "groups": mk_option(
            list[str],
            default=[],
            description="List of group of the host.",
        ),
    },
}


class GroupNames(Mapping[str, str]):
    """
    Identity table of declared group names.

    Lets fragments write `groups.backend` instead of the string "backend";
    an unknown name fails immediately instead of creating a group nobody
    declared.
    """

    def __init__(self, names: Iterable[str]) -> None:
        self._names = {name: name for name in names}

    def __getitem__(self, key: str) -> str:
        if key not in self._names:
            raise UnknownGroup(key)
        return self._names[key]

    def __getattr__(self, name: str) -> str:
        if name.startswith("_"):
            raise AttributeError(name)
        # UnknownGroup is an AttributeError, so hasattr() keeps working.
        return self[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __contains__(self, key: object) -> bool:
        return key in self._names

    def __repr__(self) -> str:
        return f"GroupNames({', '.join(self._names)})"


def group_names(groups: Mapping[str, Any]) -> GroupNames:
    """Build the name table for a mapping of group name -> fragment."""
    return GroupNames(groups)


def is_member(system: Configuration, group_name: str) -> bool:
    """Check if a configuration lists `group_name` in its `groups` option."""
    return group_name in system.config.groups


def members_of(systems: Mapping[str, Configuration], group_name: str) -> dict[str, Configuration]:
    """Filter `systems` down to the members of `group_name`."""
    return {key: system for key, system in systems.items() if is_member(system, group_name)}
