"""
Inventory resolution.

Every host is first evaluated into a base system from its hostname module,
the overlays, the group declaration module, its own fragment and the
default modules. The groups listed in the base system's `groups` option
are then layered on top, in list order, to give the final system.

Fragments see `hosts` (the final systems) and `groups_members` (final
systems per group) while those are still being built. Both are lazy
mappings: a value is computed the first time it is read and cached, and a
value that needs itself raises `UnresolvableCycle`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from functools import reduce
from typing import Any, Iterator, Sequence

from avalanche.core.errors import UnknownGroup
from avalanche.core.fragments import Fragment, inject_special
from avalanche.core.groups import GROUP_MODULE, group_names, members_of
from avalanche.core.lazy import DeferredMapping, Lazy, LazyMapping
from avalanche.core.modules import Configuration, evaluate
from avalanche.core.schema import InventorySpec
from avalanche.naming.fqdn import parse

logger = logging.getLogger(__name__)


def host_name_module(fqdn: str) -> dict[str, Any]:
    """
    Module setting `networking.hostName` and `networking.domain` from a name.

    Examples:
        host_name_module("host1.example.com")
        # {"networking": {"hostName": "host1", "domain": "example.com"}}
        host_name_module("host1")
        # {"networking": {"hostName": "host1", "domain": None}}
    """
    info = parse(fqdn)
    return {"networking": {"hostName": info.hostname, "domain": info.domain}}


def overlays_module(overlays: Sequence[Any]) -> dict[str, Any]:
    """Module passing the inventory overlays through to every host."""
    return {"overlays": list(overlays)}


class Inventory(Mapping[str, Configuration]):
    """
    Final configuration of every host, keyed like the `hosts` argument.

    Final systems are built on first access and cached.
    """

    def __init__(self, spec: InventorySpec) -> None:
        self.spec = spec
        self.group_names = group_names(spec.groups)
        self.groups_members: LazyMapping[dict[str, Configuration]] = LazyMapping(
            self.group_names, self._members, "groups_members"
        )
        self._final: LazyMapping[Configuration] = LazyMapping(
            spec.hosts, self._apply_groups, "hosts"
        )
        self.base_systems: dict[str, Configuration] = {
            key: self._mk_base_system(key, fragment) for key, fragment in spec.hosts.items()
        }

    def _special_args(self) -> dict[str, Any]:
        # extra_args win over every built-in name
        return {
            "groups": self.group_names,
            "groups_members": self.groups_members,
            "hosts": self._final,
            **self.spec.extra_args,
        }

    def _mk_base_system(self, fqdn: str, fragment: Fragment) -> Configuration:
        logger.debug("Building base system for %s", fqdn)
        return evaluate(
            [
                host_name_module(fqdn),
                overlays_module(self.spec.overlays),
                GROUP_MODULE,
                fragment,
                *self.spec.default_modules,
            ],
            self._special_args(),
            name=fqdn,
        )

    def declared_groups(self, key: str) -> list[str]:
        """Groups of a host as listed by its base system."""
        return list(self.base_systems[key].config.groups)

    def _apply_group(self, system: Configuration, group_name: str) -> Configuration:
        if group_name not in self.spec.groups:
            raise UnknownGroup(group_name, system.name)
        logger.debug("Applying group %s to %s", group_name, system.name)
        members = DeferredMapping(
            Lazy(lambda: self.groups_members[group_name], f"members of {group_name}")
        )
        # Bound to this group's fragment only: the other fragments of the
        # host are evaluated again under the extended context.
        own_args = {"group_name": group_name, "members": members, **self.spec.extra_args}
        return system.extend([inject_special(own_args, self.spec.groups[group_name])])

    def _apply_groups(self, key: str) -> Configuration:
        return reduce(self._apply_group, self.declared_groups(key), self.base_systems[key])

    def _members(self, group_name: str) -> dict[str, Configuration]:
        # Membership follows the groups declared by the base systems, which
        # are also the groups applied to each host.
        keys = members_of(self.base_systems, group_name)
        logger.debug("Group %s has %d members", group_name, len(keys))
        return {key: self._final[key] for key in keys}

    def check_groups(self) -> None:
        """Raise `UnknownGroup` if any host lists a group that is not declared."""
        for key in self.base_systems:
            for group_name in self.declared_groups(key):
                if group_name not in self.spec.groups:
                    raise UnknownGroup(group_name, key)

    def evaluate(self) -> dict[str, dict[str, Any]]:
        """Force every host's complete configuration into plain data."""
        return {key: system.config.to_dict() for key, system in self.items()}

    def __getitem__(self, key: str) -> Configuration:
        return self._final[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._final)

    def __len__(self) -> int:
        return len(self._final)

    def __contains__(self, key: object) -> bool:
        return key in self._final

    def __repr__(self) -> str:
        return f"Inventory({len(self)} hosts, {len(self.group_names)} groups)"


def mk_inventory(**options: Any) -> Inventory:
    """
    Resolve every host of an inventory.

    Options:
        hosts: Mapping of host name (or FQDN) to fragment
        groups: Mapping of group name to fragment
        default_modules: Fragments applied to every host after its own
        extra_args: Extra special arguments, overriding the built-in ones
        overlays: Forwarded as the `overlays` option of every host

    Examples:
        inventory = mk_inventory(
            groups={"web": {"services": {"nginx": {"enable": True}}}},
            hosts={"web01.example.com": lambda groups: {"groups": [groups.web]}},
        )
        inventory["web01.example.com"].config.services.nginx.enable  # True

    Fragment functions run when a host's modules are collected, before any
    of its options can be read. A fragment that reads the configuration of
    a host it may itself be applied to (through `members`, `groups_members`
    or `hosts`) must wrap that read in `lazy(...)`; otherwise the host
    needs its own options to build them and `UnresolvableCycle` is raised:

        def reverse_proxy(members, **_):
            return {
                "servers": lazy(lambda: {m.config.ip: {} for m in members.values()}),
            }
    """
    inventory = Inventory(InventorySpec.model_validate(options))
    inventory.check_groups()
    return inventory
