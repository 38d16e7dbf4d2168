"""Core inventory resolution: lazy values, fragments, module engine and groups."""

from avalanche.core.errors import (
    AvalancheError,
    EmptyFqdn,
    MissingArgument,
    OptionConflict,
    OptionTypeError,
    UndefinedOption,
    UnknownGroup,
    UnresolvableCycle,
)
from avalanche.core.lazy import Lazy, LazyMapping, force, lazy
from avalanche.core.fragments import Computed, Fragment, Static, as_fragment, inject_special
from avalanche.core.modules import (
    ConfigView,
    Configuration,
    Option,
    evaluate,
    mk_default,
    mk_force,
    mk_if,
    mk_option,
    mk_override,
)
from avalanche.core.groups import GROUP_MODULE, GroupNames, group_names, is_member, members_of
from avalanche.core.schema import InventorySpec
from avalanche.core.inventory import Inventory, host_name_module, mk_inventory

__all__ = [
    "AvalancheError",
    "EmptyFqdn",
    "MissingArgument",
    "OptionConflict",
    "OptionTypeError",
    "UndefinedOption",
    "UnknownGroup",
    "UnresolvableCycle",
    "Lazy",
    "LazyMapping",
    "force",
    "lazy",
    "Computed",
    "Fragment",
    "Static",
    "as_fragment",
    "inject_special",
    "ConfigView",
    "Configuration",
    "Option",
    "evaluate",
    "mk_default",
    "mk_force",
    "mk_if",
    "mk_option",
    "mk_override",
    "GROUP_MODULE",
    "GroupNames",
    "group_names",
    "is_member",
    "members_of",
    "InventorySpec",
    "Inventory",
    "host_name_module",
    "mk_inventory",
]
